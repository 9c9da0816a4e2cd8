#!/usr/bin/env python3
"""
Train the greedy perceptron tagger on a word/TAG corpus.

Each non-empty line of the corpus is one sentence of whitespace separated
word/TAG tokens (the tag is whatever follows the last slash).

Usage:
    python scripts/train_tagger.py --train train.txt --output tagger.model
    python scripts/train_tagger.py --train train.txt --eval dev.txt --iterations 5

The trained weights are written to --output; the tagset is rebuilt from the
training corpus when the model is used again.
"""
import argparse
import itertools
from pathlib import Path
from typing import Iterator, List

from loguru import logger

from structperc import InstanceChannel, LinearPerceptron, strategy_for
from structperc.config import CHANNEL_MAXSIZE, DEFAULT_STRATEGY, LOG_LEVEL
from structperc.log import configure_logging
from structperc.tagging import EarlyUpdateTagDecoder, GreedyTagDecoder, TagFeatures, tagged


def read_corpus(path: Path) -> Iterator:
    """Yield gold decoded sentences from a word/TAG file."""
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            tokens = line.split()
            if not tokens:
                continue
            words, tags = [], []
            for token in tokens:
                word, sep, tag = token.rpartition("/")
                if not sep or not word or not tag:
                    raise SystemExit(f"{path}:{lineno}: malformed token {token!r}")
                words.append(word)
                tags.append(tag)
            yield tagged(words, tags)


def evaluate(model: LinearPerceptron, decoder: GreedyTagDecoder, gold: List) -> float:
    """Token-level tagging accuracy."""
    correct = total = 0
    for sentence in gold:
        predicted = decoder.decode(sentence.instance, model)
        correct += sum(p == g for p, g in zip(predicted.decoded, sentence.decoded))
        total += len(sentence.decoded)
    return correct / total if total else 0.0


def main():
    parser = argparse.ArgumentParser(description="Train a greedy perceptron tagger.")
    parser.add_argument("--train", type=Path, required=True, help="word/TAG training corpus")
    parser.add_argument("--eval", type=Path, default=None, help="Optional word/TAG evaluation corpus")
    parser.add_argument("--output", type=Path, default=Path("tagger.model"), help="Where to write the weights")
    parser.add_argument("--strategy", choices=["trivial", "averaged"], default=DEFAULT_STRATEGY)
    parser.add_argument("--iterations", type=int, default=1, help="Passes over the training corpus")
    parser.add_argument("--early-update", action="store_true", help="Stop decoding at the first wrong tag")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args()

    configure_logging(args.log_level)

    if not args.train.is_file():
        raise SystemExit(f"Training corpus not found: {args.train}")
    if args.iterations < 1:
        raise SystemExit("iterations must be >= 1")

    tagset = sorted({tag for sentence in read_corpus(args.train) for tag in sentence.decoded})
    logger.info("Tagset: {}", " ".join(tagset))

    decoder_cls = EarlyUpdateTagDecoder if args.early_update else GreedyTagDecoder
    decoder = decoder_cls(tagset)
    model = LinearPerceptron(decoder, iterations=args.iterations)
    model.init(TagFeatures(tagset), strategy_for(args.strategy))

    # All passes go through one train() call so the averaged strategy sees
    # every snapshot of the run.
    passes = itertools.chain.from_iterable(
        read_corpus(args.train) for _ in range(args.iterations)
    )
    result = model.train(InstanceChannel(passes, maxsize=CHANNEL_MAXSIZE), show_progress=args.progress)
    print(f"Trained on {result.instances} sentences, {result.mistakes} mistakes.")

    model.save(args.output)
    print(f"Wrote {len(model.weights)} weights to {args.output}.")

    if args.eval is not None:
        accuracy = evaluate(model, GreedyTagDecoder(tagset), list(read_corpus(args.eval)))
        print(f"Evaluation accuracy: {accuracy:.4f}")


if __name__ == "__main__":
    main()
