"""
A small greedy part-of-speech style tagger built on the perceptron engine.

It supplies the two collaborators the trainer needs: a feature extractor
over (sentence, tags) pairs and a left-to-right greedy decoder. Tags are
chosen one position at a time, so a tag prefix is a valid partial output and
the decoder can also report early updates.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .types import Decoded, Decoder, EarlyUpdate, EarlyUpdateDecoder, FeatureExtractor

START = "<s>"


@dataclass(frozen=True)
class Sentence:
    words: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.words)


def tagged(words: Sequence[str], tags: Sequence[str]) -> Decoded:
    """Build a gold decoded instance from parallel word and tag sequences."""
    if len(words) != len(tags):
        raise ValueError(f"{len(words)} words but {len(tags)} tags")
    return Decoded(Sentence(tuple(words)), tuple(tags))


class TagFeatures(FeatureExtractor):
    """
    Features for a tagged sentence (or a tagged prefix of one).

    For position i with tag t:
        ("w", word, t), ("suf", last two letters, t), ("t", previous tag, t)
    """

    def __init__(self, tagset: Sequence[str], estimated_features: int = 0):
        self.tagset = tuple(tagset)
        self.estimated_features = estimated_features

    def features(self, instance: Decoded) -> List[tuple]:
        words = instance.instance.words
        feats = []
        prev = START
        for word, tag in zip(words, instance.decoded):
            feats.append(("w", word.lower(), tag))
            feats.append(("suf", word[-2:].lower(), tag))
            feats.append(("t", prev, tag))
            prev = tag
        return feats

    def estimated_feature_count(self) -> int:
        return self.estimated_features


class GreedyTagDecoder(Decoder):
    """
    Picks the best-scoring tag at each position given the tags already chosen.

    Ties go to the tag listed first in the tagset, so decoding is
    deterministic for fixed weights.
    """

    def __init__(self, tagset: Sequence[str]):
        self.tagset = tuple(tagset)

    def _best_tag(self, sentence: Sentence, prefix: List[str], scorer) -> str:
        scores = np.array([
            scorer.score(Decoded(sentence, tuple(prefix + [tag])))
            for tag in self.tagset
        ])
        return self.tagset[int(np.argmax(scores))]

    def decode(self, instance: Sentence, scorer) -> Decoded:
        tags: List[str] = []
        for _ in range(len(instance)):
            tags.append(self._best_tag(instance, tags, scorer))
        return Decoded(instance, tuple(tags))


class EarlyUpdateTagDecoder(GreedyTagDecoder, EarlyUpdateDecoder):
    """Greedy decoder that stops at the first wrong tag during training."""

    def decode_early_update(self, gold: Decoded, scorer) -> EarlyUpdate:
        """
        Decode until the first wrong tag and report features of both
        prefixes up to and including that position.
        """
        sentence = gold.instance
        extractor = scorer.extractor
        tags: List[str] = []
        for i, gold_tag in enumerate(gold.decoded):
            tag = self._best_tag(sentence, tags, scorer)
            tags.append(tag)
            if tag != gold_tag:
                decoded = Decoded(sentence, tuple(tags))
                gold_prefix = Decoded(sentence, tuple(gold.decoded[:i + 1]))
                return EarlyUpdate(
                    decoded=decoded,
                    decoded_features=extractor.features(decoded),
                    gold_features=extractor.features(gold_prefix),
                    early_updated_at=i,
                    gold_size=len(sentence),
                    score=scorer.score(decoded),
                )

        decoded = Decoded(sentence, tuple(tags))
        features = extractor.features(decoded)
        return EarlyUpdate(
            decoded=decoded,
            decoded_features=features,
            gold_features=features,
            gold_size=len(sentence),
            score=scorer.score(decoded),
        )
