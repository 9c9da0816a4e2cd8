"""
Update strategies for the perceptron trainer.
"""
from .base import UpdateStrategy
from .averaging import TrivialStrategy, AveragedStrategy

STRATEGIES = {
    TrivialStrategy.name: TrivialStrategy,
    AveragedStrategy.name: AveragedStrategy,
}


def strategy_for(name: str) -> UpdateStrategy:
    """Build a fresh strategy by name ("trivial" or "averaged")."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown update strategy: {name}") from None


__all__ = ["UpdateStrategy", "TrivialStrategy", "AveragedStrategy", "STRATEGIES", "strategy_for"]
