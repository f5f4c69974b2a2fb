"""Strategy implementations."""

from typing import List

from coinflip_core.state import EXPLORATION_TRIALS
from coinflip_core.strategies.base import BaseStrategy
from coinflip_core.strategies.naive import NaiveStrategy
from coinflip_core.strategies.thompson import ThompsonSamplingStrategy
from coinflip_core.strategies.ucb import UCBStrategy

# tick order; the coordinator's shared RNG is consumed in this order
STRATEGY_CLASSES = (NaiveStrategy, UCBStrategy, ThompsonSamplingStrategy)


def build_strategies(
    arm_count: int, *, exploration_trials: int = EXPLORATION_TRIALS
) -> List[BaseStrategy]:
    """Instantiate one of each strategy, in tick order."""
    return [
        NaiveStrategy(arm_count, exploration_trials=exploration_trials),
        UCBStrategy(arm_count),
        ThompsonSamplingStrategy(arm_count),
    ]


__all__ = [
    "STRATEGY_CLASSES",
    "BaseStrategy",
    "NaiveStrategy",
    "ThompsonSamplingStrategy",
    "UCBStrategy",
    "build_strategies",
]
