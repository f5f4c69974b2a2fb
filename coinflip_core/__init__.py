"""coinflip_core – bandit strategies playing a coin-flip game, plus replay."""
from coinflip_core.arms import ArmSet
from coinflip_core.coordinator import BanditCoordinator, StrategyView, TickResult
from coinflip_core.dump import Dump, load_dump, save_dump
from coinflip_core.errors import (
    CoinflipError,
    ConfigurationError,
    HistoryCorruptionError,
    InvalidArmError,
    PosteriorInvariantError,
)
from coinflip_core.history.base import HistoryStore
from coinflip_core.history.memory import InMemoryHistoryStore
from coinflip_core.outcomes import FlipHistory, FlipOutcome
from coinflip_core.replay import ReplayEngine, ReplayResult, ReplaySnapshot
from coinflip_core.state import EXPLORATION_TRIALS, PDF_RESOLUTION
from coinflip_core.strategies.base import BaseStrategy
from coinflip_core.strategies.naive import NaiveStrategy
from coinflip_core.strategies.thompson import ThompsonSamplingStrategy
from coinflip_core.strategies.ucb import UCBStrategy

__all__ = [
    "EXPLORATION_TRIALS",
    "PDF_RESOLUTION",
    "ArmSet",
    "BanditCoordinator",
    "BaseStrategy",
    "CoinflipError",
    "ConfigurationError",
    "Dump",
    "FlipHistory",
    "FlipOutcome",
    "HistoryCorruptionError",
    "HistoryStore",
    "InMemoryHistoryStore",
    "InvalidArmError",
    "NaiveStrategy",
    "PosteriorInvariantError",
    "ReplayEngine",
    "ReplayResult",
    "ReplaySnapshot",
    "StrategyView",
    "ThompsonSamplingStrategy",
    "TickResult",
    "UCBStrategy",
    "load_dump",
    "save_dump",
]
