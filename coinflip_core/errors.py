"""Exception types raised by the coin-flip bandit engine."""

from __future__ import annotations


class CoinflipError(Exception):
    """Base class for every error raised by ``coinflip_core``."""


class ConfigurationError(CoinflipError, ValueError):
    """Invalid arm probabilities or engine parameters.

    Raised at construction time so a coordinator never starts with a bad
    arm set.
    """


class InvalidArmError(CoinflipError, ValueError):
    """An arm index outside ``[0, arm_count)`` was supplied by a caller."""


class HistoryCorruptionError(CoinflipError, ValueError):
    """A recorded history cannot be replayed (bad arm index or entry)."""


class PosteriorInvariantError(CoinflipError, AssertionError):
    """A Beta posterior was built with a non-positive shape parameter.

    The update rule only ever increments ``a`` and ``b`` from ``(1, 1)``, so
    seeing this means the update logic itself is broken.
    """
