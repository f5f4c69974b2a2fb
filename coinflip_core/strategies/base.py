"""Abstract base class shared by every coin-flipping strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from coinflip_core.arms import ArmSet
from coinflip_core.outcomes import FlipHistory, FlipOutcome, History


class BaseStrategy(ABC):
    """Common interface for all bandit strategies playing the coin game.

    A strategy owns its statistics (``state``) and its own flip history.
    Nothing outside the strategy mutates either: the only way in is
    :meth:`choose_and_flip`.
    """

    name: str = "base"  # key used in dumps, overridden by subclasses
    label: str = "Base Strategy"  # human-friendly label

    def __init__(self, arm_count: int, **kwargs: Any) -> None:
        self.state = self.initial_state(arm_count, **kwargs)
        self._history = FlipHistory()

    # ---- abstract API -------------------------------------------------------

    @abstractmethod
    def initial_state(self, arm_count: int, **kwargs: Any) -> Any:
        """Return a fresh statistics object (see :mod:`coinflip_core.state`)."""

    @abstractmethod
    def choose_arm(self, arm_set: ArmSet, rng: np.random.Generator) -> int:
        """Pick the arm to flip next.

        May consume randomness from ``rng`` and may advance internal phase
        (e.g. Naive's one-off commitment), but never records an outcome.
        """

    # ---- convenience --------------------------------------------------------

    @property
    def history(self) -> History:
        return self._history.snapshot()

    @property
    def steps(self) -> int:
        return len(self._history)

    def choose_and_flip(self, arm_set: ArmSet, rng: np.random.Generator) -> FlipOutcome:
        """Choose an arm, flip it, and record the outcome."""
        arm = self.choose_arm(arm_set, rng)
        outcome = FlipOutcome(arm, arm_set.sample(arm, rng))
        self.state.apply(outcome)
        self._history.append(outcome)
        return outcome

    def __repr__(self) -> str:
        return f"{type(self).__name__}(steps={self.steps})"
