"""Explore-then-commit ("naive") strategy."""

from __future__ import annotations

from typing import Any

import numpy as np

from coinflip_core.arms import ArmSet
from coinflip_core.state import EXPLORATION_TRIALS, NaiveState
from coinflip_core.strategies.base import BaseStrategy


class NaiveStrategy(BaseStrategy):
    """Flip uniformly random coins for ``exploration_trials`` steps, then
    flip the empirically best coin forever.

    The commitment is permanent: later evidence against ``best_coin`` is
    recorded but never acted upon.
    """

    name = "naive"
    label = "Naive Strategy"

    def __init__(
        self,
        arm_count: int,
        *,
        exploration_trials: int = EXPLORATION_TRIALS,
        **kwargs: Any,
    ) -> None:
        super().__init__(arm_count, exploration_trials=exploration_trials, **kwargs)

    # -- state layout ---------------------------------------------------------

    def initial_state(self, arm_count: int, **kwargs: Any) -> NaiveState:
        return NaiveState(
            arm_count,
            exploration_trials=kwargs.get("exploration_trials", EXPLORATION_TRIALS),
        )

    @property
    def best_coin(self) -> int | None:
        return self.state.best_coin

    # -- core API -------------------------------------------------------------

    def choose_arm(self, arm_set: ArmSet, rng: np.random.Generator) -> int:
        # Explore
        if self.state.best_coin is None and self.state.is_exploring():
            return int(rng.integers(0, arm_set.arm_count()))

        # Exploit; commit() only computes best_coin the first time
        return self.state.commit()
