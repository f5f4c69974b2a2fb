"""Thompson Sampling for Bernoulli (Beta-distributed) coins."""
from __future__ import annotations

from typing import Any

import numpy as np

from coinflip_core.arms import ArmSet
from coinflip_core.state import ThompsonState
from coinflip_core.strategies.base import BaseStrategy


class ThompsonSamplingStrategy(BaseStrategy):
    """Beta-Bernoulli Thompson Sampling.

    Each arm maintains ``a`` (successes + 1) and ``b`` (failures + 1)
    parameters for a Beta distribution.  At decision time a sample is drawn
    from each arm's posterior and the arm with the highest sample wins;
    on equal samples the lower index is kept.
    """

    name = "thompson"
    label = "Thompson Strategy"

    # -- state layout ---------------------------------------------------------

    def initial_state(self, arm_count: int, **kwargs: Any) -> ThompsonState:
        return ThompsonState(arm_count)

    # -- core API -------------------------------------------------------------

    def choose_arm(self, arm_set: ArmSet, rng: np.random.Generator) -> int:
        best_arm = 0
        best_sample = 0.0

        for arm, sample in enumerate(self.state.sample(rng)):
            if sample > best_sample:
                best_sample = sample
                best_arm = arm

        return best_arm
