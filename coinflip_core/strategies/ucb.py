"""UCB (Upper Confidence Bound) strategy."""
from __future__ import annotations

from typing import Any

import numpy as np

from coinflip_core.arms import ArmSet
from coinflip_core.state import UcbState
from coinflip_core.strategies.base import BaseStrategy


class UCBStrategy(BaseStrategy):
    r"""UCB without a warm-up phase.

    At each step the arm with the highest index is chosen:

    .. math::

        \text{UCB}_i = \bar{x}_i + \sqrt{\frac{2 \log_{10} t}{n_i}}

    where :math:`n_i` is the pull count of arm *i* and *t* the total number
    of flips.  An arm with :math:`n_i = 0` has an undefined (NaN) index,
    which outranks every real index, so each coin gets tried before any
    coin is exploited.  The choice itself draws nothing from ``rng``.
    """

    name = "ucb"
    label = "UCB Strategy"

    # -- state layout ---------------------------------------------------------

    def initial_state(self, arm_count: int, **kwargs: Any) -> UcbState:
        return UcbState(arm_count)

    # -- core API -------------------------------------------------------------

    def choose_arm(self, arm_set: ArmSet, rng: np.random.Generator) -> int:
        return self.state.best_arm()
