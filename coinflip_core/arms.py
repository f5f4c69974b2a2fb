"""Biased coins sampled by the strategies and by human players."""
from __future__ import annotations

import math
import operator
from typing import List, Sequence

import numpy as np

from coinflip_core.errors import ConfigurationError, InvalidArmError


class ArmSet:
    """A fixed, ordered set of Bernoulli arms.

    Parameters
    ----------
    probabilities : sequence of float
        Success (heads) probability of each coin, each in ``[0, 1]``.

    The set holds no RNG of its own: every :meth:`sample` call receives the
    generator to draw from, so a seeded caller gets reproducible flips.
    """

    def __init__(self, probabilities: Sequence[float]) -> None:
        probs = [float(p) for p in probabilities]
        if not probs:
            raise ConfigurationError("at least one arm probability is required")
        for index, p in enumerate(probs):
            if not math.isfinite(p) or not 0.0 <= p <= 1.0:
                raise ConfigurationError(
                    f"arm {index} probability must be in [0, 1], got {p}"
                )
        self._probabilities: List[float] = probs

    @property
    def probabilities(self) -> tuple[float, ...]:
        return tuple(self._probabilities)

    def arm_count(self) -> int:
        return len(self._probabilities)

    def check_arm(self, arm: int) -> int:
        """Return ``arm`` as an int, raising :class:`InvalidArmError` unless it is
        an integral index in range.  Floats and strings are never truncated."""
        if isinstance(arm, bool):
            raise InvalidArmError(f"arm must be an integer, got {arm!r}")
        try:
            index = operator.index(arm)
        except TypeError as exc:
            raise InvalidArmError(f"arm must be an integer, got {arm!r}") from exc
        if not 0 <= index < len(self._probabilities):
            raise InvalidArmError(
                f"arm must be in [0, {len(self._probabilities)}), got {arm!r}"
            )
        return index

    def sample(self, arm: int, rng: np.random.Generator) -> bool:
        """Draw one Bernoulli outcome for ``arm``."""
        return bool(rng.random() < self._probabilities[self.check_arm(arm)])

    def __len__(self) -> int:
        return len(self._probabilities)

    def __repr__(self) -> str:
        return f"ArmSet({self._probabilities!r})"
