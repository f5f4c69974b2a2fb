"""Per-strategy statistics shared by the live policies and the replay engine.

Each state class owns one ``apply(outcome)`` update rule.  The live
strategies call it after every flip and :class:`~coinflip_core.replay.ReplayEngine`
calls it while folding a recorded history, so both paths produce the same
numbers by construction.
"""
from __future__ import annotations

import enum
import math
from typing import List, Optional, Tuple

import numpy as np
from scipy import stats

from coinflip_core.errors import ConfigurationError, PosteriorInvariantError
from coinflip_core.outcomes import FlipOutcome

EXPLORATION_TRIALS = 30
PDF_RESOLUTION = 40

# first grid point of a PDF curve; Beta(a, 1) or Beta(1, b) blow up at 0.0
PDF_GRID_START = 0.001


def success_ratio(heads: int, tails: int) -> float:
    """``heads / (heads + tails)``, or NaN for an arm that was never flipped."""
    total = heads + tails
    if total == 0:
        return math.nan
    return heads / total


def check_positive_int(name: str, value: int) -> int:
    if isinstance(value, bool) or int(value) != value or value < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def pdf_grid(resolution: int = PDF_RESOLUTION) -> Tuple[float, ...]:
    """x positions at which a posterior density curve is sampled."""
    resolution = check_positive_int("pdf_resolution", resolution)
    return (PDF_GRID_START,) + tuple(i / resolution for i in range(1, resolution))


def beta_posterior(a: float, b: float):
    """Build a frozen ``scipy.stats.beta`` for shape parameters ``(a, b)``."""
    if not (a > 0 and b > 0):
        raise PosteriorInvariantError(
            f"Beta shape parameters must be positive, got a={a}, b={b}"
        )
    return stats.beta(a, b)


class ArmTally:
    """Heads/tails per arm plus the running totals every strategy reports."""

    def __init__(self, arm_count: int) -> None:
        self.arm_count = check_positive_int("arm_count", arm_count)
        self.heads: List[int] = [0] * self.arm_count
        self.tails: List[int] = [0] * self.arm_count

    @property
    def flips(self) -> int:
        return sum(self.heads) + sum(self.tails)

    def counts(self) -> Tuple[int, ...]:
        return tuple(h + t for h, t in zip(self.heads, self.tails))

    def successes(self) -> int:
        return sum(self.heads)

    def failures(self) -> int:
        return sum(self.tails)

    def arm_stats(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(zip(self.heads, self.tails))

    def _tally(self, outcome: FlipOutcome) -> None:
        if outcome.success:
            self.heads[outcome.arm] += 1
        else:
            self.tails[outcome.arm] += 1


# ---- Naive (explore-then-commit) ---------------------------------------------


class NaivePhase(str, enum.Enum):
    AWAITING_EXPLORATION = "awaiting_exploration"
    COMMITTED = "committed"


class NaiveState(ArmTally):
    """Explore uniformly for ``exploration_trials`` flips, then commit forever.

    ``best_coin`` is chosen once, when the flip at step ``exploration_trials``
    is about to happen, and is never recomputed afterwards.
    """

    def __init__(self, arm_count: int, exploration_trials: int = EXPLORATION_TRIALS) -> None:
        super().__init__(arm_count)
        self.exploration_trials = check_positive_int("exploration_trials", exploration_trials)
        self.best_coin: Optional[int] = None

    @property
    def phase(self) -> NaivePhase:
        if self.best_coin is None:
            return NaivePhase.AWAITING_EXPLORATION
        return NaivePhase.COMMITTED

    def is_exploring(self) -> bool:
        return self.flips < self.exploration_trials

    def commit(self) -> int:
        """Freeze and return ``best_coin``; a no-op once committed."""
        if self.best_coin is not None:
            return self.best_coin
        best_index, best_ratio = 0, 0.0
        for index, (heads, tails) in enumerate(self.arm_stats()):
            ratio = success_ratio(heads, tails)
            # NaN never compares greater, so untried arms cannot win
            if ratio > best_ratio:
                best_index, best_ratio = index, ratio
        self.best_coin = best_index
        return best_index

    def apply(self, outcome: FlipOutcome) -> None:
        if not self.is_exploring() and self.best_coin is None:
            self.commit()
        self._tally(outcome)


# ---- UCB --------------------------------------------------------------------


class UcbState(ArmTally):
    r"""Counters for the Upper Confidence Bound policy.

    The confidence value of arm *i* is

    .. math::

        \bar{x}_i + \sqrt{\frac{2 \log_{10} t}{n_i}}

    and is NaN while the arm has no pulls (or no flip happened at all).
    """

    def __init__(self, arm_count: int) -> None:
        super().__init__(arm_count)
        self.total_flips = 0

    def mean(self, arm: int) -> float:
        return success_ratio(self.heads[arm], self.tails[arm])

    def confidence(self, arm: int) -> float:
        pulls = self.heads[arm] + self.tails[arm]
        if pulls == 0 or self.total_flips == 0:
            return math.nan
        return self.mean(arm) + math.sqrt(2.0 * math.log10(self.total_flips) / pulls)

    def means(self) -> Tuple[float, ...]:
        return tuple(self.mean(arm) for arm in range(self.arm_count))

    def upper_bounds(self) -> Tuple[float, ...]:
        return tuple(self.confidence(arm) for arm in range(self.arm_count))

    def best_arm(self) -> int:
        """Arm with the highest confidence value.

        A NaN score beats any number, so untried arms are pulled first; the
        fold is strict, so the lowest index holding the best score keeps it.
        """
        best_index, best_score = 0, 0.0
        for index, score in enumerate(self.upper_bounds()):
            if math.isnan(score):
                if not math.isnan(best_score):
                    best_index, best_score = index, score
            elif score > best_score:
                best_index, best_score = index, score
        return best_index

    def apply(self, outcome: FlipOutcome) -> None:
        self._tally(outcome)
        self.total_flips += 1


# ---- Thompson Sampling --------------------------------------------------------


class ThompsonState(ArmTally):
    """Beta-Bernoulli posteriors, one per arm, starting from ``Beta(1, 1)``.

    The frozen ``scipy.stats.beta`` object of an arm is rebuilt whenever its
    ``(a, b)`` changes and only read otherwise.
    """

    def __init__(self, arm_count: int) -> None:
        super().__init__(arm_count)
        self._params: List[Tuple[int, int]] = [(1, 1)] * self.arm_count
        self._posteriors = [beta_posterior(1, 1) for _ in range(self.arm_count)]

    def params(self, arm: int) -> Tuple[int, int]:
        return self._params[arm]

    def all_params(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(self._params)

    def posterior(self, arm: int):
        return self._posteriors[arm]

    def sample(self, rng: np.random.Generator) -> List[float]:
        """Draw one sample from every arm's posterior, in arm order."""
        return [float(dist.rvs(random_state=rng)) for dist in self._posteriors]

    def pdf_curve(self, arm: int, resolution: int = PDF_RESOLUTION) -> Tuple[Tuple[float, float], ...]:
        """``(x, density)`` pairs of the arm's posterior over :func:`pdf_grid`."""
        grid = pdf_grid(resolution)
        densities = self._posteriors[arm].pdf(np.asarray(grid))
        return tuple((x, float(y)) for x, y in zip(grid, densities))

    def apply(self, outcome: FlipOutcome) -> None:
        self._tally(outcome)
        a, b = self._params[outcome.arm]
        if outcome.success:
            a += 1
        else:
            b += 1
        self._params[outcome.arm] = (a, b)
        self._posteriors[outcome.arm] = beta_posterior(a, b)
