"""Single owner of the live game: the coins, the three strategies and the
player histories."""
from __future__ import annotations

import logging
import threading
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from coinflip_core.arms import ArmSet
from coinflip_core.dump import Dump
from coinflip_core.history.base import HistoryStore
from coinflip_core.history.memory import InMemoryHistoryStore
from coinflip_core.outcomes import FlipOutcome, History
from coinflip_core.state import EXPLORATION_TRIALS
from coinflip_core.strategies import BaseStrategy, build_strategies

logger = logging.getLogger(__name__)


class StrategyView(NamedTuple):
    """Read-only copy of one strategy's counters, taken under the lock."""

    name: str
    label: str
    steps: int
    counts: Tuple[int, ...]
    arm_stats: Tuple[Tuple[int, int], ...]
    best_coin: Optional[int] = None


class TickResult(NamedTuple):
    """Outcomes of one tick in Naive, UCB, Thompson order, and the tick number."""

    step: int
    outcomes: Tuple[FlipOutcome, ...]


def _view(strategy: BaseStrategy) -> StrategyView:
    return StrategyView(
        name=strategy.name,
        label=strategy.label,
        steps=strategy.steps,
        counts=strategy.state.counts(),
        arm_stats=strategy.state.arm_stats(),
        best_coin=getattr(strategy.state, "best_coin", None),
    )


def _check_player_id(player_id: str) -> None:
    if not isinstance(player_id, str) or not player_id:
        raise ValueError("player_id must be a non-empty string")


class BanditCoordinator:
    """Runs Naive, UCB and Thompson against the same coins and records the
    human players' flips next to them.

    Thread-safe: every public method holds one re-entrant lock for its whole
    duration, so ticks, player flips and dumps never interleave.

    Parameters
    ----------
    probabilities : sequence of float
        Heads probability of each coin.
    exploration_trials : int
        Length of the Naive strategy's exploration window.
    seed : int or None
        Seed of the single RNG shared by the strategies and player flips.
    history_store : HistoryStore or None
        Where player histories go; defaults to an in-memory store.
    """

    def __init__(
        self,
        probabilities: Sequence[float],
        *,
        exploration_trials: int = EXPLORATION_TRIALS,
        seed: Optional[int] = None,
        history_store: Optional[HistoryStore] = None,
    ) -> None:
        self._arms = ArmSet(probabilities)
        self._strategies: List[BaseStrategy] = build_strategies(
            self._arms.arm_count(), exploration_trials=exploration_trials
        )
        self._players = history_store if history_store is not None else InMemoryHistoryStore()
        self._rng = np.random.default_rng(seed)
        self._steps = 0
        self._lock = threading.RLock()
        logger.info(
            "BanditCoordinator ready with %d coins %s",
            self._arms.arm_count(),
            list(self._arms.probabilities),
        )

    # ---- read ---------------------------------------------------------------

    @property
    def arms(self) -> ArmSet:
        return self._arms

    def arm_count(self) -> int:
        return self._arms.arm_count()

    @property
    def strategies(self) -> Tuple[StrategyView, ...]:
        """Point-in-time views of the strategies, in tick order."""
        with self._lock:
            return tuple(_view(s) for s in self._strategies)

    def steps(self) -> int:
        """Number of ticks played so far."""
        with self._lock:
            return self._steps

    def player_ids(self) -> List[str]:
        with self._lock:
            return self._players.owners()

    def player_history(self, player_id: str) -> History:
        with self._lock:
            return self._players.get_history(player_id)

    def player_score(self, player_id: str) -> int:
        """+1 for every head and -1 for every tail; 0 for unknown players."""
        with self._lock:
            return sum(1 if o.success else -1 for o in self._players.get_history(player_id))

    def dump(self) -> Dump:
        """Immutable copy of every strategy and player history."""
        with self._lock:
            return Dump.build(
                algorithms=[(s.name, s.history) for s in self._strategies],
                players=self._players.snapshot().items(),
            )

    # ---- write --------------------------------------------------------------

    def tick(self) -> TickResult:
        """Let every strategy choose and flip once, in Naive, UCB, Thompson order."""
        with self._lock:
            outcomes = tuple(s.choose_and_flip(self._arms, self._rng) for s in self._strategies)
            self._steps += 1
            logger.debug("tick %d: %s", self._steps, outcomes)
            return TickResult(step=self._steps, outcomes=outcomes)

    def run(self, n_ticks: int) -> None:
        """Convenience: call :meth:`tick` ``n_ticks`` times under one lock."""
        with self._lock:
            for _ in range(n_ticks):
                self.tick()

    def record_player_flip(self, player_id: str, arm: int, outcome: bool) -> FlipOutcome:
        """Append an externally produced flip to ``player_id``'s history."""
        _check_player_id(player_id)
        flip = FlipOutcome(self._arms.check_arm(arm), bool(outcome))
        with self._lock:
            self._players.append(player_id, flip)
        logger.debug("player %s flipped %s", player_id, flip)
        return flip

    def flip_for_player(self, player_id: str, arm: int) -> bool:
        """Flip ``arm`` on behalf of a player and record the result."""
        _check_player_id(player_id)
        with self._lock:
            result = self._arms.sample(arm, self._rng)
            self.record_player_flip(player_id, arm, result)
            return result
