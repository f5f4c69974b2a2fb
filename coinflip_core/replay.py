"""Deterministic reconstruction of per-step strategy statistics from a dump.

Replay never re-runs a random choice: the arm and outcome of every step are
already fixed by the recorded history.  Only the statistics are recomputed,
with the same :mod:`coinflip_core.state` update rules the live strategies
use, so ``snapshots[k]`` equals what the coordinator held after ``k`` ticks.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from coinflip_core.dump import Dump, OwnedHistory
from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.outcomes import FlipOutcome, History
from coinflip_core.state import (
    EXPLORATION_TRIALS,
    PDF_RESOLUTION,
    ArmTally,
    NaiveState,
    ThompsonState,
    UcbState,
    check_positive_int,
)
from coinflip_core.strategies import (
    STRATEGY_CLASSES,
    NaiveStrategy,
    ThompsonSamplingStrategy,
    UCBStrategy,
)

logger = logging.getLogger(__name__)

Curve = Tuple[Tuple[float, float], ...]


# ---- snapshot types -----------------------------------------------------------


class PlayerSnapshot(NamedTuple):
    counts: Tuple[int, ...]
    successes: int
    failures: int


class NaiveSnapshot(NamedTuple):
    counts: Tuple[int, ...]
    successes: int
    failures: int
    arm_stats: Tuple[Tuple[int, int], ...]
    phase: str
    best_coin: Optional[int]


class UcbSnapshot(NamedTuple):
    counts: Tuple[int, ...]
    successes: int
    failures: int
    arm_stats: Tuple[Tuple[int, int], ...]
    total_flips: int
    means: Tuple[float, ...]
    upper_bounds: Tuple[float, ...]


class ThompsonSnapshot(NamedTuple):
    counts: Tuple[int, ...]
    successes: int
    failures: int
    params: Tuple[Tuple[int, int], ...]
    pdf_curves: Tuple[Curve, ...]


def _plain(value: Any) -> Any:
    """Turn snapshot trees into JSON-ready values (NaN becomes ``None``)."""
    if hasattr(value, "_asdict"):
        return {key: _plain(item) for key, item in value._asdict().items()}
    if isinstance(value, (tuple, list)):
        return [_plain(item) for item in value]
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


class ReplaySnapshot(NamedTuple):
    """Everything a renderer needs for one step of the timeline.

    ``step`` is the number of outcomes applied so far; step 0 is the prior.
    """

    step: int
    naive: NaiveSnapshot
    ucb: UcbSnapshot
    thompson: ThompsonSnapshot
    player: PlayerSnapshot

    def to_dict(self) -> Dict[str, Any]:
        return _plain(self)


class ReplayResult(NamedTuple):
    best_player_id: Optional[str]
    best_player_name: str
    snapshots: Tuple[ReplaySnapshot, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_player_id": self.best_player_id,
            "best_player_name": self.best_player_name,
            "state": [snapshot.to_dict() for snapshot in self.snapshots],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), allow_nan=False)


# ---- helpers ------------------------------------------------------------------


def player_display_name(player_id: Optional[str]) -> str:
    """Player ids look like ``<uuid>_<name>``; return the ``<name>`` part."""
    if not player_id:
        return ""
    _, sep, name = player_id.partition("_")
    return name if sep else player_id


def select_best_player(players: Iterable[OwnedHistory]) -> Tuple[Optional[str], History]:
    """Player with the highest overall success proportion.

    Players without any flip are skipped.  Ties go to whoever comes first in
    ``players``, which for a :class:`Dump` is history-store insertion order.
    """
    best_id: Optional[str] = None
    best_ratio = -math.inf
    best_history: History = ()
    for player_id, history in players:
        if not history:
            continue
        ratio = sum(1 for o in history if o.success) / len(history)
        if ratio > best_ratio:
            best_id, best_ratio, best_history = player_id, ratio, tuple(history)
    return best_id, best_history


class _Tally(ArmTally):
    """Plain counters for the human player; no policy attached."""

    def apply(self, outcome: FlipOutcome) -> None:
        self._tally(outcome)


# ---- engine -------------------------------------------------------------------


class ReplayEngine:
    """Replays a :class:`Dump` into a sequence of :class:`ReplaySnapshot`.

    The engine keeps no state between calls; one instance can serve any
    number of concurrent replays.

    Parameters
    ----------
    arm_count : int
        Number of coins the dump was recorded with.
    exploration_trials : int
        Naive exploration window used by the recording coordinator.
    pdf_resolution : int
        Number of points on each Thompson posterior density curve.
    """

    def __init__(
        self,
        arm_count: int,
        *,
        exploration_trials: int = EXPLORATION_TRIALS,
        pdf_resolution: int = PDF_RESOLUTION,
    ) -> None:
        self.arm_count = check_positive_int("arm_count", arm_count)
        self.exploration_trials = check_positive_int("exploration_trials", exploration_trials)
        self.pdf_resolution = check_positive_int("pdf_resolution", pdf_resolution)

    # ---- validation ---------------------------------------------------------

    def validate(self, owner: str, history: Iterable[FlipOutcome]) -> None:
        """Raise :class:`HistoryCorruptionError` on any out-of-range arm."""
        for step, outcome in enumerate(history):
            arm = outcome.arm
            if isinstance(arm, bool) or not isinstance(arm, int) or not 0 <= arm < self.arm_count:
                raise HistoryCorruptionError(
                    f"{owner!r} step {step}: arm {arm!r} outside [0, {self.arm_count})"
                )

    def _validate_dump(self, dump: Dump) -> None:
        for owner, history in dump.algorithms + dump.players:
            self.validate(owner, history)

    # ---- replay -------------------------------------------------------------

    def iter_snapshots(
        self,
        dump: Dump,
        max_steps: Optional[int] = None,
        player_history: Optional[History] = None,
    ) -> Iterator[ReplaySnapshot]:
        """Yield snapshots for steps ``0..total`` of ``dump``.

        ``player_history`` overrides the best-player selection.  The whole
        dump is validated before the first snapshot is produced.
        """
        self._validate_dump(dump)
        known = {cls.name for cls in STRATEGY_CLASSES}
        for name, _ in dump.algorithms:
            if name not in known:
                logger.warning("Ignoring unknown strategy %r in dump", name)

        if player_history is None:
            _, player_history = select_best_player(dump.players)
        else:
            self.validate("player", player_history)

        naive_history = dump.algorithm_history(NaiveStrategy.name)
        ucb_history = dump.algorithm_history(UCBStrategy.name)
        thompson_history = dump.algorithm_history(ThompsonSamplingStrategy.name)

        total = max(len(naive_history), len(ucb_history), len(thompson_history), len(player_history))
        if max_steps is not None:
            if max_steps < 0:
                raise ValueError(f"max_steps must be non-negative, got {max_steps}")
            total = min(total, max_steps)

        naive = NaiveState(self.arm_count, exploration_trials=self.exploration_trials)
        ucb = UcbState(self.arm_count)
        thompson = ThompsonState(self.arm_count)
        player = _Tally(self.arm_count)
        curves: List[Curve] = [
            thompson.pdf_curve(arm, self.pdf_resolution) for arm in range(self.arm_count)
        ]

        yield self._snapshot(0, naive, ucb, thompson, curves, player)
        for index in range(total):
            if index < len(naive_history):
                naive.apply(naive_history[index])
            if index < len(ucb_history):
                ucb.apply(ucb_history[index])
            if index < len(thompson_history):
                outcome = thompson_history[index]
                thompson.apply(outcome)
                curves[outcome.arm] = thompson.pdf_curve(outcome.arm, self.pdf_resolution)
            if index < len(player_history):
                player.apply(player_history[index])
            yield self._snapshot(index + 1, naive, ucb, thompson, curves, player)

    def replay(self, dump: Dump, max_steps: Optional[int] = None) -> ReplayResult:
        """Replay ``dump`` against its best player and collect every snapshot."""
        best_id, best_history = select_best_player(dump.players)
        snapshots = tuple(self.iter_snapshots(dump, max_steps, player_history=best_history))
        logger.info(
            "Replayed %d steps (best player: %s)",
            len(snapshots) - 1,
            best_id if best_id is not None else "<none>",
        )
        return ReplayResult(
            best_player_id=best_id,
            best_player_name=player_display_name(best_id),
            snapshots=snapshots,
        )

    @staticmethod
    def _snapshot(
        step: int,
        naive: NaiveState,
        ucb: UcbState,
        thompson: ThompsonState,
        curves: List[Curve],
        player: _Tally,
    ) -> ReplaySnapshot:
        return ReplaySnapshot(
            step=step,
            naive=NaiveSnapshot(
                counts=naive.counts(),
                successes=naive.successes(),
                failures=naive.failures(),
                arm_stats=naive.arm_stats(),
                phase=naive.phase.value,
                best_coin=naive.best_coin,
            ),
            ucb=UcbSnapshot(
                counts=ucb.counts(),
                successes=ucb.successes(),
                failures=ucb.failures(),
                arm_stats=ucb.arm_stats(),
                total_flips=ucb.total_flips,
                means=ucb.means(),
                upper_bounds=ucb.upper_bounds(),
            ),
            thompson=ThompsonSnapshot(
                counts=thompson.counts(),
                successes=thompson.successes(),
                failures=thompson.failures(),
                params=thompson.all_params(),
                pdf_curves=tuple(curves),
            ),
            player=PlayerSnapshot(
                counts=player.counts(),
                successes=player.successes(),
                failures=player.failures(),
            ),
        )
