"""Flip outcomes and append-only flip histories."""
from __future__ import annotations

from typing import Iterable, Iterator, List, NamedTuple, Tuple


class FlipOutcome(NamedTuple):
    """One observation: which arm was flipped and whether it came up heads."""

    arm: int
    success: bool


History = Tuple[FlipOutcome, ...]


class FlipHistory:
    """Ordered, append-only log of :class:`FlipOutcome` for a single owner.

    Entries can only be added with :meth:`append`; every read hands out an
    immutable tuple so callers can never rewrite past flips.
    """

    def __init__(self, outcomes: Iterable[FlipOutcome] = ()) -> None:
        self._outcomes: List[FlipOutcome] = [FlipOutcome(int(a), bool(s)) for a, s in outcomes]

    def append(self, outcome: FlipOutcome) -> None:
        self._outcomes.append(FlipOutcome(int(outcome[0]), bool(outcome[1])))

    def snapshot(self) -> History:
        return tuple(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[FlipOutcome]:
        return iter(tuple(self._outcomes))

    def __repr__(self) -> str:
        return f"FlipHistory(len={len(self._outcomes)})"
