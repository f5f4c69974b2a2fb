"""Abstract interface for per-owner flip history persistence."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

from coinflip_core.outcomes import FlipOutcome, History


class HistoryStore(ABC):
    """Append-only storage backend for flip histories.

    Histories are keyed by an owner identifier (a player id, or a strategy
    name).  Entries are never modified once appended, and :meth:`owners`
    must return owners in the order they were first seen so that anything
    derived from iteration order (e.g. best-player tie-breaks) stays
    deterministic across backends.
    """

    # ---- read ---------------------------------------------------------------

    @abstractmethod
    def get_history(self, owner_id: str) -> History:
        """Return the full history for ``owner_id``.

        Must return an empty tuple (not raise) when the owner is unknown.
        """

    @abstractmethod
    def owners(self) -> List[str]:
        """Return every owner id, in first-append order."""

    # ---- write --------------------------------------------------------------

    @abstractmethod
    def append(self, owner_id: str, outcome: FlipOutcome) -> int:
        """Append one outcome and return the owner's new history length."""

    # ---- lifecycle ----------------------------------------------------------

    @abstractmethod
    def clear(self) -> None:
        """Delete every stored history."""

    # ---- optional helpers ---------------------------------------------------

    def snapshot(self) -> Dict[str, History]:
        """Convenience: ``{owner_id: history}`` for all owners, in order."""
        return {owner_id: self.get_history(owner_id) for owner_id in self.owners()}
