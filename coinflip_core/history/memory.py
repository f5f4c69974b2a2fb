"""Dict-backed history store for local runs and tests."""

from __future__ import annotations

from coinflip_core.history.base import HistoryStore
from coinflip_core.outcomes import FlipHistory, FlipOutcome, History


class InMemoryHistoryStore(HistoryStore):
    """Thread-unsafe, zero-dependency in-memory store.

    Useful for:
    * unit tests (no Redis needed)
    * the ``coinflip_cli.py simulate`` command

    Callers that share one instance across threads must serialize access
    themselves; :class:`~coinflip_core.coordinator.BanditCoordinator` does.
    """

    def __init__(self) -> None:
        # dicts keep insertion order, which is the owner order we promise
        self._data: dict[str, FlipHistory] = {}

    def get_history(self, owner_id: str) -> History:
        history = self._data.get(owner_id)
        return history.snapshot() if history is not None else ()

    def owners(self) -> list[str]:
        return list(self._data)

    def append(self, owner_id: str, outcome: FlipOutcome) -> int:
        history = self._data.setdefault(owner_id, FlipHistory())
        history.append(outcome)
        return len(history)

    def clear(self) -> None:
        self._data.clear()
