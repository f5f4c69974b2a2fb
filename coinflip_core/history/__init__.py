"""History store backends."""
from coinflip_core.history.base import HistoryStore
from coinflip_core.history.memory import InMemoryHistoryStore

__all__ = ["HistoryStore", "InMemoryHistoryStore"]
