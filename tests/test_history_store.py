"""Tests for the HistoryStore contract, in-memory and Redis-backed."""
from __future__ import annotations

import fnmatch
import unittest

from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.history import HistoryStore, InMemoryHistoryStore
from coinflip_core.outcomes import FlipHistory, FlipOutcome

try:
    from coinflip_api.state.redis_store import (
        RedisHistoryStore,
        decode_outcome,
        encode_outcome,
    )

    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False


class FakeRedis:
    """The handful of list/set commands the store issues, kept in dicts."""

    def __init__(self) -> None:
        self.lists: dict[str, list[bytes]] = {}
        self.sets: dict[str, set[bytes]] = {}

    def sadd(self, key: str, member: str) -> int:
        members = self.sets.setdefault(key, set())
        value = member.encode()
        if value in members:
            return 0
        members.add(value)
        return 1

    def rpush(self, key: str, value: str) -> int:
        items = self.lists.setdefault(key, [])
        items.append(value.encode())
        return len(items)

    def lrange(self, key: str, start: int, end: int) -> list[bytes]:
        items = self.lists.get(key, [])
        return list(items[start:] if end == -1 else items[start : end + 1])

    def scan_iter(self, match: str):
        return [key.encode() for key in list(self.lists) if fnmatch.fnmatch(key, match)]

    def delete(self, *keys) -> int:
        removed = 0
        for key in keys:
            key = key.decode() if isinstance(key, bytes) else key
            removed += int(self.lists.pop(key, None) is not None)
            removed += int(self.sets.pop(key, None) is not None)
        return removed


class HistoryStoreContract:
    """Mixed into one TestCase per backend."""

    def make_store(self) -> HistoryStore:
        raise NotImplementedError

    def setUp(self) -> None:
        self.store = self.make_store()

    def test_unknown_owner_has_empty_history(self) -> None:
        self.assertEqual(self.store.get_history("missing"), ())
        self.assertNotIn("missing", self.store.owners())

    def test_append_returns_new_length(self) -> None:
        self.assertEqual(self.store.append("p1", FlipOutcome(0, True)), 1)
        self.assertEqual(self.store.append("p1", FlipOutcome(2, False)), 2)
        self.assertEqual(
            self.store.get_history("p1"),
            (FlipOutcome(0, True), FlipOutcome(2, False)),
        )

    def test_owners_keep_first_append_order(self) -> None:
        for owner in ("zed", "amy", "zed", "bob", "amy"):
            self.store.append(owner, FlipOutcome(1, True))
        self.assertEqual(self.store.owners(), ["zed", "amy", "bob"])
        self.assertEqual(list(self.store.snapshot()), ["zed", "amy", "bob"])

    def test_history_is_a_copy(self) -> None:
        self.store.append("p1", FlipOutcome(0, True))
        history = self.store.get_history("p1")
        self.store.append("p1", FlipOutcome(0, False))
        self.assertEqual(len(history), 1)

    def test_clear_removes_everything(self) -> None:
        self.store.append("p1", FlipOutcome(0, True))
        self.store.append("p2", FlipOutcome(1, True))
        self.store.clear()
        self.assertEqual(self.store.owners(), [])
        self.assertEqual(self.store.get_history("p1"), ())


class TestInMemoryHistoryStore(HistoryStoreContract, unittest.TestCase):
    def make_store(self) -> HistoryStore:
        return InMemoryHistoryStore()


class TestFlipHistory(unittest.TestCase):
    def test_append_only_log(self) -> None:
        history = FlipHistory([(1, True)])
        history.append(FlipOutcome(0, False))
        self.assertEqual(len(history), 2)
        self.assertEqual(list(history), [FlipOutcome(1, True), FlipOutcome(0, False)])
        self.assertIsInstance(history.snapshot(), tuple)
        # reads go through snapshot(); no index access into the log
        self.assertFalse(hasattr(history, "__getitem__"))


@unittest.skipUnless(REDIS_AVAILABLE, "redis not installed")
class TestRedisHistoryStore(HistoryStoreContract, unittest.TestCase):
    def make_store(self) -> HistoryStore:
        self.client = FakeRedis()
        return RedisHistoryStore(self.client)

    def test_entries_use_compact_encoding(self) -> None:
        self.store.append("p1", FlipOutcome(2, True))
        self.assertEqual(self.client.lists["coinflip:player:p1:flips"], [b"2:1"])

    def test_corrupt_entry_raises(self) -> None:
        self.client.rpush("coinflip:player:p1:flips", "x:1")
        with self.assertRaises(HistoryCorruptionError):
            self.store.get_history("p1")


@unittest.skipUnless(REDIS_AVAILABLE, "redis not installed")
class TestOutcomeEncoding(unittest.TestCase):
    def test_encode_and_decode(self) -> None:
        self.assertEqual(encode_outcome(FlipOutcome(3, False)), "3:0")
        self.assertEqual(decode_outcome(b"3:0"), FlipOutcome(3, False))
        self.assertEqual(decode_outcome("0:1"), FlipOutcome(0, True))

    def test_malformed_entries(self) -> None:
        for raw in ("", "1", "1:2", "-1:1", "a:b", b"1;1", "\u00b2:1", "1.0:1", b"\xff:1"):
            with self.subTest(raw=raw):
                with self.assertRaises(HistoryCorruptionError):
                    decode_outcome(raw)


if __name__ == "__main__":
    unittest.main()
