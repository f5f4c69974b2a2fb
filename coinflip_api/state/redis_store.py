"""Redis-backed store for player flip histories."""
from __future__ import annotations

from typing import List, Union

import redis

from coinflip_api.state.keys import (
    player_history_key,
    player_history_pattern,
    players_index_key,
    players_seen_key,
)
from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.history.base import HistoryStore
from coinflip_core.outcomes import FlipOutcome, History


def _text(value: Union[bytes, str]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def encode_outcome(outcome: FlipOutcome) -> str:
    return f"{outcome.arm}:{int(outcome.success)}"


def decode_outcome(raw: Union[bytes, str]) -> FlipOutcome:
    try:
        text = _text(raw)
    except UnicodeDecodeError as exc:
        raise HistoryCorruptionError(f"malformed flip entry {raw!r}") from exc
    arm, sep, success = text.partition(":")
    # isdecimal() rejects superscripts and other digits int() cannot parse
    if not sep or success not in ("0", "1") or not arm.isdecimal():
        raise HistoryCorruptionError(f"malformed flip entry {raw!r}")
    return FlipOutcome(int(arm), success == "1")


class RedisHistoryStore(HistoryStore):
    """HistoryStore implementation using one Redis list per player.

    A separate list keeps player ids in first-flip order; a set guards it so
    an id is only listed once.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        self.redis = redis_client

    def get_history(self, owner_id: str) -> History:
        raw = self.redis.lrange(player_history_key(owner_id), 0, -1)
        return tuple(decode_outcome(item) for item in raw)

    def owners(self) -> List[str]:
        return [_text(v) for v in self.redis.lrange(players_index_key(), 0, -1)]

    def append(self, owner_id: str, outcome: FlipOutcome) -> int:
        if self.redis.sadd(players_seen_key(), owner_id):
            self.redis.rpush(players_index_key(), owner_id)
        return int(self.redis.rpush(player_history_key(owner_id), encode_outcome(outcome)))

    def clear(self) -> None:
        for key in self.redis.scan_iter(match=player_history_pattern()):
            self.redis.delete(key)
        self.redis.delete(players_index_key(), players_seen_key())
