"""Redis key naming helpers."""

from __future__ import annotations


def players_index_key() -> str:
    return "coinflip:players"


def players_seen_key() -> str:
    return "coinflip:players:seen"


def player_history_key(player_id: str) -> str:
    return f"coinflip:player:{player_id}:flips"


def player_history_pattern() -> str:
    return "coinflip:player:*:flips"
