"""Immutable dump of every recorded flip history, plus its JSON form.

The JSON layout is::

    {
      "algorithms": [["naive", [[0, true], [2, false], ...]], ...],
      "players":    [["<uuid>_<name>", [[1, true], ...]], ...]
    }

Owner order is significant and preserved in both directions.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Tuple, Union

from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.outcomes import FlipOutcome, History

logger = logging.getLogger(__name__)

OwnedHistory = Tuple[str, History]


def _freeze(entries: Iterable[Tuple[str, Iterable[Any]]]) -> Tuple[OwnedHistory, ...]:
    return tuple(
        (str(owner), tuple(FlipOutcome(int(arm), bool(success)) for arm, success in history))
        for owner, history in entries
    )


def _parse_outcome(owner: str, step: int, raw: Any) -> FlipOutcome:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise HistoryCorruptionError(f"{owner!r} step {step}: expected [arm, success], got {raw!r}")
    arm, success = raw
    if isinstance(arm, bool) or not isinstance(arm, int):
        raise HistoryCorruptionError(f"{owner!r} step {step}: arm must be an integer, got {arm!r}")
    if not isinstance(success, bool):
        raise HistoryCorruptionError(
            f"{owner!r} step {step}: success must be a boolean, got {success!r}"
        )
    return FlipOutcome(arm, success)


def _parse_section(data: Dict[str, Any], key: str) -> Tuple[OwnedHistory, ...]:
    section = data.get(key, [])
    if not isinstance(section, list):
        raise HistoryCorruptionError(f"'{key}' must be a list of [owner, history] pairs")
    parsed: List[OwnedHistory] = []
    for entry in section:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise HistoryCorruptionError(f"'{key}' entry must be [owner, history], got {entry!r}")
        owner, history = entry
        if not isinstance(owner, str) or not isinstance(history, list):
            raise HistoryCorruptionError(f"'{key}' entry must be [owner, history], got {entry!r}")
        parsed.append(
            (owner, tuple(_parse_outcome(owner, step, raw) for step, raw in enumerate(history)))
        )
    return tuple(parsed)


class Dump(NamedTuple):
    """Strategy histories and player histories at one point in time."""

    algorithms: Tuple[OwnedHistory, ...] = ()
    players: Tuple[OwnedHistory, ...] = ()

    @classmethod
    def build(
        cls,
        algorithms: Iterable[Tuple[str, Iterable[Any]]] = (),
        players: Iterable[Tuple[str, Iterable[Any]]] = (),
    ) -> "Dump":
        """Build a dump from any iterables of ``(owner, [(arm, success), ...])``."""
        return cls(algorithms=_freeze(algorithms), players=_freeze(players))

    def algorithm_history(self, name: str) -> History:
        """History recorded for strategy ``name``; empty when absent."""
        for owner, history in self.algorithms:
            if owner == name:
                return history
        return ()

    # ---- serialization ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithms": [[name, [[o.arm, o.success] for o in h]] for name, h in self.algorithms],
            "players": [[pid, [[o.arm, o.success] for o in h]] for pid, h in self.players],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dump":
        if not isinstance(data, dict):
            raise HistoryCorruptionError(f"dump must be a JSON object, got {type(data).__name__}")
        return cls(
            algorithms=_parse_section(data, "algorithms"),
            players=_parse_section(data, "players"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Dump":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HistoryCorruptionError(f"dump is not valid JSON: {exc}") from exc
        return cls.from_dict(data)


def save_dump(dump: Dump, path: Union[str, Path]) -> Path:
    """Write ``dump`` as JSON to ``path`` and return the resolved path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dump.to_json(), encoding="utf-8")
    logger.info(
        "Wrote dump with %d strategies and %d players to %s",
        len(dump.algorithms),
        len(dump.players),
        out,
    )
    return out


def load_dump(path: Union[str, Path]) -> Dump:
    return Dump.from_json(Path(path).read_text(encoding="utf-8"))
