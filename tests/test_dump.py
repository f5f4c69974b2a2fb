"""Dump construction, JSON layout and strict loading."""
from __future__ import annotations

import json
import os
import tempfile
import unittest

from coinflip_core.dump import Dump, load_dump, save_dump
from coinflip_core.errors import HistoryCorruptionError
from coinflip_core.outcomes import FlipOutcome


def _sample_dump() -> Dump:
    return Dump.build(
        algorithms=[
            ("naive", [(0, True), (2, False)]),
            ("ucb", [(1, True)]),
            ("thompson", []),
        ],
        players=[("42_ada", [(1, False), (1, True)])],
    )


class TestDump(unittest.TestCase):
    def test_build_freezes_outcomes(self) -> None:
        dump = _sample_dump()
        self.assertEqual(dump.algorithm_history("naive"), (FlipOutcome(0, True), FlipOutcome(2, False)))
        self.assertIsInstance(dump.players, tuple)
        self.assertIsInstance(dump.players[0][1][0], FlipOutcome)

    def test_missing_algorithm_is_empty(self) -> None:
        self.assertEqual(_sample_dump().algorithm_history("epsilon"), ())
        self.assertEqual(Dump().algorithm_history("ucb"), ())

    def test_json_layout(self) -> None:
        data = json.loads(_sample_dump().to_json())
        self.assertEqual(
            data,
            {
                "algorithms": [
                    ["naive", [[0, True], [2, False]]],
                    ["ucb", [[1, True]]],
                    ["thompson", []],
                ],
                "players": [["42_ada", [[1, False], [1, True]]]],
            },
        )

    def test_from_json_preserves_order_and_values(self) -> None:
        dump = _sample_dump()
        self.assertEqual(Dump.from_json(dump.to_json()), dump)

    def test_missing_sections_default_to_empty(self) -> None:
        self.assertEqual(Dump.from_dict({}), Dump())
        self.assertEqual(Dump.from_dict({"algorithms": [["ucb", []]]}).players, ())

    def test_invalid_json_raises_corruption(self) -> None:
        with self.assertRaises(HistoryCorruptionError):
            Dump.from_json("{not json")

    def test_malformed_documents_are_rejected(self) -> None:
        bad_documents = [
            [],
            {"algorithms": {"naive": []}},
            {"algorithms": [["naive"]]},
            {"algorithms": [[1, []]]},
            {"algorithms": [["naive", [[0]]]]},
            {"algorithms": [["naive", [["0", True]]]]},
            {"algorithms": [["naive", [[True, True]]]]},
            {"players": [["p", [[0, 1]]]]},
        ]
        for document in bad_documents:
            with self.subTest(document=document):
                with self.assertRaises(HistoryCorruptionError):
                    Dump.from_dict(document)

    def test_corruption_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            Dump.from_json("[1, 2]")


class TestDumpFiles(unittest.TestCase):
    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "dump.json")
            written = save_dump(_sample_dump(), path)
            self.assertTrue(written.exists())
            self.assertEqual(load_dump(path), _sample_dump())

    def test_load_missing_file_raises_os_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                load_dump(os.path.join(tmp, "absent.json"))


if __name__ == "__main__":
    unittest.main()
