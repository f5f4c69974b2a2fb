"""Tests for the coordinator: tick order, player flips, dumps, locking."""
from __future__ import annotations

import threading
import unittest

from coinflip_core.coordinator import BanditCoordinator
from coinflip_core.errors import ConfigurationError, InvalidArmError
from coinflip_core.outcomes import FlipOutcome

PROBS = [0.5, 0.6, 0.4]


class TestBanditCoordinator(unittest.TestCase):
    def test_tick_flips_each_strategy_once(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        result = coordinator.tick()
        self.assertEqual(result.step, 1)
        self.assertEqual(len(result.outcomes), 3)
        dump = coordinator.dump()
        for (name, history), outcome in zip(dump.algorithms, result.outcomes):
            self.assertEqual(history, (outcome,), name)

    def test_tick_returns_consecutive_steps(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        self.assertEqual([coordinator.tick().step for _ in range(4)], [1, 2, 3, 4])
        self.assertEqual(coordinator.steps(), 4)

    def test_strategies_are_in_tick_order(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        self.assertEqual([s.name for s in coordinator.strategies], ["naive", "ucb", "thompson"])

    def test_same_seed_gives_identical_runs(self) -> None:
        first = BanditCoordinator(PROBS, seed=123)
        second = BanditCoordinator(PROBS, seed=123)
        first.run(80)
        second.run(80)
        self.assertEqual(first.dump(), second.dump())

    def test_different_seeds_diverge(self) -> None:
        first = BanditCoordinator(PROBS, seed=1)
        second = BanditCoordinator(PROBS, seed=2)
        first.run(80)
        second.run(80)
        self.assertNotEqual(first.dump().algorithms, second.dump().algorithms)

    def test_ucb_tries_every_coin_first(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=4)
        ucb_arms = [coordinator.tick().outcomes[1].arm for _ in range(3)]
        self.assertEqual(ucb_arms, [0, 1, 2])

    def test_invalid_probabilities_prevent_start(self) -> None:
        with self.assertRaises(ConfigurationError):
            BanditCoordinator([])
        with self.assertRaises(ConfigurationError):
            BanditCoordinator([0.5, 1.2])

    def test_invalid_exploration_trials_prevent_start(self) -> None:
        with self.assertRaises(ConfigurationError):
            BanditCoordinator(PROBS, exploration_trials=0)

    def test_strategy_views_are_detached_copies(self) -> None:
        coordinator = BanditCoordinator(PROBS, exploration_trials=2, seed=1)
        before = coordinator.strategies
        coordinator.run(3)
        self.assertEqual([v.steps for v in before], [0, 0, 0])
        self.assertIsNone(before[0].best_coin)
        naive, ucb, thompson = coordinator.strategies
        self.assertEqual(naive.steps, 3)
        self.assertIsNotNone(naive.best_coin)
        self.assertIsNone(ucb.best_coin)
        self.assertEqual(thompson.label, "Thompson Strategy")
        self.assertFalse(hasattr(naive, "state"))

    def test_single_coin_game(self) -> None:
        coordinator = BanditCoordinator([0.7], exploration_trials=3, seed=5)
        for _ in range(20):
            self.assertEqual([o.arm for o in coordinator.tick().outcomes], [0, 0, 0])
        naive = coordinator.strategies[0]
        self.assertEqual(naive.best_coin, 0)
        self.assertEqual(naive.counts, (20,))
        self.assertIn(coordinator.flip_for_player("solo", 0), (True, False))
        with self.assertRaises(InvalidArmError):
            coordinator.flip_for_player("solo", 1)

    # ---- players -------------------------------------------------------------

    def test_record_player_flip_appends_history(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        coordinator.record_player_flip("p1", 2, True)
        coordinator.record_player_flip("p1", 0, False)
        self.assertEqual(
            coordinator.player_history("p1"),
            (FlipOutcome(2, True), FlipOutcome(0, False)),
        )

    def test_record_player_flip_rejects_bad_arm(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        with self.assertRaises(InvalidArmError):
            coordinator.record_player_flip("p1", 3, True)
        self.assertEqual(coordinator.player_ids(), [])

    def test_record_player_flip_rejects_empty_player(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        with self.assertRaises(ValueError):
            coordinator.record_player_flip("", 0, True)

    def test_player_score_counts_heads_minus_tails(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        for outcome in (True, True, False, True):
            coordinator.record_player_flip("p1", 0, outcome)
        self.assertEqual(coordinator.player_score("p1"), 2)
        self.assertEqual(coordinator.player_score("nobody"), 0)

    def test_flip_for_player_samples_and_records(self) -> None:
        coordinator = BanditCoordinator([0.0, 1.0], seed=1)
        self.assertTrue(coordinator.flip_for_player("p1", 1))
        self.assertFalse(coordinator.flip_for_player("p1", 0))
        self.assertEqual(
            coordinator.player_history("p1"),
            (FlipOutcome(1, True), FlipOutcome(0, False)),
        )

    def test_flip_for_player_rejects_bad_arm(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        with self.assertRaises(InvalidArmError):
            coordinator.flip_for_player("p1", 7)

    # ---- dump ----------------------------------------------------------------

    def test_dump_contains_strategies_and_players_in_order(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        coordinator.run(5)
        coordinator.record_player_flip("zed", 0, True)
        coordinator.record_player_flip("amy", 1, False)
        coordinator.record_player_flip("zed", 2, True)

        dump = coordinator.dump()
        self.assertEqual([name for name, _ in dump.algorithms], ["naive", "ucb", "thompson"])
        self.assertTrue(all(len(h) == 5 for _, h in dump.algorithms))
        self.assertEqual([pid for pid, _ in dump.players], ["zed", "amy"])
        self.assertEqual(len(dump.algorithm_history("ucb")), 5)

    def test_dump_is_not_affected_by_later_ticks(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=1)
        coordinator.run(3)
        dump = coordinator.dump()
        coordinator.run(3)
        coordinator.record_player_flip("p1", 0, True)
        self.assertTrue(all(len(h) == 3 for _, h in dump.algorithms))
        self.assertEqual(dump.players, ())

    # ---- serialized access ---------------------------------------------------

    def test_concurrent_ticks_and_flips_do_not_lose_updates(self) -> None:
        coordinator = BanditCoordinator(PROBS, seed=7)
        n_threads, n_iterations = 8, 50

        steps: list[int] = []
        steps_lock = threading.Lock()

        def worker(index: int) -> None:
            for i in range(n_iterations):
                step = coordinator.tick().step
                with steps_lock:
                    steps.append(step)
                coordinator.flip_for_player(f"p{index}", i % 3)
                coordinator.dump()

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        total = n_threads * n_iterations
        self.assertEqual(sorted(steps), list(range(1, total + 1)))
        self.assertEqual(coordinator.steps(), total)
        for view in coordinator.strategies:
            self.assertEqual(view.steps, total)
            self.assertEqual(sum(view.counts), total)
        for i in range(n_threads):
            self.assertEqual(len(coordinator.player_history(f"p{i}")), n_iterations)


if __name__ == "__main__":
    unittest.main()
