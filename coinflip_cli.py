#!/usr/bin/env python3
"""Simulate a coin-flip game and replay its dump into per-step statistics.

Usage:
    python coinflip_cli.py simulate                   # 200 ticks, seed=42 -> dump.json
    python coinflip_cli.py simulate -n 500 --seed 7 --probs 0.2 0.5 0.7
    python coinflip_cli.py replay dump.json           # first 100 steps -> rendered_dump.json
    python coinflip_cli.py replay dump.json --iterations 1000

``replay`` writes ``{"best_player_name": ..., "state": [snapshot, ...]}``
for an external renderer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from coinflip_core.coordinator import BanditCoordinator
from coinflip_core.dump import Dump, load_dump, save_dump
from coinflip_core.errors import CoinflipError
from coinflip_core.replay import ReplayEngine, ReplayResult
from coinflip_core.state import EXPLORATION_TRIALS, PDF_RESOLUTION

logger = logging.getLogger("coinflip_cli")

# ---- default problem setup --------------------------------------------------

DEFAULT_COIN_PROBS: List[float] = [0.5, 0.6, 0.4]
DEFAULT_TICKS = 200
DEFAULT_ITERATIONS = 100
DEFAULT_SEED = 42


def simulate(
    n_ticks: int,
    probs: Sequence[float] = DEFAULT_COIN_PROBS,
    seed: Optional[int] = DEFAULT_SEED,
    exploration_trials: int = EXPLORATION_TRIALS,
    player_id: Optional[str] = None,
) -> Dump:
    """Run the three strategies for ``n_ticks`` ticks and return the dump.

    With ``player_id`` set, a scripted player flips a random coin each tick
    so the dump also carries a player history.
    """
    coordinator = BanditCoordinator(probs, exploration_trials=exploration_trials, seed=seed)
    for tick in range(n_ticks):
        coordinator.tick()
        if player_id is not None:
            coordinator.flip_for_player(player_id, tick % coordinator.arm_count())
    return coordinator.dump()


def replay(
    dump: Dump,
    arm_count: int,
    iterations: Optional[int] = DEFAULT_ITERATIONS,
    exploration_trials: int = EXPLORATION_TRIALS,
    pdf_resolution: int = PDF_RESOLUTION,
) -> ReplayResult:
    engine = ReplayEngine(
        arm_count,
        exploration_trials=exploration_trials,
        pdf_resolution=pdf_resolution,
    )
    return engine.replay(dump, max_steps=iterations)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Coin-flip bandit simulator and replayer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Run the strategies and write a dump")
    sim.add_argument("-n", "--ticks", type=int, default=DEFAULT_TICKS, help="Number of ticks")
    sim.add_argument("--seed", type=int, default=DEFAULT_SEED, help="RNG seed")
    sim.add_argument(
        "--probs", type=float, nargs="+", default=DEFAULT_COIN_PROBS, help="Heads probability per coin"
    )
    sim.add_argument("--exploration-trials", type=int, default=EXPLORATION_TRIALS)
    sim.add_argument("--player", default=None, help="Add a scripted player with this id")
    sim.add_argument("-o", "--out", default="dump.json", help="Dump output path")

    rep = sub.add_parser("replay", help="Replay a dump into per-step snapshots")
    rep.add_argument("dump", nargs="?", default="dump.json", help="Dump to replay")
    rep.add_argument(
        "-i",
        "--iterations",
        type=int,
        default=None,
        help=f"Maximum number of steps (default {DEFAULT_ITERATIONS})",
    )
    rep.add_argument("--arms", type=int, default=len(DEFAULT_COIN_PROBS), help="Number of coins")
    rep.add_argument("--exploration-trials", type=int, default=EXPLORATION_TRIALS)
    rep.add_argument("--resolution", type=int, default=PDF_RESOLUTION, help="PDF sampling points")
    rep.add_argument("-o", "--out", default="rendered_dump.json", help="Rendered output path")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "simulate":
            dump = simulate(
                args.ticks,
                probs=args.probs,
                seed=args.seed,
                exploration_trials=args.exploration_trials,
                player_id=args.player,
            )
            save_dump(dump, args.out)
            print(f"[simulate] {args.ticks} ticks -> {args.out}")
            return 0

        iterations = args.iterations
        if iterations is None:
            print(f"[replay] No iterations given, using default of {DEFAULT_ITERATIONS}")
            iterations = DEFAULT_ITERATIONS
        result = replay(
            load_dump(args.dump),
            args.arms,
            iterations=iterations,
            exploration_trials=args.exploration_trials,
            pdf_resolution=args.resolution,
        )
        Path(args.out).write_text(result.to_json(), encoding="utf-8")
        print(f"[replay] {len(result.snapshots)} snapshots -> {args.out}")
    except (CoinflipError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    # Also print final counts for quick comparison
    final = result.snapshots[-1]
    print(f"\n{'Participant':<20} {'Heads':>8} {'Tails':>8}")
    print("-" * 38)
    for label, snap in (
        ("Naive", final.naive),
        ("UCB", final.ucb),
        ("Thompson", final.thompson),
        (result.best_player_name or "Player", final.player),
    ):
        print(f"{label:<20} {snap.successes:>8} {snap.failures:>8}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
