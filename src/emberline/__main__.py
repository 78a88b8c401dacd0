"""CLI entry point for a headless Emberline auto-play run."""

from __future__ import annotations

import argparse
import logging

from emberline.core.game_state import GameState
from emberline.game import EmberlineGame


TICK_MS = 100.0
MAX_TICKS_PER_WAVE = 20000


def _auto_build(game: EmberlineGame) -> None:
    # Deterministic baseline strategy: cheap towers hugging the path first.
    planned_builds = [
        ("ember_watch", 5, 3),
        ("frostcoil_tower", 8, 5),
        ("rockbound_bastion", 5, 8),
        ("ironspike_launcher", 8, 10),
        ("sunflare_cannon", 5, 12),
        ("void_obelisk", 8, 13),
    ]

    for tower_id, col, row in planned_builds:
        if not game.placement.is_cell_available(col, row):
            continue
        try:
            game.build_tower(tower_id, col, row)
        except ValueError:
            continue


def _auto_upgrade(game: EmberlineGame) -> None:
    for tower in game.placement.all_towers():
        try:
            game.upgrade_tower(tower.col, tower.row)
            break
        except ValueError:
            continue


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="emberline", description="Run a headless Emberline battle.")
    parser.add_argument("--difficulty", default="easy", choices=["easy", "normal", "hard"])
    parser.add_argument("--waves", type=int, default=15, help="stop after this many waves")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--speed", type=float, default=1.0, help="game speed multiplier")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    game = EmberlineGame(difficulty=args.difficulty, seed=args.seed)

    while game.state != GameState.GAME_OVER and game.wave_system.current_wave < args.waves:
        _auto_build(game)
        _auto_upgrade(game)
        if not game.start_next_wave(args.speed):
            break

        ticks = 0
        while game.state == GameState.WAVE_RUNNING and ticks < MAX_TICKS_PER_WAVE:
            game.tick(TICK_MS)
            ticks += 1

    summary = game.snapshot()
    print("Emberline Battle Run")
    print(f"state={summary['state']}")
    print(f"difficulty={summary['difficulty']}")
    print(f"waves={summary['current_wave']}")
    print(f"gold={summary['gold']}")
    print(f"lives={summary['lives']}")
    print(f"towers_built={summary['towers_built']}")


if __name__ == "__main__":
    main()
