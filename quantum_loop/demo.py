"""Simple command line demo for the quantum loop logic."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import resolve_directories
from .levels import LevelLoader, SolutionValidator, parse_position
from .session import GameSession


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay a stored solution headlessly.")
    parser.add_argument("level", nargs="?", default="level_01")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--ticks",
        type=int,
        default=0,
        help="Adversary ticks to run between rotations.",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    directories = resolve_directories()
    loader = LevelLoader(directories.level_root)
    validator = SolutionValidator(loader, directories.solution_root)

    level = loader.load(args.level)
    solution = validator.load_solution(args.level)
    session = GameSession(level, seed=args.seed)

    for entry in solution.get("rotations", []):
        session.rotate(parse_position(entry))
        for _ in range(args.ticks):
            session.tick()

    summary = session.summary()
    metadata = summary["metadata"]
    print("=== Quantum Loop Demo ===")
    print(f"Level {metadata['id']}: {metadata['name']} ({metadata['dimensions']})")
    print(session.grid.render_text())
    print(f"Moves: {summary['moves']} (par {metadata['par']})")
    print(f"Beam segments traced: {len(summary['path'])}")
    print(f"Gates open: {summary['gates_open']}")
    print(f"Complete: {summary['complete']}")
    return 0 if summary["complete"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
