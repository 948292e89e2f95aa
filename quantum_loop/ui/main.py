"""Interactive pygame launcher for quantum loop levels."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from ..config import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    ResourceDirectories,
    resolve_directories,
)
from ..levels import Level, LevelLoader
from ..session import GameSession
from . import layout
from .toolkit import QuantumLoopUI, ensure_pygame


logger = logging.getLogger(__name__)


class QuantumLoopApp:
    """Window, timers and level cycling around a :class:`QuantumLoopUI`."""

    def __init__(self, levels: List[Level], *, start_index: int = 0, seed: Optional[int] = None):
        if not levels:
            raise ValueError("No levels to play")
        self.pygame = ensure_pygame()
        self.pygame.display.set_caption("Quantum Loop")
        self.levels = levels
        self.level_index = max(0, min(start_index, len(levels) - 1))
        self.seed = seed
        self.clock = self.pygame.time.Clock()
        self.running = False
        self._enter_level(self.level_index)

    def _enter_level(self, index: int) -> None:
        self.level_index = index % len(self.levels)
        level = self.levels[self.level_index]
        self.session = GameSession(level, seed=self.seed)
        self.geometry = layout.compute_geometry(level.size)
        board = level.size * layout.TILE_SIZE
        self.screen = self.pygame.display.set_mode(self.geometry.window)
        self.ui = QuantumLoopUI(
            self.session,
            cell_size=layout.TILE_SIZE,
            surface=self.pygame.Surface((board, board)),
        )
        self._start_timers()

    def _start_timers(self) -> None:
        self.pygame.time.set_timer(self.ui.tick_event, layout.ADVERSARY_TICK_MS)
        self.pygame.time.set_timer(self.ui.countdown_event, layout.COUNTDOWN_MS)

    def _stop_timers(self) -> None:
        self.pygame.time.set_timer(self.ui.tick_event, 0)
        self.pygame.time.set_timer(self.ui.countdown_event, 0)

    def handle_event(self, event) -> None:
        pygame = self.pygame
        if event.type == pygame.QUIT:
            self.running = False
            return
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
                return
            if event.key == pygame.K_r:
                self._stop_timers()
                self._enter_level(self.level_index)
                return
            if event.key == pygame.K_n:
                self._stop_timers()
                self._enter_level(self.level_index + 1)
                return
            if event.key == pygame.K_p:
                self._stop_timers()
                self._enter_level(self.level_index - 1)
                return
        if event.type == pygame.MOUSEBUTTONDOWN:
            board_x, board_y, _, _ = self.geometry.board
            x, y = event.pos
            event = pygame.event.Event(
                event.type, button=event.button, pos=(x - board_x, y - board_y)
            )
        self.ui.process_events([event])
        if not self.session.state.active:
            self._stop_timers()

    def _hud_text(self) -> str:
        state = self.session.state
        level = self.session.level
        if state.complete:
            status = "SYNCHRONIZED - press N"
        elif state.failed:
            status = "TIME DESTABILIZED - press R"
        else:
            status = f"{state.time_left}s"
        return (
            f"L{level.id} {level.name} | moves {state.moves}/{level.par} | "
            f"shots {state.projectiles} | aim {self.ui.angle:+.0f} {self.ui.power:.0f}% | {status}"
        )

    def draw(self) -> None:
        self.screen.fill(layout.BACKGROUND_COLOR)
        board_x, board_y, _, _ = self.geometry.board
        hud_x, hud_y, _, hud_height = self.geometry.hud
        self.screen.blit(self.ui.render(), (board_x, board_y))
        label = self.ui.font.render(self._hud_text(), True, layout.TEXT_COLOR)
        self.screen.blit(label, (hud_x, hud_y + hud_height // 3))
        self.pygame.display.flip()

    def run(self) -> None:
        self.running = True
        while self.running:
            for event in self.pygame.event.get():
                self.handle_event(event)
            self.draw()
            self.clock.tick(60)
        self._stop_timers()
        self.pygame.quit()


def bootstrap_message(directories: ResourceDirectories) -> str:
    return (
        "Quantum Loop UI bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  solutions: {directories.solution_root}\n"
        f"Set {LEVEL_ENV_VAR} or {SOLUTION_ENV_VAR} to use custom directories."
    )


def run(level_name: Optional[str] = None, seed: Optional[int] = None) -> None:
    """Entry point helper that loads the catalogue and runs the UI."""

    directories = resolve_directories()
    loader = LevelLoader(directories.level_root)
    levels = loader.load_all()
    start = 0
    if level_name is not None:
        wanted = loader.load(level_name).id
        start = next(index for index, level in enumerate(levels) if level.id == wanted)
    QuantumLoopApp(levels, start_index=start, seed=seed).run()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Quantum Loop UI launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource directories and exit without launching the UI.",
    )
    parser.add_argument("--list-levels", action="store_true", help="List bundled levels and exit.")
    parser.add_argument("--level", default=None, help="Level file name to start with, e.g. level_03.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    directories = resolve_directories()
    if args.info:
        print(bootstrap_message(directories))
        return 0
    if args.list_levels:
        loader = LevelLoader(directories.level_root)
        print("Available levels:")
        for name in loader.available():
            level = loader.load(name)
            print(f"  {name}: {level.name} ({level.size}x{level.size}, par {level.par})")
        return 0

    logger.info("Launching UI with levels from %s", directories.level_root)
    run(args.level, args.seed)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
