"""Minimal pygame based UI helpers for headless testing.

Rendering is kept deterministic so it can be exercised in automated tests
using the SDL ``dummy`` video driver.
"""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Set, Tuple

from ..beam import CORNER_TURNS
from ..grid import Direction, Grid, Position, Tile, TileKind
from ..session import GameSession
from ..targeting import clamp_aim, resolve_target
from . import layout


# Pygame is required for the UI helpers only. The import is performed lazily
# in ``ensure_pygame`` so test environments can pick the SDL drivers first.
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


def connected_sides(tile: Tile) -> Set[Direction]:
    """Sides of the cell a tile links, for drawing its connector."""

    kind = tile.kind
    if kind is TileKind.SUPERPOSITION:
        kind = TileKind.STRAIGHT if tile.rotation % 2 == 0 else TileKind.CORNER
    if kind in (TileKind.STRAIGHT, TileKind.GATE):
        if tile.rotation % 2 == 0:
            return {Direction.UP, Direction.DOWN}
        return {Direction.LEFT, Direction.RIGHT}
    if kind is TileKind.CORNER:
        # A beam travelling ``d`` enters through the side opposite ``d``.
        travel_in, travel_out = next(iter(CORNER_TURNS[tile.rotation].items()))
        return {travel_in.reverse(), travel_out}
    if kind in (TileKind.CROSS, TileKind.SWITCH):
        return set(Direction)
    if kind is TileKind.SOURCE:
        return {Direction(tile.rotation)}
    return set()


class QuantumLoopUI:
    """Small pygame driven view over a :class:`GameSession`."""

    def __init__(
        self,
        session: GameSession,
        *,
        cell_size: int = 32,
        surface=None,
        use_display: bool = False,
    ) -> None:
        pygame = ensure_pygame()
        self.session = session
        self.cell_size = cell_size
        size = self.session.grid.size * cell_size
        self.surface = surface or pygame.Surface((size, size))
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode((size, size))
        self.tick_event = pygame.USEREVENT + 1
        self.countdown_event = pygame.USEREVENT + 2
        self.angle = 0.0
        self.power = 50.0
        self.last_impact: Optional[Position] = None
        self.font = pygame.font.Font(pygame.font.get_default_font(), 12)

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> List[str]:
        """Dispatch events to the session; returns the names of actions taken."""

        pygame = ensure_pygame()
        actions: List[str] = []
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                cell = self._grid_from_pixel(event.pos)
                if cell is not None and self.session.rotate(cell):
                    actions.append("rotate")
            elif event.type == pygame.KEYDOWN:
                actions.extend(self._handle_key(event.key))
            elif event.type == self.tick_event:
                if self.session.tick():
                    actions.append("disturbed")
            elif event.type == self.countdown_event:
                self.session.countdown()
                actions.append("countdown")
        return actions

    def _handle_key(self, key: int) -> List[str]:
        pygame = ensure_pygame()
        if key == pygame.K_LEFT:
            self.angle -= layout.ANGLE_STEP
        elif key == pygame.K_RIGHT:
            self.angle += layout.ANGLE_STEP
        elif key == pygame.K_UP:
            self.power += layout.POWER_STEP
        elif key == pygame.K_DOWN:
            self.power -= layout.POWER_STEP
        elif key == pygame.K_SPACE:
            before = self.session.state.projectiles
            self.session.fire(self.angle, self.power)
            if self.session.state.projectiles != before:
                self.last_impact = self.aim_cell()
                return ["fire"]
            return []
        else:
            return []
        self.angle, self.power = clamp_aim(self.angle, self.power)
        return ["aim"]

    def aim_cell(self) -> Position:
        size = self.session.grid.size
        return resolve_target(self.angle, self.power, size, size)

    def _grid_from_pixel(self, pos: Tuple[int, int]) -> Optional[Position]:
        x, y = pos
        cell = (y // self.cell_size, x // self.cell_size)
        if not self.session.grid.inside(cell):
            return None
        return cell

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        state = self.session.snapshot()
        self.surface.fill(layout.BACKGROUND_COLOR)
        self._draw_tiles(state.grid, state.tick)
        self._draw_beam(state)
        self._draw_agents(state)
        self._draw_aim()
        if self.screen:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def _cell_rect(self, position: Position):
        pygame = ensure_pygame()
        row, col = position
        return pygame.Rect(
            col * self.cell_size, row * self.cell_size, self.cell_size, self.cell_size
        )

    def _cell_center(self, position: Position) -> Tuple[int, int]:
        row, col = position
        half = self.cell_size // 2
        return col * self.cell_size + half, row * self.cell_size + half

    def _draw_tiles(self, grid: Grid, tick: int) -> None:
        pygame = ensure_pygame()
        half = self.cell_size // 2
        for position, tile in grid.items():
            rect = self._cell_rect(position)
            self.surface.fill(layout.KIND_COLORS[tile.kind], rect)
            pygame.draw.rect(self.surface, layout.GRID_LINE_COLOR, rect, 1)
            group_color = layout.GROUP_COLORS.get(tile.group)
            if group_color is not None:
                pygame.draw.rect(self.surface, group_color, rect.inflate(-4, -4), 2)
            center = self._cell_center(position)
            for side in connected_sides(tile):
                dr, dc = side.vector
                end = (center[0] + dc * half, center[1] + dr * half)
                pygame.draw.line(self.surface, layout.TEXT_COLOR, center, end, 3)
            if tile.kind in (TileKind.SINK, TileKind.PORTAL):
                pygame.draw.circle(self.surface, layout.TEXT_COLOR, center, max(2, half // 3), 2)
            if tile.temp_fixed_until is not None and tick < tile.temp_fixed_until:
                pygame.draw.rect(self.surface, layout.LOCK_COLOR, rect, 3)

    def _draw_beam(self, state) -> None:
        pygame = ensure_pygame()
        path = state.beam.path
        for previous, segment in zip(path, path[1:]):
            if previous.is_teleport:
                continue
            color = layout.BEAM_COLOR if segment.active else layout.DEAD_BEAM_COLOR
            pygame.draw.line(
                self.surface,
                color,
                self._cell_center(previous.position),
                self._cell_center(segment.position),
                4,
            )

    def _draw_agents(self, state) -> None:
        pygame = ensure_pygame()
        radius = max(3, self.cell_size // 5)
        for agent in state.agents:
            color = layout.AGENT_COLORS[agent.archetype]
            pygame.draw.circle(self.surface, color, self._cell_center(agent.position), radius)

    def _draw_aim(self) -> None:
        pygame = ensure_pygame()
        rect = self._cell_rect(self.aim_cell())
        pygame.draw.rect(self.surface, layout.AIM_COLOR, rect.inflate(-8, -8), 1)


__all__ = ["QuantumLoopUI", "connected_sides", "ensure_pygame"]
