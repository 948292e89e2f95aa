"""Beam tracing across the tile grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .grid import Direction, Grid, Position, Tile, TileKind


MAX_BEAM_STEPS = 100

# Travel direction in -> travel direction out, per corner rotation.
CORNER_TURNS: Dict[int, Dict[Direction, Direction]] = {
    0: {Direction.DOWN: Direction.RIGHT, Direction.LEFT: Direction.UP},
    1: {Direction.LEFT: Direction.DOWN, Direction.UP: Direction.RIGHT},
    2: {Direction.UP: Direction.LEFT, Direction.RIGHT: Direction.DOWN},
    3: {Direction.RIGHT: Direction.UP, Direction.DOWN: Direction.LEFT},
}


@dataclass(frozen=True)
class BeamSegment:
    """Single traced cell of the beam path."""

    position: Position
    entry: Direction
    exit: Optional[Direction]
    active: bool = True
    teleport_to: Optional[Position] = None

    @property
    def is_teleport(self) -> bool:
        return self.teleport_to is not None


@dataclass(frozen=True)
class BeamTrace:
    """Result of tracing a grid with gates resolved."""

    path: Tuple[BeamSegment, ...]
    reached_sink: bool
    switch_touched: bool = False
    gates_open: bool = False

    @property
    def cells(self) -> List[Position]:
        return [segment.position for segment in self.path]


def _along_axis(rotation: int, direction: Direction) -> Optional[Direction]:
    # Even rotations run vertically, odd ones horizontally.
    if (rotation % 2 == 0) == direction.vertical:
        return direction
    return None


def _collapse(tile: Tile) -> TileKind:
    if tile.kind is TileKind.SUPERPOSITION:
        return TileKind.STRAIGHT if tile.rotation % 2 == 0 else TileKind.CORNER
    return tile.kind


def exit_direction(tile: Tile, direction: Direction, gates_open: bool) -> Optional[Direction]:
    """Direction the beam leaves ``tile`` with, or ``None`` for a dead end.

    Sinks and portals are resolved by the tracer before this is consulted;
    here they only describe how the cell conducts light.
    """

    kind = _collapse(tile)
    if kind in (TileKind.CROSS, TileKind.SWITCH, TileKind.PORTAL):
        return direction
    if kind is TileKind.STRAIGHT:
        return _along_axis(tile.rotation, direction)
    if kind is TileKind.GATE:
        if not gates_open:
            return None
        return _along_axis(tile.rotation, direction)
    if kind is TileKind.CORNER:
        return CORNER_TURNS[tile.rotation % 4].get(direction)
    # Empty, Block, Source and Sink never conduct.
    return None


def find_source(grid: Grid) -> Optional[Position]:
    for position, tile in grid.items():
        if tile.kind is TileKind.SOURCE:
            return position
    return None


def portal_partner(grid: Grid, position: Position) -> Optional[Position]:
    """Return the paired portal for ``position``; unpaired portals have none."""

    group = grid.tile_at(position).group
    members = [
        candidate
        for candidate, tile in grid.items()
        if tile.kind is TileKind.PORTAL and tile.group is group
    ]
    if len(members) != 2:
        return None
    first, second = members
    return second if first == position else first


def _trace(grid: Grid, gates_open: bool) -> BeamTrace:
    start = find_source(grid)
    if start is None:
        return BeamTrace(path=(), reached_sink=False, gates_open=gates_open)

    direction = Direction(grid.tile_at(start).rotation)
    path: List[BeamSegment] = [BeamSegment(start, direction, direction)]
    reached_sink = False
    switch_touched = False
    current = start
    steps = 0

    while steps < MAX_BEAM_STEPS:
        next_pos = direction.step(current)
        if not grid.inside(next_pos):
            break
        tile = grid.tile_at(next_pos)

        if tile.kind is TileKind.SINK:
            path.append(BeamSegment(next_pos, direction, None))
            reached_sink = True
            break

        if tile.kind is TileKind.SWITCH:
            switch_touched = True

        if tile.kind is TileKind.PORTAL:
            destination = portal_partner(grid, next_pos)
            if destination is None:
                path.append(BeamSegment(next_pos, direction, None, active=False))
                break
            path.append(BeamSegment(next_pos, direction, None, teleport_to=destination))
            path.append(BeamSegment(destination, direction, direction))
            current = destination
            steps += 1
            continue

        exit_dir = exit_direction(tile, direction, gates_open)
        if exit_dir is None:
            path.append(BeamSegment(next_pos, direction, None, active=False))
            break

        path.append(BeamSegment(next_pos, direction, exit_dir))
        current = next_pos
        direction = exit_dir
        steps += 1

    return BeamTrace(
        path=tuple(path),
        reached_sink=reached_sink,
        switch_touched=switch_touched,
        gates_open=gates_open,
    )


def trace_beam(grid: Grid) -> BeamTrace:
    """Trace the beam from the source, opening gates when a switch is lit.

    The first pass runs with every gate closed. If it touched a switch the
    grid is traced again with all gates open and that result is returned.
    """

    closed = _trace(grid, gates_open=False)
    if closed.switch_touched:
        return _trace(grid, gates_open=True)
    return closed


def trace_single_pass(grid: Grid, gates_open: bool = False) -> BeamTrace:
    return _trace(grid, gates_open)
