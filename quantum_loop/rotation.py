"""Player rotation of tiles, including entangled groups."""

from __future__ import annotations

from typing import Dict

from .grid import Grid, Position, Tile


def is_locked(tile: Tile, tick: int) -> bool:
    """A tile is locked when fixed or while a temporary lock is still running."""

    if tile.fixed:
        return True
    return tile.temp_fixed_until is not None and tick < tile.temp_fixed_until


def apply_rotation(grid: Grid, position: Position, tick: int = 0) -> Grid:
    """Rotate the tile at ``position`` and every unlocked tile entangled with it.

    Returns ``grid`` itself when the action is rejected, so callers can tell an
    accepted action by identity.
    """

    if not grid.inside(position):
        return grid
    target = grid.tile_at(position)
    if is_locked(target, tick):
        return grid

    updates: Dict[Position, Tile] = {position: target.rotated()}
    if target.entangled:
        for other, tile in grid.items():
            if other == position or tile.group is not target.group:
                continue
            if is_locked(tile, tick):
                continue
            updates[other] = tile.rotated()
    return grid.with_tiles(updates)
