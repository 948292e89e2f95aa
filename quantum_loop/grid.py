"""Tile and grid model shared by the beam tracer, rotation engine and adversaries."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


Position = Tuple[int, int]


class Direction(IntEnum):
    """Travel direction of the beam, numbered clockwise from up."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def vector(self) -> Tuple[int, int]:
        return _VECTORS[self]

    def reverse(self) -> "Direction":
        return Direction((self + 2) % 4)

    @property
    def vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)

    def step(self, position: Position) -> Position:
        dr, dc = self.vector
        return position[0] + dr, position[1] + dc


_VECTORS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}


class TileKind(Enum):
    EMPTY = "empty"
    STRAIGHT = "straight"
    CORNER = "corner"
    CROSS = "cross"
    SOURCE = "source"
    SINK = "sink"
    BLOCK = "block"
    PORTAL = "portal"
    SWITCH = "switch"
    GATE = "gate"
    SUPERPOSITION = "superposition"


class EntanglementGroup(Enum):
    """Tag shared by tiles that rotate in lockstep (and by paired portals)."""

    NONE = "none"
    ALPHA = "alpha"
    BETA = "beta"
    GAMMA = "gamma"


def new_identity() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class Tile:
    """One grid cell.

    ``identity`` is a rendering key only and takes no part in equality.
    """

    kind: TileKind = TileKind.EMPTY
    rotation: int = 0
    fixed: bool = False
    temp_fixed_until: Optional[int] = None
    group: EntanglementGroup = EntanglementGroup.NONE
    identity: str = field(default_factory=new_identity, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", int(self.rotation) % 4)

    def rotated(self, turns: int = 1) -> "Tile":
        return replace(self, rotation=(self.rotation + turns) % 4)

    def locked_until(self, tick: Optional[int]) -> "Tile":
        return replace(self, temp_fixed_until=tick)

    @property
    def entangled(self) -> bool:
        return self.group is not EntanglementGroup.NONE


@dataclass(frozen=True)
class Grid:
    """Square, immutable array of tiles.

    Mutators return a new grid; rows that did not change are shared with the
    original so older snapshots stay valid without copying every tile.
    """

    rows: Tuple[Tuple[Tile, ...], ...]

    def __post_init__(self) -> None:
        rows = tuple(tuple(row) for row in self.rows)
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError("Grid must be square")
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Tile]]) -> "Grid":
        return cls(tuple(tuple(row) for row in rows))

    @classmethod
    def blank(cls, size: int) -> "Grid":
        return cls(tuple(tuple(Tile() for _ in range(size)) for _ in range(size)))

    @property
    def size(self) -> int:
        return len(self.rows)

    def inside(self, position: Position) -> bool:
        row, col = position
        return 0 <= row < self.size and 0 <= col < self.size

    def tile_at(self, position: Position) -> Tile:
        row, col = position
        return self.rows[row][col]

    def positions(self) -> Iterator[Position]:
        for row in range(self.size):
            for col in range(self.size):
                yield row, col

    def items(self) -> Iterator[Tuple[Position, Tile]]:
        for position in self.positions():
            yield position, self.tile_at(position)

    def find(self, kind: TileKind) -> List[Position]:
        return [position for position, tile in self.items() if tile.kind is kind]

    def copy(self) -> "Grid":
        """Snapshot copy with fresh row tuples (tiles are immutable and shared)."""

        return Grid(tuple(tuple(row) for row in self.rows))

    def with_tiles(self, updates: Dict[Position, Tile]) -> "Grid":
        if not updates:
            return self
        rows: List[Tuple[Tile, ...]] = list(self.rows)
        touched: Dict[int, List[Tile]] = {}
        for (row, col), tile in updates.items():
            if row not in touched:
                touched[row] = list(rows[row])
            touched[row][col] = tile
        for row, cells in touched.items():
            rows[row] = tuple(cells)
        return Grid(tuple(rows))

    def render_text(self) -> str:
        """Compact text view used by the demo and in failing test output."""

        lines = []
        for row in self.rows:
            lines.append(" ".join(f"{tile.kind.value[:2]}{tile.rotation}" for tile in row))
        return "\n".join(lines)
