"""Level definitions stored as JSON and the layout legend used to build grids."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .adversaries import Archetype
from .beam import trace_beam
from .grid import EntanglementGroup, Grid, Position, Tile, TileKind
from .rotation import apply_rotation


logger = logging.getLogger(__name__)

DEFAULT_PROJECTILES = 3
MIN_TIME_LIMIT = 15
BASE_TIME_LIMIT = 90
ENEMY_LEVEL_THRESHOLD = 5
MAX_DEFAULT_ENEMIES = 4

# char -> (kind, rotation, fixed, group)
LEGEND: Dict[str, Tuple[TileKind, int, bool, EntanglementGroup]] = {
    ".": (TileKind.EMPTY, 0, False, EntanglementGroup.NONE),
    "S": (TileKind.SOURCE, 1, True, EntanglementGroup.NONE),
    "V": (TileKind.SOURCE, 2, True, EntanglementGroup.NONE),
    "E": (TileKind.SINK, 0, True, EntanglementGroup.NONE),
    "-": (TileKind.STRAIGHT, 0, False, EntanglementGroup.NONE),
    "|": (TileKind.STRAIGHT, 1, False, EntanglementGroup.NONE),
    "L": (TileKind.CORNER, 0, False, EntanglementGroup.NONE),
    "J": (TileKind.CORNER, 1, False, EntanglementGroup.NONE),
    "7": (TileKind.CORNER, 2, False, EntanglementGroup.NONE),
    "F": (TileKind.CORNER, 3, False, EntanglementGroup.NONE),
    "+": (TileKind.CROSS, 0, True, EntanglementGroup.NONE),
    "X": (TileKind.CROSS, 0, False, EntanglementGroup.NONE),
    "#": (TileKind.BLOCK, 0, True, EntanglementGroup.NONE),
    "A": (TileKind.CORNER, 0, False, EntanglementGroup.ALPHA),
    "B": (TileKind.CORNER, 0, False, EntanglementGroup.BETA),
    "Y": (TileKind.CORNER, 0, False, EntanglementGroup.GAMMA),
    "C": (TileKind.STRAIGHT, 0, False, EntanglementGroup.ALPHA),
    "D": (TileKind.STRAIGHT, 0, False, EntanglementGroup.BETA),
    "@": (TileKind.PORTAL, 0, True, EntanglementGroup.ALPHA),
    "&": (TileKind.PORTAL, 0, True, EntanglementGroup.BETA),
    "*": (TileKind.SWITCH, 0, True, EntanglementGroup.NONE),
    "G": (TileKind.GATE, 0, False, EntanglementGroup.NONE),
    "Q": (TileKind.SUPERPOSITION, 0, False, EntanglementGroup.NONE),
}


def tile_from_char(char: str) -> Tile:
    kind, rotation, fixed, group = LEGEND.get(char, LEGEND["."])
    return Tile(kind=kind, rotation=rotation, fixed=fixed, group=group)


def parse_layout(layout: Iterable[str], size: int) -> Grid:
    """Build a grid from layout strings; missing or short rows are padded with empty tiles."""

    lines = list(layout)
    rows: List[List[Tile]] = []
    for r in range(size):
        line = lines[r] if r < len(lines) else ""
        rows.append([tile_from_char(line[c] if c < len(line) else ".") for c in range(size)])
    return Grid.from_rows(rows)


def default_enemy_table(level_id: int) -> Dict[Archetype, int]:
    if level_id < ENEMY_LEVEL_THRESHOLD:
        return {}
    count = min(MAX_DEFAULT_ENEMIES, level_id // 4)
    table: Dict[Archetype, int] = {}
    archetypes = list(Archetype)
    for index in range(count):
        archetype = archetypes[(level_id + index) % len(archetypes)]
        table[archetype] = table.get(archetype, 0) + 1
    return table


@dataclass
class Level:
    """In-memory representation of a level definition."""

    id: int
    name: str
    size: int
    layout: List[str]
    par: int = 0
    description: str = ""
    enemies: Dict[Archetype, int] = field(default_factory=dict)
    projectiles: int = DEFAULT_PROJECTILES

    @property
    def time_limit(self) -> int:
        return max(MIN_TIME_LIMIT, BASE_TIME_LIMIT - self.id * 2)

    @property
    def metadata(self) -> Dict[str, object]:
        metadata: Dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "dimensions": f"{self.size}x{self.size}",
            "par": self.par,
            "time_limit": self.time_limit,
        }
        if self.description:
            metadata["description"] = self.description
        if self.enemies:
            metadata["enemies"] = {key.value: value for key, value in self.enemies.items()}
        return metadata

    def build_grid(self) -> Grid:
        return parse_layout(self.layout, self.size)


def validate_grid(grid: Grid, name: str = "level") -> None:
    sources = grid.find(TileKind.SOURCE)
    if len(sources) != 1:
        raise ValueError(f"{name}: expected exactly one source, found {len(sources)}")
    if not grid.find(TileKind.SINK):
        raise ValueError(f"{name}: no sink tile")


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text())
        level = self._parse_level(data)
        validate_grid(level.build_grid(), name)
        logger.debug("Loaded level %s (%s)", name, level.name)
        return level

    def load_all(self) -> List[Level]:
        levels = [self.load(name) for name in self.available()]
        return sorted(levels, key=lambda level: level.id)

    def _parse_level(self, data: Dict) -> Level:
        level_id = int(data["id"])
        size = int(data["size"])
        if size <= 0:
            raise ValueError(f"Level {level_id} has invalid size {size}")
        if "enemies" in data:
            enemies = {
                Archetype.from_name(key): int(value)
                for key, value in data["enemies"].items()
            }
        else:
            enemies = default_enemy_table(level_id)
        return Level(
            id=level_id,
            name=data.get("name", f"Level {level_id}"),
            size=size,
            layout=[str(line) for line in data.get("layout", [])],
            par=int(data.get("par", 0) or 0),
            description=data.get("description", ""),
            enemies=enemies,
            projectiles=int(data.get("projectiles", DEFAULT_PROJECTILES)),
        )


def parse_position(value: object) -> Position:
    if isinstance(value, str):
        tokens = [token.strip() for token in value.strip("()[] ").split(",") if token.strip()]
        return int(tokens[0]), int(tokens[1])
    row, col = value  # type: ignore[misc]
    return int(row), int(col)


class SolutionValidator:
    """Replay stored click sequences and check that they light the sink."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def apply_solution(self, grid: Grid, solution: Dict) -> Grid:
        for entry in solution.get("rotations", []):
            grid = apply_rotation(grid, parse_position(entry))
        return grid

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        grid = self.apply_solution(level.build_grid(), solution)
        trace = trace_beam(grid)
        if not trace.reached_sink:
            return False
        expected_length = solution.get("expected_path_length")
        if expected_length is not None and len(trace.path) != int(expected_length):
            return False
        expected_gates = solution.get("expected_gates_open")
        if expected_gates is not None and trace.gates_open != bool(expected_gates):
            return False
        return True
