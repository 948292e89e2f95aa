import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quantum_loop.adversaries import Archetype
from quantum_loop.beam import trace_beam
from quantum_loop.grid import EntanglementGroup, TileKind
from quantum_loop.levels import (
    LevelLoader,
    SolutionValidator,
    default_enemy_table,
    parse_layout,
    parse_position,
)

LEVEL_NAMES = [f"level_{index:02d}" for index in range(1, 9)]


def fixture_path(*parts: str) -> Path:
    return Path(__file__).resolve().parents[1].joinpath(*parts)


def test_loader_lists_bundled_levels():
    loader = LevelLoader(fixture_path("levels"))

    assert loader.available() == LEVEL_NAMES
    assert [level.id for level in loader.load_all()] == list(range(1, 9))


def test_level_metadata_and_time_limit():
    level = LevelLoader(fixture_path("levels")).load("level_01")

    assert level.name == "Guide the light"
    assert level.size == 4
    assert level.time_limit == 88
    assert level.metadata["dimensions"] == "4x4"
    assert level.metadata["par"] == 4
    assert level.enemies == {}


def test_enemy_table_is_read_from_file():
    level = LevelLoader(fixture_path("levels")).load("level_05")

    assert level.enemies == {Archetype.STALKER: 1, Archetype.GLITCHER: 1}


def test_missing_enemy_table_uses_default():
    level = LevelLoader(fixture_path("levels")).load("level_08")

    assert level.enemies == default_enemy_table(8)
    assert sum(level.enemies.values()) == 2


def test_default_enemy_table_scales_with_level():
    assert default_enemy_table(4) == {}
    assert sum(default_enemy_table(5).values()) == 1
    assert sum(default_enemy_table(12).values()) == 3
    assert sum(default_enemy_table(30).values()) == 4


def test_time_limit_has_a_floor(tmp_path: Path):
    (tmp_path / "late.json").write_text(
        json.dumps({"id": 40, "size": 4, "layout": ["S..E"]})
    )

    level = LevelLoader(tmp_path).load("late")

    assert level.time_limit == 15
    assert level.name == "Level 40"


def test_missing_level_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        LevelLoader(tmp_path).load("nope")


@pytest.mark.parametrize(
    "layout",
    [
        ["....", "...E", "....", "...."],
        ["S...", "...E", "V...", "...."],
        ["S...", "....", "....", "...."],
    ],
)
def test_level_without_single_source_and_sink_is_rejected(tmp_path: Path, layout):
    (tmp_path / "broken.json").write_text(json.dumps({"id": 1, "size": 4, "layout": layout}))

    with pytest.raises(ValueError):
        LevelLoader(tmp_path).load("broken")


def test_layout_legend():
    grid = parse_layout(["S@*G", "V&QY", "E#X+", "CDAB"], 4)

    assert grid.tile_at((0, 0)).kind is TileKind.SOURCE
    assert grid.tile_at((0, 0)).rotation == 1
    assert grid.tile_at((1, 0)).rotation == 2
    assert grid.tile_at((0, 1)).group is EntanglementGroup.ALPHA
    assert grid.tile_at((1, 1)).group is EntanglementGroup.BETA
    assert grid.tile_at((0, 2)).kind is TileKind.SWITCH
    assert grid.tile_at((0, 3)).kind is TileKind.GATE
    assert grid.tile_at((1, 2)).kind is TileKind.SUPERPOSITION
    assert grid.tile_at((1, 3)).group is EntanglementGroup.GAMMA
    assert grid.tile_at((2, 1)).fixed
    assert not grid.tile_at((2, 2)).fixed
    assert grid.tile_at((2, 3)).fixed
    assert grid.tile_at((3, 0)).kind is TileKind.STRAIGHT
    assert grid.tile_at((3, 3)).kind is TileKind.CORNER


def test_short_layout_is_padded_with_empty_tiles():
    grid = parse_layout(["S?", "E"], 3)

    assert grid.size == 3
    assert grid.tile_at((0, 1)).kind is TileKind.EMPTY
    assert grid.tile_at((2, 2)).kind is TileKind.EMPTY


def test_parse_position_accepts_strings_and_pairs():
    assert parse_position("(2, 3)") == (2, 3)
    assert parse_position([4, 1]) == (4, 1)


@pytest.mark.parametrize("level_name", LEVEL_NAMES)
def test_levels_start_unsolved(level_name: str):
    level = LevelLoader(fixture_path("levels")).load(level_name)

    assert not trace_beam(level.build_grid()).reached_sink


@pytest.mark.parametrize("level_name", LEVEL_NAMES)
def test_solution_validator_accepts_stored_solutions(level_name: str):
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))

    assert validator.validate(level_name)


def test_solution_validator_rejects_partial_solution(tmp_path: Path):
    loader = LevelLoader(fixture_path("levels"))
    (tmp_path / "level_01.json").write_text(json.dumps({"rotations": [[1, 1]]}))
    validator = SolutionValidator(loader, tmp_path)

    assert not validator.validate("level_01")


def test_gate_level_needs_open_gates():
    loader = LevelLoader(fixture_path("levels"))
    validator = SolutionValidator(loader, fixture_path("solutions"))
    level = loader.load("level_07")
    grid = validator.apply_solution(level.build_grid(), validator.load_solution("level_07"))

    trace = trace_beam(grid)

    assert trace.reached_sink
    assert trace.gates_open
