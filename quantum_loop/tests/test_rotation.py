import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quantum_loop.grid import EntanglementGroup, Grid, Tile, TileKind
from quantum_loop.levels import parse_layout
from quantum_loop.rotation import apply_rotation, is_locked


def rotations(grid: Grid):
    return {position: tile.rotation for position, tile in grid.items()}


def test_rotation_advances_a_quarter_turn():
    grid = Grid.blank(4).with_tiles({(1, 1): Tile(TileKind.CORNER, rotation=3)})

    rotated = apply_rotation(grid, (1, 1))

    assert rotated.tile_at((1, 1)).rotation == 0
    assert grid.tile_at((1, 1)).rotation == 3


def test_fixed_tile_is_rejected():
    grid = parse_layout(["....", "S-L.", "..LE", "...."], 4)

    assert apply_rotation(grid, (1, 0)) is grid


def test_out_of_bounds_is_rejected():
    grid = Grid.blank(4)

    assert apply_rotation(grid, (4, 0)) is grid
    assert apply_rotation(grid, (-1, 2)) is grid


def test_temporary_lock_blocks_until_expiry():
    tile = Tile(TileKind.STRAIGHT, temp_fixed_until=12)
    grid = Grid.blank(4).with_tiles({(0, 0): tile})

    assert is_locked(tile, 11)
    assert apply_rotation(grid, (0, 0), tick=11) is grid
    assert not is_locked(tile, 12)
    assert apply_rotation(grid, (0, 0), tick=12).tile_at((0, 0)).rotation == 1


def test_entangled_group_rotates_together():
    grid = parse_layout(["S-A..", "..|..", "..L-A", "....|", "....E"], 5)

    rotated = apply_rotation(grid, (0, 2))

    assert rotated.tile_at((0, 2)).rotation == 1
    assert rotated.tile_at((2, 4)).rotation == 1
    assert rotated.tile_at((2, 2)).rotation == 0
    assert rotated.tile_at((1, 2)).rotation == grid.tile_at((1, 2)).rotation


def test_locked_group_member_keeps_rotation():
    alpha = EntanglementGroup.ALPHA
    grid = Grid.blank(4).with_tiles(
        {
            (0, 0): Tile(TileKind.CORNER, group=alpha),
            (1, 1): Tile(TileKind.CORNER, group=alpha, fixed=True),
            (2, 2): Tile(TileKind.CORNER, group=alpha, temp_fixed_until=5),
            (3, 3): Tile(TileKind.CORNER, group=alpha),
            (3, 0): Tile(TileKind.CORNER, group=EntanglementGroup.BETA),
        }
    )

    rotated = apply_rotation(grid, (0, 0), tick=2)

    assert rotated.tile_at((0, 0)).rotation == 1
    assert rotated.tile_at((1, 1)).rotation == 0
    assert rotated.tile_at((2, 2)).rotation == 0
    assert rotated.tile_at((3, 3)).rotation == 1
    assert rotated.tile_at((3, 0)).rotation == 0


def test_four_rotations_restore_group():
    grid = parse_layout(["S-A..", "..|..", "..L-A", "....|", "....E"], 5)
    original = rotations(grid)

    rotated = grid
    for _ in range(4):
        rotated = apply_rotation(rotated, (2, 4))

    assert rotations(rotated) == original
    assert rotated == grid


def test_rotation_keeps_tile_identity_and_shares_untouched_rows():
    grid = parse_layout(["S-L.", "..|.", "..LE", "...."], 4)

    rotated = apply_rotation(grid, (0, 1))

    assert rotated.tile_at((0, 1)).identity == grid.tile_at((0, 1)).identity
    assert rotated.rows[3] is grid.rows[3]
    assert rotated.rows[0] is not grid.rows[0]
