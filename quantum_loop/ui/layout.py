"""Layout constants for the quantum loop UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..adversaries import Archetype
from ..grid import EntanglementGroup, TileKind

# Tile metrics
TILE_SIZE: int = 72
BOARD_OUTER_PADDING: int = 24
HUD_HEIGHT: int = 64

# Timers (milliseconds)
ADVERSARY_TICK_MS: int = 2000
COUNTDOWN_MS: int = 1000

# Aim adjustment per key press
ANGLE_STEP: float = 5.0
POWER_STEP: float = 10.0

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (12, 14, 26)
BOARD_BACKGROUND_COLOR: Tuple[int, int, int] = (20, 24, 44)
GRID_LINE_COLOR: Tuple[int, int, int] = (58, 64, 96)
TEXT_COLOR: Tuple[int, int, int] = (232, 236, 244)
BEAM_COLOR: Tuple[int, int, int] = (120, 230, 255)
DEAD_BEAM_COLOR: Tuple[int, int, int] = (200, 70, 90)
LOCK_COLOR: Tuple[int, int, int] = (255, 200, 80)
AIM_COLOR: Tuple[int, int, int] = (255, 94, 0)

KIND_COLORS: Dict[TileKind, Tuple[int, int, int]] = {
    TileKind.EMPTY: BOARD_BACKGROUND_COLOR,
    TileKind.STRAIGHT: (70, 84, 130),
    TileKind.CORNER: (70, 84, 130),
    TileKind.CROSS: (90, 96, 150),
    TileKind.SOURCE: (250, 220, 120),
    TileKind.SINK: (140, 255, 180),
    TileKind.BLOCK: (60, 60, 66),
    TileKind.PORTAL: (180, 110, 255),
    TileKind.SWITCH: (255, 160, 60),
    TileKind.GATE: (150, 150, 170),
    TileKind.SUPERPOSITION: (110, 180, 220),
}

GROUP_COLORS: Dict[EntanglementGroup, Tuple[int, int, int]] = {
    EntanglementGroup.ALPHA: (255, 90, 160),
    EntanglementGroup.BETA: (90, 200, 255),
    EntanglementGroup.GAMMA: (170, 255, 90),
}

AGENT_COLORS: Dict[Archetype, Tuple[int, int, int]] = {
    Archetype.STALKER: (230, 60, 60),
    Archetype.SPRINTER: (255, 140, 40),
    Archetype.GLITCHER: (200, 80, 255),
    Archetype.FLITTER: (240, 240, 120),
}


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the board and the heads-up display."""

    board: Tuple[int, int, int, int]
    hud: Tuple[int, int, int, int]
    window: Tuple[int, int]


def compute_geometry(size: int, tile_size: int = TILE_SIZE) -> BoardGeometry:
    """Compute the window layout for a square board of ``size`` cells."""

    board_side = size * tile_size
    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING + HUD_HEIGHT

    window_width = board_side + 2 * BOARD_OUTER_PADDING
    window_height = board_y + board_side + BOARD_OUTER_PADDING

    return BoardGeometry(
        board=(board_x, board_y, board_side, board_side),
        hud=(BOARD_OUTER_PADDING, BOARD_OUTER_PADDING, board_side, HUD_HEIGHT),
        window=(window_width, window_height),
    )
