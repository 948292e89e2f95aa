"""Roaming adversaries advanced on a fixed tick cadence."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple

from .grid import Direction, Grid, Position, Tile, TileKind
from .rotation import is_locked


logger = logging.getLogger(__name__)

TEMP_LOCK_TICKS = 10
SPAWN_ATTEMPTS = 10

# Kinds adversaries never touch.
IMMUNE_KINDS = frozenset({TileKind.EMPTY, TileKind.BLOCK, TileKind.SWITCH, TileKind.SINK})

# Candidate order matters for tie-breaking towards the disturbance.
_NEIGHBOUR_ORDER = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class Archetype(Enum):
    STALKER = "stalker"
    SPRINTER = "sprinter"
    GLITCHER = "glitcher"
    FLITTER = "flitter"

    @staticmethod
    def from_name(name: str) -> "Archetype":
        try:
            return Archetype(name.lower())
        except ValueError as exc:
            raise ValueError(f"Unknown archetype: {name}") from exc


@dataclass(frozen=True)
class ArchetypeProfile:
    """Movement cadence and interaction odds for one archetype."""

    moves_every_tick: bool
    pursuit_chance: float
    near_chance: float
    far_chance: float
    locks_tiles: bool = False

    def moves_on(self, tick: int) -> bool:
        return self.moves_every_tick or tick % 2 == 0

    def interaction_chance(self, on_disturbance: bool) -> float:
        return self.near_chance if on_disturbance else self.far_chance


ARCHETYPE_PROFILES: Dict[Archetype, ArchetypeProfile] = {
    Archetype.STALKER: ArchetypeProfile(
        moves_every_tick=False, pursuit_chance=0.95, near_chance=0.7, far_chance=0.1
    ),
    Archetype.SPRINTER: ArchetypeProfile(
        moves_every_tick=True, pursuit_chance=0.8, near_chance=0.6, far_chance=0.05
    ),
    Archetype.GLITCHER: ArchetypeProfile(
        moves_every_tick=False,
        pursuit_chance=0.8,
        near_chance=0.9,
        far_chance=0.2,
        locks_tiles=True,
    ),
    Archetype.FLITTER: ArchetypeProfile(
        moves_every_tick=False, pursuit_chance=0.8, near_chance=0.8, far_chance=0.15
    ),
}


@dataclass(frozen=True)
class Agent:
    position: Position
    archetype: Archetype
    identity: str

    @property
    def profile(self) -> ArchetypeProfile:
        return ARCHETYPE_PROFILES[self.archetype]

    def moved_to(self, position: Position) -> "Agent":
        return replace(self, position=position)


class TickOutcome(NamedTuple):
    grid: Grid
    agents: Tuple[Agent, ...]
    tick: int


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def spawn_agents(
    table: Mapping[Archetype, int],
    size: int,
    rng: Optional[random.Random] = None,
    attempts: int = SPAWN_ATTEMPTS,
) -> Tuple[Agent, ...]:
    """Place agents on random cells, retrying a bounded number of times on overlap.

    Overlap is made unlikely, not impossible: after ``attempts`` collisions the
    last drawn cell is used anyway.
    """

    rng = rng or random.Random()
    agents: List[Agent] = []
    taken: Set[Position] = set()
    for archetype, count in table.items():
        for _ in range(max(0, int(count))):
            position = (rng.randrange(size), rng.randrange(size))
            for _ in range(attempts):
                if position not in taken:
                    break
                position = (rng.randrange(size), rng.randrange(size))
            taken.add(position)
            agents.append(Agent(position, archetype, f"enemy-{len(agents)}"))
    return tuple(agents)


def _neighbours(grid: Grid, position: Position) -> List[Position]:
    candidates = [direction.step(position) for direction in _NEIGHBOUR_ORDER]
    return [candidate for candidate in candidates if grid.inside(candidate)]


def _choose_move(
    agent: Agent,
    candidates: Sequence[Position],
    disturbance: Optional[Position],
    rng: random.Random,
) -> Position:
    if disturbance is not None:
        preferred = min(candidates, key=lambda cell: manhattan(cell, disturbance))
        if rng.random() < agent.profile.pursuit_chance:
            return preferred
    return rng.choice(list(candidates))


def _move_agents(
    grid: Grid,
    agents: Sequence[Agent],
    disturbance: Optional[Position],
    tick: int,
    rng: random.Random,
) -> Tuple[Agent, ...]:
    # Cells still held by agents that have not been resolved yet. Without them a
    # mover could enter a cell whose owner then stays put.
    pending = Counter(agent.position for agent in agents)
    settled: Set[Position] = set()
    moved: List[Agent] = []

    for agent in agents:
        pending[agent.position] -= 1
        destination = agent.position
        if agent.profile.moves_on(tick):
            candidates = _neighbours(grid, agent.position)
            if candidates:
                choice = _choose_move(agent, candidates, disturbance, rng)
                if choice not in settled and pending[choice] <= 0:
                    destination = choice
        settled.add(destination)
        moved.append(agent.moved_to(destination))
    return tuple(moved)


def _interact(
    grid: Grid,
    agents: Sequence[Agent],
    disturbance: Optional[Position],
    tick: int,
    rng: random.Random,
) -> Dict[Position, Tile]:
    updates: Dict[Position, Tile] = {}
    for position, tile in grid.items():
        if tile.temp_fixed_until is not None and tick >= tile.temp_fixed_until:
            updates[position] = tile.locked_until(None)

    for agent in agents:
        if not grid.inside(agent.position):
            continue
        tile = updates.get(agent.position, grid.tile_at(agent.position))
        if tile.kind in IMMUNE_KINDS or is_locked(tile, tick):
            continue
        chance = agent.profile.interaction_chance(agent.position == disturbance)
        if rng.random() >= chance:
            continue
        if agent.profile.locks_tiles:
            updates[agent.position] = tile.locked_until(tick + TEMP_LOCK_TICKS)
            logger.debug("Tick %d: %s locked tile %s", tick, agent.identity, agent.position)
        else:
            updates[agent.position] = tile.rotated()
            logger.debug("Tick %d: %s rotated tile %s", tick, agent.identity, agent.position)
    return updates


def tick_adversaries(
    grid: Grid,
    agents: Sequence[Agent],
    disturbance: Optional[Position],
    tick: int,
    rng: Optional[random.Random] = None,
) -> TickOutcome:
    """Advance every adversary by one tick.

    Agents move one at a time in list order; a destination already claimed by
    a settled agent, or still held by one waiting its turn, keeps the mover in
    place, so distinct input positions stay distinct. Tile interaction runs
    once movement is final. The input grid is returned untouched when no tile
    changed.
    """

    rng = rng or random.Random()
    moved = _move_agents(grid, agents, disturbance, tick, rng)
    updates = _interact(grid, moved, disturbance, tick, rng)
    return TickOutcome(grid.with_tiles(updates), moved, tick + 1)
