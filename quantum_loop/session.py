"""Level session: explicit state value, pure transitions and a thin manager."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .adversaries import Agent, spawn_agents, tick_adversaries
from .beam import BeamTrace, trace_beam
from .grid import Grid, Position
from .levels import Level
from .rotation import apply_rotation
from .targeting import apply_projectile, resolve_target


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 64


@dataclass(frozen=True)
class SessionState:
    """Everything a running level owns. Replaced, never mutated."""

    level_id: int
    grid: Grid
    agents: Tuple[Agent, ...]
    beam: BeamTrace
    time_left: int
    projectiles: int
    moves: int = 0
    complete: bool = False
    failed: bool = False
    tick: int = 0
    disturbance: Optional[Position] = None
    history: Tuple[Grid, ...] = ()

    @property
    def active(self) -> bool:
        return not (self.complete or self.failed)


def _with_grid(state: SessionState, grid: Grid, **changes: object) -> SessionState:
    beam = trace_beam(grid)
    return replace(
        state,
        grid=grid,
        beam=beam,
        complete=state.complete or beam.reached_sink,
        **changes,
    )


def start_session(level: Level, rng: Optional[random.Random] = None) -> SessionState:
    grid = level.build_grid()
    beam = trace_beam(grid)
    return SessionState(
        level_id=level.id,
        grid=grid,
        agents=spawn_agents(level.enemies, level.size, rng),
        beam=beam,
        time_left=level.time_limit,
        projectiles=level.projectiles,
        complete=beam.reached_sink,
    )


def rotate(state: SessionState, position: Position) -> SessionState:
    """Apply a player rotation; rejected actions return ``state`` unchanged."""

    if not state.active:
        return state
    grid = apply_rotation(state.grid, position, state.tick)
    if grid is state.grid:
        return state
    history = (state.history + (state.grid,))[-HISTORY_LIMIT:]
    return _with_grid(
        state,
        grid,
        moves=state.moves + 1,
        disturbance=tuple(position),
        history=history,
    )


def advance(state: SessionState, rng: Optional[random.Random] = None) -> SessionState:
    if not state.active:
        return state
    outcome = tick_adversaries(state.grid, state.agents, state.disturbance, state.tick, rng)
    if outcome.grid is state.grid:
        return replace(state, agents=outcome.agents, tick=outcome.tick)
    return _with_grid(state, outcome.grid, agents=outcome.agents, tick=outcome.tick)


def fire(
    state: SessionState, angle: float, power: float
) -> Tuple[SessionState, Optional[Position], Optional[Agent]]:
    """Launch a projectile. Returns the new state, the impact cell and the agent hit."""

    if not state.active or state.projectiles <= 0:
        return state, None, None
    size = state.grid.size
    target = resolve_target(angle, power, size, size)
    agents = apply_projectile(state.agents, target)
    hit = None
    if len(agents) != len(state.agents):
        hit = next(agent for agent in state.agents if agent not in agents)
    return replace(state, agents=agents, projectiles=state.projectiles - 1), target, hit


def countdown(state: SessionState, seconds: int = 1) -> SessionState:
    if not state.active:
        return state
    time_left = max(0, state.time_left - max(0, int(seconds)))
    return replace(state, time_left=time_left, failed=time_left <= 0)


class GameSession:
    """Holds the current state of one level and exposes the collaborator hooks."""

    def __init__(
        self,
        level: Level,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.level = level
        self.rng = rng or random.Random(seed)
        self.restart()

    def restart(self) -> None:
        self.state = start_session(self.level, self.rng)
        logger.info(
            "Level %d (%s) started with %d adversaries",
            self.level.id,
            self.level.name,
            len(self.state.agents),
        )

    def snapshot(self) -> SessionState:
        return self.state

    @property
    def grid(self) -> Grid:
        return self.state.grid

    @property
    def agents(self) -> Tuple[Agent, ...]:
        return self.state.agents

    def rotate(self, position: Position) -> bool:
        previous = self.state
        self.state = rotate(previous, position)
        if self.state is previous:
            logger.debug("Rotation at %s rejected", position)
            return False
        logger.debug("Rotation at %s accepted (move %d)", position, self.state.moves)
        self._report_completion(previous)
        return True

    def tick(self) -> bool:
        """Advance adversaries one tick; returns whether the grid changed."""

        previous = self.state
        self.state = advance(previous, self.rng)
        changed = self.state.grid is not previous.grid
        if changed:
            logger.debug("Tick %d disturbed the grid", previous.tick)
            self._report_completion(previous)
        return changed

    def fire(self, angle: float, power: float) -> Optional[Agent]:
        self.state, target, hit = fire(self.state, angle, power)
        if target is None:
            return None
        if hit is not None:
            logger.info("Projectile hit %s at %s", hit.identity, target)
        else:
            logger.debug("Projectile landed on empty cell %s", target)
        return hit

    def countdown(self, seconds: int = 1) -> int:
        previous = self.state
        self.state = countdown(previous, seconds)
        if self.state.failed and not previous.failed:
            logger.info("Level %d failed: time ran out", self.level.id)
        return self.state.time_left

    def _report_completion(self, previous: SessionState) -> None:
        if self.state.complete and not previous.complete:
            logger.info(
                "Level %d complete in %d moves (par %d)",
                self.level.id,
                self.state.moves,
                self.level.par,
            )

    def summary(self) -> Dict[str, object]:
        state = self.state
        path: List[Dict[str, object]] = []
        for segment in state.beam.path:
            entry: Dict[str, object] = {
                "position": list(segment.position),
                "entry": segment.entry.name,
                "exit": segment.exit.name if segment.exit is not None else None,
                "active": segment.active,
            }
            if segment.teleport_to is not None:
                entry["teleport_to"] = list(segment.teleport_to)
            path.append(entry)
        return {
            "metadata": self.level.metadata,
            "moves": state.moves,
            "complete": state.complete,
            "failed": state.failed,
            "tick": state.tick,
            "time_left": state.time_left,
            "projectiles": state.projectiles,
            "gates_open": state.beam.gates_open,
            "path": path,
            "agents": [
                {
                    "id": agent.identity,
                    "archetype": agent.archetype.value,
                    "position": list(agent.position),
                }
                for agent in state.agents
            ],
        }
