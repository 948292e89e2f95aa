"""Quantum Loop package."""

from .adversaries import Agent, Archetype, tick_adversaries
from .beam import BeamSegment, BeamTrace, trace_beam
from .grid import Direction, EntanglementGroup, Grid, Tile, TileKind
from .levels import Level, LevelLoader, SolutionValidator
from .rotation import apply_rotation
from .session import GameSession, SessionState
from .targeting import apply_projectile, resolve_target
from .ui import QuantumLoopUI

__all__ = [
    "Agent",
    "Archetype",
    "BeamSegment",
    "BeamTrace",
    "Direction",
    "EntanglementGroup",
    "GameSession",
    "Grid",
    "Level",
    "LevelLoader",
    "QuantumLoopUI",
    "SessionState",
    "SolutionValidator",
    "Tile",
    "TileKind",
    "apply_projectile",
    "apply_rotation",
    "resolve_target",
    "tick_adversaries",
    "trace_beam",
]
