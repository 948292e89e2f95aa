"""Shared pytest fixtures for UI tests.

The tests force pygame into a deterministic headless configuration by using
the SDL ``dummy`` video and audio drivers. Modules depending on these
fixtures skip themselves when pygame is not installed.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Generator

import pytest

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from quantum_loop.levels import Level, LevelLoader
from quantum_loop.session import GameSession


def fixture_path(*parts: str) -> Path:
    return ROOT.joinpath("quantum_loop", *parts)


@pytest.fixture(scope="session")
def pygame_module() -> Generator[object, None, None]:
    pygame = pytest.importorskip("pygame")
    from quantum_loop.ui.toolkit import ensure_pygame

    ensure_pygame()
    try:
        yield pygame
    finally:
        pygame.quit()


@pytest.fixture
def load_level():
    loader = LevelLoader(fixture_path("levels"))

    def _load(name: str) -> Level:
        return loader.load(name)

    return _load


@pytest.fixture
def session(load_level) -> GameSession:
    return GameSession(load_level("level_01"), seed=0)
