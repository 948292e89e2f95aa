"""Resource directory resolution shared by the demo and the UI launcher."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

LEVEL_ENV_VAR = "QUANTUM_LOOP_LEVEL_ROOT"
SOLUTION_ENV_VAR = "QUANTUM_LOOP_SOLUTION_ROOT"


@dataclass(frozen=True)
class ResourceDirectories:
    """Bundle with resolved directories holding level and solution files."""

    level_root: Path
    solution_root: Path


def _package_root() -> Path:
    return Path(__file__).resolve().parent


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> ResourceDirectories:
    """Resolve resource directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _package_root() / "levels")
    solution_root = _read_directory(SOLUTION_ENV_VAR, _package_root() / "solutions")

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required resource directories do not exist: {missing_str}"
            )

    return ResourceDirectories(level_root=level_root, solution_root=solution_root)
