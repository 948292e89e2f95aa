"""User interface package for quantum loop."""

from .main import QuantumLoopApp, bootstrap_message, main, run
from .toolkit import QuantumLoopUI

__all__ = [
    "QuantumLoopApp",
    "QuantumLoopUI",
    "bootstrap_message",
    "main",
    "run",
]
