"""Chat action engine package."""

from .config import EngineConfig
from .pipeline import ActionEngine

__all__ = ["ActionEngine", "EngineConfig"]
