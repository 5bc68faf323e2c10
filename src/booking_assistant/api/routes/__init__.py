"""Route group exports."""

from . import assistant, health

__all__ = ["assistant", "health"]
