from .replay import ReplayAction, ReplayHarness
from .runtime import GameDayRuntime, RuntimePaths

__all__ = ["GameDayRuntime", "ReplayAction", "ReplayHarness", "RuntimePaths"]
