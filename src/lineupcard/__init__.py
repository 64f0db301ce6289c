"""Per-inning fielding assignments for youth baseball lineups."""

__version__ = "1.0.0"
