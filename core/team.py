"""
core/team.py — The two sides of a game.

Team is a pure identity used as a key into per-team budgets and input
buffers. There are exactly two; A plays blue and B plays yellow.
"""

from __future__ import annotations
from enum import Enum


class Team(Enum):
    """One of the two sides sharing the clock."""
    A = "blue"
    B = "yellow"

    @property
    def opponent(self) -> Team:
        """Return the other team."""
        return Team.B if self is Team.A else Team.A


# Whose turn comes first when a fresh clock starts.
# Fixed rather than chosen, so B always opens the first game.
INITIAL_TEAM = Team.B
