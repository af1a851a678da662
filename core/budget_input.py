"""
core/budget_input.py — Keypad entry of per-team turn budgets.

Each team has a digit buffer of up to four characters read as MMSS once
left-padded with zeros: "130" means 01:30 (90 seconds), "5" means 00:05.
The buffer is never allowed to decode above MAX_BUDGET_S; an entry that
would is replaced wholesale by the encoding of the maximum ("1000").

Only one team is the entry target at a time. Key presses with no target
are ignored, as are characters that are not digits.

Usage:
    entry = TimeBudgetInput()
    entry.begin_entry(Team.A)
    entry.append_digit("1")
    entry.append_double_zero()
    entry.end_entry()
    entry.seconds(Team.A)        # 60
"""

from __future__ import annotations
import logging
from core.team import Team
from settings import DEFAULT_BUDGET_S, DIGIT_BUFFER_LEN, MAX_BUDGET_S

logger = logging.getLogger(__name__)


def digits_from_seconds(seconds: int) -> str:
    """Return the canonical 4-digit MMSS encoding of a second count.

    Args:
        seconds: Non-negative second count, at most 99:59.

    Returns:
        e.g. 90 -> "0130", 600 -> "1000".
    """
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}{secs:02d}"


def seconds_from_digits(digits: str) -> int:
    """Decode a digit buffer of up to four characters into seconds.

    The buffer is left-padded with '0' to four characters and split into
    two 2-digit fields. SS is not required to be below 60: "0099" is 99.
    An empty buffer decodes to 0.
    """
    padded = digits.rjust(DIGIT_BUFFER_LEN, "0")
    return int(padded[:2]) * 60 + int(padded[2:])


def format_clock(seconds: int) -> str:
    """Format a second count as MM:SS for display."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class TimeBudgetInput:
    """Digit buffers for both teams plus the current entry target.

    Attributes:
        active_team:  Team currently receiving key presses, or None.
        _buffers:     Team -> digit string of at most DIGIT_BUFFER_LEN chars.
        _max_seconds: Clamp ceiling for decoded buffers.
    """

    def __init__(self, max_seconds: int = MAX_BUDGET_S,
                 initial_seconds: int = DEFAULT_BUDGET_S) -> None:
        self.active_team: Team | None = None
        self._max_seconds = max_seconds
        self._buffers: dict[Team, str] = {
            team: digits_from_seconds(initial_seconds) for team in Team
        }

    # ── Observation ───────────────────────────────────────────────────────────

    def buffer(self, team: Team) -> str:
        """Return the raw digit buffer for a team (may be shorter than 4)."""
        return self._buffers[team]

    def seconds(self, team: Team) -> int:
        """Return the decoded second count for a team."""
        return seconds_from_digits(self._buffers[team])

    def display(self, team: Team) -> str:
        """Return the team's buffer as MM:SS, left-padded as it will decode."""
        padded = self._buffers[team].rjust(DIGIT_BUFFER_LEN, "0")
        return f"{padded[:2]}:{padded[2:]}"

    # ── Entry ─────────────────────────────────────────────────────────────────

    def begin_entry(self, team: Team) -> None:
        """Clear a team's buffer and make it the entry target.

        The other team keeps its value.
        """
        self.active_team = team
        self._buffers[team] = ""

    def end_entry(self) -> None:
        """Clear the entry target. Buffers keep their values."""
        self.active_team = None

    def append_digit(self, digit: str) -> None:
        """Append one digit to the target buffer; no-op once it holds four.

        Args:
            digit: A single character '0'..'9'. Anything else is ignored.
        """
        if self.active_team is None:
            logger.debug("digit %r ignored: no entry target", digit)
            return
        if len(digit) != 1 or digit not in "0123456789":
            logger.debug("ignored non-digit key %r", digit)
            return
        buf = self._buffers[self.active_team]
        if len(buf) < DIGIT_BUFFER_LEN:
            self._buffers[self.active_team] = buf + digit
            self.commit_and_clamp_if_over_max()

    def append_double_zero(self) -> None:
        """The compound "00" key.

        Appends "00" when two or more places are free, a single "0" when
        only one is, and nothing on a full buffer.
        """
        if self.active_team is None:
            return
        buf = self._buffers[self.active_team]
        free = DIGIT_BUFFER_LEN - len(buf)
        if free > 0:
            self._buffers[self.active_team] = buf + "0" * min(2, free)
            self.commit_and_clamp_if_over_max()

    def backspace(self) -> None:
        """Drop the last character of the target buffer; no-op when empty."""
        if self.active_team is None:
            return
        buf = self._buffers[self.active_team]
        if buf:
            self._buffers[self.active_team] = buf[:-1]
            self.commit_and_clamp_if_over_max()

    def commit_and_clamp_if_over_max(self) -> None:
        """Replace the target buffer with the max encoding if it decodes too high."""
        if self.active_team is None:
            return
        if seconds_from_digits(self._buffers[self.active_team]) > self._max_seconds:
            logger.debug("clamped %s entry %r to max",
                         self.active_team.value, self._buffers[self.active_team])
            self._buffers[self.active_team] = digits_from_seconds(self._max_seconds)

    # ── Bulk edits ────────────────────────────────────────────────────────────

    def seed_from_budget(self, team: Team, seconds: int) -> None:
        """Load a team's buffer from an existing budget, e.g. on reopening settings."""
        self._buffers[team] = digits_from_seconds(min(seconds, self._max_seconds))

    def swap(self) -> None:
        """Exchange the two teams' buffers verbatim."""
        self._buffers[Team.A], self._buffers[Team.B] = (
            self._buffers[Team.B], self._buffers[Team.A]
        )
