"""
core/turn_clock.py — Two-team turn clock state machine.

TurnClock owns whose turn it is, the single active countdown register,
and the one live tick handle. It knows nothing about pygame, audio or
widgets: it emits abstract Cue values to subscribers and exposes phase,
team and remaining time for renderers to read.

States:
    PRE_GAME  — budgets being edited, no countdown armed
    RUNNING   — active team's turn countdown ticking
    PAUSED    — either countdown suspended (paused_from_grace says which)
    GRACE     — fixed countdown between turns
    TIMED_OUT — turn countdown hit zero, waiting for a tap

Transitions:
    PRE_GAME  → RUNNING   : start_game with valid budgets
    RUNNING   → GRACE     : turn-area tap (end turn)
    RUNNING   → TIMED_OUT : tick at 0
    RUNNING   ⇄ PAUSED    : toggle_pause
    GRACE     ⇄ PAUSED    : toggle_pause (resumes without resetting)
    GRACE     → RUNNING   : tick at 0, active team flips
    TIMED_OUT → GRACE     : turn-area tap
    GRACE / PAUSED(grace) / TIMED_OUT → RUNNING : add_boost, same team
    any but PRE_GAME → PRE_GAME : open_settings

Events with no transition from the current phase are silent no-ops.

Usage:
    scheduler = Scheduler()
    clock = TurnClock(scheduler)
    clock.subscribe_cues(audio_router)
    clock.start_game(120, 120)

    # each frame:
    scheduler.update(dt)
"""

from __future__ import annotations
import logging
from enum import Enum, auto
from typing import Callable

from core.scheduler import Handle, Scheduler
from core.team import INITIAL_TEAM, Team
from settings import (
    BEEP_THRESHOLDS, BOOST_S, DEFAULT_BUDGET_S, GRACE_S,
    MAX_BUDGET_S, MIN_BUDGET_S, REVIVE_S, TICK_INTERVAL_S,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Top-level clock states."""
    PRE_GAME  = auto()
    RUNNING   = auto()
    PAUSED    = auto()
    GRACE     = auto()
    TIMED_OUT = auto()


class Cue(Enum):
    """Abstract signals for the audio/visual collaborator."""
    TURN_START   = "turn-start"
    BEEP         = "beep"
    GRACE_TICK   = "grace-tick"
    TIMEOUT      = "timeout"
    END_TURN_TAP = "end-turn-tap"


class InvalidBudget(ValueError):
    """A requested team budget is outside [MIN_BUDGET_S, MAX_BUDGET_S].

    Attributes:
        team:    The offending team.
        seconds: The rejected value.
    """

    def __init__(self, team: Team, seconds: int) -> None:
        super().__init__(
            f"{team.value} budget {seconds}s is outside "
            f"{MIN_BUDGET_S}..{MAX_BUDGET_S}s"
        )
        self.team = team
        self.seconds = seconds


class TurnClock:
    """The clock/turn state machine.

    Attributes:
        phase:              Current Phase.
        active_team:        Team whose turn is current.
        remaining_seconds:  Seconds left in whichever countdown is active.
        paused_from_grace:  While PAUSED, True if the grace countdown was suspended.
        _budgets:           Team -> seconds each turn starts with.
        _grace_interrupted: Settings were opened mid-grace; next start flips team.
        _handle:            The single live tick handle, or None.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        initial_team: Team = INITIAL_TEAM,
        budget_seconds: int = DEFAULT_BUDGET_S,
    ) -> None:
        self._scheduler = scheduler
        self.phase:             Phase = Phase.PRE_GAME
        self.active_team:       Team  = initial_team
        self.remaining_seconds: int   = 0
        self.paused_from_grace: bool  = False
        self._budgets: dict[Team, int] = {team: budget_seconds for team in Team}
        self._grace_interrupted: bool  = False
        self._handle: Handle | None    = None
        self._cue_listeners: list[Callable[[Cue], None]] = []

    # ── Observation ───────────────────────────────────────────────────────────

    def subscribe_cues(self, callback: Callable[[Cue], None]) -> None:
        """Register a callback invoked with each Cue as it fires."""
        self._cue_listeners.append(callback)

    def budget(self, team: Team) -> int:
        """Return the configured turn length for a team."""
        return self._budgets[team]

    @property
    def in_grace(self) -> bool:
        """True while the grace countdown is active, running or paused."""
        return self.phase is Phase.GRACE or (
            self.phase is Phase.PAUSED and self.paused_from_grace
        )

    @property
    def tick_armed(self) -> bool:
        """True while a turn or grace tick is scheduled."""
        return self._handle is not None and self._handle.active

    def _emit(self, cue: Cue) -> None:
        logger.debug("cue %s team=%s remaining=%d",
                     cue.value, self.active_team.value, self.remaining_seconds)
        for callback in self._cue_listeners:
            callback(cue)

    def _enter(self, phase: Phase) -> None:
        if phase is not self.phase:
            logger.info("phase %s -> %s team=%s remaining=%ds",
                        self.phase.name, phase.name,
                        self.active_team.value, self.remaining_seconds)
        self.phase = phase

    def _ignored(self, event: str) -> None:
        logger.debug("%s ignored in %s", event, self.phase.name)

    # ── Scheduling ────────────────────────────────────────────────────────────

    def _cancel_tick(self) -> None:
        self._scheduler.cancel(self._handle)
        self._handle = None

    def _arm(self, callback: Callable[[], None]) -> None:
        self._cancel_tick()
        self._handle = self._scheduler.arm(TICK_INTERVAL_S, callback)

    def _on_turn_tick(self) -> None:
        """One second of the active turn has elapsed."""
        self._handle = None
        if self.phase is not Phase.RUNNING:
            return
        if self.remaining_seconds <= 0:
            self.remaining_seconds = 0
            self._enter(Phase.TIMED_OUT)
            self._emit(Cue.TIMEOUT)
            return
        if self.remaining_seconds in BEEP_THRESHOLDS:
            self._emit(Cue.BEEP)
        self.remaining_seconds -= 1
        self._arm(self._on_turn_tick)

    def _on_grace_tick(self) -> None:
        """One second of the grace period has elapsed."""
        self._handle = None
        if self.phase is not Phase.GRACE:
            return
        if self.remaining_seconds <= 0:
            self.active_team = self.active_team.opponent
            self._begin_turn(self._budgets[self.active_team])
            return
        self._emit(Cue.GRACE_TICK)
        self.remaining_seconds -= 1
        self._arm(self._on_grace_tick)

    # ── Internal transitions ──────────────────────────────────────────────────

    def _begin_turn(self, seconds: int) -> None:
        """Start a fresh countdown for the current active team."""
        self.remaining_seconds = max(0, seconds)
        self.paused_from_grace = False
        self._enter(Phase.RUNNING)
        self._emit(Cue.TURN_START)
        self._arm(self._on_turn_tick)

    def _start_grace(self) -> None:
        self._cancel_tick()
        self.remaining_seconds = GRACE_S
        self.paused_from_grace = False
        self._enter(Phase.GRACE)
        self._arm(self._on_grace_tick)

    def _in_turn_countdown(self) -> bool:
        return self.phase is Phase.RUNNING or (
            self.phase is Phase.PAUSED and not self.paused_from_grace
        )

    # ── Inbound events ────────────────────────────────────────────────────────

    def start_game(self, a_seconds: int, b_seconds: int) -> None:
        """Commit both budgets and begin a turn.

        If settings were opened during a grace period, the interrupted
        hand-over is completed: the other team starts. Otherwise the
        current active team starts.

        Args:
            a_seconds: Budget for Team.A.
            b_seconds: Budget for Team.B.

        Raises:
            InvalidBudget: Either budget is outside [MIN_BUDGET_S, MAX_BUDGET_S].
                           Nothing is changed.
        """
        if self.phase is not Phase.PRE_GAME:
            self._ignored("start_game")
            return
        for team, seconds in ((Team.A, a_seconds), (Team.B, b_seconds)):
            if not MIN_BUDGET_S <= seconds <= MAX_BUDGET_S:
                logger.info("start rejected: %s budget %ss", team.value, seconds)
                raise InvalidBudget(team, seconds)

        self._budgets[Team.A] = a_seconds
        self._budgets[Team.B] = b_seconds
        if self._grace_interrupted:
            self.active_team = self.active_team.opponent
            self._grace_interrupted = False
        logger.info("game started a=%ds b=%ds first=%s",
                    a_seconds, b_seconds, self.active_team.value)
        self._begin_turn(self._budgets[self.active_team])

    def on_turn_area_tap(self) -> None:
        """A tap on the main clock area.

        RUNNING ends the turn, TIMED_OUT hands over via grace, and GRACE
        or PAUSED toggle the pause.
        """
        if self.phase is Phase.RUNNING:
            self._emit(Cue.END_TURN_TAP)
            self._start_grace()
        elif self.phase is Phase.TIMED_OUT:
            self._start_grace()
        elif self.phase in (Phase.GRACE, Phase.PAUSED):
            self.toggle_pause()
        else:
            self._ignored("tap")

    def toggle_pause(self) -> None:
        """Suspend or resume whichever countdown is active, keeping its value."""
        if self.phase is Phase.RUNNING:
            self._cancel_tick()
            self.paused_from_grace = False
            self._enter(Phase.PAUSED)
        elif self.phase is Phase.GRACE:
            self._cancel_tick()
            self.paused_from_grace = True
            self._enter(Phase.PAUSED)
        elif self.phase is Phase.PAUSED:
            if self.paused_from_grace:
                self._enter(Phase.GRACE)
                self._arm(self._on_grace_tick)
            else:
                self._enter(Phase.RUNNING)
                self._arm(self._on_turn_tick)
            self.paused_from_grace = False
        else:
            self._ignored("toggle_pause")

    def adjust_time(self, delta_seconds: int) -> None:
        """Add (or remove) seconds on the running or paused turn, floored at 0."""
        if not self._in_turn_countdown():
            self._ignored("adjust_time")
            return
        self.remaining_seconds = max(0, self.remaining_seconds + delta_seconds)

    def add_thirty_seconds_or_revive(self) -> None:
        """+REVIVE_S on a live turn; on a timed-out turn, restart it with REVIVE_S."""
        if self._in_turn_countdown():
            self.adjust_time(REVIVE_S)
        elif self.phase is Phase.TIMED_OUT:
            logger.info("revived %s with %ds", self.active_team.value, REVIVE_S)
            self._begin_turn(REVIVE_S)
        else:
            self._ignored("add_thirty_seconds_or_revive")

    def add_boost(self) -> None:
        """The "infinity" key.

        On a live turn adds BOOST_S. From grace (running or paused) or a
        timeout it drops straight into RUNNING with BOOST_S for the same
        team; no hand-over happens.
        """
        if self._in_turn_countdown():
            self.remaining_seconds += BOOST_S
        elif self.in_grace or self.phase is Phase.TIMED_OUT:
            logger.info("boost revived %s from %s", self.active_team.value, self.phase.name)
            self._cancel_tick()
            self._begin_turn(BOOST_S)
        else:
            self._ignored("add_boost")

    def open_settings(self) -> None:
        """Stop the clock and return to PRE_GAME for editing budgets.

        Leaving from a running grace period is remembered so the next
        start_game completes the hand-over. A paused grace restarts the
        same team.
        """
        if self.phase is Phase.PRE_GAME:
            self._ignored("open_settings")
            return
        self._grace_interrupted = self.phase is Phase.GRACE
        self._cancel_tick()
        self.paused_from_grace = False
        self._enter(Phase.PRE_GAME)

    def swap_budgets(self) -> None:
        """Exchange the two teams' budgets. PRE_GAME only."""
        if self.phase is not Phase.PRE_GAME:
            self._ignored("swap_budgets")
            return
        self._budgets[Team.A], self._budgets[Team.B] = (
            self._budgets[Team.B], self._budgets[Team.A]
        )
