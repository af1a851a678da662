"""
core/game.py — Input routing and screen orchestration for TurnClock.

Game owns one of each subsystem and glues them together:
    - Scheduler        (the only source of time; fed by main.py)
    - TurnClock        (turn/grace state machine)
    - TimeBudgetInput  (keypad budget entry)
    - Debouncer        (message and key-highlight resets)
    - Audio            (cue sounds, injected after pygame.init)

Which screen is shown follows the clock: PRE_GAME is the settings
screen, every other phase is the timer screen.

Every button and key is reduced to a key id and goes through press(),
so the full input surface can be driven without a window.

Key ids:
    settings screen : "0".."9", "00", "back", "team_a", "team_b", "next_team",
                      "swap", "start"
    timer screen    : "tap", "pause", "minus", "plus", "boost", "settings"

game.py does NOT call pygame.display.flip() or manage the window.
That is main.py's responsibility.
"""

from __future__ import annotations
import logging
import pygame

from core.budget_input import TimeBudgetInput
from core.scheduler import Debouncer, Scheduler
from core.team import Team
from core.turn_clock import Cue, InvalidBudget, Phase, TurnClock
from renderer import ui
from settings import ADJUST_STEP_S, MESSAGE_DURATION_S

logger = logging.getLogger(__name__)

_KEY_FLASH_S = 0.15

# Keyboard shortcuts per screen (digits are read from event.unicode)
_SETTINGS_KEYS = {
    pygame.K_BACKSPACE: "back",
    pygame.K_RETURN:    "start",
    pygame.K_KP_ENTER:  "start",
    pygame.K_s:         "swap",
}
_TIMER_KEYS = {
    pygame.K_SPACE:     "tap",
    pygame.K_p:         "pause",
    pygame.K_MINUS:     "minus",
    pygame.K_KP_MINUS:  "minus",
    pygame.K_EQUALS:    "plus",
    pygame.K_PLUS:      "plus",
    pygame.K_KP_PLUS:   "plus",
    pygame.K_b:         "boost",
    pygame.K_ESCAPE:    "settings",
}


class Game:
    """Routes input to the clock and budget entry, and renders the current screen.

    Attributes:
        scheduler: Drives every tick and delayed reset.
        clock:     The TurnClock state machine.
        entry:     Keypad budget input for both teams.
        message:   Transient warning shown on the settings screen, or None.
        pressed:   Key id highlighted as just pressed, or None.
        _audio:    Audio instance injected via set_audio(). None until set.
        _buttons:  Key id → rect from the last render, for hit detection.
    """

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self.scheduler: Scheduler       = scheduler or Scheduler()
        self.clock:     TurnClock       = TurnClock(self.scheduler)
        self.entry:     TimeBudgetInput = TimeBudgetInput()
        self.message:   str | None      = None
        self.pressed:   str | None      = None
        self._debouncer = Debouncer(self.scheduler)
        self._audio                     = None
        self._buttons: dict[str, pygame.Rect] = {}
        self.clock.subscribe_cues(self._on_cue)

    # ── Audio ─────────────────────────────────────────────────────────────────

    def set_audio(self, audio) -> None:
        """Inject the Audio instance after construction.

        Keeping audio out of __init__ avoids pygame.mixer being initialised
        before pygame.init().
        """
        self._audio = audio

    def _play(self, name: str) -> None:
        if self._audio:
            self._audio.play(name)

    def _on_cue(self, cue: Cue) -> None:
        self._play(cue.value)

    # ── Screens ───────────────────────────────────────────────────────────────

    @property
    def in_settings(self) -> bool:
        """True while budgets are being edited (clock in PRE_GAME)."""
        return self.clock.phase is Phase.PRE_GAME

    def show_message(self, text: str) -> None:
        """Show a warning line that clears itself after MESSAGE_DURATION_S."""
        self.message = text
        self._debouncer.trigger("message", MESSAGE_DURATION_S, self._clear_message)

    def _clear_message(self) -> None:
        self.message = None

    def _flash_key(self, key_id: str) -> None:
        self.pressed = key_id
        self._debouncer.trigger("key", _KEY_FLASH_S, self._clear_pressed)

    def _clear_pressed(self) -> None:
        self.pressed = None

    # ── Actions ───────────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Commit the entered budgets and start (or resume) the game.

        Returns:
            True if the clock left PRE_GAME, False if a budget was rejected.
        """
        self.entry.end_entry()
        try:
            self.clock.start_game(self.entry.seconds(Team.A), self.entry.seconds(Team.B))
        except InvalidBudget as exc:
            logger.info("start refused: %s", exc)
            self.show_message("Set 00:01 to 10:00 for each team")
            return False
        self._debouncer.cancel("message")
        self.message = None
        return True

    def open_settings(self) -> None:
        """Stop the clock and load the current budgets into the keypad."""
        if self.in_settings:
            return
        self.clock.open_settings()
        for team in Team:
            self.entry.seed_from_budget(team, self.clock.budget(team))

    def swap(self) -> None:
        """Swap both the typed buffers and the committed budgets."""
        self.entry.swap()
        self.clock.swap_budgets()

    def press(self, key_id: str) -> None:
        """Apply one button or key press, by key id, to the current screen.

        Ids that mean nothing on the current screen are ignored.
        """
        if self.in_settings:
            self._press_settings(key_id)
        else:
            self._press_timer(key_id)

    def _press_settings(self, key_id: str) -> None:
        if key_id.isdigit() and len(key_id) == 1:
            self.entry.append_digit(key_id)
        elif key_id == "00":
            self.entry.append_double_zero()
        elif key_id == "back":
            self.entry.backspace()
        elif key_id in ("team_a", "team_b"):
            self.entry.begin_entry(Team.A if key_id == "team_a" else Team.B)
        elif key_id == "next_team":
            current = self.entry.active_team
            self.entry.begin_entry(current.opponent if current else Team.A)
        elif key_id == "swap":
            self.swap()
        elif key_id == "start":
            self.start()
        else:
            return
        self._flash_key(key_id)
        self._play("key")

    def _press_timer(self, key_id: str) -> None:
        if key_id == "tap":
            self.clock.on_turn_area_tap()
            return
        if key_id == "pause":
            self.clock.toggle_pause()
        elif key_id == "minus":
            self.clock.adjust_time(-ADJUST_STEP_S)
        elif key_id == "plus":
            self.clock.add_thirty_seconds_or_revive()
        elif key_id == "boost":
            self.clock.add_boost()
        elif key_id == "settings":
            self.open_settings()
        else:
            return
        self._flash_key(key_id)

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance all scheduled ticks and resets by dt seconds."""
        self.scheduler.update(dt)

    # ── Event handling ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> None:
        """Translate a pygame event into a key id and press() it."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for key_id, rect in self._buttons.items():
                if rect.collidepoint(event.pos):
                    self.press(key_id)
                    return
            if not self.in_settings:
                self.press("tap")

        elif event.type == pygame.KEYDOWN:
            key_id = self._key_id(event)
            if key_id:
                self.press(key_id)

    def _key_id(self, event: pygame.event.Event) -> str | None:
        if self.in_settings:
            char = getattr(event, "unicode", "")
            if len(char) == 1 and char.isdigit():
                return char
            if event.key == pygame.K_TAB:
                return "next_team"
            return _SETTINGS_KEYS.get(event.key)
        return _TIMER_KEYS.get(event.key)

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render(self, surface: pygame.Surface) -> None:
        """Draw the current screen and remember its button rects."""
        if self.in_settings:
            self._buttons = ui.draw_settings(surface, self.entry, self.message, self.pressed)
        else:
            self._buttons = ui.draw_timer(surface, self.clock, self.pressed)
