"""
renderer/ui.py — Screen rendering for TurnClock.

Two screens:
    - Settings: both team budgets, the digit keypad, swap and start
    - Timer:    big MM:SS countdown on the active team's color, the
                turn arrow (or grace circle), and the control row

All functions are stateless — they take explicit data arguments, draw to
the provided surface, and return the rects of every button they drew,
keyed by the same key ids core/game.py dispatches on. No global state is
read except constants from settings.py.
"""

from __future__ import annotations
import pygame

from core.budget_input import TimeBudgetInput, format_clock
from core.team import Team
from core.turn_clock import Phase, TurnClock
from settings import (
    SCREEN_W, SCREEN_H,
    TEAM_PANEL_H, KEY_W, KEY_H, KEY_GAP, BUTTON_H,
    COLOR,
    FONT_FAMILY, FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)

Buttons = dict[str, pygame.Rect]

# Keypad rows, top to bottom. Labels double as key ids except backspace.
KEYPAD_ROWS = (
    ("1", "2", "3"),
    ("4", "5", "6"),
    ("7", "8", "9"),
    ("00", "0", "back"),
)

_KEY_LABELS = {"back": "<-", "minus": "-30", "plus": "+30", "boost": "+5:00",
               "settings": "SET", "swap": "SWAP", "start": "START"}


# ── Font cache ────────────────────────────────────────────────────────────────
_fonts: dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    if size not in _fonts:
        _fonts[size] = pygame.font.SysFont(FONT_FAMILY, size, bold=size >= FONT_SIZE_LG)
    return _fonts[size]


def _team_color(team: Team) -> tuple[int, int, int]:
    return COLOR["team_a"] if team is Team.A else COLOR["team_b"]


def _text_on(team: Team) -> tuple[int, int, int]:
    # Yellow reads better with dark text
    return COLOR["text"] if team is Team.A else COLOR["text_dark"]


def _blit_centered(surface, text: str, size: int, color, cx: int, y: int) -> None:
    surf = _font(size).render(text, True, color)
    surface.blit(surf, (cx - surf.get_width() // 2, y))


def _button(surface: pygame.Surface, key_id: str, rect: pygame.Rect,
            pressed: bool = False, label: str | None = None) -> pygame.Rect:
    """Draw one rounded button and return its rect."""
    fill = COLOR["key_active"] if pressed else COLOR["key"]
    pygame.draw.rect(surface, fill, rect, border_radius=8)
    pygame.draw.rect(surface, COLOR["panel_border"], rect, width=1, border_radius=8)
    text = label or _KEY_LABELS.get(key_id, key_id)
    surf = _font(FONT_SIZE_MD).render(text, True, COLOR["text"])
    surface.blit(surf, (rect.centerx - surf.get_width() // 2,
                        rect.centery - surf.get_height() // 2))
    return rect


# ── Settings screen ───────────────────────────────────────────────────────────

def draw_settings(
    surface: pygame.Surface,
    entry: TimeBudgetInput,
    message: str | None = None,
    pressed: str | None = None,
) -> Buttons:
    """Draw the budget entry screen.

    Args:
        surface: Native-resolution surface.
        entry:   Budget input whose buffers and target are shown.
        message: Transient warning line, e.g. a rejected start.
        pressed: Key id to highlight as just pressed.

    Returns:
        Key id → rect for every tappable element, including "team_a"/"team_b".
    """
    surface.fill(COLOR["background"])
    buttons: Buttons = {}
    cx = SCREEN_W // 2

    _blit_centered(surface, "TURN LENGTH", FONT_SIZE_MD, COLOR["text"], cx, 14)

    # Team panels — tap to start typing into that team's buffer
    margin = 12
    panel_w = (SCREEN_W - 3 * margin) // 2
    for i, team in enumerate((Team.A, Team.B)):
        rect = pygame.Rect(margin + i * (panel_w + margin), 44, panel_w, TEAM_PANEL_H)
        pygame.draw.rect(surface, _team_color(team), rect, border_radius=10)
        if entry.active_team is team:
            pygame.draw.rect(surface, COLOR["key_active"], rect, width=4, border_radius=10)
        _blit_centered(surface, team.value.upper(), FONT_SIZE_SM, _text_on(team),
                       rect.centerx, rect.y + 10)
        _blit_centered(surface, entry.display(team), FONT_SIZE_LG, _text_on(team),
                       rect.centerx, rect.y + 40)
        buttons[f"team_{team.name.lower()}"] = rect

    swap_rect = pygame.Rect(margin, 44 + TEAM_PANEL_H + 10, SCREEN_W - 2 * margin, 36)
    buttons["swap"] = _button(surface, "swap", swap_rect, pressed == "swap")

    # Keypad
    grid_w = 3 * KEY_W + 2 * KEY_GAP
    x0 = (SCREEN_W - grid_w) // 2
    y0 = swap_rect.bottom + 16
    for row, keys in enumerate(KEYPAD_ROWS):
        for col, key_id in enumerate(keys):
            rect = pygame.Rect(x0 + col * (KEY_W + KEY_GAP),
                               y0 + row * (KEY_H + KEY_GAP), KEY_W, KEY_H)
            buttons[key_id] = _button(surface, key_id, rect, pressed == key_id)

    if message:
        _blit_centered(surface, message, FONT_SIZE_SM, COLOR["message"], cx,
                       SCREEN_H - BUTTON_H - 52)

    start_rect = pygame.Rect(margin, SCREEN_H - BUTTON_H - 24, SCREEN_W - 2 * margin, BUTTON_H)
    buttons["start"] = _button(surface, "start", start_rect, pressed == "start")
    return buttons


# ── Timer screen ──────────────────────────────────────────────────────────────

def _draw_arrow(surface: pygame.Surface, team: Team, cx: int, cy: int) -> None:
    """Arrow pointing at the active team's side: left for A, right for B."""
    d = -1 if team is Team.A else 1
    points = [(cx + d * 60, cy), (cx - d * 20, cy - 50), (cx - d * 20, cy + 50)]
    pygame.draw.polygon(surface, _text_on(team), points)


def draw_timer(
    surface: pygame.Surface,
    clock: TurnClock,
    pressed: str | None = None,
) -> Buttons:
    """Draw the running-game screen.

    Background follows the active team's color; grace shows a brown circle
    instead of the arrow, a timeout turns the screen red, and a pause dims it.

    Returns:
        Key id → rect for the control buttons. Anything outside them is the
        turn area.
    """
    team = clock.active_team
    if clock.phase is Phase.TIMED_OUT:
        bg, fg = COLOR["timeout"], COLOR["text"]
    else:
        bg, fg = _team_color(team), _text_on(team)
    surface.fill(bg)
    cx = SCREEN_W // 2

    if clock.in_grace:
        pygame.draw.circle(surface, COLOR["grace"], (cx, 170), 60)
    else:
        _draw_arrow(surface, team, cx, 170)

    _blit_centered(surface, format_clock(clock.remaining_seconds), FONT_SIZE_XL, fg, cx, 260)

    if clock.phase is Phase.PAUSED:
        status = "PAUSED"
    elif clock.phase is Phase.TIMED_OUT:
        status = "TIME UP - TAP TO PASS"
    elif clock.in_grace:
        status = f"NEXT: {team.opponent.value.upper()}"
    else:
        status = f"{team.value.upper()} TO PLAY"
    _blit_centered(surface, status, FONT_SIZE_MD, fg, cx, 350)

    if clock.phase is Phase.PAUSED:
        overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
        overlay.fill((*COLOR["paused"], 90))
        surface.blit(overlay, (0, 0))

    buttons: Buttons = {}
    buttons["settings"] = _button(surface, "settings",
                                  pygame.Rect(SCREEN_W - 76, 12, 64, 32),
                                  pressed == "settings")

    row = ("minus", "pause", "plus", "boost")
    gap = 8
    btn_w = (SCREEN_W - 24 - gap * (len(row) - 1)) // len(row)
    y = SCREEN_H - BUTTON_H - 24
    for i, key_id in enumerate(row):
        rect = pygame.Rect(12 + i * (btn_w + gap), y, btn_w, BUTTON_H)
        label = None
        if key_id == "pause":
            label = "GO" if clock.phase is Phase.PAUSED else "II"
        buttons[key_id] = _button(surface, key_id, rect, pressed == key_id, label)
    return buttons
