"""
settings.py — Global constants for TurnClock.

All magic numbers live here. No other module should hardcode colors,
dimensions, or timing values. Import what you need with:
    from settings import COLOR, MAX_BUDGET_S, ...
"""

# ── Screen ────────────────────────────────────────────────────────────────────
SCREEN_W = 360
SCREEN_H = 640
FPS = 60
TITLE = "TurnClock"

# ── Colors ────────────────────────────────────────────────────────────────────
COLOR = {
    "background":   ( 33,  33,  33),   # #212121
    "panel_border": ( 90,  90,  90),   # #5A5A5A
    "team_a":       ( 30, 110, 220),   # blue team
    "team_b":       (245, 200,  40),   # yellow team
    "grace":        (121,  85,  72),   # brown circle during grace
    "timeout":      (229,  57,  53),   # #E53935
    "paused":       (117, 117, 117),   # #757575
    "key":          ( 66,  66,  66),
    "key_active":   ( 42,  93, 176),   # #2A5DB0 — entry target / pressed key
    "text":         (255, 255, 255),
    "text_dark":    ( 33,  33,  33),   # black text on the yellow team
    "message":      (234,  67,  53),
}

# ── Budgets ───────────────────────────────────────────────────────────────────
MIN_BUDGET_S     = 1
MAX_BUDGET_S     = 600      # 10 minutes per team
DEFAULT_BUDGET_S = 120
DIGIT_BUFFER_LEN = 4        # MMSS

# ── Turn clock ────────────────────────────────────────────────────────────────
TICK_INTERVAL_S = 1.0
GRACE_S         = 5
BOOST_S         = 300       # the "infinity" key
REVIVE_S        = 30        # +30 on a timed-out team
ADJUST_STEP_S   = 30        # +/- buttons

# Remaining-second values that fire a warning beep during a turn
BEEP_THRESHOLDS = frozenset({60, 30, 15, 5, 4, 3, 2, 1})

# ── Settings screen ───────────────────────────────────────────────────────────
MESSAGE_DURATION_S = 2.0    # how long a rejected-start message stays up

# ── UI Layout (relative to 360×640) ──────────────────────────────────────────
TEAM_PANEL_H = 96
KEY_W        = 96
KEY_H        = 56
KEY_GAP      = 10
BUTTON_H     = 48

# ── Fonts ─────────────────────────────────────────────────────────────────────
FONT_FAMILY  = "couriernew"
FONT_SIZE_XL = 72
FONT_SIZE_LG = 24
FONT_SIZE_MD = 16
FONT_SIZE_SM = 12

# ── Logging ───────────────────────────────────────────────────────────────────
# main.py lets TURNCLOCK_LOG_LEVEL override this
LOG_LEVEL = "INFO"
