"""
core/audio.py — Cue renderer for TurnClock.

Turns the abstract Cue values emitted by TurnClock into short synthesized
tones. Everything is generated in pure Python and handed to pygame.mixer
as raw PCM, so there are no sound files to ship.

Sound design:
    turn-start    — three rising sine dings (C5 E5 G5)   — "your turn"
    beep          — 1200Hz sine blip, 100ms              — countdown warning
    grace-tick    — 600Hz sine blip, 100ms               — grace seconds
    timeout       — 220Hz square buzzer, 400ms           — time is up
    end-turn-tap  — 330Hz square buzzer, 150ms           — turn handed over
    key           — 880Hz square click                   — keypad feedback

Usage:
    audio = Audio()
    audio.init()
    game.set_audio(audio)
"""

from __future__ import annotations
import logging
import math
import struct
import pygame

from core.turn_clock import Cue

logger = logging.getLogger(__name__)

# ── Synthesis constants ───────────────────────────────────────────────────────
_SAMPLE_RATE = 22050
_MAX_AMP     = 32767   # int16 max


def _pack(samples: list[float]) -> bytes:
    """Pack float samples in [-1.0, 1.0] into interleaved int16 stereo PCM."""
    frames = []
    for s in samples:
        v = int(max(-1.0, min(1.0, s)) * _MAX_AMP)
        frames.append(struct.pack("<hh", v, v))
    return b"".join(frames)


def _sine(freq: float, duration: float, volume: float = 0.3) -> list[float]:
    n = int(_SAMPLE_RATE * duration)
    return [volume * math.sin(2 * math.pi * freq * i / _SAMPLE_RATE) for i in range(n)]


def _square(freq: float, duration: float, volume: float = 0.3) -> list[float]:
    n = int(_SAMPLE_RATE * duration)
    half = _SAMPLE_RATE / freq / 2
    return [volume * (1.0 if (i % (2 * half)) < half else -1.0) for i in range(n)]


def _gap(duration: float) -> list[float]:
    return [0.0] * int(_SAMPLE_RATE * duration)


def _fade_out(samples: list[float], tail: float = 0.02) -> list[float]:
    """Linearly fade the last `tail` seconds so short tones do not click."""
    fade_n = min(int(_SAMPLE_RATE * tail), len(samples))
    out = list(samples)
    start = len(out) - fade_n
    for i in range(fade_n):
        out[start + i] *= 1.0 - (i + 1) / fade_n
    return out


def synthesize(name: str) -> list[float]:
    """Return the float sample list for a cue tag or "key".

    Kept separate from pygame so the sound table can be checked without a mixer.

    Raises:
        KeyError: Unknown sound name.
    """
    table = {
        Cue.TURN_START.value: lambda: (
            _fade_out(_sine(523, 0.12)) + _gap(0.05)
            + _fade_out(_sine(659, 0.12)) + _gap(0.05)
            + _fade_out(_sine(784, 0.18))
        ),
        Cue.BEEP.value:         lambda: _fade_out(_sine(1200, 0.10, volume=0.35)),
        Cue.GRACE_TICK.value:   lambda: _fade_out(_sine(600, 0.10, volume=0.30)),
        Cue.TIMEOUT.value:      lambda: _fade_out(_square(220, 0.40, volume=0.30), tail=0.05),
        Cue.END_TURN_TAP.value: lambda: _fade_out(_square(330, 0.15, volume=0.25)),
        "key":                  lambda: _fade_out(_square(880, 0.03, volume=0.12), tail=0.01),
    }
    return table[name]()


SOUND_NAMES = tuple(c.value for c in Cue) + ("key",)


class Audio:
    """Plays cue sounds through pygame.mixer.

    Attributes:
        _sounds:    Dict mapping sound name → pygame.mixer.Sound.
        _available: True if pygame.mixer initialised successfully.
    """

    def __init__(self) -> None:
        """Create an uninitialised Audio manager. Call init() before use."""
        self._sounds:    dict[str, pygame.mixer.Sound] = {}
        self._available: bool = False

    def init(self) -> None:
        """Initialise pygame.mixer and synthesize every sound.

        A machine without an audio device keeps running silently.
        """
        try:
            pygame.mixer.pre_init(_SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("audio disabled: %s", exc)
            self._available = False
            return
        self._available = True
        for name in SOUND_NAMES:
            self._sounds[name] = pygame.mixer.Sound(buffer=_pack(synthesize(name)))
        logger.info("audio ready (%d sounds)", len(self._sounds))

    def play(self, name: str) -> None:
        """Play a sound by name. Silent no-op if unavailable or unknown."""
        if not self._available:
            return
        sound = self._sounds.get(name)
        if sound:
            sound.play()

    def quit(self) -> None:
        """Shut down pygame.mixer cleanly on exit."""
        if self._available:
            pygame.mixer.quit()
