"""
main.py — Entry point and frame loop for TurnClock.

Responsibilities:
    - Configure logging
    - Initialise pygame, the window and audio
    - Run the main loop: handle events → update → render → flip
    - Feed the real frame delta into Game.update(), which is the only
      thing that moves the clock

main.py is intentionally thin. It owns the pygame lifecycle and the
window — nothing else. All clock logic lives in core/turn_clock.py.

The loop is async so it also runs under pygbag in a browser; each frame
yields with asyncio.sleep(0).

Usage:
    python main.py
    TURNCLOCK_LOG_LEVEL=DEBUG python main.py
"""

import asyncio
import logging
import os
import pygame

from core.audio import Audio
from core.game import Game
from settings import SCREEN_W, SCREEN_H, FPS, TITLE, LOG_LEVEL

logger = logging.getLogger(__name__)


async def main() -> None:
    """Async main loop — compatible with both CPython and pygbag WASM."""
    logging.basicConfig(
        level=os.environ.get("TURNCLOCK_LOG_LEVEL", LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    window = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption(TITLE)

    clock = pygame.time.Clock()
    game  = Game()

    audio = Audio()
    audio.init()
    game.set_audio(audio)

    logger.info("window %dx%d ready", SCREEN_W, SCREEN_H)

    running = True
    while running:
        # dt is not clamped; a stalled frame still counts against the turn
        dt = clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            else:
                game.handle_event(event)

        game.update(dt)
        game.render(window)
        pygame.display.flip()

        await asyncio.sleep(0)

    audio.quit()
    pygame.quit()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
