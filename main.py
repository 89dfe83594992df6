"""
main.py — Entry point and game loop for Spot the Difference.

Responsibilities:
    - Configure logging and initialise pygame
    - Load the level catalog and pick the marker store
    - Own the Scaler (window → game coordinate translation)
    - Run the main loop: handle events → update → render → flip
    - Translate all mouse positions to game coordinates before
      passing them to Game
    - Manage pygame.time.Clock and delta time
    - Handle VIDEORESIZE events for responsive desktop embedding
    - Wrap the loop in async for pygbag (WASM export)

Architecture note:
    main.py is intentionally thin. It owns pygame lifecycle and the
    window — nothing else. All game logic lives in core/game.py.

Frame order:
    Every event of a frame is handed to Game before game.update(dt)
    advances the clock, so a winning click and the final second in the
    same frame resolve as a win.

Usage (local):
    python main.py
    SPOTDIFF_DEV=1 python main.py        # editor, export and import

Usage (WASM export):
    pygbag main.py
"""

import asyncio
import logging

import pygame

from core.errors import LevelLoadError
from core.game import Game
from levels.loader import LevelCatalog
from levels.store import JsonFileStore, NullStore
from settings import (
    SCREEN_W, SCREEN_H, FPS, TITLE, MAX_FRAME_DT,
    DEV_MODE, LEVELS_DIR, LEVEL_INDEX_FILE, STORE_DIR,
)
from utils.logging import setup_logging
from utils.scaler import Scaler

logger = logging.getLogger(__name__)

# ── Window configuration ──────────────────────────────────────────────────────
# pygbag will override this with the canvas size.
_WINDOW_W = SCREEN_W
_WINDOW_H = SCREEN_H

_MOUSE_EVENTS = (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION)


def build_game() -> Game:
    """Create the Game with its catalog and store, and load the first level."""
    store = JsonFileStore(STORE_DIR) if DEV_MODE else NullStore()
    load_error = None
    catalog = None
    try:
        catalog = LevelCatalog.from_index(LEVELS_DIR / LEVEL_INDEX_FILE)
    except LevelLoadError as exc:
        logger.error("level index unavailable: %s", exc)
        load_error = f"Could not read the level index: {exc}"

    game = Game(catalog, store=store, dev_mode=DEV_MODE)
    game.boot(load_error)
    return game


async def main() -> None:
    """Async main loop — compatible with both CPython and pygbag WASM.

    Each iteration yields to the event loop via asyncio.sleep(0), which
    pygbag uses to hand control back to the browser.
    """
    setup_logging()
    pygame.init()
    logger.info("starting %s (dev mode %s)", TITLE, "on" if DEV_MODE else "off")

    # ── Window setup ──────────────────────────────────────────────────────────
    window = pygame.display.set_mode((_WINDOW_W, _WINDOW_H), pygame.RESIZABLE)
    pygame.display.set_caption(TITLE)

    # Native resolution surface, every frame is drawn here first
    game_surface = pygame.Surface((SCREEN_W, SCREEN_H))
    scaler = Scaler(_WINDOW_W, _WINDOW_H)

    # ── Subsystems ────────────────────────────────────────────────────────────
    clock = pygame.time.Clock()
    game = build_game()

    # ── Main loop ─────────────────────────────────────────────────────────────
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0
        dt = min(dt, MAX_FRAME_DT)      # prevents a clock jump after a stall

        # ── Event handling ────────────────────────────────────────────────────
        for event in pygame.event.get():

            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.VIDEORESIZE:
                scaler.update(event.w, event.h)

            elif event.type in _MOUSE_EVENTS:
                # Presses only count inside the game area; motion and
                # release must always arrive so drags can end cleanly.
                if event.type == pygame.MOUSEBUTTONDOWN and not scaler.in_bounds(*event.pos):
                    continue
                # Rebuilt with the translated pos
                translated = pygame.event.Event(
                    event.type, {**event.dict, "pos": scaler.to_game(*event.pos)})
                game.handle_event(translated)

            elif event.type in (pygame.KEYDOWN, pygame.DROPFILE):
                game.handle_event(event)

        # ── Update ────────────────────────────────────────────────────────────
        game.update(dt)

        # ── Render ────────────────────────────────────────────────────────────
        game.render(game_surface)
        scaler.blit(window, game_surface)
        pygame.display.flip()

        # ── Yield to browser (pygbag) ─────────────────────────────────────────
        await asyncio.sleep(0)

    # ── Cleanup ───────────────────────────────────────────────────────────────
    pygame.quit()
    logger.info("bye")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
