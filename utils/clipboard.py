"""
utils/clipboard.py — System clipboard access for level export / import.

Thin wrapper around pygame.scrap. The scrap module needs an open display
and is not available on every platform or pygame build; any failure is
raised as ClipboardUnavailable so game.py can report it without
affecting game or editor state.
"""

import logging

import pygame

from core.errors import ClipboardUnavailable

logger = logging.getLogger(__name__)

_initialized = False


def _ensure_scrap() -> None:
    """Initialise pygame.scrap once. Requires pygame.display to be set up."""
    global _initialized
    if _initialized:
        return
    try:
        pygame.scrap.init()
    except (pygame.error, AttributeError, NotImplementedError) as exc:
        raise ClipboardUnavailable(f"clipboard not available: {exc}") from exc
    _initialized = True


def copy_text(text: str) -> None:
    """Put text on the system clipboard.

    Raises:
        ClipboardUnavailable: If the clipboard cannot be written.
    """
    _ensure_scrap()
    try:
        if hasattr(pygame.scrap, "put_text"):
            pygame.scrap.put_text(text)
        else:
            pygame.scrap.put(pygame.SCRAP_TEXT, text.encode("utf-8"))
    except (pygame.error, NotImplementedError) as exc:
        raise ClipboardUnavailable(f"could not copy to clipboard: {exc}") from exc
    logger.info("copied %d characters to the clipboard", len(text))


def paste_text() -> str:
    """Read text from the system clipboard.

    Raises:
        ClipboardUnavailable: If the clipboard cannot be read or is empty.
    """
    _ensure_scrap()
    try:
        if hasattr(pygame.scrap, "get_text"):
            text = pygame.scrap.get_text()
        else:
            raw = pygame.scrap.get(pygame.SCRAP_TEXT)
            text = raw.decode("utf-8", errors="replace").rstrip("\x00") if raw else ""
    except (pygame.error, NotImplementedError) as exc:
        raise ClipboardUnavailable(f"could not read the clipboard: {exc}") from exc
    if not text:
        raise ClipboardUnavailable("the clipboard is empty")
    return text
