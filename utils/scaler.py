"""
utils/scaler.py — Window letterboxing and image-pane layout.

Two coordinate conversions live here:

    window → game   The game is drawn at SCREEN_W×SCREEN_H and letterboxed
                    into whatever size the window has. Scaler converts
                    mouse positions back into native game pixels.

    game → pane     Each image is drawn into a pane rect that keeps the
                    image's aspect ratio. PaneLayout converts a game pixel
                    into pane-local pixels and percent, which is what the
                    session and editor work with.

Usage:
    scaler = Scaler(window_w, window_h)
    game_x, game_y = scaler.to_game(mouse_x, mouse_y)

    layout = PaneLayout.side_by_side((800, 600), (800, 600))
    hit = layout.locate(game_x, game_y)   # (name, local_px, local_py) or None
"""

from __future__ import annotations

import pygame

from core.markers import ImageSurface
from settings import (
    SCREEN_W, SCREEN_H,
    HEADER_H, BAR_H, PANE_PADDING, FOOTER_H,
)


class Scaler:
    """Letterboxes the native game resolution into an arbitrary window.

    Attributes:
        scale:     Uniform scale factor applied to the game surface.
        offset_x:  Horizontal letterbox offset in window pixels.
        offset_y:  Vertical letterbox offset in window pixels.
        dest_rect: Where the scaled game surface lands in the window.
    """

    def __init__(self, window_w: int, window_h: int) -> None:
        self.update(window_w, window_h)

    def update(self, window_w: int, window_h: int) -> None:
        """Recompute scale and offsets. Call on every VIDEORESIZE."""
        self.scale = min(window_w / SCREEN_W, window_h / SCREEN_H)
        scaled_w = int(SCREEN_W * self.scale)
        scaled_h = int(SCREEN_H * self.scale)
        self.offset_x = (window_w - scaled_w) // 2
        self.offset_y = (window_h - scaled_h) // 2
        self.dest_rect = pygame.Rect(self.offset_x, self.offset_y, scaled_w, scaled_h)

    def blit(self, window_surface: pygame.Surface, game_surface: pygame.Surface) -> None:
        """Scale the game surface into the window with black letterbox bars."""
        window_surface.fill((0, 0, 0))
        scaled = pygame.transform.smoothscale(game_surface, self.dest_rect.size)
        window_surface.blit(scaled, self.dest_rect.topleft)

    def to_game(self, window_x: float, window_y: float) -> tuple[int, int]:
        """Convert window pixels to native game pixels.

        Points inside a letterbox bar map outside the game area; callers
        check in_bounds() first when that matters.
        """
        return (int((window_x - self.offset_x) / self.scale),
                int((window_y - self.offset_y) / self.scale))

    def in_bounds(self, window_x: float, window_y: float) -> bool:
        return self.dest_rect.collidepoint(window_x, window_y)


def fit_rect(content_size: tuple[int, int], box: pygame.Rect) -> pygame.Rect:
    """Return the largest rect with content_size's aspect ratio centred in box."""
    cw, ch = content_size
    if cw <= 0 or ch <= 0:
        return box.copy()
    scale = min(box.width / cw, box.height / ch)
    w, h = max(1, int(cw * scale)), max(1, int(ch * scale))
    return pygame.Rect(box.x + (box.width - w) // 2, box.y + (box.height - h) // 2, w, h)


class PaneLayout:
    """Screen placement of the two image panes.

    Attributes:
        rects: Pane name → pygame.Rect in game pixels.
    """

    def __init__(self, rects: dict[str, pygame.Rect]) -> None:
        self.rects = rects

    @classmethod
    def side_by_side(
        cls,
        original_size: tuple[int, int],
        modified_size: tuple[int, int],
    ) -> PaneLayout:
        """Place "original" left and "modified" right below the header."""
        top = HEADER_H + 2 * BAR_H + PANE_PADDING
        bottom = SCREEN_H - FOOTER_H - PANE_PADDING
        box_w = (SCREEN_W - 3 * PANE_PADDING) // 2
        box_h = bottom - top
        left_box = pygame.Rect(PANE_PADDING, top, box_w, box_h)
        right_box = pygame.Rect(2 * PANE_PADDING + box_w, top, box_w, box_h)
        return cls({
            "original": fit_rect(original_size, left_box),
            "modified": fit_rect(modified_size, right_box),
        })

    def surface(self, name: str) -> ImageSurface:
        """The pane as an ImageSurface for hit-testing and drags."""
        rect = self.rects[name]
        return ImageSurface(name=name, width=rect.width, height=rect.height)

    def locate(self, game_x: float, game_y: float) -> tuple[str, float, float] | None:
        """Find the pane under a game pixel.

        Returns:
            (pane name, local x, local y) in pane pixels, or None.
        """
        for name, rect in self.rects.items():
            if rect.collidepoint(game_x, game_y):
                return name, game_x - rect.x, game_y - rect.y
        return None

    def local(self, name: str, game_x: float, game_y: float) -> tuple[float, float]:
        """Pane-local pixels for a game pixel, even outside the pane (drags)."""
        rect = self.rects[name]
        return game_x - rect.x, game_y - rect.y

    def to_percent(self, name: str, local_x: float, local_y: float) -> tuple[float, float]:
        """Pane-local pixels → percent, clamped to [0, 100]."""
        rect = self.rects[name]
        x = local_x / rect.width * 100.0
        y = local_y / rect.height * 100.0
        return min(max(x, 0.0), 100.0), min(max(y, 0.0), 100.0)

    def to_screen(self, name: str, x_pct: float, y_pct: float) -> tuple[int, int]:
        """Percent → game pixels on a pane."""
        rect = self.rects[name]
        return (int(rect.x + x_pct / 100.0 * rect.width),
                int(rect.y + y_pct / 100.0 * rect.height))
