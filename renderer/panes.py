"""
renderer/panes.py — Image panes and marker overlays.

Draws the two images side by side and everything layered on top of them:
    - found-difference rings on both panes
    - the wrong-click cross on the pane that was clicked
    - hint outlines for unfound differences after a timeout
    - editor outlines and numbered drag handles

Images are loaded once per level through PaneImages. A missing or
unreadable image is logged and replaced with a labelled placeholder so a
half-authored level can still be opened in the editor.
"""

from __future__ import annotations
import logging
import math

import pygame

from core.geometry import Circle, Polygon, Rect, Shape
from core.markers import Level, Marker
from settings import (
    COLOR, EDIT_HANDLE_PX,
    FONT_SIZE_MD, FONT_SIZE_SM,
)
from renderer.widgets import draw_flat_panel, draw_text
from utils.color import with_alpha
from utils.scaler import PaneLayout

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = (800, 600)


# ── Image loading ─────────────────────────────────────────────────────────────

def load_image(path: str) -> pygame.Surface | None:
    """Load an image, returning None (and logging) if it cannot be used."""
    if not path:
        return None
    try:
        image = pygame.image.load(path)
    except (pygame.error, FileNotFoundError, OSError) as exc:
        logger.warning("could not load image %s: %s", path, exc)
        return None
    if pygame.display.get_surface() is not None:
        image = image.convert()
    return image


class PaneImages:
    """The two images of the active level, with a per-size scale cache.

    Attributes:
        originals: Pane name → loaded surface (None when missing).
    """

    def __init__(self, level: Level) -> None:
        self.originals: dict[str, pygame.Surface | None] = {
            "original": load_image(level.original_image),
            "modified": load_image(level.modified_image),
        }
        self._scaled: dict[tuple[str, int, int], pygame.Surface] = {}

    def natural_size(self, name: str) -> tuple[int, int]:
        image = self.originals.get(name)
        return image.get_size() if image is not None else PLACEHOLDER_SIZE

    def scaled(self, name: str, size: tuple[int, int]) -> pygame.Surface | None:
        image = self.originals.get(name)
        if image is None:
            return None
        key = (name, size[0], size[1])
        if key not in self._scaled:
            self._scaled[key] = pygame.transform.smoothscale(image, size)
        return self._scaled[key]


def draw_pane(surface: pygame.Surface, rect: pygame.Rect, image: pygame.Surface | None,
              caption: str) -> None:
    """Draw one image (or its placeholder) with a caption above it."""
    draw_text(surface, caption, (rect.x, rect.y - 20), FONT_SIZE_SM, COLOR["chrome"], bold=True)
    if image is not None:
        surface.blit(image, rect.topleft)
    else:
        draw_flat_panel(surface, rect, COLOR["placeholder"], COLOR["panel_border"], radius=4)
        draw_text(surface, "image not available", rect.center, FONT_SIZE_MD,
                  COLOR["chrome"], align="center")
    pygame.draw.rect(surface, COLOR["panel_border"], rect, 2)


# ── Shape outlines ────────────────────────────────────────────────────────────

def _outline_circle(surface, layout, pane, shape: Circle, color, width) -> None:
    rect = layout.rects[pane]
    center = layout.to_screen(pane, shape.x, shape.y)
    radius = max(1, int(shape.radius / 100.0 * min(rect.width, rect.height)))
    pygame.draw.circle(surface, color, center, radius, width)


def _outline_rect(surface, layout, pane, shape: Rect, color, width) -> None:
    x0, y0 = layout.to_screen(pane, shape.x, shape.y)
    x1, y1 = layout.to_screen(pane, shape.x + shape.width, shape.y + shape.height)
    pygame.draw.rect(surface, color, pygame.Rect(x0, y0, max(1, x1 - x0), max(1, y1 - y0)), width)


def _outline_polygon(surface, layout, pane, shape: Polygon, color, width) -> None:
    points = [layout.to_screen(pane, x, y) for x, y in shape.points]
    pygame.draw.polygon(surface, color, points, width)


# Format: ShapeClass: outline drawer
_OUTLINES = {
    Circle:  _outline_circle,
    Rect:    _outline_rect,
    Polygon: _outline_polygon,
}


def draw_outline(surface: pygame.Surface, layout: PaneLayout, pane: str, shape: Shape,
                 color, width: int = 2) -> None:
    """Draw a shape's outline on a pane."""
    _OUTLINES[type(shape)](surface, layout, pane, shape, color, width)


# ── Feedback markers ──────────────────────────────────────────────────────────

def draw_hit_marker(surface: pygame.Surface, pos: tuple[int, int]) -> None:
    """Emerald ring with a tick, drawn on every found difference."""
    overlay = pygame.Surface((48, 48), pygame.SRCALPHA)
    pygame.draw.circle(overlay, with_alpha(COLOR["hit"], 70), (24, 24), 22)
    pygame.draw.circle(overlay, with_alpha(COLOR["hit"], 230), (24, 24), 22, 4)
    pygame.draw.lines(overlay, COLOR["hit"], False, [(14, 25), (21, 32), (34, 16)], 4)
    surface.blit(overlay, (pos[0] - 24, pos[1] - 24))


def draw_miss_marker(surface: pygame.Surface, pos: tuple[int, int], alpha: float = 1.0) -> None:
    """Rose ring with a cross at a wrong click."""
    a = int(255 * max(0.0, min(1.0, alpha)))
    overlay = pygame.Surface((44, 44), pygame.SRCALPHA)
    pygame.draw.circle(overlay, with_alpha(COLOR["miss"], a // 4), (22, 22), 20)
    pygame.draw.circle(overlay, with_alpha(COLOR["miss"], a), (22, 22), 20, 3)
    pygame.draw.line(overlay, with_alpha(COLOR["miss"], a), (14, 14), (30, 30), 4)
    pygame.draw.line(overlay, with_alpha(COLOR["miss"], a), (30, 14), (14, 30), 4)
    surface.blit(overlay, (pos[0] - 22, pos[1] - 22))


def draw_edit_handle(surface: pygame.Surface, pos: tuple[int, int], marker_id: int,
                     selected: bool) -> None:
    """Numbered circular handle the author grabs to drag a marker."""
    color = COLOR["accent"] if selected else COLOR["editor"]
    pygame.draw.circle(surface, COLOR["panel"], pos, EDIT_HANDLE_PX + 2)
    pygame.draw.circle(surface, color, pos, EDIT_HANDLE_PX)
    draw_text(surface, str(marker_id), (pos[0], pos[1] - 8), FONT_SIZE_SM,
              COLOR["text_light"], bold=True, align="center")


# ── Overlay passes ────────────────────────────────────────────────────────────

def draw_found(surface: pygame.Surface, layout: PaneLayout, pane: str,
               markers: list[Marker], found: list[int]) -> None:
    by_id = {m.id: m for m in markers}
    for marker_id in found:
        marker = by_id.get(marker_id)
        if marker is not None:
            draw_hit_marker(surface, layout.to_screen(pane, *marker.shape.center))


def draw_hints(surface: pygame.Surface, layout: PaneLayout, pane: str,
               markers: list[Marker], found: list[int], t: float) -> None:
    """Pulse outlines around every difference the player did not find."""
    width = 2 + int(1.5 * (1 + math.sin(t * 5.0)))
    for marker in markers:
        if marker.id not in found:
            draw_outline(surface, layout, pane, marker.shape, COLOR["hint"], width)


def draw_editor(surface: pygame.Surface, layout: PaneLayout, pane: str,
                markers: list[Marker], selected_id: int | None) -> None:
    for marker in markers:
        selected = marker.id == selected_id
        color = COLOR["accent"] if selected else COLOR["editor"]
        draw_outline(surface, layout, pane, marker.shape, color, 3 if selected else 2)
        draw_edit_handle(surface, layout.to_screen(pane, *marker.shape.anchor),
                         marker.id, selected)
