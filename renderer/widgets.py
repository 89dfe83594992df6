"""
renderer/widgets.py — Drawing primitives shared by the HUD and panes.

Everything on screen that is not an image is built from a few pieces:
    - flat panels (cards, modal bodies, empty bar tracks)
    - raised panels (buttons, badges) — a front face plus a darker
      offset "ledge" so they read as pressable
    - horizontal fill bars (timer, progress)
    - cached fonts and a text blitter that can centre or right-align

Coordinate system: native SCREEN_W×SCREEN_H game pixels.
"""

import pygame

from settings import COLOR, FONT_FAMILY, WIDGET_DEPTH
from utils.color import RGBColor, shade

_fonts: dict[tuple[int, bool], pygame.font.Font] = {}


def font(size: int, bold: bool = False) -> pygame.font.Font:
    """Return a cached font. SysFont falls back to pygame's default face."""
    key = (size, bold)
    if key not in _fonts:
        _fonts[key] = pygame.font.SysFont(FONT_FAMILY, size, bold=bold)
    return _fonts[key]


def draw_text(
    surface: pygame.Surface,
    text: str,
    pos: tuple[int, int],
    size: int,
    color: RGBColor,
    bold: bool = False,
    align: str = "left",
) -> pygame.Rect:
    """Render one line of text.

    Args:
        pos:   Anchor point. Left edge, centre, or right edge depending
               on `align` ("left", "center", "right"); y is the top.
        align: Horizontal alignment around pos.

    Returns:
        The rect the text was drawn into.
    """
    rendered = font(size, bold).render(text, True, color)
    x, y = pos
    if align == "center":
        x -= rendered.get_width() // 2
    elif align == "right":
        x -= rendered.get_width()
    surface.blit(rendered, (x, y))
    return pygame.Rect(x, y, rendered.get_width(), rendered.get_height())


def draw_flat_panel(
    surface: pygame.Surface,
    rect: pygame.Rect,
    color: RGBColor,
    border_color: RGBColor | None = None,
    radius: int = 10,
) -> None:
    """Draw a rounded flat panel with an optional 1px border."""
    pygame.draw.rect(surface, color, rect, border_radius=radius)
    if border_color is not None:
        pygame.draw.rect(surface, border_color, rect, 1, border_radius=radius)


def draw_raised_panel(
    surface: pygame.Surface,
    rect: pygame.Rect,
    color: RGBColor,
    depth: int = WIDGET_DEPTH,
    radius: int = 10,
) -> None:
    """Draw a panel sitting on a darker ledge `depth` pixels below it."""
    ledge = rect.move(0, depth)
    pygame.draw.rect(surface, shade(color, -45), ledge, border_radius=radius)
    pygame.draw.rect(surface, color, rect, border_radius=radius)
    highlight = pygame.Rect(rect.x + radius, rect.y + 2, max(0, rect.width - 2 * radius), 2)
    pygame.draw.rect(surface, shade(color, 35), highlight)


def draw_fill_bar(
    surface: pygame.Surface,
    rect: pygame.Rect,
    fill: float,
    fill_color: RGBColor,
    bg_color: RGBColor = COLOR["panel_border"],
) -> None:
    """Draw a horizontal bar filled left-to-right.

    Args:
        fill: Fill ratio, clamped to [0.0, 1.0].
    """
    fill = max(0.0, min(1.0, fill))
    radius = rect.height // 2
    pygame.draw.rect(surface, bg_color, rect, border_radius=radius)
    filled_w = int(rect.width * fill)
    if filled_w > 0:
        pygame.draw.rect(surface, fill_color,
                         pygame.Rect(rect.x, rect.y, filled_w, rect.height),
                         border_radius=radius)


def draw_badge(
    surface: pygame.Surface,
    text: str,
    pos: tuple[int, int],
    bg: RGBColor,
    fg: RGBColor,
    size: int,
) -> pygame.Rect:
    """Draw a pill-shaped label with its top-left at pos."""
    rendered = font(size, bold=True).render(text, True, fg)
    rect = pygame.Rect(pos[0], pos[1], rendered.get_width() + 20, rendered.get_height() + 8)
    pygame.draw.rect(surface, bg, rect, border_radius=rect.height // 2)
    surface.blit(rendered, (rect.x + 10, rect.y + 4))
    return rect
