"""
renderer/ui.py — HUD and modal rendering for Spot the Difference.

Draws all non-image interface elements:
    - Header (title, level name, difficulty badge, description)
    - Stat cards (score, found, accuracy, time)
    - Timer bar and progress bar under the header
    - Footer (status message on the left, key hints on the right)
    - Modals: victory, timeout, load error, welcome

All functions are stateless — they take explicit data arguments and draw
to the provided surface. No global state is read except constants from
settings.py.

Coordinate system: native 1280x720 game space. Scaler handles the rest.
"""

from __future__ import annotations

import pygame

from settings import (
    SCREEN_W, SCREEN_H,
    HEADER_H, BAR_H, FOOTER_H, PANE_PADDING,
    COLOR,
    FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)
from renderer.widgets import (
    draw_badge, draw_fill_bar, draw_flat_panel, draw_raised_panel, draw_text,
)
from utils.color import difficulty_colors, timer_color


def format_time(seconds: int) -> str:
    """Format whole seconds as m:ss."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


# ── Header ────────────────────────────────────────────────────────────────────

def draw_header(
    surface: pygame.Surface,
    level_name: str,
    difficulty: str,
    description: str,
    editing: bool = False,
) -> None:
    """Draw the title block on the left of the header.

    Args:
        level_name:  Active level's display name.
        difficulty:  Difficulty tag, colour-coded when it is a known tier.
        description: One-line level description. Truncated to fit.
        editing:     Show an "EDIT MODE" badge.
    """
    draw_flat_panel(surface, pygame.Rect(0, 0, SCREEN_W, HEADER_H), COLOR["panel"], radius=0)
    pygame.draw.line(surface, COLOR["panel_border"], (0, HEADER_H - 1), (SCREEN_W, HEADER_H - 1))

    draw_text(surface, "Spot the Difference", (PANE_PADDING, 12), FONT_SIZE_XL,
              COLOR["highlight"], bold=True)
    name_rect = draw_text(surface, level_name or "Select a level to begin",
                          (PANE_PADDING, 56), FONT_SIZE_MD, COLOR["text"], bold=True)

    bg, fg = difficulty_colors(difficulty)
    badge = draw_badge(surface, difficulty or "custom", (name_rect.right + 12, 54), bg, fg,
                       FONT_SIZE_SM)
    if editing:
        draw_badge(surface, "EDIT MODE", (badge.right + 8, 54), COLOR["editor"],
                   COLOR["text_light"], FONT_SIZE_SM)

    if description:
        max_chars = 70
        text = description if len(description) <= max_chars else description[:max_chars - 1] + "…"
        draw_text(surface, text, (PANE_PADDING, 78), FONT_SIZE_SM, COLOR["chrome"])


def draw_stats(
    surface: pygame.Surface,
    score: int,
    found: int,
    total: int,
    accuracy: int,
    seconds_left: int,
    time_fill: float,
) -> None:
    """Draw the four stat cards on the right of the header."""
    cards = [
        ("SCORE",    str(score),                COLOR["highlight"]),
        ("FOUND",    f"{found}/{total}",        COLOR["hit"]),
        ("ACCURACY", f"{accuracy}%",            COLOR["accent"]),
        ("TIME",     format_time(seconds_left),
         timer_color(time_fill, COLOR["text"], COLOR["timer"])),
    ]
    card_w, card_h, gap = 120, 64, 12
    x = SCREEN_W - PANE_PADDING - len(cards) * card_w - (len(cards) - 1) * gap
    for label, value, color in cards:
        rect = pygame.Rect(x, 14, card_w, card_h)
        draw_flat_panel(surface, rect, COLOR["background"], COLOR["panel_border"])
        draw_text(surface, label, (rect.centerx, rect.y + 8), FONT_SIZE_SM, COLOR["chrome"],
                  bold=True, align="center")
        draw_text(surface, value, (rect.centerx, rect.y + 28), FONT_SIZE_LG, color,
                  bold=True, align="center")
        x += card_w + gap


def draw_bars(surface: pygame.Surface, time_fill: float, progress: float) -> None:
    """Timer bar directly under the header, progress bar below it."""
    timer_rect = pygame.Rect(0, HEADER_H, SCREEN_W, BAR_H)
    draw_fill_bar(surface, timer_rect, time_fill,
                  timer_color(time_fill, COLOR["highlight"], COLOR["timer"]))
    progress_rect = pygame.Rect(0, HEADER_H + BAR_H, SCREEN_W, BAR_H)
    draw_fill_bar(surface, progress_rect, progress, COLOR["hit"], COLOR["background"])


# ── Footer ────────────────────────────────────────────────────────────────────

def draw_footer(surface: pygame.Surface, status: str | None, hints: str,
                status_is_error: bool = False) -> None:
    y = SCREEN_H - FOOTER_H + 10
    if status:
        color = COLOR["miss"] if status_is_error else COLOR["text"]
        draw_text(surface, status, (PANE_PADDING, y), FONT_SIZE_SM, color, bold=True)
    draw_text(surface, hints, (SCREEN_W - PANE_PADDING, y), FONT_SIZE_SM, COLOR["chrome"],
              align="right")


# ── Modals ────────────────────────────────────────────────────────────────────

def draw_modal(
    surface: pygame.Surface,
    title: str,
    description: str = "",
    lines: list[tuple[str, str]] | None = None,
    actions: list[str] | None = None,
    tone: str = "default",
) -> None:
    """Draw a centred modal over a dimmed backdrop.

    Args:
        title:       Large heading.
        description: Optional sub-heading.
        lines:       Optional (label, value) rows shown as a small table.
        actions:     Key hints shown as raised buttons, e.g. "[Space] Play again".
        tone:        "success", "danger" or "default" — tints the heading band.
    """
    backdrop = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    backdrop.fill((*COLOR["overlay"], 170))
    surface.blit(backdrop, (0, 0))

    lines = lines or []
    actions = actions or []
    width = 560
    height = 150 + 34 * len(lines) + (70 if actions else 0)
    rect = pygame.Rect((SCREEN_W - width) // 2, (SCREEN_H - height) // 2, width, height)
    draw_flat_panel(surface, rect, COLOR["panel"], COLOR["panel_border"], radius=18)

    band = {"success": (236, 253, 245), "danger": (255, 241, 242)}.get(tone)
    if band is not None:
        draw_flat_panel(surface, pygame.Rect(rect.x, rect.y, width, 100), band, radius=18)

    draw_text(surface, title, (rect.x + 32, rect.y + 26), FONT_SIZE_XL, COLOR["text"], bold=True)
    if description:
        text = description if len(description) <= 60 else description[:59] + "…"
        draw_text(surface, text, (rect.x + 32, rect.y + 70), FONT_SIZE_MD, COLOR["chrome"])

    y = rect.y + 120
    for label, value in lines:
        draw_text(surface, label, (rect.x + 32, y), FONT_SIZE_MD, COLOR["chrome"])
        draw_text(surface, value, (rect.right - 32, y), FONT_SIZE_MD, COLOR["text"],
                  bold=True, align="right")
        y += 34

    if actions:
        x = rect.right - 32
        for i, action in enumerate(reversed(actions)):
            label_w = max(150, 14 + 9 * len(action))
            btn = pygame.Rect(x - label_w, rect.bottom - 62, label_w, 40)
            primary = i == 0
            draw_raised_panel(surface, btn, COLOR["highlight"] if primary else COLOR["background"])
            draw_text(surface, action, (btn.centerx, btn.y + 11), FONT_SIZE_SM,
                      COLOR["text_light"] if primary else COLOR["text"], bold=True,
                      align="center")
            x -= label_w + 12


def draw_victory(surface: pygame.Surface, score: int, accuracy: int, seconds_left: int,
                 bonus: int, description: str) -> None:
    draw_modal(
        surface,
        "Level complete!",
        description,
        lines=[
            ("Final score", str(score)),
            ("Accuracy", f"{accuracy}%"),
            ("Time left", format_time(seconds_left)),
            ("Time bonus", f"+{bonus}"),
        ],
        actions=["[Space] Play again", "[N] Next level"],
        tone="success",
    )


def draw_timeout(surface: pygame.Surface, found: int, total: int) -> None:
    draw_modal(
        surface,
        "Time's up",
        "So close! Check the hints or try again.",
        lines=[("Differences found", f"{found}/{total}")],
        actions=["[H] Show hints", "[Space] Try again"],
        tone="danger",
    )


def draw_load_error(surface: pygame.Surface, message: str) -> None:
    draw_modal(
        surface,
        "Could not load",
        message,
        actions=["[Esc] Dismiss", "[L] Retry"],
        tone="danger",
    )


def draw_welcome(surface: pygame.Surface, total: int, time_limit: int) -> None:
    draw_modal(
        surface,
        "Find the differences",
        "Click every spot where the two images differ.",
        lines=[
            ("Differences", str(total)),
            ("Time limit", format_time(time_limit)),
        ],
        actions=["[1-9] Pick level", "[Space] Start"],
    )
