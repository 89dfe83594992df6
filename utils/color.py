"""
utils/color.py — Color helpers for Spot the Difference.

Used by the renderer to tint marker overlays, derive raised-widget
shades from one base color, and shift the timer from calm to urgent as
time runs out.
"""

from typing import Tuple

from settings import DIFFICULTY_COLORS, DIFFICULTY_FALLBACK

RGBColor = Tuple[int, int, int]
RGBAColor = Tuple[int, int, int, int]


def clamp(value: int, lo: int = 0, hi: int = 255) -> int:
    """Clamp an integer channel value to [lo, hi]."""
    return max(lo, min(hi, value))


def shade(color: RGBColor, amount: int) -> RGBColor:
    """Return the color with `amount` added to each channel (negative darkens)."""
    r, g, b = color
    return (clamp(r + amount), clamp(g + amount), clamp(b + amount))


def with_alpha(color: RGBColor, alpha: int) -> RGBAColor:
    """Append an alpha channel for drawing onto SRCALPHA surfaces.

    Args:
        color: Base RGB tuple.
        alpha: 0 (transparent) to 255 (opaque).
    """
    return (color[0], color[1], color[2], clamp(alpha))


def lerp_color(a: RGBColor, b: RGBColor, t: float) -> RGBColor:
    """Linearly interpolate between two colors.

    Args:
        a: Start color.
        b: End color.
        t: Interpolation factor in [0.0, 1.0]. 0 → a, 1 → b.
    """
    t = max(0.0, min(1.0, t))
    return (
        clamp(int(a[0] + (b[0] - a[0]) * t)),
        clamp(int(a[1] + (b[1] - a[1]) * t)),
        clamp(int(a[2] + (b[2] - a[2]) * t)),
    )


def timer_color(fill: float, calm: RGBColor, urgent: RGBColor) -> RGBColor:
    """Blend the timer bar towards `urgent` during the last quarter of the clock."""
    if fill >= 0.25:
        return calm
    return lerp_color(urgent, calm, fill / 0.25)


def difficulty_colors(difficulty: str) -> tuple[RGBColor, RGBColor]:
    """Return (background, text) badge colors for a difficulty tag."""
    return DIFFICULTY_COLORS.get(difficulty.lower(), DIFFICULTY_FALLBACK)
