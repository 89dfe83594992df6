"""
settings.py — Global constants for Spot the Difference.

All magic numbers live here. No other module should hardcode colors,
dimensions, timing values, or scoring defaults. Import what you need with:
    from settings import COLOR, SCREEN_W, ...

A handful of values can be overridden from the environment so an author
can point the game at a different level folder or turn on dev mode
without touching code:
    SPOTDIFF_LEVELS_DIR   directory holding index.json + level descriptors
    SPOTDIFF_STORE_DIR    directory for authored marker files (dev mode)
    SPOTDIFF_DEV          "1" / "true" enables the level editor
    SPOTDIFF_LOG_LEVEL    DEBUG, INFO, WARNING, ...
    SPOTDIFF_LOG_FILE     optional path for a log file
"""

import os
from pathlib import Path

_ROOT = Path(__file__).resolve().parent

# ── Screen ────────────────────────────────────────────────────────────────────
SCREEN_W = 1280
SCREEN_H = 720
FPS = 60
TITLE = "Spot the Difference"

# ── Colors ────────────────────────────────────────────────────────────────────
COLOR = {
    "background":   (245, 243, 255),   # #F5F3FF
    "panel":        (255, 255, 255),   # #FFFFFF
    "panel_border": (221, 214, 254),   # #DDD6FE
    "highlight":    (124,  58, 237),   # #7C3AED: primary accent
    "accent":       (219,  39, 119),   # #DB2777: secondary accent
    "timer":        (229,  57,  53),   # #E53935
    "chrome":       (107, 114, 128),   # #6B7280
    "text":         ( 17,  24,  39),   # #111827
    "text_light":   (255, 255, 255),   # white text on dark panels
    "hit":          ( 16, 185, 129),   # emerald: found difference
    "miss":         (244,  63,  94),   # rose: wrong click
    "hint":         (250, 204,  21),   # amber: revealed after timeout
    "editor":       ( 37,  99, 235),   # blue: editor handles
    "placeholder":  (203, 213, 225),   # missing image fill
    "overlay":      ( 15,  23,  42),   # modal backdrop
}

DIFFICULTY_COLORS = {
    "beginner":     (( 209, 250, 229), ( 4, 120,  87)),
    "intermediate": (( 255, 237, 213), (194,  65,  12)),
    "advanced":     (( 255, 228, 230), (190,  18,  60)),
}
DIFFICULTY_FALLBACK = ((241, 245, 249), (51, 65, 85))

# ── UI Layout (relative to 1280×720) ─────────────────────────────────────────
HEADER_H       = 96    # px: title, level name, stats
BAR_H          = 10    # px: timer / progress bars under the header
PANE_PADDING   = 24    # px: gap around and between the two image panes
FOOTER_H       = 36    # px: status line and key hints
WIDGET_DEPTH   = 6     # px: raised panel offset for buttons and badges

# ── Fonts ─────────────────────────────────────────────────────────────────────
FONT_FAMILY  = "dejavusans"
FONT_SIZE_XL = 34
FONT_SIZE_LG = 22
FONT_SIZE_MD = 16
FONT_SIZE_SM = 13

# ── Timing ────────────────────────────────────────────────────────────────────
DEFAULT_TIME_LIMIT_S = 120     # used when a level omits timeLimit
MISS_DISPLAY_S       = 0.6     # lifetime of the wrong-click marker
STATUS_DISPLAY_S     = 3.0     # lifetime of a footer status message
MAX_FRAME_DT         = 0.05    # clamp: prevents a burst of ticks on tab switch

# ── Scoring defaults ──────────────────────────────────────────────────────────
# Any field a level leaves unset falls back to these.
DEFAULT_POINTS_PER_HIT   = 200
DEFAULT_PENALTY_PER_MISS = 50   # magnitude; subtracted on a miss
DEFAULT_BONUS_PER_SECOND = 10

# ── Editor ────────────────────────────────────────────────────────────────────
DEFAULT_RADIUS     = 8.0    # % of the shorter image side for new circles
DEFAULT_RECT_SIZE  = 10.0   # % used when a rect omits width/height
MIN_RADIUS         = 1.0
MIN_RECT_SIZE      = 2.0
NUDGE_COARSE       = 0.8    # % per arrow key press
NUDGE_FINE         = 0.2    # % per arrow key press with Shift held
RESIZE_STEP        = 0.5    # % per +/- key press
COORD_DECIMALS     = 2      # exported JSON keeps two decimals
EDIT_HANDLE_PX     = 11     # radius of the numbered marker handle


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes")."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Paths & runtime ───────────────────────────────────────────────────────────
LEVELS_DIR = Path(os.environ.get("SPOTDIFF_LEVELS_DIR", _ROOT / "assets" / "levels"))
LEVEL_INDEX_FILE = "index.json"
STORE_DIR = Path(os.environ.get("SPOTDIFF_STORE_DIR", _ROOT / ".authoring"))
DEV_MODE = _env_flag("SPOTDIFF_DEV")

LOG_LEVEL = os.environ.get("SPOTDIFF_LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("SPOTDIFF_LOG_FILE") or None
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
