"""
core/errors.py — Exception taxonomy for Spot the Difference.

Nothing here is fatal. game.py catches the load, import and clipboard
errors and turns them into a status message or modal; the player (or
author) recovers by retrying, re-importing, or carrying on without the
failed feature.

    SpotDiffError
        PhaseError            operation not allowed in the current phase
        InvalidShapeError     degenerate or out-of-range marker shape
        LevelLoadError        index / descriptor missing or invalid
        MalformedImportError  imported JSON rejected, nothing applied
        ClipboardUnavailable  pygame.scrap cannot be used
"""


class SpotDiffError(Exception):
    """Base class for all recoverable game errors."""


class PhaseError(SpotDiffError):
    """Raised when an operation is attempted in the wrong session phase.

    Clicks are only valid while playing; editor mutations only while
    idle with the editor active; starting a run is refused while the
    editor is active.
    """


class InvalidShapeError(SpotDiffError, ValueError):
    """Raised when a marker shape would be degenerate or out of range."""


class LevelLoadError(SpotDiffError):
    """Raised when the level index or a level descriptor cannot be used."""


class MalformedImportError(SpotDiffError, ValueError):
    """Raised when imported level JSON is rejected as a whole."""


class ClipboardUnavailable(SpotDiffError):
    """Raised when the system clipboard cannot be read or written."""
