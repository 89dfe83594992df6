"""
core/editor.py — Author-only marker editing for Spot the Difference.

LevelEditor mutates the active level's marker collection: add by click,
drag, keyboard nudge, resize, direct field edit, delete. It never runs
during a play-through — every mutation requires the session to be IDLE
and the editor to be active.

Drags are threaded through an explicit immutable DragContext instead of
state captured at pointer-down:

    ctx = editor.begin_drag(marker_id, surface, (mx, my))
    editor.update_drag(ctx, (mx2, my2))     # any number of times
    editor.end_drag(ctx)                    # always, on pointer-up

After each successful change the injected store is told about the new
collection, so an author can iterate without re-editing the descriptor.
A drag persists once, at end_drag().
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.errors import PhaseError
from core.geometry import Circle, Shape, clamp_percent, contains, round_coord
from core.markers import ImageSurface, Marker, next_marker_id
from core.session import GameSession, Phase
from settings import DEFAULT_RADIUS, NUDGE_COARSE, NUDGE_FINE

if TYPE_CHECKING:
    from levels.store import MarkerStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("x", "y", "width", "height", "radius")


@dataclass(frozen=True)
class DragContext:
    """Everything a drag needs, captured at pointer-down.

    Attributes:
        marker_id:      Marker being dragged.
        surface:        Pane the drag started on; deltas are converted
                        using its pixel size.
        pointer_origin: Pointer position in pane pixels at pointer-down.
        shape_origin:   The marker's shape at pointer-down. Every update
                        moves this snapshot, so dragging back restores it.
    """

    marker_id: int
    surface: ImageSurface
    pointer_origin: tuple[float, float]
    shape_origin: Shape


class LevelEditor:
    """Marker authoring over a GameSession's level.

    Attributes:
        session:     The session whose level is edited.
        selected_id: Currently selected marker id, or None.
        _store:      Persistence sink called after each mutation. Optional.
    """

    def __init__(self, session: GameSession, store: MarkerStore | None = None) -> None:
        self.session = session
        self.selected_id: int | None = None
        self._store = store
        self._active = False

    # ── Activation ────────────────────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        """Enter edit mode. Only allowed while the session is idle."""
        if self.session.phase != Phase.IDLE:
            raise PhaseError("the editor can only be opened while idle")
        self._active = True
        self.session.editing = True
        logger.info("editor on for level %r", self.session.level.id)

    def deactivate(self) -> None:
        """Leave edit mode and drop the selection."""
        self._active = False
        self.session.editing = False
        self.selected_id = None
        logger.info("editor off")

    def toggle(self) -> bool:
        """Flip edit mode and return the new state."""
        if self._active:
            self.deactivate()
        else:
            self.activate()
        return self._active

    def _require_editable(self) -> None:
        if not self._active:
            raise PhaseError("edit mode is not active")
        if self.session.phase != Phase.IDLE:
            raise PhaseError(f"markers cannot be edited while {self.session.phase.name}")

    # ── Collection helpers ────────────────────────────────────────────────────

    @property
    def markers(self) -> list[Marker]:
        return self.session.level.markers

    def _get(self, marker_id: int) -> Marker:
        marker = self.session.level.marker(marker_id)
        if marker is None:
            raise KeyError(f"no marker with id {marker_id}")
        return marker

    def _put(self, updated: Marker) -> None:
        level = self.session.level
        level.markers = [updated if m.id == updated.id else m for m in level.markers]

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(self.session.level.id, self.markers)

    # ── Selection ─────────────────────────────────────────────────────────────

    def select(self, marker_id: int) -> None:
        self._require_editable()
        self._get(marker_id)
        self.selected_id = marker_id

    def deselect_all(self) -> None:
        self.selected_id = None

    def marker_at(self, x_pct: float, y_pct: float, surface: ImageSurface) -> Marker | None:
        """Return the topmost marker under a pointer, if any.

        Later markers are drawn on top, so the collection is scanned in
        reverse.
        """
        point = surface.to_pixels(x_pct, y_pct)
        for marker in reversed(self.markers):
            if contains(marker.shape, point, surface.size):
                return marker
        return None

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add_marker(self, x_pct: float, y_pct: float, surface: ImageSurface) -> Marker:
        """Append a default circle where the author clicked and select it.

        Args:
            x_pct:   Click X in percent.
            y_pct:   Click Y in percent.
            surface: Pane clicked. Kept for symmetry with play clicks.
        """
        self._require_editable()
        new_id = next_marker_id(self.markers)
        marker = Marker(
            id=new_id,
            shape=Circle(
                x=round_coord(clamp_percent(x_pct)),
                y=round_coord(clamp_percent(y_pct)),
                radius=DEFAULT_RADIUS,
            ),
            label=f"Difference {new_id}",
        )
        marker.shape.validate()
        self.session.level.markers = [*self.markers, marker]
        self.selected_id = new_id
        logger.debug("added marker %d on %s at (%.2f, %.2f)",
                     new_id, surface.name, marker.shape.x, marker.shape.y)
        self._persist()
        return marker

    def remove_marker(self, marker_id: int) -> None:
        self._require_editable()
        self._get(marker_id)
        self.session.level.markers = [m for m in self.markers if m.id != marker_id]
        if self.selected_id == marker_id:
            self.selected_id = None
        logger.debug("removed marker %d", marker_id)
        self._persist()

    def nudge(self, marker_id: int, dx: float, dy: float) -> Marker:
        """Move a marker's anchor by (dx, dy) percent, clamped and rounded."""
        self._require_editable()
        marker = self._get(marker_id)
        updated = marker.with_shape(marker.shape.moved_by(dx, dy))
        self._put(updated)
        self._persist()
        return updated

    def nudge_selected(self, dx_sign: int, dy_sign: int, fine: bool = False) -> Marker | None:
        """Arrow-key movement for the selected marker.

        Args:
            dx_sign: -1, 0 or 1.
            dy_sign: -1, 0 or 1.
            fine:    Use the fine step (modifier held) instead of coarse.
        """
        if self.selected_id is None:
            return None
        step = NUDGE_FINE if fine else NUDGE_COARSE
        return self.nudge(self.selected_id, dx_sign * step, dy_sign * step)

    def resize(self, marker_id: int, delta: float) -> Marker:
        """Grow or shrink a marker; minimum sizes keep it from collapsing."""
        self._require_editable()
        marker = self._get(marker_id)
        updated = marker.with_shape(marker.shape.resized(delta))
        self._put(updated)
        self._persist()
        return updated

    def set_field(self, marker_id: int, field: str, raw_value) -> bool:
        """Directly set a numeric field from live text input.

        Non-numeric or non-finite input, a field the shape does not have,
        or a value that would make the shape degenerate is ignored.
        Accepted values are rounded like every other edit.

        Returns:
            True if the marker changed.
        """
        self._require_editable()
        if field not in EDITABLE_FIELDS:
            return False
        try:
            value = float(raw_value)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value):
            return False
        value = round_coord(value)
        marker = self._get(marker_id)
        try:
            shape = marker.shape.with_field(field, value)
            shape.validate()
        except (KeyError, ValueError):
            return False
        self._put(marker.with_shape(shape))
        self._persist()
        return True

    # ── Drag ──────────────────────────────────────────────────────────────────

    def begin_drag(
        self,
        marker_id: int,
        surface: ImageSurface,
        pointer: tuple[float, float],
    ) -> DragContext:
        """Select a marker and capture the drag origin.

        Args:
            marker_id: Marker under the pointer.
            surface:   Pane the pointer went down on.
            pointer:   Pointer position in pane pixels.
        """
        self._require_editable()
        marker = self._get(marker_id)
        self.selected_id = marker_id
        return DragContext(
            marker_id=marker_id,
            surface=surface,
            pointer_origin=pointer,
            shape_origin=marker.shape,
        )

    def update_drag(self, ctx: DragContext, pointer: tuple[float, float]) -> Marker | None:
        """Move the dragged marker by the pointer delta since begin_drag.

        Returns:
            The updated Marker, or None if the drag is no longer valid
            (marker deleted, editor closed, or session left IDLE).
        """
        if not self._active or self.session.phase != Phase.IDLE:
            return None
        marker = self.session.level.marker(ctx.marker_id)
        if marker is None:
            return None
        dx_pct = (pointer[0] - ctx.pointer_origin[0]) / ctx.surface.width * 100.0
        dy_pct = (pointer[1] - ctx.pointer_origin[1]) / ctx.surface.height * 100.0
        updated = marker.with_shape(ctx.shape_origin.moved_by(dx_pct, dy_pct))
        self._put(updated)
        return updated

    def end_drag(self, ctx: DragContext) -> None:
        """Finish a drag and persist the final position."""
        if self._active and self.session.level.marker(ctx.marker_id) is not None:
            self._persist()

    # ── Export / import ───────────────────────────────────────────────────────

    def export_markers(self) -> list[dict]:
        """Serialize the collection in descriptor order."""
        return [m.to_dict() for m in self.markers]

    def replace_markers(self, markers: list[Marker]) -> None:
        """Swap in a whole new collection (import or store restore)."""
        self._require_editable()
        self.session.level.markers = list(markers)
        if self.selected_id is not None and self.session.level.marker(self.selected_id) is None:
            self.selected_id = None
        self._persist()
