"""
core/game.py — Front-end orchestration for Spot the Difference.

Game owns everything the pygame window needs and routes input to the
pure engine:
    - LevelCatalog  (index, descriptors, rotation)
    - GameSession   (phase, tracker, clock) — the only game state
    - LevelEditor   (dev mode marker authoring)
    - MarkerStore   (dev mode persistence sink)
    - PaneImages / PaneLayout (what is drawn where)

Session phases drive what is on screen:
    IDLE       — images behind the "find the differences" prompt
    PLAYING    — clicks go to session.dispatch(PointerClick(...))
    WON        — victory modal (play again / next level)
    TIMED_OUT  — timeout modal (show hints / try again)

Input ordering:
    main.py hands over every event of a frame before calling update(),
    so a winning click always lands before the clock tick of the same
    frame.

Failures from loading, importing or the clipboard never escape: they
become a modal or a footer status message and the current level stays
playable.

game.py does NOT call pygame.display.flip() or manage the window.
That is main.py's responsibility.
"""

from __future__ import annotations
import logging

import pygame

from core.editor import DragContext, LevelEditor
from core.errors import (
    ClipboardUnavailable, LevelLoadError, MalformedImportError, PhaseError,
)
from core.markers import Level
from core.session import GameSession, LoadLevel, Phase, PointerClick, Restart, StartGame
from levels.loader import LevelCatalog
from levels.store import MarkerStore, NullStore
from levels.transfer import export_level, parse_import, read_import_file
from renderer import panes, ui
from settings import COLOR, EDIT_HANDLE_PX, RESIZE_STEP, STATUS_DISPLAY_S
from utils import clipboard
from utils.scaler import PaneLayout

logger = logging.getLogger(__name__)

_ARROWS = {
    pygame.K_LEFT:  (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_UP:    (0, -1),
    pygame.K_DOWN:  (0, 1),
}

# Key → marker field for typed numeric edits in the editor
_FIELD_KEYS = {
    pygame.K_x: "x",
    pygame.K_y: "y",
    pygame.K_w: "width",
    pygame.K_h: "height",
    pygame.K_r: "radius",
}

_PLAY_HINTS = "Space start  R reset  N next  1-9 level"
_DEV_HINTS = "  E edit"
_EDIT_HINTS = ("click add  drag move  arrows nudge (Shift fine)  +/- size  "
               "Del remove  X/Y/W/H/R set  Ctrl+C export  Ctrl+V import  E done")


class Game:
    """Routes pygame input to the session and editor and draws the result.

    Attributes:
        catalog:  LevelCatalog, or None when the index failed to load.
        session:  GameSession for the active level, or None before the
                  first successful load.
        editor:   LevelEditor bound to session, or None.
        dev_mode: True enables the editor, export and import.
    """

    def __init__(
        self,
        catalog: LevelCatalog | None,
        store: MarkerStore | None = None,
        dev_mode: bool = False,
    ) -> None:
        self.catalog:  LevelCatalog | None = catalog
        self.store:    MarkerStore         = store if store is not None else NullStore()
        self.dev_mode: bool                = dev_mode
        self.session:  GameSession | None  = None
        self.editor:   LevelEditor | None  = None
        self.images:   panes.PaneImages | None = None
        self.layout:   PaneLayout          = PaneLayout.side_by_side(
            panes.PLACEHOLDER_SIZE, panes.PLACEHOLDER_SIZE)
        self._current_id:  str | None         = None
        self._drag:        DragContext | None = None
        self._load_error:  str | None         = None
        self._status:      str | None         = None
        self._status_error: bool              = False
        self._status_timer: float             = 0.0
        self._show_hints:  bool               = False
        self._field_entry: tuple[str, str] | None = None
        self._time:        float              = 0.0

    # ── Level selection ───────────────────────────────────────────────────────

    def boot(self, load_error: str | None = None) -> None:
        """Load the first level in the catalog.

        Args:
            load_error: Message from a failed index load, shown as a modal.
        """
        if load_error:
            self._load_error = load_error
            return
        if self.catalog is None or not self.catalog.entries:
            self._load_error = "No levels found. Check the level index."
            return
        self.select_level(self.catalog.entries[0].id)

    def select_level(self, level_id: str) -> bool:
        """Load a level by id. On failure the previous level stays active.

        Returns:
            True if the level was loaded.
        """
        if self.catalog is None:
            self._load_error = "The level index is not available."
            return False
        self._current_id = level_id
        try:
            level = self.catalog.load(level_id, store=self.store if self.dev_mode else None)
        except LevelLoadError as exc:
            logger.error("loading level %r failed: %s", level_id, exc)
            self._load_error = f"Could not load this level: {exc}"
            return False
        self._load_error = None
        self._install_level(level)
        return True

    def _install_level(self, level: Level) -> None:
        self._cancel_drag()
        self._field_entry = None
        self._show_hints = False
        if self.session is None:
            self.session = GameSession(level)
            self.editor = LevelEditor(self.session, self.store if self.dev_mode else None)
        else:
            self.session.dispatch(LoadLevel(level))
            if self.editor is not None:
                self.editor.deselect_all()
        self._current_id = level.id
        self.images = panes.PaneImages(level)
        self.layout = PaneLayout.side_by_side(
            self.images.natural_size("original"),
            self.images.natural_size("modified"),
        )

    def retry_load(self) -> None:
        """Re-select the current level (the manual retry for load failures)."""
        if self._current_id is not None:
            self.select_level(self._current_id)
        else:
            self.boot()

    # ── Run transitions ───────────────────────────────────────────────────────

    def start_run(self) -> None:
        if self.session is None:
            return
        try:
            self.session.dispatch(StartGame())
        except PhaseError as exc:
            self._flash(str(exc), error=True)
            return
        self._show_hints = False

    def restart(self) -> None:
        """Back to IDLE on the same level."""
        if self.session is None:
            return
        self._cancel_drag()
        self._show_hints = False
        self.session.dispatch(Restart())

    def advance(self) -> None:
        """Move to the next level in rotation; with one level, restart it."""
        if self.session is None or self.catalog is None:
            return
        if self.editor is not None and self.editor.active:
            self._flash("Leave edit mode before switching levels", error=True)
            return
        if len(self.catalog) < 2:
            self.restart()
            return
        self.select_level(self.catalog.next_after(self.session.level.id))

    def pick_level(self, position: int) -> None:
        if self.catalog is None or not 0 <= position < len(self.catalog):
            return
        if self.session is not None and self.session.phase == Phase.PLAYING:
            return
        if self.editor is not None and self.editor.active:
            self._flash("Leave edit mode before switching levels", error=True)
            return
        self.select_level(self.catalog.entries[position].id)

    def toggle_editor(self) -> None:
        if not self.dev_mode or self.editor is None or self.session is None:
            return
        if self.session.phase != Phase.IDLE:
            self._flash("Reset the run before editing", error=True)
            return
        self._cancel_drag()
        self._field_entry = None
        on = self.editor.toggle()
        self._flash("Edit mode on" if on else "Edit mode off")

    def _cancel_drag(self) -> None:
        if self._drag is not None and self.editor is not None:
            self.editor.end_drag(self._drag)
        self._drag = None

    # ── Export / import ───────────────────────────────────────────────────────

    def export_to_clipboard(self) -> None:
        if self.session is None:
            return
        payload = export_level(self.session.level)
        try:
            clipboard.copy_text(payload)
        except ClipboardUnavailable as exc:
            logger.warning("export failed: %s", exc)
            self._flash("Could not copy to the clipboard", error=True)
            return
        self._flash("Level configuration copied to the clipboard")

    def import_text(self, text: str) -> None:
        """Replace the level with imported JSON, or change nothing."""
        if self.session is None or self.editor is None or not self.editor.active:
            self._flash("Open edit mode to import", error=True)
            return
        resolve = self.catalog.resolve_asset if self.catalog is not None else None
        try:
            level = parse_import(text, self.session.level, resolve)
        except MalformedImportError as exc:
            logger.warning("import rejected: %s", exc)
            self._flash(f"Import rejected: {exc}", error=True)
            return
        markers = level.markers
        self._install_level(level)
        self.editor.replace_markers(markers)
        self._flash(f"Imported {len(markers)} difference(s)")

    def import_from_clipboard(self) -> None:
        try:
            text = clipboard.paste_text()
        except ClipboardUnavailable as exc:
            self._flash(str(exc), error=True)
            return
        self.import_text(text)

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance time-based state by dt seconds. Call after handle_event()."""
        self._time += dt
        if self._status_timer > 0.0:
            self._status_timer = max(0.0, self._status_timer - dt)
            if self._status_timer == 0.0:
                self._status = None
        if self.session is not None:
            self.session.update(dt)

    def _flash(self, message: str, error: bool = False) -> None:
        self._status = message
        self._status_error = error
        self._status_timer = STATUS_DISPLAY_S

    # ── Event handling ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route one pygame event. Mouse positions must be in game coordinates."""
        if event.type == pygame.KEYDOWN:
            self._handle_key(event)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._handle_pointer_down(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self._handle_pointer_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            # Always tear down, wherever the pointer ended up
            self._cancel_drag()
        elif event.type == pygame.DROPFILE and self.dev_mode:
            try:
                self.import_text(read_import_file(event.file))
            except MalformedImportError as exc:
                self._flash(str(exc), error=True)

    def _modal_open(self) -> bool:
        if self._load_error is not None or self.session is None:
            return True
        phase = self.session.phase
        if phase == Phase.IDLE:
            return not self.session.editing
        if phase == Phase.WON:
            return True
        if phase == Phase.TIMED_OUT:
            return not self._show_hints
        return False

    def _handle_pointer_down(self, pos: tuple[int, int]) -> None:
        if self._modal_open() or self.session is None:
            return
        located = self.layout.locate(*pos)
        if located is None:
            return
        name, local_x, local_y = located
        surface = self.layout.surface(name)
        x_pct, y_pct = self.layout.to_percent(name, local_x, local_y)

        if self.editor is not None and self.editor.active:
            self._field_entry = None
            handle = self._handle_under(name, pos)
            if handle is not None:
                self._drag = self.editor.begin_drag(handle, surface, (local_x, local_y))
                return
            marker = self.editor.marker_at(x_pct, y_pct, surface)
            if marker is not None:
                self.editor.select(marker.id)
            else:
                self.editor.add_marker(x_pct, y_pct, surface)
            return

        if self.session.accepts_clicks:
            self.session.dispatch(PointerClick(x_pct, y_pct, surface))

    def _handle_under(self, pane: str, pos: tuple[int, int]) -> int | None:
        """Id of the edit handle under a game pixel, topmost first."""
        for marker in reversed(self.session.level.markers):
            hx, hy = self.layout.to_screen(pane, *marker.shape.anchor)
            if (hx - pos[0]) ** 2 + (hy - pos[1]) ** 2 <= (EDIT_HANDLE_PX + 2) ** 2:
                return marker.id
        return None

    def _handle_pointer_move(self, pos: tuple[int, int]) -> None:
        if self._drag is None or self.editor is None:
            return
        local = self.layout.local(self._drag.surface.name, *pos)
        if self.editor.update_drag(self._drag, local) is None:
            self._drag = None

    def _handle_key(self, event: pygame.event.Event) -> None:
        if self._field_entry is not None:
            self._handle_field_key(event)
            return

        ctrl = bool(event.mod & (pygame.KMOD_CTRL | pygame.KMOD_META))
        if self.editor is not None and self.editor.active:
            if self._handle_editor_key(event, ctrl):
                return

        key = event.key
        if key == pygame.K_ESCAPE:
            self._load_error = None
        elif key == pygame.K_l:
            self.retry_load()
        elif self._load_error is not None:
            return
        elif key in (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER):
            self._handle_primary()
        elif key == pygame.K_r:
            self.restart()
        elif key == pygame.K_n:
            self.advance()
        elif key == pygame.K_h:
            if self.session is not None and self.session.phase == Phase.TIMED_OUT:
                self._show_hints = True
        elif key == pygame.K_e:
            self.toggle_editor()
        elif ctrl and key == pygame.K_c and self.dev_mode:
            self.export_to_clipboard()
        elif pygame.K_1 <= key <= pygame.K_9:
            self.pick_level(key - pygame.K_1)

    def _handle_primary(self) -> None:
        """Space / Enter: start, or play again after an end state."""
        if self.session is None:
            return
        if self.session.phase == Phase.IDLE:
            self.start_run()
        elif self.session.is_over:
            self.restart()
            self.start_run()

    def _handle_editor_key(self, event: pygame.event.Event, ctrl: bool) -> bool:
        """Editor shortcuts. Returns True if the key was consumed."""
        editor = self.editor
        key = event.key
        selected = editor.selected_id

        if ctrl and key == pygame.K_c:
            self.export_to_clipboard()
            return True
        if ctrl and key == pygame.K_v:
            self.import_from_clipboard()
            return True
        if key == pygame.K_ESCAPE:
            editor.deselect_all()
            return True
        if selected is None:
            return False

        if key in _ARROWS:
            dx, dy = _ARROWS[key]
            editor.nudge_selected(dx, dy, fine=bool(event.mod & pygame.KMOD_SHIFT))
            return True
        if key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            editor.resize(selected, RESIZE_STEP)
            return True
        if key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            editor.resize(selected, -RESIZE_STEP)
            return True
        if key in (pygame.K_DELETE, pygame.K_BACKSPACE):
            editor.remove_marker(selected)
            return True
        if key in _FIELD_KEYS and not ctrl:
            self._field_entry = (_FIELD_KEYS[key], "")
            return True
        return False

    def _handle_field_key(self, event: pygame.event.Event) -> None:
        field, buffer = self._field_entry
        if event.key == pygame.K_ESCAPE:
            self._field_entry = None
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._field_entry = None
            if self.editor is not None and self.editor.selected_id is not None:
                if not self.editor.set_field(self.editor.selected_id, field, buffer):
                    logger.debug("ignored %s=%r", field, buffer)
        elif event.key == pygame.K_BACKSPACE:
            self._field_entry = (field, buffer[:-1])
        elif event.unicode and event.unicode in "0123456789.-":
            self._field_entry = (field, buffer + event.unicode)

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render(self, surface: pygame.Surface) -> None:
        """Draw the whole frame onto the native game surface."""
        surface.fill(COLOR["background"])
        session = self.session
        editing = bool(self.editor and self.editor.active)

        if session is None:
            ui.draw_header(surface, "", "", "")
        else:
            level = session.level
            ui.draw_header(surface, level.name, level.difficulty, level.description, editing)
            ui.draw_stats(surface, session.score, session.found_count, session.total,
                          session.accuracy(), session.time_remaining, session.clock.fill())
            ui.draw_bars(surface, session.clock.fill(), session.progress())
            self._render_panes(surface, session, editing)

        ui.draw_footer(surface, self._footer_status(), self._footer_hints(editing),
                       self._status_error and self._field_entry is None)
        self._render_modal(surface)

    def _render_panes(self, surface: pygame.Surface, session: GameSession, editing: bool) -> None:
        markers = session.level.markers
        miss = session.last_miss
        for name, caption in (("original", "ORIGINAL"), ("modified", "MODIFIED")):
            rect = self.layout.rects[name]
            image = self.images.scaled(name, rect.size) if self.images else None
            panes.draw_pane(surface, rect, image, caption)
            panes.draw_found(surface, self.layout, name, markers, session.found)
            if miss is not None and miss.surface == name:
                panes.draw_miss_marker(surface, self.layout.to_screen(name, miss.x, miss.y))
            if self._show_hints and session.phase == Phase.TIMED_OUT:
                panes.draw_hints(surface, self.layout, name, markers, session.found, self._time)
            if editing:
                panes.draw_editor(surface, self.layout, name, markers, self.editor.selected_id)

    def _render_modal(self, surface: pygame.Surface) -> None:
        session = self.session
        if self._load_error is not None:
            ui.draw_load_error(surface, self._load_error)
        elif session is None:
            return
        elif session.phase == Phase.IDLE and not session.editing:
            ui.draw_welcome(surface, session.total, session.level.time_limit)
        elif session.phase == Phase.WON:
            ui.draw_victory(surface, session.score, session.accuracy(), session.time_remaining,
                            session.bonus, session.level.description)
        elif session.phase == Phase.TIMED_OUT and not self._show_hints:
            ui.draw_timeout(surface, session.found_count, session.total)

    def _footer_status(self) -> str | None:
        if self._field_entry is not None:
            field, buffer = self._field_entry
            return f"{field} = {buffer}_   (Enter to apply, Esc to cancel)"
        return self._status

    def _footer_hints(self, editing: bool) -> str:
        if editing:
            return _EDIT_HINTS
        return _PLAY_HINTS + (_DEV_HINTS if self.dev_mode else "")
