"""
levels/loader.py — Level index and descriptor loading for Spot the Difference.

LevelCatalog is the only place that touches the level files on disk. It
reads the index once, loads descriptors on demand, and knows the
rotation order for "next level".

Every failure (missing file, bad JSON, schema violation) is raised as
LevelLoadError so game.py can show a message and keep the previously
loaded level playable.

Usage:
    catalog = LevelCatalog.from_index(LEVELS_DIR / "index.json")
    level = catalog.load(catalog.entries[0].id, store=store)
    upcoming = catalog.next_after(level.id)
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, TYPE_CHECKING

from pydantic import ValidationError

from core.errors import LevelLoadError
from core.markers import Level
from levels.schema import LevelDescriptor, LevelIndex, LevelIndexEntry

if TYPE_CHECKING:
    from levels.store import MarkerStore

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any:
    """Read and parse a JSON file, mapping every failure to LevelLoadError."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as exc:
        raise LevelLoadError(f"{path.name} not found") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise LevelLoadError(f"could not read {path.name}: {exc}") from exc


class LevelCatalog:
    """The set of playable levels and their rotation order.

    Attributes:
        directory: Folder holding the index and level descriptors.
        entries:   Index rows in rotation order.
    """

    def __init__(self, directory: Path, entries: list[LevelIndexEntry]) -> None:
        self.directory = Path(directory)
        self.entries = list(entries)

    @classmethod
    def from_index(cls, index_path: Path) -> LevelCatalog:
        """Read an index file.

        Raises:
            LevelLoadError: If the index is missing or invalid.
        """
        index_path = Path(index_path)
        payload = read_json(index_path)
        try:
            index = LevelIndex.model_validate(payload)
        except ValidationError as exc:
            raise LevelLoadError(f"invalid level index: {exc.error_count()} error(s)") from exc
        logger.info("level index %s: %d level(s)", index_path, len(index.levels))
        return cls(index_path.parent, index.levels)

    # ── Rotation ──────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.entries)

    def index_of(self, level_id: str) -> int:
        """Return the rotation position of a level, or -1 if unknown."""
        for i, entry in enumerate(self.entries):
            if entry.id == level_id:
                return i
        return -1

    def entry(self, level_id: str) -> LevelIndexEntry:
        i = self.index_of(level_id)
        if i < 0:
            raise LevelLoadError(f"unknown level {level_id!r}")
        return self.entries[i]

    def next_after(self, level_id: str) -> str:
        """Return the id of the level after level_id, wrapping at the end.

        With a single level (or an unknown id) the first entry is returned,
        which for one level means replaying the same one.

        Raises:
            LevelLoadError: If the catalog is empty.
        """
        if not self.entries:
            raise LevelLoadError("no levels available")
        i = self.index_of(level_id)
        return self.entries[(i + 1) % len(self.entries)].id

    # ── Loading ───────────────────────────────────────────────────────────────

    def resolve_asset(self, ref: str) -> str:
        """Resolve an image reference relative to the levels directory."""
        if not ref:
            return ref
        path = Path(ref)
        if path.is_absolute():
            return str(path)
        return str(self.directory / path)

    def load(self, level_id: str, store: MarkerStore | None = None) -> Level:
        """Load and validate one level descriptor.

        Args:
            level_id: Id from the index.
            store:    Authoring store. When it holds markers for this
                      level they replace the descriptor's own.

        Raises:
            LevelLoadError: If the descriptor is missing or invalid.
        """
        entry = self.entry(level_id)
        payload = read_json(self.directory / entry.file)
        if not isinstance(payload, dict):
            raise LevelLoadError(f"{entry.file} must contain a JSON object")
        payload.setdefault("id", entry.id)
        try:
            descriptor = LevelDescriptor.model_validate(payload)
        except ValidationError as exc:
            raise LevelLoadError(
                f"{entry.file} is not a valid level: {exc.error_count()} error(s)"
            ) from exc

        level = descriptor.to_level(source=payload)
        # The index id drives rotation and the authoring store key
        level.id = entry.id
        level.original_image = self.resolve_asset(level.original_image)
        level.modified_image = self.resolve_asset(level.modified_image)
        if not level.name:
            level.name = entry.name
        if store is not None:
            stored = store.load(level.id)
            if stored is not None:
                logger.info("using %d authored marker(s) for %r from store",
                            len(stored), level.id)
                level.markers = stored
        logger.info("loaded %s: %r, %d difference(s)", entry.file, level.name, len(level.markers))
        return level
