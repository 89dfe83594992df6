"""
levels/store.py — Authoring persistence for Spot the Difference.

While an author edits a level in dev mode, every change to its marker
collection is written to a small per-level store keyed
"differences-{levelId}". On the next load the stored markers override
the descriptor's own, so work survives restarts without touching the
source descriptor.

Store failures are never fatal: they are logged as warnings and the
game carries on with whatever it already has in memory.

Implementations:
    JsonFileStore — one JSON array file per level in a directory
    NullStore     — production mode; remembers nothing
"""

from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from core.markers import Marker
from levels.schema import parse_markers

logger = logging.getLogger(__name__)


def store_key(level_id: str) -> str:
    """Return the store key for a level's markers."""
    return f"differences-{level_id}"


class MarkerStore(ABC):
    """Abstract persistence sink for authored marker collections."""

    @abstractmethod
    def load(self, level_id: str) -> list[Marker] | None:
        """Return the stored markers for a level, or None if nothing is stored."""
        ...

    @abstractmethod
    def save(self, level_id: str, markers: list[Marker]) -> None:
        """Persist the full marker collection for a level."""
        ...

    @abstractmethod
    def clear(self, level_id: str) -> None:
        """Forget the stored markers for a level."""
        ...


class NullStore(MarkerStore):
    """Store that keeps nothing. Used outside dev mode."""

    def load(self, level_id: str) -> list[Marker] | None:
        return None

    def save(self, level_id: str, markers: list[Marker]) -> None:
        pass

    def clear(self, level_id: str) -> None:
        pass


class JsonFileStore(MarkerStore):
    """Writes each level's markers to <directory>/differences-<id>.json.

    Attributes:
        directory: Folder for the store files. Created on first save.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, level_id: str) -> Path:
        return self.directory / f"{store_key(level_id)}.json"

    def load(self, level_id: str) -> list[Marker] | None:
        path = self.path_for(level_id)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                payload = json.load(f)
            if not isinstance(payload, list):
                raise ValueError("stored value is not a list")
            return parse_markers(payload)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("could not read stored markers from %s: %s", path, exc)
            return None

    def save(self, level_id: str, markers: list[Marker]) -> None:
        path = self.path_for(level_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump([m.to_dict() for m in markers], f, indent=2)
        except OSError as exc:
            logger.warning("could not save markers to %s: %s", path, exc)

    def clear(self, level_id: str) -> None:
        try:
            self.path_for(level_id).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not clear stored markers for %r: %s", level_id, exc)
