"""
levels/transfer.py — Export and import of authored levels.

Export writes the active level's descriptor merged with the live marker
array as pretty-printed JSON, ready for the clipboard or a file.

Import accepts a JSON object that must carry a "differences" array. The
whole payload is validated before anything is applied: either the caller
gets a complete new Level back, or MalformedImportError is raised and the
current level is left exactly as it was.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from core.errors import MalformedImportError
from core.markers import Level
from levels.schema import LevelDescriptor

logger = logging.getLogger(__name__)


def export_level(level: Level) -> str:
    """Return the level descriptor with its live markers as indented JSON."""
    return json.dumps(level.to_descriptor(), indent=2, ensure_ascii=False)


def parse_import(
    text: str,
    current: Level,
    resolve_asset: Optional[Callable[[str], str]] = None,
) -> Level:
    """Build a replacement Level from imported JSON.

    The payload is merged over the current level's descriptor, so an
    import that only carries "differences" keeps the level's images,
    time limit and scoring.

    Args:
        text:          Raw JSON text.
        current:       The level being replaced.
        resolve_asset: Optional resolver for image references the payload
                       supplies (usually LevelCatalog.resolve_asset).

    Returns:
        A new Level with the same id as `current`.

    Raises:
        MalformedImportError: If the text is not a JSON object with a
                              valid "differences" array.
    """
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MalformedImportError(f"not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedImportError("expected a JSON object")
    if not isinstance(payload.get("differences"), list):
        raise MalformedImportError('the JSON must include a "differences" array')

    merged = {**current.source, **payload}
    merged.setdefault("id", current.id)
    try:
        descriptor = LevelDescriptor.model_validate(merged)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedImportError(f"invalid level data at {where}: {first.get('msg')}") from exc

    level = descriptor.to_level(source=merged)
    level.id = current.id
    for attr, key in (("original_image", "originalImage"), ("modified_image", "modifiedImage")):
        if key in payload and resolve_asset is not None:
            setattr(level, attr, resolve_asset(getattr(level, attr)))
        elif key not in payload:
            setattr(level, attr, getattr(current, attr))
    logger.info("imported %d difference(s) into %r", len(level.markers), level.id)
    return level


def read_import_file(path: Path) -> str:
    """Read an import file dropped on the window.

    Raises:
        MalformedImportError: If the file cannot be read.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedImportError(f"could not read {Path(path).name}: {exc}") from exc
