"""JSON import and export of the whole member collection."""

from datetime import date
import json
import logging
from pathlib import Path
from typing import Callable

from models import ImportResult, Member

logger = logging.getLogger(__name__)

SHAPE_ERROR = "Invalid data format: expected a list of member records."


class ImportFormatError(ValueError):
    """The blob parsed, but is not a list of member records."""


def export_members(members: list[Member]) -> str:
    """Serialize members as a pretty-printed JSON array."""
    return json.dumps([m.to_dict() for m in members], indent=2, ensure_ascii=False)


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"family-tree-{today.isoformat()}.json"


def parse_members(blob: bytes | str) -> list[Member]:
    """
    Decode and parse an exported blob.

    Raises ImportFormatError when the JSON is not a list of objects, and
    ValueError (json.JSONDecodeError, UnicodeDecodeError) when it can't be
    decoded at all. Pathologically nested JSON raises RecursionError.
    """
    if isinstance(blob, bytes):
        blob = blob.decode("utf-8-sig")
    data = json.loads(blob)
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ImportFormatError(SHAPE_ERROR)
    return [Member.from_dict(r) for r in data]


def import_members(store, blob: bytes | str, confirm: Callable[[], bool] | None = None) -> ImportResult:
    """
    Replace the store's collection with the members in `blob`.

    `confirm` is asked after a successful parse; declining leaves the store as
    it was. Parse failures are reported, never raised.
    """
    try:
        members = parse_members(blob)
    except ImportFormatError:
        return ImportResult(False, SHAPE_ERROR)
    except (ValueError, RecursionError) as e:
        logger.warning("Import failed: %s", e)
        return ImportResult(False, f"Import failed: {e}")

    if confirm is not None and not confirm():
        return ImportResult(False, "Import cancelled.")

    store.replace_all(members)
    return ImportResult(True, f"Imported {len(members)} members.", count=len(members))


def read_import_file(store, path: Path, confirm: Callable[[], bool] | None = None) -> ImportResult:
    """Read `path` and import it, reporting I/O errors as a failed result."""
    try:
        blob = Path(path).read_bytes()
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return ImportResult(False, f"Import failed: {e}")
    return import_members(store, blob, confirm=confirm)
