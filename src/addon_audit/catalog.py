"""Parsing helpers for the launcher's ``Steam.json`` add-on catalog."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .errors import CatalogParseError, FileAccessError
from .models import MAX_ID, Addon

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _field(entry: Mapping[str, Any], key: str, index: int) -> Any:
    try:
        return entry[key]
    except KeyError:
        raise CatalogParseError(f"missing field {key!r}", {"extension": str(index)}) from None


def _parse_str(entry: Mapping[str, Any], key: str, index: int) -> str:
    value = _field(entry, key, index)
    if not isinstance(value, str):
        raise CatalogParseError(f"field {key!r} must be a string", {"extension": str(index)})
    return value


def _parse_uint(value: Any, key: str, index: int) -> int:
    # bool is an int subclass; JSON true/false is never a valid size or id
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_ID:
        raise CatalogParseError(
            f"field {key!r} must be an unsigned 64-bit integer, got {value!r}",
            {"extension": str(index)},
        )
    return value


def _parse_object(value: Any, key: str, index: int) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise CatalogParseError(f"field {key!r} must be an object", {"extension": str(index)})
    return value


def _parse_timestamp(value: Any, key: str, index: int) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogParseError(
            f"field {key!r} must be an integer timestamp, got {value!r}",
            {"extension": str(index)},
        )
    # signed epoch seconds; negative values predate 1970
    try:
        return EPOCH + timedelta(seconds=value)
    except OverflowError:
        raise CatalogParseError(
            f"field {key!r} is out of range: {value}", {"extension": str(index)}
        ) from None


def _parse_dependencies(entry: Mapping[str, Any], index: int) -> List[int]:
    value = _field(entry, "SteamDependencies", index)
    if not isinstance(value, list):
        raise CatalogParseError("field 'SteamDependencies' must be a list", {"extension": str(index)})
    return [_parse_uint(item, "SteamDependencies", index) for item in value]


def _parse_extension(entry: Any, index: int) -> Addon:
    entry = _parse_object(entry, "Extensions", index)
    storage_info = _parse_object(_field(entry, "StorageInfo", index), "StorageInfo", index)
    return Addon(
        id=_parse_uint(_field(storage_info, "PublishedId", index), "PublishedId", index),
        display_name=_parse_str(entry, "DisplayName", index),
        path=Path(_parse_str(entry, "ExtensionPath", index)),
        url=_parse_str(entry, "Url", index),
        file_size=_parse_uint(_field(storage_info, "FileSystemSize", index), "FileSystemSize", index),
        file_space_required=_parse_uint(
            _field(entry, "FileSystemSpaceRequired", index), "FileSystemSpaceRequired", index
        ),
        last_update=_parse_timestamp(_field(storage_info, "LastUpdate", index), "LastUpdate", index),
        dependencies=_parse_dependencies(entry, index),
    )


def parse_catalog(data: Union[str, bytes]) -> Dict[int, Addon]:
    """Parse catalog JSON into :class:`Addon` objects keyed by id.

    Duplicate ids collapse to the last occurrence in the document.
    """

    try:
        document = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CatalogParseError(str(exc)) from exc

    if not isinstance(document, dict) or "Extensions" not in document:
        raise CatalogParseError("missing top-level field 'Extensions'")
    extensions = document["Extensions"]
    if not isinstance(extensions, list):
        raise CatalogParseError("field 'Extensions' must be a list")

    addons: Dict[int, Addon] = {}
    for index, entry in enumerate(extensions):
        addon = _parse_extension(entry, index)
        if addon.id in addons:
            logger.debug("Duplicate add-on id %s in catalog, keeping last entry", addon.id)
        addons[addon.id] = addon
    return addons


def load_catalog(path: Path) -> Dict[int, Addon]:
    """Read and parse the catalog stored at *path*."""

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileAccessError.for_path(path, exc) from exc
    addons = parse_catalog(data)
    logger.info("Loaded %d add-ons from %s", len(addons), path)
    return addons


__all__ = ["load_catalog", "parse_catalog"]
