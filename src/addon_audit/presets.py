"""Parsing helpers for launcher preset documents."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Union
from xml.etree import ElementTree as ET

from .errors import FileAccessError, InvalidPresetPathError, PresetParseError
from .models import MAX_ID, LocalAddon, Preset, PresetAddon, RemoteAddon

logger = logging.getLogger(__name__)

STEAM_PREFIX = "steam:"
LOCAL_PREFIX = "local:"

RFC3339_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt ]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)
STEAM_ID_PATTERN = re.compile(r"\+?\d+", re.ASCII)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 date-time, keeping its UTC offset.

    Fractional seconds beyond microsecond precision are truncated.
    """

    match = RFC3339_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"not an RFC 3339 date-time: {value!r}")

    offset = match.group("offset")
    if offset in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid UTC offset: {offset!r}")
        delta = timedelta(hours=hours, minutes=minutes)
        tzinfo = timezone(-delta if offset[0] == "-" else delta)

    fraction = (match.group("fraction") or "0")[:6].ljust(6, "0")
    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        int(fraction),
        tzinfo=tzinfo,
    )


def parse_addon_reference(value: str) -> PresetAddon:
    """Parse a ``steam:<id>`` or ``local:<path>`` identifier."""

    if value.startswith(STEAM_PREFIX):
        raw_id = value[len(STEAM_PREFIX):]
        if STEAM_ID_PATTERN.fullmatch(raw_id) and int(raw_id) <= MAX_ID:
            return RemoteAddon(int(raw_id))
    elif value.startswith(LOCAL_PREFIX):
        return LocalAddon(Path(value[len(LOCAL_PREFIX):]))
    raise ValueError(
        f"invalid value {value!r}, expected a string prefixed with \"steam:\" followed by "
        "an integer, or a string prefixed with \"local:\" followed by a path"
    )


def parse_preset(data: Union[str, bytes], name: str) -> Preset:
    """Parse a preset XML document into a :class:`Preset` called *name*."""

    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise PresetParseError(name, str(exc)) from exc

    last_update_elem = root.find("last-update")
    if last_update_elem is None:
        raise PresetParseError(name, "missing field `last-update`")
    published_ids_elem = root.find("published-ids")
    if published_ids_elem is None:
        raise PresetParseError(name, "missing field `published-ids`")

    try:
        last_update = parse_timestamp((last_update_elem.text or "").strip())
        mods: List[PresetAddon] = [
            parse_addon_reference((id_elem.text or "").strip())
            for id_elem in published_ids_elem.findall("id")
        ]
    except ValueError as exc:
        raise PresetParseError(name, str(exc)) from exc

    return Preset(name=name, last_update=last_update, mods=mods)


def preset_name(path: Path) -> str:
    """Derive a preset name from the file name of *path*, without extension."""

    name = path.stem
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidPresetPathError(path) from None
    if not name or name in (".", ".."):
        raise InvalidPresetPathError(path)
    return name


def load_presets(directory: Path) -> Dict[str, Preset]:
    """Load every preset file found directly inside *directory*.

    Regular files are read in name order; sub-directories and symlinks are
    skipped. One malformed preset aborts the load.
    """

    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        raise FileAccessError.for_path(directory, exc) from exc

    presets: Dict[str, Preset] = {}
    for entry in entries:
        try:
            # symlinks are skipped, even when they point at a file
            is_file = not entry.is_symlink() and entry.is_file()
        except OSError as exc:
            raise FileAccessError.for_path(entry, exc) from exc
        if not is_file:
            continue

        try:
            data = entry.read_bytes()
        except OSError as exc:
            raise FileAccessError.for_path(entry, exc) from exc
        name = preset_name(entry)
        presets[name] = parse_preset(data, name)

    logger.info("Loaded %d presets from %s", len(presets), directory)
    return presets


__all__ = [
    "load_presets",
    "parse_addon_reference",
    "parse_preset",
    "parse_timestamp",
    "preset_name",
]
