"""Render add-on analysis as a static, sortable HTML report."""

from __future__ import annotations

import html
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .errors import ReportGenerationError
from .models import AddonAnalysis

TEMPLATE_PATH = Path(__file__).with_name("templates").joinpath("report.html")
UNKNOWN = "Unknown"

HEADER_CELLS: List[Tuple[str, str]] = [
    ("Name", "The addon's name"),
    ("Last Update", "The last time an update was published for this addon"),
    ("Last Usage", "The last time one of your presets containing this addon was updated"),
    ("Size On Disk", "The file size of this addon on disk"),
    ("Presets", "The number of presets containing this addon"),
    ("Dependencies", "The number of addons this addon depends on"),
    ("Dependents", "The number of addons (that you're subscribed to) that depend on this addon"),
]

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def humanize_delta(delta: timedelta) -> str:
    """Describe *delta* roughly, e.g. ``"3 days ago"`` or ``"in an hour"``."""

    seconds = abs(delta.total_seconds())
    days = seconds / _DAY
    if seconds < 10:
        return "now"
    if seconds < 45:
        text = "a few seconds"
    elif seconds < 90:
        text = "a minute"
    elif seconds < 45 * _MINUTE:
        text = _plural(round(seconds / _MINUTE), "minute")
    elif seconds < 90 * _MINUTE:
        text = "an hour"
    elif seconds < 22 * _HOUR:
        text = _plural(round(seconds / _HOUR), "hour")
    elif seconds < 36 * _HOUR:
        text = "a day"
    elif days < 7:
        text = _plural(round(days), "day")
    elif days < 11:
        text = "a week"
    elif days < 30:
        text = _plural(round(days / 7), "week")
    elif days < 45:
        text = "a month"
    elif days < 320:
        text = _plural(round(days / 30), "month")
    elif days < 548:
        text = "a year"
    else:
        text = _plural(round(days / 365), "year")
    return f"in {text}" if delta > timedelta(0) else f"{text} ago"


def format_size(size: int) -> str:
    """Format *size* bytes with binary units, e.g. ``"1.4 MiB"``."""

    if size < 1024:
        return f"{size} B"
    value = float(size)
    for prefix in "KMGTPE":
        value /= 1024
        if value < 1024 or prefix == "E":
            break
    return f"{value:.1f} {prefix}iB"


def _milliseconds(delta: timedelta) -> int:
    return int(delta / timedelta(milliseconds=1))


def _cell(text: str, *, sort: Optional[str] = None, title: Optional[str] = None) -> str:
    attributes = ""
    if sort is not None:
        attributes += f' data-sort="{html.escape(sort)}"'
    if title is not None:
        attributes += f' title="{html.escape(title)}"'
    return f"<td{attributes}>{html.escape(text)}</td>"


def _render_header() -> str:
    cells = "".join(
        f'<th title="{html.escape(description)}">{html.escape(text)}</th>'
        for text, description in HEADER_CELLS
    )
    return f"<tr>{cells}</tr>"


def _render_row(entry: AddonAnalysis, now: datetime) -> str:
    last_update = entry.last_update - now
    last_usage = entry.last_usage - now if entry.last_usage is not None else None

    name_cell = (
        f'<td><a href="{html.escape(entry.link)}">{html.escape(entry.name)}</a></td>'
    )
    cells = [
        name_cell,
        _cell(
            humanize_delta(last_update),
            sort=str(_milliseconds(last_update)),
            title=format_datetime(entry.last_update),
        ),
        _cell(
            humanize_delta(last_usage) if last_usage is not None else UNKNOWN,
            sort=str(_milliseconds(last_usage)) if last_usage is not None else "0",
            title=format_datetime(entry.last_usage) if entry.last_usage is not None else UNKNOWN,
        ),
        _cell(format_size(entry.file_size), sort=str(entry.file_size)),
        _cell(str(entry.preset_count)),
        _cell(str(entry.dependency_count)),
        _cell(str(entry.dependents_count)),
    ]
    return "<tr>" + "".join(cells) + "</tr>"


def render_table(analysis: Sequence[AddonAnalysis], now: datetime) -> str:
    rows = "\n".join(_render_row(entry, now) for entry in analysis)
    return (
        '<table class="sortable">\n'
        f"<thead>{_render_header()}</thead>\n"
        f"<tbody>\n{rows}\n</tbody>\n"
        "</table>"
    )


def create_report(analysis: Sequence[AddonAnalysis], now: Optional[datetime] = None) -> str:
    """Return a self-contained HTML document for *analysis*.

    Relative times are computed against *now*, which defaults to the current
    UTC time and must be timezone-aware.
    """

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        raise ReportGenerationError("reference time must be timezone-aware")

    try:
        template = TEMPLATE_PATH.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReportGenerationError(f"cannot read template {TEMPLATE_PATH.name}: {exc}") from exc

    replacements = {
        "{{ADDON_COUNT}}": str(len(analysis)),
        "{{GENERATED_AT}}": html.escape(format_datetime(now)),
        "{{REPORT_TABLE}}": render_table(analysis, now),
    }
    for placeholder, value in replacements.items():
        template = template.replace(placeholder, value)
    return template


__all__ = ["HEADER_CELLS", "create_report", "format_size", "humanize_delta", "render_table"]
