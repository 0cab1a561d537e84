"""Serialize history entries to CSV or plain text for download.

All functions are pure and return ``""`` for an empty entry list.
"""

import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import NamedTuple

from kpwgen.models import HistoryEntry

CSV_HEADER = ("Platform", "Account", "Password", "Generated At")
TXT_SEPARATOR = "-" * 40
FILENAME_PLATFORM_LIMIT = 3

FORMATS = {
    "csv": "text/csv",
    "txt": "text/plain",
}

_NOT_ALNUM = re.compile(r"[^A-Za-z0-9]")


class ExportFile(NamedTuple):
    content: str
    filename: str
    mime_type: str


# ── Formatting helpers ─────────────────────────────────────────────────────


def _escape_csv_field(field: str) -> str:
    if "," in field or '"' in field or "\n" in field:
        return '"' + field.replace('"', '""') + '"'
    return field


def iso_instant(ts: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. ``2024-01-02T03:04:05.000Z``."""
    utc = ts.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def local_timestamp(ts: datetime) -> str:
    """Local wall-clock time as ``DD/MM/YYYY, HH.MM.SS``."""
    return ts.astimezone().strftime("%d/%m/%Y, %H.%M.%S")


# ── Serializers ────────────────────────────────────────────────────────────


def to_csv(entries: Sequence[HistoryEntry]) -> str:
    if not entries:
        return ""
    rows = [",".join(CSV_HEADER)]
    for entry in entries:
        fields = (entry.platform, entry.account or "", entry.password, iso_instant(entry.timestamp))
        rows.append(",".join(_escape_csv_field(f) for f in fields))
    return "\n".join(rows)


def to_txt(entries: Sequence[HistoryEntry]) -> str:
    if not entries:
        return ""
    blocks = []
    for entry in entries:
        lines = [f"Platform   : {entry.platform}"]
        if entry.account:
            lines.append(f"Account    : {entry.account}")
        lines.append(f"Password   : {entry.password}")
        lines.append(f"Generated  : {local_timestamp(entry.timestamp)}")
        lines.append(TXT_SEPARATOR)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def export_filename(entries: Sequence[HistoryEntry], now: datetime | None = None) -> str:
    """``Kpwgen_<DD-MM-YYYY>_<p1-p2-p3>[_<N>+]`` without an extension.

    The date is the moment of the call, not any entry's timestamp.
    """
    if not entries:
        return ""
    date_str = (now or datetime.now()).strftime("%d-%m-%Y")
    head = entries[:FILENAME_PLATFORM_LIMIT]
    platforms = "-".join(_NOT_ALNUM.sub("", entry.platform) for entry in head)
    if len(entries) > FILENAME_PLATFORM_LIMIT:
        platforms += f"_{len(entries) - FILENAME_PLATFORM_LIMIT}+"
    return f"Kpwgen_{date_str}_{platforms}"


def render_export(
    entries: Sequence[HistoryEntry],
    fmt: str,
    now: datetime | None = None,
) -> ExportFile | None:
    """Build the downloadable file for *fmt* (``"csv"`` or ``"txt"``).

    Returns ``None`` when there is nothing to export.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    if not entries:
        return None
    content = to_csv(entries) if fmt == "csv" else to_txt(entries)
    return ExportFile(content, f"{export_filename(entries, now)}.{fmt}", FORMATS[fmt])
