"""Revision history rows from already-extracted version control tag data."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Iterable, List, NamedTuple

import yaml

from .document import RevisionHistoryEntry
from .errors import ConfigError

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class TagRecord(NamedTuple):
    name: str
    timestamp: str
    message: str = ""


def format_display_date(iso_date: str) -> str:
    """Format an ISO 8601 date as "d Mon YYYY".

    Example:
        "2026-07-06T12:34:56+00:00" -> "6 Jul 2026"
        "2024-13-01"                -> "2024-13-01"  (unparseable input is returned unchanged)
    """
    date_part = iso_date.split("T", 1)[0]
    parts = date_part.split("-")
    if len(parts) >= 3 and all(part.isascii() and part.isdigit() for part in parts[:3]):
        year, month, day = int(parts[0]), int(parts[1]), int(parts[2])
        if 1 <= month <= 12:
            return f"{day} {MONTH_ABBREVIATIONS[month - 1]} {year}"
    return iso_date


def build_revision_history(tags: Iterable[TagRecord]) -> List[RevisionHistoryEntry]:
    # Rows follow the supplied (chronological) order; no resorting.
    return [
        RevisionHistoryEntry(
            version=tag.name,
            date=format_display_date(tag.timestamp),
            description=tag.message.strip(),
        )
        for tag in tags
    ]


def _timestamp_text(value: object) -> str:
    # YAML turns unquoted ISO timestamps into date/datetime objects
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "")


def load_tag_records(path: Path) -> List[TagRecord]:
    """Read tag data exported by an external tool: a JSON or YAML list of {tag, date, message}."""
    if not path.exists():
        raise FileNotFoundError(f"Tags file not found: {path}")

    content = path.read_text(encoding="utf-8")
    if not content.strip():
        return []

    if path.suffix.lower() == ".json":
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ConfigError("failed to parse JSON tags file", source=path) from exc
    else:
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError("failed to parse YAML tags file", source=path) from exc

    if parsed is None:
        return []
    if not isinstance(parsed, list):
        raise ConfigError("tags file root must be a list of tag entries", source=path)

    records: List[TagRecord] = []
    for entry in parsed:
        if not isinstance(entry, dict) or "tag" not in entry:
            raise ConfigError(f"tag entry must be a mapping with a 'tag' key: {entry}", source=path)
        records.append(
            TagRecord(
                name=str(entry["tag"]),
                timestamp=_timestamp_text(entry.get("date")),
                message=str(entry.get("message") or ""),
            )
        )
    return records
