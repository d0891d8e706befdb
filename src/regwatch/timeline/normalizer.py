from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date
from typing import Any, Optional

from regwatch.exceptions import NormalizationFailure
from regwatch.sync.decoder import RawTable, RowRecord, cell_text, parse_flag
from regwatch.timeline.details import extract_details
from regwatch.timeline.models import Milestone

logger = logging.getLogger(__name__)

SHEET_DATE_RE = re.compile(r"Date\((\d+),(\d+),(\d+)")
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

LAST_UPDATED_KEY = "lastUpdated"

__all__ = [
    "normalize_milestones",
    "normalize_config",
    "resolve_last_updated",
    "parse_sheet_date",
    "parse_flag",
    "parse_catalyst_order",
    "table_records",
]


def table_records(table: Optional[RawTable], feed: str) -> list[RowRecord]:
    if table is None:
        raise NormalizationFailure(f"No decoded table for the {feed} feed")
    return table.records()


def parse_sheet_date(value: Any) -> Optional[str]:
    """
    Sheets emit dates either as ISO text or as ``Date(y,m,d)`` with a
    zero-based month. Anything else is passed through as text.
    """
    if value is None or value == "":
        return None
    text = cell_text(value)
    if text.startswith("Date("):
        match = SHEET_DATE_RE.match(text)
        if match:
            year, month, day = match.groups()
            return f"{year}-{int(month) + 1:02d}-{int(day):02d}"
    return text


def parse_catalyst_order(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return None
    match = LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def _normalize_row(record: RowRecord) -> Optional[Milestone]:
    milestone_id = record.text("id").strip()
    if not milestone_id:
        return None

    return Milestone(
        id=milestone_id,
        type=record.text("type"),
        date=parse_sheet_date(record.get("date")),
        title=record.text("title"),
        subtitle=record.optional_text("subtitle"),
        description=record.optional_text("description"),
        status=record.text("status"),
        is_risk=record.flag("isRisk"),
        is_catalyst=record.flag("isCatalyst"),
        is_outcome=record.flag("isOutcome"),
        catalyst_order=parse_catalyst_order(record.get("catalystOrder")),
        details=extract_details(record),
    )


def normalize_milestones(records: Iterable[RowRecord]) -> list[Milestone]:
    milestones: list[Milestone] = []
    dropped = 0
    for record in records:
        milestone = _normalize_row(record)
        if milestone is None:
            dropped += 1
            continue
        milestones.append(milestone)

    logger.info("milestones normalized", extra={"kept": len(milestones), "dropped": dropped})
    return milestones


def normalize_config(records: Iterable[RowRecord]) -> dict[str, str]:
    config: dict[str, str] = {}
    for record in records:
        key = record.text("key").strip()
        if not key:
            continue
        config[key] = record.text("value")
    return config


def resolve_last_updated(config: dict[str, str], today: date) -> str:
    raw = config.get(LAST_UPDATED_KEY)
    return parse_sheet_date(raw) or today.isoformat()
