"""
Decoding of Google Visualization ("gviz") query responses.

A gviz response with ``tqx=out:json`` is a JSON table wrapped in a
``google.visualization.Query.setResponse(...)`` call. The table has
``cols`` (each with a ``label``) and ``rows`` (each with ``c``, a list of
cells carrying an optional ``v`` value).
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from regwatch.exceptions import DecodeFailure

logger = logging.getLogger(__name__)

ENVELOPE_RE = re.compile(r"google\.visualization\.Query\.setResponse\(([\s\S]*)\);?")

TRUE_TOKEN = "TRUE"


class RowRecord(Mapping[str, Any]):
    """
    One decoded row, looked up by column label.
    Columns the caller does not know about are simply never read.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Mapping[str, Any]):
        self._cells = dict(cells)

    def __getitem__(self, key: str) -> Any:
        return self._cells[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"RowRecord({self._cells!r})"

    def text(self, name: str) -> str:
        return cell_text(self._cells.get(name))

    def optional_text(self, name: str) -> Optional[str]:
        return self.text(name) or None

    def flag(self, name: str) -> bool:
        return parse_flag(self._cells.get(name))


def parse_flag(value: Any) -> bool:
    """Only the literal "TRUE" or a real boolean true count as set."""
    return value is True or value == TRUE_TOKEN


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class RawTable:
    columns: list[str]
    rows: list[list[Any]] = field(default_factory=list)

    def records(self) -> list[RowRecord]:
        width = len(self.columns)
        records: list[RowRecord] = []
        for row in self.rows:
            padded = list(row[:width]) + [""] * (width - len(row))
            records.append(RowRecord(dict(zip(self.columns, padded))))
        return records


def extract_payload(text: str) -> Optional[str]:
    """Returns the JSON inside the setResponse envelope, or None when absent."""
    if not text:
        return None
    match = ENVELOPE_RE.search(text)
    if not match:
        return None
    return match.group(1)


def decode_response(text: str) -> RawTable:
    payload = extract_payload(text)
    if payload is None:
        raise DecodeFailure("Failed to parse data: gviz response envelope not found")

    try:
        document = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise DecodeFailure(f"Failed to parse data: {exc}") from exc

    if not isinstance(document, dict):
        raise DecodeFailure("Failed to parse data: response is not an object")

    if document.get("status") == "error":
        messages = [
            err.get("detailed_message") or err.get("message") or err.get("reason") or "unknown error"
            for err in document.get("errors") or []
            if isinstance(err, dict)
        ]
        raise DecodeFailure("Sheet query failed: " + ("; ".join(messages) or "unknown error"))

    table = document.get("table")
    if not isinstance(table, dict):
        raise DecodeFailure("Failed to parse data: response has no table")

    cols = table.get("cols")
    rows = table.get("rows")
    if not isinstance(cols, list) or not isinstance(rows, list):
        raise DecodeFailure("Failed to parse data: table is missing cols or rows")

    columns = [_column_label(col) for col in cols]
    decoded_rows = [_row_values(row) for row in rows]

    logger.debug("table decoded", extra={"columns": len(columns), "rows": len(decoded_rows)})
    return RawTable(columns=columns, rows=decoded_rows)


def _column_label(col: Any) -> str:
    if not isinstance(col, dict):
        return ""
    label = col.get("label")
    return "" if label is None else str(label)


def _row_values(row: Any) -> list[Any]:
    cells = row.get("c") if isinstance(row, dict) else None
    if not isinstance(cells, list):
        return []
    values: list[Any] = []
    for cell in cells:
        value = cell.get("v") if isinstance(cell, dict) else None
        values.append("" if value is None else value)
    return values
