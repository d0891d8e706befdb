"""
Rebuilds a milestone's nested ``details`` from flattened sheet columns.

Columns named ``details_<key>`` hold a value directly under ``key``;
``details_<group>_<field>`` hold ``field`` inside the ``group`` mapping.
Nesting stops at two levels: everything after the first separator is the
field key (``details_a_b_c`` -> ``{"a": {"b.c": ...}}``).
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

DETAILS_PREFIX = "details_"
LIST_SEPARATOR = "|"


@dataclass(frozen=True)
class ScalarField:
    key: str
    value: Any

    def render(self) -> Any:
        return self.value


@dataclass(frozen=True)
class ListField:
    key: str
    items: tuple[str, ...]

    def render(self) -> list[str]:
        return list(self.items)


LeafField = Union[ScalarField, ListField]


@dataclass
class GroupField:
    key: str
    fields: dict[str, LeafField] = field(default_factory=dict)

    def render(self) -> dict[str, Any]:
        return {name: leaf.render() for name, leaf in self.fields.items()}


DetailNode = Union[ScalarField, ListField, GroupField]


def is_detail_column(label: str) -> bool:
    return label.startswith(DETAILS_PREFIX)


def split_detail_key(label: str) -> tuple[str, Optional[str]]:
    remainder = label[len(DETAILS_PREFIX):] if is_detail_column(label) else label
    dotted = remainder.replace("_", ".")
    if "." not in dotted:
        return dotted, None
    group, field_key = dotted.split(".", 1)
    return group, field_key


def parse_detail_value(key: str, value: Any) -> LeafField:
    if isinstance(value, str) and LIST_SEPARATOR in value:
        return ListField(key=key, items=tuple(part.strip() for part in value.split(LIST_SEPARATOR)))
    return ScalarField(key=key, value=value)


def _is_empty(value: Any) -> bool:
    # Blank cells, 0 and FALSE all mean "no detail" in the sheet.
    return not value


def build_detail_nodes(record: Mapping[str, Any]) -> dict[str, DetailNode]:
    nodes: dict[str, DetailNode] = {}
    for label, value in record.items():
        if not is_detail_column(label) or _is_empty(value):
            continue

        key, field_key = split_detail_key(label)
        if field_key is None:
            nodes[key] = parse_detail_value(key, value)
            continue

        group = nodes.get(key)
        if group is None:
            group = nodes[key] = GroupField(key=key)
        elif not isinstance(group, GroupField):
            # A plain value already sits under this key.
            continue
        group.fields[field_key] = parse_detail_value(field_key, value)
    return nodes


def render_details(nodes: Mapping[str, DetailNode]) -> Optional[dict[str, Any]]:
    if not nodes:
        return None
    return {key: node.render() for key, node in nodes.items()}


def extract_details(record: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    return render_details(build_detail_nodes(record))
