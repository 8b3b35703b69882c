"""
Projections of the hierarchical BOM.

- `flatten_bom`: depth-first rows with indentation, for table views.
- `to_parent_rows`: parent-pointer rows, for callers that persist the BOM.
- `summarize_bom`: counts and depth statistics.
- `find_placeholders`: every unresolved line, for gating an order.

All functions accept BOMItem trees or the equivalent nested dicts, with
children under either 'children' or 'components'.
"""

from collections import Counter
from typing import Any, Iterable, Mapping, TypedDict

from src.sink_bom.types import BOMItem, FlatBOMItem


class ParentRow(TypedDict):
    row_id: int
    parent_id: int | None
    id: str
    name: str
    quantity: int
    type: str
    category: str
    is_custom: bool
    is_placeholder: bool


class BOMSummary(TypedDict):
    total_items: int
    total_quantity: int
    top_level_items: int
    max_depth: int
    items_by_level: dict[int, int]
    assemblies: int
    parts: int
    placeholders: int
    custom_parts: int


_SCALAR_FIELDS = (
    "id",
    "name",
    "quantity",
    "category",
    "type",
    "part_number",
    "is_placeholder",
    "is_custom",
    "is_part",
    "resolution_suggestion",
)


def item_fields(item: BOMItem | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(item, BOMItem):
        return {name: getattr(item, name) for name in _SCALAR_FIELDS}
    return {
        "id": item.get("id"),
        "name": item.get("name"),
        "quantity": item.get("quantity"),
        "category": item.get("category"),
        "type": item.get("type"),
        "part_number": item.get("part_number", item.get("partNumber")),
        "is_placeholder": bool(item.get("is_placeholder", item.get("isPlaceholder"))),
        "is_custom": bool(item.get("is_custom", item.get("isCustom"))),
        "is_part": bool(item.get("is_part", item.get("isPart"))),
        "resolution_suggestion": item.get(
            "resolution_suggestion", item.get("resolutionSuggestion")
        ),
    }


def item_children(item: BOMItem | Mapping[str, Any]) -> list[Any]:
    if isinstance(item, BOMItem):
        return item.children
    return item.get("components") or item.get("children") or []


def flatten_bom(items: Iterable[BOMItem | Mapping[str, Any]]) -> list[FlatBOMItem]:
    """
    Flattens a BOM tree depth-first, parents before their children.

    Args:
        items: Top-level BOM lines.

    Returns:
        One row per node with `indent_level`, `is_child`, `has_children`
        and the index of the parent row (`parent_index`).
    """
    rows: list[FlatBOMItem] = []

    def visit(nodes: Iterable[Any], level: int, parent_index: int | None) -> None:
        for node in nodes:
            children = item_children(node)
            row: FlatBOMItem = {
                **item_fields(node),
                "indent_level": level,
                "is_child": level > 0,
                "has_children": bool(children),
                "parent_index": parent_index,
            }
            rows.append(row)
            if children:
                visit(children, level + 1, len(rows) - 1)

    visit(items, 0, None)
    return rows


def to_parent_rows(items: Iterable[BOMItem | Mapping[str, Any]]) -> list[ParentRow]:
    """
    Parent-pointer rows (1-based row ids, parent_id None at the top level).

    Row ids follow the flattened order, so a caller inserting rows in
    sequence always inserts a parent before its children.
    """
    return [
        {
            "row_id": idx + 1,
            "parent_id": None if row["parent_index"] is None else row["parent_index"] + 1,
            "id": row["id"],
            "name": row["name"],
            "quantity": row["quantity"],
            "type": row["type"],
            "category": row["category"],
            "is_custom": row["is_custom"],
            "is_placeholder": row["is_placeholder"],
        }
        for idx, row in enumerate(flatten_bom(items))
    ]


def summarize_bom(items: Iterable[BOMItem | Mapping[str, Any]]) -> BOMSummary:
    """Counts rows, quantities and nesting for a BOM tree."""
    rows = flatten_bom(items)
    levels = Counter(row["indent_level"] for row in rows)

    return {
        "total_items": len(rows),
        "total_quantity": sum(row["quantity"] or 0 for row in rows),
        "top_level_items": levels.get(0, 0),
        "max_depth": max(levels) if levels else 0,
        "items_by_level": dict(sorted(levels.items())),
        "assemblies": sum(1 for row in rows if row["has_children"]),
        "parts": sum(1 for row in rows if not row["has_children"]),
        "placeholders": sum(1 for row in rows if row["is_placeholder"]),
        "custom_parts": sum(1 for row in rows if row["is_custom"]),
    }


def find_placeholders(items: Iterable[BOMItem | Mapping[str, Any]]) -> list[FlatBOMItem]:
    """All placeholder rows, in flattened order."""
    return [row for row in flatten_bom(items) if row["is_placeholder"]]
