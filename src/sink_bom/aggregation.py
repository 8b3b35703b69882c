"""
Part-number aggregation for purchasing and picking lists.

Leaf quantities in a generated tree are already multiplied through their
ancestors, so summing leaves per catalog item gives the total to pull for the
whole order. Each aggregated line remembers which top-level categories
(SINK_BODY, BASIN_TYPE_KIT, ...) it was pulled for.
"""

import logging
from typing import Any, Iterable, Mapping, TypedDict

from src.sink_bom import constants as C
from src.sink_bom.projector import item_children, item_fields
from src.sink_bom.types import BOMItem
from src.sink_bom.utils import natural_sort_key

logger = logging.getLogger(__name__)

UNCATEGORIZED_PRIORITY = 999


class AggregatedPart(TypedDict):
    id: str
    part_number: str
    description: str
    quantity: int
    category: str
    sources: list[str]
    is_placeholder: bool


def category_priority(category: str) -> int:
    """
    Rank of a category in reports; lower sorts first.

    Categories are matched on their leading word, so 'BASIN_TYPE_KIT' and
    'BASIN_ADDON' both rank as BASIN.
    """
    head = (category or "").upper().split("_")[0]
    return C.CATEGORY_PRIORITY.get(head, UNCATEGORIZED_PRIORITY)


def sort_by_priority(lines: Iterable[AggregatedPart]) -> list[AggregatedPart]:
    """Sorts by category priority, then naturally by part number and id."""
    return sorted(
        lines,
        key=lambda line: (
            category_priority(line["category"]),
            natural_sort_key(line["part_number"]),
            natural_sort_key(line["id"]),
        ),
    )


def aggregate_parts(
    items: Iterable[BOMItem | Mapping[str, Any]],
    leaves_only: bool = True,
) -> list[AggregatedPart]:
    """
    Sums quantities per catalog item across a BOM tree.

    Lines are keyed on the item id; assemblies print their category code as
    part number, and several assemblies can share one code.

    Args:
        items: Top-level BOM lines.
        leaves_only: Count only nodes without children (the physical parts
            to pull). When False every node is counted, including kits.

    Returns:
        Aggregated lines sorted by category priority then part number.
    """
    aggregated: dict[str, AggregatedPart] = {}

    def visit(nodes: Iterable[Any], top_category: str | None) -> None:
        for node in nodes:
            fields = item_fields(node)
            line_category = top_category or fields["category"] or "UNCATEGORIZED"
            children = item_children(node)

            if children:
                visit(children, line_category)
                if leaves_only:
                    continue

            item_id = fields["id"] or fields["part_number"] or "UNKNOWN"
            part_number = fields["part_number"] or item_id
            existing = aggregated.get(item_id)
            if existing is None:
                aggregated[item_id] = {
                    "id": item_id,
                    "part_number": part_number,
                    "description": fields["name"] or part_number,
                    "quantity": fields["quantity"] or 0,
                    "category": line_category.upper(),
                    "sources": [line_category.upper()],
                    "is_placeholder": fields["is_placeholder"],
                }
            else:
                existing["quantity"] += fields["quantity"] or 0
                if line_category.upper() not in existing["sources"]:
                    existing["sources"].append(line_category.upper())

    visit(items, None)
    logger.debug(f"Aggregated BOM into {len(aggregated)} lines")
    return sort_by_priority(aggregated.values())
