"""
Type definitions and shared data structures for the BOM engine.

This module contains the catalog records (read-only, owned by the catalog),
the canonical order configuration shape, and the BOM output structures passed
between the expander, the generator and the projector.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict


@dataclass(frozen=True)
class Part:
    """A leaf catalog item."""

    id: str
    name: str
    type: str = "COMPONENT"
    manufacturer_part_number: str | None = None
    manufacturer_info: str | None = None
    status: str = "ACTIVE"


@dataclass(frozen=True)
class ComponentLink:
    """
    One line of an assembly's component list.

    Attributes:
        id: Identifier of the link row itself (used to label integrity errors).
        quantity: Quantity per one unit of the parent assembly.
        part: The child part, when the link points at a part.
        assembly_id: The child assembly id, when the link points at an assembly.
        notes: Free-form catalog notes.
    """

    id: str
    quantity: int
    part: Part | None = None
    assembly_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Assembly:
    """A catalog item composed of other items."""

    id: str
    name: str
    type: str = "ASSEMBLY"
    category_code: str | None = None
    subcategory_code: str | None = None
    components: tuple[ComponentLink, ...] = ()
    can_order: bool = True
    is_kit: bool = False
    status: str = "ACTIVE"

    @property
    def display_part_number(self) -> str | None:
        """Category codes double as printed part numbers."""
        return self.subcategory_code or self.category_code or None


# --- Order Configuration (canonical shape, see parser.py) ---


@dataclass(frozen=True)
class BasinConfiguration:
    basin_type_id: str | None = None
    basin_size_part_number: str | None = None
    addon_ids: tuple[str, ...] = ()
    custom_width: int | None = None
    custom_length: int | None = None
    custom_depth: int | None = None


@dataclass(frozen=True)
class FaucetSelection:
    faucet_type_id: str
    quantity: int = 1


@dataclass(frozen=True)
class AccessorySelection:
    assembly_id: str
    quantity: int = 1


@dataclass(frozen=True)
class SinkConfiguration:
    """
    Everything the generator needs to know about one build number.

    Legacy field names and single-object/array variants are folded into this
    shape by `parse_sink_configuration` before the generator sees them.
    """

    sink_model_id: str | None = None
    length: int | None = None
    width: int | None = None
    legs_type_id: str | None = None
    feet_type_id: str | None = None
    pegboard: bool = False
    pegboard_type: str | None = None
    pegboard_color: str | None = None
    pegboard_size_part_number: str | None = None
    specific_pegboard_kit_id: str | None = None
    custom_pegboard_width: int | None = None
    custom_pegboard_length: int | None = None
    drawers_and_compartments: tuple[str, ...] = ()
    basins: tuple[BasinConfiguration, ...] = ()
    faucets: tuple[FaucetSelection, ...] = ()
    sprayer_type_ids: tuple[str, ...] = ()
    control_box_id: str | None = None


@dataclass(frozen=True)
class OrderConfiguration:
    """A validated order: customer language, build numbers and their configs."""

    language: str
    build_numbers: tuple[str, ...]
    configurations: dict[str, SinkConfiguration]
    accessories: dict[str, tuple[AccessorySelection, ...]] = field(
        default_factory=dict
    )


# --- BOM Output ---


@dataclass
class BOMItem:
    """
    A node in the generated BOM tree.

    Attributes:
        id: Catalog identifier (or the unresolved identifier for placeholders).
        name: Resolved display name.
        quantity: Quantity already multiplied through the ancestor chain.
        category: Business-meaning tag (e.g. 'BASIN_TYPE_KIT').
        type: Catalog type, 'UNKNOWN' for placeholders, custom type for
              synthesized parts.
        part_number: Printed part number, when the catalog provides one.
        children: Expanded child items, in catalog order.
        is_placeholder: The catalog lookup failed; this is a stand-in.
        is_custom: Dimensionally generated, not a catalog entry.
        is_part: Terminal leaf rather than an expandable assembly.
        resolution_suggestion: Suggested catalog id for an operator to review.
    """

    id: str
    name: str
    quantity: int
    category: str
    type: str
    part_number: str | None = None
    children: list["BOMItem"] = field(default_factory=list)
    is_placeholder: bool = False
    is_custom: bool = False
    is_part: bool = False
    resolution_suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict (children under 'children'), safe for JSON."""
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "type": self.type,
            "part_number": self.part_number,
            "is_placeholder": self.is_placeholder,
            "is_custom": self.is_custom,
            "is_part": self.is_part,
            "resolution_suggestion": self.resolution_suggestion,
            "children": [child.to_dict() for child in self.children],
        }


class FlatBOMItem(TypedDict):
    """
    One row of the flattened BOM.

    Attributes:
        indent_level: Nesting depth (0 for top-level lines).
        is_child: True for every row below the top level.
        has_children: True when the source node had children.
        parent_index: Index of the parent row in the same flattened list,
                      None for top-level rows.
    """

    id: str
    name: str
    quantity: int
    category: str
    type: str
    part_number: str | None
    is_placeholder: bool
    is_custom: bool
    is_part: bool
    resolution_suggestion: str | None
    indent_level: int
    is_child: bool
    has_children: bool
    parent_index: int | None


class BOMResult(TypedDict):
    """Return value of a BOM generation call."""

    hierarchical: list[BOMItem]
    flattened: list[FlatBOMItem]
    total_items: int
    top_level_items: int
