"""
Sink BOM Engine (Package Entry Point).

Exposes the order parsing, catalog access, expansion and projection logic
used to build Bills of Materials for T2/CleanStation sinks.
"""

from .aggregation import aggregate_parts, category_priority, sort_by_priority
from .catalog import (
    CatalogFallbackProvider,
    CatalogRepository,
    InMemoryCatalog,
    load_catalog,
    load_control_box_components,
)
from .custom_parts import CustomPartSpec, CustomPartSynthesizer, GeneratedPartNumber
from .exceptions import (
    BomGenerationError,
    BuildGenerationError,
    CatalogRepositoryError,
    CustomPartError,
    ExpansionTimeoutError,
    OrderLineGenerationError,
    OrderValidationError,
    RecursionDepthError,
)
from .expander import AssemblyExpander, ExpansionDeadline
from .generator import BomGenerator, generate_bom
from .loader import load_json_input
from .parser import parse_order_configuration, parse_sink_configuration
from .projector import find_placeholders, flatten_bom, summarize_bom, to_parent_rows
from .rules import (
    aggregate_basin_types,
    generic_pegboard_kit,
    is_configuration_complete,
    pegboard_kit_candidates,
    select_auto_faucets,
    select_control_box,
    select_manual_kit,
    select_pegboard_kit,
    select_pegboard_size_band,
    select_sink_body,
)
from .settings import EngineSettings
from .types import (
    AccessorySelection,
    Assembly,
    BasinConfiguration,
    BOMItem,
    BOMResult,
    ComponentLink,
    FaucetSelection,
    FlatBOMItem,
    OrderConfiguration,
    Part,
    SinkConfiguration,
)

__all__ = [
    # types
    "Part",
    "ComponentLink",
    "Assembly",
    "BasinConfiguration",
    "FaucetSelection",
    "AccessorySelection",
    "SinkConfiguration",
    "OrderConfiguration",
    "BOMItem",
    "FlatBOMItem",
    "BOMResult",
    # exceptions
    "BomGenerationError",
    "OrderValidationError",
    "RecursionDepthError",
    "ExpansionTimeoutError",
    "CatalogRepositoryError",
    "CustomPartError",
    "BuildGenerationError",
    "OrderLineGenerationError",
    # settings
    "EngineSettings",
    # catalog
    "CatalogRepository",
    "InMemoryCatalog",
    "CatalogFallbackProvider",
    "load_catalog",
    "load_control_box_components",
    # loader / parser
    "load_json_input",
    "parse_order_configuration",
    "parse_sink_configuration",
    # rules
    "select_sink_body",
    "select_control_box",
    "is_configuration_complete",
    "select_pegboard_size_band",
    "select_pegboard_kit",
    "generic_pegboard_kit",
    "pegboard_kit_candidates",
    "select_auto_faucets",
    "select_manual_kit",
    "aggregate_basin_types",
    # custom parts
    "CustomPartSynthesizer",
    "CustomPartSpec",
    "GeneratedPartNumber",
    # engine
    "AssemblyExpander",
    "ExpansionDeadline",
    "BomGenerator",
    "generate_bom",
    # projector
    "flatten_bom",
    "to_parent_rows",
    "summarize_bom",
    "find_placeholders",
    # aggregation
    "aggregate_parts",
    "category_priority",
    "sort_by_priority",
]
