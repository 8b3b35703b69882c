"""
Static Knowledge Base for the Sink BOM Engine.

This module serves as the central repository for:
1.  **Catalog Identifiers:** Fixed assembly ids the engine selects on its own
    (manual kits, overhead light kit, DI faucet, generic pegboard kits).
2.  **Category Tags:** The business-meaning labels attached to BOM lines.
3.  **Rule Bands:** Sink body length bands, pegboard size bands, and the
    control box basin-mix table.
4.  **Control Box Components:** The per-model component lists used for control
    boxes whose contents are driven by the basin mix rather than the catalog.
5.  **Fallback Data:** Default generic-to-specific mappings and pegboard colors
    used when the catalog misses.
"""

from typing import Any

# --- Engine Limits ---

DEFAULT_WARN_DEPTH = 20
DEFAULT_MAX_DEPTH = 100

# --- Category Tags ---

CAT_SYSTEM = "SYSTEM"
CAT_SINK_BODY = "SINK_BODY"
CAT_LEGS = "LEGS"
CAT_FEET = "FEET"
CAT_PEGBOARD_MANDATORY = "PEGBOARD_MANDATORY"
CAT_PEGBOARD_SPECIFIC_KIT = "PEGBOARD_SPECIFIC_KIT"
CAT_PEGBOARD_COLORED_KIT = "PEGBOARD_COLORED_KIT"
CAT_PEGBOARD_SIZE_KIT = "PEGBOARD_SIZE_KIT"
CAT_PEGBOARD_GENERIC = "PEGBOARD_GENERIC"
CAT_PEGBOARD_COLOR = "PEGBOARD_COLOR"
CAT_PEGBOARD_SIZE = "PEGBOARD_SIZE"
CAT_PEGBOARD_PANEL = "PEGBOARD_PANEL"
CAT_DRAWER_COMPARTMENT = "DRAWER_COMPARTMENT"
CAT_BASIN_TYPE_KIT = "BASIN_TYPE_KIT"
CAT_BASIN_SIZE_ASSEMBLY = "BASIN_SIZE_ASSEMBLY"
CAT_BASIN_PANEL = "BASIN_PANEL"
CAT_BASIN_ADDON = "BASIN_ADDON"
CAT_CONTROL_BOX = "CONTROL_BOX"
CAT_FAUCET_AUTO = "FAUCET_AUTO"
CAT_FAUCET_KIT = "FAUCET_KIT"
CAT_SPRAYER_KIT = "SPRAYER_KIT"
CAT_ACCESSORY = "ACCESSORY"
CAT_SUB_ASSEMBLY = "SUB_ASSEMBLY"
CAT_PART = "PART"
CAT_UNKNOWN = "UNKNOWN"
CAT_UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
CAT_CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"

# --- Item Types ---

TYPE_UNKNOWN = "UNKNOWN"
TYPE_UNKNOWN_COMPONENT = "UNKNOWN_TYPE"
TYPE_CUSTOM = "CUSTOM_PART_AUTOGEN"

# Catalog convention: a part id may double as an assembly under this prefix.
ASSEMBLY_ID_PREFIX = "ASSY-"

# --- Fixed Catalog Identifiers ---

MANUAL_KITS = {
    "EN": "T2-STD-MANUAL-EN-KIT",
    "FR": "T2-STD-MANUAL-FR-KIT",
    "ES": "T2-STD-MANUAL-SP-KIT",
}
DEFAULT_LANGUAGE = "EN"

OVERHEAD_LIGHT_KIT = "T2-OHL-MDRD-KIT"
PEGBOARD_COLOR_COMPONENT = "T-OA-PB-COLOR"
DI_GOOSENECK_FAUCET_KIT = "T2-OA-DI-GOOSENECK-FAUCET-KIT"

GENERIC_PEGBOARD_KITS = {
    "PERFORATED": "T2-ADW-PB-PERF-KIT",
    "SOLID": "T2-ADW-PB-SOLID-KIT",
}
PEGBOARD_TYPE_CODES = {"PERFORATED": "PERF", "SOLID": "SOLID"}

# --- Basin Types ---

BASIN_E_SINK = "T2-BSN-ESK-KIT"
BASIN_E_SINK_DI = "T2-BSN-ESK-DI-KIT"
BASIN_E_DRAIN = "T2-BSN-EDR-KIT"

# DI basins count as E-Sinks when picking a control box.
E_SINK_BASIN_TYPES = (BASIN_E_SINK, BASIN_E_SINK_DI)
E_DRAIN_BASIN_TYPES = (BASIN_E_DRAIN,)

# Expected basin count per sink model; unknown models expect 0.
MODEL_BASIN_COUNTS = {
    "T2-B1": 1,
    "T2-B2": 2,
    "T2-B3": 3,
}

# --- Rule Bands ---

MIN_SINK_LENGTH = 48
MAX_SINK_LENGTH = 120

# Schema: (min_length, max_length, body_assembly_id), inclusive bounds.
SINK_BODY_BANDS = (
    (48, 60, "T2-BODY-48-60-HA"),
    (61, 72, "T2-BODY-61-72-HA"),
    (73, 120, "T2-BODY-73-120-HA"),
)

# Schema: (size_code, min_length, max_length), inclusive bounds, smallest first.
PEGBOARD_SIZE_BANDS = (
    ("3436", 34, 47),
    ("4836", 48, 59),
    ("6036", 60, 71),
    ("7236", 72, 83),
    ("8436", 84, 95),
    ("9636", 96, 107),
    ("10836", 108, 119),
    ("12036", 120, 130),
)

# Tried in order when a colorless pegboard kit id is missing from the catalog.
PEGBOARD_COLORS = (
    "GREEN",
    "BLACK",
    "BLUE",
    "WHITE",
    "GREY",
    "RED",
    "YELLOW",
    "ORANGE",
)

# Schema: { (e_drain_count, e_sink_count): control_box_assembly_id }
CONTROL_BOX_BY_BASIN_MIX = {
    (1, 0): "T2-CTRL-EDR1",
    (0, 1): "T2-CTRL-ESK1",
    (1, 1): "T2-CTRL-EDR1-ESK1",
    (2, 0): "T2-CTRL-EDR2",
    (0, 2): "T2-CTRL-ESK2",
    (3, 0): "T2-CTRL-EDR3",
    (0, 3): "T2-CTRL-ESK3",
    (1, 2): "T2-CTRL-EDR1-ESK2",
    (2, 1): "T2-CTRL-EDR2-ESK1",
}

# --- Custom Part Numbers ---

CUSTOM_PART_PREFIXES = {
    "pegboard": "T2-ADW-PB",
    "basin": "T2-ADW-BSN",
}

# Prefixes the order entry screens historically stored for custom panels.
LEGACY_CUSTOM_PEGBOARD_PREFIX = "720.215.002 T2-ADW-PB-"
LEGACY_CUSTOM_BASIN_PREFIX = "720.215.001 T2-ADW-BASIN-"

# --- Control Box Component Table ---

# Control boxes whose contents follow the basin mix. The catalog entry only
# supplies the header line; the children come from this table.
# Schema: { control_box_id: [ (part_or_assembly_id, quantity), ... ] }
CONTROL_BOX_COMPONENTS: dict[str, list[tuple[str, int]]] = {
    "T2-CTRL-EDR1": [
        ("Q13404-02", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("T2-M8-3P-MP-STR-0.61M", 5),
        ("HDR-150-24", 1),
        ("T2-EDRAIN-BOARD-R3", 2),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 4),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 2),
        ("T-ESOM-F4-01", 2),
        ("T2-BSN-OHL-BTN", 1),
    ],
    "T2-CTRL-ESK1": [
        ("Q13404-02", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 1),
        ("2302081", 1),
        ("320X12539X", 1),
        ("T2-M8-3P-MP-STR-0.61M", 10),
        ("HDR-150-24", 1),
        ("T2-EDRAIN-BOARD-R3", 1),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 4),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 2),
        ("T2-RJ45-SPLITTER", 1),
        ("T-ESOM-F4-01", 1),
    ],
    "T2-CTRL-EDR1-ESK1": [
        ("Q13404-02", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 1),
        ("2302081", 1),
        ("320X12539X", 1),
        ("T2-M8-3P-MP-STR-0.61M", 15),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 1),
        ("T2-EDRAIN-BOARD-R3", 1),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 4),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 4),
        ("T2-RJ45-SPLITTER", 1),
        ("T-ESOM-F4-01", 2),
    ],
    "T2-CTRL-EDR2": [
        ("Q13404-02", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("T2-M8-3P-MP-STR-0.61M", 10),
        ("HDR-150-24", 1),
        ("T2-EDRAIN-BOARD-R3", 3),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 6),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 4),
        ("T-ESOM-F4-01", 3),
        ("T2-BSN-OHL-BTN", 1),
    ],
    "T2-CTRL-ESK2": [
        ("Q13404-02", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 2),
        ("2302081", 2),
        ("320X12539X", 2),
        ("T2-M8-3P-MP-STR-0.61M", 20),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 2),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 4),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 5),
        ("T2-RJ45-SPLITTER", 1),
        ("MD-D237-1", 1),
        ("T-ESOM-F4-01", 2),
        ("N204-S01-BL-UD", 2),
    ],
    "T2-CTRL-EDR1-ESK2": [
        ("Q13404-01", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 2),
        ("2302081", 2),
        ("320X12539X", 2),
        ("T2-M8-3P-MP-STR-0.61M", 25),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 2),
        ("T2-EDRAIN-BOARD-R3", 1),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 6),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 5),
        ("T2-RJ45-SPLITTER", 1),
        ("N204-S01-BL-UD", 2),
        ("MD-D237-1", 1),
        ("T-ESOM-F4-01", 3),
    ],
    "T2-CTRL-EDR2-ESK1": [
        ("Q13404-01", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 1),
        ("2302081", 1),
        ("320X12539X", 1),
        ("T2-M8-3P-MP-STR-0.61M", 20),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 1),
        ("T2-EDRAIN-BOARD-R3", 2),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 6),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 5),
        ("T-ESOM-F4-01", 3),
    ],
    "T2-CTRL-EDR3": [
        ("Q13404-01", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("T2-M8-3P-MP-STR-0.61M", 15),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 3),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 6),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 5),
        ("T-ESOM-F4-01", 4),
        ("T2-BSN-OHL-BTN", 1),
    ],
    "T2-CTRL-ESK3": [
        ("Q13404-01", 1),
        ("PW-105R3-06", 1),
        ("4995", 1),
        ("2926438", 3),
        ("2302081", 3),
        ("320X12539X", 3),
        ("T2-M8-3P-MP-STR-0.61M", 30),
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 3),
        ("T2-CTRL-BOX-BRKT", 1),
        ("1201578", 6),
        ("E7512-L-BLUE", 5),
        ("M8-DUST-CAP-M", 5),
        ("T2-RJ45-SPLITTER", 2),
        ("N204-S01-BL-UD", 3),
        ("MD-D237-1", 1),
        ("T-ESOM-F4-01", 3),
    ],
}

# --- Fallback Data ---

# Used when no assembly-id-mappings.json resource is available.
# Schema: { generic_id: {"specific_options", "description", "default_recommendation"} }
DEFAULT_GENERIC_MAPPINGS: dict[str, dict[str, Any]] = {
    "HEIGHT-ADJUSTABLE": {
        "specific_options": ["T2-DL27-KIT", "T2-LC1-KIT"],
        "description": "Height adjustable leg systems",
        "default_recommendation": "T2-DL27-KIT",
    },
    "PERFORATED": {
        "specific_options": ["T2-ADW-PB-PERF-KIT"],
        "description": "Perforated pegboard systems",
        "default_recommendation": "T2-ADW-PB-PERF-KIT",
    },
    "STANDARD-PEGBOARD": {
        "specific_options": ["T2-ADW-PB-SOLID-KIT"],
        "description": "Solid pegboard systems",
        "default_recommendation": "T2-ADW-PB-SOLID-KIT",
    },
}

MAPPINGS_FILENAME = "assembly-id-mappings.json"
ASSEMBLIES_FILENAME = "assemblies.json"
PARTS_FILENAME = "parts.json"

# --- Reporting ---

# Lower rank sorts first in aggregated part lists.
CATEGORY_PRIORITY = {
    "SINK": 1,
    "BASIN": 2,
    "LEGS": 3,
    "FEET": 4,
    "PEGBOARD": 5,
    "FAUCET": 6,
    "SPRAYER": 7,
    "CONTROL": 8,
    "ACCESSORY": 9,
    "HARDWARE": 10,
}
