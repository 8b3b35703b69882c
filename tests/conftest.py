import copy

import pytest

from src.sink_bom import (
    BomGenerator,
    CatalogFallbackProvider,
    InMemoryCatalog,
)
from src.sink_bom import constants as C


def kit(name: str, *components: tuple[str, int]) -> dict:
    """Resource-shaped assembly record."""
    return {
        "name": name,
        "type": "KIT",
        "components": [
            {"part_id": part_id, "quantity": qty} for part_id, qty in components
        ],
    }


CATALOG_PARTS = {
    part_id: {"name": name, "type": "COMPONENT"}
    for part_id, name in [
        ("MANUAL-EN", "Manual (English)"),
        ("MANUAL-FR", "Manual (French)"),
        ("MANUAL-SP", "Manual (Spanish)"),
        ("BODY-FRAME-48", "Body Frame 48-60"),
        ("BODY-FRAME-61", "Body Frame 61-72"),
        ("BODY-FRAME-73", "Body Frame 73-120"),
        ("BODY-BOLT", "Body Bolt M8"),
        ("LEG-TUBE", "Leg Tube"),
        ("LEG-BOLT", "Leg Bolt"),
        ("CASTOR-475", "Leveling Castor 475lb"),
        ("LIGHT-BAR", "Overhead Light Bar"),
        ("PB-PANEL-7236", "Pegboard Panel 72x36"),
        ("PB-PANEL-4836", "Pegboard Panel 48x36"),
        ("PB-HOOK", "Pegboard Hook"),
        ("T-OA-PB-COLOR", "Pegboard Color Option"),
        ("BASIN-VALVE", "Basin Valve"),
        ("DI-VALVE", "DI Valve"),
        ("DRAIN-PUMP", "Drain Pump"),
        ("BASIN-24X20X8", "Basin 24x20x8"),
        ("BASIN-LIGHT", "Basin Light"),
        ("HDR-150-24", "Power Supply 24V"),
        ("T2-EDRAIN-BOARD-R3", "E-Drain Board"),
        ("T2-ESINK-BOARD-R3", "E-Sink Board"),
        ("T2-CTRL-BOX-BRKT", "Control Box Bracket"),
        ("GOOSENECK-FAUCET", "DI Gooseneck Faucet"),
        ("WB-FAUCET", "Wrist Blade Faucet"),
        ("WATERGUN", "Water Gun"),
        ("DRAWER-SLIDE", "Drawer Slide"),
        ("BINRAIL-24", "Bin Rail 24in"),
    ]
}

CATALOG_ASSEMBLIES = {
    "T2-STD-MANUAL-EN-KIT": kit("Manuals Kit EN", ("MANUAL-EN", 1)),
    "T2-STD-MANUAL-FR-KIT": kit("Manuals Kit FR", ("MANUAL-FR", 1)),
    "T2-STD-MANUAL-SP-KIT": kit("Manuals Kit SP", ("MANUAL-SP", 1)),
    "T2-BODY-48-60-HA": kit("Sink Body 48-60", ("BODY-FRAME-48", 1), ("BODY-BOLT", 8)),
    "T2-BODY-61-72-HA": kit("Sink Body 61-72", ("BODY-FRAME-61", 1), ("BODY-BOLT", 8)),
    "T2-BODY-73-120-HA": kit("Sink Body 73-120", ("BODY-FRAME-73", 1), ("BODY-BOLT", 12)),
    "T2-DL27-KIT": kit("Height Adjustable Legs DL27", ("T2-DL27-COLUMN", 4)),
    "T2-DL27-COLUMN": kit("DL27 Column", ("LEG-TUBE", 1), ("LEG-BOLT", 3)),
    "T2-LEVELING-CASTOR-475": kit("Leveling Castors", ("CASTOR-475", 4)),
    "T2-OHL-MDRD-KIT": kit("Overhead Light Kit", ("LIGHT-BAR", 1)),
    "T2-ADW-PB-7236-PERF-KIT": kit("Pegboard 72x36 Perforated", ("PB-PANEL-7236", 1), ("PB-HOOK", 10)),
    "T2-ADW-PB-7236-BLUE-PERF-KIT": kit("Pegboard 72x36 Blue Perforated", ("PB-PANEL-7236", 1), ("PB-HOOK", 10)),
    "T2-ADW-PB-4836-GREEN-PERF-KIT": kit("Pegboard 48x36 Green Perforated", ("PB-PANEL-4836", 1), ("PB-HOOK", 6)),
    "T2-ADW-PB-PERF-KIT": kit("Pegboard Perforated (Generic)", ("PB-HOOK", 10)),
    "T2-ADW-PB-SOLID-KIT": kit("Pegboard Solid (Generic)", ("PB-HOOK", 4)),
    "T2-BSN-ESK-KIT": kit("E-Sink Basin Kit", ("BASIN-VALVE", 1)),
    "T2-BSN-ESK-DI-KIT": kit("E-Sink DI Basin Kit", ("BASIN-VALVE", 1), ("DI-VALVE", 1)),
    "T2-BSN-EDR-KIT": kit("E-Drain Basin Kit", ("DRAIN-PUMP", 1)),
    "T2-ADW-BASIN24X20X8": kit("Basin 24x20x8", ("BASIN-24X20X8", 1)),
    "T2-OA-BASIN-LIGHT-ESK-KIT": kit("Basin Light Kit", ("BASIN-LIGHT", 1)),
    "T2-CTRL-EDR1": kit("Control Box EDR1"),
    "T2-CTRL-ESK1": kit("Control Box ESK1"),
    "T2-CTRL-EDR1-ESK1": kit("Control Box EDR1 ESK1"),
    "T2-CTRL-ESK2": kit("Control Box ESK2"),
    "T2-CTRL-EDR2": kit("Control Box EDR2"),
    "T2-OA-DI-GOOSENECK-FAUCET-KIT": kit("DI Gooseneck Faucet Kit", ("GOOSENECK-FAUCET", 1)),
    "T2-OA-STD-FAUCET-WB-KIT": kit("Wrist Blade Faucet Kit", ("WB-FAUCET", 1)),
    "T2-OA-WATERGUN-TURRET-KIT": kit("Water Gun Kit", ("WATERGUN", 1)),
    "T2-OA-2D-152012-STACKED-KIT": kit("Two Drawer Stack", ("DRAWER-SLIDE", 4)),
    "T-OA-BINRAIL-24-KIT": kit("Bin Rail 24in Kit", ("BINRAIL-24", 1)),
}

CONTROL_BOX_TABLE = {
    "T2-CTRL-EDR1": [("HDR-150-24", 1), ("T2-EDRAIN-BOARD-R3", 1)],
    "T2-CTRL-EDR1-ESK1": [
        ("HDR-150-24", 1),
        ("T2-EDRAIN-BOARD-R3", 1),
        ("T2-ESINK-BOARD-R3", 1),
        ("T2-CTRL-BOX-BRKT", 1),
    ],
    "T2-CTRL-ESK2": [
        ("HDR-150-24", 1),
        ("T2-ESINK-BOARD-R3", 2),
        ("T2-CTRL-BOX-BRKT", 1),
    ],
}

BASE_CONFIG = {
    "sinkModelId": "T2-B2",
    "length": 60,
    "width": 30,
    "legsTypeId": "T2-DL27-KIT",
    "feetTypeId": "T2-LEVELING-CASTOR-475",
    "basins": [
        {
            "basinTypeId": "T2-BSN-ESK-KIT",
            "basinSizePartNumber": "T2-ADW-BASIN24X20X8",
            "addonIds": ["T2-OA-BASIN-LIGHT-ESK-KIT"],
        },
        {"basinTypeId": "T2-BSN-EDR-KIT"},
    ],
    "faucets": [{"faucetTypeId": "T2-OA-STD-FAUCET-WB-KIT"}],
    "sprayers": [{"sprayerTypeId": "T2-OA-WATERGUN-TURRET-KIT"}],
}


@pytest.fixture
def catalog_data() -> dict:
    """A fresh copy of the resource-shaped test catalog."""
    return {
        "assemblies": copy.deepcopy(CATALOG_ASSEMBLIES),
        "parts": copy.deepcopy(CATALOG_PARTS),
    }


@pytest.fixture
def catalog(catalog_data) -> InMemoryCatalog:
    return InMemoryCatalog.from_resources(catalog_data)


@pytest.fixture
def fallback() -> CatalogFallbackProvider:
    return CatalogFallbackProvider(mappings=C.DEFAULT_GENERIC_MAPPINGS)


@pytest.fixture
def generator(catalog, fallback) -> BomGenerator:
    return BomGenerator(
        catalog, fallback=fallback, control_box_components=CONTROL_BOX_TABLE
    )


@pytest.fixture
def make_order():
    """
    Factory for raw order payloads.

    Every build number gets a copy of BASE_CONFIG with `overrides` applied.
    """

    def _make(
        build_numbers=("B-1001",),
        language="EN",
        accessories=None,
        **overrides,
    ) -> dict:
        config = copy.deepcopy(BASE_CONFIG)
        config.update(overrides)
        order = {
            "customer": {"language": language, "name": "St. Example Hospital"},
            "buildNumbers": list(build_numbers),
            "configurations": {bn: copy.deepcopy(config) for bn in build_numbers},
        }
        if accessories is not None:
            order["accessories"] = accessories
        return order

    return _make


def top_level(result) -> list[tuple[str, str, int]]:
    """(id, category, quantity) for every top-level line."""
    return [(item.id, item.category, item.quantity) for item in result["hierarchical"]]
