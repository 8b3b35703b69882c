"""
Order configuration parsing.

Order payloads arrive in several historical shapes (camelCase from the order
entry screens, snake_case from internal callers, single-faucet and
single-sprayer legacy fields, per-build accessory lists). This module folds
all of them into the canonical `OrderConfiguration` before generation, so
the generator never has to look at raw field names.
"""

import logging
from typing import Any, Mapping

from src.sink_bom import constants as C
from src.sink_bom.exceptions import OrderValidationError
from src.sink_bom.types import (
    AccessorySelection,
    BasinConfiguration,
    FaucetSelection,
    OrderConfiguration,
    SinkConfiguration,
)
from src.sink_bom.utils import clean_id, clean_id_list, coerce_int

# Initialize Logger
logger = logging.getLogger(__name__)


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Returns the first non-empty value among `keys`."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _dimension(
    raw: Mapping[str, Any],
    field: str,
    build_number: str | None,
    *keys: str,
) -> int | None:
    """Reads an inch dimension; present-but-not-whole values are rejected."""
    value = _pick(raw, *keys)
    if value is None:
        return None
    number = coerce_int(value)
    if number is None:
        raise OrderValidationError(
            f"{field} must be a whole number of inches, got {value!r}",
            field=field,
            build_number=build_number,
        )
    return number


def _entries(
    value: Any,
    field: str,
    build_number: str | None,
    allow_single: bool = False,
) -> list[Mapping[str, Any]]:
    """
    Normalizes a list-of-objects field.

    With `allow_single`, a lone object is read as a one-element list. Any
    entry that is not an object is rejected.
    """
    if value is None or value == "":
        return []
    if allow_single and isinstance(value, Mapping):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise OrderValidationError(
            f"{field} must be a list", field=field, build_number=build_number
        )
    for entry in value:
        if not isinstance(entry, Mapping):
            raise OrderValidationError(
                f"{field} entries must be objects, got {entry!r}",
                field=field,
                build_number=build_number,
            )
    return list(value)


def parse_basin(raw: Mapping[str, Any], build_number: str | None = None) -> BasinConfiguration:
    """Normalizes one basin entry."""
    return BasinConfiguration(
        basin_type_id=clean_id(_pick(raw, "basinTypeId", "basin_type_id")),
        basin_size_part_number=clean_id(
            _pick(raw, "basinSizePartNumber", "basin_size_part_number")
        ),
        addon_ids=clean_id_list(_pick(raw, "addonIds", "addon_ids")),
        custom_width=_dimension(raw, "customWidth", build_number, "customWidth", "custom_width"),
        custom_length=_dimension(raw, "customLength", build_number, "customLength", "custom_length"),
        custom_depth=_dimension(raw, "customDepth", build_number, "customDepth", "custom_depth"),
    )


def _parse_faucets(
    raw: Mapping[str, Any], build_number: str | None = None
) -> tuple[FaucetSelection, ...]:
    # The array format wins over the legacy single-faucet fields.
    entries = _entries(raw.get("faucets"), "faucets", build_number, allow_single=True)
    selections = []
    for entry in entries:
        faucet_id = clean_id(_pick(entry, "faucetTypeId", "faucet_type_id"))
        if faucet_id:
            quantity = coerce_int(entry.get("quantity"), default=1)
            selections.append(FaucetSelection(faucet_id, quantity))
    if selections:
        return tuple(selections)

    legacy_id = clean_id(_pick(raw, "faucetTypeId", "faucet_type_id"))
    if legacy_id:
        quantity = coerce_int(_pick(raw, "faucetQuantity", "faucet_quantity"), default=1)
        return (FaucetSelection(legacy_id, quantity or 1),)
    return ()


def _parse_sprayers(
    raw: Mapping[str, Any], build_number: str | None = None
) -> tuple[str, ...]:
    # The array format wins over 'sprayer' + 'sprayerTypeIds'.
    entries = _entries(raw.get("sprayers"), "sprayers", build_number, allow_single=True)
    ids = clean_id_list(
        [_pick(entry, "sprayerTypeId", "sprayer_type_id") for entry in entries]
    )
    if ids:
        return ids

    if raw.get("sprayer") or raw.get("sprayer_type_ids"):
        return clean_id_list(_pick(raw, "sprayerTypeIds", "sprayer_type_ids"))
    return ()


def parse_sink_configuration(
    raw: Mapping[str, Any], build_number: str | None = None
) -> SinkConfiguration:
    """
    Normalizes one build's sink configuration.

    Handles the legacy aliases:
    - length / sinkLength
    - legTypeId / legsTypeId
    - pegboardType / pegboardTypeId
    - faucets[] vs faucetTypeId + faucetQuantity
    - sprayers[] vs sprayer + sprayerTypeIds

    Args:
        raw: The configuration mapping for one build number.
        build_number: Used to label validation errors.

    Returns:
        The canonical SinkConfiguration.

    Raises:
        OrderValidationError: A dimension is present but not a whole number,
            or a basins/faucets/sprayers entry is not an object.
    """
    if not isinstance(raw, Mapping):
        raise OrderValidationError(
            "Configuration must be an object",
            field="configurations",
            build_number=build_number,
        )

    raw_basins = _entries(raw.get("basins"), "basins", build_number)

    pegboard_type = clean_id(
        _pick(raw, "pegboardType", "pegboard_type", "pegboardTypeId")
    )

    return SinkConfiguration(
        sink_model_id=clean_id(_pick(raw, "sinkModelId", "sink_model_id")),
        length=_dimension(raw, "length", build_number, "length", "sinkLength"),
        width=_dimension(raw, "width", build_number, "width", "sinkWidth"),
        legs_type_id=clean_id(
            _pick(raw, "legTypeId", "legsTypeId", "legs_type_id")
        ),
        feet_type_id=clean_id(_pick(raw, "feetTypeId", "feet_type_id")),
        pegboard=bool(raw.get("pegboard")),
        pegboard_type=pegboard_type.upper() if pegboard_type else None,
        pegboard_color=clean_id(_pick(raw, "pegboardColor", "pegboard_color")),
        pegboard_size_part_number=clean_id(
            _pick(raw, "pegboardSizePartNumber", "pegboard_size_part_number")
        ),
        specific_pegboard_kit_id=clean_id(
            _pick(raw, "specificPegboardKitId", "specific_pegboard_kit_id")
        ),
        custom_pegboard_width=_dimension(
            raw, "customPegboardWidth", build_number,
            "customPegboardWidth", "custom_pegboard_width",
        ),
        custom_pegboard_length=_dimension(
            raw, "customPegboardLength", build_number,
            "customPegboardLength", "custom_pegboard_length",
        ),
        drawers_and_compartments=clean_id_list(
            _pick(raw, "drawersAndCompartments", "drawers_and_compartments")
        ),
        basins=tuple(parse_basin(b, build_number) for b in raw_basins),
        faucets=_parse_faucets(raw, build_number),
        sprayer_type_ids=_parse_sprayers(raw, build_number),
        control_box_id=clean_id(_pick(raw, "controlBoxId", "control_box_id")),
    )


def parse_accessories(
    entries: Any, build_number: str | None = None
) -> tuple[AccessorySelection, ...]:
    """Normalizes a list of {assemblyId, quantity} entries."""
    selections = []
    for entry in _entries(entries, "accessories", build_number):
        assembly_id = clean_id(_pick(entry, "assemblyId", "assembly_id"))
        if not assembly_id:
            logger.warning(f"Skipping accessory entry without an assembly id: {entry}")
            continue
        quantity = coerce_int(entry.get("quantity"), default=1)
        selections.append(AccessorySelection(assembly_id, quantity))
    return tuple(selections)


def parse_order_configuration(raw: Any) -> OrderConfiguration:
    """
    Validates and normalizes a raw order payload.

    Expected shape:
        {
            "customer": {"language": "EN", ...},
            "buildNumbers": ["B-1001", ...],
            "configurations": {"B-1001": {...}, ...},
            "accessories": {"B-1001": [{"assemblyId": ..., "quantity": 2}]}
        }

    Accessories may also be listed inside a build's configuration; both
    sources are merged (order-level first).

    Raises:
        OrderValidationError: Naming the missing or malformed field.
    """
    if isinstance(raw, OrderConfiguration):
        return raw
    if not isinstance(raw, Mapping):
        raise OrderValidationError("Order data is missing", field="order")

    customer = raw.get("customer")
    if not customer:
        raise OrderValidationError(
            "Customer information is missing", field="customer"
        )

    configurations = raw.get("configurations")
    if configurations is None or not isinstance(configurations, Mapping):
        raise OrderValidationError(
            "Configurations are missing", field="configurations"
        )

    build_numbers = _pick(raw, "buildNumbers", "build_numbers")
    if not isinstance(build_numbers, list):
        raise OrderValidationError(
            "Build numbers are missing or invalid", field="buildNumbers"
        )
    build_numbers = [str(bn) for bn in build_numbers]

    language = C.DEFAULT_LANGUAGE
    if isinstance(customer, Mapping) and customer.get("language"):
        language = str(customer["language"]).strip().upper()

    parsed = {
        str(bn): parse_sink_configuration(cfg, build_number=str(bn))
        for bn, cfg in configurations.items()
    }

    order_accessories = raw.get("accessories") or {}
    if not isinstance(order_accessories, Mapping):
        raise OrderValidationError(
            "accessories must map build numbers to lists", field="accessories"
        )

    accessories: dict[str, tuple[AccessorySelection, ...]] = {}
    for bn in build_numbers:
        merged = parse_accessories(order_accessories.get(bn), bn)
        config_raw = configurations.get(bn)
        if isinstance(config_raw, Mapping):
            merged += parse_accessories(config_raw.get("accessories"), bn)
        if merged:
            accessories[bn] = merged

    logger.info(
        f"Parsed order: {len(build_numbers)} build(s), language {language}"
    )
    return OrderConfiguration(
        language=language,
        build_numbers=tuple(build_numbers),
        configurations=parsed,
        accessories=accessories,
    )
