"""
Rule Tables.

Pure selection functions that turn configuration values into catalog ids.
None of them perform I/O, and none of them raise: each returns a definite
id or None, and the caller decides whether None is an error.
"""

import logging
from collections import Counter
from typing import Iterable

from src.sink_bom import constants as C
from src.sink_bom.types import BasinConfiguration, SinkConfiguration

logger = logging.getLogger(__name__)


def select_sink_body(length: int) -> str | None:
    """
    Selects the sink body assembly for a sink length.

    Args:
        length: Sink length in inches.

    Returns:
        The body assembly id, or None when no band covers the length.
    """
    for low, high, body_id in C.SINK_BODY_BANDS:
        if low <= length <= high:
            return body_id
    return None


def count_basin_mix(basins: Iterable[BasinConfiguration]) -> tuple[int, int]:
    """Returns (e_drain_count, e_sink_count); DI basins count as E-Sinks."""
    e_drains = 0
    e_sinks = 0
    for basin in basins:
        if basin.basin_type_id in C.E_DRAIN_BASIN_TYPES:
            e_drains += 1
        elif basin.basin_type_id in C.E_SINK_BASIN_TYPES:
            e_sinks += 1
    return e_drains, e_sinks


def select_control_box(basins: Iterable[BasinConfiguration]) -> str | None:
    """
    Selects the control box for a basin mix.

    Only the exact combinations in CONTROL_BOX_BY_BASIN_MIX match; anything
    else is logged and returns None rather than a nearest guess.
    """
    basins = list(basins)
    if not basins:
        return None

    mix = count_basin_mix(basins)
    control_box_id = C.CONTROL_BOX_BY_BASIN_MIX.get(mix)
    if control_box_id is None:
        logger.warning(
            f"No control box defined for {mix[0]} E-Drains and {mix[1]} E-Sinks"
        )
    return control_box_id


def is_configuration_complete(config: SinkConfiguration) -> bool:
    """
    True once a sink configuration is far enough along to pick a control box.

    Requires a model id, at least one basin, a type on every basin, and at
    least as many basins as the model expects (T2-B1: 1, T2-B2: 2, T2-B3: 3).
    """
    if not config.sink_model_id:
        return False
    if not config.basins:
        return False
    if not all(basin.basin_type_id for basin in config.basins):
        return False

    expected = C.MODEL_BASIN_COUNTS.get(config.sink_model_id, 0)
    return len(config.basins) >= expected


def select_pegboard_size_band(length: int | None) -> str | None:
    """
    Picks the smallest standard pegboard size covering the sink length.

    Lengths past the largest band use the largest band; lengths below the
    smallest band have no pegboard size.
    """
    if not length:
        return None
    for size, low, high in C.PEGBOARD_SIZE_BANDS:
        if low <= length <= high:
            return size
    if length > C.PEGBOARD_SIZE_BANDS[-1][2]:
        return C.PEGBOARD_SIZE_BANDS[-1][0]
    logger.warning(f"No pegboard size defined for sink length: {length}")
    return None


def _pegboard_type_code(pegboard_type: str) -> str:
    return C.PEGBOARD_TYPE_CODES.get(pegboard_type.upper(), "SOLID")


def select_pegboard_kit(
    length: int | None,
    pegboard_type: str | None,
    color: str | None = None,
) -> str | None:
    """
    Builds the sized pegboard kit id.

    Examples:
        (72, 'PERFORATED', None)    -> 'T2-ADW-PB-7236-PERF-KIT'
        (72, 'PERFORATED', 'blue')  -> 'T2-ADW-PB-7236-BLUE-PERF-KIT'

    Returns:
        The kit id, or None when length or type is missing.
    """
    if not length or not pegboard_type:
        return None
    size = select_pegboard_size_band(length)
    if size is None:
        return None

    type_code = _pegboard_type_code(pegboard_type)
    if color and color.strip():
        return f"T2-ADW-PB-{size}-{color.strip().upper()}-{type_code}-KIT"
    return f"T2-ADW-PB-{size}-{type_code}-KIT"


def generic_pegboard_kit(pegboard_type: str | None) -> str | None:
    """The size-independent kit for a pegboard type."""
    if not pegboard_type:
        return None
    return C.GENERIC_PEGBOARD_KITS.get(pegboard_type.upper())


def pegboard_kit_candidates(config: SinkConfiguration) -> list[tuple[str, str]]:
    """
    Lists the pegboard kit tiers to try, best first.

    Tiers: the specific kit id carried on the configuration, the colored kit,
    the size-only kit, and the generic kit for the pegboard type. Tiers that
    cannot be computed from the configuration are left out.

    Returns:
        Ordered (kit_id, category) pairs without duplicates.
    """
    candidates: list[tuple[str, str]] = []

    if config.specific_pegboard_kit_id:
        candidates.append(
            (config.specific_pegboard_kit_id, C.CAT_PEGBOARD_SPECIFIC_KIT)
        )
    if config.pegboard_color:
        colored = select_pegboard_kit(
            config.length, config.pegboard_type, config.pegboard_color
        )
        if colored:
            candidates.append((colored, C.CAT_PEGBOARD_COLORED_KIT))

    size_only = select_pegboard_kit(config.length, config.pegboard_type)
    if size_only:
        candidates.append((size_only, C.CAT_PEGBOARD_SIZE_KIT))

    generic = generic_pegboard_kit(config.pegboard_type)
    if generic:
        candidates.append((generic, C.CAT_PEGBOARD_GENERIC))

    seen = set()
    unique = []
    for kit_id, category in candidates:
        if kit_id not in seen:
            seen.add(kit_id)
            unique.append((kit_id, category))
    return unique


def select_auto_faucets(basins: Iterable[BasinConfiguration]) -> list[tuple[str, int]]:
    """
    DI basins each need one gooseneck faucet, on top of user-selected faucets.

    Returns:
        A single (faucet_kit_id, count) pair when any DI basin is present,
        otherwise an empty list.
    """
    di_count = sum(1 for b in basins if b.basin_type_id == C.BASIN_E_SINK_DI)
    if di_count == 0:
        return []
    return [(C.DI_GOOSENECK_FAUCET_KIT, di_count)]


def select_manual_kit(language: str | None) -> str:
    """Manuals kit for a customer language; unknown languages get English."""
    code = (language or C.DEFAULT_LANGUAGE).strip().upper()
    return C.MANUAL_KITS.get(code, C.MANUAL_KITS[C.DEFAULT_LANGUAGE])


def aggregate_basin_types(
    basins: Iterable[BasinConfiguration],
) -> list[tuple[str, int]]:
    """
    Counts basins per type id, in first-seen order.

    Returns:
        (basin_type_id, count) pairs; untyped basins are skipped.
    """
    counts = Counter(b.basin_type_id for b in basins if b.basin_type_id)
    return list(counts.items())
