import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.sink_bom import constants as C
from src.sink_bom.rules import (
    aggregate_basin_types,
    count_basin_mix,
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
from src.sink_bom.types import BasinConfiguration, SinkConfiguration

ESK = BasinConfiguration(basin_type_id=C.BASIN_E_SINK)
ESK_DI = BasinConfiguration(basin_type_id=C.BASIN_E_SINK_DI)
EDR = BasinConfiguration(basin_type_id=C.BASIN_E_DRAIN)
UNTYPED = BasinConfiguration()


# --- Sink Body ---


@pytest.mark.parametrize(
    "length, expected",
    [
        (48, "T2-BODY-48-60-HA"),
        (60, "T2-BODY-48-60-HA"),
        (61, "T2-BODY-61-72-HA"),
        (72, "T2-BODY-61-72-HA"),
        (73, "T2-BODY-73-120-HA"),
        (120, "T2-BODY-73-120-HA"),
        (47, None),
        (121, None),
    ],
)
def test_sink_body_band_boundaries(length, expected):
    """Band edges are inclusive on both sides; nothing exists outside 48-120."""
    assert select_sink_body(length) == expected


@given(st.integers(min_value=48, max_value=120))
def test_sink_body_covers_whole_range(length):
    """Every supported length maps to exactly one body."""
    matches = [b for lo, hi, b in C.SINK_BODY_BANDS if lo <= length <= hi]
    assert len(matches) == 1
    assert select_sink_body(length) == matches[0]


# --- Control Box ---


@pytest.mark.parametrize(
    "basins, expected",
    [
        ([EDR], "T2-CTRL-EDR1"),
        ([ESK], "T2-CTRL-ESK1"),
        ([EDR, ESK], "T2-CTRL-EDR1-ESK1"),
        ([EDR, EDR], "T2-CTRL-EDR2"),
        ([ESK, ESK], "T2-CTRL-ESK2"),
        ([EDR, EDR, EDR], "T2-CTRL-EDR3"),
        ([ESK, ESK, ESK], "T2-CTRL-ESK3"),
        ([EDR, ESK, ESK], "T2-CTRL-EDR1-ESK2"),
        ([EDR, EDR, ESK], "T2-CTRL-EDR2-ESK1"),
    ],
)
def test_control_box_exact_mix(basins, expected):
    assert select_control_box(basins) == expected


def test_control_box_di_counts_as_esink():
    assert count_basin_mix([ESK_DI, EDR]) == (1, 1)
    assert select_control_box([ESK_DI, EDR]) == "T2-CTRL-EDR1-ESK1"


def test_control_box_unmatched_mix_logs_and_returns_none(caplog):
    """2 E-Drains + 2 E-Sinks has no box; no nearest-match guess."""
    with caplog.at_level(logging.WARNING):
        assert select_control_box([EDR, EDR, ESK, ESK]) is None
    assert "No control box defined for 2 E-Drains and 2 E-Sinks" in caplog.text


def test_control_box_no_basins():
    assert select_control_box([]) is None


# --- Completeness ---


@pytest.mark.parametrize(
    "config, expected",
    [
        (SinkConfiguration(sink_model_id="T2-B2", basins=(ESK, EDR)), True),
        (SinkConfiguration(sink_model_id="T2-B2", basins=(ESK, EDR, ESK)), True),
        (SinkConfiguration(sink_model_id="T2-B3", basins=(ESK, EDR)), False),
        (SinkConfiguration(sink_model_id="T2-B1", basins=(ESK, UNTYPED)), False),
        (SinkConfiguration(sink_model_id="T2-B1", basins=()), False),
        (SinkConfiguration(sink_model_id=None, basins=(ESK,)), False),
        # Unknown models expect no particular count
        (SinkConfiguration(sink_model_id="T2-CUSTOM", basins=(ESK,)), True),
    ],
)
def test_is_configuration_complete(config, expected):
    assert is_configuration_complete(config) is expected


# --- Pegboard ---


@pytest.mark.parametrize(
    "length, expected",
    [
        (34, "3436"),
        (47, "3436"),
        (48, "4836"),
        (72, "7236"),
        (119, "10836"),
        (130, "12036"),
        (200, "12036"),
        (33, None),
        (None, None),
    ],
)
def test_pegboard_size_band(length, expected):
    assert select_pegboard_size_band(length) == expected


def test_pegboard_kit_ids():
    assert select_pegboard_kit(72, "PERFORATED") == "T2-ADW-PB-7236-PERF-KIT"
    assert select_pegboard_kit(72, "PERFORATED", "blue") == "T2-ADW-PB-7236-BLUE-PERF-KIT"
    assert select_pegboard_kit(60, "SOLID") == "T2-ADW-PB-6036-SOLID-KIT"
    assert select_pegboard_kit(60, "solid", "  ") == "T2-ADW-PB-6036-SOLID-KIT"


def test_pegboard_kit_missing_inputs():
    assert select_pegboard_kit(None, "PERFORATED") is None
    assert select_pegboard_kit(72, None) is None
    assert select_pegboard_kit(20, "PERFORATED") is None


def test_generic_pegboard_kit():
    assert generic_pegboard_kit("PERFORATED") == "T2-ADW-PB-PERF-KIT"
    assert generic_pegboard_kit("solid") == "T2-ADW-PB-SOLID-KIT"
    assert generic_pegboard_kit(None) is None


def test_pegboard_candidates_are_ordered_best_first():
    config = SinkConfiguration(
        length=72,
        pegboard=True,
        pegboard_type="PERFORATED",
        pegboard_color="Blue",
        specific_pegboard_kit_id="T2-ADW-PB-SPECIAL-KIT",
    )
    assert pegboard_kit_candidates(config) == [
        ("T2-ADW-PB-SPECIAL-KIT", C.CAT_PEGBOARD_SPECIFIC_KIT),
        ("T2-ADW-PB-7236-BLUE-PERF-KIT", C.CAT_PEGBOARD_COLORED_KIT),
        ("T2-ADW-PB-7236-PERF-KIT", C.CAT_PEGBOARD_SIZE_KIT),
        ("T2-ADW-PB-PERF-KIT", C.CAT_PEGBOARD_GENERIC),
    ]


def test_pegboard_candidates_without_color_or_length():
    config = SinkConfiguration(pegboard=True, pegboard_type="SOLID")
    assert pegboard_kit_candidates(config) == [
        ("T2-ADW-PB-SOLID-KIT", C.CAT_PEGBOARD_GENERIC)
    ]
    assert pegboard_kit_candidates(SinkConfiguration(pegboard=True)) == []


def test_pegboard_candidates_drop_duplicates():
    config = SinkConfiguration(
        length=60,
        pegboard_type="PERFORATED",
        specific_pegboard_kit_id="T2-ADW-PB-6036-PERF-KIT",
    )
    ids = [kit_id for kit_id, _ in pegboard_kit_candidates(config)]
    assert ids == ["T2-ADW-PB-6036-PERF-KIT", "T2-ADW-PB-PERF-KIT"]


# --- Faucets, Manuals, Basins ---


def test_auto_faucets_one_per_di_basin():
    assert select_auto_faucets([ESK_DI, EDR, ESK_DI]) == [
        (C.DI_GOOSENECK_FAUCET_KIT, 2)
    ]
    assert select_auto_faucets([ESK, EDR]) == []


@pytest.mark.parametrize(
    "language, expected",
    [
        ("EN", "T2-STD-MANUAL-EN-KIT"),
        ("fr", "T2-STD-MANUAL-FR-KIT"),
        ("ES", "T2-STD-MANUAL-SP-KIT"),
        ("DE", "T2-STD-MANUAL-EN-KIT"),
        (None, "T2-STD-MANUAL-EN-KIT"),
    ],
)
def test_manual_kit(language, expected):
    assert select_manual_kit(language) == expected


def test_basin_types_aggregate_in_first_seen_order():
    assert aggregate_basin_types([ESK, ESK, EDR, UNTYPED, ESK_DI]) == [
        (C.BASIN_E_SINK, 2),
        (C.BASIN_E_DRAIN, 1),
        (C.BASIN_E_SINK_DI, 1),
    ]
