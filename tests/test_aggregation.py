import pytest

from src.sink_bom import constants as C
from src.sink_bom.aggregation import aggregate_parts, category_priority
from src.sink_bom.catalog import InMemoryCatalog
from src.sink_bom.expander import AssemblyExpander


@pytest.mark.parametrize(
    "category, rank",
    [
        ("SINK_BODY", 1),
        ("BASIN_TYPE_KIT", 2),
        ("BASIN_ADDON", 2),
        ("LEGS", 3),
        ("PEGBOARD_MANDATORY", 5),
        ("CONTROL_BOX", 8),
        ("SYSTEM", 999),
        ("", 999),
    ],
)
def test_category_priority(category, rank):
    assert category_priority(category) == rank


def test_order_wide_totals(generator, make_order):
    """Two identical builds pull twice the leg hardware."""
    result = generator.generate(make_order(build_numbers=("B-1", "B-2")))
    lines = {line["part_number"]: line for line in aggregate_parts(result["hierarchical"])}

    assert lines["LEG-BOLT"]["quantity"] == 24
    assert lines["LEG-TUBE"]["quantity"] == 8
    assert lines["LEG-BOLT"]["category"] == "LEGS"
    # Kits are not pick lines
    assert "T2-DL27-KIT" not in lines
    assert "MANUAL-EN" in lines


def test_shared_part_remembers_every_source(generator, make_order):
    result = generator.generate(make_order())
    lines = {line["part_number"]: line for line in aggregate_parts(result["hierarchical"])}

    # HDR-150-24 only appears under the control box
    assert lines["HDR-150-24"]["sources"] == [C.CAT_CONTROL_BOX]


def test_lines_sorted_by_category_then_part_number(generator, make_order):
    result = generator.generate(make_order())
    lines = aggregate_parts(result["hierarchical"])

    ranks = [category_priority(line["category"]) for line in lines]
    assert ranks == sorted(ranks)
    assert lines[0]["category"] == C.CAT_SINK_BODY


def test_placeholders_are_flagged(generator, make_order):
    result = generator.generate(
        make_order(accessories={"B-1001": [{"assemblyId": "T-OA-MISSING-KIT"}]})
    )
    lines = {line["part_number"]: line for line in aggregate_parts(result["hierarchical"])}
    assert lines["T-OA-MISSING-KIT"]["is_placeholder"]
    assert not lines["LEG-BOLT"]["is_placeholder"]


def test_all_nodes_mode_counts_kits(generator, make_order):
    result = generator.generate(make_order())
    lines = {
        line["part_number"]: line
        for line in aggregate_parts(result["hierarchical"], leaves_only=False)
    }
    assert lines["T2-DL27-KIT"]["quantity"] == 1
    assert lines["T2-DL27-COLUMN"]["quantity"] == 4


def test_assemblies_sharing_a_category_code_stay_separate():
    """Two control boxes printed as '719' are still two different pick lines."""
    catalog = InMemoryCatalog.from_resources(
        {
            "assemblies": {
                "T2-CTRL-EDR1": {"name": "Control Box EDR1", "category_code": "719"},
                "T2-CTRL-ESK1": {"name": "Control Box ESK1", "category_code": "719"},
            }
        }
    )
    expander = AssemblyExpander(catalog)
    bom = []
    expander.expand("T2-CTRL-EDR1", 1, C.CAT_CONTROL_BOX, bom)
    expander.expand("T2-CTRL-ESK1", 1, C.CAT_CONTROL_BOX, bom)
    expander.expand("T2-CTRL-ESK1", 2, C.CAT_CONTROL_BOX, bom)

    lines = aggregate_parts(bom)
    assert [
        (line["id"], line["part_number"], line["description"], line["quantity"])
        for line in lines
    ] == [
        ("T2-CTRL-EDR1", "719", "Control Box EDR1", 1),
        ("T2-CTRL-ESK1", "719", "Control Box ESK1", 3),
    ]
