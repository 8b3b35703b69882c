import csv
import io
from typing import Any, Iterable, Mapping

from src.sink_bom import BOMItem, FlatBOMItem, aggregate_parts, to_parent_rows


def generate_bom_csv(flattened: list[FlatBOMItem]) -> bytes:
    """
    Generates a CSV file of the flattened BOM.

    Every tree node becomes one row, in the same depth-first order as the
    hierarchy. The 'Level' column carries the nesting depth, and the name is
    indented by level so the hierarchy survives in a plain spreadsheet view.

    Args:
        flattened (list[FlatBOMItem]): Rows from `flatten_bom`.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()
    fields = [
        "Level",
        "Part Number",
        "Name",
        "Qty",
        "Category",
        "Type",
        "Custom",
        "Placeholder",
        "Suggestion",
    ]
    writer = csv.DictWriter(csv_buf, fieldnames=fields)
    writer.writeheader()

    for row in flattened:
        writer.writerow(
            {
                "Level": row["indent_level"],
                "Part Number": row["part_number"] or row["id"],
                "Name": ("  " * row["indent_level"]) + (row["name"] or ""),
                "Qty": row["quantity"],
                "Category": row["category"],
                "Type": row["type"],
                "Custom": "Y" if row["is_custom"] else "",
                "Placeholder": "Y" if row["is_placeholder"] else "",
                "Suggestion": row["resolution_suggestion"] or "",
            }
        )

    # encode "utf-8-sig" to ensure Excel opens it correctly with special characters
    return csv_buf.getvalue().encode("utf-8-sig")


def generate_parent_rows_csv(items: Iterable[BOMItem | Mapping[str, Any]]) -> bytes:
    """
    Generates the parent-pointer table for importing the BOM elsewhere.

    Args:
        items: The hierarchical BOM.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()
    fields = [
        "row_id",
        "parent_id",
        "id",
        "name",
        "quantity",
        "type",
        "category",
        "is_custom",
        "is_placeholder",
    ]
    writer = csv.DictWriter(csv_buf, fieldnames=fields)
    writer.writeheader()
    for row in to_parent_rows(items):
        # Top-level rows have no parent; keep the cell empty
        writer.writerow({**row, "parent_id": row["parent_id"] or ""})

    return csv_buf.getvalue().encode("utf-8-sig")


def generate_pick_list_csv(items: Iterable[BOMItem | Mapping[str, Any]]) -> bytes:
    """
    Generates the aggregated pick list: one row per part number.

    Quantities are summed across the whole order and rows are ordered by
    category priority (sink body first, hardware last).

    Args:
        items: The hierarchical BOM.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()
    fields = ["Category", "Part Number", "Item ID", "Description", "Qty", "Used In", "Notes"]
    writer = csv.DictWriter(csv_buf, fieldnames=fields)
    writer.writeheader()

    for line in aggregate_parts(items):
        writer.writerow(
            {
                "Category": line["category"],
                "Part Number": line["part_number"],
                "Item ID": line["id"],
                "Description": line["description"],
                "Qty": line["quantity"],
                "Used In": ", ".join(line["sources"]),
                "Notes": "NOT IN CATALOG" if line["is_placeholder"] else "",
            }
        )

    return csv_buf.getvalue().encode("utf-8-sig")


def generate_bom_markdown(flattened: list[FlatBOMItem], title: str = "Bill of Materials") -> str:
    """
    Renders the flattened BOM as a Markdown table.

    Placeholder lines are italicized and flagged so they stand out in a
    review.

    Args:
        flattened (list[FlatBOMItem]): Rows from `flatten_bom`.
        title (str): Heading for the document.

    Returns:
        str: The Markdown document.
    """
    lines = [
        f"# {title}",
        "",
        "| Part Number | Name | Qty | Category |",
        "| --- | --- | :---: | --- |",
    ]
    for row in flattened:
        indent = "&nbsp;&nbsp;" * row["indent_level"]
        name = row["name"] or ""
        if row["is_placeholder"]:
            name = f"*{name}* (placeholder)"
        elif row["indent_level"] == 0:
            name = f"**{name}**"
        part_number = row["part_number"] or row["id"]
        lines.append(
            f"| {part_number} | {indent}{name} | {row['quantity']} | {row['category']} |"
        )
    return "\n".join(lines) + "\n"
