"""
PDF Generation Engine.

This module handles the creation of printable assets for the production floor:
1. BOM Report: The hierarchical BOM as an indented table, with placeholder
   lines highlighted so missing catalog data is caught before production.
2. Pick List: The aggregated part numbers with order-wide quantities.

It uses the `fpdf2` library to generate PDFs in memory and bundles them,
together with the CSV exports, into ZIP archives.
"""

import datetime
import io
import re
import zipfile
from typing import Any, Mapping

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from src.exporters import (
    generate_bom_csv,
    generate_parent_rows_csv,
    generate_pick_list_csv,
)
from src.sink_bom import BOMResult, FlatBOMItem, aggregate_parts, summarize_bom


def to_latin1(text: Any) -> str:
    """Core PDF fonts are Latin-1 only; replace anything else."""
    return str(text).encode("latin-1", "replace").decode("latin-1")


def truncate(text: str, limit: int) -> str:
    """Shortens text to `limit` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class BOMReport(FPDF):
    """
    FPDF Subclass for the BOM report.

    Features:
        - Automatic pagination with the table header repeated per page.
        - Custom header/footer carrying the order reference.
        - Indented names to show the assembly hierarchy.
    """

    def __init__(self, title: str = "Bill of Materials"):
        super().__init__()
        self.report_title = title
        self.set_auto_page_break(auto=True, margin=15)
        self.set_title(title)

    def header(self):
        """Renders the header on every page."""
        self.set_font("Courier", "B", 10)
        self.cell(
            0,
            10,
            to_latin1(self.report_title),
            align="R",
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )
        self.line(10, 20, 200, 20)
        self.ln(10)

    def footer(self):
        """Renders the footer on every page."""
        self.set_y(-15)
        self.set_font("Courier", "I", 8)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")

    def add_order_block(self, order_info: Mapping[str, Any], summary: Mapping[str, Any]):
        """
        Adds the title block: order fields followed by BOM statistics.

        Args:
            order_info: Free-form order fields (PO number, customer, builds).
            summary: Output of `summarize_bom`.
        """
        self.set_font("Courier", "B", 16)
        self.cell(0, 10, "Bill of Materials", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        self.set_font("Courier", "", 10)
        date_str = datetime.datetime.now().strftime("%Y-%m-%d")
        self.cell(0, 6, f"Date: {date_str}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        for key, value in order_info.items():
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(v) for v in value)
            self.cell(
                0, 6, to_latin1(f"{key}: {value}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT
            )

        self.cell(
            0,
            6,
            f"Lines: {summary['total_items']} | Top level: {summary['top_level_items']}"
            f" | Max depth: {summary['max_depth']}",
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )

        if summary["placeholders"]:
            self.set_font("Courier", "I", 8)
            self.set_text_color(220, 50, 50)  # Red
            self.cell(
                0,
                5,
                f"WARNING: {summary['placeholders']} line(s) not found in catalog (red)",
                new_x=XPos.LMARGIN,
                new_y=YPos.NEXT,
            )
            self.set_text_color(0, 0, 0)  # Reset

        self.ln(2)

    def _table_header(self):
        self.set_font("Courier", "B", 9)
        self.cell(50, 7, "Part Number", 1)
        self.cell(90, 7, "Name", 1)
        self.cell(15, 7, "Qty", 1, align="C")
        self.cell(0, 7, "Category", 1, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def add_bom_table(self, flattened: list[FlatBOMItem]):
        """
        Adds the hierarchical BOM table.

        Args:
            flattened: Rows from `flatten_bom`.
        """
        self._table_header()
        self.set_font("Courier", "", 8)

        for row in flattened:
            # Page Overflow Check: repeat the header on the new page
            if self.get_y() + 6 > self.page_break_trigger:
                self.add_page()
                self._table_header()
                self.set_font("Courier", "", 8)

            if row["is_placeholder"]:
                self.set_text_color(220, 50, 50)  # Red
            elif row["is_custom"]:
                self.set_text_color(30, 90, 200)  # Blue
            else:
                self.set_text_color(0, 0, 0)

            level = row["indent_level"]
            part_number = to_latin1(row["part_number"] or row["id"])
            name = to_latin1(("  " * level) + (row["name"] or ""))

            self.set_font("Courier", "B" if level == 0 else "", 8)
            self.cell(50, 6, truncate(part_number, 28), 1)
            self.cell(90, 6, truncate(name, 52), 1)
            self.cell(15, 6, str(row["quantity"]), 1, align="C")
            self.cell(
                0,
                6,
                truncate(to_latin1(row["category"]), 18),
                1,
                new_x=XPos.LMARGIN,
                new_y=YPos.NEXT,
            )

        self.set_text_color(0, 0, 0)  # Reset

    def add_pick_list(self, result: BOMResult):
        """Adds the aggregated pick list on a new page."""
        self.add_page()
        self.set_font("Courier", "B", 14)
        self.cell(0, 10, "Pick List", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        self.set_font("Courier", "B", 9)
        self.cell(10, 7, "Chk", 1)
        self.cell(50, 7, "Part Number", 1)
        self.cell(100, 7, "Description", 1)
        self.cell(0, 7, "Qty", 1, align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        self.set_font("Courier", "", 8)
        for line in aggregate_parts(result["hierarchical"]):
            if self.get_y() + 6 > self.page_break_trigger:
                self.add_page()

            x = self.get_x()
            y = self.get_y()
            self.rect(x + 3, y + 1, 4, 4)
            self.cell(10, 6, "", 1)

            if line["is_placeholder"]:
                self.set_text_color(220, 50, 50)  # Red
            self.cell(50, 6, truncate(to_latin1(line["part_number"]), 28), 1)
            self.cell(100, 6, truncate(to_latin1(line["description"]), 58), 1)
            self.cell(
                0, 6, str(line["quantity"]), 1, align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            self.set_text_color(0, 0, 0)


def generate_bom_pdf(
    result: BOMResult, order_info: Mapping[str, Any] | None = None
) -> bytes:
    """
    Renders the BOM report (hierarchy table + pick list) as PDF bytes.

    Args:
        result (BOMResult): Output of `BomGenerator.generate`.
        order_info (Mapping): Optional order fields for the title block.

    Returns:
        bytes: The PDF content.
    """
    order_info = order_info or {}
    title = "Bill of Materials"
    if order_info.get("PO Number"):
        title = f"Bill of Materials - {order_info['PO Number']}"

    pdf = BOMReport(title=title)
    pdf.add_page()
    pdf.add_order_block(order_info, summarize_bom(result["hierarchical"]))
    pdf.add_bom_table(result["flattened"])
    pdf.add_pick_list(result)
    return bytes(pdf.output())


def generate_export_zip(
    result: BOMResult, order_info: Mapping[str, Any] | None = None
) -> bytes:
    """
    Generates the export ZIP containing all BOM artifacts.

    Contents:
    1. BOM.csv (flattened hierarchy)
    2. BOM Rows.csv (parent-pointer table)
    3. Pick List.csv (aggregated part numbers)
    4. <name> BOM.pdf (report)
    5. info.txt (metadata)

    Args:
        result (BOMResult): Output of `BomGenerator.generate`.
        order_info (Mapping): Optional order fields for the report.

    Returns:
        bytes: The binary content of the ZIP.
    """
    order_info = order_info or {}
    summary = summarize_bom(result["hierarchical"])
    safe_name = re.sub(r'[<>:"/\\|?*]', "", str(order_info.get("PO Number", "Order"))).strip()

    zip_buffer = io.BytesIO()
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("BOM.csv", generate_bom_csv(result["flattened"]))
        zf.writestr("BOM Rows.csv", generate_parent_rows_csv(result["hierarchical"]))
        zf.writestr("Pick List.csv", generate_pick_list_csv(result["hierarchical"]))
        zf.writestr(f"{safe_name or 'Order'} BOM.pdf", generate_bom_pdf(result, order_info))

        info_text = (
            "Sink BOM Export\n"
            "Generated on: "
            + datetime.datetime.now().strftime("%Y-%m-%d %H:%M")
            + "\n\n"
            f"Lines: {summary['total_items']}\n"
            f"Total quantity: {summary['total_quantity']}\n"
            f"Placeholders: {summary['placeholders']}\n\n"
            "CONTENTS:\n"
            "- BOM.csv: Full hierarchy, one row per line.\n"
            "- BOM Rows.csv: Parent-pointer rows for import.\n"
            "- Pick List.csv: Aggregated part numbers.\n"
            "- *.pdf: Printable report.\n"
        )
        zf.writestr("info.txt", info_text)

    return zip_buffer.getvalue()
