import io
import zipfile

from src.pdf_generator import (
    generate_bom_pdf,
    generate_export_zip,
    to_latin1,
    truncate,
)


def test_helpers():
    assert to_latin1("Café ✓") == "Café ?"
    assert truncate("T2-OA-DI-GOOSENECK-FAUCET-KIT", 12) == "T2-OA-DI-..."
    assert truncate("SHORT", 12) == "SHORT"


def test_pdf_renders(generator, make_order):
    result = generator.generate(make_order())
    pdf = generate_bom_pdf(result, {"PO Number": "PO-4411", "Build Numbers": ["B-1001"]})

    assert isinstance(pdf, bytes)
    assert pdf.startswith(b"%PDF")


def test_pdf_renders_long_bom_with_placeholders(generator, make_order):
    """Enough rows to force page breaks, plus highlighted placeholder lines."""
    builds = tuple(f"B-{n}" for n in range(1, 9))
    accessories = {bn: [{"assemblyId": "T-OA-MISSING-KIT"}] for bn in builds}
    result = generator.generate(make_order(build_numbers=builds, accessories=accessories))

    pdf = generate_bom_pdf(result)
    assert pdf.startswith(b"%PDF")


def test_export_zip_contents(generator, make_order):
    result = generator.generate(make_order())
    data = generate_export_zip(result, {"PO Number": "PO/4411"})

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = set(zf.namelist())
        assert names == {
            "BOM.csv",
            "BOM Rows.csv",
            "Pick List.csv",
            "PO4411 BOM.pdf",
            "info.txt",
        }
        info = zf.read("info.txt").decode("utf-8")
        assert f"Lines: {result['total_items']}" in info
        assert "Placeholders: 0" in info
        assert zf.read("PO4411 BOM.pdf").startswith(b"%PDF")


def test_export_zip_without_order_info(generator, make_order):
    result = generator.generate(make_order())
    with zipfile.ZipFile(io.BytesIO(generate_export_zip(result))) as zf:
        assert "Order BOM.pdf" in zf.namelist()
