import logging
import os
import sys

from src.exporters import generate_bom_csv, generate_bom_markdown, generate_pick_list_csv
from src.pdf_generator import generate_export_zip
from src.sink_bom import (
    BomGenerationError,
    BomGenerator,
    CatalogFallbackProvider,
    EngineSettings,
    find_placeholders,
    load_catalog,
    load_json_input,
    summarize_bom,
)

USAGE = "Usage: python cli.py ORDER_JSON CATALOG_JSON [OUTPUT_DIR]"


def write_file(path, content):
    try:
        if isinstance(content, bytes):
            with open(path, "wb") as f:
                f.write(content)
        else:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        print(f"✅ {path}")
    except PermissionError:
        print(f"❌ Error: Close {path} first.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) < 3:
        print(USAGE)
        sys.exit(1)

    order_path, catalog_path = sys.argv[1], sys.argv[2]
    out_dir = sys.argv[3] if len(sys.argv) > 3 else "output"

    # 1. Ingest
    order, errors = load_json_input("File Path", order_path, "order")
    if errors:
        print(f"❌ Could not read order: {errors[0]}")
        sys.exit(1)

    try:
        catalog = load_catalog(catalog_path)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read catalog: {e}")
        sys.exit(1)

    settings = EngineSettings.from_env()
    fallback = CatalogFallbackProvider.from_directory(settings.resources_dir)

    try:
        generator = BomGenerator(catalog, fallback=fallback, settings=settings)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read control box table {settings.control_box_table}: {e}")
        sys.exit(1)

    # 2. Generate
    try:
        result = generator.generate(order)
    except BomGenerationError as e:
        print(f"\n❌ {e.code}: {e.message}")
        sys.exit(2)

    # 3. Verify
    summary = summarize_bom(result["hierarchical"])
    print("\n--- Stats ---")
    print(
        f"Lines: {summary['total_items']} | Top level: {summary['top_level_items']} "
        f"| Max depth: {summary['max_depth']}"
    )

    placeholders = find_placeholders(result["hierarchical"])
    if placeholders:
        print(f"\n⚠️  {len(placeholders)} line(s) not found in the catalog:")
        for row in placeholders:
            hint = f" (try {row['resolution_suggestion']})" if row["resolution_suggestion"] else ""
            print(f"   ? {row['id']} [{row['category']}]{hint}")
    else:
        print("✅ Every line resolved.")

    # 4. Output
    os.makedirs(out_dir, exist_ok=True)
    po_number = order.get("poNumber") if isinstance(order, dict) else None
    order_info = {
        "PO Number": po_number or "",
        "Build Numbers": order.get("buildNumbers", []) if isinstance(order, dict) else [],
    }

    write_file(os.path.join(out_dir, "bom.csv"), generate_bom_csv(result["flattened"]))
    write_file(
        os.path.join(out_dir, "pick_list.csv"),
        generate_pick_list_csv(result["hierarchical"]),
    )
    write_file(os.path.join(out_dir, "bom.md"), generate_bom_markdown(result["flattened"]))
    write_file(os.path.join(out_dir, "bom_export.zip"), generate_export_zip(result, order_info))

    print("\nDone.")
