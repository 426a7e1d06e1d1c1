import argparse
import logging
import os
import sys

from src.bom_merge import (
    DiagnosticKind,
    PipelineConfig,
    aggregate_parts,
    extract_file_bom,
    extract_folder_bom,
    total_quantity,
)
from src.exporters import generate_bom_csv, generate_bom_markdown


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Merge pedal build documents into a single Bill of Materials."
    )
    parser.add_argument(
        "input_path",
        nargs="?",
        default="data",
        help="A PDF/CSV document or a folder of them (default: ./data)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Trace every skipped or preserved row"
    )
    parser.add_argument(
        "--output",
        metavar="DIR",
        help="Also write merged_bom.csv and merged_bom.md to this folder",
    )
    return parser


def print_table(bom) -> None:
    type_width = max([len("Type")] + [len(str(e["type"])) for e in bom])
    value_width = max([len("Value")] + [len(e["value"]) for e in bom])

    print(f"{'Type':<{type_width}}  {'Value':<{value_width}}  Qty")
    print(f"{'-' * type_width}  {'-' * value_width}  ---")
    for entry in bom:
        print(
            f"{str(entry['type']):<{type_width}}  "
            f"{entry['value']:<{value_width}}  {entry['quantity']:>3}"
        )


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # Silence noisy libraries so we can see our own debug logs
    logging.getLogger("pdfminer").setLevel(logging.WARNING)

    diagnostics = []
    config = PipelineConfig(debug=args.debug, on_diagnostic=diagnostics.append)

    input_path = args.input_path
    if not os.path.exists(input_path):
        print(f"❌ Input path not found: {input_path}")
        return 1

    if os.path.isfile(input_path):
        parts, _ = extract_file_bom(input_path, config)
    elif os.path.isdir(input_path):
        parts, stats = extract_folder_bom(input_path, config)
        print(f"📂 Read {len(stats)} documents from '{input_path}'")
    else:
        print("❌ Input path must be a file or folder")
        return 1

    bom = aggregate_parts(parts)

    print("\n=== Final Consolidated BOM ===")
    print_table(bom)
    print(f"\nParts: {total_quantity(bom)} | Unique Items: {len(bom)}")

    failures = [d for d in diagnostics if d["kind"] is DiagnosticKind.SOURCE_FAILURE]
    misses = [d for d in diagnostics if d["kind"] is DiagnosticKind.CLASSIFICATION_MISS]
    if failures:
        print(f"\n❌ {len(failures)} documents could not be read:")
        for d in failures:
            print(f"   {d['reason']}")
    if misses:
        print(f"\n⚠️  Skipped {len(misses)} rows that could not be classified:")
        for d in misses:
            print(f"   ? [{d['source']}] {' | '.join(d['row'])}")

    if args.output:
        os.makedirs(args.output, exist_ok=True)
        csv_path = os.path.join(args.output, "merged_bom.csv")
        md_path = os.path.join(args.output, "merged_bom.md")

        try:
            with open(csv_path, "wb") as f:
                f.write(generate_bom_csv(bom))
            print(f"\n✅ CSV: {csv_path}")
        except PermissionError:
            print(f"\n❌ Error: Close {csv_path} first.")

        try:
            with open(md_path, "w", encoding="utf-8") as f:
                f.write(generate_bom_markdown(bom))
            print(f"✅ MD:  {md_path}")
        except PermissionError:
            print(f"\n❌ Error: Close {md_path} first.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
