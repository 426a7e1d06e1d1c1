import csv
import io
from collections.abc import Iterable

from src.bom_merge import BomEntry

CSV_FIELDS = ["Type", "Value", "Quantity"]


def generate_bom_csv(entries: Iterable[BomEntry]) -> bytes:
    """
    Generates a CSV file for the merged BOM.

    Constructs a UTF-8 encoded CSV string (with BOM signature) suitable for
    download, one row per aggregated entry in the order given.

    Args:
        entries (Iterable[BomEntry]): The sorted, aggregated BOM.

    Returns:
        bytes: The CSV content encoded as utf-8-sig.
    """
    csv_buf = io.StringIO()
    writer = csv.DictWriter(csv_buf, fieldnames=CSV_FIELDS)
    writer.writeheader()

    for entry in entries:
        writer.writerow(
            {
                "Type": str(entry["type"]),
                "Value": entry["value"],
                "Quantity": entry["quantity"],
            }
        )

    # encode "utf-8-sig" to ensure Excel opens it correctly with Ω and µ
    return csv_buf.getvalue().encode("utf-8-sig")


def generate_bom_markdown(
    entries: Iterable[BomEntry], title: str = "Merged BOM"
) -> str:
    """
    Renders the merged BOM as a Markdown checklist table.

    Args:
        entries (Iterable[BomEntry]): The sorted, aggregated BOM.
        title (str): Heading placed above the table.

    Returns:
        str: The Markdown document.
    """
    lines = [
        f"# {title}",
        "",
        "| Type | Value | Qty |",
        "| --- | --- | :---: |",
    ]
    for entry in entries:
        lines.append(
            f"| {entry['type']} | **{entry['value']}** | {entry['quantity']} |"
        )
    return "\n".join(lines) + "\n"
