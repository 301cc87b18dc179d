from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

_SUMMARY_HEADERS = (
    "Product ID",
    "Product",
    "Category",
    "Total Qty",
    "Total Value",
    "Reorder Level",
    "Status",
    "Orders",
    "Ordered Qty",
    "Demand Score",
)
_BATCH_HEADERS = (
    "Product ID",
    "Product",
    "Godown",
    "Godown Type",
    "Batch",
    "Quantity",
    "Purchase Price",
    "Expiry Date",
    "Received At",
)


def _write_sheet(worksheet, headers, rows):
    worksheet.append(list(headers))
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        worksheet.append(list(row))
    for idx, header in enumerate(headers, start=1):
        worksheet.column_dimensions[get_column_letter(idx)].width = max(12, len(header) + 2)
    worksheet.freeze_panes = "A2"


def _naive(value):
    if value is not None and getattr(value, "tzinfo", None) is not None:
        return value.replace(tzinfo=None)
    return value


def build_stock_workbook(aggregates, stats=None) -> bytes:
    """Render aggregated stock as an .xlsx file (summary, batches, totals)."""
    workbook = Workbook()
    summary = workbook.active
    summary.title = "Stock"
    _write_sheet(
        summary,
        _SUMMARY_HEADERS,
        (
            (
                entry["product"].id,
                entry["product"].name,
                entry["product"].category or "",
                entry["total_quantity"],
                round(entry["total_value"], 2),
                entry["reorder_level"],
                entry["status"],
                entry["order_count"],
                entry["order_quantity"],
                entry["demand_score"],
            )
            for entry in aggregates
        ),
    )

    batches = workbook.create_sheet("Batches")
    _write_sheet(
        batches,
        _BATCH_HEADERS,
        (
            (
                entry["product"].id,
                entry["product"].name,
                group["godown"]["name"],
                group["godown"]["godown_type"],
                batch.batch_number or "",
                batch.quantity,
                batch.purchase_price,
                batch.expiry_date,
                _naive(batch.created_at),
            )
            for entry in aggregates
            for group in entry["godown_breakdown"]
            for batch in group["batches"]
        ),
    )

    if stats:
        totals = workbook.create_sheet("Summary")
        _write_sheet(
            totals,
            ("Metric", "Value"),
            (
                ("In Stock", stats["in_stock"]),
                ("Low Stock", stats["low_stock"]),
                ("Out of Stock", stats["out_of_stock"]),
                ("Total Value", round(stats["total_value"], 2)),
            ),
        )

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["build_stock_workbook"]
