# File: src/salestrack/core/sales_export.py
"""Excel export of sales entries and the import template."""

import io
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from salestrack.models.sales_entry_schemas import SalesEntryRecord

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, column width)
EXPORT_COLUMNS: list[tuple[str, int]] = [
    ("Date", 12),
    ("UPC", 15),
    ("Product Name", 25),
    ("Description", 35),
    ("Quantity", 10),
    ("Category", 18),
    ("Unit Price", 12),
    ("Discount %", 12),
    ("Amount", 12),
    ("Branch", 10),
    ("Created At", 20),
]

CURRENCY_COLUMNS = {"Unit Price", "Amount"}

# Headers the importer recognizes, with one sample row
TEMPLATE_COLUMNS: list[tuple[str, int]] = [
    ("Name", 20),
    ("Product", 30),
    ("Branch", 10),
    ("Quantity", 10),
    ("Price", 12),
    ("Discount %", 12),
    ("Amount", 12),
    ("Date", 10),
]
TEMPLATE_SAMPLE_ROW: list[Any] = ["MHB-1042", "Canvas tote bag", "MHB", 1, 599, 0, None, 15]


def get_export_headers() -> list[str]:
    """Get column headers for export, in order."""
    return [header for header, _ in EXPORT_COLUMNS]


def entry_to_row(entry: SalesEntryRecord) -> list[Any]:
    """Convert an entry to export cell values; money goes out as numbers."""
    return [
        entry.date.isoformat(),
        entry.upc,
        entry.name,
        entry.description,
        entry.qty,
        entry.category,
        float(entry.price),
        float(entry.discount_percent),
        float(entry.amount),
        entry.branch,
        entry.created_at.isoformat(),
    ]


def write_header_row(ws: Worksheet, columns: list[tuple[str, int]]) -> None:
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col_idx, (header, width) in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    ws.freeze_panes = "A2"


def workbook_to_bytes(wb: Workbook) -> bytes:
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def create_sales_workbook(entries: Sequence[SalesEntryRecord]) -> bytes:
    """Generate an .xlsx with one row per entry."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sales Data"
    write_header_row(ws, EXPORT_COLUMNS)

    headers = get_export_headers()
    currency_idx = {idx for idx, header in enumerate(headers, start=1) if header in CURRENCY_COLUMNS}

    for row_idx, entry in enumerate(entries, start=2):
        for col_idx, value in enumerate(entry_to_row(entry), start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if col_idx in currency_idx:
                cell.number_format = "#,##0.00"

    return workbook_to_bytes(wb)


def create_import_template() -> bytes:
    """Generate a workbook with the importer's headers and a sample row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Template"
    write_header_row(ws, TEMPLATE_COLUMNS)

    for col_idx, value in enumerate(TEMPLATE_SAMPLE_ROW, start=1):
        ws.cell(row=2, column=col_idx, value=value)

    return workbook_to_bytes(wb)
