"""Turn cash bill layouts into downloadable files."""

import csv
import io
import re
from datetime import date
from typing import Any, Mapping, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter

from components.bill.layout import (
    DEFAULT_TITLE,
    BillDocument,
    CellStyle,
    as_mapping,
    line_items,
    resolve_header,
)
from components.bill.schemas import MemberCashBillSnapshot

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"
WORKBOOK_CREATOR = "Financial Community App"
BORDER_COLOR = "FF000000"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9_\-.]", re.IGNORECASE)


def _font(style: CellStyle) -> Font:
    return Font(size=style.size, bold=style.bold, color=style.color)


def render_workbook(document: BillDocument) -> Workbook:
    """Build an openpyxl workbook from a laid out document."""
    wb = Workbook()
    wb.properties.creator = WORKBOOK_CREATOR
    ws = wb.active
    ws.title = "Cash Bills"

    for column, width in document.column_widths.items():
        ws.column_dimensions[get_column_letter(column)].width = width
    for row, height in document.row_heights.items():
        ws.row_dimensions[row].height = height

    for merge in document.merges:
        ws.merge_cells(
            start_row=merge.top,
            start_column=merge.left,
            end_row=merge.bottom,
            end_column=merge.right,
        )

    for item in document.cells:
        cell = ws.cell(row=item.row, column=item.column)
        cell.value = item.value
        if item.style != CellStyle():
            cell.font = _font(item.style)
        if item.style.horizontal or item.style.vertical:
            cell.alignment = Alignment(horizontal=item.style.horizontal, vertical=item.style.vertical)

    for (row, column), sides in document.borders.items():
        ws.cell(row=row, column=column).border = Border(
            top=Side(style=sides.top, color=BORDER_COLOR),
            left=Side(style=sides.left, color=BORDER_COLOR),
            bottom=Side(style=sides.bottom, color=BORDER_COLOR),
            right=Side(style=sides.right, color=BORDER_COLOR),
        )

    return wb


def workbook_bytes(document: BillDocument) -> bytes:
    """Serialized ``.xlsx`` content of a document."""
    buffer = io.BytesIO()
    render_workbook(document).save(buffer)
    return buffer.getvalue()


def render_transcript(
    snapshots: Sequence[Union[MemberCashBillSnapshot, Mapping[str, Any]]],
    *,
    bill_date: date,
    title: str = DEFAULT_TITLE,
) -> str:
    """Flat CSV transcript: one section of label/value rows per member."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for snapshot in snapshots:
        data = as_mapping(snapshot)
        name, voucher = resolve_header(data)
        writer.writerow([title])
        writer.writerow(["Date", bill_date.strftime("%d/%m/%Y")])
        writer.writerow(["Name", name])
        writer.writerow(["Voucher", voucher])
        writer.writerow(["Description", "Amount to be Paid"])
        for label, amount in line_items(data):
            writer.writerow([label, amount])
        writer.writerow([])
    return buffer.getvalue()


def sanitize_filename(value: Any) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", str(value or ""))


def export_filename(document_type: str, scope: Optional[str], on: date, ext: str) -> str:
    """``<document-type>-<scope>-<ISO date>.<ext>``; no scope means all members."""
    scope_part = sanitize_filename(scope) if scope else "all-members"
    return f"{document_type}-{scope_part}-{on.isoformat()}.{ext}"


def member_scope(snapshot: Union[MemberCashBillSnapshot, Mapping[str, Any]], fallback: Any) -> str:
    """Identifier used in the filename of a single-member export."""
    data = as_mapping(snapshot)
    for key in ("name", "full_name", "member_id", "user_id"):
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return str(fallback)
