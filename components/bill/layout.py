"""
Cash bill statement layout.

Members are laid out two per row band on a fixed grid::

    A      B            C           D  E  F           G
         +---- left bill ----+            +---- right bill ---+

Each bill is a 14-row block: title, date, name + voucher, column header,
nine line items and the total. After each band the row cursor moves by the
taller block plus a fixed gap, so left and right blocks always share a top
row. The result is a plain description of cells, merges and borders that an
exporter turns into a spreadsheet.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from components.bill.schemas import MemberCashBillSnapshot
from components.bill.voucher import Matched, extract_voucher

Number = Union[int, float, Decimal]

DEFAULT_TITLE = "CASH BILL MEETING 85"
BLUE = "FF0B2E6F"

START_ROW = 2
START_COL = 2  # B
BLOCK_COLS = 2
GAP_COLS = 2  # D & E
VERTICAL_GAP_ROWS = 2
ROW_HEIGHT = 20
RIGHT_COL = START_COL + BLOCK_COLS + GAP_COLS  # F

COLUMN_WIDTHS: Dict[int, float] = {
    1: 4,
    2: 35.22,
    3: 26.1,
    4: 5.84,
    5: 5.84,
    6: 26.1,
    7: 26.21,
}

LINE_ITEMS: Tuple[Tuple[str, str], ...] = (
    ("Subscription Income", "subscription_income"),
    ("Principal Balance", "loan_balance"),
    ("Interest", "monthly_interest"),
    ("Principal Balance", "updated_principal_balance"),
    ("Monthly Installment / Month", "monthly_installment"),
    ("Installment Interest", "installment_interest"),
    ("Interest Months", "interest_months"),
    ("Total Loan Balance", "total_loan_balance"),
    ("Fine", "fine"),
)
TOTAL_FIELD = "total_amount_to_pay"

THIN = "thin"
MEDIUM = "medium"


@dataclass(frozen=True)
class CellStyle:
    bold: bool = False
    size: Optional[float] = None
    color: Optional[str] = None
    horizontal: Optional[str] = None
    vertical: Optional[str] = None


@dataclass(frozen=True)
class CellBorder:
    top: str = THIN
    left: str = THIN
    bottom: str = THIN
    right: str = THIN


@dataclass(frozen=True)
class Cell:
    row: int
    column: int
    value: Any
    style: CellStyle = field(default_factory=CellStyle)


@dataclass(frozen=True)
class Merge:
    top: int
    left: int
    bottom: int
    right: int


@dataclass
class BillBlock:
    """Position and resolved header data of one member's bill."""

    top_row: int
    left_col: int
    height: int
    name: str
    voucher: str

    @property
    def bottom_row(self) -> int:
        return self.top_row + self.height - 1


@dataclass
class Band:
    """One row band: a left block and, except possibly the last, a right one."""

    top_row: int
    extent: int
    left: BillBlock
    right: Optional[BillBlock] = None


@dataclass
class BillDocument:
    """Fully positioned statement sheet."""

    start_row: int = START_ROW
    cursor: int = START_ROW
    column_widths: Dict[int, float] = field(default_factory=lambda: dict(COLUMN_WIDTHS))
    row_heights: Dict[int, float] = field(default_factory=dict)
    cells: List[Cell] = field(default_factory=list)
    merges: List[Merge] = field(default_factory=list)
    borders: Dict[Tuple[int, int], CellBorder] = field(default_factory=dict)
    bands: List[Band] = field(default_factory=list)

    def cell_at(self, row: int, column: int) -> Optional[Cell]:
        for cell in self.cells:
            if cell.row == row and cell.column == column:
                return cell
        return None

    @property
    def blocks(self) -> List[BillBlock]:
        placed = []
        for band in self.bands:
            placed.append(band.left)
            if band.right is not None:
                placed.append(band.right)
        return placed


def safe_number(value: Any) -> Number:
    """Numeric value or 0 for anything missing, non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, Decimal):
        return value if value.is_finite() else 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0
    return number if math.isfinite(number) else 0


def as_mapping(snapshot: Union[MemberCashBillSnapshot, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(snapshot, Mapping):
        return snapshot
    return snapshot.model_dump()


def resolve_header(data: Mapping[str, Any]) -> Tuple[str, str]:
    """Clean display name and the voucher code shown next to it."""
    match = extract_voucher(data.get("full_name"), data)
    name, voucher = match.as_pair()
    if not isinstance(match, Matched):
        # Non voucher-shaped member codes are still printed as-is.
        member_id = data.get("member_id")
        voucher = str(member_id).strip() if member_id is not None else ""
    return name, voucher


def line_items(data: Mapping[str, Any]) -> List[Tuple[str, Number]]:
    """Ordered (label, amount) rows of a bill, followed by the total."""
    rows = [(label, safe_number(data.get(key))) for label, key in LINE_ITEMS]
    rows.append(("Total", safe_number(data.get(TOTAL_FIELD))))
    return rows


class _Sheet:
    """Accumulates cells and styles for one document."""

    def __init__(self, document: BillDocument):
        self.document = document

    def put(self, row: int, column: int, value: Any, **style: Any) -> None:
        self.document.cells.append(Cell(row, column, value, CellStyle(**style)))

    def merge(self, row: int, left: int, right: int) -> None:
        self.document.merges.append(Merge(row, left, row, right))

    def frame(self, top: int, left: int, bottom: int, right: int) -> None:
        """Thin grid on every cell, medium line on the outer edges."""
        for r in range(top, bottom + 1):
            for c in range(left, right + 1):
                self.document.borders[(r, c)] = CellBorder(
                    top=MEDIUM if r == top else THIN,
                    left=MEDIUM if c == left else THIN,
                    bottom=MEDIUM if r == bottom else THIN,
                    right=MEDIUM if c == right else THIN,
                )


def place_bill(
    sheet: _Sheet,
    snapshot: Union[MemberCashBillSnapshot, Mapping[str, Any]],
    top_row: int,
    left_col: int,
    bill_date: date,
    title: str,
) -> BillBlock:
    """Write one bill with its top-left corner at ``(top_row, left_col)``."""
    data = as_mapping(snapshot)
    name, voucher = resolve_header(data)
    value_col = left_col + 1

    sheet.merge(top_row, left_col, value_col)
    sheet.put(top_row, left_col, title, size=13, bold=True, color=BLUE,
              horizontal="center", vertical="center")

    sheet.merge(top_row + 1, left_col, value_col)
    sheet.put(top_row + 1, left_col, f"Date: {bill_date.strftime('%d/%m/%Y')}", size=11,
              color=BLUE, horizontal="center", vertical="center")

    sheet.put(top_row + 2, left_col, f"Name: {name}".strip(), size=11, color=BLUE,
              horizontal="left", vertical="center")
    if voucher:
        sheet.put(top_row + 2, value_col, voucher, size=18, bold=True, color=BLUE,
                  horizontal="center", vertical="center")

    header_row = top_row + 3
    sheet.put(header_row, left_col, "Description", bold=True, color=BLUE,
              horizontal="left", vertical="center")
    sheet.put(header_row, value_col, "Amount to be Paid", bold=True, color=BLUE,
              horizontal="right", vertical="center")

    row = header_row + 1
    items = line_items(data)
    for label, amount in items[:-1]:
        sheet.put(row, left_col, label)
        sheet.put(row, value_col, amount, horizontal="right", vertical="center")
        row += 1

    label, total = items[-1]
    sheet.put(row, left_col, label, bold=True)
    sheet.put(row, value_col, total, bold=True, horizontal="right", vertical="center")

    sheet.frame(top_row, left_col, row, value_col)
    height = row - top_row + 1
    for r in range(top_row, row + 1):
        sheet.document.row_heights[r] = ROW_HEIGHT

    return BillBlock(top_row=top_row, left_col=left_col, height=height, name=name, voucher=voucher)


def layout_document(
    snapshots: Sequence[Union[MemberCashBillSnapshot, Mapping[str, Any]]],
    *,
    bill_date: date,
    title: str = DEFAULT_TITLE,
) -> BillDocument:
    """Lay out bills two per band in input order."""
    document = BillDocument()
    sheet = _Sheet(document)
    cursor = START_ROW

    for i in range(0, len(snapshots), 2):
        left = place_bill(sheet, snapshots[i], cursor, START_COL, bill_date, title)
        right = None
        used = left.height
        if i + 1 < len(snapshots):
            right = place_bill(sheet, snapshots[i + 1], cursor, RIGHT_COL, bill_date, title)
            used = max(left.height, right.height)
        extent = used + VERTICAL_GAP_ROWS
        document.bands.append(Band(top_row=cursor, extent=extent, left=left, right=right))
        cursor += extent

    document.cursor = cursor
    return document
