"""
Export writers — CSV via pandas, styled Excel workbooks via openpyxl.
"""
from __future__ import annotations

import io
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from alcohol_analytics.export.formatters import (
    format_header_row,
    format_data_cell,
    auto_column_width,
)
from alcohol_analytics.export.projector import ExportRow, header_for, to_csv_text
from alcohol_analytics.export.styles import TITLE_FONT, SUBTITLE_FONT


ColSpec = tuple[str, str, str]  # (key, col_type, label)

_INTEGER_COLUMNS = {"year", "month"}


def column_type(key: str, rows: list[ExportRow]) -> str:
    """Excel column type for an export column (drives the number format)."""
    if key in _INTEGER_COLUMNS:
        return "number"
    if key.endswith("_share"):
        return "share"
    if key.startswith("ratio"):
        return "ratio"
    sample = next((r[key] for r in rows if r.get(key) is not None), None)
    if isinstance(sample, str):
        return "text"
    return "volume"


def column_specs(rows: list[ExportRow]) -> list[ColSpec]:
    return [(key, column_type(key, rows), key) for key in header_for(rows)]


class ExcelWriter:
    """Fluent builder for styled Excel workbooks."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._first_sheet = True

    # ------------------------------------------------------------------
    # Sheet management
    # ------------------------------------------------------------------

    def add_sheet(self, title: str) -> Worksheet:
        """Create a new worksheet (re-uses the default sheet for the first call)."""
        # Excel caps sheet titles at 31 chars
        title = title[:31]
        if self._first_sheet:
            ws = self.wb.active
            ws.title = title
            self._first_sheet = False
        else:
            ws = self.wb.create_sheet(title=title)
        return ws

    # ------------------------------------------------------------------
    # Title block
    # ------------------------------------------------------------------

    def write_title(
        self,
        ws: Worksheet,
        title: str,
        subtitle: str,
        merge_cols: int = 6,
    ) -> int:
        """Write title + subtitle rows. Returns next available row."""
        merge_cols = max(merge_cols, 1)
        ws.cell(row=1, column=1).value = title
        ws.cell(row=1, column=1).font = TITLE_FONT
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=merge_cols)

        ws.cell(row=2, column=1).value = subtitle
        ws.cell(row=2, column=1).font = SUBTITLE_FONT
        ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=merge_cols)

        for col in range(1, merge_cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18

        return 4

    # ------------------------------------------------------------------
    # Data tables
    # ------------------------------------------------------------------

    def write_table(
        self,
        ws: Worksheet,
        start_row: int,
        columns: list[ColSpec],
        rows: list[ExportRow],
        freeze: bool = True,
    ) -> int:
        """Write headers + data rows. Returns the row after the last data row."""
        for col_num, (_, _, label) in enumerate(columns, 1):
            ws.cell(row=start_row, column=col_num).value = label
        format_header_row(ws, start_row, len(columns))

        row = start_row + 1
        for row_data in rows:
            for col_num, (key, col_type, _) in enumerate(columns, 1):
                format_data_cell(ws, row, col_num, row_data.get(key), col_type)
            row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return row

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        """Save the workbook to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path

    def to_buffer(self) -> io.BytesIO:
        """Serialise the workbook into an in-memory buffer, rewound for reading."""
        buf = io.BytesIO()
        self.wb.save(buf)
        buf.seek(0)
        return buf


# ---------------------------------------------------------------------------
# One-shot writers used by the CLI and API
# ---------------------------------------------------------------------------

def write_csv(rows: list[ExportRow], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv_text(rows), encoding="utf-8")
    return path


def build_workbook(rows: list[ExportRow], title: str, subtitle: str = "") -> ExcelWriter:
    columns = column_specs(rows)
    writer = ExcelWriter()
    ws = writer.add_sheet(title)
    start = writer.write_title(ws, title, subtitle, merge_cols=len(columns))
    writer.write_table(ws, start, columns, rows)
    return writer


def write_xlsx(rows: list[ExportRow], path: str | Path, title: str, subtitle: str = "") -> Path:
    return build_workbook(rows, title, subtitle).save(path)
