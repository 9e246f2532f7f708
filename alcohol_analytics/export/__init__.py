"""Export projection and CSV / Excel writers."""
from .projector import project_rows, round_value, rows_to_frame, to_csv_text, read_csv_rows
from .writer import ExcelWriter, build_workbook, write_csv, write_xlsx
