"""
Single source of truth for export workbook colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
DARK_TEAL = "0A4F5C"
HEADER_BG = "0A4F5C"
ALTERNATE_ROW = "F5F5F5"
WHITE = "FFFFFF"
BLACK = "000000"
MISSING_BG = "F8F9FA"
GRAY_666 = "666666"
GRAY_ADB = "ADB5BD"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=18, bold=True, color=DARK_TEAL)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
MISSING_FONT = Font(name="Calibri", size=10, italic=True, color=GRAY_ADB)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
MISSING_FILL = PatternFill(start_color=MISSING_BG, end_color=MISSING_BG, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=DARK_TEAL),
    right=Side(style="thin", color=DARK_TEAL),
    top=Side(style="thin", color=DARK_TEAL),
    bottom=Side(style="medium", color=DARK_TEAL),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# ---------------------------------------------------------------------------
# Column kind → number format
# ---------------------------------------------------------------------------
NUMBER_FORMATS = {
    "volume": "#,##0.000",
    "share": "0.0000",
    "ratio": "0.0000",
    "number": "0",
}
