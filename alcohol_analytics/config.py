"""
Alcohol Analytics — Configuration: paths, column names, view constants.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with ALCOHOL_DATA_DIR / ALCOHOL_DATA_FILE env vars
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("ALCOHOL_DATA_DIR", str(Path.cwd() / "data")))
DATA_DIR = _data_dir
DATA_FILE = Path(os.environ.get("ALCOHOL_DATA_FILE", str(DATA_DIR / "alcohol.csv")))
EXPORTS_FOLDER = DATA_DIR / "exports"

# ---------------------------------------------------------------------------
# Source columns (Stats NZ alcohol availability CSV)
# ---------------------------------------------------------------------------
PERIOD_COLUMN = "Period"
GROUP_COLUMN = "Group"
SERIES_COLUMN = "Series_title_1"
VALUE_COLUMN = "Data_value"
UNITS_COLUMN = "UNITS"

# Tried in order, first present value wins. The quarter column ships without
# a header, which pandas names "Unnamed: 1".
MONTH_COLUMN_ALIASES = ["Unnamed: 1", "", "Month", "Month_code"]

REQUIRED_COLUMNS = [PERIOD_COLUMN, GROUP_COLUMN, SERIES_COLUMN, VALUE_COLUMN, UNITS_COLUMN]

DEFAULT_GROUP_LABEL = "Unknown group"
DEFAULT_SERIES_LABEL = "Unknown series"

# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------
MISSING_TOKENS = {"", ".."}

# Quarter-end convention
MONTH_MAP = {
    "Mar": 3,
    "Jun": 6,
    "Sep": 9,
    "Dec": 12,
}
DEFAULT_MONTH = 12
QUARTER_MONTHS = [3, 6, 9, 12]

MONTH_LABELS = {3: "Mar", 6: "Jun", 9: "Sep", 12: "Dec"}

# ---------------------------------------------------------------------------
# Aggregation / export policy
# ---------------------------------------------------------------------------
SMOOTH_WINDOW = 4

VOLUME_DIGITS = 3
SHARE_DIGITS = 4

# ---------------------------------------------------------------------------
# View constants
# ---------------------------------------------------------------------------
LONG_RUN_GROUPS = ["Litres of Beverage", "Litres of Alcohol"]
LONG_RUN_SERIES = ["Total beer", "Total wine", "Total spirits"]

PER_HEAD_GROUP = "(DISC) Volume & Volume Per Head"
PER_CAPITA_SERIES = ["Beer Per Head", "Wine Per Head", "Spirits Per Head"]

BEER_STRENGTH_GROUP = "Litres of Beverage"
BEER_STRENGTH_LABELS = [
    "Beer containing not more than 1.150% alcohol",
    "Beer containing between 1.151% and 2.500% alc",
    "Beer containing between 2.501% and 4.350% alc",
    "Beer containing between 4.351% and 5.000% alc",
    "Beer containing more than 5.00% alcohol",
]

SEASONALITY_DEFAULT_GROUP = "Litres of Beverage"
SEASONALITY_DEFAULT_SERIES = "Beer"

SPIRITS_GROUP = PER_HEAD_GROUP
SPIRITS_SERIES = "Spirits"
LITRES_UNITS = "Litres"
PROOF_UNITS = "ProofL"
