"""Data loading, normalisation, and the shared in-memory model."""
from .loader import LoadError, load_model, read_raw_rows
from .model import DataModel, build_model
from .normalize import normalize_row, normalize_rows, slugify
from .schemas import NormalizedRecord
from .store import DataStore
