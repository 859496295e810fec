"""Data loading, normalization, and in-memory order store."""
from .errors import DatasetLoadError, DataFormatError, InvalidTransitionError, RowNormalizationWarning
from .loader import load_dataset
from .store import DataStore
from .schemas import AggregationResult, GroupTotal, Level, LoadResult, NavigationState, PeriodFilter, Record
from .normalize import normalize, normalize_row, canonical_purchase_type, parse_order_date
