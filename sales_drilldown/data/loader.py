"""
Dataset loading: read the restaurant CSV with pandas, then normalize rows.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from sales_drilldown.config import DATASET_PATH, MALFORMED_COLUMN, REQUIRED_COLUMNS
from sales_drilldown.data.errors import DatasetLoadError
from sales_drilldown.data.normalize import normalize, normalize_columns
from sales_drilldown.data.schemas import LoadResult


# Stand-in cell value for a line with more fields than the header
_BAD_LINE_MARKER = "\x00bad-line"


def _mark_bad_lines(df: pd.DataFrame, bad_lines: list[list[str]], width: int) -> pd.DataFrame:
    """Blank the placeholder rows and record why each one is unusable.

    The rows stay in place so normalize() reports them under their own row numbers.
    """
    flagged = df.iloc[:, 0] == _BAD_LINE_MARKER
    df = df.copy()
    df.loc[flagged, :] = ""
    df[MALFORMED_COLUMN] = ""
    df.loc[flagged, MALFORMED_COLUMN] = [
        f"expected {width} fields, saw {len(fields)}" for fields in bad_lines
    ]
    return df


def read_table(filepath: Path) -> pd.DataFrame:
    """Read the CSV as strings so coercion happens in one place (normalize_row).

    Lines with too many fields do not abort the read; they come back flagged in
    MALFORMED_COLUMN and are skipped during normalization.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise DatasetLoadError(f"Dataset not found: {filepath}", source=str(filepath))

    bad_lines: list[list[str]] = []
    try:
        width = len(pd.read_csv(filepath, nrows=0).columns)

        def _flag_bad_line(fields: list[str]) -> list[str]:
            bad_lines.append(fields)
            return [_BAD_LINE_MARKER] * width

        df = pd.read_csv(
            filepath, dtype=str, keep_default_na=False, index_col=False,
            engine="python", on_bad_lines=_flag_bad_line,
        )
    except pd.errors.EmptyDataError:
        raise DatasetLoadError(f"Dataset is empty: {filepath.name}", source=str(filepath)) from None
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DatasetLoadError(f"Could not read {filepath.name} as a table: {exc}", source=str(filepath)) from exc

    if bad_lines:
        print(f"  Warning: {len(bad_lines):,} line(s) in {filepath.name} have too many fields")
        df = _mark_bad_lines(df, bad_lines, width)

    df = normalize_columns(df)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DatasetLoadError(
            f"{filepath.name} is missing required columns: {', '.join(missing)}",
            source=str(filepath),
        )
    return df


def load_dataset(filepath: Path = DATASET_PATH) -> LoadResult:
    """Load and normalize the dataset. Raises DatasetLoadError if it cannot be read."""
    filepath = Path(filepath)
    df = read_table(filepath)
    print(f"  {filepath.name}: {len(df):,} raw rows")

    result = normalize(df.to_dict("records"), source=str(filepath))
    print(f"  Loaded {len(result.records):,} orders ({result.skipped_count:,} skipped)")
    return result
