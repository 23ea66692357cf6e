"""Timing tables for the Fibonacci memoization benchmark.

A timing table is a DataFrame with an integer ``n`` column (input size) and
a float ``time`` column (elapsed duration), one row per benchmark run, in
file order.
"""

from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

REQUIRED_COLUMNS = ("n", "time")
INT64_LIMIT = 2.0**63

# The memoized benchmark reports durations 1000x finer than the plain one.
# The CSV carries no unit metadata, so the conversion is fixed here.
MEMO_TIME_DIVISOR = 1000

DEFAULT_NO_MEMO_CSV = "fib-no-memo-results.csv"
DEFAULT_MEMO_CSV = "fib-memo-results.csv"


class TimingError(Exception):
    """Base class for errors raised while producing the comparison plot."""


class DataLoadError(TimingError):
    """A timing CSV is missing, unreadable, or does not match the schema."""

    def __init__(
        self,
        path: Union[str, Path],
        message: str,
        row: Optional[int] = None,
        column: Optional[str] = None,
    ):
        self.path = Path(path)
        self.message = message
        self.row = row
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        location = str(self.path)
        if self.row is not None:
            location += f", data row {self.row}"
        if self.column is not None:
            location += f", column '{self.column}'"
        return f"{location}: {self.message}"


class RenderError(TimingError):
    """The plotting backend could not display or write the figure."""


def _first_bad_row(mask: pd.Series) -> int:
    # 1-based position among data rows (header excluded)
    return int(np.flatnonzero(mask.to_numpy())[0]) + 1


def _numeric_column(df: pd.DataFrame, column: str, path: Path) -> pd.Series:
    raw = df[column]
    # pandas reads True/False cells as booleans, which to_numeric keeps
    is_bool = raw.map(lambda v: isinstance(v, (bool, np.bool_))).astype(bool)
    values = pd.to_numeric(raw.mask(is_bool), errors="coerce")
    bad = values.isna() | is_bool
    if bad.any():
        row = _first_bad_row(bad)
        cell = raw.iloc[row - 1]
        if pd.isna(cell):
            message = "missing value"
        else:
            message = f"non-numeric value {str(cell).strip()!r}"
        raise DataLoadError(path, message, row=row, column=column)
    return values


def load_timing_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a ``n,time`` CSV file into a timing table.

    Raises DataLoadError naming the file, and the data row and column where
    the problem was found, if the file cannot be turned into a table.
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(path, "file not found")

    try:
        df = pd.read_csv(path, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        raise DataLoadError(path, "file is empty")
    except pd.errors.ParserError as e:
        raise DataLoadError(path, f"malformed CSV: {e}")
    except UnicodeDecodeError as e:
        raise DataLoadError(path, f"not a text file: {e}")
    except OSError as e:
        raise DataLoadError(path, f"cannot read file: {e.strerror or e}")

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(
            path,
            f"missing required column(s) {', '.join(missing)} "
            f"(found: {', '.join(df.columns) or 'none'})",
        )
    for column in REQUIRED_COLUMNS:
        if list(df.columns).count(column) > 1:
            raise DataLoadError(path, f"duplicate column '{column}' in header")

    n = _numeric_column(df, "n", path)
    time = _numeric_column(df, "time", path)

    not_count = (n < 0) | (n != np.floor(n)) | ~np.isfinite(n)
    if not_count.any():
        row = _first_bad_row(not_count)
        raise DataLoadError(
            path,
            f"expected a non-negative integer, got {n.iloc[row - 1]:g}",
            row=row,
            column="n",
        )

    too_large = n.astype("float64") >= INT64_LIMIT
    if too_large.any():
        row = _first_bad_row(too_large)
        raise DataLoadError(
            path,
            f"input size {n.iloc[row - 1]:g} does not fit in a 64-bit integer",
            row=row,
            column="n",
        )

    not_finite = ~np.isfinite(time)
    if not_finite.any():
        row = _first_bad_row(not_finite)
        raise DataLoadError(
            path,
            f"expected a finite duration, got {time.iloc[row - 1]:g}",
            row=row,
            column="time",
        )

    return pd.DataFrame(
        {"n": n.astype("int64"), "time": time.astype("float64")}
    ).reset_index(drop=True)


def rescale(table: pd.DataFrame, factor: float) -> pd.DataFrame:
    """Return a copy of ``table`` with every ``time`` divided by ``factor``."""
    if not np.isfinite(factor) or factor == 0:
        raise ValueError(f"rescale factor must be finite and non-zero, got {factor}")

    result = table.copy()
    result["time"] = table["time"] / factor
    return result
