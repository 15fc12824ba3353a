"""Read/write (t, y) sample tables as CSV or parquet."""

from pathlib import Path

import pandas as pd

from ..config import DATA_DIR

_READERS = {
    ".csv": pd.read_csv,
    ".parquet": pd.read_parquet,
}


def get_data_path(name: str, fmt: str = "csv") -> Path:
    """Get the file path for a named sample set."""
    return DATA_DIR / f"{name}.{fmt}"


def save_samples(df: pd.DataFrame, name: str, fmt: str = "csv") -> Path:
    """
    Save a sample table to DATA_DIR.

    Args:
        df: DataFrame with coordinate and observation columns
        name: Sample set name (file stem)
        fmt: 'csv' or 'parquet'

    Returns:
        Path to saved file
    """
    path = get_data_path(name, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "csv":
        df.to_csv(path, index=False)
    elif fmt == "parquet":
        df.to_parquet(path, index=False)
    else:
        raise ValueError(f"Unsupported format: {fmt!r}")
    return path


def load_samples(
    path: str | Path,
    time_col: str | None = None,
    value_col: str | None = None,
) -> pd.DataFrame:
    """
    Load (t, y) samples from a CSV or parquet file.

    Args:
        path: File path (.csv or .parquet)
        time_col: Coordinate column (default: first column)
        value_col: Observation column (default: second column)

    Returns:
        DataFrame with columns 't' and 'y', sorted by t, NaN rows dropped
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported sample file type: {path.suffix!r}")
    if not path.exists():
        raise FileNotFoundError(f"No sample file at {path}")

    raw = reader(path)
    if raw.shape[1] < 2 and (time_col is None or value_col is None):
        raise ValueError(f"{path} needs at least two columns, found {raw.columns.tolist()}")

    time_col = time_col or raw.columns[0]
    value_col = value_col or raw.columns[1]
    for col in (time_col, value_col):
        if col not in raw.columns:
            raise ValueError(f"Column {col!r} not found in {path}")

    samples = pd.DataFrame({
        "t": pd.to_numeric(raw[time_col], errors="coerce"),
        "y": pd.to_numeric(raw[value_col], errors="coerce"),
    })
    samples = samples.dropna().sort_values("t").reset_index(drop=True)
    if samples.empty:
        raise ValueError(f"No numeric samples found in {path}")
    return samples


def data_exists(name: str, fmt: str = "csv") -> bool:
    """Check if a named sample file exists."""
    return get_data_path(name, fmt).exists()
