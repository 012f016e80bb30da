"""Dataset loading and saving utilities."""

from pathlib import Path

import pandas as pd


def read_table(path: Path) -> pd.DataFrame:
    """
    Read tabular data file (Excel, CSV or Stata) based on file extension.

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv
    - Stata: .dta

    Args:
        path: Path to data file

    Returns:
        pandas DataFrame

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path)
    elif suffix == ".csv":
        return pd.read_csv(path)
    elif suffix == ".dta":
        return pd.read_stata(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv, .dta")


def write_table(df: pd.DataFrame, path: Path) -> Path:
    """
    Write a DataFrame as CSV or Stata (.dta), creating parent directories.

    Returns:
        The written path
    """
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        df.to_csv(path, index=False)
    elif suffix == ".dta":
        df.to_stata(path, write_index=False, version=118)
    else:
        raise ValueError(f"Unsupported output format: {suffix}. Supported formats: .csv, .dta")
    return path
