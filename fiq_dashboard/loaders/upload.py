"""
Loaders for user-uploaded supply-chain files.

Every loader returns a DataFrame of raw strings with stripped headers and
"" for missing cells. Typing happens later, in the column-mapping step, so
that one malformed cell never aborts a load.

Supported: CSV (any delimiter pandas sniffs as comma), XLSX/XLSM.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import IO, Any

import openpyxl
import pandas as pd

logger = logging.getLogger(__name__)

_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def load_csv(source: str | Path | IO) -> pd.DataFrame:
    """Load an uploaded CSV as all-string columns.

    Parameters
    ----------
    source : Path or file-like object (e.g. a Streamlit UploadedFile).

    Returns
    -------
    DataFrame with one column per CSV header, values as str.

    Raises
    ------
    ValueError if the file cannot be parsed or holds no data rows.
    """
    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise ValueError("CSV file is empty or could not be read.") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        logger.exception("Failed to parse CSV upload: %s", source)
        raise ValueError("Failed to parse the CSV file.") from exc

    # Short rows still come back as NaN
    df = df.fillna("")
    df.columns = [str(col).strip() for col in df.columns]
    df = _drop_blank_rows(df)

    if df.empty:
        raise ValueError("CSV file is empty or could not be read.")

    logger.info("Loaded %d rows, %d columns from CSV", len(df), len(df.columns))
    return df


def load_excel(source: str | Path | IO, sheet_name: str | None = None) -> pd.DataFrame:
    """Load the first (or named) worksheet of an uploaded workbook.

    Assumptions
    -----------
    - The header is the first row with at least one non-empty cell.
    - Date/datetime cells are rendered as ISO strings so they pass through
      the same date normaliser as CSV text.
    - Columns with an empty header are dropped.

    Returns
    -------
    DataFrame of str values, same shape contract as load_csv().
    """
    try:
        wb = openpyxl.load_workbook(source, read_only=True, data_only=True)
    except Exception:
        logger.exception("Failed to open workbook: %s", source)
        raise

    try:
        if sheet_name is not None and sheet_name not in wb.sheetnames:
            logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
            sheet_name = None
        ws = wb[sheet_name] if sheet_name is not None else wb[wb.sheetnames[0]]

        rows = [
            [_cell_to_text(value) for value in row]
            for row in ws.iter_rows(values_only=True)
        ]
    finally:
        wb.close()

    rows = [row for row in rows if any(cell for cell in row)]
    if not rows:
        raise ValueError("Workbook is empty or could not be read.")

    header, body = rows[0], rows[1:]
    keep = [i for i, name in enumerate(header) if name.strip()]
    columns = [header[i].strip() for i in keep]
    records = [[row[i] if i < len(row) else "" for i in keep] for row in body]

    df = pd.DataFrame(records, columns=columns)
    if df.empty:
        raise ValueError("Workbook is empty or could not be read.")

    logger.info("Loaded %d rows, %d columns from workbook", len(df), len(df.columns))
    return df


def load_upload(path: str | Path) -> pd.DataFrame:
    """Dispatch on file extension to the matching loader."""
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return load_csv(path)
    if suffix in _EXCEL_SUFFIXES:
        return load_excel(path)
    raise ValueError(f"Unsupported file type '{suffix}'. Upload a .csv or .xlsx file.")


def _cell_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _drop_blank_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Remove rows where every cell is empty or whitespace."""
    if df.empty:
        return df
    blank = df.apply(lambda col: col.str.strip() == "").all(axis=1)
    return df[~blank].reset_index(drop=True)
