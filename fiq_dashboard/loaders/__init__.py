"""Data ingestion loaders for uploaded supply-chain files."""

from .upload import load_csv, load_excel, load_upload
from .utils import normalise_header, parse_date, safe_int

__all__ = [
    "load_csv",
    "load_excel",
    "load_upload",
    "normalise_header",
    "parse_date",
    "safe_int",
]
