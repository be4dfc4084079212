"""
Column mapping: match raw upload headers to canonical row fields and build
typed DataRow records.

A mapping is a dict of canonical field name -> source column name. Fields
missing from the mapping (or mapped to "") are treated as unmapped.
"""

import logging
from typing import Iterable, Mapping

import pandas as pd

from .config import DATE_FIELDS, OPTIONAL_MARKER, PREVIEW_ROWS, REQUIRED_FIELDS
from .loaders.utils import normalise_header, parse_date, safe_int
from .models import DataRow

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"


def is_optional(field_name: str) -> bool:
    return OPTIONAL_MARKER in REQUIRED_FIELDS.get(field_name, "")


def required_field_names() -> list[str]:
    """Canonical fields that must be mapped before import."""
    return [name for name in REQUIRED_FIELDS if not is_optional(name)]


def suggest_mapping(headers: Iterable[str]) -> dict[str, str]:
    """Propose a mapping by normalised name equality.

    "Product Name", "product_name" and "PRODUCTNAME" all match the
    product_name field. The first matching header wins.
    """
    headers = list(headers)
    mapping = {}
    for field_name in REQUIRED_FIELDS:
        key = normalise_header(field_name)
        for header in headers:
            if normalise_header(header) == key:
                mapping[field_name] = header
                break
    logger.info("Suggested mapping for %d of %d fields", len(mapping), len(REQUIRED_FIELDS))
    return mapping


def missing_required_fields(mapping: Mapping[str, str]) -> list[str]:
    return [name for name in required_field_names() if not mapping.get(name)]


def validate_mapping(mapping: Mapping[str, str], columns: Iterable[str] | None = None) -> None:
    """Raise ValueError if required fields are unmapped or point nowhere.

    Parameters
    ----------
    mapping : canonical field -> source column.
    columns : Source columns available. If given, mapped columns must exist.
    """
    missing = missing_required_fields(mapping)
    if missing:
        labels = ", ".join(REQUIRED_FIELDS[name] for name in missing)
        raise ValueError(f"Please map all required fields. Missing: {labels}")

    if columns is not None:
        available = set(columns)
        unknown = sorted(
            source for source in mapping.values() if source and source not in available
        )
        if unknown:
            raise ValueError(f"Mapped columns not found in upload: {', '.join(unknown)}")


def _active(mapping: Mapping[str, str]) -> dict[str, str]:
    return {
        field_name: source
        for field_name, source in mapping.items()
        if source and field_name in REQUIRED_FIELDS
    }


def preview_mapping(
    raw: pd.DataFrame,
    mapping: Mapping[str, str],
    n: int = PREVIEW_ROWS,
) -> pd.DataFrame:
    """Render the first n rows under canonical field names.

    Date columns show the normalised ``YYYY-MM-DD`` value, or
    "Invalid Date" where the normaliser returned None, so a bad format is
    visible before import.
    """
    validate_mapping(mapping, raw.columns)
    active = _active(mapping)

    head = raw.head(n)
    preview = pd.DataFrame(
        {field_name: head[source].tolist() for field_name, source in active.items()},
        columns=list(active),
    )
    for field_name in DATE_FIELDS:
        if field_name in preview.columns:
            preview[field_name] = preview[field_name].map(_render_date)
    return preview


def _render_date(val) -> str:
    parsed = parse_date(val)
    return parsed.strftime("%Y-%m-%d") if parsed is not None else INVALID_DATE


def apply_mapping(raw: pd.DataFrame, mapping: Mapping[str, str]) -> list[DataRow]:
    """Convert every raw row into a DataRow.

    Rules
    -----
    - quantity: leading integer, 0 when non-numeric or unmapped.
    - date fields: parse_date(), None when unparseable or unmapped.
    - other fixed fields: str, "" when unmapped.
    - source columns not used by the mapping: carried in ``extras``.
    """
    validate_mapping(mapping, raw.columns)
    active = _active(mapping)
    used = set(active.values())
    extra_columns = [col for col in raw.columns if col not in used]

    rows = []
    invalid_dates = 0
    for record in raw.to_dict(orient="records"):
        values = {field_name: record.get(source) for field_name, source in active.items()}
        dates = {field_name: parse_date(values.get(field_name)) for field_name in DATE_FIELDS}
        invalid_dates += sum(
            1
            for field_name, parsed in dates.items()
            if parsed is None and _text(values.get(field_name)).strip()
        )
        rows.append(DataRow(
            type=_text(values.get("type")),
            id=_text(values.get("id")),
            product_name=_text(values.get("product_name")),
            quantity=safe_int(values.get("quantity")),
            status=_text(values.get("status")),
            location=_text(values.get("location")),
            extras={col: record[col] for col in extra_columns},
            **dates,
        ))

    if invalid_dates:
        logger.warning("%d date cells could not be parsed and were set to None", invalid_dates)
    logger.info("Mapped %d raw rows to DataRow records", len(rows))
    return rows


def _text(val) -> str:
    if val is None:
        return ""
    if isinstance(val, float) and pd.isna(val):
        return ""
    return str(val)
