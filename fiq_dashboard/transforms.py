"""
Data transforms: turn DataRow collections into typed frames, split them by
record type, and group them into chart-ready projections.
"""

import logging
from typing import Any, Iterable

import pandas as pd

from .config import DATE_FIELDS, INVENTORY, ORDER, SHIPMENT, UNKNOWN_LOCATION
from .models import CORE_FIELDS, DataRow

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("type", "id", "product_name", "status", "location")


def rows_to_frame(rows: Iterable[DataRow]) -> pd.DataFrame:
    """Build a typed frame of the fixed DataRow fields.

    ``extras`` are not copied. Date columns are datetime64 with NaT for
    missing dates; quantity is numeric; text columns hold "" where a row
    carries None.

    Returns
    -------
    DataFrame with columns:
        type, id, product_name, quantity, status, order_date, ship_date,
        delivery_date, required_shipping_date, location
    """
    records = [{name: getattr(row, name) for name in CORE_FIELDS} for row in rows]
    df = pd.DataFrame(records, columns=list(CORE_FIELDS))

    for col in DATE_FIELDS:
        df[col] = pd.to_datetime(df[col])
    df["quantity"] = pd.to_numeric(df["quantity"]).fillna(0)
    for col in TEXT_FIELDS:
        df[col] = df[col].fillna("")
    return df


def partition_rows(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """Split a row frame into orders, shipments and inventory.

    Matching is exact on ``type``; rows of any other type land in none of
    the three subsets.
    """
    parts = {
        ORDER: df[df["type"] == ORDER],
        SHIPMENT: df[df["type"] == SHIPMENT],
        INVENTORY: df[df["type"] == INVENTORY],
    }
    skipped = len(df) - sum(len(part) for part in parts.values())
    if skipped:
        logger.info("Ignored %d rows with an unrecognised record type", skipped)
    return parts


def build_status_chart(orders: pd.DataFrame) -> list[dict]:
    """Order counts per status, in order of first appearance.

    Returns
    -------
    [{"name": status, "value": count}, ...]
    """
    if orders.empty:
        return []
    counts = orders.groupby("status", sort=False, dropna=False).size()
    return [
        {"name": status, "value": int(count)}
        for status, count in counts.items()
    ]


def build_location_chart(inventory: pd.DataFrame) -> list[dict]:
    """Summed inventory quantity per location, in order of first appearance.

    Empty or missing locations are grouped under "Unknown".

    Returns
    -------
    [{"name": location, "quantity": total}, ...]
    """
    if inventory.empty:
        return []
    locations = inventory["location"].where(
        inventory["location"].fillna("").astype(bool), UNKNOWN_LOCATION
    )
    totals = inventory["quantity"].groupby(locations, sort=False).sum()
    return [
        {"name": location, "quantity": to_python(total)}
        for location, total in totals.items()
    ]


def build_volume_chart(orders: pd.DataFrame) -> list[dict]:
    """Order counts per calendar day, ascending by date.

    Orders without an order_date are left out.

    Returns
    -------
    [{"name": "YYYY-MM-DD", "orders": count}, ...]
    """
    dated = orders["order_date"].dropna()
    if dated.empty:
        return []
    counts = dated.dt.normalize().value_counts().sort_index()
    return [
        {"name": day.strftime("%Y-%m-%d"), "orders": int(count)}
        for day, count in counts.items()
    ]


def to_python(value: Any) -> Any:
    """Unwrap numpy scalars so outputs hold builtin numbers only."""
    if hasattr(value, "item"):
        return value.item()
    return value
