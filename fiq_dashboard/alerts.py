"""
Rule-based supply-chain risk detection.

Pure functions over DataRow collections. Anything date-relative takes
``today`` as an argument, so results never depend on the wall clock.
"""

import logging
from typing import Iterable

import pandas as pd

from .config import (
    INVENTORY,
    OPEN_ORDER_STATUS,
    ORDER,
    SECONDS_PER_DAY,
    SHIPMENT,
    SHIPPED_STATUS,
)
from .models import DataRow
from .transforms import rows_to_frame, to_python

logger = logging.getLogger(__name__)


def detect_stockout_risks(rows: Iterable[DataRow]) -> list[dict]:
    """Products whose open-order demand exceeds on-hand inventory.

    Demand sums quantity over orders with status Processing; supply sums
    inventory quantity for the same product_name (0 if none).

    Returns
    -------
    [{"product_name": ..., "inventory": ..., "open_orders": ...}, ...]
    in order of first open order per product.
    """
    df = rows_to_frame(rows)
    open_orders = df[(df["type"] == ORDER) & (df["status"] == OPEN_ORDER_STATUS)]
    demand = open_orders.groupby("product_name", sort=False)["quantity"].sum()
    supply = (
        df[df["type"] == INVENTORY]
        .groupby("product_name", sort=False)["quantity"].sum()
        .reindex(demand.index, fill_value=0)
    )

    at_risk = demand[demand > supply]
    return [
        {
            "product_name": product,
            "inventory": to_python(supply[product]),
            "open_orders": to_python(qty),
        }
        for product, qty in at_risk.items()
    ]


def detect_late_shipments(rows: Iterable[DataRow], today: pd.Timestamp) -> list[dict]:
    """Shipments past their required date that are not marked Shipped.

    Parameters
    ----------
    rows : DataRow records.
    today : Reference date; reduced to its calendar day.

    Returns
    -------
    [{"id": ..., "days_late": ...}, ...] in input order.
    """
    today = pd.Timestamp(today).normalize()
    df = rows_to_frame(rows)
    shipments = df[df["type"] == SHIPMENT]
    required = shipments["required_shipping_date"]
    late = shipments[
        required.notna() & (required < today) & (shipments["status"] != SHIPPED_STATUS)
    ]

    overdue = (today - late["required_shipping_date"]).dt.total_seconds() / SECONDS_PER_DAY
    return [
        {"id": shipment_id, "days_late": int(round(days))}
        for shipment_id, days in zip(late["id"], overdue)
    ]


def detect_risks(rows: Iterable[DataRow], today: pd.Timestamp) -> list[str]:
    """Human-readable issue list: stockout risks first, then late shipments."""
    rows = list(rows)
    issues = [
        f"Potential stockout for '{risk['product_name']}'. "
        f"Inventory: {risk['inventory']}, Open Orders: {risk['open_orders']}."
        for risk in detect_stockout_risks(rows)
    ]
    issues.extend(
        f"Shipment {late['id']} is {late['days_late']} day(s) late."
        for late in detect_late_shipments(rows, today)
    )

    if issues:
        logger.info("Detected %d supply-chain risks", len(issues))
    return issues
