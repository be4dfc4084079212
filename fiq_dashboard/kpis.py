"""
KPI computation functions. Pure functions with no side effects.

Each KPI takes the already-partitioned frames it needs and guards its own
empty-denominator case: percentages fall back to 0, cycle time to "N/A".
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from .config import (
    DELIVERED_STATUS,
    FULFILLED_STATUSES,
    INVENTORY,
    NOT_APPLICABLE,
    ORDER,
    SECONDS_PER_DAY,
    SHIPMENT,
)

logger = logging.getLogger(__name__)


def calc_fill_rate(orders: pd.DataFrame) -> float:
    """Percentage of orders whose status is exactly Shipped or Delivered.

    Returns 0.0 when there are no orders.
    """
    if orders.empty:
        return 0.0
    fulfilled = int(orders["status"].isin(FULFILLED_STATUSES).sum())
    return fulfilled / len(orders) * 100


def calc_cycle_time(orders: pd.DataFrame) -> float | str:
    """Mean days from order_date to delivery_date for delivered orders.

    Only orders with status Delivered and both dates present count.
    Fractional days are kept in the mean, which is then rounded to one
    decimal place with ties rounded up (a 1.25 day mean shows 1.3).

    Returns "N/A" (never 0) when no order qualifies.
    """
    delivered = orders[
        (orders["status"] == DELIVERED_STATUS)
        & orders["delivery_date"].notna()
        & orders["order_date"].notna()
    ]
    if delivered.empty:
        return NOT_APPLICABLE

    elapsed = delivered["delivery_date"] - delivered["order_date"]
    days = elapsed.dt.total_seconds() / SECONDS_PER_DAY
    return _round_half_up(float(days.mean()))


def _round_half_up(value: float, places: int = 1) -> float:
    """Round with ties away from zero (1.25 -> 1.3), on the exact binary value."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def calc_on_time_rate(shipments: pd.DataFrame) -> float:
    """Percentage of shipments sent on or before their required date.

    Logic
    -----
    denominator: shipments with a required_shipping_date
    numerator:   of those, shipments with a ship_date <= required date

    Shipments without a required date are excluded from both sides.
    Returns 0.0 when the denominator is 0.
    """
    relevant = shipments[shipments["required_shipping_date"].notna()]
    if relevant.empty:
        return 0.0
    on_time = relevant["ship_date"].notna() & (
        relevant["ship_date"] <= relevant["required_shipping_date"]
    )
    return int(on_time.sum()) / len(relevant) * 100


def calc_average_inventory(inventory: pd.DataFrame) -> float:
    """Estimate the average on-hand inventory level.

    total quantity / (row count / distinct product_name count)

    The divisor falls back to 1 when it is 0 or undefined. Non-positive
    totals give 0.
    """
    total = float(inventory["quantity"].sum())
    if total <= 0:
        return 0.0
    distinct_products = inventory["product_name"].nunique(dropna=False)
    rows_per_product = len(inventory) / distinct_products if distinct_products else 0
    return total / (rows_per_product or 1)


def calc_inventory_turnover(orders: pd.DataFrame, inventory: pd.DataFrame) -> float:
    """Quantity shipped divided by the average inventory estimate.

    Shipped quantity sums orders with status Shipped or Delivered.
    Returns 0.0 when average inventory is 0; never negative.
    """
    avg_inventory = calc_average_inventory(inventory)
    if avg_inventory <= 0:
        return 0.0
    fulfilled = orders[orders["status"].isin(FULFILLED_STATUSES)]
    shipped_qty = float(fulfilled["quantity"].sum())
    return max(shipped_qty / avg_inventory, 0.0)


def get_kpis(parts: dict[str, pd.DataFrame]) -> dict:
    """Compute all four KPIs from partitioned frames.

    Parameters
    ----------
    parts : Output of transforms.partition_rows().

    Returns
    -------
    {"fill_rate": ..., "cycle_time": ..., "on_time_rate": ..., "inventory_turnover": ...}
    """
    orders = parts[ORDER]
    shipments = parts[SHIPMENT]
    inventory = parts[INVENTORY]

    if orders.empty:
        logger.warning("No order rows; fill rate and cycle time fall back to defaults")

    return {
        "fill_rate": calc_fill_rate(orders),
        "cycle_time": calc_cycle_time(orders),
        "on_time_rate": calc_on_time_rate(shipments),
        "inventory_turnover": calc_inventory_turnover(orders, inventory),
    }
