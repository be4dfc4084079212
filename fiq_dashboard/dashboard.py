"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end and the
smoke pipeline. Each function returns plain dicts, lists or DataFrames
suitable for rendering cards, charts and tables.
"""

import logging
from collections.abc import Iterable
from typing import Sequence

import pandas as pd

from .config import INVENTORY, KPI_REGISTRY, NOT_APPLICABLE, ORDER, SHIPMENT
from .kpis import get_kpis
from .models import DataRow
from .transforms import (
    build_location_chart,
    build_status_chart,
    build_volume_chart,
    partition_rows,
    rows_to_frame,
)

logger = logging.getLogger(__name__)

ORDER_EXPORT_COLUMNS = ["Order ID", "Product", "Quantity", "Status", "Order Date"]


def aggregate(rows: Iterable[DataRow]) -> dict:
    """Single entry point the front end calls after an upload is mapped.

    Parameters
    ----------
    rows : DataRow records with dates already normalised.

    Returns
    -------
    Dict with structure:
    {
        "kpis": {"fill_rate": 80.0, "cycle_time": 4.0, "on_time_rate": 66.67,
                 "inventory_turnover": 1.25},
        "status_chart":   [{"name": "Shipped", "value": 6}, ...],
        "location_chart": [{"name": "Dallas", "quantity": 420}, ...],
        "volume_chart":   [{"name": "2024-03-15", "orders": 3}, ...],
        "orders": [DataRow, ...],
    }

    Empty input yields zero KPIs, "N/A" cycle time and empty lists.

    Raises
    ------
    TypeError if rows is None or not iterable.
    """
    if rows is None or isinstance(rows, (str, bytes, pd.DataFrame)) or not isinstance(rows, Iterable):
        raise TypeError(f"rows must be an iterable of DataRow, got {type(rows).__name__}")

    rows = list(rows)
    parts = partition_rows(rows_to_frame(rows))

    orders = [row for row in rows if row.type == ORDER]
    result = {
        "kpis": get_kpis(parts),
        "status_chart": build_status_chart(parts[ORDER]),
        "location_chart": build_location_chart(parts[INVENTORY]),
        "volume_chart": build_volume_chart(parts[ORDER]),
        "orders": orders,
    }

    logger.info(
        "Aggregated %d rows (%d orders, %d shipments, %d inventory)",
        len(rows), len(orders), len(parts[SHIPMENT]), len(parts[INVENTORY]),
    )
    return result


def format_kpis(kpis: dict) -> dict[str, str]:
    """Card label -> display string, per KPI_REGISTRY formats.

    A non-numeric value (the "N/A" cycle time) is shown as-is.
    """
    cards = {}
    for key, registry in KPI_REGISTRY.items():
        value = kpis.get(key, NOT_APPLICABLE)
        fmt = registry.get("fmt")
        if fmt is None or isinstance(value, str):
            cards[registry["label"]] = str(value)
        else:
            cards[registry["label"]] = fmt % value
    return cards


def filter_orders_by_status(orders: Sequence[DataRow], status: str) -> list[DataRow]:
    return [order for order in orders if order.status == status]


def toggle_status_filter(
    current: Sequence[DataRow],
    all_orders: Sequence[DataRow],
    status: str,
) -> list[DataRow]:
    """Drill-down for a click on a status-chart segment.

    Clicking a status narrows the table to that status; clicking the same
    status again while it is the active filter restores every order.
    """
    already_filtered = len(current) < len(all_orders) and all(
        order.status == status for order in current
    )
    if already_filtered:
        return list(all_orders)
    return filter_orders_by_status(all_orders, status)


def sort_chart(chart: list[dict], value_key: str = "value") -> list[dict]:
    """Descending by value, then ascending by name.

    For consumers that need an ordering independent of input row order.
    """
    return sorted(chart, key=lambda point: (-point[value_key], str(point["name"])))


def orders_to_frame(orders: Sequence[DataRow]) -> pd.DataFrame:
    """Orders table for display and export.

    Returns
    -------
    DataFrame with columns:
        Order ID, Product, Quantity, Status, Order Date
    """
    records = [
        {
            "Order ID": order.id,
            "Product": order.product_name,
            "Quantity": order.quantity,
            "Status": order.status,
            "Order Date": (
                order.order_date.strftime("%Y-%m-%d")
                if order.order_date is not None else NOT_APPLICABLE
            ),
        }
        for order in orders
    ]
    return pd.DataFrame(records, columns=ORDER_EXPORT_COLUMNS)


def export_orders_csv(orders: Sequence[DataRow]) -> str:
    """CSV text of the (possibly filtered) orders table."""
    return orders_to_frame(orders).to_csv(index=False)
