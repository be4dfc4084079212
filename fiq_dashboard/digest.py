"""
Quantitative dataset digest for the narrative-summary layer.

build_dataset_digest() reduces the loaded rows and the engine output into a
JSON-serialisable dict. Prompt wording and model calls live with the
consumer, not here.
"""

import logging
from typing import Iterable

import pandas as pd

from .config import DATE_FIELDS, DIGEST_SAMPLE_ROWS, DIGEST_TOP_PRODUCTS, ORDER
from .dashboard import aggregate
from .models import CORE_FIELDS, DataRow
from .transforms import build_status_chart, rows_to_frame, to_python

logger = logging.getLogger(__name__)

UNKNOWN_STATUS = "Unknown"
UNKNOWN_TYPE = "unknown"

_RISK_KEYWORDS = {
    "delayed": "delay",
    "cancelled": "cancel",
    "backordered": "backorder",
}


def build_dataset_digest(rows: Iterable[DataRow]) -> dict:
    """Summarise a row collection for downstream narrative generation.

    Returns
    -------
    Dict with keys:
        record_count, columns, types, kpis, status_distribution,
        top_products, location_counts, order_date_range,
        on_time_delivery_rate, risk_summary, sample_records

    An empty collection yields record_count 0 and kpis None.
    """
    rows = list(rows)
    if not rows:
        return {
            "record_count": 0,
            "columns": [],
            "types": {},
            "kpis": None,
            "status_distribution": {},
            "top_products": [],
            "location_counts": {},
            "order_date_range": {"start": None, "end": None},
            "on_time_delivery_rate": None,
            "risk_summary": _risk_summary(pd.Series([], dtype=object)),
            "sample_records": {},
        }

    df = rows_to_frame(rows)
    types = df["type"].replace("", UNKNOWN_TYPE)
    orders = df[df["type"] == ORDER]
    order_dates = orders["order_date"].dropna()

    labelled = orders.assign(status=orders["status"].replace("", UNKNOWN_STATUS))
    located = orders[orders["location"] != ""]

    digest = {
        "record_count": len(rows),
        "columns": list(CORE_FIELDS) + list(rows[0].extras),
        "types": _counts(df.groupby(types, sort=False).size()),
        "kpis": aggregate(rows)["kpis"],
        "status_distribution": {
            point["name"]: point["value"] for point in build_status_chart(labelled)
        },
        "top_products": _top_products(orders),
        "location_counts": _counts(located.groupby("location", sort=False).size()),
        "order_date_range": {
            "start": _iso(order_dates.min()) if not order_dates.empty else None,
            "end": _iso(order_dates.max()) if not order_dates.empty else None,
        },
        "on_time_delivery_rate": _on_time_delivery_rate(orders),
        "risk_summary": _risk_summary(orders["status"]),
        "sample_records": _sample_records(rows, df, types),
    }
    logger.info("Built dataset digest over %d rows and %d record types", len(rows), len(digest["types"]))
    return digest


def _counts(sizes: pd.Series) -> dict:
    return {key: to_python(count) for key, count in sizes.items()}


def _top_products(orders: pd.DataFrame) -> list[dict]:
    """Ordered quantity per product, largest first, ties by name."""
    named = orders[orders["product_name"] != ""]
    totals = (
        named.groupby("product_name", sort=False)["quantity"].sum()
        .rename("total_quantity")
        .rename_axis("name")
        .reset_index()
        .sort_values(["total_quantity", "name"], ascending=[False, True], kind="mergesort")
        .head(DIGEST_TOP_PRODUCTS)
    )
    return [
        {"name": name, "total_quantity": to_python(qty)}
        for name, qty in zip(totals["name"], totals["total_quantity"])
    ]


def _on_time_delivery_rate(orders: pd.DataFrame) -> float | None:
    """Delivered orders that arrived by their required date, as a percentage.

    Only orders whose status mentions "delivered" and that carry both a
    delivery date and a required date count. None when no order qualifies.
    """
    qualifying = orders[
        orders["status"].str.lower().str.contains("delivered", regex=False)
        & orders["delivery_date"].notna()
        & orders["required_shipping_date"].notna()
    ]
    if qualifying.empty:
        return None
    on_time = int((qualifying["delivery_date"] <= qualifying["required_shipping_date"]).sum())
    return on_time / len(qualifying) * 100


def _risk_summary(statuses: pd.Series) -> dict:
    lowered = statuses.astype(str).str.lower()
    summary = {
        label: int(lowered.str.contains(keyword, regex=False).sum())
        for label, keyword in _RISK_KEYWORDS.items()
    }
    flagged = sum(summary.values())
    summary["potential_risk_rate"] = flagged / len(statuses) * 100 if len(statuses) else 0.0
    return summary


def _sample_records(rows: list[DataRow], df: pd.DataFrame, types: pd.Series) -> dict:
    """Up to DIGEST_SAMPLE_ROWS rows per record type, in input order."""
    sampled = df.groupby(types, sort=False).head(DIGEST_SAMPLE_ROWS)
    return {
        row_type: [_sample(rows[i]) for i in group.index]
        for row_type, group in sampled.groupby(types.loc[sampled.index], sort=False)
    }


def _sample(row: DataRow) -> dict:
    record = dict(row.extras)
    record.update({name: getattr(row, name) for name in CORE_FIELDS})
    for name in DATE_FIELDS:
        record[name] = _iso(record[name]) if record[name] is not None else None
    return record


def _iso(value: pd.Timestamp) -> str:
    return value.strftime("%Y-%m-%d")
