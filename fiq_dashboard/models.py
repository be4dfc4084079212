"""
Row model shared by ingestion, the aggregation engine and presenters.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

import pandas as pd


@dataclass(frozen=True)
class DataRow:
    """One supply-chain record after column mapping.

    ``type`` discriminates orders, shipments and inventory; any other value
    is carried but ignored by the KPI engine. Date fields are midnight
    timestamps or None. ``extras`` holds unmapped source columns verbatim.
    """

    type: str
    id: str = ""
    product_name: str = ""
    quantity: int | float = 0
    status: str = ""
    order_date: pd.Timestamp | None = None
    ship_date: pd.Timestamp | None = None
    delivery_date: pd.Timestamp | None = None
    required_shipping_date: pd.Timestamp | None = None
    location: str = ""
    extras: Mapping[str, Any] = field(default_factory=dict)


# Fixed fields in declaration order; the engine reads nothing else
CORE_FIELDS = (
    "type",
    "id",
    "product_name",
    "quantity",
    "status",
    "order_date",
    "ship_date",
    "delivery_date",
    "required_shipping_date",
    "location",
)
