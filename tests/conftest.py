import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fiq_dashboard.config import DATE_FIELDS  # noqa: E402
from fiq_dashboard.models import DataRow  # noqa: E402


def build_row(type_: str, **fields) -> DataRow:
    """DataRow with ISO date strings converted to timestamps."""
    for name in DATE_FIELDS:
        if isinstance(fields.get(name), str):
            fields[name] = pd.Timestamp(fields[name])
    return DataRow(type=type_, **fields)


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def mixed_rows():
    """Small upload covering all three record types plus one unknown type."""
    return [
        build_row("order", id="O1", product_name="Widget", quantity=10, status="Shipped",
                  order_date="2024-03-01", location="Dallas"),
        build_row("order", id="O2", product_name="Gadget", quantity=5, status="Delivered",
                  order_date="2024-03-01", delivery_date="2024-03-04", location="Reno"),
        build_row("order", id="O3", product_name="Widget", quantity=7, status="Processing",
                  order_date="2024-02-28", location="Dallas"),
        build_row("order", id="O4", product_name="Gizmo", quantity=3, status="Shipped",
                  location="Dallas"),
        build_row("shipment", id="S1", product_name="Widget", quantity=10, status="Shipped",
                  ship_date="2024-03-02", required_shipping_date="2024-03-03"),
        build_row("shipment", id="S2", product_name="Gadget", quantity=5, status="Shipped",
                  ship_date="2024-03-05", required_shipping_date="2024-03-03"),
        build_row("inventory", id="I1", product_name="Widget", quantity=40, location="Dallas"),
        build_row("inventory", id="I2", product_name="Widget", quantity=20, location="Reno"),
        build_row("inventory", id="I3", product_name="Gadget", quantity=30, location=""),
        build_row("return", id="R1", product_name="Widget", quantity=2, status="Shipped",
                  order_date="2024-03-01"),
    ]
