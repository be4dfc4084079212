"""
Simulated data generator for the FIQ supply chain dashboard.

Generates a realistic mixed upload (orders, shipments, inventory) in the
same loose string form users export from their ERP, including mixed date
formats and the occasional junk cell. All values are synthetic.
"""

import numpy as np
import pandas as pd

from .config import DELIVERED_STATUS, INVENTORY, OPEN_ORDER_STATUS, ORDER, SHIPMENT, SHIPPED_STATUS
from .mapping import apply_mapping, suggest_mapping
from .models import DataRow

# ---------------------------------------------------------------------------
# Typical catalogue and network (realistic ranges)
# ---------------------------------------------------------------------------
_PRODUCTS = {
    "Pallet Jack": {"order_qty": (1, 6), "stock": (10, 60)},
    "Shrink Wrap Roll": {"order_qty": (20, 200), "stock": (300, 1500)},
    "Barcode Scanner": {"order_qty": (1, 12), "stock": (5, 40)},
    "Corrugated Box (L)": {"order_qty": (50, 400), "stock": (800, 4000)},
    "Safety Vest": {"order_qty": (10, 80), "stock": (60, 400)},
    "Label Printer": {"order_qty": (1, 5), "stock": (2, 25)},
}

_LOCATIONS = ["Dallas DC", "Reno DC", "Atlanta DC", "Columbus DC"]

_CUSTOMERS = ["Acme Retail", "Northwind", "Contoso", "Globex", "Initech"]

_CARRIERS = ["UPS", "FedEx Freight", "XPO", "Old Dominion"]

# status -> probability
_ORDER_STATUSES = {
    SHIPPED_STATUS: 0.40,
    DELIVERED_STATUS: 0.30,
    OPEN_ORDER_STATUS: 0.20,
    "Cancelled": 0.05,
    "Backordered": 0.05,
}

_SHIPMENT_STATUSES = {
    SHIPPED_STATUS: 0.75,
    "In Transit": 0.15,
    "Delayed": 0.10,
}

RAW_COLUMNS = [
    "Type", "ID", "Product Name", "Quantity", "Status", "Order Date",
    "Ship Date", "Delivery Date", "Required Shipping Date", "Location",
    "Customer", "Carrier",
]

_JUNK_DATES = ["TBD", "n/a", "pending"]


def _fmt_date(day: pd.Timestamp, rng: np.random.Generator, messy: bool) -> str:
    """Render a date the way mixed exports do: mostly ISO, some US style."""
    if messy and rng.random() < 0.03:
        return str(rng.choice(_JUNK_DATES))
    if messy and rng.random() < 0.3:
        return f"{day.month}/{day.day}/{day.year}"
    return day.strftime("%Y-%m-%d")


def generate_raw_frame(
    n_orders: int = 120,
    n_shipments: int = 60,
    start_date: str = "2024-01-01",
    n_days: int = 60,
    seed: int = 42,
    messy: bool = True,
) -> pd.DataFrame:
    """Generate a raw upload-shaped DataFrame of strings.

    Inventory gets one row per product per location. Order and shipment
    dates fall within n_days of start_date.

    Returns
    -------
    DataFrame with RAW_COLUMNS, every value a str.
    """
    rng = np.random.default_rng(seed)
    start = pd.Timestamp(start_date)
    products = list(_PRODUCTS)
    rows = []

    order_statuses = list(_ORDER_STATUSES)
    order_probs = list(_ORDER_STATUSES.values())
    for i in range(n_orders):
        product = products[rng.integers(len(products))]
        low, high = _PRODUCTS[product]["order_qty"]
        status = str(rng.choice(order_statuses, p=order_probs))
        order_date = start + pd.Timedelta(days=int(rng.integers(n_days)))

        ship_date = delivery_date = ""
        if status in (SHIPPED_STATUS, DELIVERED_STATUS):
            shipped = order_date + pd.Timedelta(days=int(rng.integers(0, 4)))
            ship_date = _fmt_date(shipped, rng, messy)
            if status == DELIVERED_STATUS:
                delivered = shipped + pd.Timedelta(days=int(rng.integers(1, 8)))
                delivery_date = _fmt_date(delivered, rng, messy)

        quantity = str(int(rng.integers(low, high + 1)))
        if messy and rng.random() < 0.02:
            quantity = f"{quantity} units"

        rows.append({
            "Type": ORDER,
            "ID": f"ORD-{1000 + i}",
            "Product Name": product,
            "Quantity": quantity,
            "Status": status,
            "Order Date": _fmt_date(order_date, rng, messy),
            "Ship Date": ship_date,
            "Delivery Date": delivery_date,
            "Required Shipping Date": "",
            "Location": str(rng.choice(_LOCATIONS)),
            "Customer": str(rng.choice(_CUSTOMERS)),
            "Carrier": "",
        })

    ship_statuses = list(_SHIPMENT_STATUSES)
    ship_probs = list(_SHIPMENT_STATUSES.values())
    for i in range(n_shipments):
        product = products[rng.integers(len(products))]
        low, high = _PRODUCTS[product]["order_qty"]
        status = str(rng.choice(ship_statuses, p=ship_probs))
        required = start + pd.Timedelta(days=int(rng.integers(n_days)))
        # Most carriers hit the window; a tail slips up to a week
        slip = int(rng.integers(-3, 2)) if rng.random() < 0.8 else int(rng.integers(1, 8))
        shipped = required + pd.Timedelta(days=slip)

        rows.append({
            "Type": SHIPMENT,
            "ID": f"SHP-{5000 + i}",
            "Product Name": product,
            "Quantity": str(int(rng.integers(low, high + 1))),
            "Status": status,
            "Order Date": "",
            "Ship Date": _fmt_date(shipped, rng, messy) if status != "Delayed" else "",
            "Delivery Date": "",
            # Some shipments carry no commitment date at all
            "Required Shipping Date": _fmt_date(required, rng, messy) if rng.random() < 0.85 else "",
            "Location": str(rng.choice(_LOCATIONS)),
            "Customer": "",
            "Carrier": str(rng.choice(_CARRIERS)),
        })

    sku = 0
    for product, params in _PRODUCTS.items():
        low, high = params["stock"]
        for location in _LOCATIONS:
            rows.append({
                "Type": INVENTORY,
                "ID": f"INV-{sku:04d}",
                "Product Name": product,
                "Quantity": str(int(rng.integers(low, high + 1))),
                "Status": "On Hand",
                "Order Date": "",
                "Ship Date": "",
                "Delivery Date": "",
                "Required Shipping Date": "",
                "Location": location if not (messy and rng.random() < 0.05) else "",
                "Customer": "",
                "Carrier": "",
            })
            sku += 1

    return pd.DataFrame(rows, columns=RAW_COLUMNS)


def generate_rows(
    n_orders: int = 120,
    n_shipments: int = 60,
    seed: int = 42,
    messy: bool = True,
) -> list[DataRow]:
    """Generate simulated rows already passed through column mapping."""
    raw = generate_raw_frame(n_orders=n_orders, n_shipments=n_shipments, seed=seed, messy=messy)
    return apply_mapping(raw, suggest_mapping(raw.columns))
