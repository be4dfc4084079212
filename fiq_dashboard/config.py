"""
Configuration: record vocabulary, field registry, KPI display registry.

REQUIRED_FIELDS maps each canonical row field to the label shown in the
column-mapping form; a trailing "(Optional)" marks fields that may stay
unmapped. KPI_REGISTRY maps each KPI key to its card label, unit and
display format.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

SAMPLE_DATA_FILE = DATA_DIR / "sample_supply_chain.csv"

# ---------------------------------------------------------------------------
# Record vocabulary
# ---------------------------------------------------------------------------
ORDER = "order"
SHIPMENT = "shipment"
INVENTORY = "inventory"

SHIPPED_STATUS = "Shipped"
DELIVERED_STATUS = "Delivered"
OPEN_ORDER_STATUS = "Processing"

# Orders in either state count as fulfilled for fill rate and turnover
FULFILLED_STATUSES = frozenset({SHIPPED_STATUS, DELIVERED_STATUS})

UNKNOWN_LOCATION = "Unknown"
NOT_APPLICABLE = "N/A"

DATE_FIELDS = (
    "order_date",
    "ship_date",
    "delivery_date",
    "required_shipping_date",
)

# ---------------------------------------------------------------------------
# Field registry (column-mapping form)
# ---------------------------------------------------------------------------
OPTIONAL_MARKER = "(Optional)"

REQUIRED_FIELDS: dict[str, str] = {
    "type": "Record Type (e.g., order, shipment)",
    "id": "Order/Shipment ID",
    "product_name": "Product Name",
    "quantity": "Quantity",
    "status": "Status (e.g., Shipped, Processing)",
    "order_date": "Order Date",
    "ship_date": "Ship Date (Optional)",
    "delivery_date": "Delivery Date (Optional)",
    "required_shipping_date": "Required Ship Date (Optional)",
    "location": "Warehouse/Location",
}

# ---------------------------------------------------------------------------
# KPI Registry
# ---------------------------------------------------------------------------
# label: card title
# unit: display unit string
# fmt: %-format applied to numeric values; None shows the value as-is
KPI_REGISTRY: dict[str, dict] = {
    "fill_rate": {
        "label": "Order Fill Rate",
        "unit": "%",
        "fmt": "%.1f%%",
    },
    "cycle_time": {
        "label": "Avg. Order Cycle (Days)",
        "unit": "days",
        "fmt": None,
    },
    "on_time_rate": {
        "label": "On-Time Shipping",
        "unit": "%",
        "fmt": "%.1f%%",
    },
    "inventory_turnover": {
        "label": "Inventory Turnover",
        "unit": "x",
        "fmt": "%.2f",
    },
}

# Reset state for presenters before any data is loaded
EMPTY_KPIS: dict = {
    "fill_rate": 0.0,
    "cycle_time": NOT_APPLICABLE,
    "on_time_rate": 0.0,
    "inventory_turnover": 0.0,
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SECONDS_PER_DAY = 24 * 60 * 60
PREVIEW_ROWS = 5
DIGEST_TOP_PRODUCTS = 10
DIGEST_SAMPLE_ROWS = 5
