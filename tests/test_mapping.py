import pandas as pd
import pytest

from fiq_dashboard.mapping import (
    INVALID_DATE,
    apply_mapping,
    missing_required_fields,
    preview_mapping,
    required_field_names,
    suggest_mapping,
    validate_mapping,
)


@pytest.fixture
def raw():
    return pd.DataFrame({
        "Record Type": ["order", "shipment", "inventory"],
        "Order ID": ["A-1", "S-1", "I-1"],
        "Product Name": ["Widget", "Widget", "Widget"],
        "Qty": ["12", "3 boxes", "abc"],
        "Status": ["Delivered", "Shipped", ""],
        "order_date": ["2024-03-01", "", ""],
        "Ship Date": ["3/2/2024", "2024-03-02", ""],
        "Delivery Date": ["2024-03-04", "", ""],
        "Required Ship": ["", "2024-03-03", ""],
        "Warehouse": ["Dallas", "Dallas", "Reno"],
        "Customer": ["Acme", "", ""],
    })


@pytest.fixture
def mapping():
    return {
        "type": "Record Type",
        "id": "Order ID",
        "product_name": "Product Name",
        "quantity": "Qty",
        "status": "Status",
        "order_date": "order_date",
        "ship_date": "Ship Date",
        "delivery_date": "Delivery Date",
        "required_shipping_date": "Required Ship",
        "location": "Warehouse",
    }


def test_required_fields():
    assert required_field_names() == ["type", "id", "product_name", "quantity", "status", "order_date", "location"]


def test_suggest_mapping_normalised_match():
    headers = ["TYPE", "id", "Product Name", "quantity", "Status", "Order_Date", "Ship Date", "Location", "Notes"]
    assert suggest_mapping(headers) == {
        "type": "TYPE",
        "id": "id",
        "product_name": "Product Name",
        "quantity": "quantity",
        "status": "Status",
        "order_date": "Order_Date",
        "ship_date": "Ship Date",
        "location": "Location",
    }


def test_suggest_mapping_first_header_wins():
    assert suggest_mapping(["Status", "status"])["status"] == "Status"


def test_missing_required_fields(mapping):
    mapping["quantity"] = ""
    del mapping["location"]
    assert missing_required_fields(mapping) == ["quantity", "location"]


def test_validate_mapping_lists_missing_labels(mapping):
    del mapping["status"]
    with pytest.raises(ValueError, match="Status"):
        validate_mapping(mapping)


def test_validate_mapping_unknown_column(mapping, raw):
    mapping["location"] = "Site"
    with pytest.raises(ValueError, match="Site"):
        validate_mapping(mapping, raw.columns)


def test_optional_fields_may_stay_unmapped(mapping, raw):
    for name in ("ship_date", "delivery_date", "required_shipping_date"):
        mapping.pop(name)
    validate_mapping(mapping, raw.columns)
    rows = apply_mapping(raw, mapping)
    assert all(row.ship_date is None for row in rows)


def test_apply_mapping(mapping, raw):
    rows = apply_mapping(raw, mapping)
    order, shipment, stock = rows

    assert order.type == "order"
    assert order.id == "A-1"
    assert order.quantity == 12
    assert order.order_date == pd.Timestamp("2024-03-01")
    assert order.ship_date == pd.Timestamp("2024-03-02")
    assert order.delivery_date == pd.Timestamp("2024-03-04")
    assert order.required_shipping_date is None
    assert order.location == "Dallas"

    assert shipment.quantity == 3
    assert shipment.required_shipping_date == pd.Timestamp("2024-03-03")
    assert stock.quantity == 0
    assert stock.status == ""


def test_apply_mapping_keeps_unmapped_columns_as_extras(mapping, raw):
    rows = apply_mapping(raw, mapping)
    assert rows[0].extras == {"Customer": "Acme"}


def test_apply_mapping_bad_dates_become_none(mapping, raw):
    raw.loc[0, "order_date"] = "sometime soon"
    rows = apply_mapping(raw, mapping)
    assert rows[0].order_date is None


def test_apply_mapping_rejects_incomplete_mapping(mapping, raw):
    del mapping["id"]
    with pytest.raises(ValueError):
        apply_mapping(raw, mapping)


def test_preview_mapping(mapping, raw):
    raw.loc[0, "Ship Date"] = "yesterday-ish"
    preview = preview_mapping(raw, mapping, n=2)
    assert len(preview) == 2
    assert list(preview.columns) == list(mapping)
    assert preview.loc[0, "order_date"] == "2024-03-01"
    assert preview.loc[0, "ship_date"] == INVALID_DATE
    assert preview.loc[1, "quantity"] == "3 boxes"
