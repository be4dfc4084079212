from fiq_dashboard.config import DATE_FIELDS
from fiq_dashboard.dashboard import aggregate
from fiq_dashboard.simulator import RAW_COLUMNS, generate_raw_frame, generate_rows


def test_raw_frame_shape():
    raw = generate_raw_frame(n_orders=30, n_shipments=10, seed=1)
    assert list(raw.columns) == RAW_COLUMNS
    # 6 products x 4 locations of inventory
    assert len(raw) == 30 + 10 + 24
    assert raw.map(lambda value: isinstance(value, str)).all().all()


def test_reproducible():
    first = generate_raw_frame(seed=7)
    second = generate_raw_frame(seed=7)
    assert first.equals(second)


def test_clean_mode_has_only_iso_dates():
    raw = generate_raw_frame(seed=3, messy=False)
    date_columns = ["Order Date", "Ship Date", "Delivery Date", "Required Shipping Date"]
    values = raw[date_columns].stack()
    values = values[values != ""]
    assert values.str.fullmatch(r"\d{4}-\d{2}-\d{2}").all()


def test_generated_rows_feed_the_engine():
    rows = generate_rows(n_orders=80, n_shipments=40, seed=11)
    assert {row.type for row in rows} == {"order", "shipment", "inventory"}
    assert all(isinstance(row.quantity, int) for row in rows)
    assert all(
        getattr(row, name) is None or getattr(row, name) == getattr(row, name).normalize()
        for row in rows for name in DATE_FIELDS
    )
    assert rows[0].extras.keys() == {"Customer", "Carrier"}

    kpis = aggregate(rows)["kpis"]
    assert 0 < kpis["fill_rate"] <= 100
    assert 0 <= kpis["on_time_rate"] <= 100
    assert kpis["inventory_turnover"] > 0
