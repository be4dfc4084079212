import pandas as pd
import pytest

from fiq_dashboard.dashboard import aggregate
from fiq_dashboard.kpis import (
    calc_average_inventory,
    calc_cycle_time,
    calc_fill_rate,
    calc_inventory_turnover,
    calc_on_time_rate,
    get_kpis,
)
from fiq_dashboard.transforms import partition_rows, rows_to_frame


def _frame(rows):
    return rows_to_frame(rows)


class TestFillRate:

    def test_scenario_six_shipped_two_delivered(self, make_row):
        statuses = ["Shipped"] * 6 + ["Delivered"] * 2 + ["Processing"] * 2
        orders = _frame([make_row("order", status=s) for s in statuses])
        assert calc_fill_rate(orders) == pytest.approx(80.0)

    def test_no_orders_is_zero(self):
        assert calc_fill_rate(_frame([])) == 0

    def test_status_match_is_exact(self, make_row):
        orders = _frame([
            make_row("order", status="shipped"),
            make_row("order", status="Shipped "),
            make_row("order", status="Shipped"),
            make_row("order", status="Delivered"),
        ])
        assert calc_fill_rate(orders) == pytest.approx(50.0)


class TestCycleTime:

    def test_mean_of_two_four_six_days(self, make_row):
        orders = _frame([
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-03"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-05"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-07"),
        ])
        assert calc_cycle_time(orders) == 4.0

    def test_rounded_to_one_decimal(self, make_row):
        orders = _frame([
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-03"),
        ])
        assert calc_cycle_time(orders) == 1.3

    def test_exact_tie_rounds_up(self, make_row):
        orders = _frame([
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-03"),
        ])
        assert calc_cycle_time(orders) == 1.3

    def test_tie_rounds_up_through_aggregate(self, make_row):
        rows = [
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-01"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-01"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-01"),
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-02"),
        ]
        assert aggregate(rows)["kpis"]["cycle_time"] == 0.3

    def test_not_applicable_without_qualifying_orders(self, make_row):
        orders = _frame([
            make_row("order", status="Delivered", order_date="2024-03-01"),
            make_row("order", status="Delivered", delivery_date="2024-03-02"),
            make_row("order", status="Shipped", order_date="2024-03-01", delivery_date="2024-03-02"),
        ])
        assert calc_cycle_time(orders) == "N/A"

    def test_same_day_delivery_is_zero_not_na(self, make_row):
        orders = _frame([
            make_row("order", status="Delivered", order_date="2024-03-01", delivery_date="2024-03-01"),
        ])
        assert calc_cycle_time(orders) == 0.0

    def test_empty_is_not_applicable(self):
        assert calc_cycle_time(_frame([])) == "N/A"


class TestOnTimeRate:

    def test_two_of_three_with_required_date(self, make_row):
        shipments = _frame([
            make_row("shipment", ship_date="2024-03-01", required_shipping_date="2024-03-02"),
            make_row("shipment", ship_date="2024-03-02", required_shipping_date="2024-03-02"),
            make_row("shipment", ship_date="2024-03-05", required_shipping_date="2024-03-02"),
            make_row("shipment", ship_date="2024-03-05"),
            make_row("shipment"),
        ])
        rate = calc_on_time_rate(shipments)
        assert rate == pytest.approx(66.666, abs=0.01)
        assert "%.1f" % rate == "66.7"

    def test_missing_required_date_does_not_change_rate(self, make_row):
        base = [
            make_row("shipment", ship_date="2024-03-01", required_shipping_date="2024-03-02"),
            make_row("shipment", ship_date="2024-03-05", required_shipping_date="2024-03-02"),
        ]
        extra_early = make_row("shipment", ship_date="2024-01-01")
        extra_unsent = make_row("shipment")
        expected = calc_on_time_rate(_frame(base))
        assert calc_on_time_rate(_frame(base + [extra_early])) == expected
        assert calc_on_time_rate(_frame(base + [extra_unsent])) == expected

    def test_unsent_shipment_with_required_date_counts_as_late(self, make_row):
        shipments = _frame([
            make_row("shipment", ship_date="2024-03-01", required_shipping_date="2024-03-02"),
            make_row("shipment", required_shipping_date="2024-03-02"),
        ])
        assert calc_on_time_rate(shipments) == pytest.approx(50.0)

    def test_no_required_dates_is_zero(self, make_row):
        shipments = _frame([make_row("shipment", ship_date="2024-03-01")])
        assert calc_on_time_rate(shipments) == 0


class TestInventoryTurnover:

    def test_average_inventory_estimator(self, make_row):
        inventory = _frame([
            make_row("inventory", product_name="A", quantity=40),
            make_row("inventory", product_name="A", quantity=20),
            make_row("inventory", product_name="B", quantity=30),
        ])
        # 90 / (3 rows / 2 products)
        assert calc_average_inventory(inventory) == pytest.approx(60.0)

    def test_turnover(self, make_row):
        orders = _frame([
            make_row("order", status="Shipped", quantity=12),
            make_row("order", status="Delivered", quantity=6),
            make_row("order", status="Processing", quantity=100),
        ])
        inventory = _frame([
            make_row("inventory", product_name="A", quantity=40),
            make_row("inventory", product_name="A", quantity=20),
            make_row("inventory", product_name="B", quantity=30),
        ])
        assert calc_inventory_turnover(orders, inventory) == pytest.approx(18 / 60)

    def test_no_inventory_is_zero(self, make_row):
        orders = _frame([make_row("order", status="Shipped", quantity=12)])
        assert calc_inventory_turnover(orders, _frame([])) == 0

    def test_zero_stock_is_zero(self, make_row):
        orders = _frame([make_row("order", status="Shipped", quantity=12)])
        inventory = _frame([make_row("inventory", product_name="A", quantity=0)])
        assert calc_inventory_turnover(orders, inventory) == 0

    def test_never_negative(self, make_row):
        orders = _frame([make_row("order", status="Shipped", quantity=-50)])
        inventory = _frame([make_row("inventory", product_name="A", quantity=10)])
        assert calc_inventory_turnover(orders, inventory) == 0


def test_get_kpis(mixed_rows):
    kpis = get_kpis(partition_rows(rows_to_frame(mixed_rows)))
    assert kpis == {
        "fill_rate": pytest.approx(75.0),
        "cycle_time": 3.0,
        "on_time_rate": pytest.approx(50.0),
        "inventory_turnover": pytest.approx(0.3),
    }


def test_kpis_ignore_row_order(mixed_rows):
    forward = get_kpis(partition_rows(rows_to_frame(mixed_rows)))
    backward = get_kpis(partition_rows(rows_to_frame(list(reversed(mixed_rows)))))
    assert forward == backward
