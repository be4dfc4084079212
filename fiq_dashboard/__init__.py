"""
FIQ Supply Chain Dashboard

Analytics backend that turns an uploaded table of orders, shipments and
inventory into four operational KPIs and chart-ready aggregates.

Pipeline:
    loaders.load_upload(path)            -> raw string DataFrame
    mapping.suggest_mapping(headers)     -> canonical field -> column
    mapping.apply_mapping(raw, mapping)  -> list[DataRow]
    dashboard.aggregate(rows)            -> KPIs, three charts, orders

To connect to Streamlit/Dash:
    Call dashboard.aggregate(rows) and render the plain dicts it returns;
    dashboard.format_kpis() gives card strings.

To add a record field:
    Add it to models.DataRow, models.CORE_FIELDS and config.REQUIRED_FIELDS,
    then read it from the mapped values in mapping.apply_mapping().
"""

from .dashboard import aggregate
from .loaders.utils import parse_date
from .models import DataRow

__all__ = ["DataRow", "aggregate", "parse_date"]
