"""Shared numeric/formatting utilities for derived metrics and report text."""

from __future__ import annotations

import math
from typing import Any

import polars as pl

from ads_audit.domain.models import PerformanceMetrics

METRIC_COLUMNS: list[str] = ["spend", "sales", "clicks", "impressions", "orders"]


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def safe_ratio(num: float, den: float) -> float:
    if den <= 0:
        return 0.0
    return num / den


def compute_acos(spend: float, sales: float) -> float:
    if spend > 0 and sales > 0:
        return spend / sales * 100
    return 0.0


def derive_metrics(
    spend: float,
    sales: float,
    clicks: float,
    impressions: float,
    orders: float,
) -> PerformanceMetrics:
    """Attach ACoS, ROAS, CTR, CPC and CVR to summed totals; zero denominators yield 0."""
    return PerformanceMetrics(
        spend=spend,
        sales=sales,
        clicks=clicks,
        impressions=impressions,
        orders=orders,
        acos=compute_acos(spend, sales),
        roas=safe_ratio(sales, spend),
        ctr=safe_ratio(clicks, impressions) * 100,
        cpc=safe_ratio(spend, clicks),
        cvr=safe_ratio(orders, clicks) * 100,
    )


def metrics_from_row(row: dict[str, Any]) -> PerformanceMetrics:
    return derive_metrics(*(to_float(row.get(column)) for column in METRIC_COLUMNS))


def sum_aggregations() -> list[pl.Expr]:
    return [pl.col(column).sum().alias(column) for column in METRIC_COLUMNS]


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def fmt_money(value: float) -> str:
    return f"${value:.2f}"


def fmt_pct(value: float, digits: int = 2) -> str:
    return f"{value:.{digits}f}%"
