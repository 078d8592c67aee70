"""Wasted-spend and inefficient-spend detectors."""

from __future__ import annotations

from typing import Sequence

import polars as pl

from ads_audit import config
from ads_audit.application.reporting.metrics import to_float
from ads_audit.domain.models import (
    CampaignAggregate,
    FindingType,
    InefficientItem,
    InefficientSpendResult,
    KeywordAggregate,
    WastedKeyword,
    WastedSpendResult,
)


def detect_wasted_spend(frame: pl.DataFrame, min_clicks: int = config.WASTED_MIN_CLICKS) -> WastedSpendResult:
    """Keywords with enough clicks, spend and no orders, highest spend first."""
    grouped = (
        frame.filter(pl.col("keyword") != "")
        .group_by("keyword", maintain_order=True)
        .agg(
            pl.col("match_type").first().alias("match_type"),
            pl.col("clicks").sum().alias("clicks"),
            pl.col("orders").sum().alias("orders"),
            pl.col("spend").sum().alias("spend"),
        )
        .filter((pl.col("clicks") >= min_clicks) & (pl.col("orders") == 0) & (pl.col("spend") > 0))
        .sort("spend", descending=True, maintain_order=True)
        .to_dicts()
    )
    keywords = tuple(
        WastedKeyword(
            keyword=str(row["keyword"]),
            match_type=str(row["match_type"] or ""),
            spend=to_float(row["spend"]),
            clicks=to_float(row["clicks"]),
            orders=to_float(row["orders"]),
        )
        for row in grouped
    )
    return WastedSpendResult(keywords=keywords, total_wasted=sum(keyword.spend for keyword in keywords))


def inefficiency_threshold(target_acos: float) -> float:
    return target_acos * config.INEFFICIENT_ACOS_MULTIPLIER


def detect_inefficient_spend(
    campaigns: Sequence[CampaignAggregate],
    keywords: Sequence[KeywordAggregate],
    target_acos: float,
) -> InefficientSpendResult:
    threshold = inefficiency_threshold(target_acos)
    items: list[InefficientItem] = []
    for campaign in campaigns:
        if campaign.metrics.acos > threshold and campaign.metrics.spend > config.INEFFICIENT_CAMPAIGN_MIN_SPEND:
            items.append(InefficientItem(type=FindingType.CAMPAIGN, name=campaign.name, metrics=campaign.metrics))
    for keyword in keywords:
        if keyword.metrics.acos > threshold and keyword.metrics.spend > config.INEFFICIENT_KEYWORD_MIN_SPEND:
            items.append(InefficientItem(type=FindingType.KEYWORD, name=keyword.keyword, metrics=keyword.metrics))

    items.sort(key=lambda item: -item.metrics.spend)
    return InefficientSpendResult(
        items=tuple(items),
        total_inefficient=sum(item.metrics.spend for item in items),
    )
