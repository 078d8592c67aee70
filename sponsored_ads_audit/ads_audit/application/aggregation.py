"""Multi-dimensional aggregation over deduplicated rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import polars as pl

from ads_audit.application.reporting.metrics import (
    METRIC_COLUMNS,
    compute_acos,
    metrics_from_row,
    round_half_up,
    safe_ratio,
    sum_aggregations,
    to_float,
)
from ads_audit.domain.models import (
    AutoManualAggregate,
    CampaignAggregate,
    CampaignDetail,
    CampaignKeywordAggregate,
    KeywordAggregate,
    KeywordCampaignAggregate,
    MatchTypeAggregate,
    NormalizedRow,
    PlacementAggregate,
    SummaryMetrics,
    WastedSpendResult,
)

DIMENSION_COLUMNS: list[str] = ["campaign_name", "keyword", "search_term", "match_type", "targeting_type", "placement"]
ROW_SCHEMA: dict[str, Any] = {
    **{column: pl.Utf8 for column in DIMENSION_COLUMNS},
    **{column: pl.Float64 for column in METRIC_COLUMNS},
}
AUTO_TARGETING_TOKENS: tuple[str, ...] = ("auto", "close", "loose", "substitute", "complement")
AUTO_MANUAL_GROUPS: tuple[str, ...] = ("Auto", "Manual")


def rows_frame(rows: Sequence[NormalizedRow]) -> pl.DataFrame:
    columns = {name: [getattr(row, name) for row in rows] for name in ROW_SCHEMA}
    return pl.DataFrame(columns, schema=ROW_SCHEMA)


def _grouped(frame: pl.DataFrame, keys: list[str]) -> list[dict[str, Any]]:
    return frame.group_by(keys, maintain_order=True).agg(sum_aggregations()).to_dicts()


def summarize(frame: pl.DataFrame) -> SummaryMetrics:
    totals = frame.select(sum_aggregations()).to_dicts()[0]
    spend = to_float(totals.get("spend"))
    sales = to_float(totals.get("sales"))
    clicks = to_float(totals.get("clicks"))
    impressions = to_float(totals.get("impressions"))
    orders = to_float(totals.get("orders"))
    return SummaryMetrics(
        total_spend=round_half_up(spend, 2),
        total_sales=round_half_up(sales, 2),
        acos=round_half_up(compute_acos(spend, sales), 2),
        roas=round_half_up(safe_ratio(sales, spend), 2),
        ctr=round_half_up(safe_ratio(clicks, impressions) * 100, 2),
        cpc=round_half_up(safe_ratio(spend, clicks), 2),
        cvr=round_half_up(safe_ratio(orders, clicks) * 100, 2),
        total_clicks=int(round_half_up(clicks)),
        total_impressions=int(round_half_up(impressions)),
        total_orders=int(round_half_up(orders)),
    )


def aggregate_campaigns(frame: pl.DataFrame) -> list[CampaignAggregate]:
    return [
        CampaignAggregate(name=str(row["campaign_name"]), metrics=metrics_from_row(row))
        for row in _grouped(frame, ["campaign_name"])
    ]


def aggregate_match_types(frame: pl.DataFrame) -> list[MatchTypeAggregate]:
    keyed = frame.with_columns(
        pl.when(pl.col("match_type") == "")
        .then(pl.lit("Unknown"))
        .otherwise(pl.col("match_type"))
        .alias("match_type")
    )
    return [
        MatchTypeAggregate(name=str(row["match_type"]), metrics=metrics_from_row(row))
        for row in _grouped(keyed, ["match_type"])
    ]


def targeting_group_expr() -> pl.Expr:
    is_auto = pl.col("targeting_type").str.to_lowercase().str.contains("|".join(AUTO_TARGETING_TOKENS))
    return pl.when(is_auto).then(pl.lit("Auto")).otherwise(pl.lit("Manual")).alias("targeting_group")


def aggregate_auto_vs_manual(frame: pl.DataFrame) -> list[AutoManualAggregate]:
    grouped = {
        str(row["targeting_group"]): row
        for row in _grouped(frame.with_columns(targeting_group_expr()), ["targeting_group"])
    }
    active = [
        (name, metrics_from_row(grouped[name]))
        for name in AUTO_MANUAL_GROUPS
        if name in grouped and to_float(grouped[name].get("spend")) > 0
    ]
    total_spend = sum(metrics.spend for _, metrics in active)
    return [
        AutoManualAggregate(
            name=name,
            metrics=metrics,
            percent_spend=safe_ratio(metrics.spend, total_spend) * 100,
        )
        for name, metrics in active
    ]


def keyword_frame(frame: pl.DataFrame) -> pl.DataFrame:
    return frame.filter((pl.col("keyword") != "") & (pl.col("keyword") != "unknown"))


def aggregate_keywords(frame: pl.DataFrame) -> list[KeywordAggregate]:
    """Keyword totals with their campaign -> placement breakdown."""
    scoped = keyword_frame(frame)

    placements: dict[tuple[str, str], list[PlacementAggregate]] = {}
    for row in _grouped(scoped, ["keyword", "campaign_name", "placement"]):
        key = (str(row["keyword"]), str(row["campaign_name"]))
        placements.setdefault(key, []).append(
            PlacementAggregate(name=str(row["placement"]), metrics=metrics_from_row(row))
        )

    campaigns: dict[str, list[KeywordCampaignAggregate]] = {}
    for row in _grouped(scoped, ["keyword", "campaign_name"]):
        keyword = str(row["keyword"])
        campaign_name = str(row["campaign_name"])
        campaigns.setdefault(keyword, []).append(
            KeywordCampaignAggregate(
                name=campaign_name,
                metrics=metrics_from_row(row),
                placements=tuple(placements.get((keyword, campaign_name), [])),
            )
        )

    return [
        KeywordAggregate(
            keyword=str(row["keyword"]),
            metrics=metrics_from_row(row),
            campaigns=tuple(campaigns.get(str(row["keyword"]), [])),
        )
        for row in _grouped(scoped, ["keyword"])
    ]


def _grouped_by_spend(frame: pl.DataFrame, keys: list[str]) -> list[dict[str, Any]]:
    return (
        frame.group_by(keys, maintain_order=True)
        .agg(sum_aggregations())
        .sort("spend", descending=True, maintain_order=True)
        .to_dicts()
    )


def aggregate_campaign_details(frame: pl.DataFrame) -> list[CampaignDetail]:
    """Per-campaign search term and placement breakdowns, in campaign aggregate order."""
    labelled = frame.with_columns(
        pl.when(pl.col("search_term") == "")
        .then(pl.lit("N/A"))
        .otherwise(pl.col("search_term"))
        .alias("search_term")
    )

    keywords: dict[str, list[CampaignKeywordAggregate]] = {}
    for row in _grouped_by_spend(labelled, ["campaign_name", "search_term"]):
        keywords.setdefault(str(row["campaign_name"]), []).append(
            CampaignKeywordAggregate(name=str(row["search_term"]), metrics=metrics_from_row(row))
        )

    placements: dict[str, list[PlacementAggregate]] = {}
    for row in _grouped_by_spend(labelled, ["campaign_name", "placement"]):
        placements.setdefault(str(row["campaign_name"]), []).append(
            PlacementAggregate(name=str(row["placement"]), metrics=metrics_from_row(row))
        )

    names = [str(row["campaign_name"]) for row in _grouped(frame, ["campaign_name"])]
    return [
        CampaignDetail(
            name=name,
            keywords=tuple(keywords.get(name, [])),
            placements=tuple(placements.get(name, [])),
        )
        for name in names
    ]


@dataclass(frozen=True)
class AggregateSet:
    """Everything derivable from the deduplicated rows alone, independent of target ACoS."""

    summary: SummaryMetrics
    campaigns: list[CampaignAggregate]
    campaign_details: list[CampaignDetail]
    auto_vs_manual: list[AutoManualAggregate]
    match_types: list[MatchTypeAggregate]
    keywords: list[KeywordAggregate]
    wasted_spend: WastedSpendResult
    rows: list[dict[str, Any]]
