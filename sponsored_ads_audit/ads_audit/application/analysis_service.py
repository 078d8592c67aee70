"""Application service for the bulk report analysis use case."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ads_audit.application.aggregation import (
    AggregateSet,
    aggregate_auto_vs_manual,
    aggregate_campaign_details,
    aggregate_campaigns,
    aggregate_keywords,
    aggregate_match_types,
    rows_frame,
    summarize,
)
from ads_audit.application.anomalies import detect_inefficient_spend, detect_wasted_spend
from ads_audit.application.deduplication import deduplicate, has_activity
from ads_audit.domain.columns import to_number
from ads_audit.domain.models import (
    AutoManualAggregate,
    CampaignAggregate,
    CampaignDetail,
    InefficientSpendResult,
    KeywordAggregate,
    MatchTypeAggregate,
    NormalizedRow,
    Recommendation,
    SummaryMetrics,
    WastedSpendResult,
)
from ads_audit.domain.recommendation import generate_recommendations
from ads_audit.errors import EmptyInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    target_acos: float
    metrics: SummaryMetrics
    campaigns: list[CampaignAggregate]
    campaign_details: list[CampaignDetail]
    auto_vs_manual: list[AutoManualAggregate]
    match_types: list[MatchTypeAggregate]
    keywords: list[KeywordAggregate]
    wasted_spend: WastedSpendResult
    inefficient_spend: InefficientSpendResult
    recommendations: list[Recommendation]
    raw_data: list[dict[str, Any]]
    aggregates: AggregateSet

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": self.metrics.to_dict(),
            "campaigns": [campaign.to_dict() for campaign in self.campaigns],
            "campaignDetails": [detail.to_dict() for detail in self.campaign_details],
            "autoVsManual": [group.to_dict() for group in self.auto_vs_manual],
            "matchTypeAnalysis": [match_type.to_dict() for match_type in self.match_types],
            "keywordAnalysis": [keyword.to_dict() for keyword in self.keywords],
            "wastedSpend": self.wasted_spend.to_dict(),
            "inefficientSpend": self.inefficient_spend.to_dict(),
            "recommendations": [recommendation.to_dict() for recommendation in self.recommendations],
            "rawData": [dict(row) for row in self.raw_data],
        }


def build_aggregates(rows: Sequence[Mapping[str, Any]]) -> AggregateSet:
    """Filter, deduplicate and aggregate rows; everything here ignores target ACoS."""
    valid_rows = [row for row in rows if has_activity(row)]
    logger.debug("rows_in=%d valid_rows=%d", len(rows), len(valid_rows))

    deduplicated = deduplicate(valid_rows)
    if not deduplicated:
        first_row = dict(rows[0]) if rows else {}
        logger.warning("no rows left after deduplication; first input row columns=%s", list(first_row))
        raise EmptyInputError()

    frame = rows_frame([NormalizedRow.from_row(row) for row in deduplicated])
    summary = summarize(frame)
    logger.debug(
        "totals spend=%.2f sales=%.2f clicks=%d impressions=%d orders=%d",
        summary.total_spend,
        summary.total_sales,
        summary.total_clicks,
        summary.total_impressions,
        summary.total_orders,
    )
    return AggregateSet(
        summary=summary,
        campaigns=aggregate_campaigns(frame),
        campaign_details=aggregate_campaign_details(frame),
        auto_vs_manual=aggregate_auto_vs_manual(frame),
        match_types=aggregate_match_types(frame),
        keywords=aggregate_keywords(frame),
        wasted_spend=detect_wasted_spend(frame),
        rows=[dict(row) for row in deduplicated],
    )


def evaluate(aggregates: AggregateSet, target_acos: float) -> tuple[InefficientSpendResult, list[Recommendation]]:
    inefficient = detect_inefficient_spend(aggregates.campaigns, aggregates.keywords, target_acos)
    recommendations = generate_recommendations(
        aggregates.keywords,
        aggregates.wasted_spend,
        inefficient,
        target_acos,
    )
    return inefficient, recommendations


def _assemble(aggregates: AggregateSet, target_acos: Any) -> AnalysisResult:
    target = to_number(target_acos)
    inefficient, recommendations = evaluate(aggregates, target)
    return AnalysisResult(
        target_acos=target,
        metrics=aggregates.summary,
        campaigns=aggregates.campaigns,
        campaign_details=aggregates.campaign_details,
        auto_vs_manual=aggregates.auto_vs_manual,
        match_types=aggregates.match_types,
        keywords=aggregates.keywords,
        wasted_spend=aggregates.wasted_spend,
        inefficient_spend=inefficient,
        recommendations=recommendations,
        raw_data=aggregates.rows,
        aggregates=aggregates,
    )


def analyze(rows: Sequence[Mapping[str, Any]], target_acos: Any) -> AnalysisResult:
    """Run the full pipeline over one sheet's rows.

    Raises EmptyInputError when no row with spend, impressions or clicks survives
    deduplication; every other malformed value degrades to zero.
    """
    return _assemble(build_aggregates(list(rows)), target_acos)


def reanalyze(result: AnalysisResult, target_acos: Any) -> AnalysisResult:
    """Re-run only the target-dependent stage against cached aggregates."""
    if to_number(target_acos) == result.target_acos:
        return result
    return _assemble(result.aggregates, target_acos)
