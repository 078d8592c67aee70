"""Domain policies turning anomaly and top-performer sets into action items."""

from __future__ import annotations

from typing import Sequence

from ads_audit import config
from ads_audit.domain.columns import fmt_number
from ads_audit.domain.models import (
    FindingType,
    InefficientSpendResult,
    KeywordAggregate,
    PerformanceMetrics,
    Priority,
    Recommendation,
    Severity,
    WastedSpendResult,
)


def _pct_above(multiplier: float) -> str:
    return f"{(multiplier - 1) * 100:.0f}%"


def wasted_spend_recommendation(wasted: WastedSpendResult) -> Recommendation | None:
    if wasted.total_wasted <= config.RECOMMENDATION_SPEND_GATE:
        return None
    count = len(wasted.keywords)
    return Recommendation(
        severity=Severity.DANGER,
        title=(
            f"${wasted.total_wasted:.2f} Wasted on {count} Keywords "
            f"({config.WASTED_MIN_CLICKS}+ Clicks, $0 Sales)"
        ),
        description="Immediately add these search terms as negative keywords to stop wasting budget.",
        action=f"Add {count} negative keywords",
        details=tuple(
            f'• "{keyword.keyword}" - ${keyword.spend:.2f} wasted ({fmt_number(keyword.clicks)} clicks)'
            for keyword in wasted.keywords
        ),
        priority=Priority.HIGH,
    )


def inefficient_campaign_recommendation(
    inefficient: InefficientSpendResult,
    target_acos: float,
) -> Recommendation | None:
    items = inefficient.of_type(FindingType.CAMPAIGN)
    if not items:
        return None
    threshold = target_acos * config.INEFFICIENT_ACOS_MULTIPLIER
    factor = config.BID_REDUCTION_FACTOR
    return Recommendation(
        severity=Severity.WARNING,
        title=(
            f"{len(items)} Campaigns Over {threshold:.1f}% ACoS "
            f"({_pct_above(config.INEFFICIENT_ACOS_MULTIPLIER)} Above Target)"
        ),
        description=f"Target ACoS: {fmt_number(target_acos)}%. These campaigns are significantly underperforming.",
        action="Reduce bids by 20-30% or pause",
        details=tuple(
            f'• "{item.name}" - {item.metrics.acos:.2f}% ACoS, ${item.metrics.spend:.2f} spent. '
            f"Lower bids to ${item.metrics.cpc * factor:.2f} CPC"
            for item in items
        ),
        priority=Priority.HIGH,
    )


def _keywords_by_campaign(
    inefficient: InefficientSpendResult,
    keywords: Sequence[KeywordAggregate],
) -> dict[str, list[tuple[str, PerformanceMetrics]]]:
    keyword_index = {keyword.keyword: keyword for keyword in keywords}
    grouped: dict[str, list[tuple[str, PerformanceMetrics]]] = {}
    for item in inefficient.of_type(FindingType.KEYWORD):
        keyword = keyword_index.get(item.name)
        if keyword is None:
            continue
        for campaign in keyword.campaigns:
            grouped.setdefault(campaign.name, []).append((item.name, campaign.metrics))
    return grouped


def inefficient_keyword_recommendation(
    inefficient: InefficientSpendResult,
    keywords: Sequence[KeywordAggregate],
    target_acos: float,
) -> Recommendation | None:
    items = inefficient.of_type(FindingType.KEYWORD)
    if not items:
        return None
    threshold = target_acos * config.INEFFICIENT_ACOS_MULTIPLIER
    factor = config.BID_REDUCTION_FACTOR

    details: list[str] = []
    for campaign_name, entries in _keywords_by_campaign(inefficient, keywords).items():
        top = sorted(entries, key=lambda entry: -entry[1].spend)[: config.MAX_KEYWORDS_PER_CAMPAIGN]
        lines = "\n  ".join(
            f'Lower bid on "{name}" from ${metrics.cpc:.2f} to ${metrics.cpc * factor:.2f} CPC'
            for name, metrics in top
        )
        details.append(f'• Campaign "{campaign_name}":\n  {lines}')

    return Recommendation(
        severity=Severity.WARNING,
        title=f"{len(items)} Keywords Over {threshold:.1f}% ACoS",
        description=(
            f"These keywords are {_pct_above(config.INEFFICIENT_ACOS_MULTIPLIER)}+ above your "
            f"{fmt_number(target_acos)}% target. Lower bids or add as negative keywords."
        ),
        action=f"Reduce keyword-level bids by {(1 - factor) * 100:.0f}%",
        details=tuple(details),
        priority=Priority.HIGH,
    )


def top_performers(keywords: Sequence[KeywordAggregate], target_acos: float) -> list[KeywordAggregate]:
    ceiling = target_acos * config.TOP_PERFORMER_ACOS_RATIO
    selected = [
        keyword
        for keyword in keywords
        if 0 < keyword.metrics.acos <= ceiling
        and keyword.metrics.orders >= config.TOP_PERFORMER_MIN_ORDERS
        and keyword.metrics.spend > config.TOP_PERFORMER_MIN_SPEND
    ]
    return sorted(selected, key=lambda keyword: -keyword.metrics.roas)


def top_performer_recommendation(
    keywords: Sequence[KeywordAggregate],
    target_acos: float,
) -> Recommendation | None:
    performers = top_performers(keywords, target_acos)
    if not performers:
        return None
    factor = config.BID_INCREASE_FACTOR
    details: list[str] = []
    for keyword in performers:
        campaign = keyword.top_campaign()
        campaign_name = campaign.name if campaign is not None else "Unknown"
        cpc = campaign.metrics.cpc if campaign is not None else keyword.metrics.cpc
        details.append(
            f'• "{keyword.keyword}" in "{campaign_name}" - {keyword.metrics.acos:.2f}% ACoS, '
            f"{keyword.metrics.roas:.2f}x ROAS. Increase bid from ${cpc:.2f} to ${cpc * factor:.2f}"
        )
    ratio = config.TOP_PERFORMER_ACOS_RATIO
    return Recommendation(
        severity=Severity.SUCCESS,
        title=f"{len(performers)} High-Performing Keywords Below {target_acos * ratio:.1f}% ACoS",
        description=(
            f"These keywords are performing {(1 - ratio) * 100:.0f}%+ better than your "
            f"{fmt_number(target_acos)}% target. Scale them!"
        ),
        action="Increase bids by 30-50%",
        details=tuple(details),
        priority=Priority.HIGH,
    )


def low_conversion_keywords(keywords: Sequence[KeywordAggregate]) -> list[KeywordAggregate]:
    return [
        keyword
        for keyword in keywords
        if keyword.metrics.cvr < config.LOW_CVR_LIMIT
        and keyword.metrics.clicks > config.LOW_CVR_MIN_CLICKS
        and keyword.metrics.spend > config.LOW_CVR_MIN_SPEND
    ]


def low_conversion_recommendation(keywords: Sequence[KeywordAggregate]) -> Recommendation | None:
    flagged = low_conversion_keywords(keywords)
    if not flagged:
        return None
    return Recommendation(
        severity=Severity.INFO,
        title=f"{len(flagged)} Keywords with Low Conversion Rate (<{fmt_number(config.LOW_CVR_LIMIT)}%)",
        description=(
            "These keywords get clicks but rarely convert. Review product-keyword relevance or landing page."
        ),
        action="Review keyword relevance and listing content",
        details=tuple(
            f'• "{keyword.keyword}" - {keyword.metrics.cvr:.2f}% CVR, '
            f"{fmt_number(keyword.metrics.clicks)} clicks, {fmt_number(keyword.metrics.orders)} orders"
            for keyword in flagged
        ),
        priority=Priority.MEDIUM,
    )


def generate_recommendations(
    keywords: Sequence[KeywordAggregate],
    wasted: WastedSpendResult,
    inefficient: InefficientSpendResult,
    target_acos: float,
) -> list[Recommendation]:
    """Evaluate the rule list in fixed order; each rule adds at most one item."""
    candidates: list[Recommendation | None] = [wasted_spend_recommendation(wasted)]
    if inefficient.total_inefficient > config.RECOMMENDATION_SPEND_GATE:
        candidates.append(inefficient_campaign_recommendation(inefficient, target_acos))
        candidates.append(inefficient_keyword_recommendation(inefficient, keywords, target_acos))
    candidates.append(top_performer_recommendation(keywords, target_acos))
    candidates.append(low_conversion_recommendation(keywords))
    return [recommendation for recommendation in candidates if recommendation is not None]
