"""Text rendering helpers for console output."""

from __future__ import annotations

from typing import List

from ads_audit.application.analysis_service import AnalysisResult
from ads_audit.application.reporting.metrics import fmt_money, fmt_pct
from ads_audit.domain.columns import fmt_number
from ads_audit.domain.models import Recommendation


def overall_comment(result: AnalysisResult) -> str:
    metrics = result.metrics
    if metrics.acos == 0:
        status = "no attributed sales"
    elif metrics.acos <= result.target_acos:
        status = "within target"
    else:
        status = "above target"
    return (
        f"Spend {fmt_money(metrics.total_spend)}, sales {fmt_money(metrics.total_sales)}, "
        f"ACoS {fmt_pct(metrics.acos)} ({status}, target {fmt_number(result.target_acos)}%), "
        f"ROAS {metrics.roas:.2f}x across {len(result.campaigns)} campaigns and "
        f"{len(result.keywords)} keywords."
    )


def recommendation_block(recommendation: Recommendation) -> str:
    header = f"[{recommendation.severity.value.upper()}/{recommendation.priority.value}] {recommendation.title}"
    lines: List[str] = [header, f"  {recommendation.description}"]
    if recommendation.action:
        lines.append(f"  Action: {recommendation.action}")
    lines.extend(f"  {detail}" for detail in recommendation.details)
    return "\n".join(lines)


def render_summary(result: AnalysisResult) -> str:
    blocks = [overall_comment(result)]
    if result.wasted_spend.keywords:
        blocks.append(
            f"Wasted spend: {fmt_money(result.wasted_spend.total_wasted)} on "
            f"{len(result.wasted_spend.keywords)} keywords."
        )
    blocks.extend(recommendation_block(recommendation) for recommendation in result.recommendations)
    if not result.recommendations:
        blocks.append("No recommendations for the current target.")
    return "\n\n".join(blocks)
