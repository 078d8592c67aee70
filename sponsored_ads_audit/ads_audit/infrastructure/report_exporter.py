"""Infrastructure adapter for analysis export targets."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import polars as pl

from ads_audit.application.analysis_service import AnalysisResult
from ads_audit.ingestion import write_output_excel


def save_summary_json(path: Path, result: AnalysisResult) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str), encoding="utf-8")


def _frame(records: list[dict[str, Any]]) -> pl.DataFrame:
    if not records:
        return pl.DataFrame({"empty": []}, schema={"empty": pl.Utf8})
    return pl.DataFrame(records)


def _keyword_records(result: AnalysisResult) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for keyword in result.keywords:
        campaign = keyword.top_campaign()
        records.append(
            {
                "keyword": keyword.keyword,
                **keyword.metrics.to_dict(),
                "campaigns": len(keyword.campaigns),
                "top_campaign": campaign.name if campaign is not None else "",
            }
        )
    return records


def _campaign_detail_records(result: AnalysisResult) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for detail in result.campaign_details:
        for dimension, items in (("keyword", detail.keywords), ("placement", detail.placements)):
            records.extend(
                {"campaign": detail.name, "dimension": dimension, "value": item.name, **item.metrics.to_dict()}
                for item in items
            )
    return records


def analysis_sheets(result: AnalysisResult) -> dict[str, pl.DataFrame]:
    payload = result.to_dict()
    recommendations = [
        {**recommendation, "details": "\n".join(recommendation["details"])}
        for recommendation in payload["recommendations"]
    ]
    return {
        "campaigns": _frame(payload["campaigns"]),
        "campaign_details": _frame(_campaign_detail_records(result)),
        "auto_vs_manual": _frame(payload["autoVsManual"]),
        "match_types": _frame(payload["matchTypeAnalysis"]),
        "keywords": _frame(_keyword_records(result)),
        "wasted_spend": _frame(payload["wastedSpend"]["keywords"]),
        "inefficient_spend": _frame(payload["inefficientSpend"]["items"]),
        "recommendations": _frame(recommendations),
    }


def save_analysis_workbook(path: Path, result: AnalysisResult) -> tuple[bool, str]:
    try:
        write_output_excel(path, analysis_sheets(result))
    except PermissionError as exc:
        return False, str(exc)
    return True, ""
