"""Row classification and spend-view deduplication for bulk exports.

A bulk export reports each campaign's spend several times: once per rollup level
(Campaign, Ad Group, Bidding Adjustment, Portfolio) and once per granular view
(Keyword, Product Targeting, Product Ad, ...). Granular views are alternative
breakdowns of the same spend, so exactly one of them is kept per campaign.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ads_audit.domain.columns import CanonicalField, field_number, field_text
from ads_audit.domain.models import RowClassification

logger = logging.getLogger(__name__)

ROLLUP_ENTITIES: frozenset[str] = frozenset(
    {
        "Campaign",
        "Ad Group",
        "AdGroup",
        "Bidding Adjustment",
        "Bidding Adjustment by Placement",
        "Portfolio",
    }
)

GRANULAR_ENTITY_RANK: dict[str, int] = {
    "Keyword": 3,
    "Search Term": 3,
    "Customer Search Term": 3,
    "Product Targeting": 2,
    "Contextual Targeting": 2,
    "Audience Targeting": 2,
    "Product Ad": 1,
    "Product Collection Ad": 1,
}


@dataclass
class CampaignGroup:
    rows: list[Mapping[str, Any]] = field(default_factory=list)
    granular_types: list[str] = field(default_factory=list)

    def add(self, row: Mapping[str, Any], entity_type: str) -> None:
        self.rows.append(row)
        if entity_type in GRANULAR_ENTITY_RANK and entity_type not in self.granular_types:
            self.granular_types.append(entity_type)

    def selected_type(self) -> str | None:
        selected: str | None = None
        best_rank = 0
        for entity_type in self.granular_types:
            rank = GRANULAR_ENTITY_RANK[entity_type]
            if rank > best_rank:
                best_rank = rank
                selected = entity_type
        return selected


def classify(row: Mapping[str, Any]) -> RowClassification:
    return RowClassification(
        entity_type=field_text(row, CanonicalField.ENTITY),
        campaign_id=field_text(row, CanonicalField.CAMPAIGN_ID),
    )


def has_activity(row: Mapping[str, Any]) -> bool:
    return (
        field_number(row, CanonicalField.SPEND) > 0
        or field_number(row, CanonicalField.IMPRESSIONS) > 0
        or field_number(row, CanonicalField.CLICKS) > 0
    )


def is_rollup(entity_type: str) -> bool:
    return entity_type in ROLLUP_ENTITIES


def is_negative(entity_type: str) -> bool:
    return "negative" in entity_type.lower()


def _keep(entity_type: str, selected_type: str | None) -> bool:
    if is_rollup(entity_type) or is_negative(entity_type):
        return False
    if selected_type is None:
        return True
    if entity_type == selected_type:
        return True
    # Unranked entity types pass through alongside the selected view.
    return entity_type not in GRANULAR_ENTITY_RANK


def group_by_campaign(rows: Sequence[Mapping[str, Any]]) -> dict[str, CampaignGroup]:
    groups: dict[str, CampaignGroup] = {}
    for row in rows:
        classification = classify(row)
        if not classification.campaign_id:
            continue
        groups.setdefault(classification.campaign_id, CampaignGroup()).add(row, classification.entity_type)
    return groups


def deduplicate(rows: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Keep one granular spend view per campaign and drop rollup/negative rows."""
    groups = group_by_campaign(rows)

    output: list[Mapping[str, Any]] = []
    for campaign_id, group in groups.items():
        selected_type = group.selected_type()
        kept = [row for row in group.rows if _keep(classify(row).entity_type, selected_type)]
        logger.debug(
            "campaign=%s selected_type=%s rows_in=%d rows_kept=%d",
            campaign_id,
            selected_type,
            len(group.rows),
            len(kept),
        )
        output.extend(kept)

    removed = len(rows) - len(output)
    reduction = removed / len(rows) if rows else 0.0
    logger.info(
        "deduplication campaigns=%d rows_in=%d rows_out=%d removed=%d reduction=%.1f%%",
        len(groups),
        len(rows),
        len(output),
        removed,
        reduction * 100,
    )
    return output
