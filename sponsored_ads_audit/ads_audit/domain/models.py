"""Domain models for bulk report rows, aggregates and findings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from ads_audit.domain.columns import CanonicalField, field_number, field_text


@dataclass(frozen=True)
class RowClassification:
    entity_type: str
    campaign_id: str


@dataclass(frozen=True)
class NormalizedRow:
    """A report row reduced to its canonical fields, metrics clamped at zero."""

    campaign_id: str
    entity_type: str
    campaign_name: str
    keyword: str
    search_term: str
    match_type: str
    targeting_type: str
    placement: str
    spend: float
    sales: float
    clicks: float
    impressions: float
    orders: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NormalizedRow":
        return cls(
            campaign_id=field_text(row, CanonicalField.CAMPAIGN_ID),
            entity_type=field_text(row, CanonicalField.ENTITY),
            campaign_name=field_text(row, CanonicalField.CAMPAIGN_NAME) or "Unknown",
            keyword=field_text(row, CanonicalField.SEARCH_TERM).lower(),
            search_term=field_text(row, CanonicalField.SEARCH_TERM),
            match_type=field_text(row, CanonicalField.MATCH_TYPE),
            targeting_type=field_text(row, CanonicalField.TARGETING_TYPE),
            placement=field_text(row, CanonicalField.PLACEMENT) or "Other",
            spend=max(0.0, field_number(row, CanonicalField.SPEND)),
            sales=max(0.0, field_number(row, CanonicalField.SALES)),
            clicks=max(0.0, field_number(row, CanonicalField.CLICKS)),
            impressions=max(0.0, field_number(row, CanonicalField.IMPRESSIONS)),
            orders=max(0.0, field_number(row, CanonicalField.ORDERS)),
        )


@dataclass(frozen=True)
class PerformanceMetrics:
    spend: float = 0.0
    sales: float = 0.0
    clicks: float = 0.0
    impressions: float = 0.0
    orders: float = 0.0
    acos: float = 0.0
    roas: float = 0.0
    ctr: float = 0.0
    cpc: float = 0.0
    cvr: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "spend": self.spend,
            "sales": self.sales,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "orders": self.orders,
            "acos": self.acos,
            "roas": self.roas,
            "ctr": self.ctr,
            "cpc": self.cpc,
            "cvr": self.cvr,
        }


@dataclass(frozen=True)
class Aggregate:
    name: str
    metrics: PerformanceMetrics

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.metrics.to_dict()}


class CampaignAggregate(Aggregate):
    pass


class MatchTypeAggregate(Aggregate):
    pass


class PlacementAggregate(Aggregate):
    pass


@dataclass(frozen=True)
class AutoManualAggregate(Aggregate):
    percent_spend: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["percentSpend"] = self.percent_spend
        return payload


@dataclass(frozen=True)
class KeywordCampaignAggregate(Aggregate):
    placements: tuple[PlacementAggregate, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["placementList"] = [placement.to_dict() for placement in self.placements]
        return payload


class CampaignKeywordAggregate(Aggregate):
    pass


@dataclass(frozen=True)
class CampaignDetail:
    """One campaign's rows broken down by search term and by placement, highest spend first."""

    name: str
    keywords: tuple[CampaignKeywordAggregate, ...] = ()
    placements: tuple[PlacementAggregate, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "keywords": [{"keyword": item.name, **item.metrics.to_dict()} for item in self.keywords],
            "placements": [{"placement": item.name, **item.metrics.to_dict()} for item in self.placements],
        }


@dataclass(frozen=True)
class KeywordAggregate:
    keyword: str
    metrics: PerformanceMetrics
    campaigns: tuple[KeywordCampaignAggregate, ...] = ()

    def top_campaign(self) -> KeywordCampaignAggregate | None:
        """Highest-spend parent campaign; the first one seen wins ties."""
        if not self.campaigns:
            return None
        return max(self.campaigns, key=lambda campaign: campaign.metrics.spend)

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            **self.metrics.to_dict(),
            "campaignList": [campaign.to_dict() for campaign in self.campaigns],
        }


@dataclass(frozen=True)
class WastedKeyword:
    keyword: str
    match_type: str
    spend: float
    clicks: float
    orders: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "matchType": self.match_type,
            "spend": self.spend,
            "clicks": self.clicks,
            "orders": self.orders,
        }


@dataclass(frozen=True)
class WastedSpendResult:
    keywords: tuple[WastedKeyword, ...]
    total_wasted: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "keywords": [keyword.to_dict() for keyword in self.keywords],
            "totalWasted": self.total_wasted,
        }


class FindingType(str, Enum):
    CAMPAIGN = "campaign"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class InefficientItem:
    type: FindingType
    name: str
    metrics: PerformanceMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "spend": self.metrics.spend,
            "sales": self.metrics.sales,
            "acos": self.metrics.acos,
            "roas": self.metrics.roas,
            "orders": self.metrics.orders,
            "clicks": self.metrics.clicks,
            "cpc": self.metrics.cpc,
        }


@dataclass(frozen=True)
class InefficientSpendResult:
    items: tuple[InefficientItem, ...]
    total_inefficient: float

    def of_type(self, finding_type: FindingType) -> list[InefficientItem]:
        return [item for item in self.items if item.type == finding_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalInefficient": self.total_inefficient,
        }


class Severity(str, Enum):
    DANGER = "danger"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class Recommendation:
    severity: Severity
    title: str
    description: str
    action: str
    details: tuple[str, ...]
    priority: Priority

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.severity.value,
            "title": self.title,
            "description": self.description,
            "action": self.action,
            "details": list(self.details),
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class SummaryMetrics:
    total_spend: float
    total_sales: float
    acos: float
    roas: float
    ctr: float
    cpc: float
    cvr: float
    total_clicks: int
    total_impressions: int
    total_orders: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSpend": self.total_spend,
            "totalSales": self.total_sales,
            "acos": self.acos,
            "roas": self.roas,
            "ctr": self.ctr,
            "cpc": self.cpc,
            "cvr": self.cvr,
            "totalClicks": self.total_clicks,
            "totalImpressions": self.total_impressions,
            "totalOrders": self.total_orders,
        }
