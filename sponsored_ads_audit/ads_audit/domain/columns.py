"""Column-name resolution and numeric normalization for bulk export rows."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Mapping, Sequence


class CanonicalField(str, Enum):
    SPEND = "Spend"
    SALES = "Sales"
    CLICKS = "Clicks"
    IMPRESSIONS = "Impressions"
    ORDERS = "Orders"
    CAMPAIGN_NAME = "CampaignName"
    CAMPAIGN_ID = "CampaignId"
    ENTITY = "Entity"
    MATCH_TYPE = "MatchType"
    TARGETING_TYPE = "TargetingType"
    PLACEMENT = "Placement"
    SEARCH_TERM = "SearchTerm"


FIELD_SYNONYMS: dict[CanonicalField, tuple[str, ...]] = {
    CanonicalField.SPEND: ("Spend", "Cost", "Ad Spend", "Total Spend"),
    CanonicalField.SALES: ("Sales", "Revenue", "7 Day Total Sales", "Total Sales", "Sales 7d"),
    CanonicalField.CLICKS: ("Clicks", "Click"),
    CanonicalField.IMPRESSIONS: ("Impressions", "Impr.", "Impr"),
    CanonicalField.ORDERS: ("Orders", "7 Day Total Orders", "Total Orders", "Orders 7d"),
    CanonicalField.CAMPAIGN_NAME: (
        "Campaign Name (Informational only)",
        "Campaign Name",
        "Campaign",
        "Campaign name",
    ),
    CanonicalField.CAMPAIGN_ID: ("Campaign ID", "Campaign Id", "CampaignId"),
    CanonicalField.ENTITY: ("Entity", "Record Type", "Operation"),
    CanonicalField.MATCH_TYPE: ("Match Type", "Product Targeting Expression"),
    CanonicalField.TARGETING_TYPE: ("Targeting Type", "Match Type", "Targeting"),
    CanonicalField.PLACEMENT: ("Placement",),
    CanonicalField.SEARCH_TERM: ("Customer Search Term", "Keyword Text"),
}

METRIC_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.SPEND,
    CanonicalField.SALES,
    CanonicalField.CLICKS,
    CanonicalField.IMPRESSIONS,
    CanonicalField.ORDERS,
)

# Leading-number prefix, so "12.5 units" still reads as 12.5.
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_STRIP_CHARS = re.compile(r"[$%,]")


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def resolve(row: Mapping[str, Any], candidates: Sequence[str]) -> Any:
    """Return the first non-empty value stored under any candidate column.

    Three passes, each over the candidates in priority order: exact key, case-insensitive
    key, then substring containment in either direction. Returns "" when nothing matches.
    """
    for name in candidates:
        value = row.get(name)
        if _is_present(value):
            return value

    lowered: dict[str, Any] = {}
    for key, value in row.items():
        lowered[str(key).lower()] = value
    for name in candidates:
        value = lowered.get(name.lower())
        if _is_present(value):
            return value

    for name in candidates:
        lower_name = name.lower()
        found_key = next(
            (
                key
                for key in row
                if str(key) and (lower_name in str(key).lower() or str(key).lower() in lower_name)
            ),
            None,
        )
        if found_key is not None and _is_present(row[found_key]):
            return row[found_key]

    return ""


def resolve_field(row: Mapping[str, Any], field: CanonicalField) -> Any:
    return resolve(row, FIELD_SYNONYMS[field])


def to_number(value: Any) -> float:
    """Coerce currency/percent text to float; anything unparseable becomes 0.0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    cleaned = _STRIP_CHARS.sub("", str(value)).strip()
    match = _NUMBER_PREFIX.match(cleaned)
    if match is None:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_text(value: Any) -> str:
    """Render a resolved cell as trimmed text; integral floats drop their ".0"."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def field_number(row: Mapping[str, Any], field: CanonicalField) -> float:
    return to_number(resolve_field(row, field))


def field_text(row: Mapping[str, Any], field: CanonicalField) -> str:
    return to_text(resolve_field(row, field))


def fmt_number(value: float) -> str:
    """Counts and user inputs print without a trailing ".0"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
