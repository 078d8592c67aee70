from typing import Any, Dict

import pytest


def bulk_row(
    entity: str = "Keyword",
    campaign_id: Any = "C1",
    campaign: str = "Campaign One",
    keyword: str = "",
    spend: Any = 0,
    sales: Any = 0,
    clicks: Any = 0,
    impressions: Any = 0,
    orders: Any = 0,
    match_type: str = "",
    targeting_type: str = "",
    placement: str = "",
) -> Dict[str, Any]:
    """One bulk-export style row; every column is present, blanks are ""."""
    return {
        "Entity": entity,
        "Campaign ID": campaign_id,
        "Campaign Name": campaign,
        "Keyword Text": keyword,
        "Match Type": match_type,
        "Targeting Type": targeting_type,
        "Placement": placement,
        "Impressions": impressions,
        "Clicks": clicks,
        "Spend": spend,
        "Sales": sales,
        "Orders": orders,
    }


@pytest.fixture
def make_row():
    return bulk_row
