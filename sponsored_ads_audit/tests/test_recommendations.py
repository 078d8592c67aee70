from ads_audit.application.analysis_service import analyze
from ads_audit.application.reporting.metrics import derive_metrics
from ads_audit.domain.models import (
    InefficientSpendResult,
    KeywordAggregate,
    Priority,
    Severity,
    WastedKeyword,
    WastedSpendResult,
)
from ads_audit.domain.recommendation import (
    generate_recommendations,
    low_conversion_keywords,
    top_performers,
    wasted_spend_recommendation,
)


def _by_severity(result, severity):
    return [item for item in result.recommendations if item.severity == severity]


def test_inefficient_campaign_gets_lower_bid_suggestion(make_row):
    result = analyze(
        [make_row(campaign="Broad Push", keyword="kettle", spend=60, sales=200, clicks=20, orders=2)],
        20,
    )

    campaign_rec, keyword_rec = _by_severity(result, Severity.WARNING)

    assert campaign_rec.title == "1 Campaigns Over 26.0% ACoS (30% Above Target)"
    assert campaign_rec.description == "Target ACoS: 20%. These campaigns are significantly underperforming."
    assert campaign_rec.details == ('• "Broad Push" - 30.00% ACoS, $60.00 spent. Lower bids to $2.10 CPC',)
    assert campaign_rec.priority == Priority.HIGH

    assert keyword_rec.title == "1 Keywords Over 26.0% ACoS"
    assert keyword_rec.action == "Reduce keyword-level bids by 30%"
    assert keyword_rec.details == ('• Campaign "Broad Push":\n  Lower bid on "kettle" from $3.00 to $2.10 CPC',)


def test_inefficiency_rules_wait_for_spend_gate(make_row):
    result = analyze([make_row(campaign="Small", keyword="kettle", spend=40, sales=100, clicks=10, orders=2)], 20)

    assert result.inefficient_spend.total_inefficient == 40
    assert _by_severity(result, Severity.WARNING) == []


def test_wasted_spend_recommendation_above_gate(make_row):
    result = analyze(
        [
            make_row(keyword="socks", clicks=8, spend=60),
            make_row(keyword="scarf", clicks=5, spend=50),
        ],
        20,
    )

    (danger,) = _by_severity(result, Severity.DANGER)

    assert danger.title == "$110.00 Wasted on 2 Keywords (5+ Clicks, $0 Sales)"
    assert danger.action == "Add 2 negative keywords"
    assert danger.details == (
        '• "socks" - $60.00 wasted (8 clicks)',
        '• "scarf" - $50.00 wasted (5 clicks)',
    )


def test_wasted_spend_at_gate_produces_nothing():
    wasted = WastedSpendResult(
        keywords=(WastedKeyword(keyword="socks", match_type="", spend=100, clicks=9, orders=0),),
        total_wasted=100,
    )

    assert wasted_spend_recommendation(wasted) is None


def test_top_performer_increase_uses_top_campaign_cpc(make_row):
    result = analyze(
        [
            make_row(keyword="boots", spend=30, sales=300, clicks=10, orders=3),
            make_row(keyword="boots", campaign="Tiny", campaign_id="C2", spend=1, sales=0, clicks=1, orders=0),
        ],
        20,
    )

    (success,) = _by_severity(result, Severity.SUCCESS)

    assert success.title == "1 High-Performing Keywords Below 16.0% ACoS"
    assert success.description == "These keywords are performing 20%+ better than your 20% target. Scale them!"
    assert success.details == (
        '• "boots" in "Campaign One" - 10.33% ACoS, 9.68x ROAS. Increase bid from $3.00 to $4.20',
    )


def test_top_performers_sorted_by_roas_and_need_sales():
    keywords = [
        KeywordAggregate(keyword="good", metrics=derive_metrics(25, 250, 10, 100, 3)),
        KeywordAggregate(keyword="best", metrics=derive_metrics(25, 500, 10, 100, 5)),
        KeywordAggregate(keyword="no sales", metrics=derive_metrics(25, 0, 10, 100, 3)),
        KeywordAggregate(keyword="few orders", metrics=derive_metrics(25, 500, 10, 100, 2)),
        KeywordAggregate(keyword="low spend", metrics=derive_metrics(20, 500, 10, 100, 5)),
    ]

    assert [keyword.keyword for keyword in top_performers(keywords, 20)] == ["best", "good"]


def test_low_conversion_rate_is_informational(make_row):
    result = analyze([make_row(keyword="widgets", spend=40, clicks=25, orders=1)], 20)

    (info,) = _by_severity(result, Severity.INFO)

    assert info.title == "1 Keywords with Low Conversion Rate (<5%)"
    assert info.priority == Priority.MEDIUM
    assert info.details == ('• "widgets" - 4.00% CVR, 25 clicks, 1 orders',)


def test_low_conversion_thresholds_are_strict():
    keywords = [
        KeywordAggregate(keyword="twenty clicks", metrics=derive_metrics(40, 0, 20, 100, 0)),
        KeywordAggregate(keyword="thirty spend", metrics=derive_metrics(30, 0, 25, 100, 0)),
        KeywordAggregate(keyword="five percent", metrics=derive_metrics(40, 0, 40, 100, 2)),
        KeywordAggregate(keyword="flagged", metrics=derive_metrics(31, 0, 21, 100, 0)),
    ]

    assert [keyword.keyword for keyword in low_conversion_keywords(keywords)] == ["flagged"]


def test_keyword_bid_details_keep_five_highest_spend_per_campaign(make_row):
    rows = [
        make_row(keyword=f"kw{spend}", spend=spend, sales=1, clicks=5, orders=1)
        for spend in (21, 22, 23, 24, 25, 26)
    ]

    result = analyze(rows, 20)

    keyword_rec = next(item for item in result.recommendations if item.title.endswith("Keywords Over 26.0% ACoS"))
    (detail,) = keyword_rec.details
    lines = detail.split("\n")

    assert keyword_rec.title == "6 Keywords Over 26.0% ACoS"
    assert lines[0] == '• Campaign "Campaign One":'
    assert [line.split('"')[1] for line in lines[1:]] == ["kw26", "kw25", "kw24", "kw23", "kw22"]


def test_recommendations_follow_fixed_order(make_row):
    rows = [
        make_row(keyword="socks", clicks=8, spend=120),
        make_row(campaign="Broad Push", campaign_id="C2", keyword="kettle", spend=200, sales=400, clicks=40, orders=4),
        make_row(campaign="Winners", campaign_id="C3", keyword="boots", spend=30, sales=300, clicks=10, orders=3),
        make_row(campaign="Browsers", campaign_id="C4", keyword="widgets", spend=40, clicks=25, orders=1),
    ]

    result = analyze(rows, 20)

    assert [item.severity for item in result.recommendations] == [
        Severity.DANGER,
        Severity.WARNING,
        Severity.WARNING,
        Severity.SUCCESS,
        Severity.INFO,
    ]


def test_no_findings_produce_no_recommendations():
    empty_wasted = WastedSpendResult(keywords=(), total_wasted=0)
    empty_inefficient = InefficientSpendResult(items=(), total_inefficient=0)

    assert generate_recommendations([], empty_wasted, empty_inefficient, 20) == []
