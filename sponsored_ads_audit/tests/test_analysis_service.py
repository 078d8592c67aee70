import pytest

from ads_audit import EmptyInputError, analyze, build_aggregates, evaluate, reanalyze


@pytest.fixture
def sample_rows(make_row):
    return [
        make_row(entity="Campaign", campaign_id="C1", campaign="Brand", spend=260, sales=400, clicks=60),
        make_row(entity="Keyword", campaign_id="C1", campaign="Brand", keyword="Trail Shoes", spend=200,
                 sales=400, clicks=40, impressions=4000, orders=4, match_type="Exact", targeting_type="Manual"),
        make_row(entity="Keyword", campaign_id="C1", campaign="Brand", keyword="socks", spend=60, clicks=20,
                 impressions=900, match_type="Broad", targeting_type="Manual"),
        make_row(entity="Product Ad", campaign_id="C1", campaign="Brand", spend=260, clicks=60),
        make_row(entity="Product Targeting", campaign_id="C2", campaign="Auto Catch", keyword="close-match",
                 spend=30, sales=300, clicks=10, impressions=500, orders=3, targeting_type="Auto"),
        make_row(entity="Negative Keyword", campaign_id="C2", campaign="Auto Catch", keyword="free"),
    ]


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        analyze([], 20)


def test_rows_without_activity_raise(make_row):
    with pytest.raises(EmptyInputError, match="No valid advertising data"):
        analyze([make_row(keyword="idle"), make_row(entity="Campaign", spend=0)], 20)


def test_only_rollup_rows_raise(make_row):
    with pytest.raises(EmptyInputError):
        analyze([make_row(entity="Campaign", spend=50, clicks=5)], 20)


def test_rollups_do_not_double_count(sample_rows):
    result = analyze(sample_rows, 20)

    assert result.metrics.total_spend == 290
    assert result.metrics.total_sales == 700
    assert [row["Entity"] for row in result.raw_data] == ["Keyword", "Keyword", "Product Targeting"]
    assert {campaign.name: campaign.metrics.spend for campaign in result.campaigns} == {
        "Brand": 260,
        "Auto Catch": 30,
    }


def test_result_sections_are_populated(sample_rows):
    result = analyze(sample_rows, 20)

    assert [keyword.keyword for keyword in result.keywords] == ["trail shoes", "socks", "close-match"]
    assert [group.name for group in result.auto_vs_manual] == ["Auto", "Manual"]
    assert [(kw.keyword, kw.spend) for kw in result.wasted_spend.keywords] == [("socks", 60)]
    assert result.target_acos == 20


def test_analysis_is_deterministic(sample_rows):
    assert analyze(sample_rows, 20).to_dict() == analyze(sample_rows, 20).to_dict()


def test_reanalyze_matches_fresh_analysis(sample_rows):
    first = analyze(sample_rows, 20)

    changed = reanalyze(first, 60)

    assert changed.to_dict() == analyze(sample_rows, 60).to_dict()
    assert changed.inefficient_spend.items == ()
    assert reanalyze(first, "20") is first


def test_evaluate_only_depends_on_target(sample_rows):
    aggregates = build_aggregates(sample_rows)

    strict, _ = evaluate(aggregates, 10)
    loose, _ = evaluate(aggregates, 60)

    assert len(strict.items) > len(loose.items)
    assert aggregates.summary.total_spend == 290


def test_target_acos_text_is_coerced(sample_rows):
    assert analyze(sample_rows, "25%").target_acos == 25


def test_to_dict_uses_camel_case_sections(sample_rows):
    payload = analyze(sample_rows, 20).to_dict()

    assert list(payload) == [
        "metrics",
        "campaigns",
        "campaignDetails",
        "autoVsManual",
        "matchTypeAnalysis",
        "keywordAnalysis",
        "wastedSpend",
        "inefficientSpend",
        "recommendations",
        "rawData",
    ]
    assert payload["metrics"]["totalSpend"] == 290
    assert payload["keywordAnalysis"][0]["campaignList"][0]["placementList"][0]["name"] == "Other"
    assert payload["wastedSpend"]["totalWasted"] == 60
    assert {item["type"] for item in payload["recommendations"]} <= {"danger", "warning", "success", "info"}
