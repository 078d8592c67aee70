import math

from ads_audit.domain.columns import (
    CanonicalField,
    field_text,
    fmt_number,
    resolve,
    resolve_field,
    to_number,
    to_text,
)


def test_to_number_strips_currency_thousands_and_percent():
    assert to_number("$1,234.56") == 1234.56
    assert to_number("12.5%") == 12.5
    assert to_number("  $7 ") == 7.0


def test_to_number_degrades_to_zero_instead_of_raising():
    assert to_number("") == 0.0
    assert to_number(None) == 0.0
    assert to_number("n/a") == 0.0
    assert to_number(float("nan")) == 0.0
    assert to_number(float("inf")) == 0.0
    assert to_number(True) == 0.0
    assert to_number({"nested": 1}) == 0.0


def test_to_number_reads_leading_number_and_native_numbers():
    assert to_number("12abc") == 12.0
    assert to_number(".5") == 0.5
    assert to_number(3) == 3.0
    assert math.isclose(to_number(2.25), 2.25)
    assert to_number("-4.5") == -4.5


def test_resolve_prefers_exact_match_over_case_insensitive():
    row = {"spend": "9", "Spend": "5"}
    assert resolve(row, ["Spend"]) == "5"


def test_resolve_candidate_order_beats_column_order():
    row = {"Cost": "1", "Spend": "2"}
    assert resolve(row, ["Spend", "Cost"]) == "2"


def test_resolve_falls_back_to_case_insensitive_key():
    assert resolve({"SPEND": "9"}, ["Spend"]) == "9"


def test_resolve_falls_back_to_substring_in_either_direction():
    assert resolve({"Total Spend (USD)": "3"}, ["Spend"]) == "3"
    assert resolve({"Impr": "40"}, ["Impressions Count"]) == "40"


def test_resolve_skips_blank_values():
    row = {"Spend": "", "Cost": "4"}
    assert resolve(row, ["Spend", "Cost"]) == "4"
    assert resolve({"Spend": None}, ["Spend"]) == ""


def test_resolve_returns_empty_string_when_nothing_matches():
    assert resolve({"Clicks": 3}, ["Orders"]) == ""
    assert resolve({}, ["Orders"]) == ""


def test_resolve_zero_counts_as_present():
    assert resolve({"Spend": 0, "Cost": 12}, ["Spend", "Cost"]) == 0


def test_resolve_field_uses_synonym_table():
    row = {"7 Day Total Sales": "$88.10", "Campaign Name (Informational only)": "Brand"}
    assert to_number(resolve_field(row, CanonicalField.SALES)) == 88.1
    assert field_text(row, CanonicalField.CAMPAIGN_NAME) == "Brand"


def test_to_text_trims_and_drops_integral_float_suffix():
    assert to_text("  Keyword ") == "Keyword"
    assert to_text(123456789.0) == "123456789"
    assert to_text(None) == ""
    assert to_text(1.5) == "1.5"


def test_fmt_number_drops_integral_suffix():
    assert fmt_number(25.0) == "25"
    assert fmt_number(12.5) == "12.5"
