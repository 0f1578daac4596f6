"""Unit tests for plantcare_lite.frequency_rule."""

import logging
from datetime import datetime

import pytest

from plantcare_lite.care_exceptions import FrequencyParseError
from plantcare_lite.frequency_rule import (
    AD_HOC,
    FrequencyKind,
    FrequencyRule,
    next_due_date,
    parse_frequency,
    resolve_frequency,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "text,expected_kind,expected_interval",
    [
        ("Daily", FrequencyKind.DAILY, 1),
        ("  weekly ", FrequencyKind.WEEKLY, 1),
        ("MONTHLY", FrequencyKind.MONTHLY, 1),
        ("Yearly", FrequencyKind.YEARLY, 1),
        ("Ad-hoc", FrequencyKind.AD_HOC, 1),
        ("adhoc", FrequencyKind.AD_HOC, 1),
        ("As needed", FrequencyKind.AD_HOC, 1),
        ("Every 3 Days", FrequencyKind.EVERY_N_DAYS, 3),
        ("every 2 weeks", FrequencyKind.EVERY_N_WEEKS, 2),
        ("Every 1 Month", FrequencyKind.EVERY_N_MONTHS, 1),
        ("Every  10   Days", FrequencyKind.EVERY_N_DAYS, 10),
        ("mỗi 5 ngày", FrequencyKind.EVERY_N_DAYS, 5),
        ("Mỗi 2 tuần", FrequencyKind.EVERY_N_WEEKS, 2),
        ("mỗi 3 tháng", FrequencyKind.EVERY_N_MONTHS, 3),
    ],
)
def test_parse_frequency_valid_variants(text: str, expected_kind: FrequencyKind, expected_interval: int) -> None:
    """parse_frequency accepts known tokens and Every-N patterns case-insensitively."""
    rule = parse_frequency(text)
    assert rule.kind is expected_kind
    assert rule.interval == expected_interval


@pytest.mark.parametrize(
    "bad_text",
    [None, "", "   ", "Fortnightly", "Every 0 Days", "Every -1 Days", "Every two weeks", "Every 3 Hours"],
)
def test_parse_frequency_invalid_raises(bad_text) -> None:
    """Unknown text and non-positive intervals raise FrequencyParseError."""
    with pytest.raises(FrequencyParseError):
        parse_frequency(bad_text)


def test_resolve_frequency_falls_back_to_ad_hoc_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="plantcare_lite.frequency_rule"):
        rule = resolve_frequency("Every blue moon", task_id="t42")

    assert rule == AD_HOC
    assert "t42" in caplog.text


def test_resolve_frequency_passes_valid_rules_through() -> None:
    assert resolve_frequency("Every 2 Weeks") == FrequencyRule(FrequencyKind.EVERY_N_WEEKS, 2)


@pytest.mark.parametrize(
    "rule,label",
    [
        (FrequencyRule(FrequencyKind.AD_HOC), "Ad-hoc"),
        (FrequencyRule(FrequencyKind.DAILY), "Daily"),
        (FrequencyRule(FrequencyKind.YEARLY), "Yearly"),
        (FrequencyRule(FrequencyKind.EVERY_N_DAYS, 3), "Every 3 Days"),
        (FrequencyRule(FrequencyKind.EVERY_N_MONTHS, 6), "Every 6 Months"),
    ],
)
def test_label_is_canonical_and_parses_back(rule: FrequencyRule, label: str) -> None:
    assert rule.label == label
    assert str(rule) == label
    assert parse_frequency(label) == rule


def test_monthly_step_clamps_to_end_of_short_month() -> None:
    rule = FrequencyRule(FrequencyKind.MONTHLY)
    assert datetime(2024, 1, 31, 9, 0) + rule.step(1) == datetime(2024, 2, 29, 9, 0)
    assert datetime(2023, 1, 31) + rule.step(1) == datetime(2023, 2, 28)


def test_negative_step_moves_backward() -> None:
    rule = FrequencyRule(FrequencyKind.EVERY_N_WEEKS, 2)
    assert datetime(2024, 1, 15) + rule.step(-1) == datetime(2024, 1, 1)


def test_ad_hoc_step_never_moves() -> None:
    anchor = datetime(2024, 1, 1, 9, 0)
    assert anchor + AD_HOC.step(5) == anchor


@pytest.mark.parametrize(
    "rule,expected",
    [
        (FrequencyRule(FrequencyKind.AD_HOC), 0),
        (FrequencyRule(FrequencyKind.DAILY), 1),
        (FrequencyRule(FrequencyKind.WEEKLY), 7),
        (FrequencyRule(FrequencyKind.EVERY_N_DAYS, 4), 4),
        (FrequencyRule(FrequencyKind.EVERY_N_MONTHS, 3), 84),
        (FrequencyRule(FrequencyKind.YEARLY), 365),
    ],
)
def test_min_step_days(rule: FrequencyRule, expected: int) -> None:
    assert rule.min_step_days == expected


def test_invalid_intervals_rejected_at_construction() -> None:
    with pytest.raises(FrequencyParseError):
        FrequencyRule(FrequencyKind.EVERY_N_DAYS, 0)
    with pytest.raises(FrequencyParseError):
        FrequencyRule(FrequencyKind.DAILY, 2)


def test_rules_are_hashable_and_comparable() -> None:
    assert {parse_frequency("Weekly"), parse_frequency("weekly")} == {FrequencyRule(FrequencyKind.WEEKLY)}


class TestFromForm:
    """Tests for building rules from the task form's frequency mode."""

    def test_fixed_modes(self) -> None:
        assert FrequencyRule.from_form("daily") == FrequencyRule(FrequencyKind.DAILY)
        assert FrequencyRule.from_form("adhoc").is_ad_hoc

    def test_every_x_mode_uses_value(self) -> None:
        assert FrequencyRule.from_form("every_x_weeks", 2) == FrequencyRule(FrequencyKind.EVERY_N_WEEKS, 2)
        assert FrequencyRule.from_form("every_x_weeks", 2).label == "Every 2 Weeks"

    @pytest.mark.parametrize("value", [None, 0, -3])
    def test_every_x_mode_requires_positive_value(self, value) -> None:
        with pytest.raises(FrequencyParseError):
            FrequencyRule.from_form("every_x_days", value)

    def test_unknown_mode(self) -> None:
        with pytest.raises(FrequencyParseError):
            FrequencyRule.from_form("hourly")


class TestNextDueDate:
    """Tests for next_due_date()."""

    def test_weekly(self) -> None:
        assert next_due_date("Weekly", datetime(2024, 1, 1, 9, 0)) == datetime(2024, 1, 8, 9, 0)

    def test_every_n_months_clamps(self) -> None:
        assert next_due_date("Every 2 Months", datetime(2023, 12, 31)) == datetime(2024, 2, 29)

    def test_ad_hoc_has_no_next_due_date(self) -> None:
        assert next_due_date("As needed", datetime(2024, 1, 1)) is None

    def test_unparseable_frequency_logs_and_returns_none(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="plantcare_lite.frequency_rule"):
            assert next_due_date("whenever", datetime(2024, 1, 1)) is None
        assert "next due date" in caplog.text
