from decimal import Decimal

import pytest

from app.services.budget_evaluator import (
    WarningLevel,
    classify_progress,
    evaluate_budget,
    progress_percentage,
)


def test_zero_budget_has_zero_progress():
    assert progress_percentage(500000, 0) == 0
    assert evaluate_budget(0, 500000, 100000) is None


def test_below_warning_level_is_normal():
    assert evaluate_budget(1000000, 500000, 200000) is None
    assert classify_progress(Decimal("79.99")) == WarningLevel.NORMAL


def test_warning_tier():
    warning = evaluate_budget(1000000, 700000, 100000, notification_threshold=90, category_name="Food")

    assert warning.warning_level == WarningLevel.WARNING
    assert warning.progress_percentage == Decimal("80.00")
    assert warning.overage is None
    assert "Food" in warning.message


def test_exactly_at_threshold_is_critical():
    warning = evaluate_budget(1000000, 800000, 100000, notification_threshold=90)

    assert warning.warning_level == WarningLevel.CRITICAL
    assert warning.progress_percentage == Decimal("90.00")


def test_critical_example():
    warning = evaluate_budget(1000000, 850000, 100000, notification_threshold=90, category_name="Food")

    assert warning.warning_level == WarningLevel.CRITICAL
    assert warning.progress_percentage == Decimal("95.00")
    assert warning.current_spent == Decimal("850000")
    assert warning.new_spent == Decimal("950000")


def test_exceeded_example_reports_overage():
    warning = evaluate_budget(1000000, 850000, 200000, notification_threshold=90, category_name="Food")

    assert warning.warning_level == WarningLevel.EXCEEDED
    assert warning.progress_percentage == Decimal("105.00")
    assert warning.overage == Decimal("50000")
    assert "50,000" in warning.message


def test_exactly_at_budget_is_exceeded_with_zero_overage():
    warning = evaluate_budget(1000000, 900000, 100000)

    assert warning.warning_level == WarningLevel.EXCEEDED
    assert warning.overage == 0


def test_threshold_below_warning_level_wins():
    # Critical is checked before Warning
    assert classify_progress(75, notification_threshold=70) == WarningLevel.CRITICAL


@pytest.mark.parametrize("percentage,expected", [
    (0, WarningLevel.NORMAL),
    (80, WarningLevel.WARNING),
    (89.99, WarningLevel.WARNING),
    (90, WarningLevel.CRITICAL),
    (100, WarningLevel.EXCEEDED),
    (250, WarningLevel.EXCEEDED),
])
def test_classify_progress_tiers(percentage, expected):
    assert classify_progress(percentage, notification_threshold=90) == expected


def test_float_inputs_do_not_drift():
    warning = evaluate_budget(0.3, 0.1, 0.2)
    assert warning.warning_level == WarningLevel.EXCEEDED
    assert warning.overage == 0
