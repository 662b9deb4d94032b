from datetime import date, datetime, timedelta
from types import SimpleNamespace

from app.core.datetime_utils import add_months, convert_timezone_aware_datetimes, day_range, month_bounds
from app.services.budget_service import current_period, recurrence_step


def make_budget(start, end, recurring=False):
    return SimpleNamespace(start_date=start, end_date=end, is_recurring=recurring)


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
    assert add_months(date(2024, 3, 10), -3) == date(2023, 12, 10)


def test_month_bounds_and_day_range():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert day_range(date(2024, 1, 1), date(2024, 1, 31)) == (
        datetime(2024, 1, 1), datetime(2024, 2, 1)
    )


def test_convert_timezone_aware_datetimes():
    from datetime import timedelta, timezone

    data = {'transaction_date': datetime(2024, 5, 1, 9, 0, tzinfo=timezone(timedelta(hours=7)))}
    converted = convert_timezone_aware_datetimes(data)
    assert converted['transaction_date'] == datetime(2024, 5, 1, 2, 0)
    assert converted['transaction_date'].tzinfo is None


def test_non_recurring_budget_only_covers_its_range():
    budget = make_budget(date(2024, 1, 1), date(2024, 1, 31))

    assert current_period(budget, date(2024, 1, 31)) == (date(2024, 1, 1), date(2024, 1, 31))
    assert current_period(budget, date(2024, 2, 1)) is None
    assert current_period(budget, date(2023, 12, 31)) is None


def test_recurring_month_budget_follows_month_ends():
    budget = make_budget(date(2024, 1, 1), date(2024, 1, 31), recurring=True)

    assert recurrence_step(budget) == 1
    assert current_period(budget, date(2024, 2, 14)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert current_period(budget, date(2024, 4, 30)) == (date(2024, 4, 1), date(2024, 4, 30))
    assert current_period(budget, date(2025, 1, 5)) == (date(2025, 1, 1), date(2025, 1, 31))


def test_recurring_mid_month_budget():
    budget = make_budget(date(2024, 1, 15), date(2024, 2, 14), recurring=True)

    assert current_period(budget, date(2024, 3, 1)) == (date(2024, 2, 15), date(2024, 3, 14))
    assert current_period(budget, date(2024, 3, 15)) == (date(2024, 3, 15), date(2024, 4, 14))


def test_recurring_quarter_budget_advances_by_its_length():
    budget = make_budget(date(2024, 1, 1), date(2024, 3, 31), recurring=True)

    assert recurrence_step(budget) == 3
    assert current_period(budget, date(2024, 5, 20)) == (date(2024, 4, 1), date(2024, 6, 30))


def test_recurring_budget_from_month_end_covers_next_month():
    budget = make_budget(date(2024, 1, 31), date(2024, 2, 29), recurring=True)

    assert recurrence_step(budget) == 1
    assert current_period(budget, date(2024, 3, 15)) == (date(2024, 3, 1), date(2024, 3, 31))


def test_recurring_budget_starts_the_day_after_end():
    budget = make_budget(date(2024, 1, 31), date(2024, 2, 27), recurring=True)

    assert current_period(budget, date(2024, 2, 28)) == (date(2024, 2, 28), date(2024, 3, 27))


def test_recurring_periods_leave_no_gaps():
    for start, end in [
        (date(2024, 1, 1), date(2024, 1, 30)),
        (date(2024, 1, 31), date(2024, 2, 27)),
        (date(2023, 11, 30), date(2023, 12, 29)),
        (date(2024, 1, 1), date(2024, 3, 31)),
    ]:
        budget = make_budget(start, end, recurring=True)
        previous_end = end
        day = end + timedelta(days=1)
        while day < date(2026, 1, 1):
            period = current_period(budget, day)
            assert period is not None, (start, day)
            assert period[0] <= day <= period[1]
            if period[1] != previous_end:
                assert period[0] == previous_end + timedelta(days=1)
                previous_end = period[1]
            day += timedelta(days=1)


def test_clamped_anchor_keeps_periods_contiguous():
    budget = make_budget(date(2024, 1, 1), date(2024, 1, 30), recurring=True)

    assert current_period(budget, date(2024, 2, 10)) == (date(2024, 1, 31), date(2024, 2, 28))
    assert current_period(budget, date(2024, 3, 30)) == (date(2024, 2, 29), date(2024, 3, 30))
    assert current_period(budget, date(2024, 3, 31)) == (date(2024, 3, 31), date(2024, 4, 29))
