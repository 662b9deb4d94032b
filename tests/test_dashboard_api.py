from datetime import date

from app.core.datetime_utils import add_months


async def test_budget_progress_status_and_color(client, auth_headers, food_category, food_budget, add_expense):
    await add_expense(950000, category_id=food_category.id)

    response = await client.get("/api/v1/dashboard/budget-progress", headers=auth_headers)
    progress = response.json()

    assert len(progress) == 1
    assert progress[0]["status"] == "Critical"
    assert progress[0]["status_color"] == "#f97316"
    assert progress[0]["remaining_amount"] == 50000


async def test_budget_progress_good_when_low(client, auth_headers, food_category, food_budget, add_expense):
    await add_expense(100000, category_id=food_category.id)

    response = await client.get("/api/v1/dashboard/budget-progress", headers=auth_headers)
    assert response.json()[0]["status"] == "Good"


async def test_top_categories_include_budget_info(client, auth_headers, food_category, food_budget, add_expense):
    await add_expense(300000, category_id=food_category.id)
    await add_expense(100000)

    response = await client.get("/api/v1/dashboard/top-categories", headers=auth_headers)
    top = response.json()

    assert len(top) == 1
    assert top[0]["category_name"] == "Food & Drinks"
    assert top[0]["percentage"] == 100.0
    assert top[0]["has_budget"] == True
    assert top[0]["budget_status"] == "Good"


async def test_stats_and_overview(client, auth_headers, account, food_category, food_budget, add_expense):
    await add_expense(1200000, category_id=food_category.id)

    response = await client.get("/api/v1/dashboard/overview", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()

    assert data["stats"]["active_budgets"] == 1
    assert data["stats"]["over_budget_count"] == 1
    assert data["stats"]["account_count"] == 1
    assert data["financial_summary"]["total_balance"] == 1000000
    assert data["alerts"][0]["alert_type"] == "Exceeded"


async def test_monthly_trend_is_oldest_first(client, auth_headers, user):
    response = await client.get("/api/v1/dashboard/monthly-trend", headers=auth_headers, params={"months": 3})
    months = [point["month"] for point in response.json()]

    first_of_month = date.today().replace(day=1)
    assert months == [add_months(first_of_month, -i).strftime("%Y-%m") for i in (2, 1, 0)]


async def test_summary_counts_last_30_days(client, auth_headers, account, add_expense):
    await add_expense(40000)
    await add_expense(60000)

    response = await client.get("/api/v1/dashboard/summary", headers=auth_headers)
    data = response.json()

    assert data["total_expense"] == 100000
    assert data["transaction_count"] == 2
    assert data["net_balance"] == 1000000
