from datetime import date, timedelta
from decimal import Decimal

from app.core.datetime_utils import month_bounds
from app.models import Budget, Category


def budget_payload(category_id, **overrides):
    today = date.today()
    payload = {
        "category_id": category_id,
        "amount": 1000000,
        "start_date": (today - timedelta(days=5)).isoformat(),
        "end_date": (today + timedelta(days=5)).isoformat(),
        "notification_threshold": 90
    }
    payload.update(overrides)
    return payload


async def test_create_budget(client, auth_headers, food_category):
    response = await client.post("/api/v1/budgets/", headers=auth_headers, json=budget_payload(food_category.id))

    assert response.status_code == 201
    data = response.json()
    assert data["category_name"] == "Food & Drinks"
    assert data["spent_amount"] == 0
    assert data["status"] == "Normal"


async def test_start_must_be_before_end(client, auth_headers, food_category):
    today = date.today().isoformat()
    response = await client.post("/api/v1/budgets/", headers=auth_headers, json=budget_payload(
        food_category.id, start_date=today, end_date=today
    ))

    assert response.status_code == 400
    assert response.json() == {"detail": "Start date must be before end date"}


async def test_overlapping_budget_is_rejected(client, auth_headers, food_category, food_budget):
    response = await client.post("/api/v1/budgets/", headers=auth_headers, json=budget_payload(food_category.id))

    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


async def test_update_may_keep_its_own_range(client, auth_headers, food_category, food_budget):
    response = await client.put(
        f"/api/v1/budgets/{food_budget.id}",
        headers=auth_headers,
        json=budget_payload(food_category.id, amount=2000000)
    )

    assert response.status_code == 200
    assert response.json()["amount"] == 2000000


async def test_other_users_category_is_rejected(client, auth_headers, other_user, save):
    private = await save(Category(user_id=other_user.id, category_name="Bob stuff", transaction_type="expense"))

    response = await client.post("/api/v1/budgets/", headers=auth_headers, json=budget_payload(private.id))
    assert response.status_code == 400


async def test_list_reports_progress_and_totals(client, auth_headers, food_category, food_budget, add_expense):
    await add_expense(850000, category_id=food_category.id)
    await add_expense(50000)  # uncategorised, not counted

    response = await client.get("/api/v1/budgets/", headers=auth_headers)
    data = response.json()

    assert data["total_count"] == 1
    assert data["total_budget_amount"] == 1000000
    assert data["total_spent_amount"] == 850000
    assert data["overall_progress_percentage"] == 85.0
    assert data["budgets"][0]["status"] == "Warning"
    assert data["budgets"][0]["remaining_amount"] == 150000


async def test_alerts(client, auth_headers, food_category, food_budget, add_expense):
    await add_expense(950000, category_id=food_category.id)

    response = await client.get("/api/v1/budgets/alerts", headers=auth_headers)
    alerts = response.json()

    assert len(alerts) == 1
    assert alerts[0]["alert_type"] == "Threshold"
    assert alerts[0]["progress_percentage"] == 95.0


async def test_recurring_budget_is_active_in_later_month(client, auth_headers, user, food_category, save):
    today = date.today()
    first_of_month = today.replace(day=1)
    # Calendar-month budget a year back, repeating monthly
    start = date(first_of_month.year - 1, first_of_month.month, 1)
    end = month_bounds(start)[1]
    await save(Budget(
        user_id=user.id,
        category_id=food_category.id,
        amount=Decimal("500000"),
        start_date=start,
        end_date=end,
        is_recurring=True
    ))

    response = await client.get("/api/v1/budgets/", headers=auth_headers, params={"is_active": "true"})
    budgets = response.json()["budgets"]

    assert len(budgets) == 1
    assert budgets[0]["period_start"] == first_of_month.isoformat()
    assert budgets[0]["period_end"] == month_bounds(today)[1].isoformat()


async def test_delete_budget(client, auth_headers, food_budget):
    response = await client.delete(f"/api/v1/budgets/{food_budget.id}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/budgets/{food_budget.id}", headers=auth_headers)
    assert response.status_code == 404
