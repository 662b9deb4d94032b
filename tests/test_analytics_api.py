from datetime import date, datetime
from decimal import Decimal

from app.models import Category, Transaction


async def test_overview_totals_and_breakdown(client, auth_headers, user, account, food_category, salary_category, save, add_expense):
    transport = await save(Category(user_id=None, category_name="Transport", transaction_type="expense", is_default=True))
    await save(Transaction(
        user_id=user.id,
        account_id=account.id,
        category_id=salary_category.id,
        amount=Decimal("10000000"),
        transaction_type="income",
        description="salary",
        transaction_date=datetime.utcnow()
    ))
    await add_expense(3000000, category_id=food_category.id)
    await add_expense(1000000, category_id=transport.id)
    await add_expense(2000000)

    response = await client.get("/api/v1/analytics/overview", headers=auth_headers, params={"time_range": "3months"})
    assert response.status_code == 200
    data = response.json()

    assert data["time_range"] == "3months"
    assert data["total_income"] == 10000000
    assert data["total_expenses"] == 6000000
    assert data["total_savings"] == 4000000
    assert data["savings_rate"] == 40.0
    assert data["avg_monthly_expenses"] == 2000000

    assert len(data["monthly_data"]) == 3
    assert data["monthly_data"][-1] == {
        "month": date.today().strftime("%Y-%m"),
        "income": 10000000,
        "expenses": 6000000,
        "savings": 4000000
    }

    breakdown = [(c["name"], c["percentage"]) for c in data["category_breakdown"]]
    assert breakdown == [("Food & Drinks", 75.0), ("Transport", 25.0)]


async def test_default_range_and_empty_data(client, auth_headers, user):
    response = await client.get("/api/v1/analytics/overview", headers=auth_headers)
    data = response.json()

    assert data["time_range"] == "6months"
    assert len(data["monthly_data"]) == 6
    assert data["savings_rate"] == 0
    assert data["category_breakdown"] == []


async def test_unknown_range_is_rejected(client, auth_headers, user):
    response = await client.get("/api/v1/analytics/overview", headers=auth_headers, params={"time_range": "5years"})
    assert response.status_code == 422
