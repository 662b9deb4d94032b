from app.models import Category


async def test_account_crud(client, auth_headers, user):
    response = await client.post("/api/v1/accounts/", headers=auth_headers, json={
        "account_name": "Vietcombank",
        "account_type": "bank",
        "current_balance": 5000000
    })
    assert response.status_code == 201
    account = response.json()
    assert account["currency_code"] == "VND"

    response = await client.put(f"/api/v1/accounts/{account['id']}", headers=auth_headers, json={"account_color": "#00ff00"})
    assert response.json()["account_color"] == "#00ff00"
    assert response.json()["account_name"] == "Vietcombank"

    response = await client.delete(f"/api/v1/accounts/{account['id']}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/accounts/", headers=auth_headers)
    assert response.json() == []


async def test_categories_include_defaults_and_own(client, auth_headers, food_category, salary_category, other_user, save):
    await save(Category(user_id=other_user.id, category_name="Bob only", transaction_type="expense"))

    response = await client.post("/api/v1/categories/", headers=auth_headers, json={
        "category_name": "Pets",
        "transaction_type": "expense",
        "parent_category_id": food_category.id
    })
    assert response.status_code == 201
    assert response.json()["is_default"] == False

    response = await client.get("/api/v1/categories/", headers=auth_headers)
    names = [c["category_name"] for c in response.json()]
    assert names == ["Food & Drinks", "Pets", "Salary"]
    assert "Bob only" not in names

    response = await client.get("/api/v1/categories/", headers=auth_headers, params={"transaction_type": "income"})
    assert [c["category_name"] for c in response.json()] == ["Salary"]


async def test_parent_category_type_must_match(client, auth_headers, salary_category):
    response = await client.post("/api/v1/categories/", headers=auth_headers, json={
        "category_name": "Snacks",
        "transaction_type": "expense",
        "parent_category_id": salary_category.id
    })
    assert response.status_code == 400
