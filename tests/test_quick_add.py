from app.api.deps import get_category_classifier
from app.main import app
from app.models import Category


class FixedClassifier:
    def __init__(self, category, confidence):
        self.category = category
        self.confidence = confidence

    def predict(self, description, amount):
        return self.category, self.confidence, {self.category: self.confidence}


async def quick_add(client, headers, message, language="vi"):
    return await client.post("/api/v1/quick-add/", headers=headers, json={"message": message, "language": language})


async def test_records_transaction(client, auth_headers, account, food_category):
    response = await quick_add(client, auth_headers, "cà phê 25k")

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "transaction"
    assert data["transaction"]["amount"] == 25000
    assert data["transaction"]["source"] == "quick_add"
    assert data["transaction"]["category_id"] == food_category.id
    assert "budget_warning" not in data


async def test_budget_check_runs_after_response(client, auth_headers, account, food_budget):
    response = await quick_add(client, auth_headers, "ăn tối 950k", language="en")
    assert response.json()["type"] == "transaction"

    response = await client.get("/api/v1/notifications/", headers=auth_headers)
    notifications = response.json()
    assert len(notifications) == 1
    assert notifications[0]["type"] == "budget_warning"
    assert "95.0%" in notifications[0]["message"]


async def test_question_gets_answer(client, auth_headers, account, add_expense):
    await add_expense(25000)

    response = await quick_add(client, auth_headers, "how much did I spend today?", language="en")
    assert response.json() == {
        "type": "query",
        "response": "You have spent 25,000đ today.",
        "transaction": None
    }


async def test_unparseable_message(client, auth_headers, account):
    response = await quick_add(client, auth_headers, "hello there", language="en")
    data = response.json()
    assert data["type"] == "query"
    assert data["transaction"] is None
    assert data["response"].startswith("I couldn't understand")


async def test_requires_an_account(client, auth_headers, user):
    response = await quick_add(client, auth_headers, "cà phê 25k", language="en")
    assert response.json()["response"] == "You don't have an account yet. Please create one first."


async def test_classifier_fills_missing_category(client, auth_headers, account, save):
    transport = await save(Category(user_id=None, category_name="Transport", transaction_type="expense", is_default=True))
    app.dependency_overrides[get_category_classifier] = lambda: FixedClassifier("Transport", 0.9)

    response = await quick_add(client, auth_headers, "zxcv 50k")
    assert response.json()["transaction"]["category_id"] == transport.id


async def test_low_confidence_prediction_is_ignored(client, auth_headers, account, save):
    await save(Category(user_id=None, category_name="Transport", transaction_type="expense", is_default=True))
    app.dependency_overrides[get_category_classifier] = lambda: FixedClassifier("Transport", 0.3)

    response = await quick_add(client, auth_headers, "zxcv 50k")
    assert response.json()["transaction"]["category_id"] is None
