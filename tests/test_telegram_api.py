from app.config import settings
from app.services.telegram_service import NOT_LINKED_TEXT, START_TEXT

TELEGRAM_ID = 555001


async def link(client, headers, telegram_user_id=TELEGRAM_ID):
    return await client.post("/api/v1/telegram/link", headers=headers, json={
        "telegram_user_id": telegram_user_id,
        "chat_id": telegram_user_id,
        "first_name": "Alice",
        "username": "alice_tg"
    })


async def send(client, text, message_id=None, headers=None):
    return await client.post("/api/v1/telegram/messages", headers=headers or {}, json={
        "telegram_user_id": TELEGRAM_ID,
        "text": text,
        "message_id": message_id
    })


async def test_link_and_status(client, auth_headers, user):
    response = await link(client, auth_headers)
    assert response.status_code == 200
    assert response.json()["is_linked"] == True
    assert response.json()["user_id"] == user.id

    response = await client.get(f"/api/v1/telegram/status/{TELEGRAM_ID}")
    data = response.json()
    assert data["is_linked"] == True
    assert data["username"] == "alice"

    response = await client.get("/api/v1/users/me", headers=auth_headers)
    assert response.json()["telegram_username"] == "alice_tg"


async def test_telegram_id_can_only_be_linked_once(client, auth_headers, admin_headers):
    await link(client, auth_headers)

    response = await link(client, admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Telegram account is already linked"


async def test_unlink(client, auth_headers, user):
    response = await client.delete("/api/v1/telegram/link", headers=auth_headers)
    assert response.status_code == 404

    await link(client, auth_headers)
    response = await client.delete("/api/v1/telegram/link", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/telegram/status/{TELEGRAM_ID}")
    assert response.json()["is_linked"] == False


async def test_commands_work_without_link(client):
    response = await send(client, "/start")
    assert response.json() == {"response": START_TEXT, "processed": True, "duplicate": False}

    response = await send(client, "/dance")
    assert response.json()["processed"] == False


async def test_unlinked_message_asks_to_link(client):
    response = await send(client, "cà phê 25k")
    assert response.json()["response"] == NOT_LINKED_TEXT
    assert response.json()["processed"] == False


async def test_message_records_transaction(client, auth_headers, account, food_category):
    await link(client, auth_headers)

    response = await send(client, "cà phê 25k", message_id=10)
    data = response.json()
    assert data["processed"] == True
    assert "25,000đ" in data["response"]
    assert "Food & Drinks" in data["response"]

    response = await client.get("/api/v1/transactions/", headers=auth_headers)
    transactions = response.json()["transactions"]
    assert len(transactions) == 1
    assert transactions[0]["source"] == "telegram"
    assert transactions[0]["category_id"] == food_category.id

    response = await client.get(f"/api/v1/accounts/{account.id}", headers=auth_headers)
    assert response.json()["current_balance"] == 975000


async def test_redelivered_message_is_not_recorded_twice(client, auth_headers, account, food_category):
    await link(client, auth_headers)

    first = (await send(client, "cà phê 25k", message_id=11)).json()
    second = (await send(client, "cà phê 25k", message_id=11)).json()

    assert second["duplicate"] == True
    assert second["response"] == first["response"]

    response = await client.get("/api/v1/transactions/", headers=auth_headers)
    assert response.json()["total_count"] == 1


async def test_message_over_budget_mentions_warning(client, auth_headers, account, food_budget):
    await link(client, auth_headers)

    response = await send(client, "ăn tối 950k")
    assert "⚠️" in response.json()["response"]


async def test_question_is_answered(client, auth_headers, account, add_expense):
    await link(client, auth_headers)
    await add_expense(40000)

    response = await send(client, "hôm nay tôi chi bao nhiêu?")
    assert response.json()["response"] == "Hôm nay bạn đã chi 40,000đ."


async def test_bot_secret_is_checked_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "TELEGRAM_SECRET_TOKEN", "s3cret")

    response = await send(client, "/help")
    assert response.status_code == 401

    response = await send(client, "/help", headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"})
    assert response.status_code == 200
