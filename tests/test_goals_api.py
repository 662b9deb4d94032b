from datetime import date, timedelta


def goal_payload(**overrides):
    payload = {
        "goal_name": "Laptop",
        "target_amount": 20000000,
        "target_date": (date.today() + timedelta(days=30)).isoformat(),
        "priority": "High"
    }
    payload.update(overrides)
    return payload


async def test_create_goal_computes_progress(client, auth_headers, user):
    response = await client.post("/api/v1/goals/", headers=auth_headers, json=goal_payload(current_amount=5000000))

    assert response.status_code == 201
    data = response.json()
    assert data["progress_percentage"] == 25.0
    assert data["remaining_amount"] == 15000000
    assert data["days_remaining"] == 30
    assert data["is_completed"] == False


async def test_add_money_is_capped_at_target(client, auth_headers, user):
    goal_id = (await client.post("/api/v1/goals/", headers=auth_headers, json=goal_payload())).json()["id"]

    response = await client.post(f"/api/v1/goals/{goal_id}/add-money", headers=auth_headers, json={"amount": 15000000})
    assert response.json()["current_amount"] == 15000000

    response = await client.post(f"/api/v1/goals/{goal_id}/add-money", headers=auth_headers, json={"amount": 9000000})
    data = response.json()
    assert data["current_amount"] == 20000000
    assert data["is_completed"] == True
    assert data["remaining_amount"] == 0


async def test_add_money_must_be_positive(client, auth_headers, user):
    goal_id = (await client.post("/api/v1/goals/", headers=auth_headers, json=goal_payload())).json()["id"]

    response = await client.post(f"/api/v1/goals/{goal_id}/add-money", headers=auth_headers, json={"amount": 0})
    assert response.status_code == 422


async def test_zero_target_has_zero_progress(client, auth_headers, user):
    response = await client.post("/api/v1/goals/", headers=auth_headers, json=goal_payload(target_amount=0))
    assert response.json()["progress_percentage"] == 0


async def test_soft_delete_hides_goal(client, auth_headers, user):
    goal_id = (await client.post("/api/v1/goals/", headers=auth_headers, json=goal_payload())).json()["id"]

    response = await client.delete(f"/api/v1/goals/{goal_id}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/goals/", headers=auth_headers)
    assert response.json() == []

    response = await client.get(f"/api/v1/goals/{goal_id}", headers=auth_headers)
    assert response.status_code == 404
