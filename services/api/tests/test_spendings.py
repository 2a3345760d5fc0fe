import pytest


@pytest.fixture
def today_task(client, auth_headers):
    return client.get("/api/tasks/today", headers=auth_headers).json()["task"]


def _create(client, headers, task_id, **fields):
    body = {"daily_task_id": task_id, "amount": 25.0, "category": "Food & Dining"}
    body.update(fields)
    return client.post("/api/spendings", json=body, headers=headers)


def test_create_and_list(client, user, auth_headers, today_task):
    resp = _create(client, auth_headers, today_task["id"], description="Lunch")
    assert resp.status_code == 200, resp.text
    spending = resp.json()
    assert spending["amount"] == 25.0
    assert spending["user_id"] == user.id
    assert spending["description"] == "Lunch"

    listed = client.get("/api/spendings", headers=auth_headers)
    assert listed.status_code == 200
    assert [s["id"] for s in listed.json()] == [spending["id"]]

    day = client.get("/api/tasks/today", headers=auth_headers).json()["task"]
    assert len(day["spendings"]) == 1


def test_list_for_unprovisioned_day_is_empty(client, user, auth_headers):
    resp = client.get("/api/spendings?date=2025-01-01", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_on_foreign_day_is_forbidden(client, user, other_user, other_headers, today_task):
    resp = _create(client, other_headers, today_task["id"])
    assert resp.status_code == 403


def test_create_on_missing_day_is_forbidden(client, user, auth_headers):
    resp = _create(client, auth_headers, "no-such-day")
    assert resp.status_code == 403


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount_rejected(client, user, auth_headers, today_task, amount):
    resp = _create(client, auth_headers, today_task["id"], amount=amount)
    assert resp.status_code == 400


def test_patch_is_partial(client, user, auth_headers, today_task):
    spending = _create(client, auth_headers, today_task["id"], description="Bus").json()

    resp = client.patch(f"/api/spendings/{spending['id']}", json={"category": "Transport"}, headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["category"] == "Transport"
    assert data["amount"] == 25.0
    assert data["description"] == "Bus"

    resp = client.patch(f"/api/spendings/{spending['id']}", json={"amount": 3.5}, headers=auth_headers)
    assert resp.json()["amount"] == 3.5
    assert resp.json()["category"] == "Transport"


def test_patch_rejects_negative_amount(client, user, auth_headers, today_task):
    spending = _create(client, auth_headers, today_task["id"]).json()
    resp = client.patch(f"/api/spendings/{spending['id']}", json={"amount": -1}, headers=auth_headers)
    assert resp.status_code == 400


def test_foreign_spending_is_not_found(client, user, other_user, auth_headers, other_headers, today_task):
    spending = _create(client, auth_headers, today_task["id"]).json()

    assert client.patch(
        f"/api/spendings/{spending['id']}", json={"amount": 1}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/spendings/{spending['id']}", headers=other_headers).status_code == 404


def test_delete(client, user, auth_headers, today_task):
    spending = _create(client, auth_headers, today_task["id"]).json()

    resp = client.delete(f"/api/spendings/{spending['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert client.get("/api/spendings", headers=auth_headers).json() == []
    assert client.delete(f"/api/spendings/{spending['id']}", headers=auth_headers).status_code == 404
