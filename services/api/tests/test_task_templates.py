from app.models import TaskCompletion, TaskTemplate


def _templates(client, headers):
    resp = client.get("/api/task-templates", headers=headers)
    assert resp.status_code == 200
    return resp.json()


def test_list_templates_in_sort_order(client, user, auth_headers):
    templates = _templates(client, auth_headers)
    assert len(templates) == 6
    assert [t["sort_order"] for t in templates] == [1, 2, 3, 4, 5, 6]
    assert all(t["user_id"] == user.id for t in templates)


def test_create_template_defaults(client, user, auth_headers):
    resp = client.post("/api/task-templates", json={"name": "Meditation"}, headers=auth_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["icon"] == "CheckCircle"
    assert data["sort_order"] == 0
    assert data["is_active"] is True


def test_create_template_requires_name(client, user, auth_headers):
    resp = client.post("/api/task-templates", json={"icon": "Star"}, headers=auth_headers)
    assert resp.status_code == 400


def test_duplicate_template_name_conflicts(client, user, auth_headers):
    client.post("/api/task-templates", json={"name": "Meditation"}, headers=auth_headers)
    resp = client.post("/api/task-templates", json={"name": "Meditation"}, headers=auth_headers)
    assert resp.status_code == 409


def test_same_name_allowed_for_different_users(client, user, other_user, auth_headers, other_headers):
    assert client.post("/api/task-templates", json={"name": "Meditation"}, headers=auth_headers).status_code == 201
    assert client.post("/api/task-templates", json={"name": "Meditation"}, headers=other_headers).status_code == 201


def test_patch_template_partial(client, user, auth_headers):
    template = _templates(client, auth_headers)[0]

    resp = client.patch(
        f"/api/task-templates/{template['id']}",
        json={"is_active": False},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["is_active"] is False
    assert data["name"] == template["name"]
    assert data["icon"] == template["icon"]


def test_patch_and_delete_foreign_template(client, user, other_user, auth_headers, other_headers):
    template = _templates(client, auth_headers)[0]

    assert client.patch(
        f"/api/task-templates/{template['id']}", json={"name": "Hijacked"}, headers=other_headers
    ).status_code == 404
    assert client.delete(f"/api/task-templates/{template['id']}", headers=other_headers).status_code == 404


def test_delete_template_removes_its_completions(client, user, auth_headers, db_session):
    client.get("/api/tasks/today", headers=auth_headers)
    template = _templates(client, auth_headers)[0]

    resp = client.delete(f"/api/task-templates/{template['id']}", headers=auth_headers)
    assert resp.status_code == 200

    db_session.expire_all()
    assert db_session.get(TaskTemplate, template["id"]) is None
    assert db_session.query(TaskCompletion).filter_by(task_template_id=template["id"]).count() == 0

    task = client.get("/api/tasks/today", headers=auth_headers).json()["task"]
    assert len(task["task_completions"]) == 5


def test_new_template_is_backfilled_into_today(client, user, auth_headers):
    before = client.get("/api/tasks/today", headers=auth_headers).json()["task"]
    assert len(before["task_completions"]) == 6

    client.post("/api/task-templates", json={"name": "Meditation", "sort_order": 7}, headers=auth_headers)

    after = client.get("/api/tasks/today", headers=auth_headers).json()["task"]
    assert after["id"] == before["id"]
    assert len(after["task_completions"]) == 7
    assert after["task_completions"][-1]["task_template"]["name"] == "Meditation"


def test_reorder(client, user, auth_headers):
    t1, t2 = _templates(client, auth_headers)[:2]

    resp = client.post(
        "/api/task-templates/reorder",
        json={"items": [{"id": t1["id"], "sort_order": 2}, {"id": t2["id"], "sort_order": 1}]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    reordered = _templates(client, auth_headers)
    assert reordered[0]["id"] == t2["id"]
    assert reordered[1]["id"] == t1["id"]


def test_reorder_is_all_or_nothing(client, user, other_user, auth_headers, other_headers, db_session):
    t1, t2 = _templates(client, auth_headers)[:2]
    foreign = _templates(client, other_headers)[0]

    resp = client.post(
        "/api/task-templates/reorder",
        json={"items": [
            {"id": t1["id"], "sort_order": 2},
            {"id": foreign["id"], "sort_order": 50},
            {"id": t2["id"], "sort_order": 1},
        ]},
        headers=auth_headers,
    )
    assert resp.status_code == 400

    db_session.expire_all()
    assert db_session.get(TaskTemplate, t1["id"]).sort_order == 1
    assert db_session.get(TaskTemplate, t2["id"]).sort_order == 2
    assert db_session.get(TaskTemplate, foreign["id"]).sort_order == foreign["sort_order"]


def test_reorder_rejects_bad_payload(client, user, auth_headers):
    resp = client.post("/api/task-templates/reorder", json={"items": "nope"}, headers=auth_headers)
    assert resp.status_code == 400
