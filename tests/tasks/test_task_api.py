from __future__ import annotations

import pytest

from zencorp.core.enums import Role

from fakes import login_as


def _create_chain(client, workers=("w1", "w2")):
    login_as(client, user_id="u-1", role=Role.MANAGER, name="John Manager")
    resp = client.post(
        "/api/tasks",
        json={
            "title": "Migrate mail",
            "description": "Move mailboxes",
            "steps": [{"departmentId": "cat-it", "workerId": w} for w in workers],
        },
    )
    assert resp.status_code == 201
    return resp.get_json()["tasks"]


def test_requires_login(client):
    resp = client.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_create_chain_returns_linked_tasks(client):
    tasks = _create_chain(client)

    assert [t["status"] for t in tasks] == ["pending_hr", "on_hold"]
    assert tasks[0]["nextChainTaskId"] == tasks[1]["id"]
    assert tasks[1]["parentTaskId"] == tasks[0]["id"]
    assert tasks[0]["fromName"] == "John Manager"


def test_missing_worker_is_a_bad_request(client):
    login_as(client, user_id="u-1", role=Role.MANAGER)
    resp = client.post("/api/tasks", json={"title": "x", "steps": [{"departmentId": "cat-it", "workerId": ""}]})

    assert resp.status_code == 400
    assert "step 1" in resp.get_json()["message"]


def test_full_chain_flow_over_http(client):
    first, second = _create_chain(client)

    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")
    resp = client.post(f"/api/tasks/{first['id']}/forward")
    assert resp.get_json()["task"]["status"] == "assigned_to_worker"

    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")
    mine = client.get("/api/tasks/mine").get_json()["tasks"]
    assert [t["id"] for t in mine] == [first["id"]]

    resp = client.post(f"/api/tasks/{first['id']}/complete", json={"report": "Done"})
    assert resp.status_code == 200
    assert resp.get_json()["task"]["status"] == "completed"

    resp = client.get(f"/api/tasks/{second['id']}")
    assert resp.get_json()["task"]["status"] == "pending"


def test_invalid_transition_is_a_bad_request(client):
    first, _ = _create_chain(client)
    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")

    resp = client.post(f"/api/tasks/{first['id']}/move", json={"status": "completed"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_stale_version_is_a_conflict(client):
    first, _ = _create_chain(client)
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")
    client.post(f"/api/tasks/{first['id']}/forward", json={"version": first["version"]})

    resp = client.post(f"/api/tasks/{first['id']}/forward", json={"version": first["version"]})

    assert resp.status_code == 409


def test_wrong_role_is_forbidden(client):
    first, _ = _create_chain(client)
    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")

    resp = client.delete(f"/api/tasks/{first['id']}")

    assert resp.status_code == 403


def test_unknown_task_is_not_found(client):
    login_as(client, user_id="dir-1", role=Role.DIRECTOR)
    assert client.get("/api/tasks/nope").status_code == 404


def test_since_filter_and_server_time(client):
    tasks = _create_chain(client)
    latest = max(t["updatedAt"] for t in tasks)

    body = client.get(f"/api/tasks?since={latest + 1}").get_json()
    assert body["tasks"] == []

    # The cursor trails the clock, so polling from it returns the latest writes again.
    body = client.get("/api/tasks").get_json()
    assert body["serverTime"] <= latest
    again = client.get(f"/api/tasks?since={body['serverTime']}").get_json()
    assert {t["id"] for t in again["tasks"]} == {t["id"] for t in tasks}

    body = client.get("/api/tasks").get_json()
    assert len(body["tasks"]) == 2

    assert client.get("/api/tasks?since=yesterday").status_code == 400


def test_workflows_and_hr_lanes(client):
    first, second = _create_chain(client)
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")

    lanes = client.get("/api/tasks/hr").get_json()
    assert [t["id"] for t in lanes["toDelegate"]] == [first["id"]]
    assert lanes["toReview"] == []

    workflows = client.get("/api/workflows").get_json()["workflows"]
    assert [[t["id"] for t in chain] for chain in workflows] == [[first["id"], second["id"]]]


def test_sub_task_endpoints(client):
    (task,) = _create_chain(client, workers=("w1",))
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")
    client.post(f"/api/tasks/{task['id']}/forward")

    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")
    body = client.post(f"/api/tasks/{task['id']}/subtasks", json={"title": "Backup"}).get_json()
    sub_id = body["task"]["subTasks"][0]["id"]

    blocked = client.post(f"/api/tasks/{task['id']}/complete")
    assert blocked.status_code == 400

    toggled = client.post(f"/api/tasks/{task['id']}/subtasks/{sub_id}/toggle", json={"completed": True}).get_json()
    assert toggled["task"]["subTasks"][0]["completed"] is True

    done = client.post(f"/api/tasks/{task['id']}/complete")
    assert done.get_json()["task"]["status"] == "completed"


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "X", "steps": ["w1"]},
        {"title": "X", "steps": [None]},
        {"title": "X", "steps": "w1"},
        {"title": "X", "steps": [{"workerId": "w1"}], "attachment": "report.pdf"},
        {"title": "X", "steps": [{"workerId": "w1"}], "attachment": {"name": "a.pdf", "size": "big"}},
    ],
)
def test_malformed_chain_payload_is_a_bad_request(client, payload):
    login_as(client, user_id="u-1", role=Role.MANAGER)

    resp = client.post("/api/tasks", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_non_object_body_is_a_bad_request(client):
    login_as(client, user_id="u-1", role=Role.MANAGER)
    assert client.post("/api/tasks", json=["w1"]).status_code == 400
    assert client.post("/api/login", json=["director"]).status_code == 400


def test_malformed_result_attachment_is_a_bad_request(client):
    first, _ = _create_chain(client)
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")
    client.post(f"/api/tasks/{first['id']}/forward")

    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")
    resp = client.post(f"/api/tasks/{first['id']}/complete", json={"resultAttachment": ["a.pdf"]})

    assert resp.status_code == 400
    assert client.get(f"/api/tasks/{first['id']}").get_json()["task"]["status"] == "assigned_to_worker"


def test_toggle_sub_task_requires_boolean_flag(client):
    first, _ = _create_chain(client)
    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")
    task = client.post(f"/api/tasks/{first['id']}/subtasks", json={"title": "Back up mailboxes"}).get_json()["task"]
    sub_id = task["subTasks"][0]["id"]

    resp = client.post(f"/api/tasks/{first['id']}/subtasks/{sub_id}/toggle", json={"completed": "false"})
    assert resp.status_code == 400
    current = client.get(f"/api/tasks/{first['id']}").get_json()["task"]
    assert current["subTasks"][0]["completed"] is False

    resp = client.post(f"/api/tasks/{first['id']}/subtasks/{sub_id}/toggle", json={"completed": True})
    assert resp.get_json()["task"]["subTasks"][0]["completed"] is True
