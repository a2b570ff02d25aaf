from __future__ import annotations

from zencorp.core.enums import Role

from fakes import login_as


def test_list_and_update_over_http(client):
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")

    body = client.get("/api/employees?view=catalog&catalogId=cat-it").get_json()
    assert {e["id"] for e in body["employees"]} == {"w1", "w2"}

    resp = client.put("/api/employees/w2", json={"position": "Senior Operator"})
    assert resp.get_json()["employee"]["position"] == "Senior Operator"


def test_qr_badge_as_data_url_and_png(client):
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")

    body = client.get("/api/employees/w1/qr").get_json()
    assert body["qrCode"] == "QR-W1"
    assert body["image"].startswith("data:image/png;base64,")

    png = client.get("/api/employees/w1/qr?format=png")
    assert png.mimetype == "image/png"
    assert png.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_issue_credentials_then_login(client):
    login_as(client, user_id="hr-1", role=Role.HR_HEAD, employee_id="hr-1")
    resp = client.post("/api/employees/w2/credentials", json={"login": "lena", "password": "secret1"})
    assert resp.status_code == 201

    with client.session_transaction() as sess:
        sess.clear()
    resp = client.post("/api/login", json={"username": "lena", "password": "secret1"})

    body = resp.get_json()
    assert body["user"] == {"id": "w2", "fullName": "Lena Orlova", "role": "employee", "employeeId": "w2"}
