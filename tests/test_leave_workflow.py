import json
import pytest
from leavedesk.core.config import settings
from leavedesk.models.leave_request import LeaveRequest

def _leave_payload(**overrides):
    payload = {
        "emp_id": "EMP-001",
        "department": "IT",
        "request_type": "Leave",
        "leave_type": "Sick",
        "duration": "single",
        "from_date": "2024-06-10",
        "reason": "Fever",
    }
    payload.update(overrides)
    return payload

def _permission_payload(**overrides):
    payload = {
        "emp_id": "EMP-001",
        "department": "IT",
        "request_type": "Permission",
        "permission_type": "Dentist",
        "from_date": "2024-06-10",
        "from_time": "09:00",
        "to_time": "10:00",
        "reason": "Checkup",
    }
    payload.update(overrides)
    return payload

def _submit(client, user, auth_headers, payload):
    return client.post("/api/requests", headers=auth_headers(user), json=payload)

def test_submit_single_day_leave(client, staff_user, auth_headers, db_session):
    response = _submit(client, staff_user, auth_headers, _leave_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "Pending"

    row = db_session.get(LeaveRequest, body["id"])
    assert row.to_date.isoformat() == "2024-06-10"

def test_permission_cap_is_enforced(client, staff_user, auth_headers):
    assert _submit(client, staff_user, auth_headers, _permission_payload()).status_code == 201

    response = _submit(client, staff_user, auth_headers, _permission_payload(to_time="10:01"))
    assert response.status_code == 422
    error = response.json()["errors"][0]
    assert error["field"] == "to_time"
    assert error["code"] == "VALIDATION_FAILED"

def test_director_cannot_submit(client, director_user, auth_headers):
    response = _submit(client, director_user, auth_headers, _leave_payload())
    assert response.status_code == 403

def test_submit_requires_authentication(client):
    assert client.post("/api/requests", json=_leave_payload()).status_code == 401

def test_staff_list_only_shows_own_requests(client, staff_user, other_staff_user, auth_headers):
    _submit(client, staff_user, auth_headers, _leave_payload())
    _submit(client, other_staff_user, auth_headers, _leave_payload(emp_id="EMP-200"))

    response = client.get("/api/requests", headers=auth_headers(staff_user))
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["user_id"] == staff_user.id
    assert data[0]["user_name"] == "Sam Staff"

def test_director_list_is_newest_first(client, staff_user, other_staff_user, director_user, auth_headers):
    first = _submit(client, staff_user, auth_headers, _leave_payload()).json()["id"]
    second = _submit(client, other_staff_user, auth_headers, _permission_payload(emp_id="EMP-200")).json()["id"]

    data = client.get("/api/requests", headers=auth_headers(director_user)).json()
    assert [r["id"] for r in data] == [second, first]
    assert data[0]["request_type"] == "Permission"
    assert data[0]["duration"] == "1h 0m"
    assert data[0]["from_time"] == "09:00"
    assert data[1]["request_type"] == "Leave"
    assert "from_time" not in data[1]

def test_director_approves(client, staff_user, director_user, auth_headers):
    request_id = _submit(client, staff_user, auth_headers, _leave_payload()).json()["id"]

    response = client.post(
        f"/api/requests/{request_id}/decision",
        headers=auth_headers(director_user),
        json={"status": "Approved"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "Approved"

    listed = client.get("/api/requests", headers=auth_headers(staff_user)).json()
    assert listed[0]["status"] == "Approved"

def test_rejection_with_empty_remark_is_blocked(client, staff_user, director_user, auth_headers, db_session):
    request_id = _submit(client, staff_user, auth_headers, _leave_payload()).json()["id"]

    response = client.post(
        f"/api/requests/{request_id}/decision",
        headers=auth_headers(director_user),
        json={"status": "Rejected", "remark": ""},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "remark"
    assert db_session.get(LeaveRequest, request_id).status == "Pending"

def test_rejection_with_remark(client, staff_user, director_user, auth_headers):
    request_id = _submit(client, staff_user, auth_headers, _leave_payload()).json()["id"]
    response = client.post(
        f"/api/requests/{request_id}/decision",
        headers=auth_headers(director_user),
        json={"status": "Rejected", "remark": "Quarter close"},
    )
    assert response.status_code == 200

    listed = client.get("/api/requests", headers=auth_headers(staff_user)).json()
    assert listed[0]["status"] == "Rejected"
    assert listed[0]["remark"] == "Quarter close"

def test_staff_cannot_decide(client, staff_user, auth_headers):
    request_id = _submit(client, staff_user, auth_headers, _leave_payload()).json()["id"]
    response = client.post(
        f"/api/requests/{request_id}/decision",
        headers=auth_headers(staff_user),
        json={"status": "Approved"},
    )
    assert response.status_code == 403

def test_decision_on_unknown_request(client, director_user, auth_headers):
    response = client.post(
        "/api/requests/missing/decision",
        headers=auth_headers(director_user),
        json={"status": "Approved"},
    )
    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "NOT_FOUND"

def test_submit_with_document(client, staff_user, auth_headers, upload_root):
    response = client.post(
        "/api/requests/with-document",
        headers=auth_headers(staff_user),
        data={"form": json.dumps(_leave_payload())},
        files={"file": ("note.pdf", b"%PDF-1.4 sick note", "application/pdf")},
    )
    assert response.status_code == 201

    listed = client.get("/api/requests", headers=auth_headers(staff_user)).json()
    file_url = listed[0]["file_url"]
    assert file_url.startswith(f"/files/{upload_root.name}/leave-documents/{staff_user.id}-")
    assert file_url.endswith(".pdf")
    stored = list((upload_root / "leave-documents").iterdir())
    assert len(stored) == 1
    assert stored[0].read_bytes() == b"%PDF-1.4 sick note"

    served = client.get(file_url)
    assert served.status_code == 200
    assert served.content == b"%PDF-1.4 sick note"

def test_submit_with_unsupported_document_writes_nothing(client, staff_user, auth_headers, upload_root):
    response = client.post(
        "/api/requests/with-document",
        headers=auth_headers(staff_user),
        data={"form": json.dumps(_leave_payload())},
        files={"file": ("tool.exe", b"MZ", "application/octet-stream")},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "file"
    assert client.get("/api/requests", headers=auth_headers(staff_user)).json() == []
    assert not upload_root.exists()

def test_submit_with_malformed_form(client, staff_user, auth_headers):
    response = client.post(
        "/api/requests/with-document",
        headers=auth_headers(staff_user),
        data={"form": "{not json"},
        files={"file": ("note.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "form"

def test_summary(client, staff_user, director_user, auth_headers):
    ids = [_submit(client, staff_user, auth_headers, _leave_payload()).json()["id"] for _ in range(2)]
    client.post(f"/api/requests/{ids[0]}/decision", headers=auth_headers(director_user), json={"status": "Approved"})

    body = client.get("/api/requests/summary", headers=auth_headers(director_user)).json()
    assert body["data"] == {"total": 2, "pending": 1, "approved": 1, "rejected": 0}
    assert body["metadata"]["role"] == "Director"

def test_options(client):
    data = client.get("/api/requests/options").json()
    assert {"label": "Human Resources", "value": "HR"} in data["departments"]
    assert {"label": "Sick Leave", "value": "Sick"} in data["leave_types"]
    assert [o["value"] for o in data["request_types"]] == ["Leave", "Permission"]

def test_missing_document_is_not_found(client):
    assert client.get("/files/leave-documents/nobody-1.pdf").status_code == 404

def test_oversized_document_is_refused(client, staff_user, auth_headers, upload_root, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 8)
    response = client.post(
        "/api/requests/with-document",
        headers=auth_headers(staff_user),
        data={"form": json.dumps(_leave_payload())},
        files={"file": ("scan.png", b"\x89PNG" + b"\x00" * 64, "image/png")},
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "file"
    assert not upload_root.exists()
