from fastapi.testclient import TestClient

from carebridge.db import get_db


def test_request_accept_flow(client, make_user):
    patient, p_headers = make_user("pat", "patient", name="Pat Lee")
    alice, a_headers = make_user("alice", "caregiver", name="Alice Kim")

    r = client.post(
        "/patients/assign-caregiver",
        json={"userId": patient["id"], "caregiverUsername": "alice"},
        headers=p_headers,
    )
    assert r.status_code == 200
    assert r.json() == {"message": "Caregiver request sent"}

    r = client.get("/patients/pairing-status", headers=p_headers)
    assert r.json() == {
        "state": "requested",
        "pairedCaregiverId": None,
        "pendingCaregiverRequestId": alice["id"],
    }

    r = client.get("/caregiver/pending-patients", headers=a_headers)
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == [patient["id"]]

    r = client.post(f"/caregiver/accept-patient/{patient['id']}", headers=a_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Patient accepted"}

    r = client.get("/caregiver/pending-patients", headers=a_headers)
    assert r.json() == []

    r = client.get("/caregiver/assigned-patients", headers=a_headers)
    assert r.json() == [{"id": patient["id"], "name": "Pat Lee"}]

    r = client.get("/get_caregiver", headers=p_headers)
    assert r.json() == {"caregiverName": "Alice Kim"}


def test_second_caregiver_accept_is_rejected(client, make_user):
    patient, p_headers = make_user("pat", "patient")
    _, a_headers = make_user("alice", "caregiver")
    _, c_headers = make_user("carl", "caregiver")

    client.post("/patients/assign-caregiver", json={"caregiverUsername": "alice"}, headers=p_headers)
    assert client.post(f"/caregiver/accept-patient/{patient['id']}", headers=a_headers).status_code == 200

    r = client.post(f"/caregiver/accept-patient/{patient['id']}", headers=c_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "patient did not request this caregiver"}


def test_pending_list_is_scoped_to_caller(client, make_user):
    p1, p1_headers = make_user("p1", "patient")
    _, p2_headers = make_user("p2", "patient")
    make_user("p3", "patient")
    alice, a_headers = make_user("alice", "caregiver")
    bob, b_headers = make_user("bob", "caregiver")

    client.post("/patients/assign-caregiver", json={"caregiverUsername": "alice"}, headers=p1_headers)
    client.post("/patients/assign-caregiver", json={"caregiverUsername": "bob"}, headers=p2_headers)

    r = client.get("/caregiver/pending-patients", params={"caregiverId": alice["id"]}, headers=a_headers)
    assert [p["username"] for p in r.json()] == ["p1"]

    # 다른 보호자의 요청 목록은 볼 수 없음
    r = client.get("/caregiver/pending-patients", params={"caregiverId": bob["id"]}, headers=a_headers)
    assert r.status_code == 403


def test_request_for_another_user_is_forbidden(client, make_user):
    make_user("pat", "patient")
    other, _ = make_user("other", "patient")
    _, p_headers = make_user("pat2", "patient")
    make_user("alice", "caregiver")

    r = client.post(
        "/patients/assign-caregiver",
        json={"userId": other["id"], "caregiverUsername": "alice"},
        headers=p_headers,
    )
    assert r.status_code == 403


def test_request_unknown_caregiver(client, make_user):
    _, p_headers = make_user("pat", "patient")
    r = client.post("/patients/assign-caregiver", json={"caregiverUsername": "ghost"}, headers=p_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "caregiver not found"}


def test_role_checks(client, make_user):
    patient, p_headers = make_user("pat", "patient")
    _, a_headers = make_user("alice", "caregiver")

    # 보호자는 환자용 경로 사용 불가
    r = client.post("/patients/assign-caregiver", json={"caregiverUsername": "alice"}, headers=a_headers)
    assert r.status_code == 403
    # 환자는 보호자용 경로 사용 불가
    assert client.get("/caregiver/pending-patients", headers=p_headers).status_code == 403
    assert client.post(f"/caregiver/accept-patient/{patient['id']}", headers=p_headers).status_code == 403


def test_direct_assign_and_unassign(client, make_user):
    _, p_headers = make_user("pat", "patient")
    make_user("alice", "caregiver", name="Alice Kim")

    r = client.post("/assign_caregiver", json={"caregiverUsername": "alice"}, headers=p_headers)
    assert r.status_code == 200
    assert client.get("/get_caregiver", headers=p_headers).json() == {"caregiverName": "Alice Kim"}

    assert client.delete("/patients/caregiver", headers=p_headers).status_code == 200
    r = client.get("/get_caregiver", headers=p_headers)
    assert r.status_code == 404
    assert client.get("/patients/pairing-status", headers=p_headers).json()["state"] == "unpaired"


def test_direct_assign_unknown_caregiver(client, make_user):
    _, p_headers = make_user("pat", "patient")
    r = client.post("/assign_caregiver", json={"caregiverUsername": "ghost"}, headers=p_headers)
    assert r.status_code == 404


def test_missing_caregiver_username_is_validation_error(client, make_user):
    _, p_headers = make_user("pat", "patient")
    r = client.post("/patients/assign-caregiver", json={}, headers=p_headers)
    assert r.status_code == 400
    assert "caregiverUsername" in r.json()["error"]


def test_unauthenticated_requests_never_touch_the_store(app):
    touched = []

    class RecordingSession:
        def __getattr__(self, name):
            touched.append(name)
            raise AssertionError(f"store accessed: {name}")

    async def no_db():
        yield RecordingSession()

    app.dependency_overrides[get_db] = no_db
    with TestClient(app) as c:
        paths = [
            ("post", "/patients/assign-caregiver"),
            ("get", "/caregiver/pending-patients"),
            ("post", "/caregiver/accept-patient/1"),
            ("post", "/assign_caregiver"),
            ("get", "/get_caregiver"),
            ("get", "/caregiver/assigned-patients"),
            ("get", "/caregiver/patient-medications?patientId=1"),
            ("get", "/medications"),
        ]
        for method, path in paths:
            r = getattr(c, method)(path, headers={"Authorization": "Bearer forged.token.value"})
            assert r.status_code == 401, path
            assert r.json() == {"error": "invalid_token"}

    assert touched == []
