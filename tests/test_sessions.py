from datetime import datetime

import pytest

from tutalink.domain import SessionStatus, TutoringSession
from tutalink.sessions import upcoming_sessions_for

BOOKING = {
    "tutorId": 7,
    "date": "2024-01-10",
    "startTime": "10:00",
    "endTime": "11:00",
    "location": "Library",
}


@pytest.fixture
def learner_client(login, learner):
    return login(learner.username)


def _book(session_client, **overrides):
    response = session_client.post("/api/sessions", json=dict(BOOKING, **overrides))
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_book_session_201(learner_client, learner):
    """Test booking a session (201 Created) starts pending and unpaid."""
    data = _book(learner_client)

    assert data["learnerId"] == learner.id
    assert data["tutorId"] == 7
    assert data["status"] == "pending"
    assert data["paymentStatus"] == "pending"
    assert data["amount"] == 0
    assert data["learnerName"] == learner.full_name
    # The tutor id is not checked against the user store.
    assert data["tutorName"] is None


def test_book_session_ignores_client_learner_id(learner_client, learner):
    data = _book(learner_client, learnerId=999)

    assert data["learnerId"] == learner.id


@pytest.mark.parametrize("missing", ["date", "startTime", "endTime", "location"])
def test_book_session_missing_field_400(learner_client, missing):
    payload = {k: v for k, v in BOOKING.items() if k != missing}

    response = learner_client.post("/api/sessions", json=payload)

    assert response.status_code == 400


def test_book_session_missing_tutor_400(learner_client):
    payload = {k: v for k, v in BOOKING.items() if k != "tutorId"}

    response = learner_client.post("/api/sessions", json=payload)

    assert response.status_code == 400
    assert response.get_json()["message"] == "tutorId is required"


def test_book_session_requires_login_401(client):
    response = client.post("/api/sessions", json=BOOKING)

    assert response.status_code == 401


def test_cancel_session_is_idempotent(learner_client):
    """Cancelling twice succeeds both times and leaves the session cancelled."""
    session_id = _book(learner_client)["id"]

    first = learner_client.post(f"/api/sessions/{session_id}/cancel")
    second = learner_client.post(f"/api/sessions/{session_id}/cancel")

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.get_json()["status"] == "cancelled"
    assert second.get_json()["paymentStatus"] == "pending"


def test_cancel_session_by_unrelated_user_403(learner_client, login, make_user, storage):
    session_id = _book(learner_client)["id"]
    make_user("stranger")

    response = login("stranger").post(f"/api/sessions/{session_id}/cancel")

    assert response.status_code == 403
    assert storage.get_session(session_id).status is SessionStatus.PENDING


def test_cancel_session_by_tutor_200(learner_client, login, tutor):
    session_id = _book(learner_client, tutorId=tutor.id)["id"]

    response = login(tutor.username).post(f"/api/sessions/{session_id}/cancel")

    assert response.status_code == 200
    assert response.get_json()["status"] == "cancelled"


def test_cancel_session_by_admin_200(learner_client, admin_client):
    session_id = _book(learner_client)["id"]

    response = admin_client.post(f"/api/sessions/{session_id}/cancel")

    assert response.status_code == 200


def test_cancel_missing_session_404(learner_client):
    response = learner_client.post("/api/sessions/999/cancel")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Session not found"


def test_list_sessions_scoped_by_role(learner_client, login, make_user, tutor, admin_client):
    _book(learner_client, tutorId=tutor.id)
    _book(learner_client, tutorId=99)
    make_user("kofi")
    _book(login("kofi"), tutorId=tutor.id)

    learner_view = learner_client.get("/api/sessions").get_json()
    tutor_view = login(tutor.username).get("/api/sessions").get_json()
    admin_view = admin_client.get("/api/sessions").get_json()

    assert len(learner_view) == 2
    assert len(tutor_view) == 2
    assert {s["tutorId"] for s in tutor_view} == {tutor.id}
    assert len(admin_view) == 3


def test_upcoming_sessions_endpoint(learner_client):
    _book(learner_client, date="2099-05-01")
    _book(learner_client, date="2099-03-01")
    _book(learner_client, date="2000-01-01")
    cancelled = _book(learner_client, date="2099-04-01")["id"]
    learner_client.post(f"/api/sessions/{cancelled}/cancel")

    response = learner_client.get("/api/sessions/upcoming")
    dates = [s["date"] for s in response.get_json()]

    assert response.status_code == 200
    assert dates == ["2099-03-01", "2099-05-01"]


def test_upcoming_sessions_skips_unparseable_dates(app, storage, learner):
    for date in ("2024-06-01", "next tuesday"):
        storage.add_session(TutoringSession(learner_id=learner.id, tutor_id=7, date=date,
                                            start_time="09:00", end_time="10:00", location="Hall"))

    found = upcoming_sessions_for(storage, learner, now=datetime(2024, 1, 1))

    assert [s.date for s in found] == ["2024-06-01"]


def test_tutor_confirms_then_completes(learner_client, login, tutor):
    session_id = _book(learner_client, tutorId=tutor.id)["id"]
    tutor_client = login(tutor.username)

    confirmed = tutor_client.put(f"/api/sessions/{session_id}/status", json={"status": "confirmed"})
    completed = tutor_client.put(f"/api/sessions/{session_id}/status", json={"status": "completed"})

    assert confirmed.status_code == 200
    assert confirmed.get_json()["status"] == "confirmed"
    assert completed.status_code == 200
    assert completed.get_json()["status"] == "completed"


def test_completed_session_is_terminal_400(learner_client, admin_client):
    session_id = _book(learner_client)["id"]
    admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "confirmed"})
    admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "completed"})

    response = admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "pending"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_transition"


def test_pending_cannot_jump_to_completed_400(learner_client, admin_client):
    session_id = _book(learner_client)["id"]

    response = admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "completed"})

    assert response.status_code == 400


def test_learner_cannot_change_status_403(learner_client):
    session_id = _book(learner_client)["id"]

    response = learner_client.put(f"/api/sessions/{session_id}/status", json={"status": "confirmed"})

    assert response.status_code == 403


def test_unknown_status_400(learner_client, admin_client):
    session_id = _book(learner_client)["id"]

    response = admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "paused"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_status"


def test_same_status_is_a_no_op(learner_client, admin_client, storage):
    session_id = _book(learner_client)["id"]

    response = admin_client.put(f"/api/sessions/{session_id}/status", json={"status": "pending"})

    assert response.status_code == 200
    assert storage.get_session(session_id).status is SessionStatus.PENDING
