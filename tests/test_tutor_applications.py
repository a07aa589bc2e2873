import pytest

from tutalink.domain import Role

APPLICATION = {
    "department": "Computer Science",
    "yearOfStudy": 3,
    "cwa": 3.8,
    "subjects": ["Algorithms", "Calculus"],
}


@pytest.fixture
def learner_client(login, learner):
    return login(learner.username)


def _apply(session_client, **overrides):
    return session_client.post("/api/tutor-applications", json=dict(APPLICATION, **overrides))


def test_submit_application_201(learner_client, learner):
    """Test a learner applying to become a tutor (201 Created)."""
    response = _apply(learner_client)
    data = response.get_json()

    assert response.status_code == 201
    assert data["userId"] == learner.id
    assert data["status"] == "pending"
    assert data["subjects"] == ["Algorithms", "Calculus"]
    assert data["transcriptPath"] == "/uploads/transcripts/sample.pdf"
    assert data["fullName"] == learner.full_name


def test_own_application_is_readable(learner_client):
    assert learner_client.get("/api/tutor-applications/mine").status_code == 404

    _apply(learner_client)
    response = learner_client.get("/api/tutor-applications/mine")

    assert response.status_code == 200
    assert response.get_json()["status"] == "pending"


def test_submit_application_cwa_too_low_400(learner_client):
    response = _apply(learner_client, cwa=3.2)
    data = response.get_json()

    assert response.status_code == 400
    assert data["error"] == "cwa_too_low"
    assert data["message"] == "Minimum CWA of 3.4 is required"


def test_submit_application_cwa_at_minimum_201(learner_client):
    assert _apply(learner_client, cwa=3.4).status_code == 201


@pytest.mark.parametrize("cwa", ["nan", "inf", "-inf", "NaN", "Infinity"])
def test_submit_application_non_finite_cwa_400(learner_client, cwa):
    response = _apply(learner_client, cwa=cwa)

    assert response.status_code == 400
    assert learner_client.get("/api/tutor-applications/mine").status_code == 404


def test_submit_application_json_nan_literal_400(learner_client):
    body = '{"cwa": NaN, "subjects": ["Calculus"]}'

    response = learner_client.post("/api/tutor-applications", data=body,
                                   content_type="application/json")

    assert response.status_code == 400
    assert learner_client.get("/api/tutor-applications/mine").status_code == 404


@pytest.mark.parametrize("subjects", [[], "Calculus", None, ["Calculus", ""]])
def test_submit_application_needs_subjects_400(learner_client, subjects):
    response = _apply(learner_client, subjects=subjects)

    assert response.status_code == 400


def test_submit_application_as_tutor_403(login, tutor):
    response = _apply(login(tutor.username))

    assert response.status_code == 403


def test_submit_application_requires_login_401(client):
    assert _apply(client).status_code == 401


def test_approve_application_promotes_learner(learner_client, admin_client, storage, learner):
    _apply(learner_client)

    response = admin_client.post(f"/api/admin/tutor-applications/{learner.id}/approve")

    assert response.status_code == 200
    assert response.get_json()["status"] == "approved"
    assert storage.get_user(learner.id).role is Role.TUTOR

    # Approved subjects show up on the public tutor listing.
    listing = admin_client.get(f"/api/tutors/{learner.id}").get_json()
    assert listing["subjects"] == ["Algorithms", "Calculus"]


def test_reject_application_keeps_role(learner_client, admin_client, storage, learner):
    _apply(learner_client)

    response = admin_client.post(f"/api/admin/tutor-applications/{learner.id}/reject")

    assert response.status_code == 200
    assert response.get_json()["status"] == "rejected"
    assert storage.get_user(learner.id).role is Role.LEARNER


def test_decided_application_cannot_be_decided_again_400(learner_client, admin_client, learner):
    _apply(learner_client)
    admin_client.post(f"/api/admin/tutor-applications/{learner.id}/reject")

    response = admin_client.post(f"/api/admin/tutor-applications/{learner.id}/approve")

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_status"


def test_approve_missing_application_404(admin_client):
    response = admin_client.post("/api/admin/tutor-applications/999/approve")

    assert response.status_code == 404


def test_list_applications_by_status(learner_client, login, make_user, admin_client, learner):
    _apply(learner_client)
    make_user("kofi")
    _apply(login("kofi"))
    admin_client.post(f"/api/admin/tutor-applications/{learner.id}/approve")

    everything = admin_client.get("/api/admin/tutor-applications").get_json()
    pending = admin_client.get("/api/admin/tutor-applications?status=pending").get_json()

    assert len(everything) == 2
    assert [a["status"] for a in pending] == ["pending"]


def test_list_applications_requires_admin_403(learner_client):
    response = learner_client.get("/api/admin/tutor-applications")

    assert response.status_code == 403
