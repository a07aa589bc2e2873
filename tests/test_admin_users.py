import pytest

from tutalink.auth import verify_password
from tutalink.domain import Role


def test_admin_routes_require_login_401(client):
    assert client.get("/api/admin/users").status_code == 401


@pytest.mark.parametrize("username,role", [("lena", Role.LEARNER), ("tom", Role.TUTOR)])
def test_admin_routes_reject_non_admins_403(login, make_user, username, role):
    make_user(username, role)

    response = login(username).get("/api/admin/users")

    assert response.status_code == 403
    assert response.get_json()["error"] == "forbidden"


def test_list_users_hides_passwords(admin_client, learner):
    response = admin_client.get("/api/admin/users")
    data = response.get_json()

    assert response.status_code == 200
    assert {u["username"] for u in data} == {"admin", "lena"}
    assert all("password" not in u for u in data)


def test_create_user_201(admin_client, storage, login):
    response = admin_client.post(
        "/api/admin/users",
        json={"username": "ama", "email": "ama@test.com", "password": "amapass1", "role": "tutor"},
    )

    assert response.status_code == 201
    assert response.get_json()["role"] == "tutor"
    assert storage.find_user_by_username("ama").role is Role.TUTOR
    login("ama", "amapass1")


def test_create_user_invalid_role_400(admin_client):
    response = admin_client.post(
        "/api/admin/users",
        json={"username": "ama", "email": "ama@test.com", "password": "amapass1", "role": "owner"},
    )

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_role"


def test_get_user_404(admin_client):
    response = admin_client.get("/api/admin/users/999")

    assert response.status_code == 404
    assert response.get_json()["message"] == "User not found"


def test_change_role_200(admin_client, storage, learner):
    response = admin_client.patch(f"/api/admin/users/{learner.id}/role", json={"role": "tutor"})

    assert response.status_code == 200
    assert response.get_json()["role"] == "tutor"
    assert storage.get_user(learner.id).role is Role.TUTOR


def test_role_change_applies_to_live_session(admin_client, login, learner):
    """Authorization reads the role fresh from the store on every request."""
    session_client = login(learner.username)
    assert session_client.get("/api/admin/dashboard").status_code == 403

    admin_client.patch(f"/api/admin/users/{learner.id}/role", json={"role": "admin"})

    assert session_client.get("/api/admin/dashboard").status_code == 200


def test_set_approval(admin_client, storage, tutor):
    response = admin_client.patch(f"/api/admin/users/{tutor.id}/approve", json={"isApproved": False})

    assert response.status_code == 200
    assert storage.get_user(tutor.id).is_approved is False

    bad = admin_client.patch(f"/api/admin/users/{tutor.id}/approve", json={"isApproved": "no"})
    assert bad.status_code == 400


def test_delete_user_204(admin_client, storage, learner):
    response = admin_client.delete(f"/api/admin/users/{learner.id}")

    assert response.status_code == 204
    assert storage.get_user(learner.id) is None
    assert admin_client.delete(f"/api/admin/users/{learner.id}").status_code == 404


def test_deleted_ids_are_not_reused(admin_client, storage, learner, make_user):
    admin_client.delete(f"/api/admin/users/{learner.id}")

    replacement = make_user("kofi")

    assert replacement.id > learner.id


def test_reset_password_200(admin_client, storage, login, learner):
    response = admin_client.post(f"/api/admin/users/{learner.id}/reset-password")
    data = response.get_json()

    assert response.status_code == 200
    temporary = data["temporaryPassword"]
    assert temporary.startswith("temp")
    assert verify_password(storage.get_user(learner.id).password, temporary)
    login(learner.username, temporary)
