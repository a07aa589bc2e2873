import pytest


def test_seeded_config_keys(admin_client):
    response = admin_client.get("/api/admin/system-config")
    keys = {c["key"]: c for c in response.get_json()}

    assert response.status_code == 200
    assert set(keys) == {"STRIPE_SECRET_KEY", "STRIPE_PUBLIC_KEY"}
    assert keys["STRIPE_SECRET_KEY"]["value"] == ""
    assert keys["STRIPE_SECRET_KEY"]["description"]


def test_put_config_upserts_by_key(admin_client):
    before = admin_client.get("/api/admin/system-config/STRIPE_PUBLIC_KEY").get_json()

    response = admin_client.put("/api/admin/system-config/STRIPE_PUBLIC_KEY", json={"value": "pk_test"})
    data = response.get_json()

    assert response.status_code == 200
    assert data["value"] == "pk_test"
    assert data["id"] == before["id"]
    assert data["description"] == before["description"]


def test_put_new_config_key(admin_client):
    response = admin_client.put("/api/admin/system-config/SUPPORT_EMAIL", json={"value": "help@tutalink.com"})

    assert response.status_code == 200
    assert admin_client.get("/api/admin/system-config/SUPPORT_EMAIL").get_json()["value"] == "help@tutalink.com"


def test_put_config_requires_value_400(admin_client):
    response = admin_client.put("/api/admin/system-config/STRIPE_SECRET_KEY", json={})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Value is required"


def test_get_missing_config_404(admin_client):
    response = admin_client.get("/api/admin/system-config/NOPE")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Configuration not found"


def test_config_requires_admin_403(login, learner):
    response = login(learner.username).get("/api/admin/system-config")

    assert response.status_code == 403


def test_footer_is_public(client):
    response = client.get("/api/footer-content")
    data = response.get_json()

    assert response.status_code == 200
    assert "TutaLink" in data["copyright"]
    assert [link["text"] for link in data["links"]] == ["Terms of Service", "Privacy Policy", "Contact Us"]
    assert {item["platform"] for item in data["socialMedia"]} == {"facebook", "instagram", "twitter"}


def test_replace_footer(admin_client, client):
    payload = {
        "copyright": "© 2025 TutaLink",
        "links": [{"text": "Help", "url": "/help"}],
    }

    response = admin_client.put("/api/admin/footer-content", json=payload)

    assert response.status_code == 200
    public = client.get("/api/footer-content").get_json()
    assert public["copyright"] == "© 2025 TutaLink"
    assert public["links"] == [{"text": "Help", "url": "/help"}]
    assert public["socialMedia"] == []


@pytest.mark.parametrize("payload", [
    {"links": []},
    {"copyright": "x", "links": "nope"},
    {"copyright": "x", "socialMedia": [{"platform": "x"}]},
])
def test_replace_footer_invalid_400(admin_client, payload):
    response = admin_client.put("/api/admin/footer-content", json=payload)

    assert response.status_code == 400
