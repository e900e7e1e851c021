import pytest
from rest_framework.test import APIClient
from users.tests.factories import UserFactory


@pytest.mark.django_db
def test_token_pair_and_profile():
    user = UserFactory(username="jdoe", email="JDoe@Example.com")
    client = APIClient()

    resp = client.post("/api/v1/auth/token/", {"username": "jdoe", "password": "pass"}, format="json")
    assert resp.status_code == 200
    access = resp.data["access"]
    assert resp.data["refresh"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    me = client.get("/api/v1/auth/me/")
    assert me.status_code == 200
    assert me.data["email"] == "jdoe@example.com"
    assert me.data["id"] == user.id


@pytest.mark.django_db
def test_bad_credentials_are_rejected(caplog):
    UserFactory(username="jdoe")
    with caplog.at_level("INFO", logger="storefront.auth"):
        resp = APIClient().post("/api/v1/auth/token/", {"username": "jdoe", "password": "nope"}, format="json")
    assert resp.status_code == 401
    assert any(getattr(r, "status", None) == "failed" for r in caplog.records)


@pytest.mark.django_db
def test_refresh_issues_new_access_token():
    UserFactory(username="jdoe")
    client = APIClient()
    pair = client.post("/api/v1/auth/token/", {"username": "jdoe", "password": "pass"}, format="json").data

    resp = client.post("/api/v1/auth/token/refresh/", {"refresh": pair["refresh"]}, format="json")

    assert resp.status_code == 200
    assert resp.data["access"]


@pytest.mark.django_db
def test_inactive_user_cannot_sign_in():
    UserFactory(username="gone", is_active=False)
    resp = APIClient().post("/api/v1/auth/token/", {"username": "gone", "password": "pass"}, format="json")
    assert resp.status_code == 401


def test_me_requires_authentication(db):
    assert APIClient().get("/api/v1/auth/me/").status_code == 401
