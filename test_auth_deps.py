#!/usr/bin/env python3
"""
Identity resolution: bearer token -> verified claims -> User row.
The identity provider is replaced by a stub verifier.
"""
import pytest

import core.deps
from core.deps import get_current_user

CLAIMS = {"uid": "firebase-uid-alice", "email": "alice.johnson@citygeneral.com"}


@pytest.fixture
def real_auth_client(client, monkeypatch):
    from main import app

    app.dependency_overrides.pop(get_current_user, None)

    def fake_verify(token):
        if token != "good-token":
            raise ValueError("invalid token")
        return dict(CLAIMS)

    monkeypatch.setattr(core.deps, "verify_id_token", fake_verify)
    return client


def test_missing_bearer_header_is_unauthorized(real_auth_client, worker):
    response = real_auth_client.get("/users/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error_type"] == "authentication_error"


def test_invalid_token_is_unauthorized(real_auth_client, worker):
    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_first_login_links_identity_by_email(real_auth_client, session, worker):
    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200
    assert response.json()["id"] == worker.id
    session.refresh(worker)
    assert worker.auth_uid == CLAIMS["uid"]


def test_email_of_linked_account_does_not_grant_access(real_auth_client, session, worker):
    worker.auth_uid = "alice-original-uid"
    session.add(worker)
    session.commit()

    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error_type"] == "authentication_error"
    assert "id" not in body
    session.refresh(worker)
    assert worker.auth_uid == "alice-original-uid"


def test_linked_account_still_signs_in_by_uid(real_auth_client, session, worker):
    worker.auth_uid = CLAIMS["uid"]
    worker.email = "alice.j@citygeneral.com"
    session.add(worker)
    session.commit()

    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer good-token"})
    assert response.status_code == 200
    assert response.json()["id"] == worker.id


def test_unknown_identity_has_no_profile(real_auth_client, session, organization):
    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error_type"] == "not_found"
    assert body["message"].startswith("User profile not found")


def test_inactive_user_is_rejected(real_auth_client, session, worker):
    worker.active = False
    session.add(worker)
    session.commit()

    response = real_auth_client.get("/users/me", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert body["error_type"] == "authorization_error"
    assert body["message"] == "User account is inactive."


def test_clock_in_with_real_identity_resolution(real_auth_client, worker):
    response = real_auth_client.post(
        "/time/clock-in",
        json={"latitude": 12.9716, "longitude": 77.5946},
        headers={"Authorization": "Bearer good-token"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["user_id"] == worker.id
