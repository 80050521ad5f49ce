from __future__ import annotations

import json

import pytest
from sqlalchemy import select

from campusdesk.app import create_app
from campusdesk.infrastructure.container import Container
from campusdesk.infrastructure.db import SessionLocal
from campusdesk.infrastructure.db.models import AuthSession, User, UserEvent
from campusdesk.shared.errors.base import PersistenceError


@pytest.fixture()
def app(reset_database):
    return create_app()


def test_signup_login_user_logout_scenario(app) -> None:
    with app.test_client() as client:
        signup = client.post(
            "/api/auth/signup", json={"email": "a@x.com", "password": "secret1"}
        )
        assert signup.status_code == 200
        assert signup.get_json()["email"] == "a@x.com"

        client.delete_cookie("auth_token")

        wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong"})
        assert wrong.status_code == 401
        assert wrong.get_json() == {"error": "invalid_credentials"}

        login = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "secret1"}
        )
        assert login.status_code == 200
        assert client.get_cookie("auth_token") is not None

        me = client.get("/api/auth/user")
        assert me.status_code == 200
        body = me.get_json()
        assert body["email"] == "a@x.com"
        assert "password_hash" not in body and "passwordHash" not in body

        logout = client.post("/api/auth/logout")
        assert logout.status_code == 200
        assert client.get_cookie("auth_token") is None

        after = client.get("/api/auth/user")
        assert after.status_code == 401


def test_signup_duplicate_email_returns_400(app) -> None:
    with app.test_client() as client:
        first = client.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})
        second = client.post(
            "/api/auth/signup", json={"email": "A@X.com", "password": "secret2"}
        )

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.get_json() == {"error": "user_already_exists"}


def test_unknown_email_and_wrong_password_are_indistinguishable(app) -> None:
    with app.test_client() as client:
        client.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})
        wrong_password = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "nope-nope"}
        )
        unknown = client.post(
            "/api/auth/login", json={"email": "b@x.com", "password": "secret1"}
        )

    assert wrong_password.status_code == unknown.status_code == 401
    assert wrong_password.get_json() == unknown.get_json()


def test_only_token_hash_is_stored(app) -> None:
    with app.test_client() as client:
        client.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})
        raw_token = client.get_cookie("auth_token").value

    with SessionLocal() as db:
        rows = db.scalars(select(AuthSession)).all()
        user = db.scalars(select(User)).one()

    assert len(rows) == 1
    assert rows[0].token_hash != raw_token
    assert rows[0].user_id == user.id
    assert user.password_hash != "secret1"


def test_stale_cookie_is_cleared(app) -> None:
    with app.test_client() as client:
        client.set_cookie("auth_token", "forged")
        response = client.get("/api/auth/user")

        assert response.status_code == 401
        assert client.get_cookie("auth_token") is None


def test_logout_revokes_only_current_device(app) -> None:
    laptop = app.test_client()
    phone = app.test_client()
    laptop.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})
    phone.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})

    assert laptop.get_cookie("auth_token").value != phone.get_cookie("auth_token").value

    laptop.post("/api/auth/logout")

    assert laptop.get("/api/auth/user").status_code == 401
    assert phone.get("/api/auth/user").status_code == 200


def test_orphaned_session_is_removed_on_next_request(app) -> None:
    with app.test_client() as client:
        client.post("/api/auth/signup", json={"email": "a@x.com", "password": "secret1"})

        with SessionLocal() as db:
            db.delete(db.scalars(select(User)).one())
            db.commit()

        assert client.get("/api/auth/user").status_code == 401

    with SessionLocal() as db:
        assert db.scalars(select(AuthSession)).all() == []


def test_auth_events_are_recorded(app) -> None:
    with app.test_client() as client:
        client.post(
            "/api/auth/signup",
            json={"email": "a@x.com", "password": "secret1", "fullName": "Ann"},
        )
        client.post("/api/auth/login", json={"email": "a@x.com", "password": "bad-pass"})
        client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
        client.post("/api/auth/logout")

    with SessionLocal() as db:
        events = db.scalars(select(UserEvent).order_by(UserEvent.id)).all()

    assert [e.event_type for e in events] == ["signup", "login_failed", "login", "logout"]
    assert events[0].user_name == "Ann"
    assert events[0].user_email == "a@x.com"
    assert events[1].user_id is None
    assert json.loads(events[1].metadata_json) == {"reason": "wrong_password"}
    assert events[0].metadata_json is None


def test_store_outage_during_validation_degrades_to_anonymous(reset_database) -> None:
    class UnreachableSessions:
        def validate(self, token):
            raise PersistenceError("sessions.find")

    deps = Container()
    deps.__dict__["session_manager"] = UnreachableSessions()
    app = create_app(deps)

    with app.test_client() as client:
        client.set_cookie("auth_token", "whatever")
        health = client.get("/api/health")
        me = client.get("/api/auth/user")

    assert health.status_code == 200
    assert me.status_code == 401
    assert me.get_json() == {"error": "not_authenticated"}


def test_logout_during_store_outage_still_clears_cookie(reset_database) -> None:
    class UnreachableSessions:
        def validate(self, token):
            raise PersistenceError("sessions.find")

        def revoke(self, token):
            raise PersistenceError("sessions.delete")

    deps = Container()
    deps.__dict__["session_manager"] = UnreachableSessions()
    app = create_app(deps)

    with app.test_client() as client:
        client.set_cookie("auth_token", "whatever")
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        assert client.get_cookie("auth_token") is None


def test_bearer_token_authenticates_without_cookie(app) -> None:
    with app.test_client() as browser:
        browser.post("/api/auth/signup", json={"email": "b@x.com", "password": "secret1"})
        token = browser.get_cookie("auth_token").value

    with app.test_client() as api_client:
        me = api_client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    assert me.get_json()["email"] == "b@x.com"


def test_invalid_bearer_token_is_rejected_without_clearing_cookie(app) -> None:
    with app.test_client() as client:
        client.post("/api/auth/signup", json={"email": "b@x.com", "password": "secret1"})
        cookie_token = client.get_cookie("auth_token").value

        response = client.get("/api/auth/user", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 401
        assert "auth_token=;" not in response.headers.get("Set-Cookie", "")
        assert client.get_cookie("auth_token").value == cookie_token
        assert client.get("/api/auth/user").status_code == 200


def test_bearer_token_takes_precedence_over_stale_cookie(app) -> None:
    with app.test_client() as client:
        client.post("/api/auth/signup", json={"email": "b@x.com", "password": "secret1"})
        token = client.get_cookie("auth_token").value
        client.set_cookie("auth_token", "forged")

        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.get_json()["email"] == "b@x.com"
        assert client.get_cookie("auth_token").value == "forged"
