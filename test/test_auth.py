from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from conftest import PASSWORD, create_account, headers_for
from flickxir.exceptions import AuthenticationError, ConflictError, ValidationError
from flickxir.models import AuthSession, User, UserProfile
from flickxir.services import auth_service, user_profile_service
from flickxir.utils.security import hash_password, verify_password
from flickxir.utils.validators import validate_sign_up


class TestValidation:
    def test_valid_form_has_no_errors(self):
        assert validate_sign_up("a@b.co", "secret1", "Asha", "Rao", "9876543210") == {}

    def test_each_field_is_reported(self):
        errors = validate_sign_up("not-an-email", "123", "", " ", "12345")

        assert set(errors) == {"email", "password", "first_name", "last_name", "phone"}
        assert errors["phone"] == "Please enter a valid 10-digit phone number"

    def test_password_longer_than_bcrypt_accepts(self):
        errors = validate_sign_up("a@b.co", "x" * 73, "Asha", "Rao", "9876543210")

        assert errors == {"password": "Password must be at most 72 bytes"}
        # multi-byte characters count by their encoded size
        assert "password" in validate_sign_up("a@b.co", "\u00e9" * 40, "Asha", "Rao", "9876543210")
        assert validate_sign_up("a@b.co", "x" * 72, "Asha", "Rao", "9876543210") == {}


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret123", "plain-text")


def test_sign_up_creates_profile(db):
    user = create_account(db, "Asha@Example.com")

    assert user.email == "asha@example.com"
    assert user.full_name == "Asha Rao"
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.user_id).one()
    assert profile.first_name == "Asha"
    assert profile.email == "asha@example.com"


def test_sign_up_rejects_duplicate_email(db, user):
    with pytest.raises(ConflictError):
        create_account(db, user.email.upper())


def test_sign_up_rejects_invalid_form(db):
    with pytest.raises(ValidationError) as exc_info:
        auth_service.sign_up(db, "bad", "1", "", "", phone="")

    assert len(exc_info.value.errors) == 5


def test_sign_in_and_token_lookup(db, user):
    token, signed_in = auth_service.sign_in(db, "ASHA@example.com", PASSWORD)

    assert signed_in.user_id == user.user_id
    assert auth_service.get_user_for_token(db, token).user_id == user.user_id


def test_sign_in_wrong_password(db, user):
    with pytest.raises(AuthenticationError):
        auth_service.sign_in(db, user.email, "not-the-password")


def test_expired_session_is_removed(db, user):
    token, _ = auth_service.sign_in(db, user.email, PASSWORD)
    session = db.query(AuthSession).filter(AuthSession.token == token).one()
    session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    with pytest.raises(AuthenticationError):
        auth_service.get_user_for_token(db, token)
    assert db.query(AuthSession).filter(AuthSession.token == token).first() is None


def test_password_reset_flow(db, user):
    old_token, _ = auth_service.sign_in(db, user.email, PASSWORD)
    reset_token = auth_service.request_password_reset(db, user.email)

    auth_service.reset_password(db, reset_token, "brand-new-pass")

    with pytest.raises(AuthenticationError):
        auth_service.get_user_for_token(db, old_token)
    auth_service.sign_in(db, user.email, "brand-new-pass")
    # tokens are single use
    with pytest.raises(AuthenticationError):
        auth_service.reset_password(db, reset_token, "another-pass")


def test_overlong_new_password_is_rejected(db, user):
    reset_token = auth_service.request_password_reset(db, user.email)

    with pytest.raises(ValidationError):
        auth_service.update_password(db, user, "y" * 73)
    with pytest.raises(ValidationError):
        auth_service.reset_password(db, reset_token, "y" * 73)
    db.rollback()

    auth_service.sign_in(db, user.email, PASSWORD)


def test_account_survives_failed_profile_insert(db, monkeypatch):
    def broken_create(db, data):
        raise SQLAlchemyError("profiles table is locked")

    monkeypatch.setattr(user_profile_service, "create_user_profile", broken_create)

    user = create_account(db, "ravi@example.com", "Ravi", "Kumar")

    assert db.query(User).filter(User.email == "ravi@example.com").one().user_id == user.user_id
    assert not user_profile_service.profile_exists(db, user.user_id)
    token, signed_in = auth_service.sign_in(db, "ravi@example.com", PASSWORD)
    assert signed_in.user_id == user.user_id
    assert auth_service.get_user_for_token(db, token).full_name == "Ravi Kumar"


def test_password_reset_unknown_email(db):
    assert auth_service.request_password_reset(db, "nobody@example.com") is None


class TestAuthApi:
    def test_sign_up_sign_in_me(self, client):
        response = client.post("/auth/signup", json={
            "email": "ravi@example.com",
            "password": "secret123",
            "first_name": "Ravi",
            "last_name": "Kumar",
            "phone": "9123456780",
        })
        assert response.status_code == 201
        assert response.json()["email"] == "ravi@example.com"

        response = client.post("/auth/signin", json={"email": "ravi@example.com", "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["full_name"] == "Ravi Kumar"
        assert response.json()["is_admin"] is False

    def test_invalid_sign_up_lists_errors(self, client):
        response = client.post("/auth/signup", json={
            "email": "ravi@example.com",
            "password": "1",
            "first_name": " ",
            "last_name": "Kumar",
            "phone": "9123456780",
        })

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 2

    @pytest.mark.parametrize("field, value", [("email", "bad"), ("email", "asha@"), ("phone", "12345")])
    def test_malformed_sign_up_is_unprocessable(self, client, field, value):
        payload = {
            "email": "ravi@example.com",
            "password": "secret123",
            "first_name": "Ravi",
            "last_name": "Kumar",
            "phone": "9123456780",
        }
        payload[field] = value

        response = client.post("/auth/signup", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", field]

    def test_sign_up_with_overlong_password(self, client, db):
        response = client.post("/auth/signup", json={
            "email": "ravi@example.com",
            "password": "x" * 80,
            "first_name": "Ravi",
            "last_name": "Kumar",
            "phone": "9123456780",
        })

        assert response.status_code == 400
        assert response.json()["errors"] == ["Password must be at most 72 bytes"]
        assert db.query(User).count() == 0

    def test_password_reset_request_needs_email(self, client):
        assert client.post("/auth/password-reset", json={"email": "nobody"}).status_code == 422

    def test_me_requires_token(self, client):
        assert client.get("/auth/me").status_code == 401
        assert client.get("/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401

    def test_sign_out_invalidates_token(self, client, auth_headers):
        assert client.post("/auth/signout", headers=auth_headers).status_code == 200
        assert client.get("/auth/me", headers=auth_headers).status_code == 401

    def test_update_password_signs_out_everywhere(self, client, db, user, auth_headers):
        response = client.put("/auth/password", json={"new_password": "changed-pass"}, headers=auth_headers)

        assert response.status_code == 200
        assert client.get("/auth/me", headers=auth_headers).status_code == 401
        auth_service.sign_in(db, user.email, "changed-pass")

    def test_admin_routes_need_admin(self, client, db, auth_headers, admin):
        assert client.get("/admin/orders", headers=auth_headers).status_code == 403
        assert client.get("/admin/orders", headers=headers_for(db, admin.email)).status_code == 200
