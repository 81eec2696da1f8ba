import pytest

from conftest import headers_for
from flickxir.exceptions import ConflictError, NotFoundError, ValidationError
from flickxir.models import User
from flickxir.services import user_profile_service
from flickxir.utils.security import hash_password


@pytest.fixture
def bare_user(db):
    """An account created without a profile"""
    user = User(email="bare@example.com", password=hash_password("secret123"))
    db.add(user)
    db.commit()
    return user


def test_profile_created_at_sign_up(db, user):
    assert user_profile_service.profile_exists(db, user.user_id)
    assert user_profile_service.get_user_profile(db, user.user_id).last_name == "Rao"


def test_missing_profile(db, bare_user):
    assert not user_profile_service.profile_exists(db, bare_user.user_id)
    with pytest.raises(NotFoundError):
        user_profile_service.get_user_profile(db, bare_user.user_id)


def test_create_twice_conflicts(db, bare_user):
    user_profile_service.create_user_profile(db, {"user_id": bare_user.user_id, "first_name": "Bare"})

    with pytest.raises(ConflictError):
        user_profile_service.create_user_profile(db, {"user_id": bare_user.user_id})


def test_create_requires_user_id(db):
    with pytest.raises(ValidationError):
        user_profile_service.create_user_profile(db, {"first_name": "Nobody"})


def test_upsert_creates_then_updates(db, bare_user):
    created = user_profile_service.upsert_user_profile(db, {"user_id": bare_user.user_id, "city": "Pune"})
    updated = user_profile_service.upsert_user_profile(db, {"user_id": bare_user.user_id, "gender": "female"})

    assert updated.profile_id == created.profile_id
    assert (updated.city, updated.gender) == ("Pune", "female")


def test_update_validates_contact_fields(db, user):
    with pytest.raises(ValidationError):
        user_profile_service.update_user_profile(db, user.user_id, {"phone": "12"})
    with pytest.raises(ValidationError):
        user_profile_service.update_user_profile(db, user.user_id, {"pincode": "1234567"})


class TestProfileApi:
    def test_get_and_patch(self, client, auth_headers):
        assert client.get("/profile/exists", headers=auth_headers).json() == {"exists": True}

        response = client.patch("/profile", json={"city": "Bengaluru", "pincode": "560001"}, headers=auth_headers)
        assert response.status_code == 200

        profile = client.get("/profile", headers=auth_headers).json()
        assert profile["city"] == "Bengaluru"
        assert profile["first_name"] == "Asha"

    def test_patch_rejects_malformed_contact(self, client, auth_headers):
        for payload in ({"email": "asha.example.com"}, {"phone": "98765"}, {"pincode": "56000A"}):
            assert client.patch("/profile", json=payload, headers=auth_headers).status_code == 422

    def test_put_creates_missing_profile(self, client, db, bare_user):
        headers = headers_for(db, bare_user.email)
        assert client.get("/profile", headers=headers).status_code == 404

        response = client.put("/profile", json={"first_name": "Bare", "state": "Goa"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["state"] == "Goa"
