import pytest

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.services import address_service


def address(**overrides):
    data = {
        "name": "Asha Rao",
        "phone": "9876543210",
        "address_line1": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }
    data.update(overrides)
    return data


def defaults(db, user):
    return [a.address_id for a in address_service.get_user_addresses(db, user.user_id) if a.is_default]


def test_required_fields(db, user):
    with pytest.raises(ValidationError) as exc_info:
        address_service.add_address(db, user.user_id, address(city="", state=" "))

    assert exc_info.value.errors == ["city is required", "state is required"]


@pytest.mark.parametrize("field, value", [("phone", "12345"), ("pincode", "56001A")])
def test_phone_and_pincode_format(db, user, field, value):
    with pytest.raises(ValidationError):
        address_service.add_address(db, user.user_id, address(**{field: value}))


def test_only_one_default(db, user):
    first = address_service.add_address(db, user.user_id, address(is_default=True))
    second = address_service.add_address(db, user.user_id, address(address_line1="4 Park Street", is_default=True))

    assert defaults(db, user) == [second.address_id]

    address_service.set_default_address(db, user.user_id, first.address_id)

    assert defaults(db, user) == [first.address_id]
    assert address_service.get_default_address(db, user.user_id).address_id == first.address_id


def test_update_to_default_clears_others(db, user):
    first = address_service.add_address(db, user.user_id, address(is_default=True))
    second = address_service.add_address(db, user.user_id, address(address_line1="4 Park Street"))

    updated = address_service.update_address(db, user.user_id, second.address_id, {"is_default": True, "city": "Mysuru"})

    assert updated.city == "Mysuru"
    assert defaults(db, user) == [second.address_id]
    assert first.is_default is False


def test_default_listed_first(db, user):
    address_service.add_address(db, user.user_id, address(address_line1="Old House"))
    default = address_service.add_address(db, user.user_id, address(address_line1="Home", is_default=True))
    address_service.add_address(db, user.user_id, address(address_line1="Office"))

    addresses = address_service.get_user_addresses(db, user.user_id)

    assert addresses[0].address_id == default.address_id
    assert address_service.select_checkout_address(addresses).address_id == default.address_id


def test_checkout_falls_back_to_first_address(db, user):
    address_service.add_address(db, user.user_id, address(address_line1="Office"))

    addresses = address_service.get_user_addresses(db, user.user_id)

    assert address_service.select_checkout_address(addresses).address_line1 == "Office"
    assert address_service.select_checkout_address([]) is None


def test_addresses_are_owned(db, user, admin):
    mine = address_service.add_address(db, user.user_id, address())

    with pytest.raises(NotFoundError):
        address_service.delete_address(db, admin.user_id, mine.address_id)
    with pytest.raises(NotFoundError):
        address_service.set_default_address(db, admin.user_id, mine.address_id)


def test_address_as_text(db, user):
    saved = address_service.add_address(db, user.user_id, address(address_line2="Near Metro"))

    assert saved.as_text() == "Asha Rao, 12 MG Road, Near Metro, Bengaluru, Karnataka, 560001 (Phone: 9876543210)"


class TestAddressApi:
    def test_crud(self, client, auth_headers):
        response = client.post("/addresses", json=address(), headers=auth_headers)
        assert response.status_code == 201
        address_id = response.json()["address_id"]
        assert response.json()["is_default"] is False

        assert client.get("/addresses/default", headers=auth_headers).json() is None
        assert client.get("/addresses/checkout", headers=auth_headers).json()["address_id"] == address_id

        response = client.post(f"/addresses/{address_id}/default", headers=auth_headers)
        assert response.json()["is_default"] is True

        response = client.patch(f"/addresses/{address_id}", json={"pincode": "abc"}, headers=auth_headers)
        assert response.status_code == 422

        assert client.delete(f"/addresses/{address_id}", headers=auth_headers).status_code == 204
        assert client.get("/addresses", headers=auth_headers).json() == []
