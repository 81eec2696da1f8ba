from datetime import date

import pytest

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.services import donation_service
from flickxir.services.donation_service import add_months

TODAY = date(2025, 1, 31)


def medicine_donation(**overrides):
    data = {
        "medicine_name": "Metformin 500mg",
        "medicine_type": "Tablet",
        "quantity": 30,
        "expiry_date": "2026-01-15",
        "condition": "Sealed",
        "donor_name": "Asha Rao",
        "donor_email": "Asha@Example.com",
        "donor_phone": "9876543210",
        "pickup_address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }
    data.update(overrides)
    return data


def test_add_months_clamps_day():
    assert add_months(date(2025, 8, 31), 6) == date(2026, 2, 28)
    assert add_months(date(2025, 1, 15), 12) == date(2026, 1, 15)


def test_medicine_donation_recorded(db):
    donation = donation_service.create_medicine_donation(db, medicine_donation(), today=TODAY)

    assert donation.status == "pending"
    assert donation.expiry_date == date(2026, 1, 15)
    assert donation.donor_email == "asha@example.com"


@pytest.mark.parametrize("expiry", ["2025-07-31", "2025-03-01"])
def test_short_expiry_is_rejected(db, expiry):
    with pytest.raises(ValidationError) as exc_info:
        donation_service.create_medicine_donation(db, medicine_donation(expiry_date=expiry), today=TODAY)

    assert exc_info.value.message == "Medicine must have at least 6 months expiry date"


def test_missing_fields_are_listed(db):
    with pytest.raises(ValidationError) as exc_info:
        donation_service.create_medicine_donation(db, medicine_donation(city="", pincode=None), today=TODAY)

    assert exc_info.value.errors == ["city is required", "pincode is required"]


def test_bad_email_and_date(db):
    with pytest.raises(ValidationError):
        donation_service.create_medicine_donation(db, medicine_donation(donor_email="asha"), today=TODAY)
    with pytest.raises(ValidationError):
        donation_service.create_medicine_donation(db, medicine_donation(expiry_date="soon"), today=TODAY)


def test_donations_by_donor_and_status(db):
    first = donation_service.create_medicine_donation(db, medicine_donation(), today=TODAY)
    donation_service.create_medicine_donation(db, medicine_donation(donor_email="ravi@example.com"), today=TODAY)

    mine = donation_service.get_donations_by_user(db, "ASHA@example.com")
    assert [d.medicine_donation_id for d in mine] == [first.medicine_donation_id]

    assert donation_service.update_donation_status(db, first.medicine_donation_id, "collected").status == "collected"
    with pytest.raises(ValidationError):
        donation_service.update_donation_status(db, first.medicine_donation_id, "lost")
    with pytest.raises(NotFoundError):
        donation_service.update_donation_status(db, 999, "approved")


def test_product_donation_snapshots_products(db, user, make_product):
    syrup = make_product("Cough Syrup", "85.00")
    tablets = make_product("Cetirizine 10mg", "18.00")
    donor = {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210", "address": "12 MG Road"}

    donation = donation_service.create_donation(db, user.user_id, donor, [
        {"product_id": syrup.product_id, "quantity": 2},
        {"product_id": tablets.product_id, "quantity": 3},
    ])

    assert donation.total_items == 5
    assert [(i.product_name, i.quantity) for i in donation.items] == [("Cough Syrup", 2), ("Cetirizine 10mg", 3)]
    assert donation_service.get_user_item_donations(db, user.user_id)[0].donation_id == donation.donation_id


def test_product_donation_needs_items_and_donor(db, user, make_product):
    donor = {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210", "address": "12 MG Road"}

    with pytest.raises(ValidationError):
        donation_service.create_donation(db, user.user_id, donor, [])
    with pytest.raises(ValidationError):
        donation_service.create_donation(db, user.user_id, dict(donor, phone=""), [{"product_id": 1, "quantity": 1}])
    with pytest.raises(NotFoundError):
        donation_service.create_donation(db, user.user_id, donor, [{"product_id": 999, "quantity": 1}])


class TestDonationApi:
    def test_anonymous_medicine_donation(self, client, db, auth_headers, admin_headers):
        expiry = add_months(date.today(), 12).isoformat()
        payload = medicine_donation(expiry_date=expiry, donor_email="asha@example.com")

        response = client.post("/donations/medicine", json=payload)
        assert response.status_code == 201
        donation_id = response.json()["medicine_donation_id"]

        mine = client.get("/donations/medicine", headers=auth_headers).json()
        assert [d["medicine_donation_id"] for d in mine] == [donation_id]

        response = client.patch(
            f"/admin/donations/medicine/{donation_id}/status", json={"status": "approved"}, headers=admin_headers
        )
        assert response.json()["status"] == "approved"

    def test_short_expiry_via_api(self, client):
        payload = medicine_donation(expiry_date=add_months(date.today(), 3).isoformat())

        response = client.post("/donations/medicine", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Medicine must have at least 6 months expiry date"

    @pytest.mark.parametrize("field, value", [("donor_email", "asha"), ("donor_phone", "98765"), ("pincode", "5600")])
    def test_malformed_contact_details(self, client, field, value):
        payload = medicine_donation(expiry_date=add_months(date.today(), 12).isoformat())
        payload[field] = value

        response = client.post("/donations/medicine", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"][0]["loc"] == ["body", field]

    def test_product_donation(self, client, auth_headers, make_product):
        product = make_product("ORS Sachet", "20.00")
        payload = {
            "donor": {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210", "address": "12 MG Road"},
            "items": [{"product_id": product.product_id, "quantity": 4}],
        }

        response = client.post("/donations", json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["total_items"] == 4
        assert response.json()["items"][0]["product_price"] == 20.0
        assert len(client.get("/donations", headers=auth_headers).json()) == 1
