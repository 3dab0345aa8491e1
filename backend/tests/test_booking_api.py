"""
Integration tests for the booking endpoints.

Covers route-level guards and the full book -> assign -> deliver flow.
"""

import pytest

from backend.tracknship.models.booking_enums import BookingStatus

BOOKING_PAYLOAD = {
    "owner_phone": "+8801712345678",
    "parcel_type": "Fragile",
    "parcel_weight": 3.2,
    "receiver_name": "Nadia",
    "receiver_phone": "+8801898765432",
    "delivery_address": "7/A Green Road, Dhaka",
    "latitude": 23.75,
    "longitude": 90.39,
    "requested_delivery_date": "2026-11-05",
    "price": 150.0
}


@pytest.mark.asyncio
async def test_customer_books_parcel(client, customer, auth_headers):
    response = await client.post("/v1/bookParcel", json=BOOKING_PAYLOAD, headers=auth_headers(customer.email))

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Pending"
    assert data["owner_email"] == customer.email
    assert data["delivery_man_id"] is None
    assert data["approximate_delivery_date"] is None


@pytest.mark.asyncio
async def test_booking_requires_customer(client, delivery_man, auth_headers):
    unauthenticated = await client.post("/v1/bookParcel", json=BOOKING_PAYLOAD)
    assert unauthenticated.status_code == 401

    wrong_role = await client.post("/v1/bookParcel", json=BOOKING_PAYLOAD, headers=auth_headers(delivery_man.email))
    assert wrong_role.status_code == 403


@pytest.mark.asyncio
async def test_invalid_booking_payload(client, customer, auth_headers):
    payload = dict(BOOKING_PAYLOAD, parcel_weight=-1)
    response = await client.post("/v1/bookParcel", json=payload, headers=auth_headers(customer.email))
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_full_delivery_flow(client, db_session, customer, admin, delivery_man, auth_headers):
    customer_headers = auth_headers(customer.email)
    admin_headers = auth_headers(admin.email)
    rider_headers = auth_headers(delivery_man.email)

    booking_id = (await client.post("/v1/bookParcel", json=BOOKING_PAYLOAD, headers=customer_headers)).json()["id"]

    # Customer cannot assign
    forbidden = await client.post(
        f"/v1/updateBooking/{booking_id}",
        json={"delivery_man_id": delivery_man.id, "approximate_delivery_date": "2026-11-04"},
        headers=customer_headers
    )
    assert forbidden.status_code == 403

    assigned = await client.post(
        f"/v1/updateBooking/{booking_id}",
        json={"delivery_man_id": delivery_man.id, "approximate_delivery_date": "2026-11-04"},
        headers=admin_headers
    )
    assert assigned.status_code == 200
    assert assigned.json()["modified_count"] == 1
    assert assigned.json()["status"] == "On The Way"

    # Assigning again is an invalid transition
    again = await client.post(
        f"/v1/updateBooking/{booking_id}",
        json={"delivery_man_id": delivery_man.id, "approximate_delivery_date": "2026-11-04"},
        headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["error_code"] == "ERR_BOOKING_001"

    deliveries = await client.get("/v1/myDeliveryList", headers=rider_headers)
    assert deliveries.status_code == 200
    assert [b["id"] for b in deliveries.json()["bookings"]] == [booking_id]

    delivered = await client.patch(f"/v1/deliverParcel/{booking_id}", headers=rider_headers)
    assert delivered.status_code == 200
    assert delivered.json()["status"] == "Delivered"

    await db_session.refresh(delivery_man)
    assert delivery_man.delivered_count == 4

    # Terminal: customer can no longer cancel
    cancel = await client.patch(f"/v1/cancelParcel/{booking_id}", headers=customer_headers)
    assert cancel.status_code == 409

    leaderboard = await client.get("/v1/deliverymen")
    assert leaderboard.status_code == 200
    assert leaderboard.json()[0]["delivery_man_id"] == delivery_man.id
    assert leaderboard.json()[0]["delivered_count"] == 1


@pytest.mark.asyncio
async def test_deliver_by_wrong_delivery_man(client, make_booking, customer, delivery_man, other_delivery_man, auth_headers):
    booking = await make_booking(customer.email, status=BookingStatus.ON_THE_WAY, delivery_man_id=delivery_man.id)

    response = await client.patch(f"/v1/deliverParcel/{booking.id}", headers=auth_headers(other_delivery_man.email))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_booking_returns_404(client, admin, delivery_man, auth_headers):
    response = await client.post(
        "/v1/updateBooking/4040",
        json={"delivery_man_id": delivery_man.id, "approximate_delivery_date": "2026-11-04"},
        headers=auth_headers(admin.email)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_assign_to_non_delivery_man_is_rejected(client, make_booking, customer, admin, auth_headers):
    booking = await make_booking(customer.email)
    response = await client.post(
        f"/v1/updateBooking/{booking.id}",
        json={"delivery_man_id": customer.id, "approximate_delivery_date": "2026-11-04"},
        headers=auth_headers(admin.email)
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_BOOKING_002"


@pytest.mark.asyncio
async def test_owner_and_admin_can_cancel(client, db_session, make_booking, make_user, customer, admin, delivery_man, auth_headers):
    stranger = await make_user("stranger@tracknship.test")
    own = await make_booking(customer.email)
    assigned = await make_booking(customer.email, status=BookingStatus.ON_THE_WAY, delivery_man_id=delivery_man.id)

    denied = await client.patch(f"/v1/cancelParcel/{own.id}", headers=auth_headers(stranger.email))
    assert denied.status_code == 403

    by_owner = await client.patch(f"/v1/cancelParcel/{own.id}", headers=auth_headers(customer.email))
    assert by_owner.status_code == 200
    assert by_owner.json()["status"] == "Cancelled"

    by_rider = await client.patch(f"/v1/cancelParcel/{assigned.id}", headers=auth_headers(delivery_man.email))
    assert by_rider.status_code == 403

    by_admin = await client.patch(f"/v1/cancelParcel/{assigned.id}", headers=auth_headers(admin.email))
    assert by_admin.status_code == 200

    await db_session.refresh(delivery_man)
    assert delivery_man.delivered_count == 2


@pytest.mark.asyncio
async def test_edit_and_delete_pending_booking(client, make_booking, customer, auth_headers):
    headers = auth_headers(customer.email)
    booking = await make_booking(customer.email)

    edited = await client.patch(f"/v1/bookings/{booking.id}", json={"receiver_name": "Updated"}, headers=headers)
    assert edited.status_code == 200
    assert edited.json()["receiver_name"] == "Updated"

    deleted = await client.delete(f"/v1/bookings/{booking.id}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json()["deleted_count"] == 1

    gone = await client.get(f"/v1/bookings/{booking.id}", headers=headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_booking_visibility(client, make_booking, make_user, customer, admin, delivery_man, other_delivery_man, auth_headers):
    stranger = await make_user("stranger@tracknship.test")
    booking = await make_booking(customer.email, status=BookingStatus.ON_THE_WAY, delivery_man_id=delivery_man.id)
    path = f"/v1/bookings/{booking.id}"

    assert (await client.get(path, headers=auth_headers(customer.email))).status_code == 200
    assert (await client.get(path, headers=auth_headers(admin.email))).status_code == 200
    assert (await client.get(path, headers=auth_headers(delivery_man.email))).status_code == 200
    assert (await client.get(path, headers=auth_headers(other_delivery_man.email))).status_code == 403
    assert (await client.get(path, headers=auth_headers(stranger.email))).status_code == 403


@pytest.mark.asyncio
async def test_list_endpoints(client, make_booking, make_user, customer, admin, auth_headers):
    from datetime import date

    other = await make_user("other@tracknship.test")
    await make_booking(customer.email, requested_delivery_date=date(2026, 11, 1))
    await make_booking(customer.email, status=BookingStatus.CANCELLED, requested_delivery_date=date(2026, 11, 10))
    await make_booking(other.email, requested_delivery_date=date(2026, 12, 1))

    mine = await client.get("/v1/myParcel", headers=auth_headers(customer.email))
    assert mine.json()["total"] == 2

    pending_mine = await client.get("/v1/myParcel", params={"status": "Pending"}, headers=auth_headers(customer.email))
    assert pending_mine.json()["total"] == 1

    in_november = await client.get(
        "/v1/bookings",
        params={"from_date": "2026-11-01", "to_date": "2026-11-30"},
        headers=auth_headers(admin.email)
    )
    assert in_november.status_code == 200
    assert in_november.json()["total"] == 2

    forbidden = await client.get("/v1/bookings", headers=auth_headers(customer.email))
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_paid_booking_cannot_be_deleted_or_repriced(client, make_booking, customer, auth_headers):
    headers = auth_headers(customer.email)
    booking = await make_booking(customer.email)

    paid = await client.post(
        "/v1/payments",
        json={"booking_id": booking.id, "amount": 150.0, "transaction_id": "pi_before_delete"},
        headers=headers
    )
    assert paid.status_code == 201

    deleted = await client.delete(f"/v1/bookings/{booking.id}", headers=headers)
    assert deleted.status_code == 409
    assert deleted.json()["error_code"] == "ERR_CONFLICT_001"

    repriced = await client.patch(f"/v1/bookings/{booking.id}", json={"price": 1.0}, headers=headers)
    assert repriced.status_code == 409

    renamed = await client.patch(f"/v1/bookings/{booking.id}", json={"receiver_name": "Nadia"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["price"] == 150.0
    assert renamed.json()["is_paid"] is True
