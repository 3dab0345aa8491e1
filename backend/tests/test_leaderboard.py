"""
Tests for the delivery-man leaderboard and admin statistics.
"""

import pytest
from datetime import date

from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.enums import UserRole
from backend.tracknship.services.leaderboard import LeaderboardService


async def _deliver(make_booking, make_review, owner_email, delivery_man, count, rating=None):
    for _ in range(count):
        booking = await make_booking(owner_email, status=BookingStatus.DELIVERED, delivery_man_id=delivery_man.id)
        if rating is not None:
            await make_review(booking, rating)


@pytest.mark.asyncio
async def test_ranking_by_count_then_rating(db_session, make_user, make_booking, make_review, customer):
    first = await make_user("first@tracknship.test", role=UserRole.DELIVERYMAN)
    second = await make_user("second@tracknship.test", role=UserRole.DELIVERYMAN)
    third = await make_user("third@tracknship.test", role=UserRole.DELIVERYMAN)

    await _deliver(make_booking, make_review, customer.email, first, 5, rating=4.0)
    await _deliver(make_booking, make_review, customer.email, second, 5, rating=4.5)
    await _deliver(make_booking, make_review, customer.email, third, 3, rating=5.0)

    top = await LeaderboardService.top_delivery_men(db_session, 3)

    assert [s.delivery_man_id for s in top] == [second.id, first.id, third.id]
    assert [s.delivered_count for s in top] == [5, 5, 3]
    assert top[0].average_rating == pytest.approx(4.5)
    assert top[0].review_count == 5


@pytest.mark.asyncio
async def test_empty_leaderboard(db_session):
    assert await LeaderboardService.top_delivery_men(db_session, 3) == []


@pytest.mark.asyncio
async def test_unreviewed_delivery_man_has_zero_rating(db_session, make_booking, customer, delivery_man):
    await make_booking(customer.email, status=BookingStatus.DELIVERED, delivery_man_id=delivery_man.id)

    [stats] = await LeaderboardService.delivery_men_stats(db_session)

    assert stats.delivery_man_id == delivery_man.id
    assert stats.delivered_count == 1
    assert stats.counter_value == 3
    assert stats.average_rating == 0
    assert stats.review_count == 0


@pytest.mark.asyncio
async def test_only_delivered_bookings_count(db_session, make_booking, customer, delivery_man):
    await make_booking(customer.email, status=BookingStatus.DELIVERED, delivery_man_id=delivery_man.id)
    await make_booking(customer.email, status=BookingStatus.ON_THE_WAY, delivery_man_id=delivery_man.id)
    await make_booking(customer.email, status=BookingStatus.CANCELLED, delivery_man_id=delivery_man.id)

    [stats] = await LeaderboardService.delivery_men_stats(db_session)
    assert stats.delivered_count == 1


@pytest.mark.asyncio
async def test_limit_is_applied(db_session, make_user):
    for i in range(5):
        await make_user(f"rider{i}@tracknship.test", role=UserRole.DELIVERYMAN)

    assert len(await LeaderboardService.top_delivery_men(db_session, 3)) == 3
    assert len(await LeaderboardService.top_delivery_men(db_session, 10)) == 5
    assert await LeaderboardService.top_delivery_men(db_session, 0) == []


@pytest.mark.asyncio
async def test_customers_are_not_ranked(db_session, customer, admin, delivery_man):
    stats = await LeaderboardService.delivery_men_stats(db_session)
    assert [s.delivery_man_id for s in stats] == [delivery_man.id]


@pytest.mark.asyncio
async def test_public_and_admin_endpoints(client, make_booking, customer, admin, delivery_man, other_delivery_man, auth_headers):
    await make_booking(customer.email, status=BookingStatus.DELIVERED, delivery_man_id=other_delivery_man.id)

    public = await client.get("/v1/deliverymen", params={"limit": 1})
    assert public.status_code == 200
    assert [s["delivery_man_id"] for s in public.json()] == [other_delivery_man.id]

    assert (await client.get("/v1/admin/deliverymen")).status_code == 401
    assert (await client.get("/v1/admin/deliverymen", headers=auth_headers(customer.email))).status_code == 403

    full = await client.get("/v1/admin/deliverymen", headers=auth_headers(admin.email))
    assert full.status_code == 200
    assert len(full.json()) == 2


@pytest.mark.asyncio
async def test_system_statistics(client, make_booking, customer, admin, delivery_man, auth_headers):
    await make_booking(customer.email, requested_delivery_date=date(2026, 11, 1))
    await make_booking(
        customer.email, status=BookingStatus.DELIVERED, delivery_man_id=delivery_man.id,
        requested_delivery_date=date(2026, 11, 1)
    )
    await make_booking(customer.email, status=BookingStatus.CANCELLED, requested_delivery_date=date(2026, 11, 2))

    response = await client.get("/v1/admin/statistics", headers=auth_headers(admin.email))
    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 3
    assert data["total_delivery_men"] == 1
    assert data["total_bookings"] == 3
    assert data["total_delivered"] == 1
    assert data["total_cancelled"] == 1
    assert data["bookings_by_date"] == [
        {"date": "2026-11-01", "booked": 2, "delivered": 1},
        {"date": "2026-11-02", "booked": 1, "delivered": 0},
    ]
