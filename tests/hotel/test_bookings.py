import asyncio

import httpx

from hotel_booking.config import MANAGER_EMAIL, MANAGER_PASSWORD
from hotel_booking.main import app, shutdown, startup


def test_new_booking_is_pending(client, client_headers, make_room):
    room = make_room(101)
    response = client.post(
        "/booking",
        json={"room_id": room["id"], "arrival_date": "2024-03-01", "departure_date": "2024-03-04"},
        headers=client_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["is_approved"] is None
    assert body["room_id"] == room["id"]

    me = client.get("/users/me", headers=client_headers).json()
    assert body["user_id"] == me["id"]


def test_booking_an_unknown_room_is_404(client, client_headers):
    response = client.post(
        "/booking",
        json={"room_id": 42, "arrival_date": "2024-03-01", "departure_date": "2024-03-04"},
        headers=client_headers,
    )
    assert response.status_code == 404


def test_booking_with_departure_before_arrival_is_rejected(client, client_headers, make_room):
    room = make_room(101)
    response = client.post(
        "/booking",
        json={"room_id": room["id"], "arrival_date": "2024-03-04", "departure_date": "2024-03-01"},
        headers=client_headers,
    )
    assert response.status_code == 422


def test_double_booking_is_refused_until_rejected(client, client_headers, manager_headers, make_room, make_booking):
    room = make_room(101)
    first = make_booking(room["id"], "2024-03-01", "2024-03-04")
    overlapping = {"room_id": room["id"], "arrival_date": "2024-03-03", "departure_date": "2024-03-06"}

    response = client.post("/booking", json=overlapping, headers=client_headers)
    assert response.status_code == 409

    client.put(f"/bookingApprove/{first['id']}", json={"is_approved": False}, headers=manager_headers)
    response = client.post("/booking", json=overlapping, headers=client_headers)
    assert response.status_code == 201


def test_my_bookings_lists_only_own_bookings(client, client_headers, manager_headers, make_room, make_booking):
    room = make_room(101)
    make_booking(room["id"], "2024-05-01", "2024-05-02")
    make_booking(room["id"], "2024-04-01", "2024-04-02")
    client.post(
        "/booking",
        json={"room_id": room["id"], "arrival_date": "2024-06-01", "departure_date": "2024-06-02"},
        headers=manager_headers,
    )

    response = client.get("/booking", headers=client_headers)
    assert response.status_code == 200
    assert [b["arrival_date"] for b in response.json()] == ["2024-04-01", "2024-05-01"]


def test_booking_history_is_manager_only(client, client_headers, manager_headers, make_room, make_booking):
    first = make_room(101)
    second = make_room(102)
    make_booking(first["id"], "2024-05-01", "2024-05-02")
    make_booking(second["id"], "2024-04-01", "2024-04-02")

    assert client.get("/bookingHistory", headers=client_headers).status_code == 403

    response = client.get("/bookingHistory", headers=manager_headers)
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = client.get("/bookingHistory", params={"room_id": second["id"]}, headers=manager_headers)
    assert [b["room_id"] for b in response.json()] == [second["id"]]


def test_approve_and_reject_booking(client, manager_headers, make_room, make_booking):
    room = make_room(101)
    booking = make_booking(room["id"], "2024-05-01", "2024-05-02")

    response = client.put(f"/bookingApprove/{booking['id']}", json={"is_approved": True}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["is_approved"] is True

    response = client.put(f"/bookingApprove/{booking['id']}", json={"is_approved": False}, headers=manager_headers)
    assert response.json()["is_approved"] is False

    history = client.get("/bookingHistory", headers=manager_headers).json()
    assert history[0]["is_approved"] is False


def test_client_cannot_approve(client, client_headers, make_room, make_booking):
    room = make_room(101)
    booking = make_booking(room["id"], "2024-05-01", "2024-05-02")
    response = client.put(f"/bookingApprove/{booking['id']}", json={"is_approved": True}, headers=client_headers)
    assert response.status_code == 403


def test_approving_unknown_booking_is_404(client, manager_headers):
    response = client.put("/bookingApprove/999", json={"is_approved": True}, headers=manager_headers)
    assert response.status_code == 404


def test_malformed_booking_date_is_rejected(client, client_headers, make_room):
    room = make_room(101)
    response = client.post(
        "/booking",
        json={"room_id": room["id"], "arrival_date": "2024-13-40", "departure_date": "2024-03-04"},
        headers=client_headers,
    )
    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "arrival_date"]
    assert client.get("/booking", headers=client_headers).json() == []


def test_reapproving_a_rejected_booking_after_the_room_was_let(
    client, manager_headers, make_room, make_booking
):
    room = make_room(101)
    first = make_booking(room["id"], "2024-03-01", "2024-03-04", is_approved=False)
    make_booking(room["id"], "2024-03-02", "2024-03-03", is_approved=True)

    response = client.put(f"/bookingApprove/{first['id']}", json={"is_approved": True}, headers=manager_headers)
    assert response.status_code == 409

    history = client.get("/bookingHistory", headers=manager_headers).json()
    assert [(b["arrival_date"], b["is_approved"]) for b in history] == [
        ("2024-03-01", False),
        ("2024-03-02", True),
    ]


def test_reapproving_a_rejected_booking_while_the_room_is_free(client, manager_headers, make_room, make_booking):
    room = make_room(101)
    booking = make_booking(room["id"], "2024-03-01", "2024-03-04", is_approved=False)

    response = client.put(f"/bookingApprove/{booking['id']}", json={"is_approved": True}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["is_approved"] is True


def test_concurrent_bookings_for_one_room_let_only_one_through(empty_store):
    async def book_concurrently():
        await startup()
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
                async def login(email, password):
                    response = await ac.post("/login", data={"username": email, "password": password})
                    return {"Authorization": f"Bearer {response.json()['access_token']}"}

                manager = await login(MANAGER_EMAIL, MANAGER_PASSWORD)
                room = await ac.post(
                    "/room",
                    json={"type": "double", "number": 201, "number_of_beds": 2},
                    headers=manager,
                )
                await ac.post(
                    "/signup",
                    json={"name": "Jane Guest", "email": "jane@example.com", "password": "secret123"},
                )
                guest = await login("jane@example.com", "secret123")

                stay = {"room_id": room.json()["id"], "arrival_date": "2024-07-01", "departure_date": "2024-07-05"}
                responses = await asyncio.gather(
                    *(ac.post("/booking", json=stay, headers=guest) for _ in range(5))
                )
                return sorted(r.status_code for r in responses)
        finally:
            await shutdown()

    assert asyncio.run(book_concurrently()) == [201, 409, 409, 409, 409]
