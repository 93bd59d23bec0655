import pytest
from fastapi.testclient import TestClient

from hotel_booking.config import MANAGER_EMAIL, MANAGER_PASSWORD
from hotel_booking.database import engine, metadata
from hotel_booking.main import app


@pytest.fixture
def empty_store():
    yield
    with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client(empty_store):
    # Unhandled errors come back as 500 responses, as they would in production
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def login(client, email, password):
    response = client.post("/login", data={"username": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def manager_headers(client):
    return login(client, MANAGER_EMAIL, MANAGER_PASSWORD)


@pytest.fixture
def client_headers(client):
    response = client.post(
        "/signup",
        json={"name": "Jane Guest", "email": "jane@example.com", "password": "secret123"},
    )
    assert response.status_code == 201, response.text
    return login(client, "jane@example.com", "secret123")


@pytest.fixture
def make_room(client, manager_headers):
    def _make_room(number, type="double", beds=2):
        response = client.post(
            "/room",
            json={"type": type, "number": number, "description": f"Room {number}", "number_of_beds": beds},
            headers=manager_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_room


@pytest.fixture
def make_booking(client, client_headers, manager_headers):
    """Book a room as the guest, then optionally approve (True) or reject (False) it."""
    def _make_booking(room_id, arrival, departure, is_approved=None):
        response = client.post(
            "/booking",
            json={"room_id": room_id, "arrival_date": arrival, "departure_date": departure},
            headers=client_headers,
        )
        assert response.status_code == 201, response.text
        booking = response.json()
        if is_approved is not None:
            response = client.put(
                f"/bookingApprove/{booking['id']}",
                json={"is_approved": is_approved},
                headers=manager_headers,
            )
            assert response.status_code == 200, response.text
            booking = response.json()
        return booking
    return _make_booking
