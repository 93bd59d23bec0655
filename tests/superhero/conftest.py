import pytest
from fastapi.testclient import TestClient

from superhero_app.database import engine, metadata
from superhero_app.main import app


@pytest.fixture
def client():
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def registered_user(client):
    user = {"name": "Bruce", "email": "bruce@example.com", "password": "batcave1"}
    response = client.post("/api/users", json=user)
    assert response.status_code == 201, response.text
    return user
