from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pickeasy.config import Settings
from pickeasy.main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        JWT_SECRET=TEST_SECRET,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ENVIRONMENT="development",
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.SessionLocal()
    yield session
    session.close()


def sign_up(client, username, is_staff=False, password="password1", first="Ann", last="Lee"):
    return client.post("/api/users/signup", json={
        "firstName": first,
        "lastName": last,
        "isRestaurantStaff": "true" if is_staff else "false",
        "username": username,
        "password": password,
    })


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff_headers(client) -> dict:
    resp = sign_up(client, "staff1", is_staff=True)
    assert resp.status_code == 201
    return bearer(resp.json()["access_token"])


@pytest.fixture
def other_staff_headers(client) -> dict:
    resp = sign_up(client, "staff2", is_staff=True)
    assert resp.status_code == 201
    return bearer(resp.json()["access_token"])


@pytest.fixture
def customer_headers(client) -> dict:
    resp = sign_up(client, "customer1")
    assert resp.status_code == 201
    return bearer(resp.json()["access_token"])


@pytest.fixture
def restaurant_form() -> dict:
    return {
        "restaurantName": "Taco Town",
        "restaurantDescription": "Street tacos and horchata",
        "restaurantCost": "2",
        "restaurantCuisine": "Mexican",
    }
