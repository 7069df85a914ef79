"""Request helpers shared by the HTTP tests."""

from fastapi.testclient import TestClient

from src.core.config import settings


ADMIN_PASSWORD = "admin-pass"


def login(client: TestClient, username: str, password: str) -> dict:
    """Sign in and return the response body; the session cookie stays on the client."""
    response = client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def login_admin(client: TestClient) -> dict:
    return login(client, settings.admin_username, ADMIN_PASSWORD)


def provision(client: TestClient, username: str, password: str = "dev-pass") -> dict:
    """Provision a developer as the currently signed-in manager/admin."""
    response = client.post(
        "/api/developers",
        json={"username": username, "email": f"{username}@example.com", "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()
