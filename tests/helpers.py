from __future__ import annotations

from fastapi.testclient import TestClient

AUTH = "/api/v1/auth"
TODOS = "/api/v1/tasks/todos"


def register(client: TestClient, username: str, email: str, password: str):
    return client.post(
        f"{AUTH}/register",
        json={"username": username, "email": email, "password": password},
    )


def login(client: TestClient, email: str, password: str):
    return client.post(f"{AUTH}/login", json={"email": email, "password": password})


def sign_up_and_login(
    client: TestClient, username: str, email: str, password: str = "pw123456"
) -> str:
    """Register and log in a user. Returns the session token."""
    assert register(client, username, email, password).status_code == 201
    response = login(client, email, password)
    assert response.status_code == 200
    return response.cookies["token"]


def act_as(client: TestClient, token: str | None) -> None:
    """Make the client's following requests carry `token` as the session cookie."""
    client.cookies.clear()
    if token is not None:
        client.cookies.set("token", token)
