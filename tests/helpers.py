"""Request helpers shared by the application tests."""

from typing import Any, Dict

from fastapi.testclient import TestClient


def registration(email: str = "ada@example.com", age: int = 36, **overrides: Any) -> Dict[str, Any]:
    """Valid registration body."""
    body = {
        "email": email,
        "password": "Password123!",
        "confirm_password": "Password123!",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "age": age,
    }
    body.update(overrides)
    return body


def register_and_login(client: TestClient, email: str = "ada@example.com", age: int = 36) -> str:
    """Register through the JSON API and return the bearer token."""
    response = client.post("/api/register", json=registration(email=email, age=age))
    assert response.status_code == 200, response.text
    return response.json()["data"]["token"]


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def grant_role(client: TestClient, email: str, role: str) -> None:
    """Assign a role directly through the auth service on the app's event loop."""
    auth_service = client.app.state.auth_service

    async def _grant() -> None:
        user = await auth_service.user_repo.get_user_by_email(email)
        await auth_service.assign_role(user.id, role)

    client.portal.call(_grant)


def csrf_headers(client: TestClient) -> Dict[str, str]:
    """Fetch an anti-forgery token; the cookie lands in the client jar."""
    response = client.get("/auth/csrf-token")
    assert response.status_code == 200
    data = response.json()["data"]
    return {data["header_name"]: data["token"]}
