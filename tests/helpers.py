"""
Test Helpers
============

HTTP helpers shared by the service tests.
"""

from httpx import AsyncClient, Response


API = "/api"


def cookie_header(cookies: dict[str, str]) -> dict[str, str]:
    """Build an explicit Cookie header from name/value pairs."""
    return {"Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items())}


def session_cookies(response: Response) -> dict[str, str]:
    """Extract the session cookies a response set."""
    return {
        name: value
        for name, value in response.cookies.items()
        if name in ("jwt", "refreshToken")
    }


async def register(client: AsyncClient, username: str, email: str, password: str) -> Response:
    return await client.post(
        f"{API}/users",
        json={"username": username, "email": email, "password": password},
    )


async def login(client: AsyncClient, username: str, password: str) -> dict[str, str]:
    """Log in and return the session cookies, leaving the client's jar empty."""
    response = await client.post(
        f"{API}/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    cookies = session_cookies(response)
    client.cookies.clear()
    return cookies
