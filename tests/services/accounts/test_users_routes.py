"""
Tests for Accounts Service User Routes
======================================

Registration, listing, lookup, update and deletion, including the
ownership and role checks in front of them.

Version: 0.1.0
"""

import pytest
from httpx import AsyncClient

from tests.helpers import API, cookie_header, login, register
from warden.auth.password import PasswordHasher
from warden.models.account import Role
from warden.store.memory import MemoryCredentialStore


# ============================================================================
# Registration
# ============================================================================


class TestCreateUser:
    """Tests for POST /users."""

    @pytest.mark.asyncio
    async def test_register(self, client: AsyncClient) -> None:
        response = await register(client, "alice", "alice@example.com", "secret1")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        user = body["user"]
        assert user["username"] == "alice"
        assert user["email"] == "alice@example.com"
        assert user["role"] == "user"
        assert user["id"]
        assert "created_at" in user and "updated_at" in user
        assert "password" not in user
        assert "password_hash" not in user

    @pytest.mark.asyncio
    async def test_register_sets_no_cookies(self, client: AsyncClient) -> None:
        response = await register(client, "alice", "alice@example.com", "secret1")

        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_password_is_hashed(
        self, client: AsyncClient, store: MemoryCredentialStore, hasher: PasswordHasher
    ) -> None:
        await register(client, "alice", "alice@example.com", "secret1")

        account = await store.get_by_username("alice")
        assert account is not None
        assert account.password_hash.startswith("$argon2id$")
        assert hasher.verify(account.password_hash, "secret1")

    @pytest.mark.asyncio
    async def test_email_lowercased_username_trimmed(self, client: AsyncClient) -> None:
        response = await register(client, "  alice  ", "Alice@Example.COM", "secret1")

        assert response.status_code == 201
        assert response.json()["user"]["username"] == "alice"
        assert response.json()["user"]["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_role_in_body_is_ignored(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{API}/users",
            json={
                "username": "mallory",
                "email": "mallory@example.com",
                "password": "secret1",
                "role": "admin",
            },
        )

        assert response.status_code == 201
        assert response.json()["user"]["role"] == "user"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client: AsyncClient) -> None:
        await register(client, "alice", "alice@example.com", "secret1")

        response = await register(client, "alice", "other@example.com", "secret2")

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email or username already exists"}

    @pytest.mark.asyncio
    async def test_duplicate_email_case_insensitive(self, client: AsyncClient) -> None:
        await register(client, "alice", "alice@example.com", "secret1")

        response = await register(client, "bob", "ALICE@example.com", "secret2")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_short_password(self, client: AsyncClient) -> None:
        response = await register(client, "alice", "alice@example.com", "12345")

        assert response.status_code == 400
        assert response.json() == {
            "error": "password: String should have at least 6 characters"
        }

    @pytest.mark.asyncio
    async def test_missing_password(self, client: AsyncClient) -> None:
        response = await client.post(
            f"{API}/users", json={"username": "alice", "email": "alice@example.com"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "password: Field required"}

    @pytest.mark.asyncio
    async def test_blank_username(self, client: AsyncClient) -> None:
        response = await register(client, "   ", "alice@example.com", "secret1")

        assert response.status_code == 400
        assert response.json()["error"].startswith("username:")

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient) -> None:
        response = await register(client, "alice", "not-an-email", "secret1")

        assert response.status_code == 400
        assert response.json()["error"].startswith("email:")

    @pytest.mark.asyncio
    async def test_all_problems_reported(self, client: AsyncClient) -> None:
        response = await client.post(f"{API}/users", json={})

        assert response.status_code == 400
        error = response.json()["error"]
        for field in ("username", "email", "password"):
            assert f"{field}: Field required" in error
        assert error.count(", ") == 2


# ============================================================================
# Listing and Lookup
# ============================================================================


class TestReadUsers:
    """Tests for GET /users and GET /users/{username}."""

    @pytest.mark.asyncio
    async def test_list_requires_auth(self, client: AsyncClient) -> None:
        response = await client.get(f"{API}/users")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authorized, no token"}

    @pytest.mark.asyncio
    async def test_list_usernames_only(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.get(f"{API}/users", headers=cookie_header(seeded["user"]))

        assert response.status_code == 200
        assert response.json() == {
            "users": [{"username": "admin"}, {"username": "testuser"}],
            "count": 2,
        }

    @pytest.mark.asyncio
    async def test_get_user(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.get(
            f"{API}/users/admin", headers=cookie_header(seeded["user"])
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["username"] == "admin"
        assert user["role"] == "admin"
        assert "password_hash" not in user

    @pytest.mark.asyncio
    async def test_get_unknown_user(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.get(
            f"{API}/users/nobody", headers=cookie_header(seeded["user"])
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient) -> None:
        response = await client.get(
            f"{API}/users", headers=cookie_header({"jwt": "not.a.token"})
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Not authorized, token failed"}

    @pytest.mark.asyncio
    async def test_token_of_deleted_account(
        self,
        client: AsyncClient,
        seeded: dict[str, dict[str, str]],
        store: MemoryCredentialStore,
    ) -> None:
        account = await store.get_by_username("testuser")
        assert account is not None
        await store.delete(account.id)

        response = await client.get(f"{API}/users", headers=cookie_header(seeded["user"]))

        assert response.status_code == 401
        assert response.json() == {"error": "User not found"}


# ============================================================================
# Update
# ============================================================================


class TestUpdateUser:
    """Tests for PUT /users/{username}."""

    @pytest.mark.asyncio
    async def test_self_update_email(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"email": "New@Example.com"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User updated successfully"
        assert body["user"]["email"] == "new@example.com"

    @pytest.mark.asyncio
    async def test_self_update_password(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"password": "brand-new"},
            headers=cookie_header(seeded["user"]),
        )
        assert response.status_code == 200

        failed = await client.post(
            f"{API}/login", json={"username": "testuser", "password": "password123"}
        )
        assert failed.status_code == 401
        await login(client, "testuser", "brand-new")

    @pytest.mark.asyncio
    async def test_self_role_change_ignored(
        self,
        client: AsyncClient,
        seeded: dict[str, dict[str, str]],
        store: MemoryCredentialStore,
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"role": "admin"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "user"
        account = await store.get_by_username("testuser")
        assert account is not None
        assert account.role == Role.USER

    @pytest.mark.asyncio
    async def test_role_ignored_other_fields_applied(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"role": "admin", "email": "changed@example.com"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "user"
        assert response.json()["user"]["email"] == "changed@example.com"

    @pytest.mark.asyncio
    async def test_user_cannot_update_other(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/admin",
            json={"email": "pwned@example.com"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 403
        assert response.json() == {"error": "You do not have permission to update this user"}

    @pytest.mark.asyncio
    async def test_forbidden_before_body_validation(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/admin",
            json={},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unauthenticated_before_body_validation(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(f"{API}/users/testuser", json={"password": "1"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_promotes_user(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"role": "admin"},
            headers=cookie_header(seeded["admin"]),
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"

        # The promoted user's existing session sees the new role immediately
        deleted = await client.delete(
            f"{API}/users/admin", headers=cookie_header(seeded["user"])
        )
        assert deleted.status_code == 200

    @pytest.mark.asyncio
    async def test_admin_updates_unknown_user(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/nobody",
            json={"email": "nobody@example.com"},
            headers=cookie_header(seeded["admin"]),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_empty_update(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser", json={}, headers=cookie_header(seeded["user"])
        )

        assert response.status_code == 400
        assert "at least one of email, password or role" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_short_password_update(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"password": "123"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "password: String should have at least 6 characters"
        }

    @pytest.mark.asyncio
    async def test_invalid_role(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"role": "superuser"},
            headers=cookie_header(seeded["admin"]),
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("role:")

    @pytest.mark.asyncio
    async def test_email_taken(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.put(
            f"{API}/users/testuser",
            json={"email": "admin@test.com"},
            headers=cookie_header(seeded["user"]),
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email or username already exists"}


# ============================================================================
# Deletion
# ============================================================================


class TestDeleteUser:
    """Tests for DELETE /users/{username}."""

    @pytest.mark.asyncio
    async def test_admin_deletes_user(
        self,
        client: AsyncClient,
        seeded: dict[str, dict[str, str]],
        store: MemoryCredentialStore,
    ) -> None:
        response = await client.delete(
            f"{API}/users/testuser", headers=cookie_header(seeded["admin"])
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert await store.get_by_username("testuser") is None

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.delete(
            f"{API}/users/admin", headers=cookie_header(seeded["admin"])
        )

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot delete your own account"}

    @pytest.mark.asyncio
    async def test_user_cannot_delete(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.delete(
            f"{API}/users/admin", headers=cookie_header(seeded["user"])
        )

        assert response.status_code == 403
        assert response.json() == {"error": "You do not have permission to perform this action"}

    @pytest.mark.asyncio
    async def test_user_cannot_delete_self_either(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        """Test the role check runs before the self check."""
        response = await client.delete(
            f"{API}/users/testuser", headers=cookie_header(seeded["user"])
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_unknown(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        response = await client.delete(
            f"{API}/users/nobody", headers=cookie_header(seeded["admin"])
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_requires_auth(self, client: AsyncClient) -> None:
        response = await client.delete(f"{API}/users/anyone")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_log_in(
        self, client: AsyncClient, seeded: dict[str, dict[str, str]]
    ) -> None:
        await client.delete(f"{API}/users/testuser", headers=cookie_header(seeded["admin"]))

        response = await client.post(
            f"{API}/login", json={"username": "testuser", "password": "password123"}
        )

        assert response.status_code == 401
