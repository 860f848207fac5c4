#!/usr/bin/env python3
"""
Admin Bootstrap Script
======================

Ensure the account store indexes exist and create (or promote) an admin
account. Registration always produces ``user`` accounts, so the first admin
has to come from here.

Usage:
    python scripts/bootstrap_admin.py --username admin --email admin@example.com
    ADMIN_PASSWORD=... python scripts/bootstrap_admin.py --username admin --email admin@example.com
    python scripts/bootstrap_admin.py --username alice --promote-only

Version: 0.1.0
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path
from typing import Any

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from warden.auth.password import PasswordHasher
from warden.logging import get_logger, setup_logging
from warden.models.account import PASSWORD_MIN_LEN, AccountCreate, Role
from warden.store.base import CredentialStore

logger = get_logger(__name__)


async def bootstrap_admin(
    store: CredentialStore,
    hasher: PasswordHasher,
    username: str,
    email: str | None = None,
    password: str | None = None,
) -> dict[str, Any]:
    """
    Create an admin account, or promote an existing account to admin.

    Returns:
        dict with account_id, username and status
        ('created', 'promoted' or 'already_admin')
    """
    existing = await store.get_by_username(username.strip())
    if existing is not None:
        if existing.role == Role.ADMIN:
            logger.info("bootstrap_already_admin", account_id=existing.id)
            return {"account_id": existing.id, "username": existing.username, "status": "already_admin"}
        updated = await store.update(existing.id, {"role": Role.ADMIN})
        if updated is None:
            raise ValueError(f"account {username!r} was deleted during promotion")
        logger.info("bootstrap_promoted", account_id=updated.id)
        return {"account_id": updated.id, "username": updated.username, "status": "promoted"}

    if not email or not password:
        raise ValueError("email and password are required to create a new admin")

    data = AccountCreate(username=username, email=email, password=password)
    account = await store.create(
        username=data.username,
        email=str(data.email),
        password_hash=await hasher.hash_async(data.password),
        role=Role.ADMIN,
    )
    logger.info("bootstrap_created", account_id=account.id)
    return {"account_id": account.id, "username": account.username, "status": "created"}


async def main(args: argparse.Namespace) -> int:
    """Main bootstrap function."""
    from warden.config import get_settings
    from warden.store import build_store

    settings = get_settings()
    store = build_store(settings)
    hasher = PasswordHasher(settings.argon2)

    password = None
    if not args.promote_only:
        password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
        if len(password) < PASSWORD_MIN_LEN:
            logger.error("bootstrap_password_too_short", min_length=PASSWORD_MIN_LEN)
            return 1

    try:
        await store.connect()
        result = await bootstrap_admin(store, hasher, args.username, args.email, password)
    except Exception as e:
        logger.error("bootstrap_failed", error=str(e), error_type=type(e).__name__)
        return 1
    finally:
        await store.close()

    logger.info("bootstrap_complete", **result)
    return 0


def run() -> None:
    """Console entry point."""
    parser = argparse.ArgumentParser(description="Create or promote a Warden admin account")
    parser.add_argument("--username", required=True, help="Admin username")
    parser.add_argument("--email", help="Admin email (required when creating)")
    parser.add_argument(
        "--promote-only",
        action="store_true",
        help="Only promote an existing account; never create one",
    )

    setup_logging(log_level="INFO", json_logs=False, service_name="bootstrap-admin")
    sys.exit(asyncio.run(main(parser.parse_args())))


if __name__ == "__main__":
    run()
