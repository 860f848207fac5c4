"""
Accounts Routes
===============

API route handlers for the Accounts Service.
"""

from services.accounts.routes import auth, health, users


__all__ = ["auth", "health", "users"]
