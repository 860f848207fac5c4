"""
Accounts Services
=================

Business logic services for account management.

Services:
- AccountService: Registration, login, lookup, update and deletion

Version: 0.1.0
"""

from services.accounts.services.accounts import AccountService


__all__ = [
    "AccountService",
]
