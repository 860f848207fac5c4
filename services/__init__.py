"""
WARDEN Services
===============

HTTP services built on the Warden shared library.

Services:
- accounts: Account registration, login and management
"""

__all__ = [
    "accounts",
]
