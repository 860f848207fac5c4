"""
Accounts Service
================

User-account backend: registration, login, per-user read/update/delete
and role-based authorization.

Features:
- Argon2id credential storage
- Cookie-borne access/refresh sessions with silent renewal
- Ownership and admin policy gates
- Rate limiting and security headers

Port: 5000
"""

__version__ = "0.1.0"
