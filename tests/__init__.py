"""
WARDEN Test Suite
=================

Test organization:
- tests/unit/               - Unit tests (no external dependencies)
- tests/services/accounts/  - HTTP tests against the Accounts app, in-memory store

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=warden             # With coverage
"""
