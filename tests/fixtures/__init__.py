"""Test fixtures for the social graph service.

This package provides reusable test fixtures:
- core: clocks, stores, core components and the service with seeded accounts
- api: TestClient wired to a fresh service
"""
