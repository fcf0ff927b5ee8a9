"""
Tests Package - Unit Tests

Test structure:
- tests/unit/ - Fast, isolated unit tests (Redis is mocked)
- tests/conftest.py - Shared pytest fixtures
"""
