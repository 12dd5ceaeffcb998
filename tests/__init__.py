"""
Tests Package - Unit Tests

Test structure:
- tests/unit/ - Fast, isolated unit tests (no network)
- tests/conftest.py - Shared fixtures: payload builders and a fake transport
"""
