"""Test doubles and data factories shared across the suite."""
