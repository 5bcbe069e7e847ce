"""Shared test helpers for contextspine tests."""
