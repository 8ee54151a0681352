"""Shared helpers used across features."""
