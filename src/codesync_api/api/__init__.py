"""Shared API dependencies."""
