"""Coding session feature exports."""

__all__ = [
    "repository",
    "router",
    "schemas",
    "service",
]
