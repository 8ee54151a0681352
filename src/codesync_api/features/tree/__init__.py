"""Virtual file tree feature exports."""

__all__ = [
    "archive",
    "exceptions",
    "http",
    "legacy",
    "nodes",
    "operations",
    "paths",
    "router",
    "schemas",
    "search",
    "service",
    "store",
]
