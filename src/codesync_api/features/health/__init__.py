"""Health feature exports."""

__all__ = ["router"]
