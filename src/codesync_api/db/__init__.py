"""Persistence layer: declarative base, column types and the engine holder."""
