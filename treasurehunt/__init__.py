"""Treasure hunt records, management, scoring, a monitor process and an interactive hub."""

__version__ = "0.1.0"
__all__ = ["records", "score", "manager", "monitor", "hub"]