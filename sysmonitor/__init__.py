"""Host system information report service."""

__version__ = "0.1.0"
