"""Core domain types."""

from relaywatch.core.enums import Side

__all__ = ["Side"]
