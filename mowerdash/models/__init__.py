"""Database model exports."""

from .session import MowerSession

__all__ = ["MowerSession"]
