"""Protocol definitions for pluggable adapters."""

from .content import ContentProvider

__all__ = ["ContentProvider"]
