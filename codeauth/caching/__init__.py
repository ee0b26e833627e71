"""Session caching."""

from .session_cache import SessionCache

__all__ = ["SessionCache"]
