"""HTTP adapters for the CodeAuth service."""

from .transport import CodeAuthTransport

__all__ = ["CodeAuthTransport"]
