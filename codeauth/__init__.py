"""
CodeAuth Python SDK.

Email one-time-code and social OAuth2 sign-in, plus session token
inspection, refresh and invalidation, with an in-process session cache.
"""

from .client import CodeAuthClient, initialize, get_client
from .models import (
    ErrorCode,
    InvalidateType,
    SocialType,
    SessionRecord,
    SignInEmailResult,
    SignInSocialResult,
    SessionInvalidateResult,
)
from .shared.config import CodeAuthSettings, get_settings
from .shared.errors import (
    CodeAuthException,
    NotInitializedError,
    AlreadyInitializedError,
    ConfigurationError,
)

__version__ = "1.0.0"
__all__ = [
    "CodeAuthClient",
    "initialize",
    "get_client",
    "ErrorCode",
    "InvalidateType",
    "SocialType",
    "SessionRecord",
    "SignInEmailResult",
    "SignInSocialResult",
    "SessionInvalidateResult",
    "CodeAuthSettings",
    "get_settings",
    "CodeAuthException",
    "NotInitializedError",
    "AlreadyInitializedError",
    "ConfigurationError",
]
