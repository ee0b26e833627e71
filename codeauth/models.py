"""
Typed results returned by the CodeAuth client.

Every operation returns a result model rather than raising: ``error`` is
``ErrorCode.NO_ERROR`` on success and carries the remote (or connection)
error code otherwise.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class ErrorCode(str, Enum):
    """Error codes documented by the CodeAuth service, plus the local connection error."""
    NO_ERROR = "no_error"
    CONNECTION_ERROR = "connection_error"
    BAD_JSON = "bad_json"
    PROJECT_NOT_FOUND = "project_not_found"
    BAD_IP_ADDRESS = "bad_ip_address"
    RATE_LIMIT_REACHED = "rate_limit_reached"
    BAD_EMAIL = "bad_email"
    BAD_CODE = "bad_code"
    BAD_SOCIAL_TYPE = "bad_social_type"
    BAD_AUTHORIZATION_CODE = "bad_authorization_code"
    BAD_SESSION_TOKEN = "bad_session_token"
    OUT_OF_REFRESH = "out_of_refresh"
    BAD_INVALIDATE_TYPE = "bad_invalidate_type"
    INTERNAL_ERROR = "internal_error"


class SocialType(str, Enum):
    """Social OAuth2 providers supported by the service."""
    GOOGLE = "google"
    MICROSOFT = "microsoft"
    APPLE = "apple"


class InvalidateType(str, Enum):
    """Scopes accepted by /session/invalidate."""
    ONLY_THIS = "only_this"
    ALL = "all"
    ALL_BUT_THIS = "all_but_this"


class CodeAuthResult(BaseModel):
    """Base result: just the error discriminant."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Codes the service adds later are kept verbatim as plain strings.
    error: Union[ErrorCode, str] = Field(default=ErrorCode.NO_ERROR, union_mode="left_to_right")

    @property
    def ok(self) -> bool:
        return self.error == ErrorCode.NO_ERROR

    @property
    def error_code(self) -> str:
        """The error as a plain string, whether or not it is a known code."""
        return self.error.value if isinstance(self.error, ErrorCode) else self.error

    @classmethod
    def from_response(cls, data: Dict[str, Any]):
        """Build a result from a transport response.

        Failed responses keep only the error code so that partially filled
        success fields never leak into an error result.
        """
        error = data.get("error", ErrorCode.INTERNAL_ERROR)
        if error != ErrorCode.NO_ERROR.value:
            return cls.failure(error)
        try:
            return cls.model_validate(data)
        except ValidationError:
            # A success body we cannot read is a response parse failure.
            return cls.failure(ErrorCode.CONNECTION_ERROR)

    @classmethod
    def failure(cls, error: Union[ErrorCode, str]):
        return cls.model_construct(error=_coerce_error(error))


class SignInEmailResult(CodeAuthResult):
    """Result of /signin/email."""


class SignInSocialResult(CodeAuthResult):
    """Result of /signin/social."""

    signin_url: Optional[str] = None


SESSION_FIELDS = ("session_token", "email", "expiration", "refresh_left")


class SessionRecord(CodeAuthResult):
    """A session known to the service; the unit stored by the session cache."""

    session_token: Optional[str] = None
    email: Optional[str] = None
    expiration: Optional[int] = None
    refresh_left: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_session_fields(self):
        # Failed results are built with model_construct and skip this check.
        if self.ok:
            missing = [name for name in SESSION_FIELDS if getattr(self, name) is None]
            if missing:
                raise ValueError(f"successful session result is missing {', '.join(missing)}")
        return self


class SessionInvalidateResult(CodeAuthResult):
    """Result of /session/invalidate."""


def _coerce_error(error: Union[ErrorCode, str]) -> Union[ErrorCode, str]:
    if isinstance(error, ErrorCode):
        return error
    try:
        return ErrorCode(error)
    except ValueError:
        return str(error)
