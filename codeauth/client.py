"""
CodeAuth client: sign-in and session operations backed by the session cache.
"""

import threading
import time
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

import httpx

from .adapters.transport import CodeAuthTransport
from .caching.session_cache import SessionCache
from .models import (
    InvalidateType,
    SessionInvalidateResult,
    SessionRecord,
    SignInEmailResult,
    SignInSocialResult,
    SocialType,
)
from .shared.config import ClientConfig, CodeAuthSettings, RECOMMENDED_MIN_CACHE_DURATION
from .shared.errors import AlreadyInitializedError, ConfigurationError, NotInitializedError
from .shared.logging import get_logger, redact_token
from .shared.metrics import MetricsCollector


class _ClientState(NamedTuple):
    config: ClientConfig
    transport: CodeAuthTransport
    cache: SessionCache


class CodeAuthClient:
    """Client for the CodeAuth sign-in and session API.

    Construct once per application, call :meth:`initialize` exactly once, then
    share the instance between threads. Operations never raise for network or
    service failures; inspect ``result.error`` instead.
    """

    def __init__(self, http_client: Optional[httpx.Client] = None,
                 clock: Callable[[], float] = time.monotonic,
                 metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger("codeauth.client")
        self.metrics = metrics if metrics is not None else MetricsCollector()
        self._http_client = http_client
        self._clock = clock
        self._init_lock = threading.Lock()
        self._state: Optional[_ClientState] = None

    @classmethod
    def from_settings(cls, settings: Optional[CodeAuthSettings] = None, **kwargs) -> "CodeAuthClient":
        """Build and initialize a client from ``CODEAUTH_*`` settings."""
        settings = settings or CodeAuthSettings()
        missing = [name for name in ("endpoint", "project_id") if not getattr(settings, name)]
        if missing:
            raise ConfigurationError(
                "CodeAuth settings are incomplete",
                details={"missing": missing}
            )

        client = cls(**kwargs)
        client.initialize(
            settings.endpoint,
            settings.project_id,
            use_cache=settings.use_cache,
            cache_duration=settings.cache_duration
        )
        return client

    def initialize(self, endpoint: str, project_id: str, use_cache: bool = True,
                   cache_duration: int = 30) -> None:
        """
        Initialize the client. May only be called once.

        endpoint - The endpoint of your project, without a scheme. Found in the project settings.
        project_id - Your project ID. Found in the project settings.
        use_cache - Cache session tokens returned by verify, info and refresh calls
            and drop them again on refresh and invalidate. Speeds up repeated
            session lookups and mitigates some rate limits.
        cache_duration - Seconds a cache generation lives before it is cleared
            wholesale. At least 15 seconds is needed to mitigate most rate limits.
        """
        with self._init_lock:
            if self._state is not None:
                raise AlreadyInitializedError()

            config = ClientConfig(
                endpoint=endpoint,
                project_id=project_id,
                use_cache=use_cache,
                cache_duration=cache_duration
            )
            if config.use_cache and config.cache_duration < RECOMMENDED_MIN_CACHE_DURATION:
                self.logger.warning(
                    "Cache duration is too short to mitigate most rate limits",
                    cache_duration=config.cache_duration,
                    recommended_min=RECOMMENDED_MIN_CACHE_DURATION
                )

            transport = CodeAuthTransport(config.base_url, http_client=self._http_client, metrics=self.metrics)
            cache = SessionCache(
                config.cache_duration,
                enabled=config.use_cache,
                clock=self._clock,
                metrics=self.metrics
            )
            self._state = _ClientState(config, transport, cache)

        self.logger.info(
            "CodeAuth client initialized",
            endpoint=config.endpoint,
            use_cache=config.use_cache,
            cache_duration=config.cache_duration
        )

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def config(self) -> ClientConfig:
        return self._ensure_initialized().config

    @property
    def cache(self) -> SessionCache:
        return self._ensure_initialized().cache

    def _ensure_initialized(self) -> _ClientState:
        state = self._state
        if state is None:
            raise NotInitializedError()
        return state

    def _call(self, state: _ClientState, path: str, **fields: Any) -> Dict[str, Any]:
        body: Dict[str, Any] = {"project_id": state.config.project_id}
        body.update(fields)
        return state.transport.post(path, body)

    # --------------------------------------------------------------
    # Sign in
    # --------------------------------------------------------------

    def signin_email(self, email: str) -> SignInEmailResult:
        """
        Begin the sign in or register flow by emailing the user a one time code.

        A successful result has ``error == "no_error"`` and nothing else.
        """
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(state, "/signin/email", email=email)
        return SignInEmailResult.from_response(data)

    def signin_email_verify(self, email: str, code: str) -> SessionRecord:
        """Exchange the emailed one time code for a session token."""
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(state, "/signin/emailverify", email=email, code=code)
        result = SessionRecord.from_response(data)
        self._remember(state, result)
        return result

    def signin_social(self, social_type: Union[SocialType, str]) -> SignInSocialResult:
        """Create a social OAuth2 sign in URL ("google", "microsoft" or "apple")."""
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(state, "/signin/social", social_type=_value(social_type))
        return SignInSocialResult.from_response(data)

    def signin_social_verify(self, social_type: Union[SocialType, str],
                             authorization_code: str) -> SessionRecord:
        """Exchange the authorization code returned by the social provider for a session token."""
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(
            state,
            "/signin/socialverify",
            social_type=_value(social_type),
            authorization_code=authorization_code
        )
        result = SessionRecord.from_response(data)
        self._remember(state, result)
        return result

    # --------------------------------------------------------------
    # Sessions
    # --------------------------------------------------------------

    def session_info(self, session_token: str) -> SessionRecord:
        """Get the email, expiration and remaining refreshes of a session token.

        Served from the cache when the token was seen in the current generation.
        """
        state = self._ensure_initialized()

        cached = state.cache.get(session_token)
        if cached is not None:
            return cached

        data = self._call(state, "/session/info", session_token=session_token)
        data.setdefault("session_token", session_token)
        result = SessionRecord.from_response(data)
        if result.ok and state.config.use_cache:
            state.cache.put(session_token, result)
        return result

    def session_refresh(self, session_token: str) -> SessionRecord:
        """Trade a session token for a new one. The old token stops working."""
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(state, "/session/refresh", session_token=session_token)
        result = SessionRecord.from_response(data)
        if result.ok and state.config.use_cache:
            state.cache.replace(session_token, result.session_token, result)
            self.logger.debug(
                "Session refreshed",
                old_session_token=redact_token(session_token),
                session_token=redact_token(result.session_token),
                refresh_left=result.refresh_left
            )
        return result

    def session_invalidate(self, session_token: str,
                           invalidate_type: Union[InvalidateType, str]) -> SessionInvalidateResult:
        """
        Invalidate session tokens.

        invalidate_type - "only_this", "all" or "all_but_this". Passed through
            to the service as is.
        """
        state = self._ensure_initialized()
        state.cache.check_epoch()

        data = self._call(
            state,
            "/session/invalidate",
            session_token=session_token,
            invalidate_type=_value(invalidate_type)
        )
        result = SessionInvalidateResult.from_response(data)
        if result.ok and state.config.use_cache:
            state.cache.remove(session_token)
        return result

    # --------------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop every cached session."""
        self._ensure_initialized().cache.clear()

    def close(self) -> None:
        """Release the HTTP connection pool.

        Operations called after this return ``connection_error`` results.
        """
        state = self._state
        if state is not None:
            state.transport.close()

    def __enter__(self) -> "CodeAuthClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _remember(self, state: _ClientState, result: SessionRecord) -> None:
        if result.ok and state.config.use_cache:
            state.cache.put(result.session_token, result)


def _value(option: Union[InvalidateType, SocialType, str]) -> str:
    return option.value if isinstance(option, (InvalidateType, SocialType)) else option


_default_client = CodeAuthClient()


def initialize(endpoint: str, project_id: str, use_cache: bool = True,
               cache_duration: int = 30) -> CodeAuthClient:
    """Initialize the process-wide default client and return it."""
    _default_client.initialize(endpoint, project_id, use_cache=use_cache, cache_duration=cache_duration)
    return _default_client


def get_client() -> CodeAuthClient:
    """Get the process-wide default client (initialized or not)."""
    return _default_client
