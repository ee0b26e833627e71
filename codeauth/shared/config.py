"""
Shared configuration management for the CodeAuth SDK.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Below this many seconds the cache barely dampens the service's rate limits.
RECOMMENDED_MIN_CACHE_DURATION = 15


class CodeAuthSettings(BaseSettings):
    """Settings read from ``CODEAUTH_*`` environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CODEAUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project
    endpoint: Optional[str] = Field(default=None, description="Project endpoint, host and path prefix without a scheme")
    project_id: Optional[str] = Field(default=None, description="Project ID from the project settings")

    # Session cache
    use_cache: bool = Field(default=True)
    cache_duration: int = Field(default=30, ge=0, description="Cache generation lifetime in seconds")


class ClientConfig(BaseModel):
    """Write-once configuration captured by ``CodeAuthClient.initialize``."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    project_id: str
    use_cache: bool = True
    cache_duration: int = Field(default=30, ge=0)

    @property
    def base_url(self) -> str:
        return f"https://{self.endpoint}"


def get_settings(**overrides) -> CodeAuthSettings:
    """Get SDK settings, with keyword overrides taking precedence over the environment."""
    return CodeAuthSettings(**overrides)
