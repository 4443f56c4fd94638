"""Pydantic configuration models for fluent_http."""

from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .http import StatusCodeRange


class AuthType(str, Enum):
    """Authentication types applied to every request of a client."""

    NONE = "none"
    BEARER = "bearer"
    BASIC = "basic"


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    import os
    import re

    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class RetryConfig(BaseModel):
    """Default retry behavior for new requests."""

    count: int = Field(0, ge=0, description="Retries after the first attempt")
    delay: float = Field(1.0, ge=0, description="Seconds between attempts")

    model_config = {"extra": "forbid"}


class AuthConfig(BaseModel):
    """Credentials added to every request.

    Supports environment variable expansion in secrets using $VAR or
    ${VAR} syntax, e.g. ``token: $API_TOKEN``.
    """

    type: AuthType = Field(AuthType.NONE, description="Authentication type")
    token: Optional[str] = Field(None, description="Bearer token")
    username: Optional[str] = Field(None, description="Username for basic auth")
    password: Optional[str] = Field(None, description="Password for basic auth")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in sensitive fields after init."""
        if self.token:
            object.__setattr__(self, "token", _expand_env_var(self.token))
        if self.password:
            object.__setattr__(self, "password", _expand_env_var(self.password))


class ClientConfig(BaseModel):
    """
    Root configuration model for an HttpClient.

    Example:
        config = ClientConfig(
            base_url="https://api.example.com/v1",
            retry=RetryConfig(count=2, delay=0.5),
        )

    YAML format:
        base_url: https://api.example.com/v1
        timeout: 10
        retry:
          count: 2
          delay: 0.5
        auth:
          type: bearer
          token: $API_TOKEN
    """

    base_url: Optional[str] = Field(None, description="Base URL that string paths are resolved against")
    user_agent: Optional[str] = Field(None, description="User-Agent header for every request")
    headers: dict[str, str] = Field(default_factory=dict, description="Headers added to every request")
    timeout: float = Field(30.0, ge=0, description="Request timeout in seconds (0 = no timeout)")
    accept_status_codes: tuple[int, int] = Field(
        (200, 299),
        description="Inclusive range of status codes treated as success",
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    # Transport
    proxy: Optional[str] = Field(None, description="HTTP proxy URL")
    max_content_size: int = Field(50 * 1024 * 1024, ge=1, description="Maximum response size in bytes")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("accept_status_codes")
    @classmethod
    def _check_status_range(cls, value: tuple[int, int]) -> tuple[int, int]:
        StatusCodeRange.coerce(value)
        return value

    @property
    def status_code_range(self) -> StatusCodeRange:
        return StatusCodeRange.coerce(self.accept_status_codes)

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClientConfig":
        """
        Load config from YAML string.

        Raises:
            ValueError: If the YAML is malformed or fails validation
        """
        import yaml

        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClientConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
