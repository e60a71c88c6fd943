"""Canonical Pydantic models and enumerations shared across bnetapi.

This is the single source of truth for data shapes in the project. Every
other module imports from here rather than defining its own models. The
contents fall into three groups:

**Enumerations** -- closed value sets used at the API boundary:
    :class:`Region`, :class:`Mode`, :class:`ResponseFormat`,
    :class:`NamespaceScope`, :class:`Scope`, and :class:`Game`.

**Configuration** -- :class:`Config`, serialised as JSON in the user's
config directory and read-only once handed to the client.

**Per-call models** -- :class:`RequestOptions` (the typed control options
of a single call), :class:`ResolvedRequest` (derived, never stored) and
:class:`AccessToken` (owned by :class:`~bnetapi.auth.token.TokenManager`).
"""

from __future__ import annotations

import enum
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from bnetapi.exceptions import ConfigurationError


# --- Cache TTL presets (seconds) ---

CACHE_MINUTE = 60
CACHE_HOUR = 60 * CACHE_MINUTE
CACHE_DAY = 24 * CACHE_HOUR
CACHE_TRIMESTER = 90 * CACHE_DAY


# --- Enumerations ---


class Region(str, enum.Enum):
    """API regions. China endpoints are not supported."""

    US = "us"
    EU = "eu"
    KR = "kr"
    TW = "tw"


class Mode(str, enum.Enum):
    """Execution mode of a :class:`~bnetapi.client.executor.RequestExecutor`.

    ``REGULAR`` returns the decoded payload only and raises on failure.
    ``EXTENDED`` returns ``(response, payload)``, never consults the cache,
    and hands non-success responses back as data instead of raising.
    """

    REGULAR = "regular"
    EXTENDED = "extended"


class ResponseFormat(str, enum.Enum):
    """Shape of decoded payloads.

    * ``JSON`` -- parsed generic data (dicts and lists).
    * ``OBJECT`` -- structured data with attribute access
      (nested :class:`types.SimpleNamespace`).
    * ``RAW`` -- the body as text, undecoded.
    """

    JSON = "json"
    OBJECT = "object"
    RAW = "raw"


class NamespaceScope(str, enum.Enum):
    """Dataset selector for endpoints that require a ``namespace`` parameter."""

    DYNAMIC = "dynamic"
    STATIC = "static"
    PROFILE = "profile"


class Scope(str, enum.Enum):
    """API category; each one maps to a base URL template."""

    GAME_DATA = "game_data"
    COMMUNITY = "community"
    PROFILE = "profile"
    MEDIA = "media"
    USER_PROFILE = "user_profile"
    SEARCH = "search"


class Game(str, enum.Enum):
    """Path segment identifying the game in API URLs."""

    WOW = "wow"
    DIABLO = "d3"
    HEARTHSTONE = "hearthstone"
    STARCRAFT = "sc2"


# --- Configuration ---


class Config(BaseModel):
    """Client configuration.

    Credential fields accept either a literal value or a credential source
    (``env:VAR`` or ``file:/path``) resolved lazily by
    :func:`bnetapi.config.resolve_credential`, so that a saved config file
    need not contain secrets.

    Example::

        Config(
            client_id="env:BNET_CLIENT_ID",
            client_secret="env:BNET_CLIENT_SECRET",
            region=Region.EU,
            use_cache=True,
            cache_url="redis://localhost:6379/0",
        )
    """

    client_id: Optional[str] = Field(default=None, description="OAuth client id or source")
    client_secret: Optional[str] = Field(
        default=None, repr=False, description="OAuth client secret or source"
    )
    region: Region = Field(default=Region.US, description="Default API region")
    use_cache: bool = Field(default=False, description="Cache GET responses")
    cache_url: str = Field(
        default="redis://localhost:6379/0",
        description="Cache backend: redis://host:port/db, disk:///path, or memory://",
    )
    format: ResponseFormat = Field(
        default=ResponseFormat.JSON, description="Default response format"
    )
    default_ttl: int = Field(
        default=CACHE_DAY, gt=0, description="Cache TTL in seconds when a call sets none"
    )
    timeout: Optional[float] = Field(
        default=30.0, description="Per-request timeout in seconds passed to httpx"
    )
    verify_ssl: bool = True
    auth_host: str = Field(default="battle.net", description="OAuth host suffix")
    api_host: str = Field(default="api.blizzard.com", description="API host suffix")
    access_token: Optional[str] = Field(
        default=None,
        repr=False,
        description="Preset bearer token or source; skips the client-credentials exchange",
    )


# --- Per-call models ---


class RequestOptions(BaseModel):
    """Control options of a single API call.

    These keys steer the request itself and never reach the wire as API
    fields. Every other keyword a caller passes is treated as an API query
    parameter. Both ``snake_case`` names and their ``camelCase`` aliases
    (``ignoreCache``, ``accessToken``) are accepted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    locale: Optional[str] = None
    namespace: Optional[NamespaceScope] = None
    classic: bool = False
    access_token: Optional[str] = None
    ignore_cache: bool = False
    ttl: Optional[int] = Field(default=None, gt=0)
    since: Optional[datetime] = None
    headers: dict[str, str] = Field(default_factory=dict)
    format: Optional[ResponseFormat] = None

    @field_validator("ttl", mode="before")
    @classmethod
    def _ttl_to_seconds(cls, value: Any) -> Any:
        # Fractional durations round up so sub-second TTLs stay positive.
        if isinstance(value, timedelta):
            value = value.total_seconds()
        if isinstance(value, float):
            return math.ceil(value)
        return value

    @classmethod
    def partition(cls, raw: Mapping[str, Any]) -> tuple[RequestOptions, dict[str, Any]]:
        """Split *raw* keyword options into control options and API fields.

        Args:
            raw: Everything the caller passed for one call.

        Returns:
            A tuple ``(options, fields)`` where ``fields`` holds only the
            keys that are not control options, in their original order.

        Raises:
            ConfigurationError: If a control option has an invalid value.
        """
        control: dict[str, Any] = {}
        fields: dict[str, Any] = {}
        for key, value in raw.items():
            if key in CONTROL_KEYS:
                control[key] = value
            else:
                fields[key] = value
        try:
            return cls.model_validate(control), fields
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid request options: {exc}") from exc


CONTROL_KEYS: frozenset[str] = frozenset(
    {name for name in RequestOptions.model_fields}
    | {to_camel(name) for name in RequestOptions.model_fields}
)
"""Option names (and camelCase aliases) stripped before query serialisation."""


class ResolvedRequest(BaseModel):
    """A fully resolved GET request. Derived per call, never stored."""

    model_config = ConfigDict(frozen=True)

    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    cache_key: str
    options: RequestOptions


class AccessToken(BaseModel):
    """An OAuth bearer token and its absolute expiry (UTC)."""

    model_config = ConfigDict(frozen=True)

    value: str
    expires_at: datetime

    def expires_within(self, seconds: float, now: Optional[datetime] = None) -> bool:
        """Return ``True`` if the token expires less than *seconds* from *now*."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=seconds) >= self.expires_at
