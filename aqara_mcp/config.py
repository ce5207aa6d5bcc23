"""Configuration for the Aqara MCP server."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_REGION,
    ENV_ACCESS_TOKEN,
    ENV_APP_ID,
    ENV_APP_KEY,
    ENV_APP_SECRET,
    ENV_KEY_ID,
    ENV_REGION,
    REGION_DOMAINS,
    REQUIRED_ENV_VARS,
)
from .infrastructure.errors import AqaraConfigurationError

_LOGGER = logging.getLogger(__name__)


def get_base_url(region: str | None) -> str:
    """Return the API base URL for a region, falling back to the default region.

    Example:
        >>> get_base_url("eu")
        'https://open-ger.aqara.com'
        >>> get_base_url("mars")
        'https://open-usa.aqara.com'
    """
    return REGION_DOMAINS.get((region or "").lower(), REGION_DOMAINS[DEFAULT_REGION])


def validate_environment(environ: Mapping[str, str] | None = None) -> None:
    """Check that every mandatory credential is present.

    Raises:
        AqaraConfigurationError: listing every missing variable, and only those.
    """
    if environ is None:
        environ = os.environ
    missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
    if missing:
        raise AqaraConfigurationError(missing)


class AqaraConfig(BaseModel):
    """Credentials and region of an Aqara developer application.

    Immutable after construction.

    Attributes:
        app_id: Application ID from the Aqara developer console.
        app_key: Application key.
        key_id: Key ID used for signing.
        app_secret: Secret used as HMAC key (hidden from repr).
        region: Region code selecting the API endpoint.
        access_token: Optional user access token.
    """

    model_config = {"frozen": True}

    app_id: str = Field(..., min_length=1, description="Application ID")
    app_key: str = Field(..., min_length=1, description="Application key")
    key_id: str = Field(..., min_length=1, description="Key ID")
    app_secret: str = Field(..., min_length=1, repr=False, description="Application secret")
    region: str = Field(default=DEFAULT_REGION, description="API region (cn, usa, eu, kr, ru, sg)")
    access_token: str | None = Field(default=None, repr=False, description="Optional access token")

    @property
    def base_url(self) -> str:
        """Base endpoint for the configured region."""
        return get_base_url(self.region)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AqaraConfig:
        """Build a config from environment variables.

        Raises:
            AqaraConfigurationError: If any mandatory variable is missing.
        """
        if environ is None:
            environ = os.environ
        validate_environment(environ)

        region = environ.get(ENV_REGION) or DEFAULT_REGION
        if region.lower() not in REGION_DOMAINS:
            _LOGGER.warning("Unknown region %s, using %s endpoint", region, DEFAULT_REGION)

        return cls(
            app_id=environ[ENV_APP_ID],
            app_key=environ[ENV_APP_KEY],
            key_id=environ[ENV_KEY_ID],
            app_secret=environ[ENV_APP_SECRET],
            region=region,
            access_token=environ.get(ENV_ACCESS_TOKEN) or None,
        )
