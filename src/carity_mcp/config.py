#!/usr/bin/env python3
"""
Configuration and API Client for the Carity MCP Server
Contains environment loading, the settings object, logging setup and the
Carity API client
"""

import math
import os
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# Variables that n8n may use to smuggle a whole "KEY=VALUE,KEY=VALUE" list
COMMA_SEPARATED_ENV_VARS = ["SERVER_API_KEY", "API_KEY", "CARITY_ENV", "CARITY_API_URL", "CARITY_BASE_URL"]


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging; records go to stderr so stdio stays clean"""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # basicConfig is a no-op once handlers exist; a later call still adjusts the level
    logging.getLogger().setLevel(numeric_level)


def parse_comma_separated_env_vars(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Expand a comma-separated KEY=VALUE list found in a known variable.

    Only the first known variable containing a comma is expanded. Returns the
    pairs that were written back into ``environ``.
    """
    environ = os.environ if environ is None else environ
    parsed: Dict[str, str] = {}

    for env_var in COMMA_SEPARATED_ENV_VARS:
        value = environ.get(env_var)
        if not value or "," not in value:
            continue

        for pair in value.split(","):
            key, _, val = pair.partition("=")
            key, val = key.strip(), val.strip()
            if key and val:
                environ[key] = val
                parsed[key] = val
        break

    if parsed:
        logger.info(f"Expanded comma-separated environment variables: {sorted(parsed)}")
    return parsed


def load_environment(env: Optional[str] = None) -> str:
    """Load .env.<env> then .env without overriding variables already set"""
    parse_comma_separated_env_vars()

    env = env or os.getenv("CARITY_ENV", "local")
    for path in (f".env.{env}", ".env"):
        if load_dotenv(path, override=False):
            logger.debug(f"Loaded environment file {path}")
        else:
            logger.debug(f"No environment file at {path}")
    return env


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Immutable runtime configuration, built once at startup"""

    model_config = ConfigDict(frozen=True)

    server_api_key: str
    api_key: str
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    enabled_tools: Optional[List[str]] = None
    retrieve_chunks_variant: str = "retrieve_chunks"

    server_name: str = "carity-server"
    server_version: str = "1.0.0"
    server_mode: str = "stdio"
    server_port: int = 8001
    cors_origins: List[str] = []

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the process environment.

        Raises ConfigurationError when SERVER_API_KEY, API_KEY or
        CARITY_API_URL is absent.
        """
        environ = os.environ if environ is None else environ

        missing = [name for name in ("SERVER_API_KEY", "API_KEY", "CARITY_API_URL") if not environ.get(name)]
        if missing:
            raise ConfigurationError(f"{', '.join(missing)} environment variable is required")

        try:
            timeout = float(environ.get("CARITY_API_TIMEOUT", DEFAULT_TIMEOUT))
            port = int(environ.get("MCP_SERVER_PORT", "8001"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e
        if not math.isfinite(timeout) or timeout <= 0:
            raise ConfigurationError("CARITY_API_TIMEOUT must be a positive number")

        mode = environ.get("MCP_SERVER_MODE", "stdio")
        if mode not in ("stdio", "http"):
            raise ConfigurationError(f"MCP_SERVER_MODE must be 'stdio' or 'http', got {mode!r}")

        return cls(
            server_api_key=environ["SERVER_API_KEY"],
            api_key=environ["API_KEY"],
            base_url=environ["CARITY_API_URL"],
            timeout=timeout,
            enabled_tools=_split_list(environ.get("CARITY_ENABLED_TOOLS")) or None,
            retrieve_chunks_variant=environ.get("CARITY_RETRIEVE_CHUNKS_VARIANT", "retrieve_chunks"),
            server_name=environ.get("MCP_SERVER_NAME", "carity-server"),
            server_version=environ.get("MCP_SERVER_VERSION", "1.0.0"),
            server_mode=mode,
            server_port=port,
            cors_origins=_split_list(environ.get("CORS_ORIGINS")),
        )


def _error_message(response: httpx.Response) -> str:
    """Pick the most useful message out of an error response"""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for field in ("message", "error"):
            if data.get(field):
                return str(data[field])
    return f"Request failed with status code {response.status_code}"


class CarityApiClient:
    """HTTP client for communicating with the Carity API"""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", "X-API-KEY": api_key}
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CarityApiClient":
        return cls(settings.base_url, settings.api_key, timeout=settings.timeout, **kwargs)

    async def post(self, endpoint: str, data: Dict[str, Any]) -> Any:
        """Make POST request to the Carity API and return the decoded JSON body.

        Raises UpstreamError for error statuses and transport failures.
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self.client.post(url, headers=self.headers, json=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(_error_message(e.response), status_code=e.response.status_code) from e
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Request timed out after {self.timeout:g} seconds") from e
        except httpx.RequestError as e:
            raise UpstreamError(str(e) or "Unknown API error occurred") from e

        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()
