"""Client configuration resolution."""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

from gagara_boost.errors import ValidationError
from gagara_boost.http_client import DEFAULT_TIMEOUT_MS
from gagara_boost.types import GagaraBoostConfig

DEFAULT_BASE_URL = "http://localhost:3040"

ENV_BASE_URL = "GAGARA_BOOST_BASE_URL"
ENV_TOKEN = "GAGARA_BOOST_TOKEN"
ENV_SERVICE_TOKEN = "GAGARA_BOOST_SERVICE_TOKEN"
ENV_TIMEOUT_MS = "GAGARA_BOOST_TIMEOUT_MS"


def config_from_env() -> GagaraBoostConfig:
    """Build a config from the environment, reading a ``.env`` file first."""
    load_dotenv()

    config = GagaraBoostConfig(base_url=os.environ.get(ENV_BASE_URL, DEFAULT_BASE_URL))
    token = os.environ.get(ENV_TOKEN)
    if token:
        config["token"] = token
    service_token = os.environ.get(ENV_SERVICE_TOKEN)
    if service_token:
        config["service_token"] = service_token

    raw_timeout = os.environ.get(ENV_TIMEOUT_MS)
    if raw_timeout:
        try:
            config["timeout_ms"] = int(raw_timeout)
        except ValueError:
            raise ValidationError(f"{ENV_TIMEOUT_MS} must be an integer, got {raw_timeout!r}") from None
    return config


def resolve_config(config: GagaraBoostConfig) -> dict[str, Any]:
    """Normalize camelCase/snake_case keys and apply defaults."""
    base_url = config.get("base_url") or config.get("baseUrl")
    if not base_url:
        raise ValidationError("Base URL is required")

    # A user token wins over a service token.
    token = config.get("token") or config.get("service_token") or config.get("serviceToken") or None

    timeout_ms = config.get("timeout_ms", config.get("timeout", DEFAULT_TIMEOUT_MS))
    if not isinstance(timeout_ms, int) or isinstance(timeout_ms, bool) or timeout_ms <= 0:
        raise ValidationError("Timeout must be a positive number of milliseconds")

    return {
        "base_url": base_url,
        "token": token,
        "transport": config.get("transport"),
        "timeout_ms": timeout_ms,
    }
