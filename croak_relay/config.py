"""
Relay configuration.

Everything comes from the environment (optionally seeded from a .env file).
Settings are built once by the entry point and handed to the app factory and
the upstream clients; nothing else reads os.environ.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

REQUIRED_SECRETS = ("XAI_API_KEY", "PINATA_API_KEY", "PINATA_API_SECRET")


class ConfigError(RuntimeError):
    """Raised when the environment can't produce a usable Settings."""


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # ── Secrets ───────────────────────────────────────────────────────────────
    xai_api_key: str
    pinata_api_key: str
    pinata_api_secret: str

    # ── Server ────────────────────────────────────────────────────────────────
    port: int = 5001
    cors_origin: str = "*"
    env: str = "development"
    log_level: str = "INFO"
    request_timeout: float = 30.0
    upstream_timeout: float = 25.0

    # ── Upstreams ─────────────────────────────────────────────────────────────
    xai_base_url: str = "https://api.x.ai/v1"
    xai_model: str = "grok-beta"
    pinata_api_url: str = "https://api.pinata.cloud/pinning/pinJSONToIPFS"
    pinata_gateway_url: str = "https://gateway.pinata.cloud/ipfs/"

    @property
    def is_development(self) -> bool:
        return self.env == "development"


# env var -> Settings field, for the optional values
_OPTIONAL_VARS = {
    "PORT": "port",
    "CORS_ORIGIN": "cors_origin",
    "NODE_ENV": "env",
    "LOG_LEVEL": "log_level",
    "REQUEST_TIMEOUT": "request_timeout",
    "UPSTREAM_TIMEOUT": "upstream_timeout",
    "XAI_BASE_URL": "xai_base_url",
    "XAI_MODEL": "xai_model",
    "PINATA_API_URL": "pinata_api_url",
    "PINATA_GATEWAY_URL": "pinata_gateway_url",
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `environ` (defaults to the process environment after
    loading .env). Raises ConfigError if a secret is missing or a tunable
    doesn't parse.
    """
    if environ is None:
        load_dotenv(override=False)
        environ = os.environ

    missing = [name for name in REQUIRED_SECRETS if not environ.get(name)]
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}. Add them to your .env file."
        )

    values = {
        "xai_api_key": environ["XAI_API_KEY"],
        "pinata_api_key": environ["PINATA_API_KEY"],
        "pinata_api_secret": environ["PINATA_API_SECRET"],
    }
    for var, field in _OPTIONAL_VARS.items():
        if environ.get(var):
            values[field] = environ[var]

    try:
        return Settings(**values)
    except ValidationError as e:
        bad = ", ".join(
            f"{_env_name(err['loc'][0])}={err.get('input')!r}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration values: {bad}") from e


def _env_name(field: str) -> str:
    for var, name in _OPTIONAL_VARS.items():
        if name == field:
            return var
    return field.upper()
