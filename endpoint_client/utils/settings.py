"""
endpoint_client/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the runtime configuration used to build a
RequestClient from the environment instead of from Python code.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/endpoints.yaml
- Overriding defaults with environment variables (ENDPOINT_CLIENT_*)
- Validating required settings (host_url)
- Exposing a cached, fully-validated ClientSettings object

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/endpoints.yaml
   (or the file named by ENDPOINT_CLIENT_ENDPOINTS_PATH)
2) Environment variables:
       ENDPOINT_CLIENT_*

`endpoints` can be given as JSON in ENDPOINT_CLIENT_ENDPOINTS, but the
YAML file is the intended home for the endpoint registry.

WHAT THIS FILE IS NOT FOR
-------------------------
This module does NOT validate the endpoint registry itself; that happens
when RequestClient is constructed (see client/validation.py).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import AnyHttpUrl, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from endpoint_client.utils.errors import ConfigurationError

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "endpoints.yaml"


class ClientSettings(BaseSettings):
    """
    Runtime settings for RequestClient.from_settings().

    Load order / precedence:
        1) YAML defaults (parameters/endpoints.yaml)
        2) Environment variables (ENDPOINT_CLIENT_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="ENDPOINT_CLIENT_",
        extra="ignore",
    )

    # Optional at the model level to allow partial env loading;
    # enforced explicitly in get_settings().
    host_url: Optional[AnyHttpUrl] = None

    # Not an enum on purpose: unknown values fall back to JSON behaviour
    response_type: str = "json"

    # None -> no timeout at all
    timeout_seconds: Optional[float] = None

    endpoints: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Endpoint registry: name -> {url, methods, parent?}",
    )

    endpoints_path: Optional[Path] = Field(
        default=None,
        description="YAML file holding defaults (host_url, response_type, endpoints, ...).",
    )


@lru_cache(maxsize=8)
def load_yaml_parameters(path: Path = PARAMETERS_PATH) -> Dict[str, Any]:
    """
    Load base configuration from a YAML file.

    Cached per path so every client built from settings sees the same
    registry during the process lifetime.
    """
    if not path.exists():
        logger.warning("parameters_yaml_missing", expected=str(path))
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("parameters_yaml_load_error", path=str(path), error=str(exc))
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc

    if not isinstance(data, dict):
        logger.warning("parameters_yaml_not_dict", path=str(path), type=type(data).__name__)
        return {}

    logger.info("parameters_yaml_loaded", path=str(path))
    return data


@lru_cache(maxsize=1)
def get_settings() -> ClientSettings:
    """
    Construct and return the final validated ClientSettings object.

    Cached (singleton per process); call get_settings.cache_clear()
    after changing the environment.
    """
    # 1) env (partial)
    try:
        env_settings = ClientSettings()
        env_data = env_settings.model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 2) YAML defaults, from the env-selected file if any
    yaml_path = Path(env_data.get("endpoints_path") or PARAMETERS_PATH)
    yaml_data = load_yaml_parameters(yaml_path)

    # 3) merge
    merged: Dict[str, Any] = {**yaml_data, **env_data}

    # 4) enforce required host
    if not merged.get("host_url"):
        logger.error("settings_missing_host_url", yaml_path=str(yaml_path))
        raise ConfigurationError(
            "Missing required setting: host_url. "
            "Set it either in ENDPOINT_CLIENT_HOST_URL "
            f"or in {yaml_path}.",
            field="host_url",
        )

    # 5) final validation
    try:
        settings = ClientSettings.model_validate(merged)
    except ValidationError as exc:
        logger.error("settings_validation_error", errors=exc.errors())
        raise ConfigurationError(f"Invalid client settings: {exc}") from exc

    logger.info(
        "settings_loaded",
        host_url=str(settings.host_url),
        response_type=settings.response_type,
        timeout_seconds=settings.timeout_seconds,
        endpoints=sorted(settings.endpoints),
    )

    return settings
