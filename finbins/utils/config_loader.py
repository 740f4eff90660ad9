"""
Configuration loader for the FinBins client layer
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from finbins.auth.credentials import DEFAULT_USER_ID, SYNTHETIC_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "finbins.yml"
DEFAULT_API_BASE_URL = "https://finbinserver-c7fadze8cwhuf3eu.eastus2-01.azurewebsites.net/api"


class ApiConfig(BaseModel):
    """Backend origin, including the /api path prefix"""

    base_url: str = DEFAULT_API_BASE_URL


class SessionConfig(BaseModel):
    """Synthetic session handling"""

    synthetic_prefix: str = SYNTHETIC_PREFIX
    default_user_id: int = Field(default=DEFAULT_USER_ID, ge=1)
    demo_fallback_on_failure: bool = False


class StorageConfig(BaseModel):
    """Where the token/user entries live; None keeps them in memory"""

    path: Optional[str] = None


class ClientConfig(BaseModel):
    api: ApiConfig = Field(default_factory=ApiConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def load_client_config(config_path: Optional[Path] = None) -> ClientConfig:
    """
    Load and validate the client configuration from a YAML file

    Args:
        config_path: Path to config file. Defaults to config/finbins.yml;
            when the default file is absent, built-in defaults are used.

    Returns:
        Validated ClientConfig with environment overrides applied

    Raises:
        FileNotFoundError: If an explicit config_path doesn't exist
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    config_data = {}
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        if not config_path.exists():
            logger.info("No config file at %s; using defaults", config_path)
            config_path = None
    elif not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is not None:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

    try:
        config = ClientConfig(**config_data)
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise

    base_url = os.getenv("FINBINS_API_BASE_URL", "").strip()
    if base_url:
        config.api.base_url = base_url
    fallback = os.getenv("FINBINS_DEMO_FALLBACK")
    if fallback is not None and fallback.strip():
        config.session.demo_fallback_on_failure = _env_flag(fallback)
    storage_path = os.getenv("FINBINS_STORAGE_PATH", "").strip()
    if storage_path:
        config.storage.path = storage_path

    if config_path is not None:
        logger.info(f"Successfully loaded config from {config_path}")
    return config
