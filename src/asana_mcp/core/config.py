from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

from .client import DEFAULT_BASE_URL, AsanaClient


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str]:
    """Load the Asana access token and base URL from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    access_token = os.getenv("ASANA_ACCESS_TOKEN", "").strip()
    base_url = os.getenv("ASANA_BASE_URL", "").strip() or DEFAULT_BASE_URL
    return access_token, base_url


def load_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"


def create_client_from_env(*, use_dotenv: bool = True, **kwargs) -> AsanaClient:
    """Create an AsanaClient from environment variables."""
    access_token, base_url = load_env_config(use_dotenv=use_dotenv)
    if not access_token:
        raise ValueError("Please set ASANA_ACCESS_TOKEN environment variable.")
    return AsanaClient(access_token=access_token, base_url=base_url, **kwargs)


__all__ = ["load_env_config", "load_log_level", "create_client_from_env"]
