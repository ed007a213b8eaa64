"""
Configuration

Settings for the HTTP transport and logging, read from environment variables
(optionally loaded from a .env file).
"""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the request orchestrator"""
    api_base_url: str = ""
    request_timeout: float = 30.0
    log_level: str = "INFO"
    log_dir: str = "logs"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional path to a .env file. When omitted, the nearest
            .env found searching upward from the working directory is used.

    Returns:
        Settings instance
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    return Settings(
        api_base_url=os.getenv("API_BASE_URL", ""),
        request_timeout=float(os.getenv("API_TIMEOUT", "30.0")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
    )
