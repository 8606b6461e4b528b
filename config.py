# config.py
import os
import sys
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class Settings:
    database_url: str = "sqlite:///carbon.db"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openweather_api_key: Optional[str] = None
    request_timeout: int = 10
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from the environment (and .env, if present)."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///carbon.db"),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
        request_timeout=int(os.getenv("REQUEST_TIMEOUT", 10)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # third-party HTTP clients are noisy at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("carbon")


settings = get_settings()
