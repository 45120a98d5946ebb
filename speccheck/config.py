import os
import sys
import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    app_name: str = "SpecCheck API"
    environment: str = "production"
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["https://speccheck.app"])
    default_product_category: str = "power_bank"


def load_settings() -> Settings:
    """Read SPECCHECK_* settings from the environment (and a local .env file)"""
    load_dotenv()

    environment = os.getenv("SPECCHECK_ENVIRONMENT", "production")
    origins = [o.strip() for o in os.getenv("SPECCHECK_CORS_ORIGINS", "https://speccheck.app").split(",") if o.strip()]
    if environment == "development" and "http://localhost:8081" not in origins:
        origins.append("http://localhost:8081")

    return Settings(
        app_name=os.getenv("SPECCHECK_APP_NAME", "SpecCheck API"),
        environment=environment,
        log_level=os.getenv("SPECCHECK_LOG_LEVEL", "INFO"),
        cors_origins=origins,
        default_product_category=os.getenv("SPECCHECK_PRODUCT_CATEGORY", "power_bank"),
    )


def setup_logging(level: str = "INFO", format_string: Optional[str] = None) -> None:
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level_value = getattr(logging, level.upper(), None)
    if not isinstance(level_value, int):
        logger.warning(f"Unknown log level {level!r}, falling back to INFO")
        level_value = logging.INFO

    logging.basicConfig(
        level=level_value,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


settings = load_settings()
