"""Configuration utilities for Local Lore."""

import os
from pathlib import Path
from dotenv import load_dotenv
from utils.logging import get_logger
from typing import List

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

# Project Paths
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
DATA_DIR = PROJECT_ROOT / "data"

DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR / 'local_lore.db'}"

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"

class Settings:
    """Settings container class for application configuration"""
    def __init__(self):
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.PORT = int(os.getenv("PORT", "3001"))

        # Database
        self.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self.DB_ECHO = _env_bool("DB_ECHO", "false")
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
        self.DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
        self.DB_POOL_PRE_PING = _env_bool("DB_POOL_PRE_PING", "true")

        # CORS Configuration
        self.CORS_ORIGINS = self._get_cors_origins()

        # Request body limit for chapter content (10MB)
        self.MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024)))

        # Word-count change that triggers an automatic chapter version
        self.VERSION_WORD_DELTA = int(os.getenv("VERSION_WORD_DELTA", "50"))

        self.DATA_DIR = DATA_DIR

    def _get_cors_origins(self) -> List[str]:
        """Get CORS origins based on environment."""
        if self.ENVIRONMENT == "production":
            origins_str = os.getenv("CORS_ORIGINS", "")
            if origins_str:
                return [origin.strip() for origin in origins_str.split(",") if origin.strip()]
            logger.warning("No CORS_ORIGINS specified for production environment")
            return []
        # Allow all origins in development
        return ["*"]

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

# Create a singleton settings instance
settings = Settings()

def validate_config() -> bool:
    """Validate that the configuration is usable."""
    config_logger = get_logger(__name__, {"operation": "config_validation"})
    valid = True

    if not settings.DATABASE_URL:
        config_logger.warning("DATABASE_URL is empty")
        valid = False

    if settings.VERSION_WORD_DELTA < 0:
        config_logger.warning(f"VERSION_WORD_DELTA must not be negative: {settings.VERSION_WORD_DELTA}")
        valid = False

    if settings.is_production() and not settings.CORS_ORIGINS:
        config_logger.warning("Production environment has no CORS origins configured")
        valid = False

    if valid:
        config_logger.info("Configuration validation successful")
    return valid
