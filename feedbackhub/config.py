"""
Configuration settings for Feedback Hub.

This module provides a centralized configuration loaded from environment
variables or a local .env file.
"""

import os
from typing import Dict, Optional, List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


class Settings(BaseSettings):
    """
    Application settings.

    Load configuration from environment variables or .env file.
    """
    # OpenAI API configuration
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_timeout_seconds: Optional[float] = _optional_float("OPENAI_TIMEOUT_SECONDS")

    # Per-feedback analysis
    analysis_temperature: float = float(os.getenv("ANALYSIS_TEMPERATURE", "0.3"))
    analysis_max_tokens: int = int(os.getenv("ANALYSIS_MAX_TOKENS", "500"))

    # Project insight report
    insights_temperature: float = float(os.getenv("INSIGHTS_TEMPERATURE", "0.7"))
    insights_max_tokens: int = int(os.getenv("INSIGHTS_MAX_TOKENS", "2000"))

    # Weekly digest
    digest_temperature: float = float(os.getenv("DIGEST_TEMPERATURE", "0.5"))
    digest_max_tokens: int = int(os.getenv("DIGEST_MAX_TOKENS", "1000"))
    digest_max_records: int = int(os.getenv("DIGEST_MAX_RECORDS", "30"))

    # Datastore configuration
    datastore_backend: str = os.getenv("DATASTORE_BACKEND", "rest")
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")
    datastore_timeout_seconds: float = float(os.getenv("DATASTORE_TIMEOUT_SECONDS", "10"))

    # Feedback limits
    feedback_max_length: int = int(os.getenv("FEEDBACK_MAX_LENGTH", "500"))

    # API settings
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_prefix: str = os.getenv("API_PREFIX", "")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Development mode
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Logging settings
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE", None)
    enable_file_logging: bool = os.getenv("ENABLE_FILE_LOGGING", "False").lower() == "true"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def cors_origin_list(self) -> List[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_api_keys(self) -> List[str]:
        """
        Validate that required API keys are present.

        Returns:
            List of missing API keys
        """
        missing_keys = []

        if not self.openai_api_key:
            missing_keys.append("OPENAI_API_KEY")

        if self.datastore_backend == "rest" and not self.supabase_key:
            missing_keys.append("SUPABASE_KEY")

        return missing_keys

    def validate_settings(self) -> Dict[str, str]:
        """
        Validate all settings and return any warnings or errors.

        Returns:
            Dictionary of validation messages
        """
        validation_messages = {}

        missing_keys = self.validate_api_keys()
        if missing_keys:
            validation_messages["missing_api_keys"] = f"Missing required API keys: {', '.join(missing_keys)}"

        if self.datastore_backend not in ("rest", "memory"):
            validation_messages["datastore_backend"] = (
                f"Unknown datastore backend '{self.datastore_backend}', expected 'rest' or 'memory'"
            )
        elif self.datastore_backend == "rest" and not self.supabase_url:
            validation_messages["datastore"] = "REST datastore selected, but no SUPABASE_URL provided"
        elif self.datastore_backend == "memory":
            validation_messages["datastore"] = "In-memory datastore selected, data will not survive a restart"

        if not self.openai_api_key:
            validation_messages["analysis"] = "No OpenAI API key, feedback analysis will use rating-based fallback"

        return validation_messages

    def configure_logging(self) -> None:
        """Configure logging based on settings."""
        import logging

        log_level = getattr(logging, self.log_level.upper(), logging.INFO)

        logging_config = {
            'level': log_level,
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        }

        if self.enable_file_logging and self.log_file:
            logging_config['filename'] = self.log_file
            logging_config['filemode'] = 'a'

        logging.basicConfig(**logging_config)

        # Request-level logging from the SDKs is too chatty at INFO
        logging.getLogger("openai").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


# Create a global settings instance
settings = Settings()

# Automatically configure logging
settings.configure_logging()


def print_settings(include_secrets: bool = False) -> str:
    """
    Generate a printable string of current settings.

    Args:
        include_secrets: Whether to include secret values like API keys

    Returns:
        String representation of settings
    """
    secret_fields = {"openai_api_key", "supabase_key"}

    lines = ["Current Settings:"]

    settings_dict = settings.model_dump()

    for key, value in sorted(settings_dict.items()):
        if key in secret_fields and not include_secrets:
            if value:
                value = f"{'*' * 8}{value[-4:]}" if isinstance(value, str) and len(value) > 4 else "********"
            else:
                value = "Not set"

        lines.append(f"  {key}: {value}")

    return "\n".join(lines)


def validate_environment() -> None:
    """
    Validate the environment and display warnings or errors.
    """
    import logging
    logger = logging.getLogger(__name__)

    validation_messages = settings.validate_settings()

    if validation_messages:
        logger.warning("Environment validation found issues:")
        for category, message in validation_messages.items():
            logger.warning(f"  {category}: {message}")
    else:
        logger.info("Environment validation: All checks passed")


# Auto-validate environment when module is imported
validate_environment()
