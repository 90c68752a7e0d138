"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scheduling thresholds are named settings, not literals in the scheduler
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from core.domain.policy import (
    DEFAULT_GRACE_MONTHS,
    DEFAULT_HIGH_PRIORITY_DAYS,
    DEFAULT_NORMAL_PRIORITY_DAYS,
    SchedulingPolicy,
)

# Load environment variables from .env file
load_dotenv()

Environment = Literal["development", "staging", "production"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EngineConfig(BaseModel):
    """Batch concurrency and store I/O resilience."""

    max_concurrent_subjects: int = Field(
        default=10, gt=0, description="Maximum number of subjects processed concurrently"
    )
    io_timeout_seconds: float = Field(
        default=10.0, gt=0.0, description="Timeout for a single notification store call"
    )
    read_retry_attempts: int = Field(
        default=3, gt=0, description="Attempts for reading active notifications"
    )
    write_retry_attempts: int = Field(
        default=2, gt=0, description="Attempts for the bulk insert, re-checking between tries"
    )
    retry_backoff_seconds: float = Field(
        default=0.5, ge=0.0, description="Base delay for exponential backoff between attempts"
    )


class DatabaseConfig(BaseModel):
    """Notification store database configuration."""

    url: str = Field(default="sqlite:///./notifications.db", description="Database URL")
    pool_size: int = Field(default=10, gt=0, description="Database connection pool size")
    echo: bool = Field(default=False, description="Log emitted SQL")


class LoggingConfig(BaseModel):
    """structlog output settings."""

    level: LogLevel = Field(default="INFO", description="Root log level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Root configuration: scheduling thresholds, engine knobs, storage and logging."""

    environment: Environment = Field(default="development", description="Deployment environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    scheduling: SchedulingPolicy = Field(default_factory=SchedulingPolicy)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "dev": "development",
    "development": "development",
    "stage": "staging",
    "staging": "staging",
}
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _environment(raw: str) -> Environment:
    # Anything unrecognised is treated as production
    return _ENVIRONMENT_ALIASES.get(raw.strip().lower(), "production")


def _log_level(raw: str) -> LogLevel:
    level = raw.strip().upper()
    return cast(LogLevel, level if level in _LOG_LEVELS else "INFO")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: int | float) -> int | float:
    """Read a numeric variable, naming the variable when it is malformed."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return type(default)(raw.strip())
    except ValueError as e:
        raise ValueError(f"{name} must be a {type(default).__name__}, got {raw!r}") from e


def load_config_from_env() -> AppConfig:
    """Build the application config from environment variables (and ``.env``)."""
    environment = _environment(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    return AppConfig(
        environment=environment,
        debug=debug,
        scheduling=SchedulingPolicy(
            grace_months=_env_number("GRACE_MONTHS", DEFAULT_GRACE_MONTHS),
            high_priority_days=_env_number("HIGH_PRIORITY_DAYS", DEFAULT_HIGH_PRIORITY_DAYS),
            normal_priority_days=_env_number("NORMAL_PRIORITY_DAYS", DEFAULT_NORMAL_PRIORITY_DAYS),
        ),
        engine=EngineConfig(
            max_concurrent_subjects=_env_number("MAX_CONCURRENT_SUBJECTS", 10),
            io_timeout_seconds=_env_number("IO_TIMEOUT_SECONDS", 10.0),
            read_retry_attempts=_env_number("READ_RETRY_ATTEMPTS", 3),
            write_retry_attempts=_env_number("WRITE_RETRY_ATTEMPTS", 2),
            retry_backoff_seconds=_env_number("RETRY_BACKOFF_SECONDS", 0.5),
        ),
        database=DatabaseConfig(
            url=os.getenv("DATABASE_URL", "sqlite:///./notifications.db"),
            echo=_env_flag("DATABASE_ECHO", False),
        ),
        logging=LoggingConfig(
            level=_log_level(os.getenv("LOG_LEVEL", "INFO")),
            format="console" if debug else "json",
        ),
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n📅 SCHEDULING")
    print(f"Grace Window: {config.scheduling.grace_months} months")
    print(f"High Priority: due within {config.scheduling.high_priority_days} days")
    print(f"Normal Priority: due within {config.scheduling.normal_priority_days} days")

    print("\n⚙️  ENGINE")
    print(f"Concurrent Subjects: {config.engine.max_concurrent_subjects}")
    print(f"I/O Timeout: {config.engine.io_timeout_seconds}s")
    print(
        f"Retries: read={config.engine.read_retry_attempts} "
        f"write={config.engine.write_retry_attempts}"
    )
    print(f"Database: {config.database.url}")


if __name__ == "__main__":
    # Test configuration loading
    validate_config()
    print_config_summary()
