"""
Pydantic-based configuration models for the Adaptation Survival server.

Every concern gets its own BaseSettings model with an environment prefix;
AppConfig composes them. Values come from the process environment and an
optional .env file in the working directory.
"""

import json
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

_SETTINGS_DEFAULTS: dict[str, Any] = {
    "case_sensitive": False,
    "extra": "ignore",
    "env_file": ".env",
    "env_file_encoding": "utf-8",
}


def _parse_env_list(candidate: Any) -> list[str]:
    """Parse a value from the environment as JSON list or CSV."""
    if candidate is None:
        return []
    if isinstance(candidate, list | tuple):
        return [str(item).strip() for item in candidate if str(item).strip()]
    s = str(candidate).strip()
    if not s:
        return []
    try:
        loaded = json.loads(s)
        if isinstance(loaded, list):
            return [str(item).strip() for item in loaded if str(item).strip()]
    except json.JSONDecodeError:
        pass
    return [item.strip().strip('"').strip("'") for item in s.strip("[]").split(",") if item.strip()]


class ServerConfig(BaseSettings):
    """Server network configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=54731, description="Server port")
    environment: str = Field(default="development", description="Deployment environment")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1024 <= v <= 65535:
            logger.error("Invalid server port", port=v, valid_range="1024-65535")
            raise ValueError("Port must be between 1024 and 65535")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_environments = ["development", "production", "test"]
        v_lower = v.lower()
        if v_lower not in valid_environments:
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v_lower

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "SERVER_"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    url: str = Field(..., description="Database URL (required)")

    # Connection pool configuration (SQLAlchemy)
    pool_size: int = Field(default=5, description="Number of connections to maintain in pool")
    max_overflow: int = Field(default=10, description="Additional connections that can be created beyond pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for connection from pool")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format and upgrade it to an async driver."""
        if not v:
            logger.error("Database URL validation failed - empty URL")
            raise ValueError("Database URL cannot be empty")
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if not v.startswith(("postgresql+", "sqlite+")):
            logger.error(
                "Database URL validation failed - invalid protocol",
                url_preview=v[:50],
                expected_protocols=["postgresql", "sqlite"],
            )
            raise ValueError("Database URL must start with 'postgresql' or 'sqlite'")
        return v

    @field_validator("pool_size", "max_overflow", "pool_timeout")
    @classmethod
    def validate_pool_config(cls, v: int) -> int:
        """Validate pool configuration values are positive."""
        if v < 1:
            raise ValueError("Pool configuration values must be at least 1")
        return v

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "DATABASE_"}

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class BlobStoreConfig(BaseSettings):
    """Image blob store configuration."""

    read_write_token: str | None = Field(
        default=None, description="Token enabling blob store uploads; placeholders are served without it"
    )
    max_upload_bytes: int = Field(default=2 * 1024 * 1024, description="Largest accepted image in bytes")
    write_timeout_seconds: float = Field(default=25.0, description="Upper bound for a single image write")
    read_timeout_seconds: float = Field(default=15.0, description="Upper bound for a single image read")
    placeholder_url: str = Field(default="/placeholder.svg", description="Image served when uploads are disabled")

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_upload_bytes must be positive")
        return v

    @field_validator("write_timeout_seconds", "read_timeout_seconds")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Blob store timeouts must be positive")
        return v

    @field_validator("read_write_token")
    @classmethod
    def blank_token_is_missing(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "BLOB_"}

    @property
    def enabled(self) -> bool:
        return self.read_write_token is not None


class SimulationConfig(BaseSettings):
    """Survival simulation configuration."""

    survival_chance_min: int = Field(default=50, description="Lowest survival chance assigned at creation")
    survival_chance_max: int = Field(default=80, description="Highest survival chance assigned at creation")

    @field_validator("survival_chance_min", "survival_chance_max")
    @classmethod
    def validate_percentage(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("Survival chance bounds must be between 0 and 100")
        return v

    @model_validator(mode="after")
    def validate_range(self) -> "SimulationConfig":
        if self.survival_chance_min > self.survival_chance_max:
            raise ValueError("survival_chance_min must not exceed survival_chance_max")
        return self

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "SIMULATION_"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="local", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="key_value", description="Log format")
    log_file: str | None = Field(default=None, description="Optional rotating log file path")
    disable_logging: bool = Field(default=False, description="Disable all logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "key_value"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "LOGGING_"}

    def to_legacy_dict(self) -> dict:
        """Convert to the dict format expected by setup_enhanced_logging."""
        return {
            "environment": self.environment,
            "level": self.level,
            "format": self.format,
            "log_file": self.log_file,
            "disable_logging": self.disable_logging,
        }


class CORSConfig(BaseSettings):
    """Cross-origin resource sharing configuration."""

    allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins permitted to access the API",
    )
    allow_credentials: bool = Field(default=True, description="Whether credentialed requests are accepted")
    allow_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "DELETE", "OPTIONS"],
        description="HTTP methods permitted by CORS responses",
    )
    allow_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["Content-Type", "Accept", "X-Request-ID"],
        description="Request headers permitted by CORS responses",
    )
    max_age: int = Field(default=600, description="Seconds browsers may cache CORS preflight responses")

    @field_validator("allow_origins", "allow_headers", mode="before")
    @classmethod
    def parse_csv_list(cls, value: object) -> list[str]:
        return _parse_env_list(value)

    @field_validator("allow_methods", mode="before")
    @classmethod
    def parse_allow_methods(cls, value: object) -> list[str]:
        return [method.upper() for method in _parse_env_list(value)]

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_age must be non-negative")
        return value

    model_config = {**_SETTINGS_DEFAULTS, "env_prefix": "CORS_"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    This is the main configuration class that aggregates all other configs.
    Access via get_config() singleton function.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)  # type: ignore[arg-type]
    blob_store: BlobStoreConfig = Field(default_factory=BlobStoreConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """
        Convert to a plain dict for code paths that expect dict-based config access.

        The blob store token is reported only as a boolean.
        """
        return {
            "host": self.server.host,
            "port": self.server.port,
            "environment": self.server.environment,
            "database_url": self.database.url,
            "blob_store": {
                "enabled": self.blob_store.enabled,
                "max_upload_bytes": self.blob_store.max_upload_bytes,
                "write_timeout_seconds": self.blob_store.write_timeout_seconds,
                "read_timeout_seconds": self.blob_store.read_timeout_seconds,
            },
            "simulation": {
                "survival_chance_min": self.simulation.survival_chance_min,
                "survival_chance_max": self.simulation.survival_chance_max,
            },
            "logging": self.logging.to_legacy_dict(),
            "cors": {
                "allow_origins": self.cors.allow_origins,
                "allow_credentials": self.cors.allow_credentials,
                "allow_methods": self.cors.allow_methods,
                "allow_headers": self.cors.allow_headers,
                "max_age": self.cors.max_age,
            },
        }
