"""
Configuration management for AdMedia.

Supports loading from environment variables and YAML files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

class DatabaseSettings(BaseSettings):
    """PostgreSQL configuration."""

    host: str = "localhost"
    port: int = 5432
    name: str = "admedia"
    user: str = "admedia"
    password: str = ""
    pool_size: int = 10
    max_overflow: int = 20

    # Full SQLAlchemy URL; overrides the discrete fields when set
    url: str = ""

    @property
    def async_url(self) -> str:
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class ServerSettings(BaseSettings):
    """Uvicorn / HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3001
    workers: int = 1
    reload: bool = False
    cors_origins: list[str] = ["*"]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

# Placeholder secret; refused when running with env=prod
DEFAULT_JWT_SECRET = "change-me"

# HS256 keys shorter than the digest size are rejected in prod
MIN_JWT_SECRET_BYTES = 32


class AuthSettings(BaseSettings):
    """JWT and password hashing configuration."""

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # bcrypt work factor (4 is the minimum bcrypt accepts)
    bcrypt_rounds: int = 12


# ---------------------------------------------------------------------------
# Image storage (Cloudinary)
# ---------------------------------------------------------------------------

class StorageSettings(BaseSettings):
    """Cloudinary image upload configuration."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    upload_url: str = "https://api.cloudinary.com/v1_1"
    folder: str = "campaigns"
    timeout: float = 30.0

    # Upload constraints
    max_file_size: int = 5 * 1024 * 1024
    allowed_content_prefix: str = "image/"


# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------

class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "console"] = "json"


class MonitoringSettings(BaseSettings):
    """Prometheus / monitoring configuration."""

    enabled: bool = True


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ADMEDIA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application
    app_name: str = "AdMedia"
    app_version: str = "1.0.0"
    debug: bool = False
    env: Literal["dev", "prod", "test"] = "dev"

    # Nested settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        if v not in ("dev", "prod", "test"):
            raise ValueError(f"Invalid environment: {v}")
        return v

    @model_validator(mode="after")
    def check_production_secrets(self) -> "Settings":
        if self.env != "prod":
            return self
        secret = self.auth.jwt_secret_key
        if secret == DEFAULT_JWT_SECRET or len(secret.encode("utf-8")) < MIN_JWT_SECRET_BYTES:
            raise ValueError(
                f"auth.jwt_secret_key must be set to at least {MIN_JWT_SECRET_BYTES} bytes "
                "in prod (ADMEDIA_AUTH__JWT_SECRET_KEY)"
            )
        return self


# ---------------------------------------------------------------------------
# YAML Loader
# ---------------------------------------------------------------------------

def load_yaml_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def merge_configs(base: dict, override: dict) -> dict:
    """Deep-merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


_SECTION_CLASSES: dict[str, type[BaseSettings]] = {
    "server": ServerSettings,
    "database": DatabaseSettings,
    "auth": AuthSettings,
    "storage": StorageSettings,
    "logging": LoggingSettings,
    "monitoring": MonitoringSettings,
}


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings.

    Loads from:
    1. configs/base.yaml (base configuration)
    2. configs/{env}.yaml (environment-specific overrides)
    3. Environment variables (highest priority)
    """
    import os

    env = os.getenv("ADMEDIA_ENV", "dev")

    config_dir = Path(__file__).parent.parent.parent / "configs"

    base_config = load_yaml_config(config_dir / "base.yaml")
    env_config = load_yaml_config(config_dir / f"{env}.yaml")
    merged = merge_configs(base_config, env_config)

    # Flatten nested config for Pydantic
    flat_config: dict = {}
    if "app" in merged:
        flat_config["app_name"] = merged["app"].get("name", "AdMedia")
        flat_config["app_version"] = merged["app"].get("version", "1.0.0")
        flat_config["debug"] = merged["app"].get("debug", False)

    flat_config["env"] = env

    # pydantic-settings gives init kwargs higher priority than env vars,
    # so env-var overrides are merged into the YAML dict first.
    for section_key, settings_cls in _SECTION_CLASSES.items():
        section_data = dict(merged.get(section_key, {}))

        # ADMEDIA_SECTION__FIELD -> field
        prefix = f"ADMEDIA_{section_key.upper()}__"
        for env_key, env_value in os.environ.items():
            if env_key.startswith(prefix):
                field_name = env_key[len(prefix):].lower()
                section_data[field_name] = env_value

        flat_config[section_key] = settings_cls(**section_data)

    return Settings(**flat_config)


# Convenience alias
settings = get_settings()
