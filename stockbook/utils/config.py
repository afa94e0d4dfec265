"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Persistent store settings."""
    backend: str = "json"  # "json" or "memory"
    data_dir: str = "data"
    indent: Optional[int] = 2


class LoggingFilesConfig(BaseModel):
    """Log file paths."""
    inventory: str = "logs/inventory.log"
    storage: str = "logs/storage.log"
    api: str = "logs/api.log"
    error: str = "logs/error.log"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5
    files: LoggingFilesConfig = LoggingFilesConfig()


class ServerConfig(BaseModel):
    """HTTP API server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    title: str = "Stockbook Inventory API"


class DashboardConfig(BaseModel):
    """Dashboard view settings."""
    recent_sales_limit: int = 5


class YAMLConfig(BaseModel):
    """Configuration loaded from YAML file."""
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()
    server: ServerConfig = ServerConfig()
    dashboard: DashboardConfig = DashboardConfig()


class Settings(BaseSettings):
    """Application settings from environment variables."""

    environment: str = Field(default="development", description="Environment (development/production)")
    log_level: Optional[str] = Field(default=None, description="Override log level")
    data_dir: Optional[str] = Field(default=None, description="Override the JSON store directory")
    storage_backend: Optional[str] = Field(default=None, description="Override the storage backend")
    port: Optional[int] = Field(default=None, description="Override the server port")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


class AppConfig:
    """Combined application configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        self.env = Settings()

        # Load YAML config
        config_path = config_path or Path(__file__).parent.parent.parent / "config" / "config.yml"
        if config_path.exists():
            with open(config_path, "r") as f:
                yaml_data = yaml.safe_load(f) or {}
                self.yaml = YAMLConfig(**yaml_data)
        else:
            self.yaml = YAMLConfig()

        # Environment overrides
        if self.env.log_level:
            self.yaml.logging.level = self.env.log_level
        if self.env.data_dir:
            self.yaml.storage.data_dir = self.env.data_dir
        if self.env.storage_backend:
            self.yaml.storage.backend = self.env.storage_backend
        if self.env.port:
            self.yaml.server.port = self.env.port

    @property
    def storage(self) -> StorageConfig:
        return self.yaml.storage

    @property
    def logging(self) -> LoggingConfig:
        return self.yaml.logging

    @property
    def server(self) -> ServerConfig:
        return self.yaml.server

    @property
    def dashboard(self) -> DashboardConfig:
        return self.yaml.dashboard

    @property
    def is_production(self) -> bool:
        return self.env.environment.lower() == "production"


@lru_cache()
def get_config() -> AppConfig:
    """Get cached configuration instance."""
    return AppConfig()
