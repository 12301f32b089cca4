"""Configuration settings for the MySQL query layer."""

from typing import Optional, Dict, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    # Database Configuration
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: Optional[str] = Field(default=None, validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")

    # Connection Settings
    db_connect_timeout: int = Field(default=10, validation_alias="DB_CONNECT_TIMEOUT")
    db_benchmark: bool = Field(default=False, validation_alias="DB_BENCHMARK")

    # Application Configuration
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CLI Configuration
    default_output_format: str = Field(default="table", validation_alias="DEFAULT_OUTPUT_FORMAT")

    def connection_config(self) -> Dict[str, Any]:
        """Build the mapping consumed by DatabaseConnection.initialize."""
        return {
            'host': self.db_host,
            'port': self.db_port,
            'username': self.db_user,
            'password': self.db_password,
            'database': self.db_name,
            'timeout': self.db_connect_timeout,
            'benchmark': self.db_benchmark,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
