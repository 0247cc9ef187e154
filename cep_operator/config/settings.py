"""
Global settings for the CEP operator context.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from cep_operator.core.enums import TimeCharacteristic


class EngineSettings(BaseSettings):
    """Global settings, read from CEP_* environment variables or .env."""
    
    # General
    engine_name: str = Field(default="cep_operator", description="Engine name")
    version: str = Field(default="1.0.0", description="Engine version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level of the package")
    
    # Context defaults
    unnamed_label: str = Field(default="Unnamed", description="Display name of contexts without a name")
    default_time_characteristic: Optional[TimeCharacteristic] = Field(
        default=None, description="Time characteristic applied when a config declares none"
    )
    default_parallelism: int = Field(default=1, ge=1, description="Parallelism applied when a config declares none")
    
    model_config = SettingsConfigDict(env_prefix="CEP_", env_file=".env", extra="ignore")


# Global settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings()
    return _settings


def configure(settings: EngineSettings) -> None:
    """Set global settings."""
    global _settings
    _settings = settings
