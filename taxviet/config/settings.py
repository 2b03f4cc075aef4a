"""
Configuration Management for TaxViet

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Tax rates are configurable constants, not validated against regulation,
so their defaults live here rather than being scattered through the engine.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="TAXVIET_STORAGE_",
        extra="ignore"
    )
    
    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Storage backend: 'file' (JSON on disk) or 'memory'"
    )
    path: Path = Field(
        default=Path.home() / ".taxviet" / "storage.json",
        description="Location of the JSON storage file"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )


class TaxSettings(BaseSettings):
    """Defaults used by the tax engine and new profiles."""
    
    model_config = SettingsConfigDict(
        env_prefix="TAXVIET_TAX_",
        extra="ignore"
    )
    
    default_category_id: str = Field(
        default="1",
        description="Business category assigned to new profiles"
    )
    default_vat_rate: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        le=1,
        description="VAT rate for new profiles"
    )
    default_pit_rate: Decimal = Field(
        default=Decimal("0.005"),
        ge=0,
        le=1,
        description="PIT rate for new profiles"
    )
    # VND has no minor unit
    currency_decimal_places: int = Field(
        default=0,
        ge=0,
        le=4,
        description="Decimal places used when presenting amounts"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    default_language: str = Field(
        default="vi",
        pattern="^(vi|en)$",
        description="Language used before the user picks one"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case, store upper case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
    @property
    def tax(self) -> TaxSettings:
        return TaxSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the groups that failed.
    """
    results = {}
    settings = get_settings()
    
    for name in ("storage", "tax", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
