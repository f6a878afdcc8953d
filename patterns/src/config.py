"""Configuration management for the pattern catalog CLI.

Uses Pydantic Settings for environment-based configuration. Every value
has a default so demos run without any environment set.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SingletonConfig(BaseSettings):
    """Parallel increment demo settings."""

    workers: int = Field(default=5, ge=1, description="Thread pool size")
    parallel_increments: int = Field(default=5, ge=0, description="Increments issued from the pool")

    model_config = SettingsConfigDict(env_prefix="PATTERNS_SINGLETON_")


class IteratorConfig(BaseSettings):
    """Lazy sequence demo settings."""

    fibonacci_count: int = Field(default=10, ge=0, description="Fibonacci numbers to print")
    large_data_set_size: int = Field(default=1_000_000, ge=0, description="Items in the lazy data set")
    progress_interval: int = Field(default=100_000, gt=0, description="Log progress every N items")
    lazy_take: int = Field(default=5, ge=0, description="Items taken from the lazy data set")

    model_config = SettingsConfigDict(env_prefix="PATTERNS_ITERATORS_")


class Config(BaseSettings):
    """Main catalog configuration."""

    singleton: SingletonConfig = Field(default_factory=SingletonConfig)
    iterators: IteratorConfig = Field(default_factory=IteratorConfig)

    service_name: str = Field(default="pattern-catalog", description="Service name")
    log_level: str = Field(default="WARNING", description="Log level")
    json_logs: bool = Field(default=False, description="Emit JSON logs instead of console output")

    coffee_condiments_answer: str = Field(
        default="y",
        description="Answer given to the coffee condiments prompt when running non-interactively"
    )
    shape: str = Field(default="circle", description="Shape drawn by the matching demo")
    log_chain_text: str = Field(default="Ada", description="Text sent through the multicast log chain")

    model_config = SettingsConfigDict(env_prefix="PATTERNS_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Global config instance
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """Get or create configuration instance.

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _config_instance
    _config_instance = None
