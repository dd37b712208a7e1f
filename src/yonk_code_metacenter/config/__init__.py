"""Configuration management for the metadata center."""
from .settings import (
    CONFIG_ENV_VAR,
    DDLConfig,
    GenerationConfig,
    LoggingConfig,
    MetaCenterConfig,
    SearchTemplateConfig,
    StoreConfig,
    load_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "DDLConfig",
    "GenerationConfig",
    "LoggingConfig",
    "MetaCenterConfig",
    "SearchTemplateConfig",
    "StoreConfig",
    "load_config",
]
