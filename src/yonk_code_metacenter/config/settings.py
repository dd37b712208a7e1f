"""Metadata center configuration loading and validation.

Loads YAML configuration for the metacenter tools with full validation.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from sqlglot.dialects.dialect import Dialect

CONFIG_ENV_VAR = "METACENTER_CONFIG"


class DDLConfig(BaseModel):
    """DDL parsing configuration."""
    dialect: str = Field("mysql", description="sqlglot dialect used to read DDL")
    strip_patterns: list[str] = Field(
        default_factory=lambda: [r"shardkey=.*"],
        description="Regexes removed from DDL text before parsing",
    )

    @field_validator("dialect")
    @classmethod
    def validate_dialect(cls, v: str) -> str:
        """Dialect must be known to sqlglot."""
        Dialect.get_or_raise(v)
        return v

    @field_validator("strip_patterns")
    @classmethod
    def validate_strip_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid strip pattern {pattern!r}: {e}") from e
        return v


class GenerationConfig(BaseModel):
    """Artifact generation configuration."""
    output_dir: str = Field("./default", description="Root directory for generated packages")
    artifacts: list[str] = Field(
        default_factory=lambda: ["constants", "model"],
        description="Built-in or custom artifact names to generate",
    )
    templates_dir: str | None = Field(None, description="Directory holding custom <name>.py.j2 templates")
    float_as_decimal: bool = Field(False, description="Generate Decimal instead of float for float64 fields")
    formatter: list[str] = Field(default_factory=list, description="Formatter command, e.g. ['black', '-q']")
    skip_retired_enum_values: bool = Field(False, description="Leave retired enum values out")
    inject_params: list[str] = Field(default_factory=list, description="Lines appended to every artifact")


class SearchTemplateConfig(BaseModel):
    """Search index template defaults."""
    number_of_shards: int = Field(3, ge=1, description="Shards when the table sets none")
    number_of_replicas: int = Field(0, ge=0, description="Replicas when the table sets none")
    date_format: str = Field("yyyy-MM-dd HH:mm:ss", description="Format of datetime fields")
    analyzer: str = Field("ik_max_word", description="Index-time analyzer for text fields")
    search_analyzer: str = Field("ik_smart", description="Query-time analyzer for text fields")
    priority: int = Field(0, ge=0, description="Template priority")
    version: int = Field(0, ge=0, description="Template version")


class StoreConfig(BaseModel):
    """Metadata store configuration."""
    path: str | None = Field(None, description="YAML metadata file; unset means an empty store")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s", description="logging format string"
    )


class MetaCenterConfig(BaseModel):
    """Complete metacenter configuration."""
    ddl: DDLConfig = Field(default_factory=DDLConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    search: SearchTemplateConfig = Field(default_factory=SearchTemplateConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> MetaCenterConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated MetaCenterConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {config_path}: expected a mapping")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_env(cls, env_var: str = CONFIG_ENV_VAR) -> MetaCenterConfig:
        """Load configuration from the path in an environment variable.

        Falls back to defaults when the variable isn't set.
        """
        config_path = os.getenv(env_var)
        if not config_path:
            return cls()
        return cls.from_yaml(config_path)


def load_config(config_path: str | Path | None = None) -> MetaCenterConfig:
    """Load configuration from file, environment, or defaults.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Validated MetaCenterConfig instance

    Raises:
        FileNotFoundError: If the chosen file doesn't exist
        ValueError: If configuration is invalid
    """
    if config_path:
        return MetaCenterConfig.from_yaml(config_path)

    return MetaCenterConfig.from_env()
