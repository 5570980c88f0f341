"""
Configuration loading and validation for knowledgenet.

Loads knowledgenet.toml files and validates settings using Pydantic.
"""

from pathlib import Path
from typing import Literal

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "knowledgenet.toml"


class KnowledgeConfig(BaseModel):
    """Knowledge files to load into the network."""

    files: list[Path] = Field(default_factory=list)
    delimiter: str = ";"

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Commas separate tag arguments, so they cannot separate fields."""
        if not v or v == ",":
            raise ValueError("delimiter must be a non-empty string other than ','")
        return v

    def resolve_files(self, base_path: Path | None = None) -> list[Path]:
        """
        Resolve knowledge file paths.

        Args:
            base_path: Base directory for relative paths (usually the config file's directory)

        Returns:
            Absolute or base-relative paths
        """
        if base_path is None:
            return list(self.files)
        return [path if path.is_absolute() else base_path / path for path in self.files]


class SearchConfig(BaseModel):
    """Forward / backward search settings."""

    forward_score: float = Field(default=50.0, ge=0.0, le=100.0)
    backward_score: float = Field(default=50.0, ge=0.0, le=100.0)
    max_depth: int = Field(default=10, ge=1)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class EngineConfig(BaseModel):
    """Complete knowledgenet configuration."""

    name: str = "default"
    knowledge: KnowledgeConfig = Field(default_factory=KnowledgeConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Path) -> EngineConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to knowledgenet.toml

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
        config = EngineConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return config


def create_default_config(
    output_path: Path,
    name: str = "default",
    knowledge_files: list[str] | None = None,
) -> None:
    """
    Write a knowledgenet.toml with default settings.

    Args:
        output_path: Where to write the file
        name: Network name (used as logging context)
        knowledge_files: Knowledge file paths, relative to the config file
    """
    files = ", ".join(f'"{path}"' for path in (knowledge_files or []))

    template = f'''name = "{name}"

[knowledge]
files = [{files}]
delimiter = ";"  # <inputTag>; <threshold>; <outputTag>; <weight>; ...

[search]
forward_score = 50.0  # Minimum confidence that keeps forward search going
backward_score = 50.0  # Minimum confidence for an antecedent to be reported
max_depth = 10  # Hops explored by backward search

[logging]
level = "WARNING"
'''

    output_path.write_text(template, encoding="utf-8")
