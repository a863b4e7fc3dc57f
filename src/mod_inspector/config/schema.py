"""Pydantic models for configuration schema."""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_.:]*$")


class AnalysisConfig(BaseModel):
    """Dependency tree configuration."""

    entry_file: str = "entry.lua"
    include_functions: list[str] = Field(default_factory=lambda: ["include"], min_length=1)
    comment_marker: str = Field("--", min_length=1)

    @field_validator("include_functions")
    @classmethod
    def validate_include_functions(cls, v: list[str]) -> list[str]:
        """Validate include function names."""
        for name in v:
            if not _IDENTIFIER.match(name):
                raise ValueError(f"Invalid include function name: {name!r}")
        return v

    @field_validator("entry_file")
    @classmethod
    def validate_entry_file(cls, v: str) -> str:
        """Reject blank entry files."""
        if not v.strip():
            raise ValueError("Entry file must not be empty")
        return v


class ErrorsConfig(BaseModel):
    """Transcript error attribution configuration."""

    default_file: str = "entry.lua"


class CacheConfig(BaseModel):
    """Session cache configuration."""

    enabled: bool = True


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("mod-inspector.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class InspectorConfig(BaseSettings):
    """Root configuration for Mod Inspector."""

    analysis: AnalysisConfig = AnalysisConfig()
    errors: ErrorsConfig = ErrorsConfig()
    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="MOD_INSPECTOR_",
        env_nested_delimiter="__",
    )

    @model_validator(mode="after")
    def check_default_file(self) -> "InspectorConfig":
        """Errors can only default to a Lua source file."""
        if not self.errors.default_file.endswith(".lua"):
            raise ValueError(
                f"errors.default_file must be a .lua file, got {self.errors.default_file!r}"
            )
        return self
