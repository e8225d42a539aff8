"""Configuration management."""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from tagtree.core.constants import EndiannessType


class GzipMode(str, Enum):
    """Transport decompression policy for files handled by the CLI."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class CodecConfig(BaseModel):
    """Codec and tooling configuration."""

    endianness: EndiannessType = Field(
        EndiannessType.BIG,
        description="Payload byte order for streams without a header",
    )
    gzip: GzipMode = Field(
        GzipMode.AUTO,
        description="Gzip handling: auto (sniff magic), always, never",
    )
    log_level: str = Field(
        "INFO",
        description="Logging level name",
    )
    log_json: bool = Field(
        False,
        description="Render log records as JSON instead of console lines",
    )

    @field_validator("endianness", mode="before")
    @classmethod
    def _parse_endianness(cls, value: object) -> object:
        if isinstance(value, str):
            return EndiannessType.parse(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> "CodecConfig":
        return cls(
            endianness=os.getenv("TAGTREE_ENDIANNESS", "big"),
            gzip=os.getenv("TAGTREE_GZIP", "auto").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("TAGTREE_LOG_JSON", "false").lower() == "true",
        )
