"""
Converter configuration.

Settings come from DIAGRAM_CONVERTER_* environment variables and are
validated into an immutable ConverterConfig. Every layout function takes the
config explicitly; nothing reads the environment after load_config().
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "DIAGRAM_CONVERTER_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConverterConfig(BaseModel):
    """Layout and logging options."""
    model_config = ConfigDict(frozen=True)

    flow_layout: Literal["linear", "layered"] = "linear"
    er_router: Literal["ports", "corridor"] = "ports"
    er_columns: int = Field(default=4, ge=1)
    class_columns: int = Field(default=3, ge=1)
    mindmap_margin: int = Field(default=100, ge=0)
    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


DEFAULT_CONFIG = ConverterConfig()


def load_config(environ: Optional[dict] = None) -> ConverterConfig:
    """
    Build a ConverterConfig from environment variables.

    Unset variables keep their defaults. Invalid values raise
    pydantic.ValidationError.
    """
    environ = os.environ if environ is None else environ
    values = {}
    for field in ConverterConfig.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{field.upper()}")
        if raw is not None and raw != "":
            values[field] = raw.strip()
    return ConverterConfig(**values)
