"""
Simulation defaults and environment-driven settings.
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigurationError

G_DEFAULT = 6.67430e-11  # m^3 kg^-1 s^-2
DEFAULT_STEP_SIZE = 1.0
DEFAULT_MAX_STEPS = 100_000

ENV_PREFIX = "STARSYSTEM_"


class Settings(BaseModel):
    gravitational_constant: float = G_DEFAULT
    step_size: float = DEFAULT_STEP_SIZE
    workers: Optional[int] = None
    log_level: str = "INFO"
    max_steps: int = DEFAULT_MAX_STEPS
    cors_origins: List[str] = ["http://localhost:5173"]

    @field_validator("gravitational_constant")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("step_size")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be positive")
        return value

    @field_validator("workers", "max_steps")
    @classmethod
    def _at_least_one(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from ``STARSYSTEM_*`` environment variables, falling back
    to the defaults above for anything unset.
    """
    environ = os.environ if environ is None else environ
    fields = {
        "G": "gravitational_constant",
        "STEP_SIZE": "step_size",
        "WORKERS": "workers",
        "LOG_LEVEL": "log_level",
        "MAX_STEPS": "max_steps",
    }
    values = {
        field: environ[ENV_PREFIX + key]
        for key, field in fields.items()
        if environ.get(ENV_PREFIX + key)
    }
    origins = environ.get(ENV_PREFIX + "CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid {ENV_PREFIX}* settings: {exc}") from exc
