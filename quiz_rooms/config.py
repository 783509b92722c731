"""Runtime settings for the quiz room server."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from quiz_rooms.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_rooms.constants.quiz_constants import TICK_INTERVAL_SECONDS

ENV_PREFIX = "QUIZ_ROOMS_"


class Settings(BaseModel):
    """Server settings; every field can be overridden with a ``QUIZ_ROOMS_*`` variable."""

    host: str = DEFAULT_HOST
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    data_file: Path | None = Field(
        default=None,
        description="JSON file backing the document store; in-memory when unset.",
    )
    seed_file: Path | None = Field(
        default=None,
        description="Room definition file loaded into an empty store at startup.",
    )
    log_level: str = "INFO"
    tick_interval_seconds: float = Field(TICK_INTERVAL_SECONDS, gt=0)
    secure_cookies: bool = False


def load_settings(environ: Mapping[str, str] | None = None, **overrides: object) -> Settings:
    """Build settings from the environment, then apply keyword overrides."""
    environ = os.environ if environ is None else environ
    data: dict[str, object] = {}
    for name in Settings.model_fields:
        value = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            data[name] = value
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
