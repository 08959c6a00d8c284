"""Client configuration and credential/prompt resolution."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import TextIO

from pydantic import BaseModel, ConfigDict, field_validator

from llm_complete.errors import ConfigurationError
from llm_complete.types import GenerationParameters

DEFAULT_API_BASE = "https://openrouter.ai/api"
API_KEY_ENV_VAR = "OPENROUTER_API_KEY"


class ClientConfig(BaseModel):
    """Endpoint, credential and generation parameters for one invocation."""

    model_config = ConfigDict(frozen=True)

    api_base: str = DEFAULT_API_BASE
    api_key: str
    params: GenerationParameters
    # sent as HTTP-Referer when set
    referer: str | None = None

    @field_validator("api_base")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def resolve_api_key(explicit: str | None, environ: Mapping[str, str] | None = None) -> str:
    """Return the explicit key, falling back to ``OPENROUTER_API_KEY``."""
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    key = env.get(API_KEY_ENV_VAR)
    if not key:
        raise ConfigurationError(f"API key must be provided via --key or the {API_KEY_ENV_VAR} environment variable")
    return key


def resolve_prompt(params: GenerationParameters, stdin: TextIO | None = None) -> str:
    """Return the configured prompt or everything readable from stdin."""
    if params.prompt is not None:
        return params.prompt
    stream = stdin if stdin is not None else sys.stdin
    try:
        return stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read prompt from stdin: {exc}") from exc
