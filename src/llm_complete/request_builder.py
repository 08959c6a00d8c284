"""Build provider-agnostic completion payloads."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from llm_complete.errors import ImageReadError
from llm_complete.types import GenerationParameters

_CHAT_PATH = "/v1/chat/completions"
_COMPLETIONS_PATH = "/v1/completions"

_IMAGE_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

# (attribute on GenerationParameters, key in the request body)
_SAMPLING_FIELDS = (
    ("max_tokens", "max_tokens"),
    ("temperature", "temperature"),
    ("top_k", "top_k"),
    ("top_p", "top_p"),
    ("min_p", "min_p"),
    ("repetition_penalty", "repetition_penalty"),
    ("seed", "seed"),
)

_logger = logging.getLogger(__name__)


def endpoint_path(params: GenerationParameters) -> str:
    """Return the API path for the completion mode."""
    return _COMPLETIONS_PATH if params.plain else _CHAT_PATH


def build_payload(params: GenerationParameters, prompt: str | None = None) -> dict[str, Any]:
    """Build the JSON request body for one completion call.

    ``prompt`` overrides ``params.prompt``; the caller resolves it from stdin
    when the parameters carry none. Only reads from disk when a local image
    path is attached, and raises :class:`ImageReadError` if that read fails.
    """
    text = prompt if prompt is not None else params.prompt or ""

    payload: dict[str, Any]
    if params.plain:
        if params.image_file:
            _logger.warning("Ignoring image %s: images need the chat completion API", params.image_file)
        payload = {"model": params.model_id, "prompt": text, "stream": params.stream}
    else:
        payload = {
            "model": params.model_id,
            "messages": _build_messages(text, params.image_file),
            "stream": params.stream,
        }

    for attr, key in _SAMPLING_FIELDS:
        value = getattr(params, attr)
        if value is not None:
            payload[key] = value

    return payload


def _build_messages(prompt: str, image_file: str | None) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = []
    if image_file:
        messages.append(
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": image_content(image_file)},
                    }
                ],
            }
        )
    messages.append({"role": "user", "content": prompt})
    return messages


def image_content(reference: str) -> str:
    """Return the ``image_url.url`` value for a URL or a local file path.

    URLs pass through unchanged. Local files with a known extension are
    inlined as a base64 ``data:`` URI; any other extension yields ``""``.
    """
    if _is_url(reference):
        return reference

    mime_type = _IMAGE_MIME_TYPES.get(reference.rsplit(".", 1)[-1].lower())
    if mime_type is None:
        _logger.debug("Unsupported image extension, sending empty content: %s", reference)
        return ""

    try:
        data = Path(reference).read_bytes()
    except OSError as exc:
        raise ImageReadError(reference, str(exc)) from exc

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _is_url(reference: str) -> bool:
    # single-letter schemes are Windows drive letters, not URLs
    try:
        scheme = urlsplit(reference).scheme
    except ValueError:
        return False
    return len(scheme) > 1
