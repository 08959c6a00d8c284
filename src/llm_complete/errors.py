"""Package specific exception hierarchy."""

from __future__ import annotations

from typing import Any


class LLMCompleteError(Exception):
    """Base exception for llm_complete package."""


class ConfigurationError(LLMCompleteError):
    """Raised when required configuration cannot be resolved."""


class ImageReadError(LLMCompleteError):
    """Raised when a local image attachment cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read image file '{path}': {reason}")
        self.path = path


class TransportError(LLMCompleteError):
    """Represents connection failures and non-success HTTP statuses."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        suffix = f" (status {status_code})" if status_code is not None else ""
        detail = f": {body}" if body else ""
        super().__init__(f"{message}{suffix}{detail}")
        self.status_code = status_code
        self.body = body


class ApiError(LLMCompleteError):
    """Raised when the provider answers with an error envelope."""

    def __init__(self, code: int, message: str, metadata: Any | None = None) -> None:
        text = f"API request failed with code {code}: {message}"
        if metadata is not None:
            text += f"\nError metadata: {metadata!r}"
        super().__init__(text)
        self.code = code
        self.message = message
        self.metadata = metadata


class MalformedResponse(LLMCompleteError):
    """Raised when a payload matches neither the success nor the error schema."""

    def __init__(self, raw_body: str, parse_diagnostic: str) -> None:
        super().__init__(f"Failed to parse JSON: {parse_diagnostic}\nRaw JSON: {raw_body}")
        self.raw_body = raw_body
        self.parse_diagnostic = parse_diagnostic


class UnexpectedStreamingShape(LLMCompleteError):
    """Raised when a delta-shaped choice arrives on the non-streaming path."""

    def __init__(self) -> None:
        super().__init__("Received a streaming delta choice in a non-streaming response.")
