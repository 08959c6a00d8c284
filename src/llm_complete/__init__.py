"""Single-request client for OpenAI-compatible text completion APIs."""

from .client import CompletionClient
from .config import ClientConfig
from .decoder import decode_once, decode_stream
from .errors import (
    ApiError,
    ConfigurationError,
    ImageReadError,
    LLMCompleteError,
    MalformedResponse,
    TransportError,
    UnexpectedStreamingShape,
)
from .request_builder import build_payload
from .sink import CollectingSink, OutputSink, StreamSink
from .types import GenerationParameters

__all__ = [
    "ApiError",
    "ClientConfig",
    "CollectingSink",
    "CompletionClient",
    "ConfigurationError",
    "GenerationParameters",
    "ImageReadError",
    "LLMCompleteError",
    "MalformedResponse",
    "OutputSink",
    "StreamSink",
    "TransportError",
    "UnexpectedStreamingShape",
    "build_payload",
    "decode_once",
    "decode_stream",
]
