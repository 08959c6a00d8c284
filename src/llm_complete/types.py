"""Request parameters and wire models for OpenAI-compatible completion APIs."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt

CompletionMode = Literal["chat", "plain"]


class GenerationParameters(BaseModel):
    """Everything needed to build one completion request."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    prompt: str | None = None
    model_id: str = "google/gemini-2.0-flash-exp:free"
    mode: CompletionMode = "chat"
    stream: bool = False
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    min_p: float | None = None
    top_k: int | None = None
    repetition_penalty: float | None = None
    seed: int | None = None
    # absolute URL or local filesystem path
    image_file: str | None = None

    @property
    def plain(self) -> bool:
        return self.mode == "plain"


class Usage(BaseModel):
    """Token accounting; sent once per non-streaming response, last chunk when streaming."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class FunctionCall(BaseModel):
    name: str
    arguments: Any


class ToolCall(BaseModel):
    id: str
    type: str
    function: FunctionCall


class ErrorDetail(BaseModel):
    """Provider error body; metadata carries provider details or the raw upstream error."""

    # "429" is not a code; such documents are reported as malformed
    code: StrictInt
    message: str
    metadata: Any | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


class ChatMessage(BaseModel):
    """Complete assistant message of a non-streaming chat completion."""

    content: str | None = None
    role: str
    tool_calls: list[ToolCall] | None = None


class Delta(BaseModel):
    """Partial assistant message of a streaming chat completion."""

    content: str | None = None
    role: str | None = None
    tool_calls: list[ToolCall] | None = None


class PlainChoice(BaseModel):
    finish_reason: str | None = None
    text: str
    error: ErrorDetail | None = None


class MessageChoice(BaseModel):
    # 'stop' | 'length' | 'content_filter' | 'tool_calls', depending on the model
    finish_reason: str | None = None
    message: ChatMessage
    error: ErrorDetail | None = None


class DeltaChoice(BaseModel):
    finish_reason: str | None = None
    delta: Delta
    error: ErrorDetail | None = None


# No tag on the wire: the first variant whose required fields are all present wins.
Choice = Annotated[PlainChoice | MessageChoice | DeltaChoice, Field(union_mode="left_to_right")]


class DecodedResponse(BaseModel):
    """One completion document, either a full response or a single stream chunk."""

    # not documented as optional, but some providers omit it
    id: str | None = None
    provider: str | None = None
    model: str
    # "chat.completion", "chat.completion.chunk", "text_completion", ...
    object: str
    created: int
    choices: list[Choice]
    system_fingerprint: str | None = None
    usage: Usage | None = None
