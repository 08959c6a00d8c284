"""Decode completion responses into text fragments.

Two entry points share the same document parser:

* :func:`decode_once` handles a complete non-streaming body.
* :func:`decode_stream` consumes raw byte chunks of a streaming response,
  re-assembles newline-terminated ``data: `` lines and hands every fragment
  to an :class:`~llm_complete.sink.OutputSink` as soon as its line is parsed.

A wire document carries no field that says whether it is a success or an
error, so the success schema is tried first and the error envelope second.
Anything matching neither is reported as :class:`MalformedResponse` with the
raw text attached. Every failure is terminal for the call; fragments already
emitted are not retracted.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import AsyncIterable, Iterator

from pydantic import ValidationError

from llm_complete.errors import ApiError, MalformedResponse, UnexpectedStreamingShape
from llm_complete.sink import OutputSink
from llm_complete.types import DecodedResponse, DeltaChoice, ErrorEnvelope, MessageChoice, PlainChoice

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

_logger = logging.getLogger(__name__)


def parse_document(text: str) -> DecodedResponse:
    """Parse one JSON document, raising :class:`ApiError` for error envelopes."""
    try:
        return DecodedResponse.model_validate_json(text)
    except ValidationError as exc:
        diagnostic = str(exc)

    try:
        envelope = ErrorEnvelope.model_validate_json(text)
    except ValidationError:
        raise MalformedResponse(text, diagnostic) from None

    error = envelope.error
    raise ApiError(error.code, error.message, error.metadata)


def decode_once(body: str) -> list[str]:
    """Return the text of the first choice of a non-streaming response."""
    response = parse_document(body)
    if not response.choices:
        return []

    choice = response.choices[0]
    if isinstance(choice, PlainChoice):
        return [choice.text]
    if isinstance(choice, MessageChoice):
        return [choice.message.content or ""]
    raise UnexpectedStreamingShape()


def fragments_from(response: DecodedResponse) -> Iterator[str]:
    """Yield the text carried by each choice of a stream chunk, in order."""
    for choice in response.choices:
        if choice.error is not None:
            _logger.warning("Choice reported error %s: %s", choice.error.code, choice.error.message)

        if isinstance(choice, PlainChoice):
            yield choice.text
        elif isinstance(choice, DeltaChoice):
            if choice.delta.content is not None:
                yield choice.delta.content
        elif choice.message.content is not None:
            # some providers send full messages while streaming
            yield choice.message.content


class LineBuffer:
    """Re-assemble text lines from arbitrarily split byte chunks.

    Bytes are decoded incrementally, so a multi-byte character split across
    two chunks is still decoded correctly; invalid sequences become U+FFFD.
    After every :meth:`feed` all complete lines have been returned and the
    buffer holds at most one unterminated line.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received so far that is not yet terminated by a newline."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Append ``chunk`` and return the complete, non-empty, stripped lines."""
        buffer = self._buffer + self._decoder.decode(chunk)
        lines: list[str] = []
        start = 0
        while True:
            pos = buffer.find("\n", start)
            if pos == -1:
                break
            line = buffer[start:pos].strip()
            start = pos + 1
            if line:
                lines.append(line)

        self._buffer = buffer[start:].lstrip()
        return lines

    def close(self) -> str:
        """Flush the decoder and return (and forget) any unterminated text."""
        leftover = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return leftover


async def decode_stream(chunks: AsyncIterable[bytes], sink: OutputSink) -> int:
    """Decode a streaming response body, emit fragments to ``sink`` and return their count.

    Lines without the ``data: `` prefix (SSE comments, keep-alives, ``event:``
    lines) are skipped. The ``[DONE]`` sentinel ends decoding; no further
    chunks are read after it. A trailing line without a newline is dropped.
    """
    framing = LineBuffer()
    emitted = 0
    async for chunk in chunks:
        for line in framing.feed(chunk):
            if not line.startswith(DATA_PREFIX):
                _logger.debug("Skipping non-data line: %s", line)
                continue

            payload = line[len(DATA_PREFIX) :].strip()
            if payload == DONE_SENTINEL:
                _logger.debug("Received %s sentinel", DONE_SENTINEL)
                return emitted

            for fragment in fragments_from(parse_document(payload)):
                sink.emit(fragment)
                emitted += 1

    leftover = framing.close()
    if leftover:
        _logger.debug("Discarding unterminated trailing data: %r", leftover)
    return emitted
