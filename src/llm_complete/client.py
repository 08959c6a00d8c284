"""Async client for OpenAI-compatible completion endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from llm_complete.config import ClientConfig
from llm_complete.decoder import decode_once, decode_stream
from llm_complete.errors import TransportError
from llm_complete.request_builder import build_payload, endpoint_path
from llm_complete.sink import OutputSink

_TITLE = "llm-complete"


class CompletionClient:
    """Send one completion request and feed the decoded text to a sink."""

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        config: ClientConfig,
        *,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(base_url=config.api_base, timeout=timeout_s, transport=transport)
        self._headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
            "X-Title": _TITLE,
        }
        # OpenRouter uses these two headers for app attribution
        if config.referer:
            self._headers["HTTP-Referer"] = config.referer

    async def __aenter__(self) -> CompletionClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def complete(self, sink: OutputSink, prompt: str | None = None) -> int:
        """Run a single completion, streaming or not, emitting text to ``sink``.

        Returns the number of fragments emitted.

        Raises a :class:`~llm_complete.errors.LLMCompleteError` subclass on any
        failure; nothing is retried.
        """
        params = self._config.params
        payload = build_payload(params, prompt)
        path = endpoint_path(params)
        self._logger.debug("POST %s (model=%s, stream=%s)", path, params.model_id, params.stream)

        if params.stream:
            return await self._complete_streaming(path, payload, sink)
        return await self._complete_once(path, payload, sink)

    async def _complete_once(self, path: str, payload: dict[str, Any], sink: OutputSink) -> int:
        try:
            response = await self._client.post(path, headers=self._headers, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {path} failed: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                "API request failed",
                status_code=response.status_code,
                body=response.text or response.reason_phrase,
            )

        fragments = decode_once(response.text)
        for fragment in fragments:
            sink.emit(fragment)
        return len(fragments)

    async def _complete_streaming(self, path: str, payload: dict[str, Any], sink: OutputSink) -> int:
        try:
            async with self._client.stream("POST", path, headers=self._headers, json=payload) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise TransportError(
                        "API request failed",
                        status_code=response.status_code,
                        body=body.decode(errors="replace") or response.reason_phrase,
                    )

                return await decode_stream(response.aiter_bytes(), sink)
        except httpx.HTTPError as exc:
            raise TransportError(f"Streaming request to {path} failed: {exc}") from exc
