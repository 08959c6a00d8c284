"""Command-line entry point: one prompt in, one completion out."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

import httpx

from llm_complete.client import CompletionClient
from llm_complete.config import DEFAULT_API_BASE, ClientConfig, resolve_api_key, resolve_prompt
from llm_complete.errors import LLMCompleteError
from llm_complete.sink import OutputSink, StreamSink
from llm_complete.types import GenerationParameters

_logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="llm-complete",
        description="Send a prompt to an OpenAI-compatible API. Reads from STDIN if '--prompt' is not supplied.",
    )
    p.add_argument("--api", default=DEFAULT_API_BASE, metavar="URL", help="The API endpoint base URL to use.")
    p.add_argument(
        "--key",
        default=None,
        metavar="API_KEY",
        help="API key for the remote endpoint; if absent, OPENROUTER_API_KEY is checked.",
    )
    p.add_argument("--prompt", default=None, help="Prompt to send instead of reading from STDIN.")
    p.add_argument("-n", "--max-tokens", type=int, default=None, metavar="INT", help="Maximum tokens to generate.")
    p.add_argument("--model-id", default=GenerationParameters().model_id, help="Model to generate the completion with.")
    p.add_argument("-s", "--stream", action="store_true", help="Write the response to stdout as it's received.")
    p.add_argument("--plain", action="store_true", help="Use the non-chat completion API.")
    p.add_argument("--temp", type=float, default=None, metavar="FLOAT", help="Sampling temperature.")
    p.add_argument(
        "--top-p",
        type=float,
        default=None,
        metavar="FLOAT",
        help="Sample only from the top tokens whose probabilities add up to P.",
    )
    p.add_argument(
        "--min-p",
        type=float,
        default=None,
        metavar="FLOAT",
        help="Minimum token probability relative to the most probable token.",
    )
    p.add_argument("--top-k", type=int, default=None, metavar="INT", help="Sample only from the top K tokens.")
    p.add_argument(
        "--rep-pen",
        type=float,
        default=None,
        metavar="FLOAT",
        help="Higher values make the model less likely to repeat tokens.",
    )
    p.add_argument("--seed", type=int, default=None, help="Generation seed (determinism is not guaranteed).")
    p.add_argument(
        "--image",
        default=None,
        metavar="PATH_OR_URL",
        help="Image to attach to the request; not available with --plain.",
    )
    p.add_argument(
        "--referer",
        default=None,
        metavar="URL",
        help="Sent as the HTTP-Referer header for app attribution (OpenRouter).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging on stderr.")
    return p


def params_from_args(args: argparse.Namespace) -> GenerationParameters:
    return GenerationParameters(
        prompt=args.prompt,
        model_id=args.model_id,
        mode="plain" if args.plain else "chat",
        stream=args.stream,
        max_tokens=args.max_tokens,
        temperature=args.temp,
        top_p=args.top_p,
        min_p=args.min_p,
        top_k=args.top_k,
        repetition_penalty=args.rep_pen,
        seed=args.seed,
        image_file=args.image,
    )


async def run(
    config: ClientConfig,
    prompt: str,
    sink: OutputSink,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Execute one completion and terminate any output with a newline."""
    async with CompletionClient(config, transport=transport) as client:
        emitted = await client.complete(sink, prompt)
    if emitted:
        sink.emit("\n")


def main(argv: Sequence[str] | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        params = params_from_args(args)
        config = ClientConfig(
            api_base=args.api,
            api_key=resolve_api_key(args.key),
            params=params,
            referer=args.referer,
        )
        prompt = resolve_prompt(params)
        asyncio.run(run(config, prompt, StreamSink(sys.stdout), transport=transport))
    except LLMCompleteError as exc:
        _logger.debug("Completion failed", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
