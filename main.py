"""Command-line entry point: stream one completion to stdout."""

from __future__ import annotations

import argparse
import asyncio
import sys

from anthropic_lite import (
    AnthropicClient,
    AnthropicError,
    Message,
    MessagesRequest,
    __version__,
)
from anthropic_lite.core import (
    bind_context,
    clear_context,
    configure_structured_logging,
    get_logger,
    get_metrics,
    init_client_info,
    settings,
)
from anthropic_lite.models import ContentBlockDeltaEvent, ContentBlockDeltaText

logger = get_logger(__name__)


async def stream_prompt(
    prompt: str,
    model: str,
    max_tokens: int,
    system: str | None = None,
    show_metrics: bool = False,
) -> int:
    """Stream the completion for ``prompt`` to stdout.

    Log records emitted while streaming carry the model.
    With ``show_metrics`` the Prometheus exposition is written to stderr
    once the stream ends.

    Returns:
        Process exit code
    """
    request = MessagesRequest.new(model, max_tokens, [Message.user(prompt)]).with_stream(True)
    if system:
        request = request.with_system(system)

    bind_context(model=model)
    try:
        async with AnthropicClient() as client:
            async with await client.stream_message(request) as stream:
                async for event in stream:
                    if isinstance(event, ContentBlockDeltaEvent) and isinstance(
                        event.delta, ContentBlockDeltaText
                    ):
                        sys.stdout.write(event.delta.text)
                        sys.stdout.flush()
    except AnthropicError as e:
        sys.stdout.write("\n")
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        clear_context()
        if show_metrics:
            sys.stderr.write(get_metrics().decode("utf-8"))

    sys.stdout.write("\n")
    return 0


def main() -> None:
    """Run the anthropic-lite command line client."""
    parser = argparse.ArgumentParser(
        description="anthropic-lite - stream a Claude completion to stdout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  anthropic-lite "Explain the theory of relativity"
  anthropic-lite --model claude-3-haiku-20240307 --max-tokens 256 "Hi"
  echo "Summarize this" | anthropic-lite -

Environment variables:
  ANTHROPIC_API_KEY             API key (required)

Non-secret settings live in settings/settings.toml.
        """,
    )

    parser.add_argument(
        "prompt",
        help="Prompt text, or - to read it from stdin",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Model to use (default: {settings.default_model})",
    )
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help=f"Maximum tokens to generate (default: {settings.client.default_max_tokens})",
    )
    parser.add_argument(
        "--system",
        type=str,
        default=None,
        help="System prompt",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics to stderr when done",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"anthropic-lite {__version__}",
    )

    args = parser.parse_args()

    configure_structured_logging(
        log_level="DEBUG" if args.debug else settings.logging.level,
        json_format=settings.logging.json_format,
    )
    if settings.metrics_enabled:
        init_client_info(__version__)

    prompt = sys.stdin.read() if args.prompt == "-" else args.prompt
    model = args.model or settings.default_model
    max_tokens = args.max_tokens if args.max_tokens is not None else settings.client.default_max_tokens

    logger.debug("cli_start", model=model, max_tokens=max_tokens)
    sys.exit(asyncio.run(stream_prompt(prompt, model, max_tokens, args.system, args.metrics)))


if __name__ == "__main__":
    main()
