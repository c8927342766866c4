from __future__ import annotations

import argparse
import sys

from .config import PsqlxAIConfig
from .dispatcher import complete
from .errors import CompletionError
from .logging import configure_logging, get_logger
from .metrics import maybe_start_metrics

log = get_logger(__name__)

DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful assistant. Answer concisely."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psqlx-ai",
        description="Send one prompt to the configured LLM provider and print the reply.",
    )
    parser.add_argument("prompt", nargs="*", help="Prompt text (read from stdin when omitted)")
    parser.add_argument("--system", default=DEFAULT_SYSTEM_INSTRUCTION, help="System instruction")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    parser.add_argument("--log-format", choices=["json", "console"], default=None, help="Overrides LOG_FORMAT")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = PsqlxAIConfig()
    configure_logging(
        level=args.log_level or cfg.log_level,
        fmt=args.log_format or cfg.log_format,
        secrets=cfg.known_secrets(),
    )
    maybe_start_metrics(enable=cfg.enable_metrics, bind=cfg.metrics_bind, port=cfg.metrics_port)

    prompt = " ".join(args.prompt) if args.prompt else sys.stdin.read()
    if not prompt.strip():
        print("psqlx-ai: empty prompt", file=sys.stderr)
        return 2

    try:
        text = complete(
            [{"role": "user", "content": prompt}],
            args.system,
            timeout_seconds=cfg.timeout_seconds,
        )
    except CompletionError as e:
        log.info("completion_failed", error_type=type(e).__name__)
        print(f"psqlx-ai: {e}", file=sys.stderr)
        return 1

    print(text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
