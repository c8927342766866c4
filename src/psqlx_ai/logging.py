from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, TypeAlias, cast

import structlog


_SENSITIVE_KEYS = {
    "authorization",
    "proxy_authorization",
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
}

_SENSITIVE_SUFFIXES = ("_api_key", "_secret", "_password", "_token")

_SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key"}

_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9._-]{6,})")

LIBRARY_LOGGER = "psqlx_ai"

ProcessorReturn: TypeAlias = Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]
Processor: TypeAlias = Callable[[Any, str, MutableMapping[str, Any]], ProcessorReturn]


def _is_sensitive(name: Any) -> bool:
    key = str(name).lower().replace("-", "_")
    return key in _SENSITIVE_KEYS or key.endswith(_SENSITIVE_SUFFIXES)


def _redact_str(value: str, *, secrets: list[str]) -> str:
    out = value
    for secret in secrets:
        if secret and secret in out:
            out = out.replace(secret, "[REDACTED]")
    return _BEARER_RE.sub("Bearer [REDACTED]", out)


def _redact_obj(obj: Any, *, secrets: list[str]) -> Any:
    if obj is None or isinstance(obj, (int, float, bool)):
        return obj
    if isinstance(obj, str):
        return _redact_str(obj, secrets=secrets)
    if isinstance(obj, tuple) and len(obj) == 2 and isinstance(obj[0], str) and obj[0].lower() in _SENSITIVE_HEADERS:
        # header pair: ("x-api-key", "sk-...")
        return (obj[0], "[REDACTED]")
    if isinstance(obj, (list, tuple)):
        return type(obj)(_redact_obj(v, secrets=secrets) for v in obj)
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if _is_sensitive(k) else _redact_obj(v, secrets=secrets)
            for k, v in obj.items()
        }
    return obj


def make_redaction_processor(*, secrets: list[str]) -> Processor:
    secrets_norm = [s for s in secrets if isinstance(s, str) and s]

    def _processor(_logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> ProcessorReturn:
        return cast(dict[str, Any], _redact_obj(event_dict, secrets=secrets_norm))

    return _processor


def get_logger(name: str) -> Any:
    """
    structlog logger writing through the stdlib logger `name`.

    Library events stay silent until the host configures stdlib logging (or
    calls configure_logging); the package logger carries a NullHandler.
    """
    return structlog.wrap_logger(logging.getLogger(name))


def configure_logging(level: str = "INFO", fmt: str = "json", *, secrets: list[str] | None = None) -> None:
    """
    Configure structlog for library and CLI use.

    Events are rendered by structlog and emitted through stdlib logging on
    stderr, so completion text on stdout stays clean. The redaction processor
    always runs; `secrets` adds literal values (API keys) to scrub from any
    string field.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, stream=sys.stderr, format="%(message)s")
    logging.getLogger(LIBRARY_LOGGER).setLevel(log_level)

    processors: list[Processor] = [
        cast(Processor, structlog.contextvars.merge_contextvars),
        cast(Processor, structlog.processors.add_log_level),
        cast(Processor, structlog.processors.TimeStamper(fmt="iso")),
        make_redaction_processor(secrets=secrets or []),
    ]

    if fmt == "json":
        processors.append(cast(Processor, structlog.processors.JSONRenderer()))
    else:
        processors.append(cast(Processor, structlog.dev.ConsoleRenderer()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())
