from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .errors import (
    CompletionError,
    EmptyChoicesError,
    EmptyContentError,
    MalformedResponseError,
    TransportError,
)
from .logging import get_logger
from .metrics import completion_latency_seconds, completions_total
from .resolver import Provider, assert_never, resolve
from .transport import HttpxTransport, JsonTransport
from .wire import AnthropicMessagesResponse, OpenAIChatResponse

log = get_logger(__name__)

Message = Mapping[str, Any]

TEMPERATURE = 0.0


def build_openai_body(
    model: str, messages: Sequence[Message], system_instruction: str, max_tokens: int
) -> dict[str, Any]:
    return {
        "temperature": TEMPERATURE,
        "model": model,
        "messages": [{"role": "system", "content": system_instruction}, *messages],
        "max_completion_tokens": max_tokens,
    }


def build_anthropic_body(
    model: str, messages: Sequence[Message], system_instruction: str, max_tokens: int
) -> dict[str, Any]:
    # Anthropic keeps the system prompt out of the message list.
    return {
        "temperature": TEMPERATURE,
        "model": model,
        "system": system_instruction,
        "messages": list(messages),
        "max_tokens": max_tokens,
    }


def build_request_body(
    provider: Provider,
    model: str,
    messages: Sequence[Message],
    system_instruction: str,
    max_tokens: int,
) -> dict[str, Any]:
    if provider is Provider.OPENAI:
        return build_openai_body(model, messages, system_instruction, max_tokens)
    if provider is Provider.ANTHROPIC:
        return build_anthropic_body(model, messages, system_instruction, max_tokens)
    assert_never(provider)


def parse_openai_response(data: Any) -> str:
    try:
        parsed = OpenAIChatResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected OpenAI response shape: {e}", provider=Provider.OPENAI
        ) from e
    if not parsed.choices:
        raise EmptyChoicesError(Provider.OPENAI)
    content = parsed.choices[0].message.content
    if content is None:
        raise EmptyContentError(Provider.OPENAI)
    return content


def parse_anthropic_response(data: Any) -> str:
    try:
        parsed = AnthropicMessagesResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected Anthropic response shape: {e}", provider=Provider.ANTHROPIC
        ) from e
    if not parsed.content:
        raise EmptyContentError(Provider.ANTHROPIC)
    return parsed.content[0].text


def parse_response(provider: Provider, data: Any) -> str:
    if provider is Provider.OPENAI:
        return parse_openai_response(data)
    if provider is Provider.ANTHROPIC:
        return parse_anthropic_response(data)
    assert_never(provider)


class CompletionDispatcher:
    """
    Resolve the provider from configuration and run one completion against it.

    `env` is the configuration lookup (defaults to os.environ, read on every
    call). `transport` sends the request; when omitted a fresh HttpxTransport is
    opened per call and closed afterwards.
    """

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        transport: JsonTransport | None = None,
        timeout_seconds: float | None = None,
    ):
        self.env = env
        self.transport = transport
        self.timeout_seconds = timeout_seconds

    def complete(self, messages: Sequence[Message], system_instruction: str) -> str:
        cfg = resolve(self.env)
        body = build_request_body(cfg.provider, cfg.model, messages, system_instruction, cfg.max_tokens)
        provider = cfg.provider.value

        log.debug(
            "completion_request",
            provider=provider,
            model=cfg.model,
            endpoint=cfg.endpoint,
            messages=len(messages),
        )
        start = time.monotonic()
        try:
            with completion_latency_seconds.labels(provider=provider).time():
                data = self._post(cfg.endpoint, cfg.headers, body)
            text = parse_response(cfg.provider, data)
        except (TransportError, MalformedResponseError) as e:
            if e.provider is None:
                e.provider = cfg.provider
            completions_total.labels(provider=provider, status="error").inc()
            raise
        except CompletionError:
            completions_total.labels(provider=provider, status="error").inc()
            raise

        completions_total.labels(provider=provider, status="success").inc()
        log.debug(
            "completion_ok",
            provider=provider,
            model=cfg.model,
            chars=len(text),
            latency_seconds=round(time.monotonic() - start, 3),
        )
        return text

    def _post(self, url: str, headers: Sequence[tuple[str, str]], body: dict[str, Any]) -> Any:
        if self.transport is not None:
            return self.transport.post_json(url, headers=headers, payload=body)
        with HttpxTransport(timeout_seconds=self.timeout_seconds) as transport:
            return transport.post_json(url, headers=headers, payload=body)


def complete(
    messages: Sequence[Message],
    system_instruction: str,
    *,
    env: Mapping[str, str] | None = None,
    transport: JsonTransport | None = None,
    timeout_seconds: float | None = None,
) -> str:
    """Run one completion with the provider selected by `env` (or os.environ)."""
    dispatcher = CompletionDispatcher(env=env, transport=transport, timeout_seconds=timeout_seconds)
    return dispatcher.complete(messages, system_instruction)
