from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import NoReturn

from .errors import InvalidConfigError, MissingCredentialError, UnknownProviderError

PROVIDER_ENV = "PSQLX_AI_PROVIDER"
MODEL_ENV = "PSQLX_AI_MODEL"
MAX_TOKENS_ENV = "PSQLX_AI_MAX_TOKENS"

DEFAULT_MAX_TOKENS = 4096
MAX_TOKENS_LIMIT = 2**31 - 1
ANTHROPIC_VERSION = "2023-06-01"

_DIGITS_RE = re.compile(r"[0-9]+")

Headers = tuple[tuple[str, str], ...]


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


_API_KEY_ENV: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
}

_DEFAULT_MODELS: dict[Provider, str] = {
    Provider.OPENAI: "gpt-4o-mini",
    Provider.ANTHROPIC: "claude-3-5-haiku-latest",
}

_ENDPOINTS: dict[Provider, str] = {
    Provider.OPENAI: "https://api.openai.com/v1/chat/completions",
    Provider.ANTHROPIC: "https://api.anthropic.com/v1/messages",
}


@dataclass(frozen=True)
class ResolvedConfig:
    provider: Provider
    model: str
    endpoint: str
    headers: Headers
    max_tokens: int


def assert_never(value: NoReturn) -> NoReturn:
    raise AssertionError(f"Unhandled provider: {value!r}")


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def detect(env: Mapping[str, str] | None = None) -> Provider:
    """
    Select the provider from PSQLX_AI_PROVIDER.

    An unset selector falls back to OpenAI; a set but unrecognized value
    (including the empty string) is an error.
    """
    value = _env(env).get(PROVIDER_ENV)
    if value is None:
        return Provider.OPENAI
    try:
        return Provider(value.lower())
    except ValueError:
        raise UnknownProviderError(value) from None


def api_key_env(provider: Provider) -> str:
    return _API_KEY_ENV[provider]


def api_key(provider: Provider, env: Mapping[str, str] | None = None) -> str:
    key = api_key_env(provider)
    value = _env(env).get(key)
    if value is None:
        raise MissingCredentialError(provider, key)
    return value


def model(provider: Provider, env: Mapping[str, str] | None = None) -> str:
    override = _env(env).get(MODEL_ENV)
    if override is not None:
        return override
    return _DEFAULT_MODELS[provider]


def endpoint(provider: Provider) -> str:
    return _ENDPOINTS[provider]


def headers(provider: Provider, env: Mapping[str, str] | None = None) -> Headers:
    key = api_key(provider, env)
    if provider is Provider.OPENAI:
        return (
            ("Authorization", f"Bearer {key}"),
            ("Content-Type", "application/json"),
        )
    if provider is Provider.ANTHROPIC:
        return (
            ("x-api-key", key),
            ("Content-Type", "application/json"),
            ("anthropic-version", ANTHROPIC_VERSION),
        )
    assert_never(provider)


def max_tokens(env: Mapping[str, str] | None = None) -> int:
    raw = _env(env).get(MAX_TOKENS_ENV)
    if raw is None:
        return DEFAULT_MAX_TOKENS
    if not _DIGITS_RE.fullmatch(raw):
        raise InvalidConfigError(MAX_TOKENS_ENV, raw)
    value = int(raw)
    if not 0 < value <= MAX_TOKENS_LIMIT:
        raise InvalidConfigError(MAX_TOKENS_ENV, raw, f"expected an integer between 1 and {MAX_TOKENS_LIMIT}")
    return value


def resolve(env: Mapping[str, str] | None = None) -> ResolvedConfig:
    env = _env(env)
    provider = detect(env)
    return ResolvedConfig(
        provider=provider,
        model=model(provider, env),
        endpoint=endpoint(provider),
        headers=headers(provider, env),
        max_tokens=max_tokens(env),
    )
