from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resolver import Provider


class CompletionError(Exception):
    """Base error for completion failures."""


class ConfigurationError(CompletionError):
    """Provider resolution failed before any request was sent."""


class UnknownProviderError(ConfigurationError):
    def __init__(self, value: str):
        super().__init__(f"Unknown AI provider: {value!r} (expected 'openai' or 'anthropic').")
        self.value = value


class MissingCredentialError(ConfigurationError):
    def __init__(self, provider: Provider, key: str):
        super().__init__(
            f"{key} environment variable not set. Set the environment variable ({key}=...) "
            "before usage to enable AI meta-commands."
        )
        self.provider = provider
        self.key = key


class InvalidConfigError(ConfigurationError):
    def __init__(self, key: str, value: str, reason: str = "expected a positive integer"):
        super().__init__(f"Invalid value for {key}: {value!r} ({reason}).")
        self.key = key
        self.value = value


class TransportError(CompletionError):
    """Connection failure, timeout or non-2xx upstream status."""

    def __init__(
        self,
        message: str,
        *,
        provider: Provider | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class MalformedResponseError(CompletionError):
    """Upstream response does not match the expected shape."""

    def __init__(self, message: str = "Malformed upstream response.", *, provider: Provider | None = None):
        super().__init__(message)
        self.provider = provider


class EmptyResponseError(CompletionError):
    def __init__(self, provider: Provider, message: str):
        super().__init__(message)
        self.provider = provider


class EmptyChoicesError(EmptyResponseError):
    def __init__(self, provider: Provider):
        super().__init__(provider, "No choices in response.")


class EmptyContentError(EmptyResponseError):
    def __init__(self, provider: Provider):
        super().__init__(provider, "No content in response.")
