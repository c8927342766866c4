from .dispatcher import CompletionDispatcher, complete
from .errors import (
    CompletionError,
    ConfigurationError,
    EmptyChoicesError,
    EmptyContentError,
    EmptyResponseError,
    InvalidConfigError,
    MalformedResponseError,
    MissingCredentialError,
    TransportError,
    UnknownProviderError,
)
from .resolver import Provider, ResolvedConfig, resolve

__all__ = [
    "CompletionDispatcher",
    "CompletionError",
    "ConfigurationError",
    "EmptyChoicesError",
    "EmptyContentError",
    "EmptyResponseError",
    "InvalidConfigError",
    "MalformedResponseError",
    "MissingCredentialError",
    "Provider",
    "ResolvedConfig",
    "TransportError",
    "UnknownProviderError",
    "complete",
    "resolve",
]
