import logging

import structlog

from psqlx_ai.logging import LIBRARY_LOGGER, configure_logging, make_redaction_processor


def test_redaction_scrubs_header_pairs_and_known_secrets():
    proc = make_redaction_processor(secrets=["sk-live-123456"])
    out = proc(
        None,
        "debug",
        {
            "event": "completion_request",
            "headers": (("x-api-key", "ak-abc"), ("Content-Type", "application/json")),
            "note": "sent with sk-live-123456",
            "auth": "Bearer abcdef123456",
            "messages": 3,
        },
    )
    assert out["headers"] == (("x-api-key", "[REDACTED]"), ("Content-Type", "application/json"))
    assert out["note"] == "sent with [REDACTED]"
    assert out["auth"] == "Bearer [REDACTED]"
    assert out["messages"] == 3


def test_redaction_scrubs_sensitive_mapping_keys():
    proc = make_redaction_processor(secrets=[])
    out = proc(None, "info", {"event": "x", "OPENAI_API_KEY": "sk-1", "nested": {"Authorization": "Bearer z"}})
    assert out["OPENAI_API_KEY"] == "[REDACTED]"
    assert out["nested"]["Authorization"] == "[REDACTED]"


def test_redaction_keeps_token_counts_and_plain_pairs():
    proc = make_redaction_processor(secrets=[])
    out = proc(
        None,
        "info",
        {
            "event": "x",
            "max_tokens": 4096,
            "max_completion_tokens": 512,
            "model_key": "gpt",
            "pair": ["token", "kept"],
            "tuple_pair": ("api_key", "kept"),
            "access_token": "t-1",
        },
    )
    assert out["max_tokens"] == 4096
    assert out["max_completion_tokens"] == 512
    assert out["model_key"] == "gpt"
    assert out["pair"] == ["token", "kept"]
    assert out["tuple_pair"] == ("api_key", "kept")
    assert out["access_token"] == "[REDACTED]"


def test_configure_logging_routes_through_stdlib():
    try:
        configure_logging("DEBUG", "json", secrets=["sk-1"])
        cfg = structlog.get_config()
        assert isinstance(cfg["logger_factory"], structlog.stdlib.LoggerFactory)
        assert isinstance(cfg["processors"][-1], structlog.processors.JSONRenderer)
        assert logging.getLogger(LIBRARY_LOGGER).level == logging.DEBUG

        configure_logging("warning", "console")
        cfg = structlog.get_config()
        assert isinstance(cfg["processors"][-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger(LIBRARY_LOGGER).level == logging.WARNING
    finally:
        structlog.reset_defaults()
        logging.getLogger(LIBRARY_LOGGER).setLevel(logging.NOTSET)


def test_package_logger_has_null_handler():
    handlers = logging.getLogger(LIBRARY_LOGGER).handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)
