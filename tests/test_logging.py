import pytest

from meapi.logging import (
    bind_context,
    clear_context,
    get_context,
    log_timing,
    redact_secrets,
    unbind_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_context()
    yield
    clear_context()


def test_context_binding():
    bind_context(request_id="abc", path="/api/health")
    assert get_context() == {"request_id": "abc", "path": "/api/health"}

    unbind_context("path")
    assert get_context() == {"request_id": "abc"}

    clear_context()
    assert get_context() == {}


def test_log_timing_returns_result():
    @log_timing("double")
    def double(x):
        return x * 2

    assert double(21) == 42
    assert double.__name__ == "double"


def test_log_timing_reraises():
    @log_timing("explode")
    def explode():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        explode()


def test_redact_secrets_masks_credentials():
    event = redact_secrets(
        None, "info", {"event": "login", "password": "hunter2", "Token": "abc", "username": "admin"}
    )

    assert event == {"event": "login", "password": "***", "Token": "***", "username": "admin"}
