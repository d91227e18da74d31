"""Tests for callback.py — the one-shot OAuth redirect listener."""
import socket

import httpx
import pytest

from xero_cli.callback import CallbackListener, ListenerState
from xero_cli.utils.errors import ListenerError


@pytest.fixture
def listener():
    lst = CallbackListener(port=0, host="127.0.0.1")
    lst.start()
    yield lst
    lst.stop()


def _get(listener, path):
    return httpx.get(f"http://127.0.0.1:{listener.port}{path}", timeout=5.0)


# ── State transitions ────────────────────────────────────────────────

def test_starts_idle():
    assert CallbackListener(port=0).state == ListenerState.IDLE


def test_listening_after_start(listener):
    assert listener.state == ListenerState.LISTENING
    assert listener.port != 0
    assert listener.redirect_uri == f"http://localhost:{listener.port}/callback"


def test_code_completes(listener):
    resp = _get(listener, "/callback?code=abc123")
    result = listener.wait(timeout=5)

    assert resp.status_code == 200
    assert "Authentication Successful" in resp.text
    assert result.ok
    assert result.code == "abc123"
    assert listener.state == ListenerState.COMPLETED


def test_error_fails(listener):
    resp = _get(listener, "/callback?error=access_denied")
    result = listener.wait(timeout=5)

    assert resp.status_code == 400
    assert not result.ok
    assert "access_denied" in result.error
    assert listener.state == ListenerState.FAILED


def test_error_wins_over_code(listener):
    _get(listener, "/callback?code=abc&error=access_denied")
    result = listener.wait(timeout=5)
    assert result.code is None
    assert "access_denied" in result.error


def test_error_description_included(listener):
    _get(listener, "/callback?error=invalid_scope&error_description=Bad+scope")
    assert "Bad scope" in listener.wait(timeout=5).error


def test_missing_code_is_bad_request(listener):
    resp = _get(listener, "/callback")
    result = listener.wait(timeout=5)

    assert resp.status_code == 400
    assert result.error == "no authorization code received"
    assert listener.state == ListenerState.FAILED


def test_other_path_is_404_and_keeps_listening(listener):
    resp = _get(listener, "/other")

    assert resp.status_code == 404
    assert listener.state == ListenerState.LISTENING

    _get(listener, "/callback?code=later")
    assert listener.wait(timeout=5).code == "later"


def test_html_escaped(listener):
    resp = _get(listener, "/callback?error=<script>")
    listener.wait(timeout=5)
    assert "<script>" not in resp.text
    assert "&lt;script&gt;" in resp.text


def test_closed_after_terminal_outcome(listener):
    port = listener.port
    _get(listener, "/callback?code=abc123")
    listener.wait(timeout=5)

    with pytest.raises(httpx.ConnectError):
        httpx.get(f"http://127.0.0.1:{port}/callback?code=again", timeout=2.0)


def test_second_callback_before_shutdown_is_rejected(listener):
    status, _ = listener.handle("/callback?code=first")
    status_again, _ = listener.handle("/callback?code=second")

    assert status == 200
    assert status_again == 410
    assert listener.wait(timeout=1).code == "first"


# ── State parameter ──────────────────────────────────────────────────

def test_state_verified():
    lst = CallbackListener(port=0, host="127.0.0.1", expected_state="s3cret")
    with lst:
        resp = _get(lst, "/callback?code=abc&state=wrong")
        result = lst.wait(timeout=5)
    assert resp.status_code == 400
    assert "state mismatch" in result.error


def test_state_match_accepted():
    lst = CallbackListener(port=0, host="127.0.0.1", expected_state="s3cret")
    with lst:
        _get(lst, "/callback?code=abc&state=s3cret")
        result = lst.wait(timeout=5)
    assert result.code == "abc"


# ── Timeout and binding ──────────────────────────────────────────────

def test_timeout_fails(listener):
    result = listener.wait(timeout=0.05)
    assert "timed out" in result.error
    assert listener.state == ListenerState.FAILED


def test_wait_returns_outcome_recorded_before_timeout(listener):
    listener.handle("/callback?code=early")

    result = listener.wait(timeout=0)
    assert result.code == "early"
    assert listener.state == ListenerState.COMPLETED


def test_port_in_use_raises_listener_error():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind(("127.0.0.1", 0))
    blocker.listen(1)
    port = blocker.getsockname()[1]
    try:
        lst = CallbackListener(port=port, host="127.0.0.1")
        with pytest.raises(ListenerError, match=str(port)):
            lst.start()
        assert lst.state == ListenerState.IDLE
    finally:
        blocker.close()


def test_cannot_start_twice(listener):
    with pytest.raises(RuntimeError, match="already"):
        listener.start()


def test_stop_is_idempotent(listener):
    listener.stop()
    listener.stop()
