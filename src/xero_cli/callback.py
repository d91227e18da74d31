"""One-shot local HTTP listener for the OAuth redirect.

The listener accepts requests until the first terminal outcome on the
callback path (a code or an error), then shuts down. Requests to other paths
get a 404 and do not end the session.
"""

from __future__ import annotations

import html
import logging
import threading
from enum import Enum
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlsplit

from xero_cli.models.auth import CallbackResult
from xero_cli.utils.errors import ListenerError

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/callback"

_PAGE = """<html>
<head><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
    <h1>{title}</h1>
    <p>{message}</p>
</body>
</html>"""


class ListenerState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    COMPLETED = "completed"
    FAILED = "failed"


def _page(title: str, message: str) -> bytes:
    return _PAGE.format(title=html.escape(title), message=html.escape(message)).encode("utf-8")


class CallbackListener:
    """Local server receiving the authorization redirect.

    Usage::

        with CallbackListener(port=8765, expected_state=state) as listener:
            ...  # send the user to the authorization URL
            result = listener.wait()
    """

    def __init__(
        self,
        port: int = 8765,
        host: str = "localhost",
        expected_state: str | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._expected_state = expected_state
        self._state = ListenerState.IDLE
        self._result: CallbackResult | None = None
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._server: HTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def port(self) -> int:
        """Bound port (differs from the requested one when 0 was requested)."""
        if self._server is not None:
            return self._server.server_address[1]
        return self._port

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}{CALLBACK_PATH}"

    def start(self) -> None:
        """Bind the port and begin serving in a background thread.

        Raises:
            ListenerError: The port could not be bound.
        """
        if self._state != ListenerState.IDLE:
            raise RuntimeError(f"Listener already {self._state.value}")

        try:
            self._server = HTTPServer((self._host, self._port), self._make_handler())
        except OSError as e:
            raise ListenerError(f"Could not listen on port {self._port}: {e}") from e

        self._state = ListenerState.LISTENING
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info(f"Waiting for OAuth callback on {self.redirect_uri}")

    def wait(self, timeout: float | None = None) -> CallbackResult:
        """Block until the callback arrives (or ``timeout`` seconds pass), then stop."""
        self._done.wait(timeout)
        with self._lock:
            result = self._finish(CallbackResult.failure("timed out waiting for authorization callback"))
        self.stop()
        return result

    def stop(self) -> None:
        """Shut the server down. Safe to call more than once."""
        server, self._server = self._server, None
        if server is None:
            return
        server.shutdown()
        server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        logger.info("OAuth callback listener stopped")

    def handle(self, path: str) -> tuple[int, bytes]:
        """Route one request path (with query string) to a status and HTML body."""
        url = urlsplit(path)
        if url.path != CALLBACK_PATH:
            return 404, b"Not found"

        with self._lock:
            if self._state != ListenerState.LISTENING:
                return 410, _page("Authentication Closed", "This login session has already finished.")
            result, status, body = self._evaluate(parse_qs(url.query))
            self._finish(result)
        return status, body

    def _evaluate(self, query: dict[str, list[str]]) -> tuple[CallbackResult, int, bytes]:
        error = (query.get("error") or [None])[0]
        code = (query.get("code") or [None])[0]
        state = (query.get("state") or [None])[0]

        if error:
            description = (query.get("error_description") or [None])[0]
            message = f"OAuth error: {error}" + (f" ({description})" if description else "")
            return (
                CallbackResult.failure(message),
                400,
                _page("Authentication Failed", f"Error: {error}"),
            )

        if not code:
            return (
                CallbackResult.failure("no authorization code received"),
                400,
                _page("Authentication Failed", "No code received."),
            )

        if self._expected_state is not None and state != self._expected_state:
            return (
                CallbackResult.failure("state mismatch in OAuth callback"),
                400,
                _page("Authentication Failed", "Invalid callback state."),
            )

        return (
            CallbackResult.success(code),
            200,
            _page("Authentication Successful!", "You can close this tab and return to your terminal."),
        )

    def _finish(self, result: CallbackResult) -> CallbackResult:
        """Record the first terminal outcome and return whichever one won."""
        if self._result is not None:
            return self._result
        self._result = result
        self._state = ListenerState.COMPLETED if result.ok else ListenerState.FAILED
        self._done.set()
        return result

    def _make_handler(self) -> type[BaseHTTPRequestHandler]:
        listener = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:  # noqa: N802
                status, body = listener.handle(self.path)
                self.send_response(status)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: object) -> None:  # noqa: A002
                logger.debug("callback: " + format, *args)

        return Handler

    def __enter__(self) -> CallbackListener:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
