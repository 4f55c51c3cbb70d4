"""Local callback listener used by the browser login flow, and host naming."""

from __future__ import annotations

import json
import socket
import subprocess
import sys
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import urlsplit

from vulncheck_cli.environment import current_environment

PORT = ":8678"
DEFAULT_TIMEOUT = 30.0

_QUOTE_MAP = {
    0x2018: "'",
    0x2019: "'",
    0x201B: "'",
    0x0060: "'",
    0x00B4: "'",
    0x201C: '"',
    0x201D: '"',
    0x201F: '"',
}


def filter_ascii(text: str) -> str:
    """Drop non-ASCII characters, turning typographic quotes into plain ones."""
    mapped = text.translate(_QUOTE_MAP)
    return "".join(ch for ch in mapped if ord(ch) < 128)


def get_name() -> str:
    """Return the computer name (macOS) or host name; "" if it cannot be found."""
    if sys.platform.startswith("darwin"):
        command = ["scutil", "--get", "ComputerName"]
    else:
        command = ["hostname"]
    try:
        completed = subprocess.run(command, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError):
        return ""
    return filter_ascii(completed.stdout.decode("utf-8", errors="replace").strip())


def _address(port: str) -> tuple[str, int]:
    host, _, number = port.rpartition(":")
    host = host.strip("[]")
    return host, int(number)


def is_port_available(port: str) -> bool:
    """Return whether a ``host:port`` address can be listened on."""
    try:
        address = _address(port)
        with socket.create_server(address):
            return True
    except (OSError, ValueError, OverflowError):
        return False


def _find_hash(payload: dict[str, Any]) -> Any:
    if "hash" in payload:
        return payload["hash"]
    for key, value in payload.items():
        if key.lower() == "hash":
            return value
    return None


def listen_for(
    path: str, action: Callable[[str], None], timeout: float = DEFAULT_TIMEOUT
) -> str:
    """Wait for one POST of ``{"hash": ...}`` to ``/path`` and return the value.

    Returns "" if nothing arrives within ``timeout`` seconds.
    """
    route = "/" + path
    origin = current_environment().web
    done = threading.Event()
    received = ""

    class Handler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args: Any) -> None:
            return

        def _reply(self, status: int, message: str | None = None) -> None:
            body = b"" if message is None else (message + "\n").encode()
            self.send_response(status)
            if route == urlsplit(self.path).path:
                self.send_header("Access-Control-Allow-Origin", origin)
                self.send_header("Access-Control-Allow-Methods", "POST, OPTIONS")
                self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")
            if message is not None:
                self.send_header("Content-Type", "text/plain; charset=utf-8")
                self.send_header("X-Content-Type-Options", "nosniff")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if body and self.command != "HEAD":
                self.wfile.write(body)

        def _on_route(self) -> bool:
            if urlsplit(self.path).path != route:
                self._reply(404, "404 page not found")
                return False
            return True

        def do_OPTIONS(self) -> None:
            if self._on_route():
                self._reply(200)

        def _not_allowed(self) -> None:
            if self._on_route():
                self._reply(405, "Invalid request method")

        do_GET = do_HEAD = do_PUT = do_PATCH = do_DELETE = _not_allowed

        def do_POST(self) -> None:
            nonlocal received
            if not self._on_route():
                return
            length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(length) if length > 0 else b""
            try:
                payload, _ = json.JSONDecoder().raw_decode(raw.decode("utf-8").lstrip())
                if payload is None:
                    value = None
                elif isinstance(payload, dict):
                    value = _find_hash(payload)
                else:
                    raise ValueError("body is not an object")
                if value is not None and not isinstance(value, str):
                    raise ValueError("hash is not a string")
            except (ValueError, UnicodeDecodeError):
                self._reply(400, "Failed to decode request body")
                return
            received = value or ""
            try:
                action(received)
            except Exception as exc:  # the listener reports action failures and carries on
                print(exc)
            self._reply(200)
            done.set()

    server = ThreadingHTTPServer(_address(PORT), Handler)
    server.daemon_threads = True
    serving = threading.Thread(target=server.serve_forever, daemon=True)
    serving.start()
    try:
        done.wait(timeout)
    finally:
        server.shutdown()
        server.server_close()
    return received


def listen_for_token() -> str:
    """Wait for a token to be posted to ``/token``."""
    return listen_for("token", lambda _value: None, DEFAULT_TIMEOUT)