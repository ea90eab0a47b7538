"""HTTP sidecar server for disperse-lines.

Lets a browser form or another process validate pasted text without
spawning the CLI per keystroke.  Stateless: every request carries its text.

Endpoints:
    GET  /health          — Health check
    GET  /example         — Sample input and delimiter hint
    POST /validate        — Validate text
    POST /keep-first      — Keep first line per address, re-validate
    POST /merge           — Combine amounts per address, re-validate

All endpoints expect/return JSON.
Body format: {"text": "..."}
"""

from __future__ import annotations
import json
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .logging_setup import configure_logging, get_logger
from .patterns import DELIMITER_HINT, example_text
from .resolver import keep_first, merge_amounts
from .validator import validate

DEFAULT_PORT = int(os.environ.get("DISPERSE_LINES_PORT", "18792"))

logger = get_logger(__name__)

_RESOLVERS = {
    "/keep-first": keep_first,
    "/merge": merge_amounts,
}


class BadRequest(ValueError):
    """Request body is not usable."""


class DisperseHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the disperse-lines sidecar."""

    def _read_text(self) -> str:
        try:
            length = int(self.headers.get("Content-Length", 0))
        except ValueError as e:
            raise BadRequest("invalid Content-Length") from e
        try:
            raw = self.rfile.read(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise BadRequest("body is not valid UTF-8") from e
        try:
            body = json.loads(raw) if raw else {}
        except json.JSONDecodeError as e:
            raise BadRequest(f"invalid JSON: {e.msg}") from e
        if not isinstance(body, dict):
            raise BadRequest("body must be a JSON object")
        text = body.get("text", "")
        if not isinstance(text, str):
            raise BadRequest("'text' must be a string")
        return text

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        if self.path == "/health":
            self._respond(200, {"status": "ok"})
        elif self.path == "/example":
            self._respond(200, {"text": example_text(), "hint": DELIMITER_HINT})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        try:
            if self.path == "/validate":
                self._respond(200, validate(self._read_text()).to_dict())

            elif self.path in _RESOLVERS:
                text = _RESOLVERS[self.path](self._read_text())
                self._respond(200, {"text": text, **validate(text).to_dict()})

            else:
                self._respond(404, {"error": "not found"})

        except BadRequest as e:
            self._respond(400, {"error": str(e)})
        except Exception as e:
            logger.exception("request to %s failed", self.path)
            self._respond(500, {"error": str(e)})


def make_server(port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> HTTPServer:
    return HTTPServer((host, port), DisperseHandler)


def serve(port: int = DEFAULT_PORT) -> None:
    """Start the disperse-lines HTTP sidecar."""
    server = make_server(port)
    logger.info("disperse-lines sidecar listening on http://127.0.0.1:%d", port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("shutting down")
    finally:
        server.server_close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="disperse-lines HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    configure_logging(args.log_level)
    serve(port=args.port)
