"""HTTP middleware utilities for the API.

Provides helper functions for JSON handling and CORS support.
"""

import json
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Any


def send_json(
    handler: BaseHTTPRequestHandler,
    payload: Any,
    status: HTTPStatus = HTTPStatus.OK
) -> None:
    """Send a JSON response.

    Args:
        handler: The HTTP request handler instance.
        payload: The object or list to serialize as JSON.
        status: HTTP status code (default: 200 OK).
    """
    data = json.dumps(payload).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Content-Length", str(len(data)))
    handler.end_headers()
    handler.wfile.write(data)


def read_json_body(handler: BaseHTTPRequestHandler) -> Any:
    """Read and parse JSON from request body.

    An empty body decodes to an empty dict so that the route can name the
    missing fields.

    Args:
        handler: The HTTP request handler instance.

    Returns:
        The parsed JSON value.

    Raises:
        ValueError: If Content-Length is not an integer or the body is not
            valid JSON.
    """
    try:
        length = int(handler.headers.get("Content-Length", 0))
    except ValueError:
        raise ValueError("Content-Length must be an integer") from None
    if length <= 0:
        return {}

    raw = handler.rfile.read(length)
    try:
        return json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValueError("request body is not valid JSON") from None


def send_cors_headers(handler: BaseHTTPRequestHandler) -> None:
    """Send CORS preflight response headers."""
    handler.send_response(HTTPStatus.NO_CONTENT)
    handler.send_header("Access-Control-Allow-Origin", "*")
    handler.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
    handler.send_header("Access-Control-Allow-Headers", "Content-Type")
    handler.end_headers()
