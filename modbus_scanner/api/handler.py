"""HTTP request handler for the Modbus scanner.

Provides the main ScannerHandler class that serves static files and API endpoints.
"""

from __future__ import annotations

from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler
from typing import Any, TYPE_CHECKING
from urllib.parse import urlparse

from modbus_scanner.api.middleware import send_json, send_cors_headers
from modbus_scanner.api import routes
from modbus_scanner.utils.logging import log

if TYPE_CHECKING:
    from modbus_scanner.core.state import ServerState


class ScannerHandler(SimpleHTTPRequestHandler):
    """HTTP handler for serving static files and the REST API.

    Serves static files from the configured directory and routes
    API requests to the appropriate handlers.
    """

    server_version = "ModbusScannerHTTP/1.0"

    # Class-level state reference (set by server initialization)
    state: "ServerState" = None  # type: ignore

    GET_ROUTES = {
        "/api/ports": routes.handle_get_ports,
        "/api/settings": routes.handle_get_settings,
    }

    POST_ROUTES = {
        "/api/scan": routes.handle_scan,
        "/api/write": routes.handle_write_register,
        "/api/bits/read": routes.handle_read_bits,
        "/api/bits/write": routes.handle_write_bits,
        "/api/settings": routes.handle_post_settings,
    }

    def __init__(
        self,
        *args: Any,
        directory: str | None = None,
        **kwargs: Any
    ) -> None:
        """Initialize the handler.

        Args:
            directory: The directory to serve static files from.
        """
        if directory is None and self.state:
            directory = str(self.state.server_root)
        super().__init__(*args, directory=directory, **kwargs)

    def do_OPTIONS(self) -> None:
        """Handle OPTIONS requests for CORS preflight."""
        send_cors_headers(self)

    def do_GET(self) -> None:
        """Handle GET requests."""
        parsed = urlparse(self.path)

        route = self.GET_ROUTES.get(parsed.path)
        if route is not None:
            route(self, self.state)
            return

        if parsed.path.startswith("/api/"):
            send_json(self, {"error": "Not Found"}, HTTPStatus.NOT_FOUND)
            return

        # Static file serving
        super().do_GET()

    def do_POST(self) -> None:
        """Handle POST requests."""
        parsed = urlparse(self.path)

        route = self.POST_ROUTES.get(parsed.path)
        if route is not None:
            route(self, self.state)
            return

        send_json(self, {"error": "Not Found"}, HTTPStatus.NOT_FOUND)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 - matching base signature
        """Route request logs through the package logger."""
        log(f"{self.client_address[0]} - {format % args}", level="DEBUG")
