"""HTTP server initialization and lifecycle management.

Provides the main run_server function and server configuration.
"""

from __future__ import annotations

from http.server import ThreadingHTTPServer
from pathlib import Path
from typing import Optional

from modbus_scanner.utils.logging import log
from modbus_scanner.core.state import ServerState
from modbus_scanner.api.handler import ScannerHandler


DEFAULT_PORT = 8080


def run_server(
    port: Optional[int] = None,
    config_dir: Optional[Path] = None,
    server_root: Optional[Path] = None
) -> None:
    """Start the HTTP server.

    Initializes all components and runs the server until interrupted.

    Args:
        port: The port to listen on (default: httpPort setting, 8080).
        config_dir: Directory for configuration files (default: project root).
        server_root: Directory for static files (default: static/).
    """
    state = ServerState.get_instance()
    state.initialize(config_dir=config_dir, server_root=server_root)

    ScannerHandler.state = state

    if port is None:
        port = int(state.settings.get("httpPort", DEFAULT_PORT))

    def handler_factory(*args, **kwargs):
        return ScannerHandler(*args, directory=str(state.server_root), **kwargs)

    with ThreadingHTTPServer(("0.0.0.0", port), handler_factory) as httpd:
        log(f"Serving Modbus scanner UI from {state.server_root} at http://localhost:{port}")
        log("API endpoints: GET /api/ports, POST /api/scan, POST /api/write, /api/settings")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            log("Shutting down...")


def create_test_server(
    port: int = 0,
    config_dir: Optional[Path] = None,
    server_root: Optional[Path] = None
) -> tuple:
    """Create a test server instance without starting it.

    Useful for integration tests that need a real server.

    Args:
        port: The port to listen on (0 = auto-assign).
        config_dir: Directory for configuration files.
        server_root: Directory for static files.

    Returns:
        Tuple of (server, state, base_url).
    """
    ServerState.reset_instance()
    state = ServerState.get_instance()
    state.initialize(config_dir=config_dir, server_root=server_root)

    ScannerHandler.state = state

    def handler_factory(*args, **kwargs):
        kwargs.setdefault('directory', str(state.server_root) if state.server_root else None)
        return ScannerHandler(*args, **kwargs)

    server = ThreadingHTTPServer(("localhost", port), handler_factory)

    base_url = f"http://{server.server_address[0]}:{server.server_address[1]}"

    return server, state, base_url
