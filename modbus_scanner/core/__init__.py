"""Core server modules."""

from modbus_scanner.core.server import run_server
from modbus_scanner.core.state import ServerState

__all__ = ["run_server", "ServerState"]
