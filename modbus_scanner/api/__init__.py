"""HTTP API modules."""

from modbus_scanner.api.handler import ScannerHandler

__all__ = ["ScannerHandler"]
