"""Modbus Scanner Package.

This package provides an HTTP server that lists serial ports and reads
Modbus RTU registers, plus a client for its REST API.
"""

from modbus_scanner.core.server import run_server
from modbus_scanner.config.settings import SettingsManager
from modbus_scanner.connection.modbus_scanner import ModbusScanner
from modbus_scanner.scan_config import BitsRequest, ScanConfig, WriteRequest

__all__ = [
    "run_server",
    "SettingsManager",
    "ModbusScanner",
    "ScanConfig",
    "WriteRequest",
    "BitsRequest",
]

__version__ = "1.0.0"
