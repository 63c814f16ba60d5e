"""Serial port and Modbus connection modules."""

from modbus_scanner.connection.port_scanner import list_available_ports
from modbus_scanner.connection.modbus_scanner import ModbusScanner, ModbusScanError, format_results

__all__ = ["list_available_ports", "ModbusScanner", "ModbusScanError", "format_results"]
