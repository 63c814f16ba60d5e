"""Serial port scanning utilities.

Provides functionality to list available COM ports.
"""

from typing import List

import serial.tools.list_ports

from modbus_scanner.utils.logging import log


def list_available_ports() -> List[str]:
    """List all available serial ports.

    Returns:
        Device identifiers (e.g. "COM3" or "/dev/ttyUSB0") in the order
        reported by the operating system.
    """
    ports = []
    try:
        for port_info in serial.tools.list_ports.comports():
            ports.append(port_info.device)
    except OSError as e:
        log(f"[PortScanner] Error listing ports: {e}", level="WARNING")

    return ports
