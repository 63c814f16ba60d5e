"""Default configuration values for the Modbus scanner server."""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    # Server
    "httpPort": 8080,
    "loggingLevel": "INFO",
    # Serial line
    "dataBits": 8,
    "stopBits": 1,
    # Modbus
    "timeoutS": 2.0,
    "retries": 1,
    "functionCode": 3,
    # Seconds between rescans while polling
    "pollIntervalS": 2.0,
}

DEFAULT_INI_TEMPLATE = """; Modbus Scanner Configuration
; This file is automatically generated
; Values in web-settings.json take precedence

[Server]
; HTTP server settings
httpPort=8080
loggingLevel=INFO

[Serial]
; Line settings used when a scan request does not specify them
dataBits=8
stopBits=1

[Modbus]
; Request timeout in seconds and retries per request
timeoutS=2.0
retries=1
; 1 coils, 2 discrete inputs, 3 holding registers, 4 input registers
functionCode=3
; Seconds between rescans while polling
pollIntervalS=2.0
"""
