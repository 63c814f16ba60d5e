"""Client for the scanner REST API and a headless model of its page."""

from modbus_scanner.client.api_client import ScannerApiClient
from modbus_scanner.client.app import ScanApp
from modbus_scanner.client.bit_editor import BitEditor, parse_bits_form
from modbus_scanner.client.errors import (
    ScannerApiError,
    ConnectivityError,
    ProtocolError,
    DecodeError,
    FormError,
)
from modbus_scanner.client.page import ScanPage
from modbus_scanner.client.poller import ScanPoller
from modbus_scanner.client.port_lister import PortLister
from modbus_scanner.client.result import RequestResult
from modbus_scanner.client.scan_submitter import ScanSubmitter, parse_form

__all__ = [
    "ScannerApiClient",
    "ScanApp",
    "ScannerApiError",
    "ConnectivityError",
    "ProtocolError",
    "DecodeError",
    "FormError",
    "ScanPage",
    "ScanPoller",
    "BitEditor",
    "parse_bits_form",
    "PortLister",
    "RequestResult",
    "ScanSubmitter",
    "parse_form",
]
