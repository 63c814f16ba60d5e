"""Reads one holding register into the bit panel and writes it back."""

from __future__ import annotations

from typing import Any, List, Mapping, TYPE_CHECKING

from modbus_scanner.client.errors import FormError, ScannerApiError
from modbus_scanner.client.result import RequestResult
from modbus_scanner.client.scan_submitter import parse_int_field
from modbus_scanner.scan_config import BitsRequest

if TYPE_CHECKING:
    from modbus_scanner.client.api_client import ScannerApiClient
    from modbus_scanner.client.page import ScanPage

BITS_FIELDS = ("comPort", "baudRate", "parity", "slaveId", "register")


def parse_bits_form(fields: Mapping[str, Any]) -> BitsRequest:
    """Build a BitsRequest (without bits) from raw form values.

    Raises:
        FormError: If a field is missing or a numeric field does not parse.
    """
    missing = [field for field in BITS_FIELDS if field not in fields]
    if missing:
        raise FormError("Missing form field(s): " + ", ".join(missing))

    return BitsRequest(
        com_port=str(fields["comPort"]),
        baud_rate=parse_int_field("baudRate", fields["baudRate"]),
        parity=str(fields["parity"]),
        slave_id=parse_int_field("slaveId", fields["slaveId"]),
        register=parse_int_field("register", fields["register"]),
    )


class BitEditor:
    """Drives the bit panel of the page.

    ``read`` fills the 16 checkboxes from the device, the user toggles them
    on ``page.bits_panel`` and ``write`` sends them back as one value.
    """

    def __init__(self, client: "ScannerApiClient", page: "ScanPage") -> None:
        self.client = client
        self.page = page

    def read(self, fields: Mapping[str, Any]) -> RequestResult[List[bool]]:
        panel = self.page.bits_panel
        try:
            request = parse_bits_form(fields)
            bits = self.client.read_bits(request)
        except (FormError, ScannerApiError) as e:
            panel.status = None
            self.page.error_display.show(f"Bit read failed: {e}")
            return RequestResult.failure(e)

        panel.render(bits)
        panel.status = "Read successful"
        self.page.error_display.clear()
        return RequestResult.success(bits)

    def write(self, fields: Mapping[str, Any]) -> RequestResult[str]:
        panel = self.page.bits_panel
        try:
            request = parse_bits_form(fields)
            request.bits = list(panel.bits)
            message = self.client.write_bits(request)
        except (FormError, ScannerApiError) as e:
            panel.status = None
            self.page.error_display.show(f"Bit write failed: {e}")
            return RequestResult.failure(e)

        panel.status = message
        self.page.error_display.clear()
        return RequestResult.success(message)
