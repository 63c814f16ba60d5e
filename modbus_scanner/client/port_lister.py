"""Fills the port selection control at startup."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from modbus_scanner.client.errors import ScannerApiError
from modbus_scanner.client.result import RequestResult
from modbus_scanner.utils.logging import log

if TYPE_CHECKING:
    from modbus_scanner.client.api_client import ScannerApiClient
    from modbus_scanner.client.page import ScanPage


class PortLister:
    """Requests the port list once and renders one option per port."""

    def __init__(self, client: "ScannerApiClient", page: "ScanPage") -> None:
        self.client = client
        self.page = page

    def load(self) -> RequestResult[List[str]]:
        """Fetch the ports and render them in response order.

        Failures are shown on the page's error display.
        """
        try:
            ports = self.client.get_ports()
        except ScannerApiError as e:
            log(f"[PortLister] Could not load ports: {e}", level="WARNING")
            self.page.error_display.show(f"Could not load serial ports: {e}")
            return RequestResult.failure(e)

        self.page.port_select.render(ports)
        log(f"[PortLister] Loaded {len(ports)} port(s)", level="DEBUG")
        return RequestResult.success(ports)
