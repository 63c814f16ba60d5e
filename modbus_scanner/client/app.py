"""Wires the API client, the page model and the page components."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from modbus_scanner.client.api_client import DEFAULT_BASE_URL, ScannerApiClient
from modbus_scanner.client.bit_editor import BitEditor
from modbus_scanner.client.page import ScanPage
from modbus_scanner.client.poller import DEFAULT_POLL_INTERVAL, ScanPoller
from modbus_scanner.client.port_lister import PortLister
from modbus_scanner.client.result import RequestResult
from modbus_scanner.client.scan_submitter import ScanSubmitter


class ScanApp:
    """The scanner page without a browser."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        client: Optional[ScannerApiClient] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.client = client or ScannerApiClient(base_url, timeout=timeout)
        self.page = ScanPage()
        self.port_lister = PortLister(self.client, self.page)
        self.scan_submitter = ScanSubmitter(self.client, self.page)
        self.poller = ScanPoller(self.scan_submitter, interval=poll_interval)
        self.bit_editor = BitEditor(self.client, self.page)

    def _with_port(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy of the form; ``comPort`` defaults to the selected port."""
        values = dict(fields)
        values.setdefault("comPort", self.page.port_select.value)
        return values

    def start(self) -> RequestResult[List[str]]:
        """Page load: populate the port list."""
        return self.port_lister.load()

    def submit(self, fields: Mapping[str, Any]) -> RequestResult[List[str]]:
        """Form submission."""
        return self.scan_submitter.submit(self._with_port(fields))

    def start_polling(self, fields: Mapping[str, Any], max_rounds: Optional[int] = None) -> RequestResult[None]:
        """Start button: rescan until ``stop_polling``."""
        return self.poller.start(self._with_port(fields), max_rounds=max_rounds)

    def stop_polling(self) -> None:
        """Stop button."""
        self.poller.stop()

    def read_bits(self, fields: Mapping[str, Any]) -> RequestResult[List[bool]]:
        return self.bit_editor.read(self._with_port(fields))

    def write_bits(self, fields: Mapping[str, Any]) -> RequestResult[str]:
        return self.bit_editor.write(self._with_port(fields))
