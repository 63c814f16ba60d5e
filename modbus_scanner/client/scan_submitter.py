"""Submits the scan form and renders the returned lines.

Every submission takes a generation number. Only the newest generation may
render, so a slow earlier scan never overwrites a later one.
"""

from __future__ import annotations

import threading
from typing import Any, List, Mapping, TYPE_CHECKING

from modbus_scanner.client.errors import FormError, ScannerApiError
from modbus_scanner.client.result import RequestResult
from modbus_scanner.scan_config import NUMERIC_SCAN_FIELDS, SCAN_FIELDS, ScanConfig
from modbus_scanner.utils.logging import log

if TYPE_CHECKING:
    from modbus_scanner.client.api_client import ScannerApiClient
    from modbus_scanner.client.page import ScanPage

OPTIONAL_INT_FIELDS = ("functionCode", "dataBits", "stopBits")


def parse_int_field(field: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise FormError(f"{field} must be an integer (got {value!r})") from None


def parse_form(fields: Mapping[str, Any]) -> ScanConfig:
    """Build a ScanConfig from raw form values.

    Raises:
        FormError: If a field is missing or a numeric field does not parse.
    """
    missing = [field for field in SCAN_FIELDS if field not in fields]
    if missing:
        raise FormError("Missing form field(s): " + ", ".join(missing))

    numbers = {field: parse_int_field(field, fields[field]) for field in NUMERIC_SCAN_FIELDS}

    extras = {}
    for field in OPTIONAL_INT_FIELDS:
        if str(fields.get(field) or "").strip():
            extras[field] = parse_int_field(field, fields[field])

    timeout = None
    if str(fields.get("timeout") or "").strip():
        try:
            timeout = float(str(fields["timeout"]).strip())
        except ValueError:
            raise FormError(f"timeout must be a number (got {fields['timeout']!r})") from None

    return ScanConfig(
        com_port=str(fields["comPort"]),
        baud_rate=numbers["baudRate"],
        parity=str(fields["parity"]),
        slave_id=numbers["slaveId"],
        start_register=numbers["startRegister"],
        num_registers=numbers["numRegisters"],
        function_code=extras.get("functionCode"),
        data_bits=extras.get("dataBits"),
        stop_bits=extras.get("stopBits"),
        timeout=timeout,
    )


class ScanSubmitter:
    """Handles form submissions for the page.

    When scans overlap the newest submission wins: a response that resolves
    after a newer submission was made is discarded, even if it arrives last.
    """

    def __init__(self, client: "ScannerApiClient", page: "ScanPage") -> None:
        self.client = client
        self.page = page
        self._generation = 0
        self._lock = threading.Lock()

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def submit(self, fields: Mapping[str, Any]) -> RequestResult[List[str]]:
        """Send one scan and render its lines if it is still the newest.

        Args:
            fields: Form values keyed by field identifier.
        """
        try:
            config = parse_form(fields)
        except FormError as e:
            self.page.error_display.show(str(e))
            return RequestResult.failure(e)

        generation = self._next_generation()

        try:
            lines = self.client.scan(config)
        except ScannerApiError as e:
            log(f"[ScanSubmitter] Scan {generation} failed: {e}", level="WARNING")
            with self._lock:
                if generation != self._generation:
                    return RequestResult.failure(e, superseded=True)
                self.page.error_display.show(f"Scan failed: {e}")
            return RequestResult.failure(e)

        with self._lock:
            if generation != self._generation:
                log(f"[ScanSubmitter] Discarding scan {generation}, newer scan pending", level="DEBUG")
                return RequestResult.success(lines, superseded=True)
            self.page.results.render(lines)
            self.page.error_display.clear()

        return RequestResult.success(lines)

    def submit_async(self, fields: Mapping[str, Any]) -> threading.Thread:
        """Run ``submit`` on a background thread and return the thread."""
        thread = threading.Thread(target=self.submit, args=(dict(fields),), daemon=True)
        thread.start()
        return thread
