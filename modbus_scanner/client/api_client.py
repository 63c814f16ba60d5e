"""HTTP client for the scanner REST API.

Wraps ``urllib.request`` and classifies every failure into one of the
``ScannerApiError`` subclasses.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, List, Optional

from modbus_scanner.client.errors import ConnectivityError, DecodeError, ProtocolError
from modbus_scanner.scan_config import REGISTER_BITS, BitsRequest, ScanConfig, WriteRequest
from modbus_scanner.utils.logging import log

DEFAULT_BASE_URL = "http://localhost:8080"


def _server_message(error: urllib.error.HTTPError) -> Optional[str]:
    """Extract the ``error``/``message`` fields of a JSON error body."""
    try:
        body = json.loads(error.read().decode("utf-8"))
    except (ValueError, OSError):
        return error.reason if isinstance(error.reason, str) else None
    if not isinstance(body, dict):
        return None
    parts = [str(body[key]) for key in ("error", "message") if body.get(key)]
    return ": ".join(parts) or None


def _expect_strings(data: Any, what: str) -> List[str]:
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise DecodeError(f"{what} must be a JSON array of strings")
    return data


class ScannerApiClient:
    """Client for the port, scan, write and bit editor endpoints.

    No retry and no cancellation; ``timeout`` of None waits indefinitely.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        opener: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._open = opener or urllib.request.urlopen

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Accept": "application/json"}
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = urllib.request.Request(
            self.base_url + path, data=data, headers=headers, method=method
        )
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}

        log(f"[ApiClient] {method} {path}", level="DEBUG")
        try:
            with self._open(request, **kwargs) as response:
                status = response.status
                content_type = response.headers.get("Content-Type", "")
                body = response.read()
        except urllib.error.HTTPError as e:
            raise ProtocolError(e.code, _server_message(e)) from e
        except urllib.error.URLError as e:
            raise ConnectivityError(f"Could not reach {self.base_url}: {e.reason}") from e
        except OSError as e:
            raise ConnectivityError(f"Could not reach {self.base_url}: {e}") from e

        if not 200 <= status < 300:
            raise ProtocolError(status)
        if "application/json" not in content_type:
            raise ProtocolError(status, f"unexpected content type {content_type or 'none'!r}")

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Malformed JSON from {path}: {e}") from e

    def get_ports(self) -> List[str]:
        """GET /api/ports - Return the serial port identifiers."""
        return _expect_strings(self._request("GET", "/api/ports"), "port list")

    def scan(self, config: ScanConfig) -> List[str]:
        """POST /api/scan - Return the result lines of one scan."""
        return _expect_strings(self._request("POST", "/api/scan", config.to_payload()), "scan result")

    def write_register(self, request: WriteRequest) -> str:
        """POST /api/write - Return the server's confirmation message."""
        data = self._request("POST", "/api/write", request.to_payload())
        if not isinstance(data, dict) or not isinstance(data.get("message"), str):
            raise DecodeError("write response must be a JSON object with a message")
        return data["message"]

    def read_bits(self, request: BitsRequest) -> List[bool]:
        """POST /api/bits/read - Return the register's 16 bits, bit 0 first."""
        data = self._request("POST", "/api/bits/read", request.to_payload())
        bits = data.get("bits") if isinstance(data, dict) else None
        if (
            not isinstance(bits, list)
            or len(bits) != REGISTER_BITS
            or not all(isinstance(bit, bool) for bit in bits)
        ):
            raise DecodeError(f"bits response must hold {REGISTER_BITS} booleans")
        return bits

    def write_bits(self, request: BitsRequest) -> str:
        """POST /api/bits/write - Return the server's confirmation message."""
        data = self._request("POST", "/api/bits/write", request.to_payload())
        if not isinstance(data, dict) or not isinstance(data.get("message"), str):
            raise DecodeError("write response must be a JSON object with a message")
        return data["message"]
