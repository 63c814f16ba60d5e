"""Request models shared by the HTTP API and the client.

``ScanConfig`` is the body of ``POST /api/scan``, ``WriteRequest`` the body
of ``POST /api/write`` and ``BitsRequest`` the body of the ``/api/bits``
endpoints. All use camelCase keys on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

SCAN_FIELDS = ("comPort", "baudRate", "parity", "slaveId", "startRegister", "numRegisters")
NUMERIC_SCAN_FIELDS = ("baudRate", "slaveId", "startRegister", "numRegisters")

PARITY_ALIASES = {
    "none": "N",
    "n": "N",
    "even": "E",
    "e": "E",
    "odd": "O",
    "o": "O",
}

FUNCTION_CODES = {
    1: "coils",
    2: "discrete inputs",
    3: "holding registers",
    4: "input registers",
}

REGISTER_BITS = 16


def normalize_parity(parity: str) -> str:
    """Map a parity name or letter to the pymodbus letter (N, E or O).

    Raises:
        ValueError: If the parity is not recognised.
    """
    if not isinstance(parity, str):
        raise ValueError("parity must be a string")
    try:
        return PARITY_ALIASES[parity.strip().lower()]
    except KeyError:
        raise ValueError(f"parity must be one of: none, even, odd (got {parity!r})") from None


def _require_int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    # bool is an int subclass but never a valid register or rate
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return value


def _optional_int(payload: Mapping[str, Any], key: str) -> Optional[int]:
    if payload.get(key) is None:
        return None
    return _require_int(payload, key)


def _optional_number(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_port(payload: Mapping[str, Any]) -> str:
    port = payload.get("comPort")
    if not isinstance(port, str) or not port.strip():
        raise ValueError("comPort must be a non-empty string")
    return port.strip()


def _require_parity(payload: Mapping[str, Any]) -> str:
    parity = payload.get("parity")
    normalize_parity(parity)
    return parity


@dataclass
class ScanConfig:
    """Parameters of one requested device scan."""

    com_port: str
    baud_rate: int
    parity: str
    slave_id: int
    start_register: int
    num_registers: int
    function_code: Optional[int] = None
    data_bits: Optional[int] = None
    stop_bits: Optional[int] = None
    timeout: Optional[float] = None

    @property
    def modbus_parity(self) -> str:
        return normalize_parity(self.parity)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body; extension fields are omitted when unset."""
        payload: Dict[str, Any] = {
            "comPort": self.com_port,
            "baudRate": self.baud_rate,
            "parity": self.parity,
            "slaveId": self.slave_id,
            "startRegister": self.start_register,
            "numRegisters": self.num_registers,
        }
        extras = {
            "functionCode": self.function_code,
            "dataBits": self.data_bits,
            "stopBits": self.stop_bits,
            "timeout": self.timeout,
        }
        payload.update({key: value for key, value in extras.items() if value is not None})
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScanConfig":
        """Build a config from a decoded JSON body.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("request body must be a JSON object")

        function_code = _optional_int(payload, "functionCode")
        if function_code is not None and function_code not in FUNCTION_CODES:
            raise ValueError("functionCode must be one of: 1, 2, 3, 4")

        return cls(
            com_port=_require_port(payload),
            baud_rate=_require_int(payload, "baudRate"),
            parity=_require_parity(payload),
            slave_id=_require_int(payload, "slaveId"),
            start_register=_require_int(payload, "startRegister"),
            num_registers=_require_int(payload, "numRegisters"),
            function_code=function_code,
            data_bits=_optional_int(payload, "dataBits"),
            stop_bits=_optional_int(payload, "stopBits"),
            timeout=_optional_number(payload, "timeout"),
        )


@dataclass
class WriteRequest:
    """A single holding register write."""

    com_port: str
    baud_rate: int
    parity: str
    slave_id: int
    register: int
    value: int
    data_bits: Optional[int] = None
    stop_bits: Optional[int] = None
    timeout: Optional[float] = None

    @property
    def modbus_parity(self) -> str:
        return normalize_parity(self.parity)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "comPort": self.com_port,
            "baudRate": self.baud_rate,
            "parity": self.parity,
            "slaveId": self.slave_id,
            "register": self.register,
            "value": self.value,
        }
        extras = {"dataBits": self.data_bits, "stopBits": self.stop_bits, "timeout": self.timeout}
        payload.update({key: value for key, value in extras.items() if value is not None})
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WriteRequest":
        if not isinstance(payload, Mapping):
            raise ValueError("request body must be a JSON object")
        return cls(
            com_port=_require_port(payload),
            baud_rate=_require_int(payload, "baudRate"),
            parity=_require_parity(payload),
            slave_id=_require_int(payload, "slaveId"),
            register=_require_int(payload, "register"),
            value=_require_int(payload, "value"),
            data_bits=_optional_int(payload, "dataBits"),
            stop_bits=_optional_int(payload, "stopBits"),
            timeout=_optional_number(payload, "timeout"),
        )


def value_to_bits(value: int) -> List[bool]:
    """Split a register value into 16 flags, bit 0 first."""
    return [bool((value >> bit) & 1) for bit in range(REGISTER_BITS)]


def bits_to_value(bits: Sequence[bool]) -> int:
    """Pack 16 flags, bit 0 first, into a register value.

    Raises:
        ValueError: If there are not exactly 16 flags.
    """
    if len(bits) != REGISTER_BITS:
        raise ValueError(f"bits must hold exactly {REGISTER_BITS} values")
    value = 0
    for bit, on in enumerate(bits):
        if on:
            value |= 1 << bit
    return value


def _optional_bits(payload: Mapping[str, Any]) -> Optional[List[bool]]:
    bits = payload.get("bits")
    if bits is None:
        return None
    if (
        not isinstance(bits, list)
        or len(bits) != REGISTER_BITS
        or not all(isinstance(bit, bool) for bit in bits)
    ):
        raise ValueError(f"bits must be a list of {REGISTER_BITS} booleans")
    return bits


@dataclass
class BitsRequest:
    """One holding register viewed as 16 individual bits.

    ``bits`` is only set when writing.
    """

    com_port: str
    baud_rate: int
    parity: str
    slave_id: int
    register: int
    bits: Optional[List[bool]] = None
    data_bits: Optional[int] = None
    stop_bits: Optional[int] = None
    timeout: Optional[float] = None

    @property
    def modbus_parity(self) -> str:
        return normalize_parity(self.parity)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "comPort": self.com_port,
            "baudRate": self.baud_rate,
            "parity": self.parity,
            "slaveId": self.slave_id,
            "register": self.register,
        }
        extras = {
            "bits": self.bits,
            "dataBits": self.data_bits,
            "stopBits": self.stop_bits,
            "timeout": self.timeout,
        }
        payload.update({key: value for key, value in extras.items() if value is not None})
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], require_bits: bool = False) -> "BitsRequest":
        """Build a request from a decoded JSON body.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise ValueError("request body must be a JSON object")

        bits = _optional_bits(payload)
        if require_bits and bits is None:
            raise ValueError(f"bits must be a list of {REGISTER_BITS} booleans")

        return cls(
            com_port=_require_port(payload),
            baud_rate=_require_int(payload, "baudRate"),
            parity=_require_parity(payload),
            slave_id=_require_int(payload, "slaveId"),
            register=_require_int(payload, "register"),
            bits=bits,
            data_bits=_optional_int(payload, "dataBits"),
            stop_bits=_optional_int(payload, "stopBits"),
            timeout=_optional_number(payload, "timeout"),
        )
