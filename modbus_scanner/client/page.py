"""Headless model of the scanner page.

Each region owns its content and is only changed through its ``render``
method, which replaces the whole region at once.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from modbus_scanner.scan_config import REGISTER_BITS

RESULTS_HEADING = "Scan Results:"
LIGHT_TEXT = "text-light"


@dataclass(frozen=True)
class Option:
    """One entry of the port selection control."""
    value: str
    label: str


@dataclass(frozen=True)
class ResultLine:
    """One rendered paragraph of the results region."""
    text: str
    css_class: str = LIGHT_TEXT


class PortSelect:
    """The serial port selection control."""

    def __init__(self) -> None:
        self.options: List[Option] = []
        self._selected: Optional[str] = None

    def render(self, ports: Iterable[str]) -> None:
        """Replace the option set, one option per port, in order."""
        self.options = [Option(value=port, label=port) for port in ports]
        if self._selected not in {option.value for option in self.options}:
            self._selected = None

    def select(self, value: str) -> None:
        if value not in {option.value for option in self.options}:
            raise ValueError(f"No such port option: {value}")
        self._selected = value

    @property
    def value(self) -> str:
        """The selected port; the first option when nothing was chosen."""
        if self._selected is not None:
            return self._selected
        return self.options[0].value if self.options else ""


class ResultsRegion:
    """The region showing the lines of the latest scan."""

    def __init__(self) -> None:
        self.heading: Optional[str] = None
        self.lines: Tuple[ResultLine, ...] = ()
        self._lock = threading.Lock()

    def render(self, results: Iterable[str]) -> None:
        """Replace the region with a heading and one line per result."""
        lines = tuple(ResultLine(text=str(result)) for result in results)
        with self._lock:
            self.heading = RESULTS_HEADING
            self.lines = lines

    def clear(self) -> None:
        with self._lock:
            self.heading = None
            self.lines = ()

    def texts(self) -> List[str]:
        with self._lock:
            return [line.text for line in self.lines]

    def to_text(self) -> str:
        with self._lock:
            if self.heading is None:
                return ""
            return "\n".join([self.heading] + [line.text for line in self.lines])


class ErrorDisplay:
    """Shows the last request failure; empty after a success."""

    def __init__(self) -> None:
        self.message: Optional[str] = None

    def show(self, message: str) -> None:
        self.message = message

    def clear(self) -> None:
        self.message = None


class BitsPanel:
    """The 16 bit checkboxes of the bit editor and its status line."""

    def __init__(self) -> None:
        self.bits: List[bool] = [False] * REGISTER_BITS
        self.status: Optional[str] = None

    def render(self, bits: Iterable[bool]) -> None:
        bits = [bool(bit) for bit in bits]
        if len(bits) != REGISTER_BITS:
            raise ValueError(f"Expected {REGISTER_BITS} bits, got {len(bits)}")
        self.bits = bits

    def set_bit(self, bit: int, on: bool = True) -> None:
        if not 0 <= bit < REGISTER_BITS:
            raise ValueError(f"Bit must be between 0 and {REGISTER_BITS - 1}")
        self.bits[bit] = on

    def toggle(self, bit: int) -> None:
        self.set_bit(bit, not self.bits[bit])


class ScanPage:
    """All regions of the page."""

    def __init__(self) -> None:
        self.port_select = PortSelect()
        self.results = ResultsRegion()
        self.error_display = ErrorDisplay()
        self.bits_panel = BitsPanel()
