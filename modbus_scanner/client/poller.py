"""Continuous scanning: repeat one scan until stopped."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, TYPE_CHECKING

from modbus_scanner.client.errors import FormError
from modbus_scanner.client.result import RequestResult
from modbus_scanner.client.scan_submitter import parse_form
from modbus_scanner.utils.logging import log

if TYPE_CHECKING:
    from modbus_scanner.client.scan_submitter import ScanSubmitter

DEFAULT_POLL_INTERVAL = 2.0


class ScanPoller:
    """Runs the same scan every ``interval`` seconds on a background thread.

    Each round goes through the ScanSubmitter, so results and errors are
    rendered exactly as for a single submission. A failed round does not
    stop polling.
    """

    def __init__(
        self,
        submitter: "ScanSubmitter",
        interval: float = DEFAULT_POLL_INTERVAL,
        on_round: Optional[Callable[[RequestResult[List[str]]], None]] = None,
    ) -> None:
        self.submitter = submitter
        self.interval = interval
        self.on_round = on_round
        self.rounds = 0
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(
        self,
        fields: Mapping[str, Any],
        max_rounds: Optional[int] = None,
    ) -> RequestResult[None]:
        """Start polling with the given form values.

        A poll that is already running is stopped first. The form is checked
        once up front; if it does not parse, nothing is started.

        Args:
            fields: Form values keyed by field identifier.
            max_rounds: Stop on its own after this many rounds (optional).
        """
        try:
            parse_form(fields)
        except FormError as e:
            self.submitter.page.error_display.show(str(e))
            return RequestResult.failure(e)

        self.stop()

        with self._lock:
            self.rounds = 0
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run,
                args=(dict(fields), stop_event, max_rounds),
                daemon=True,
            )
            self._thread.start()

        log(f"[ScanPoller] Polling every {self.interval}s")
        return RequestResult.success(None)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop polling; a scan in flight is allowed to finish."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None

        if stop_event is None:
            return
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
        log("[ScanPoller] Polling stopped")

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until a poll started with ``max_rounds`` has finished."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _run(
        self,
        fields: Dict[str, Any],
        stop_event: threading.Event,
        max_rounds: Optional[int],
    ) -> None:
        while not stop_event.is_set():
            result = self.submitter.submit(fields)
            self.rounds += 1
            if self.on_round is not None:
                self.on_round(result)
            if max_rounds is not None and self.rounds >= max_rounds:
                break
            stop_event.wait(self.interval)
