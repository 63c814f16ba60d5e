"""Server state management using Singleton pattern.

Provides centralized state management for all server components.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from modbus_scanner.config.settings import SettingsManager
    from modbus_scanner.connection.modbus_scanner import ModbusScanner


class ServerState:
    """Singleton class managing all server state.

    Centralizes access to:
    - Settings manager
    - Modbus scanner
    - The lock serialising access to serial lines
    """

    _instance: Optional["ServerState"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ServerState":
        """Create or return the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize the state (only runs once)."""
        if self._initialized:
            return

        self._initialized = True

        project_root = Path(__file__).parent.parent.parent
        self.config_dir: Path = project_root
        self.server_root: Path = project_root / "static"

        self.settings: Optional["SettingsManager"] = None
        self.scanner: Optional["ModbusScanner"] = None

        # One request on the serial lines at a time
        self.modbus_lock = threading.Lock()

    def initialize(
        self,
        config_dir: Optional[Path] = None,
        server_root: Optional[Path] = None
    ) -> None:
        """Initialize all server components.

        Args:
            config_dir: Directory for configuration files.
            server_root: Directory for static file serving.
        """
        # Import here to avoid circular imports
        from modbus_scanner.config.settings import SettingsManager
        from modbus_scanner.connection.modbus_scanner import ModbusScanner
        from modbus_scanner.utils.logging import log, set_logging_level

        if config_dir:
            self.config_dir = Path(config_dir)
        if server_root:
            self.server_root = Path(server_root)

        self.settings = SettingsManager(self.config_dir)

        try:
            set_logging_level(self.settings.get("loggingLevel", "INFO"))
        except ValueError as e:
            log(f"[State] {e}, keeping current level", level="WARNING")

        self.scanner = ModbusScanner(self.settings)

    def reset(self) -> None:
        """Reset state for testing purposes."""
        self.settings = None
        self.scanner = None

    @classmethod
    def get_instance(cls) -> "ServerState":
        """Get the singleton instance."""
        return cls()

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        with cls._lock:
            if cls._instance:
                cls._instance.reset()
            cls._instance = None
