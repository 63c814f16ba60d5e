"""Integration tests for the server module.

These tests verify the server can be started and accessed correctly.
"""

import json
import pytest
import sys
import threading
from pathlib import Path
from urllib.parse import urljoin
import urllib.request

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from modbus_scanner.core.server import create_test_server
from modbus_scanner.core.state import ServerState
from modbus_scanner.connection.modbus_scanner import ModbusScanner
from modbus_scanner.main import parse_args


class TestServerIntegration:
    """Integration tests for the server."""

    @pytest.fixture
    def server_setup(self, tmp_path):
        """Set up a test server."""
        ServerState.reset_instance()

        (tmp_path / "index.html").write_text("<html><body>Scanner</body></html>")

        server, state, base_url = create_test_server(
            port=0,
            config_dir=tmp_path,
            server_root=tmp_path
        )

        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()

        yield base_url, state, tmp_path

        server.shutdown()
        thread.join(timeout=5)
        server.server_close()
        state.reset()

    def test_server_starts(self, server_setup):
        """Server should start and be accessible."""
        base_url, state, tmp_path = server_setup

        with urllib.request.urlopen(base_url) as response:
            assert response.status == 200

    def test_static_file_serving(self, server_setup):
        """Server should serve static files."""
        base_url, state, tmp_path = server_setup

        with urllib.request.urlopen(urljoin(base_url, "/index.html")) as response:
            assert response.status == 200
            assert "Scanner" in response.read().decode("utf-8")

    def test_api_endpoints_accessible(self, server_setup):
        """GET API endpoints should be accessible."""
        base_url, state, tmp_path = server_setup

        for endpoint in ["/api/settings", "/api/ports"]:
            with urllib.request.urlopen(urljoin(base_url, endpoint)) as response:
                assert response.status == 200

    def test_state_singleton(self, server_setup):
        """State singleton should be accessible."""
        base_url, state, tmp_path = server_setup

        singleton = ServerState.get_instance()

        assert singleton is state
        assert singleton.settings is not None
        assert isinstance(singleton.scanner, ModbusScanner)
        assert singleton.scanner.settings is singleton.settings

    def test_settings_persistence(self, server_setup):
        """Settings changes should be persisted."""
        base_url, state, tmp_path = server_setup

        request = urllib.request.Request(
            urljoin(base_url, "/api/settings"),
            data=json.dumps({"timeoutS": 1.0}).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST"
        )

        with urllib.request.urlopen(request) as response:
            assert response.status == 200

        json_file = tmp_path / "web-settings.json"
        assert json_file.exists()

        with open(json_file) as f:
            saved = json.load(f)

        assert saved["timeoutS"] == 1.0


class TestShippedPage:
    """The bundled static page exposes every scanner feature."""

    @pytest.fixture
    def page_server(self, tmp_path):
        ServerState.reset_instance()
        server, state, base_url = create_test_server(
            port=0,
            config_dir=tmp_path,
            server_root=PROJECT_ROOT / "static"
        )
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()

        yield base_url

        server.shutdown()
        thread.join(timeout=5)
        server.server_close()
        state.reset()

    def _get(self, base_url, path):
        with urllib.request.urlopen(urljoin(base_url, path)) as response:
            return response.read().decode("utf-8")

    def test_form_has_optional_line_fields(self, page_server):
        html = self._get(page_server, "/index.html")
        for element_id in ("functionCode", "dataBits", "stopBits", "timeout"):
            assert f'id="{element_id}"' in html

    def test_page_has_polling_write_and_bit_controls(self, page_server):
        html = self._get(page_server, "/index.html")
        for element_id in ("pollStart", "pollStop", "writeForm", "bitsRead", "bitsWrite"):
            assert f'id="{element_id}"' in html

    def test_script_uses_every_endpoint(self, page_server):
        script = self._get(page_server, "/script.js")
        for endpoint in ("/api/ports", "/api/scan", "/api/write", "/api/bits/read", "/api/bits/write"):
            assert f"'{endpoint}'" in script


class TestMainArgs:
    """Tests for the server command line."""

    def test_defaults(self):
        parsed = parse_args([])
        assert parsed.port is None
        assert parsed.config_dir is None

    def test_port_and_dirs(self, tmp_path):
        parsed = parse_args(["--port", "9000", "--config-dir", str(tmp_path)])
        assert parsed.port == 9000
        assert parsed.config_dir == tmp_path
