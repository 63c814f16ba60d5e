"""Tests for the port scanner and Modbus scanner modules."""

import pytest
import sys
from pathlib import Path
from unittest.mock import Mock, patch, MagicMock

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pymodbus import FramerType, ModbusException

from modbus_scanner.connection.port_scanner import list_available_ports
from modbus_scanner.connection.modbus_scanner import (
    ModbusScanner,
    ModbusScanError,
    format_results,
)
from modbus_scanner.scan_config import BitsRequest, ScanConfig, WriteRequest


def make_config(**overrides):
    values = dict(
        com_port="COM1",
        baud_rate=9600,
        parity="none",
        slave_id=1,
        start_register=0,
        num_registers=2,
    )
    values.update(overrides)
    return ScanConfig(**values)


class TestPortScanner:
    """Tests for the port scanner module."""

    def test_list_ports_returns_list(self):
        """list_available_ports should return a list."""
        assert isinstance(list_available_ports(), list)

    def test_list_ports_returns_device_names_in_order(self):
        """Entries should be the device identifiers, in OS order."""
        ports = [Mock(device="COM3"), Mock(device="COM1")]
        with patch("serial.tools.list_ports.comports", return_value=ports):
            assert list_available_ports() == ["COM3", "COM1"]

    def test_list_ports_error_returns_empty(self):
        """An OS error while enumerating should yield an empty list."""
        with patch("serial.tools.list_ports.comports", side_effect=OSError("denied")):
            assert list_available_ports() == []


class TestFormatResults:
    """Tests for result line formatting."""

    def test_register_values(self):
        assert format_results(3, 10, 2, [123, 456]) == [
            "Register 10: 123",
            "Register 11: 456",
        ]

    def test_bits_render_on_off(self):
        """Coil reads pad to 8 bits; only the requested count is shown."""
        bits = [True, False, True, False, False, False, False, False]
        assert format_results(1, 0, 3, bits) == [
            "Register 0: ON",
            "Register 1: OFF",
            "Register 2: ON",
        ]

    def test_short_reply_renders_error(self):
        assert format_results(4, 5, 3, [7]) == [
            "Register 5: 7",
            "Register 6: Error",
            "Register 7: Error",
        ]

    def test_zero_count_renders_nothing(self):
        assert format_results(3, 0, 0, []) == []


class TestModbusScanner:
    """Tests for ModbusScanner with a mocked pymodbus client."""

    @pytest.fixture
    def client(self):
        """Create a mock pymodbus client."""
        mock = MagicMock()
        mock.connect.return_value = True
        response = Mock(registers=[123, 456], bits=[])
        response.isError.return_value = False
        mock.read_holding_registers.return_value = response
        mock.read_input_registers.return_value = response
        return mock

    @pytest.fixture
    def factory(self, client):
        return MagicMock(return_value=client)

    @pytest.fixture
    def scanner(self, factory):
        return ModbusScanner(client_factory=factory)

    def test_scan_opens_line_with_requested_settings(self, scanner, factory):
        scanner.scan(make_config(baud_rate=19200, parity="even"))
        factory.assert_called_once_with(
            port="COM1",
            framer=FramerType.RTU,
            baudrate=19200,
            bytesize=8,
            parity="E",
            stopbits=1,
            timeout=2.0,
            retries=1,
        )

    def test_scan_request_overrides_line_defaults(self, scanner, factory):
        scanner.scan(make_config(data_bits=7, stop_bits=2, timeout=0.5))
        kwargs = factory.call_args.kwargs
        assert kwargs["bytesize"] == 7
        assert kwargs["stopbits"] == 2
        assert kwargs["timeout"] == 0.5

    def test_scan_reads_holding_registers_by_default(self, scanner, client):
        lines = scanner.scan(make_config(start_register=0, num_registers=2, slave_id=7))
        client.read_holding_registers.assert_called_once_with(address=0, count=2, device_id=7)
        assert lines == ["Register 0: 123", "Register 1: 456"]

    def test_scan_closes_client(self, scanner, client):
        scanner.scan(make_config())
        client.close.assert_called_once()

    def test_scan_input_registers(self, scanner, client):
        scanner.scan(make_config(function_code=4))
        client.read_input_registers.assert_called_once()
        client.read_holding_registers.assert_not_called()

    def test_scan_coils(self, scanner, client):
        response = Mock(bits=[True, False] + [False] * 6, registers=[])
        response.isError.return_value = False
        client.read_coils.return_value = response

        lines = scanner.scan(make_config(function_code=1))
        assert lines == ["Register 0: ON", "Register 1: OFF"]

    def test_scan_uses_settings_function_code(self, factory, client):
        settings = Mock()
        settings.get.side_effect = lambda key, default=None: 4 if key == "functionCode" else default
        ModbusScanner(settings, client_factory=factory).scan(make_config())
        client.read_input_registers.assert_called_once()

    def test_connect_failure_raises(self, scanner, client):
        client.connect.return_value = False
        with pytest.raises(ModbusScanError, match="Failed to connect to COM1"):
            scanner.scan(make_config())
        client.close.assert_called_once()

    def test_error_reply_raises(self, scanner, client):
        error = Mock()
        error.isError.return_value = True
        client.read_holding_registers.return_value = error
        with pytest.raises(ModbusScanError, match="Read error"):
            scanner.scan(make_config())

    def test_modbus_exception_raises_and_closes(self, scanner, client):
        client.read_holding_registers.side_effect = ModbusException("no response")
        with pytest.raises(ModbusScanError, match="Read error"):
            scanner.scan(make_config())
        client.close.assert_called_once()

    def test_write_register(self, scanner, client):
        response = Mock()
        response.isError.return_value = False
        client.write_register.return_value = response

        message = scanner.write_register(WriteRequest(
            com_port="COM1", baud_rate=9600, parity="N", slave_id=2, register=5, value=1234,
        ))
        client.write_register.assert_called_once_with(address=5, value=1234, device_id=2)
        assert message == "Write successful (value 1234 to register 5)"

    def test_write_error_reply_raises(self, scanner, client):
        response = Mock()
        response.isError.return_value = True
        client.write_register.return_value = response
        with pytest.raises(ModbusScanError, match="Write error"):
            scanner.write_register(WriteRequest(
                com_port="COM1", baud_rate=9600, parity="N", slave_id=2, register=5, value=1,
            ))

    def _bits_request(self, **overrides):
        values = dict(com_port="COM1", baud_rate=9600, parity="even", slave_id=3, register=100)
        values.update(overrides)
        return BitsRequest(**values)

    def test_read_bits_reads_one_holding_register(self, scanner, client):
        response = Mock(registers=[0b1000000000000101])
        response.isError.return_value = False
        client.read_holding_registers.return_value = response

        value = scanner.read_bits(self._bits_request())

        client.read_holding_registers.assert_called_once_with(address=100, count=1, device_id=3)
        assert value == 0b1000000000000101
        client.close.assert_called_once()

    def test_read_bits_empty_reply_raises(self, scanner, client):
        response = Mock(registers=[])
        response.isError.return_value = False
        client.read_holding_registers.return_value = response

        with pytest.raises(ModbusScanError, match="invalid result length"):
            scanner.read_bits(self._bits_request())

    def test_write_bits_packs_bit_zero_first(self, scanner, client):
        response = Mock()
        response.isError.return_value = False
        client.write_register.return_value = response
        bits = [True, False, True] + [False] * 12 + [True]

        value = scanner.write_bits(self._bits_request(bits=bits))

        assert value == 0b1000000000000101
        client.write_register.assert_called_once_with(address=100, value=value, device_id=3)

    def test_write_bits_without_bits_raises(self, scanner, client):
        with pytest.raises(ValueError):
            scanner.write_bits(self._bits_request())
        client.write_register.assert_not_called()
