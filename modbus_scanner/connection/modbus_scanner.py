"""Modbus RTU register scanning.

Provides the ModbusScanner class which opens a serial Modbus client for a
single request, reads or writes registers and formats the reply as
human-readable lines.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Union, TYPE_CHECKING

from pymodbus import FramerType, ModbusException
from pymodbus.client import ModbusSerialClient

from modbus_scanner.config.defaults import DEFAULT_CONFIG
from modbus_scanner.scan_config import (
    FUNCTION_CODES,
    BitsRequest,
    ScanConfig,
    WriteRequest,
    bits_to_value,
)
from modbus_scanner.utils.logging import log

if TYPE_CHECKING:
    from modbus_scanner.config.settings import SettingsManager


READ_METHODS = {
    1: "read_coils",
    2: "read_discrete_inputs",
    3: "read_holding_registers",
    4: "read_input_registers",
}

BIT_FUNCTIONS = (1, 2)


class ModbusScanError(RuntimeError):
    """Raised when the device cannot be reached or replies with an error."""


def format_results(
    function_code: int,
    start_register: int,
    num_registers: int,
    values: Sequence[Union[int, bool]],
) -> List[str]:
    """Format one line per requested register.

    Bit reads render ON/OFF, register reads render the decimal value and
    registers missing from a short reply render ``Error``.
    """
    lines = []
    for index in range(num_registers):
        address = start_register + index
        if index >= len(values):
            lines.append(f"Register {address}: Error")
        elif function_code in BIT_FUNCTIONS:
            lines.append(f"Register {address}: {'ON' if values[index] else 'OFF'}")
        else:
            lines.append(f"Register {address}: {int(values[index])}")
    return lines


class ModbusScanner:
    """Runs scan and write requests against a serial Modbus RTU line.

    A new client is opened and closed for every request so that each one can
    use its own port and line settings.
    """

    def __init__(
        self,
        settings: Optional["SettingsManager"] = None,
        client_factory: Callable[..., Any] = ModbusSerialClient,
    ) -> None:
        """Initialize the scanner.

        Args:
            settings: Source of default line settings (optional).
            client_factory: Callable building the pymodbus client.
        """
        self.settings = settings
        self.client_factory = client_factory

    def _setting(self, key: str) -> Any:
        if self.settings is None:
            return DEFAULT_CONFIG[key]
        return self.settings.get(key, DEFAULT_CONFIG[key])

    def _open(self, request: Union[ScanConfig, WriteRequest, BitsRequest]) -> Any:
        """Open a client for the request's port and line settings.

        Raises:
            ModbusScanError: If the port cannot be opened.
        """
        data_bits = request.data_bits if request.data_bits is not None else self._setting("dataBits")
        stop_bits = request.stop_bits if request.stop_bits is not None else self._setting("stopBits")
        timeout = request.timeout if request.timeout is not None else self._setting("timeoutS")

        try:
            client = self.client_factory(
                port=request.com_port,
                framer=FramerType.RTU,
                baudrate=request.baud_rate,
                bytesize=data_bits,
                parity=request.modbus_parity,
                stopbits=stop_bits,
                timeout=timeout,
                retries=self._setting("retries"),
            )
            connected = client.connect()
        except (ModbusException, ValueError, OSError) as e:
            raise ModbusScanError(f"Failed to connect to {request.com_port}: {e}") from e

        if not connected:
            client.close()
            raise ModbusScanError(f"Failed to connect to {request.com_port}")

        log(
            f"[ModbusScanner] Opened {request.com_port} at {request.baud_rate} baud, "
            f"{data_bits}{request.modbus_parity}{stop_bits}",
            level="DEBUG",
        )
        return client

    def scan(self, config: ScanConfig) -> List[str]:
        """Read a block of registers and return one line per register.

        Args:
            config: The scan configuration.

        Returns:
            Human-readable result lines in register order.

        Raises:
            ModbusScanError: On connection failure or an error reply.
        """
        function_code = config.function_code or self._setting("functionCode")
        if function_code not in READ_METHODS:
            raise ModbusScanError(f"Invalid function code: {function_code}")

        log(
            f"[ModbusScanner] Reading {config.num_registers} {FUNCTION_CODES[function_code]} "
            f"from {config.start_register} on device {config.slave_id} via {config.com_port}"
        )

        client = self._open(config)
        try:
            reader = getattr(client, READ_METHODS[function_code])
            response = reader(
                address=config.start_register,
                count=config.num_registers,
                device_id=config.slave_id,
            )
        except (ModbusException, ValueError) as e:
            raise ModbusScanError(f"Read error: {e}") from e
        finally:
            client.close()

        if response.isError():
            raise ModbusScanError(f"Read error: {response}")

        values = response.bits if function_code in BIT_FUNCTIONS else response.registers
        return format_results(function_code, config.start_register, config.num_registers, values)

    def _write_single(self, request: Union[WriteRequest, BitsRequest], value: int) -> None:
        """Write ``value`` to the request's holding register.

        Raises:
            ModbusScanError: On connection failure or an error reply.
        """
        client = self._open(request)
        try:
            response = client.write_register(
                address=request.register,
                value=value,
                device_id=request.slave_id,
            )
        except (ModbusException, ValueError) as e:
            raise ModbusScanError(f"Write error: {e}") from e
        finally:
            client.close()

        if response.isError():
            raise ModbusScanError(f"Write error: {response}")

    def write_register(self, request: WriteRequest) -> str:
        """Write a single holding register.

        Returns:
            A confirmation message.

        Raises:
            ModbusScanError: On connection failure or an error reply.
        """
        log(
            f"[ModbusScanner] Writing {request.value} to register {request.register} "
            f"on device {request.slave_id} via {request.com_port}"
        )
        self._write_single(request, request.value)
        return f"Write successful (value {request.value} to register {request.register})"

    def read_bits(self, request: BitsRequest) -> int:
        """Read one holding register for the bit editor.

        Returns:
            The raw 16-bit register value.

        Raises:
            ModbusScanError: On connection failure, an error reply or an
                empty reply.
        """
        log(
            f"[ModbusScanner] Reading bits of register {request.register} "
            f"on device {request.slave_id} via {request.com_port}",
            level="DEBUG",
        )

        client = self._open(request)
        try:
            response = client.read_holding_registers(
                address=request.register,
                count=1,
                device_id=request.slave_id,
            )
        except (ModbusException, ValueError) as e:
            raise ModbusScanError(f"Read error: {e}") from e
        finally:
            client.close()

        if response.isError():
            raise ModbusScanError(f"Read error: {response}")
        if not response.registers:
            raise ModbusScanError("Read error: invalid result length")
        return response.registers[0]

    def write_bits(self, request: BitsRequest) -> int:
        """Pack ``request.bits`` into one value and write it.

        Returns:
            The value written.

        Raises:
            ValueError: If the request carries no bits.
            ModbusScanError: On connection failure or an error reply.
        """
        if request.bits is None:
            raise ValueError("bits must be set to write a register")
        value = bits_to_value(request.bits)
        log(
            f"[ModbusScanner] Writing bits {value:016b} to register {request.register} "
            f"on device {request.slave_id} via {request.com_port}"
        )
        self._write_single(request, value)
        return value
