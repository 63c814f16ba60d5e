"""Command-line client for a running scanner server.

Usage:
    modbus-scanner [--url URL] ports
    modbus-scanner [--url URL] scan --port COM1 --baud 9600 --parity none \\
        --slave 1 --start 0 --count 10 [--function 3]
    modbus-scanner [--url URL] scan ... --watch [--interval 2] [--rounds N]
    modbus-scanner [--url URL] write --port COM1 --baud 9600 --parity none \\
        --slave 1 --register 5 --value 1234
    modbus-scanner [--url URL] bits --port COM1 --register 5 [--set 0] [--clear 3]
"""

from __future__ import annotations

import argparse
import sys

from modbus_scanner.client.api_client import DEFAULT_BASE_URL
from modbus_scanner.client.app import ScanApp
from modbus_scanner.client.errors import ScannerApiError
from modbus_scanner.client.result import RequestResult
from modbus_scanner.scan_config import WriteRequest, bits_to_value


def _add_line_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--port", required=True, help="Serial port, e.g. COM1 or /dev/ttyUSB0")
    parser.add_argument("--baud", default="9600", help="Baud rate (default: 9600)")
    parser.add_argument("--parity", default="none", help="none, even or odd (default: none)")
    parser.add_argument("--slave", default="1", help="Device address (default: 1)")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="modbus-scanner",
        description="Client for the Modbus scanner REST API"
    )
    parser.add_argument("--url", default=DEFAULT_BASE_URL, help=f"Server URL (default: {DEFAULT_BASE_URL})")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("ports", help="List serial ports on the server host")

    scan = commands.add_parser("scan", help="Read a block of registers")
    _add_line_arguments(scan)
    scan.add_argument("--start", default="0", help="First register (default: 0)")
    scan.add_argument("--count", default="10", help="Number of registers (default: 10)")
    scan.add_argument("--function", default="", help="Function code 1-4 (default: server setting)")
    scan.add_argument("--watch", action="store_true", help="Rescan until interrupted")
    scan.add_argument("--interval", type=float, default=2.0, help="Seconds between rescans (default: 2)")
    scan.add_argument("--rounds", type=int, default=None, help="Stop watching after this many scans")

    write = commands.add_parser("write", help="Write a single holding register")
    _add_line_arguments(write)
    write.add_argument("--register", type=int, required=True, help="Register address")
    write.add_argument("--value", type=int, required=True, help="Value to write")

    bits = commands.add_parser("bits", help="Show or change the bits of one holding register")
    _add_line_arguments(bits)
    bits.add_argument("--register", required=True, help="Register address")
    bits.add_argument("--set", type=int, action="append", default=[], metavar="BIT", help="Bit to switch on (repeatable)")
    bits.add_argument("--clear", type=int, action="append", default=[], metavar="BIT", help="Bit to switch off (repeatable)")

    return parser.parse_args(args)


def _line_fields(parsed: argparse.Namespace) -> dict:
    return {
        "comPort": parsed.port,
        "baudRate": parsed.baud,
        "parity": parsed.parity,
        "slaveId": parsed.slave,
    }


def _fail(app: ScanApp) -> int:
    print(f"Error: {app.page.error_display.message}", file=sys.stderr)
    return 1


def _watch(app: ScanApp, fields: dict, rounds: int | None) -> int:
    def print_round(result: RequestResult) -> None:
        if result.superseded:
            return
        if result.ok:
            print(app.page.results.to_text(), flush=True)
        else:
            print(f"Error: {app.page.error_display.message}", file=sys.stderr, flush=True)

    app.poller.on_round = print_round
    if not app.start_polling(fields, max_rounds=rounds).ok:
        return _fail(app)
    try:
        app.poller.wait()
    except KeyboardInterrupt:
        app.stop_polling()
    return 0


def _bits(app: ScanApp, parsed: argparse.Namespace) -> int:
    fields = dict(_line_fields(parsed), register=parsed.register)
    if not app.read_bits(fields).ok:
        return _fail(app)

    panel = app.page.bits_panel
    if parsed.set or parsed.clear:
        try:
            for bit in parsed.set:
                panel.set_bit(bit, True)
            for bit in parsed.clear:
                panel.set_bit(bit, False)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if not app.write_bits(fields).ok:
            return _fail(app)
        print(panel.status)

    value = bits_to_value(panel.bits)
    print(f"Register {parsed.register}: {value}")
    print("Bits 15..0: " + "".join("1" if bit else "0" for bit in reversed(panel.bits)))
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 on a request failure).
    """
    parsed = parse_args(args)
    poll_interval = getattr(parsed, "interval", 2.0)
    app = ScanApp(parsed.url, timeout=parsed.timeout, poll_interval=poll_interval)

    if parsed.command == "ports":
        result = app.start()
        if not result.ok:
            return _fail(app)
        if not app.page.port_select.options:
            print("No serial ports found")
        for option in app.page.port_select.options:
            print(option.label)
        return 0

    if parsed.command == "scan":
        fields = dict(
            _line_fields(parsed),
            startRegister=parsed.start,
            numRegisters=parsed.count,
            functionCode=parsed.function,
        )
        if parsed.watch:
            return _watch(app, fields, parsed.rounds)
        if not app.submit(fields).ok:
            return _fail(app)
        print(app.page.results.to_text())
        return 0

    if parsed.command == "bits":
        return _bits(app, parsed)

    try:
        request = WriteRequest(
            com_port=parsed.port,
            baud_rate=int(parsed.baud),
            parity=parsed.parity,
            slave_id=int(parsed.slave),
            register=parsed.register,
            value=parsed.value,
        )
        print(app.client.write_register(request))
    except (ValueError, ScannerApiError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
