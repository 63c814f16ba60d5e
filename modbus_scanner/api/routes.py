"""API route handlers for the Modbus scanner.

Contains all route handler functions for the REST API endpoints.
"""

from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import TYPE_CHECKING

from modbus_scanner.api.middleware import send_json, read_json_body
from modbus_scanner.connection.modbus_scanner import ModbusScanError
from modbus_scanner.connection.port_scanner import list_available_ports
from modbus_scanner.scan_config import BitsRequest, ScanConfig, WriteRequest, value_to_bits
from modbus_scanner.utils.logging import log, set_logging_level

if TYPE_CHECKING:
    from modbus_scanner.core.state import ServerState


# --- Settings Routes ---

def handle_get_settings(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle GET /api/settings - Get all configuration.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    send_json(handler, state.settings.get_all())


def handle_post_settings(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle POST /api/settings - Update configuration.

    Values are checked against the defaults before anything is saved.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    try:
        payload = read_json_body(handler)
        state.settings.update(payload)
    except ValueError as e:
        send_json(handler, {"error": str(e)}, HTTPStatus.BAD_REQUEST)
        return

    if "loggingLevel" in payload:
        set_logging_level(payload["loggingLevel"])

    send_json(handler, {"status": "ok", "settings": state.settings.get_all()})


# --- Port Routes ---

def handle_get_ports(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle GET /api/ports - List available serial ports.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    send_json(handler, list_available_ports())


# --- Modbus Routes ---

def handle_scan(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle POST /api/scan - Read a block of registers.

    Responds with a JSON array of result lines.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    try:
        config = ScanConfig.from_payload(read_json_body(handler))
    except ValueError as e:
        send_json(handler, {"error": str(e)}, HTTPStatus.BAD_REQUEST)
        return

    try:
        with state.modbus_lock:
            lines = state.scanner.scan(config)
    except ModbusScanError as e:
        log(f"[Routes] Scan on {config.com_port} failed: {e}", level="WARNING")
        send_json(
            handler,
            {"error": "Scan failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return
    except Exception as e:
        log(f"[Routes] Error in handle_scan: {e}", level="ERROR")
        send_json(
            handler,
            {"error": "Scan failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return

    send_json(handler, lines)


def handle_write_register(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle POST /api/write - Write a single holding register.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    try:
        request = WriteRequest.from_payload(read_json_body(handler))
    except ValueError as e:
        send_json(handler, {"error": str(e)}, HTTPStatus.BAD_REQUEST)
        return

    try:
        with state.modbus_lock:
            message = state.scanner.write_register(request)
    except ModbusScanError as e:
        log(f"[Routes] Write on {request.com_port} failed: {e}", level="WARNING")
        send_json(
            handler,
            {"error": "Write failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return
    except Exception as e:
        log(f"[Routes] Error in handle_write_register: {e}", level="ERROR")
        send_json(
            handler,
            {"error": "Write failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return

    send_json(handler, {"status": "ok", "message": message})


# --- Bit Editor Routes ---

def handle_read_bits(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle POST /api/bits/read - Read one holding register as 16 bits.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    try:
        request = BitsRequest.from_payload(read_json_body(handler))
    except ValueError as e:
        send_json(handler, {"error": str(e)}, HTTPStatus.BAD_REQUEST)
        return

    try:
        with state.modbus_lock:
            value = state.scanner.read_bits(request)
    except Exception as e:
        level = "WARNING" if isinstance(e, ModbusScanError) else "ERROR"
        log(f"[Routes] Bit read on {request.com_port} failed: {e}", level=level)
        send_json(
            handler,
            {"error": "Read failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return

    send_json(handler, {
        "register": request.register,
        "value": value,
        "bits": value_to_bits(value),
    })


def handle_write_bits(handler: BaseHTTPRequestHandler, state: "ServerState") -> None:
    """Handle POST /api/bits/write - Write 16 bits to one holding register.

    Args:
        handler: The HTTP request handler instance.
        state: The server state singleton.
    """
    try:
        request = BitsRequest.from_payload(read_json_body(handler), require_bits=True)
    except ValueError as e:
        send_json(handler, {"error": str(e)}, HTTPStatus.BAD_REQUEST)
        return

    try:
        with state.modbus_lock:
            value = state.scanner.write_bits(request)
    except Exception as e:
        level = "WARNING" if isinstance(e, ModbusScanError) else "ERROR"
        log(f"[Routes] Bit write on {request.com_port} failed: {e}", level=level)
        send_json(
            handler,
            {"error": "Write failed", "message": str(e)},
            HTTPStatus.INTERNAL_SERVER_ERROR
        )
        return

    send_json(handler, {
        "status": "ok",
        "message": f"Write successful (value {value} to register {request.register})",
        "value": value,
    })
