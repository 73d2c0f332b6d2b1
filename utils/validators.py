"""
Input validation utilities for the serial probe.
"""

import os
from typing import Any, Optional

from utils.errors import ValidationError

# Rates the termios layer knows how to program; Win32 takes any positive rate
SUPPORTED_BAUDRATES = (
    50, 75, 110, 134, 150, 200, 300, 600, 1200, 1800, 2400, 4800, 9600,
    19200, 38400, 57600, 115200, 230400, 460800, 500000, 576000, 921600,
    1000000, 1152000, 1500000, 2000000, 2500000, 3000000, 3500000, 4000000,
)
SUPPORTED_BYTESIZES = (5, 6, 7, 8)
SUPPORTED_STOPBITS = (1, 2)
SUPPORTED_PARITIES = ("N", "E", "O")


def validate_port(port: str) -> str:
    """
    Validate serial port name.

    Args:
        port: Port name (e.g., 'COM4', '/dev/ttyUSB0', 'loop://')

    Returns:
        Validated port name

    Raises:
        ValidationError: If port is invalid
    """
    if not port or not isinstance(port, str):
        raise ValidationError("Port must be a non-empty string", "port")

    port = port.strip()
    if not port:
        raise ValidationError("Port must be a non-empty string", "port")
    if len(port) > 255:
        raise ValidationError("Port name is too long", "port")

    return port


def validate_baudrate(baudrate: Any, termios_table: Optional[bool] = None) -> int:
    """
    Validate baud rate.

    Args:
        baudrate: Requested rate
        termios_table: Restrict to SUPPORTED_BAUDRATES (default: on POSIX only)

    Raises:
        ValidationError: If the rate is not supported
    """
    try:
        rate = int(baudrate)
    except (TypeError, ValueError):
        raise ValidationError("Baud rate must be an integer", "baudrate")
    if termios_table is None:
        termios_table = os.name == "posix"
    if rate <= 0:
        raise ValidationError("Baud rate must be positive", "baudrate")
    if termios_table and rate not in SUPPORTED_BAUDRATES:
        raise ValidationError(f"Baud rate '{rate}' is not supported", "baudrate")
    return rate


def validate_bytesize(bytesize: Any) -> int:
    """Validate data bits (5..8)."""
    try:
        size = int(bytesize)
    except (TypeError, ValueError):
        raise ValidationError("Character size must be an integer", "bytesize")
    if size not in SUPPORTED_BYTESIZES:
        raise ValidationError(f"Character size '{size}' is not supported", "bytesize")
    return size


def validate_stopbits(stopbits: Any) -> int:
    """Validate stop bits (1 or 2)."""
    try:
        bits = int(stopbits)
    except (TypeError, ValueError):
        raise ValidationError("Stop bits must be an integer", "stopbits")
    if bits not in SUPPORTED_STOPBITS:
        raise ValidationError(f"Stop bits '{bits}' is not supported", "stopbits")
    return bits


def validate_parity(parity: Any) -> str:
    """Validate parity letter: N - None, E - Even, O - Odd."""
    if not isinstance(parity, str) or parity.upper() not in SUPPORTED_PARITIES:
        raise ValidationError(f"Parity '{parity}' is not supported", "parity")
    return parity.upper()

