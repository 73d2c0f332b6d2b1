"""
Custom exception classes for the serial probe.
Each probe step has its own error carrying the platform status code.
"""

import os
from typing import Optional


class ProbeError(Exception):
    """Base exception for all probe errors."""
    def __init__(self, message: str, code: str = "PROBE_ERROR", status: Optional[int] = None):
        self.message = message
        self.code = code
        self.status = status
        super().__init__(self.message)

    @classmethod
    def from_exception(cls, exc: BaseException, message: Optional[str] = None) -> "ProbeError":
        """Build the error from a pyserial/OS exception, resolving its status code."""
        status = resolve_status(exc)
        if message is None:
            message = os.strerror(status) if status is not None else str(exc)
        err = cls(message, status=status)
        err.__cause__ = exc
        return err


class DeviceUnavailable(ProbeError):
    """Raised when the serial device cannot be opened."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, "DEVICE_UNAVAILABLE", status)


class ConfigurationRejected(ProbeError):
    """Raised when the device refuses the line parameters."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, "CONFIGURATION_REJECTED", status)


class TimeoutConfigurationRejected(ProbeError):
    """Raised when the device refuses the timeout policy."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, "TIMEOUT_CONFIGURATION_REJECTED", status)


class WriteFailed(ProbeError):
    """Raised when the probe payload cannot be written."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, "WRITE_FAILED", status)


class ReadFailed(ProbeError):
    """Raised on a device error while reading. A timeout is not a read failure."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, "READ_FAILED", status)


class ProbeStateError(ProbeError):
    """Raised when the device handle is used before open or after release."""
    def __init__(self, message: str):
        super().__init__(message, "PROBE_STATE_ERROR")


class ValidationError(ProbeError):
    """Raised when input validation fails."""
    def __init__(self, message: str, field: Optional[str] = None):
        if field:
            message = f"Validation error in {field}: {message}"
        super().__init__(message, "VALIDATION_ERROR")


def resolve_status(exc: BaseException) -> Optional[int]:
    """
    Find the platform status code behind an exception.

    pyserial raises SerialException (an OSError) with errno set on POSIX;
    on Windows the OSError is usually chained or embedded in the args.

    Args:
        exc: Exception raised by pyserial or the OS

    Returns:
        Numeric status code, or None if the exception carries none
    """
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, OSError):
            code = getattr(current, "winerror", None) or current.errno
            if isinstance(code, int):
                return code
            for arg in current.args:
                if isinstance(arg, OSError):
                    nested = getattr(arg, "winerror", None) or arg.errno
                    if isinstance(nested, int):
                        return nested
        current = current.__cause__ or current.__context__
    return None
