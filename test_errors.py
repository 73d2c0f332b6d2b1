"""
Tests for the probe error types and status code resolution.
"""
import errno
import os

import serial

from utils.errors import (
    DeviceUnavailable,
    ProbeError,
    ReadFailed,
    ValidationError,
    WriteFailed,
    resolve_status,
)


def test_status_from_serial_exception():
    exc = serial.SerialException(errno.ENOENT, "could not open port COM9")
    assert resolve_status(exc) == errno.ENOENT


def test_status_from_chained_os_error():
    try:
        try:
            raise PermissionError(errno.EACCES, "Permission denied")
        except OSError as e:
            raise serial.SerialException("could not open port") from e
    except serial.SerialException as exc:
        assert resolve_status(exc) == errno.EACCES


def test_status_missing():
    assert resolve_status(ValueError("invalid URL")) is None
    assert resolve_status(serial.SerialTimeoutException("Write timeout")) is None


def test_from_exception_uses_system_message():
    err = DeviceUnavailable.from_exception(serial.SerialException(errno.EBUSY, "busy"))
    assert err.status == errno.EBUSY
    assert err.message == os.strerror(errno.EBUSY)
    assert err.code == "DEVICE_UNAVAILABLE"
    assert isinstance(err.__cause__, serial.SerialException)


def test_from_exception_without_status_keeps_text():
    err = ReadFailed.from_exception(serial.SerialException("device reports readiness to read but returned no data"))
    assert err.status is None
    assert "returned no data" in err.message


def test_from_exception_explicit_message():
    err = WriteFailed.from_exception(serial.SerialTimeoutException("Write timeout"), message="Write timeout")
    assert err.message == "Write timeout"
    assert isinstance(err, ProbeError)


def test_validation_error_names_field():
    err = ValidationError("Stop bits '3' is not supported", "stopbits")
    assert err.message == "Validation error in stopbits: Stop bits '3' is not supported"
    assert err.code == "VALIDATION_ERROR"
