"""
Serial probe: open a device, configure it, write a probe, read the answer.

The run is a strict sequence of gated steps:

    open -> configure -> set timeouts -> write -> operator wait -> read -> close

The first failing step aborts the rest. Once the device has been opened it is
released exactly once, before the failure is reported.

LINE SETTINGS
    9600 baud, 8 data bits, no parity, 1 stop bit (8N1)
    XON/XOFF off, RTS/CTS off, DSR/DTR off: the line is raw binary and
    control characters inside the data must never pause transmission.
    pyserial ports carry no end-of-line translation, and the Windows backend
    clears fAbortOnError so a line error does not lock up later I/O.

TIMEOUTS (ms)
    read interval 1000, read total 1000 + 0/byte, write total 1000 + 0/byte.
    A read that times out returns whatever arrived, possibly nothing. That is
    a zero-length success, not a read failure.
"""

from __future__ import annotations

from typing import Callable, Optional

import serial

from config.settings import Config
from models import ProbeConfig, ProbeResult
from utils.errors import (
    ConfigurationRejected,
    DeviceUnavailable,
    ProbeError,
    ProbeStateError,
    ReadFailed,
    TimeoutConfigurationRejected,
    ValidationError,
    WriteFailed,
)
from utils.logger import setup_logger
from utils.validators import (
    validate_baudrate,
    validate_bytesize,
    validate_parity,
    validate_port,
    validate_stopbits,
)

logger = setup_logger(__name__)

# Hex frame logging flag (can be enabled for diagnostics)
_hex_logging_enabled = False


def enable_hex_logging(enabled: bool = True):
    """
    Enable/disable hex frame logging for diagnostics.

    When enabled, every transmitted and received buffer is logged at DEBUG.
    """
    global _hex_logging_enabled
    _hex_logging_enabled = enabled
    if enabled:
        logger.info("Hex frame logging enabled")
    else:
        logger.info("Hex frame logging disabled")


def _log_frame(direction: str, frame: bytes):
    """Log a raw frame in hex, direction is "TX" or "RX"."""
    if _hex_logging_enabled:
        hex_str = ' '.join(f'{b:02X}' for b in frame)
        logger.debug(f"[{direction}] {hex_str}")


class SerialProbe:
    """Owns one serial device handle for the duration of a probe run."""

    def __init__(
        self,
        config: ProbeConfig,
        serial_factory: Callable[..., serial.SerialBase] = serial.serial_for_url,
    ):
        """
        Args:
            config: Probe configuration
            serial_factory: Builds an unopened port; called as
                ``serial_factory(port, do_not_open=True)``. pyserial's
                ``serial_for_url`` accepts device names and URLs such as
                ``loop://``.
        """
        self._config = config
        self._serial_factory = serial_factory
        self._serial: Optional[serial.SerialBase] = None
        self._released = False
        self._port: Optional[str] = None
        self.result: Optional[ProbeResult] = None

    @property
    def config(self) -> ProbeConfig:
        return self._config

    @property
    def port(self) -> Optional[str]:
        """Device name as opened (validated and stripped)."""
        return self._port

    @property
    def is_open(self) -> bool:
        return self._serial is not None

    def _handle(self) -> serial.SerialBase:
        if self._serial is None:
            state = "released" if self._released else "not opened"
            raise ProbeStateError(f"Device handle is {state}")
        return self._serial

    def open(self) -> serial.SerialBase:
        """
        Open the device read/write, exclusively, without creating it.

        Raises:
            DeviceUnavailable: Device missing, busy or access denied
        """
        if self._serial is not None or self._released:
            raise ProbeStateError("Probe has already opened its device")

        conn = self._config.connection
        try:
            port = validate_port(conn.port)
        except ValidationError as e:
            raise DeviceUnavailable(e.message) from e

        try:
            ser = self._serial_factory(port, do_not_open=True)
            ser.exclusive = conn.exclusive
            ser.open()
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"Failed to open {port}: {e}")
            raise DeviceUnavailable.from_exception(e) from e

        self._serial = ser
        self._port = port
        logger.info(f"Opened {port}")
        return ser

    def configure(self) -> None:
        """
        Apply the line parameters (baud, data bits, parity, stop bits, flow control).

        Raises:
            ConfigurationRejected: Invalid parameters or the device refused them
        """
        ser = self._handle()
        conn = self._config.connection
        try:
            settings = {
                "baudrate": validate_baudrate(conn.baudrate),
                "bytesize": validate_bytesize(conn.bytesize),
                "parity": validate_parity(conn.parity),
                "stopbits": validate_stopbits(conn.stopbits),
                "xonxoff": conn.xonxoff,
                "rtscts": conn.rtscts,
                "dsrdtr": conn.dsrdtr,
            }
        except ValidationError as e:
            logger.error(f"Rejected line parameters: {e.message}")
            raise ConfigurationRejected(e.message) from e

        try:
            ser.apply_settings(settings)
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"Device rejected line parameters: {e}")
            raise ConfigurationRejected.from_exception(e) from e

        logger.info(
            f"Line configured: {conn.baudrate} {conn.bytesize}{conn.parity}{conn.stopbits}, "
            f"xonxoff={conn.xonxoff} rtscts={conn.rtscts} dsrdtr={conn.dsrdtr}"
        )

    def set_timeouts(self) -> None:
        """
        Apply the timeout policy so no read or write blocks indefinitely.

        Raises:
            TimeoutConfigurationRejected: The device refused the timeouts
        """
        ser = self._handle()
        policy = self._config.timeouts
        settings = {
            "timeout": policy.read_timeout_s(self._config.buffer_size),
            "inter_byte_timeout": policy.inter_byte_timeout_s,
            "write_timeout": policy.write_timeout_s(len(self._config.payload)),
        }
        try:
            ser.apply_settings(settings)
        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"Device rejected timeouts: {e}")
            raise TimeoutConfigurationRejected.from_exception(e) from e

        logger.info(
            f"Timeouts set: read {settings['timeout']}s, "
            f"interval {settings['inter_byte_timeout']}s, write {settings['write_timeout']}s"
        )

    def write_probe(self) -> int:
        """
        Write the probe payload.

        Returns:
            Number of bytes written (at most len(payload))

        Raises:
            WriteFailed: Write timeout or device error
        """
        ser = self._handle()
        payload = self._config.payload
        try:
            written = ser.write(payload)
        except serial.SerialTimeoutException as e:
            logger.error(f"Write timed out: {e}")
            raise WriteFailed.from_exception(e, message=str(e) or "Write timeout") from e
        except (serial.SerialException, OSError) as e:
            logger.error(f"Write failed: {e}")
            raise WriteFailed.from_exception(e) from e

        # Some backends return None for a complete write
        if written is None:
            written = len(payload)
        _log_frame("TX", payload[:written])
        logger.info(f"Wrote {written}/{len(payload)} bytes")
        return written

    def wait_for_operator(self, prompt: Callable[[str], str] = input) -> None:
        """Block until the operator presses Enter; the typed line is discarded."""
        try:
            prompt(Config.OPERATOR_PROMPT)
        except EOFError:
            # Closed stdin counts as an acknowledgement
            logger.debug("Console input closed, continuing")

    def read_response(self) -> bytes:
        """
        Read up to buffer_size bytes.

        Returns:
            The received bytes; empty if the timeout elapsed with no data

        Raises:
            ReadFailed: Device error (a timeout is not an error)
        """
        ser = self._handle()
        try:
            data = ser.read(self._config.buffer_size)
        except (serial.SerialException, OSError) as e:
            logger.error(f"Read failed: {e}")
            raise ReadFailed.from_exception(e) from e

        data = bytes(data)
        if data:
            _log_frame("RX", data)
        else:
            logger.info("Read timed out with no data")
        return data

    def close(self) -> None:
        """
        Release the device handle.

        Raises:
            ProbeStateError: The handle was never opened or is already released
        """
        ser = self._handle()
        self._serial = None
        self._released = True
        try:
            ser.close()
        except (serial.SerialException, OSError) as e:
            logger.warning(f"Error while closing port: {e}")
        logger.info("Port closed")


# Console labels for each gated step
_STEP_LABELS = {
    DeviceUnavailable: "invalid handle",
    ConfigurationRejected: "set comm state error",
    TimeoutConfigurationRejected: "set comm timeouts error",
    WriteFailed: "write file error",
    ReadFailed: "read file error",
}


def _report(error: ProbeError):
    label = _STEP_LABELS.get(type(error), "probe error")
    code = error.status if error.status is not None else "?"
    print(f"{label} {code}")
    print(error.message)


def run_probe(
    config: ProbeConfig,
    probe: Optional[SerialProbe] = None,
    prompt: Callable[[str], str] = input,
) -> int:
    """
    Run the full probe sequence and print a transcript.

    Args:
        config: Probe configuration
        probe: Probe instance to drive (built from config when omitted)
        prompt: Console line reader used for the operator wait

    Returns:
        Process exit status: 0 on success, 1 on the first failed step
    """
    if probe is None:
        probe = SerialProbe(config)
    try:
        probe.open()
    except DeviceUnavailable as e:
        # Nothing acquired, nothing to release
        _report(e)
        return 1
    port = probe.port
    print(f"handle created {port}")

    try:
        probe.configure()
        print("set comm state succeed")

        probe.set_timeouts()
        print("set comm timeouts succeed")

        written = probe.write_probe()
        print(f"write file succeed ({written} bytes)")

        if config.wait_for_operator:
            probe.wait_for_operator(prompt)

        data = probe.read_response()
        print(f"received data {len(data)}:")
        print(data.hex())
    except ProbeError as e:
        probe.close()
        _report(e)
        return 1
    except BaseException:
        # Anything else, Ctrl-C included, still releases the device first
        probe.close()
        raise

    probe.close()
    print("closed")

    probe.result = ProbeResult(port=port, bytes_written=written, data=data)
    return 0
