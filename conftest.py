"""
Shared fixtures for the serial probe tests.

FakeSerial stands in for a pyserial port when a test needs a step to fail;
the success paths run against pyserial's real ``loop://`` handler.
"""
import pytest
import serial

from models import ConnectionConfig, ProbeConfig, TimeoutPolicy


class FakeSerial:
    """Records every call made on it and fails the requested step."""

    def __init__(self, port, fail_on=None, response=b""):
        self.port = port
        self.fail_on = fail_on
        self.response = response
        self.exclusive = None
        self.settings = {}
        self.calls = []
        self.written = b""
        self.close_calls = 0

    def open(self):
        self.calls.append("open")
        if self.fail_on == "open":
            raise serial.SerialException(2, f"could not open port {self.port}: [Errno 2] No such file or directory")

    def apply_settings(self, d):
        step = "timeouts" if "timeout" in d else "configure"
        self.calls.append(step)
        if self.fail_on == step:
            raise serial.SerialException(22, "Invalid argument")
        self.settings.update(d)

    def write(self, data):
        self.calls.append("write")
        if self.fail_on == "write":
            raise serial.SerialTimeoutException("Write timeout")
        self.written += data
        return len(data)

    def read(self, size=1):
        self.calls.append("read")
        if self.fail_on == "read":
            raise serial.SerialException(5, "Input/output error")
        return self.response[:size]

    def close(self):
        self.calls.append("close")
        self.close_calls += 1


class FakeSerialFactory:
    """serial_factory replacement that keeps the ports it built."""

    def __init__(self, fail_on=None, response=b""):
        self.fail_on = fail_on
        self.response = response
        self.instances = []

    def __call__(self, port, do_not_open=False):
        ser = FakeSerial(port, fail_on=self.fail_on, response=self.response)
        self.instances.append(ser)
        return ser

    @property
    def port(self) -> FakeSerial:
        return self.instances[-1]


class LoopFactory:
    """Builds real pyserial loop:// ports and keeps a reference to the last one."""

    def __init__(self):
        self.port = None

    def __call__(self, url, do_not_open=False):
        self.port = serial.serial_for_url(url, do_not_open=do_not_open)
        return self.port


def no_prompt(message):
    return ""


@pytest.fixture
def loop_config():
    """Probe over the in-process loopback with short timeouts."""
    return ProbeConfig(
        connection=ConnectionConfig(port="loop://"),
        timeouts=TimeoutPolicy.uniform(50),
        wait_for_operator=False,
    )


@pytest.fixture
def fake_config():
    return ProbeConfig(connection=ConnectionConfig(port="COM4"))
