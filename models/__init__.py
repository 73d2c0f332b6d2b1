"""
Shared data models for the serial probe.
Provides pydantic models used by the probe, the port scan and the CLI.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from config.settings import Config


def _total_timeout_s(constant_ms: int, multiplier_ms: int, size: int) -> float | None:
    # Both components zero means no total timeout at all
    total_ms = constant_ms + multiplier_ms * size
    if total_ms == 0:
        return None
    return total_ms / 1000.0


class PortInfo(BaseModel):
    """Serial port information returned by scans."""

    port: str
    description: str | None = None
    hwid: str | None = None


class ConnectionConfig(BaseModel):
    """Line parameters for the probed device."""

    port: str = Field(default=Config.DEFAULT_PORT, min_length=1)
    baudrate: int = Field(default=Config.DEFAULT_BAUDRATE, gt=0)
    bytesize: int = Field(default=Config.DEFAULT_BYTESIZE, ge=5, le=8)
    parity: str = Field(default=Config.DEFAULT_PARITY, pattern="^[NEO]$")
    stopbits: int = Field(default=Config.DEFAULT_STOPBITS, ge=1, le=2)
    xonxoff: bool = Field(default=Config.DEFAULT_XONXOFF)
    rtscts: bool = Field(default=Config.DEFAULT_RTSCTS)
    dsrdtr: bool = Field(default=Config.DEFAULT_DSRDTR)
    exclusive: bool = Field(default=Config.DEFAULT_EXCLUSIVE)


class TimeoutPolicy(BaseModel):
    """
    Read/write timeouts in milliseconds.

    A total timeout is ``constant + multiplier * bytes``; the interval bounds
    the idle time between two received bytes.
    """

    read_interval_ms: int = Field(default=Config.DEFAULT_READ_INTERVAL_MS, ge=0)
    read_total_multiplier_ms: int = Field(default=Config.DEFAULT_READ_TOTAL_MULTIPLIER_MS, ge=0)
    read_total_constant_ms: int = Field(default=Config.DEFAULT_READ_TOTAL_CONSTANT_MS, ge=0)
    write_total_multiplier_ms: int = Field(default=Config.DEFAULT_WRITE_TOTAL_MULTIPLIER_MS, ge=0)
    write_total_constant_ms: int = Field(default=Config.DEFAULT_WRITE_TOTAL_CONSTANT_MS, ge=0)

    @classmethod
    def uniform(cls, timeout_ms: int) -> "TimeoutPolicy":
        """Same value for the interval and both constants, no multipliers."""
        return cls(
            read_interval_ms=timeout_ms,
            read_total_multiplier_ms=0,
            read_total_constant_ms=timeout_ms,
            write_total_multiplier_ms=0,
            write_total_constant_ms=timeout_ms,
        )

    @property
    def inter_byte_timeout_s(self) -> float | None:
        # pyserial treats None as "no interval limit"
        if self.read_interval_ms == 0:
            return None
        return self.read_interval_ms / 1000.0

    def read_timeout_s(self, size: int) -> float | None:
        return _total_timeout_s(self.read_total_constant_ms, self.read_total_multiplier_ms, size)

    def write_timeout_s(self, size: int) -> float | None:
        return _total_timeout_s(self.write_total_constant_ms, self.write_total_multiplier_ms, size)


class ProbeConfig(BaseModel):
    """Everything one probe run needs."""

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    timeouts: TimeoutPolicy = Field(default_factory=TimeoutPolicy)
    payload: bytes = Field(default=Config.DEFAULT_PAYLOAD, min_length=1)
    buffer_size: int = Field(default=Config.DEFAULT_BUFFER_SIZE, ge=1)
    wait_for_operator: bool = True


class ProbeResult(BaseModel):
    """Outcome of a successful probe run."""

    port: str
    bytes_written: int = Field(ge=0)
    data: bytes = b""

    @property
    def bytes_received(self) -> int:
        return len(self.data)

    @property
    def hex(self) -> str:
        return self.data.hex()


__all__ = [
    "ConnectionConfig",
    "PortInfo",
    "ProbeConfig",
    "ProbeResult",
    "TimeoutPolicy",
]
