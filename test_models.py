"""
Tests for configuration defaults and the pydantic models.
"""
import pydantic
import pytest

from config.settings import Config, get_config
from models import ConnectionConfig, ProbeConfig, ProbeResult, TimeoutPolicy


def test_connection_defaults_are_8n1_at_9600():
    cfg = ConnectionConfig()
    assert cfg.port == Config.DEFAULT_PORT
    assert (cfg.baudrate, cfg.bytesize, cfg.parity, cfg.stopbits) == (9600, 8, "N", 1)
    assert cfg.xonxoff is False
    assert cfg.rtscts is False
    assert cfg.dsrdtr is False
    assert cfg.exclusive is True


def test_probe_defaults():
    cfg = ProbeConfig()
    assert cfg.payload == b"abc"
    assert cfg.buffer_size == 512
    assert cfg.wait_for_operator is True


def test_default_timeout_policy():
    policy = TimeoutPolicy()
    assert policy.read_interval_ms == 1000
    assert policy.read_total_multiplier_ms == 0
    assert policy.read_total_constant_ms == 1000
    assert policy.write_total_multiplier_ms == 0
    assert policy.write_total_constant_ms == 1000
    assert policy.inter_byte_timeout_s == 1.0
    assert policy.read_timeout_s(512) == 1.0
    assert policy.write_timeout_s(3) == 1.0


def test_timeout_multiplier_scales_with_size():
    policy = TimeoutPolicy(read_total_multiplier_ms=10, read_total_constant_ms=100)
    assert policy.read_timeout_s(5) == 0.15


def test_zero_timeouts_disable_the_limit():
    policy = TimeoutPolicy.uniform(0)
    assert policy.inter_byte_timeout_s is None
    assert policy.read_timeout_s(512) is None
    assert policy.write_timeout_s(3) is None


@pytest.mark.parametrize("field, value", [
    ("parity", "X"),
    ("bytesize", 9),
    ("stopbits", 3),
    ("baudrate", 0),
    ("port", ""),
])
def test_connection_rejects_bad_values(field, value):
    with pytest.raises(pydantic.ValidationError):
        ConnectionConfig(**{field: value})


def test_probe_rejects_empty_payload_and_buffer():
    with pytest.raises(pydantic.ValidationError):
        ProbeConfig(payload=b"")
    with pytest.raises(pydantic.ValidationError):
        ProbeConfig(buffer_size=0)


def test_negative_timeout_rejected():
    with pytest.raises(pydantic.ValidationError):
        TimeoutPolicy(read_interval_ms=-1)


def test_probe_result_hex_is_lowercase_without_separators():
    result = ProbeResult(port="COM4", bytes_written=3, data=b"\x0a\xbc\x01")
    assert result.bytes_received == 3
    assert result.hex == "0abc01"


def test_get_config():
    assert get_config().DEFAULT_BUFFER_SIZE == 512
