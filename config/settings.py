"""
Configuration module for the serial probe.
Holds the defaults for the device, line parameters, timeouts and logging.
"""

import platform
from pathlib import Path
from typing import Optional


class Config:
    """Main configuration class."""

    # Application paths
    BASE_DIR = Path(__file__).parent.parent
    LOGS_DIR = BASE_DIR / "logs"

    # Device configuration
    # Windows exposes serial ports as COMn, everything else as a /dev node
    DEFAULT_PORT = "COM4" if platform.system() == "Windows" else "/dev/ttyS0"
    DEFAULT_BAUDRATE = 9600
    DEFAULT_BYTESIZE = 8
    DEFAULT_PARITY = "N"
    DEFAULT_STOPBITS = 1

    # Flow control: raw binary line, nothing may gate transmission
    DEFAULT_XONXOFF = False
    DEFAULT_RTSCTS = False
    DEFAULT_DSRDTR = False
    DEFAULT_EXCLUSIVE = True

    # Timeout policy (ms)
    DEFAULT_READ_INTERVAL_MS = 1000
    DEFAULT_READ_TOTAL_MULTIPLIER_MS = 0
    DEFAULT_READ_TOTAL_CONSTANT_MS = 1000
    DEFAULT_WRITE_TOTAL_MULTIPLIER_MS = 0
    DEFAULT_WRITE_TOTAL_CONSTANT_MS = 1000

    # Probe transfer
    DEFAULT_PAYLOAD = b"abc"
    DEFAULT_BUFFER_SIZE = 512
    OPERATOR_PROMPT = "Press Enter when ready for reading..."

    # Logging configuration
    LOG_LEVEL = "INFO"
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
    # Set to a path (e.g. LOGS_DIR / "probe.log") to also log to a file
    LOG_FILE: Optional[Path] = None


def get_config() -> Config:
    """Get configuration instance."""
    return Config()
