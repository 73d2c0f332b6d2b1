"""
Serial port discovery.
Lists the ports the system exposes so the operator can pick one to probe.
"""

from typing import List

from serial.tools import list_ports

from models import PortInfo
from utils.logger import setup_logger

logger = setup_logger(__name__)


def scan_ports() -> List[PortInfo]:
    """
    Scan all serial ports visible on this system.

    Returns:
        Port information sorted by device name
    """
    result = []
    for port in sorted(list_ports.comports(), key=lambda p: p.device):
        result.append(PortInfo(
            port=port.device,
            description=port.description or None,
            hwid=port.hwid or None,
        ))
    logger.info(f"Found {len(result)} serial ports")
    return result


def print_ports(ports: List[PortInfo]) -> None:
    """Print a port listing for the operator."""
    if not ports:
        print("No serial ports found")
        return
    print(f"Found {len(ports)} serial port(s):")
    for port in ports:
        print(f"  {port.port:<20} {port.description or ''}")
        if port.hwid and port.hwid != "n/a":
            print(f"  {'':<20} {port.hwid}")
