#!/usr/bin/env python
"""
Serial Probe
Open a serial port, write a probe, wait for the operator, hex-dump the answer.

Usage:
    python probe.py --port COM4
    python probe.py --port /dev/ttyUSB0 --baudrate 19200 --no-wait
    python probe.py --list-ports
"""
import argparse
import logging
import sys
from typing import List, Optional

import pydantic

from config.settings import Config
from core.port_scan import print_ports, scan_ports
from core.serial_probe import enable_hex_logging, run_probe
from models import ConnectionConfig, ProbeConfig, TimeoutPolicy
from utils.logger import set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serial port probe")
    parser.add_argument("--port", default=Config.DEFAULT_PORT,
                        help=f"Serial port or pyserial URL (default: {Config.DEFAULT_PORT})")
    parser.add_argument("--baudrate", type=int, default=Config.DEFAULT_BAUDRATE, help="Baud rate")
    parser.add_argument("--bytesize", type=int, default=Config.DEFAULT_BYTESIZE, help="Data bits (5-8)")
    parser.add_argument("--parity", default=Config.DEFAULT_PARITY, choices=["N", "E", "O"], help="Parity")
    parser.add_argument("--stopbits", type=int, default=Config.DEFAULT_STOPBITS, choices=[1, 2], help="Stop bits")
    parser.add_argument("--payload", default=Config.DEFAULT_PAYLOAD.decode("ascii"),
                        help="Probe text to send (ASCII)")
    parser.add_argument("--buffer-size", type=int, default=Config.DEFAULT_BUFFER_SIZE,
                        help="Maximum number of bytes to read")
    parser.add_argument("--timeout-ms", type=int, default=None,
                        help="Read interval, read total and write total timeout in ms (default: 1000)")
    parser.add_argument("--no-wait", action="store_true", help="Do not wait for Enter before reading")
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging with TX/RX hex frames")
    return parser


def build_config(args: argparse.Namespace) -> ProbeConfig:
    """Build the probe configuration from parsed arguments."""
    timeouts = TimeoutPolicy() if args.timeout_ms is None else TimeoutPolicy.uniform(args.timeout_ms)
    return ProbeConfig(
        connection=ConnectionConfig(
            port=args.port,
            baudrate=args.baudrate,
            bytesize=args.bytesize,
            parity=args.parity,
            stopbits=args.stopbits,
        ),
        timeouts=timeouts,
        payload=args.payload.encode("ascii"),
        buffer_size=args.buffer_size,
        wait_for_operator=not args.no_wait,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)
        enable_hex_logging(True)

    if args.list_ports:
        print_ports(scan_ports())
        return 0

    try:
        config = build_config(args)
    except UnicodeEncodeError:
        parser.error("--payload must be ASCII text")
    except pydantic.ValidationError as e:
        parser.error(str(e))

    return run_probe(config)


def cli() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    cli()
