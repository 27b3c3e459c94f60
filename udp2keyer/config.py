"""Configuration and command-line argument parsing for the UDP-to-keyer bridge."""

import argparse

from udp2keyer.keyer import DEFAULT_BAUD
from udp2keyer.network import DEFAULT_LISTEN, DEFAULT_UDP_PORT
from udp2keyer.session import (
    DEFAULT_MAX_SPEED,
    DEFAULT_MIN_SPEED,
    DEFAULT_SPEED,
    KeyerConfig,
)


DEFAULT_DEVICE = "/dev/ttyUSB0"
LOWEST_SPEED = 5
HIGHEST_SPEED = 99


def build_parser():
    """Build the argument parser for the bridge options."""
    parser = argparse.ArgumentParser(
        prog="udp2keyer",
        description="Key a serial-attached CW keyer from UDP Morse-keying clients.",
    )
    parser.add_argument(
        "--device",
        default=DEFAULT_DEVICE,
        help=f"Keyer serial device (default: {DEFAULT_DEVICE})",
    )
    parser.add_argument(
        "--baud",
        type=int,
        default=DEFAULT_BAUD,
        help=f"Baud rate (default: {DEFAULT_BAUD})",
    )
    parser.add_argument(
        "--listen",
        default=DEFAULT_LISTEN,
        help=f"UDP listen address (default: {DEFAULT_LISTEN})",
    )
    parser.add_argument(
        "--udp-port",
        type=int,
        default=DEFAULT_UDP_PORT,
        help=f"UDP listen port (default: {DEFAULT_UDP_PORT})",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=DEFAULT_SPEED,
        help=f"Initial speed in WPM (default: {DEFAULT_SPEED})",
    )
    parser.add_argument(
        "--min-speed",
        type=int,
        default=DEFAULT_MIN_SPEED,
        help=f"Lowest speed of the speed pot in WPM (default: {DEFAULT_MIN_SPEED})",
    )
    parser.add_argument(
        "--max-speed",
        type=int,
        default=DEFAULT_MAX_SPEED,
        help=f"Highest speed of the speed pot in WPM (default: {DEFAULT_MAX_SPEED})",
    )
    parser.add_argument(
        "--mute",
        action="store_true",
        help="Disable the keyer sidetone",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Send characters echoed by the keyer back to clients",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (clients, keyer events)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log every byte exchanged with the keyer",
    )
    return parser


def parse_args(argv=None):
    """Parse command-line arguments and return a validated namespace."""
    args = build_parser().parse_args(argv)
    _validate(args)
    return args


def keyer_config(args) -> KeyerConfig:
    """Collect the keyer settings from a validated namespace."""
    return KeyerConfig(
        speed=args.speed,
        min_speed=args.min_speed,
        max_speed=args.max_speed,
        mute=args.mute,
        echo=args.echo,
    )


def _validate(args):
    """Validate parsed arguments; raise ValueError on invalid values."""
    if not (args.device and args.device.strip()):
        raise ValueError("Serial device (--device) must be non-empty")
    if args.baud <= 0:
        raise ValueError("Baud rate (--baud) must be positive")
    if not (1 <= args.udp_port <= 65535):
        raise ValueError("UDP port (--udp-port) must be between 1 and 65535")
    if args.min_speed < LOWEST_SPEED or args.max_speed > HIGHEST_SPEED:
        raise ValueError(
            f"Speed pot range must lie within {LOWEST_SPEED}-{HIGHEST_SPEED} WPM"
        )
    if args.min_speed >= args.max_speed:
        raise ValueError("--min-speed must be lower than --max-speed")
    if not (args.min_speed <= args.speed <= args.max_speed):
        raise ValueError(
            f"Speed (--speed) must be between {args.min_speed} and {args.max_speed}"
        )
