"""Entry point: parse config and run the UDP-to-keyer bridge."""

import sys

import serial

from udp2keyer.bridge import run_bridge
from udp2keyer.config import keyer_config, parse_args
from udp2keyer.keyer import KeyerError


def main(argv=None):
    try:
        args = parse_args(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    try:
        run_bridge(
            device=args.device,
            baud=args.baud,
            listen=args.listen,
            udp_port=args.udp_port,
            config=keyer_config(args),
            verbose=args.verbose,
            debug=args.debug,
        )
    except (KeyerError, serial.SerialException, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
