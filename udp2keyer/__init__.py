"""UDP-to-keyer bridge: key a serial CW keyer from UDP Morse-keying clients."""

from udp2keyer.bridge import run_bridge

__all__ = ["run_bridge"]
