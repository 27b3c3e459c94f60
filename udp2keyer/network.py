"""UDP side of the bridge, driven by the asyncio event loop."""

import asyncio
import logging
import socket
from typing import Optional, Tuple

logger = logging.getLogger("udp2keyer.network")

DEFAULT_LISTEN = "0.0.0.0"
DEFAULT_UDP_PORT = 6789
MAX_DATAGRAM = 65535


class UdpEndpoint:
    """A bound, non-blocking UDP socket with timeout-bounded receive."""

    def __init__(self, sock: socket.socket):
        self._sock = sock

    @property
    def address(self):
        """The (host, port) the socket is bound to."""
        return self._sock.getsockname()

    async def recv_datagram(self, timeout: float) -> Optional[Tuple[bytes, tuple]]:
        """Wait up to timeout seconds for one datagram; None if none arrived."""
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.sock_recvfrom(self._sock, MAX_DATAGRAM), timeout
            )
        except TimeoutError:
            return None

    async def send_to(self, data: bytes, addr) -> int:
        """Send one datagram to addr and return the number of bytes sent."""
        loop = asyncio.get_running_loop()
        return await loop.sock_sendto(self._sock, data, addr)

    def close(self):
        """Release the socket."""
        self._sock.close()


def open_endpoint(listen: str, port: int) -> UdpEndpoint:
    """Bind the client-facing UDP socket."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((listen, port))
    except OSError:
        sock.close()
        raise
    sock.setblocking(False)
    return UdpEndpoint(sock)
