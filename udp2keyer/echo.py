"""Send characters echoed by the keyer back to every client seen so far."""

import asyncio
import logging

from udp2keyer.session import Session

logger = logging.getLogger("udp2keyer.echo")

SEND_TIMEOUT = 1.0


async def broadcast(session: Session, endpoint, char: int, timeout: float = SEND_TIMEOUT) -> int:
    """Send char as a one-byte datagram to each known peer.

    Each send is bounded by timeout; a failure or timeout for one peer is
    logged and the remaining peers are still tried. Returns the number of
    successful sends.
    """
    data = bytes([char])
    sent = 0
    for addr in list(session.peers):
        try:
            await asyncio.wait_for(endpoint.send_to(data, addr), timeout)
        except TimeoutError:
            logger.warning("Echo to %s timed out", addr)
        except OSError as e:
            logger.warning("Echo to %s failed: %s", addr, e)
        else:
            sent += 1
    return sent
