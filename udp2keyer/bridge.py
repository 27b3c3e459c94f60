"""Asyncio-based bridge between UDP keying clients and a serial keyer.

Each loop iteration runs in a fixed order: wait up to 50 ms for a datagram
and act on it, check the tune deadline, send at most one queued unit unless
the keyer asked for xoff, then read and decode one status byte.
"""

import asyncio
import logging
import signal
import time

from udp2keyer.commands import apply_command, parse_datagram
from udp2keyer.echo import broadcast
from udp2keyer.keyer import KeyerPort, open_keyer
from udp2keyer.network import UdpEndpoint, open_endpoint
from udp2keyer.session import KeyerConfig, Session
from udp2keyer.status import decode_status
from udp2keyer.tune import check_tune_timer

logger = logging.getLogger("udp2keyer")

POLL_INTERVAL = 0.05
STATUS_TIMEOUT = 0


async def step(session: Session, port, endpoint, clock=time.monotonic) -> None:
    """Run one iteration of the bridge loop."""
    received = await endpoint.recv_datagram(POLL_INTERVAL)
    if received is not None:
        data, addr = received
        if session.add_peer(addr):
            logger.info("New client: %s:%s", addr[0], addr[1])
        command = parse_datagram(data)
        if command is not None:
            apply_command(session, port, command, clock())
            if not session.running:
                return

    check_tune_timer(session, port, clock())

    if not session.state.xoff and session.queue:
        port.write_bytes(session.queue.popleft())

    value = port.read_byte(STATUS_TIMEOUT)
    if value is not None:
        char = decode_status(session, value, clock())
        if char is not None:
            await broadcast(session, endpoint, char)


async def serve(session: Session, port: KeyerPort, endpoint: UdpEndpoint, clock=time.monotonic):
    """Loop until a client asks to terminate or the session is stopped."""
    while session.running:
        await step(session, port, endpoint, clock)


def _request_stop(session: Session):
    """SIGTERM handler: finish the current iteration, then shut down."""
    logger.info("Stop signal received")
    session.running = False


async def run_bridge_async(
    device: str, baud: int, listen: str, udp_port: int, config: KeyerConfig
):
    """Open the keyer and the UDP socket, then run the loop until told to stop."""
    session = Session.from_config(config)
    port = open_keyer(device, baud)
    logger.info("Serial opened: %s @ %s baud", device, baud)
    try:
        port.initialize(config)
        endpoint = open_endpoint(listen, udp_port)
    except BaseException:
        port.close()
        raise
    logger.info("UDP listening on %s:%s", listen, udp_port)

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, _request_stop, session)
    except NotImplementedError:
        pass

    try:
        await serve(session, port, endpoint)
    finally:
        session.queue.clear()
        try:
            port.close()
        finally:
            endpoint.close()


def run_bridge(
    device: str,
    baud: int,
    listen: str,
    udp_port: int,
    config: KeyerConfig,
    verbose: bool = False,
    debug: bool = False,
):
    """Synchronous entry: run the asyncio bridge until terminated or interrupted."""
    level = logging.WARNING
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        asyncio.run(run_bridge_async(device, baud, listen, udp_port, config))
    except KeyboardInterrupt:
        pass
