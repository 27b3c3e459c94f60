"""Decode the byte stream the keyer sends back."""

import logging
from typing import Optional

from udp2keyer.session import Session

logger = logging.getLogger("udp2keyer.status")

FRAME_MASK = 0xC0
STATUS_FRAME = 0xC0
POT_FRAME = 0x80
IDLE = 0xC0

XOFF = 0x01
BREAKIN = 0x02
BUSY = 0x04
TUNING = 0x08
WAITING = 0x10

ECHO_FIRST, ECHO_LAST = 0x20, 0x7E


def is_status_frame(value: int) -> bool:
    """Top two bits 11: keyer status."""
    return value & FRAME_MASK == STATUS_FRAME


def is_pot_frame(value: int) -> bool:
    """Top two bits 10: speed pot reading in the low bits."""
    return value & FRAME_MASK == POT_FRAME


def decode_status(session: Session, value: int, now: float) -> Optional[int]:
    """Apply one status byte to session.state.

    Returns the character to echo to clients, or None. busy and xoff are
    independent flags; a single frame may set both.
    """
    state = session.state

    if is_status_frame(value):
        state.xoff = False
        if value == IDLE:
            if state.busy and state.busy_since is not None:
                logger.debug("Keyer idle after %.2f s busy", now - state.busy_since)
            state.busy = False
            state.busy_since = None
            return None
        if value & XOFF:
            state.xoff = True
            logger.debug("Keyer buffer nearly full")
        if value & BREAKIN:
            logger.debug("Paddle break-in")
        if value & BUSY:
            if not state.busy:
                state.busy_since = now
            state.busy = True
        if value & TUNING:
            logger.debug("Keyer tuning")
        if value & WAITING:
            logger.debug("Keyer waiting")
        return None

    if is_pot_frame(value):
        logger.debug("Speed pot reading %d", value & 0x7F)
        return None

    if session.config.echo and ECHO_FIRST <= value <= ECHO_LAST:
        return value
    return None
