"""Turn client text into keyer units and append them to the outgoing queue."""

import logging
import string
from typing import List

from udp2keyer import keyer
from udp2keyer.session import OutgoingUnit, Session

logger = logging.getLogger("udp2keyer.encoder")

PLAIN = frozenset(
    (string.ascii_uppercase + string.digits + " ')/:<=>?@|\b,.").encode("ascii")
)
PROSIGNS = {
    ord("&"): bytes([keyer.ESC]) + b"AS",
    ord("!"): bytes([keyer.ESC]) + b"SN",
}
SUBSTITUTES = {
    ord("("): b")",
    ord("*"): b"<",
}
GAP = b"|" * 4

MAX_NUDGE_SPEED = 90
MIN_NUDGE_SPEED = 8
NUDGE_STEP = 2


def encode_text(session: Session, payload: bytes) -> List[OutgoingUnit]:
    """Encode payload, append the units to session.queue and return them.

    '+' and '-' change session.state.speed as they are met, so several of
    them in one payload compound.
    """
    state = session.state
    units: List[OutgoingUnit] = []
    gap_pending = False

    def emit(unit: OutgoingUnit):
        nonlocal gap_pending
        if gap_pending:
            units.extend(bytes([c]) for c in GAP)
            gap_pending = False
        units.append(unit)

    for code in payload.upper():
        if code == 0:
            break
        if code in PLAIN:
            emit(bytes([code]))
        elif code in PROSIGNS:
            emit(PROSIGNS[code])
        elif code in SUBSTITUTES:
            emit(SUBSTITUTES[code])
        elif code == ord("+"):
            if state.speed < MAX_NUDGE_SPEED:
                state.speed += NUDGE_STEP
                units.append(keyer.buffered_speed(state.speed))
        elif code == ord("-"):
            if state.speed > MIN_NUDGE_SPEED:
                state.speed -= NUDGE_STEP
                units.append(keyer.buffered_speed(state.speed))
        elif code == ord("~"):
            gap_pending = True
        else:
            logger.debug("Dropped character 0x%02x", code)

    session.queue.extend(units)
    return units
