"""Tune deadline: end a timed tune once its time is up."""

import logging

from udp2keyer import keyer
from udp2keyer.session import Session

logger = logging.getLogger("udp2keyer.tune")


def check_tune_timer(session: Session, port, now: float) -> bool:
    """Send tune-off directly to port if the tune deadline has passed.

    Returns True when tune-off was sent.
    """
    state = session.state
    if not state.tune_on or now <= state.tune_deadline:
        return False
    state.tune_on = False
    state.tune_deadline = None
    logger.info("Tune off")
    port.write_bytes(keyer.tune(False))
    return True
