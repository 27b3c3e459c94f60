"""Classify client datagrams and carry out escape commands.

A datagram whose first byte is ESC (27) is a command: the next byte is the
command code and whatever follows is a decimal argument. Anything else is
text for the keyer.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from udp2keyer import keyer
from udp2keyer.encoder import encode_text
from udp2keyer.session import Session

logger = logging.getLogger("udp2keyer.commands")

ESCAPE = 27
MIN_WEIGHT, MAX_WEIGHT = 10, 90
MAX_PTT_LEAD_IN = 50
MAX_TUNE_SECONDS = 10

_INTEGER = re.compile(rb"\s*([+-]?\d+)")


@dataclass(frozen=True)
class SetSpeed:
    """Absolute speed in WPM."""

    speed: int


@dataclass(frozen=True)
class Terminate:
    """Close the keyer and end the daemon."""


@dataclass(frozen=True)
class SetWeight:
    """Weighting offset from 50, -50..50."""

    argument: int


@dataclass(frozen=True)
class SetPttLeadIn:
    """PTT lead-in in milliseconds."""

    argument: int


@dataclass(frozen=True)
class Tune:
    """Key down for this many seconds."""

    seconds: int


@dataclass(frozen=True)
class StopKeying:
    """Catch-all for every other code, including the documented reset ('0')
    and abort-message ('4') codes."""

    code: bytes


@dataclass(frozen=True)
class Text:
    """Morse text for the encoder."""

    payload: bytes


Command = Union[SetSpeed, Terminate, SetWeight, SetPttLeadIn, Tune, StopKeying, Text]


def parse_argument(raw: bytes) -> int:
    """Leading decimal integer of raw; 0 when there is none."""
    match = _INTEGER.match(raw)
    if match is None:
        return 0
    return int(match.group(1))


def parse_datagram(data: bytes) -> Optional[Command]:
    """Return the operation a datagram asks for, or None when it carries nothing."""
    if not data:
        return None
    if data[0] != ESCAPE:
        return Text(data)
    if len(data) < 2:
        return None
    code = data[1:2]
    argument = parse_argument(data[2:])
    if code == b"2":
        return SetSpeed(argument)
    if code == b"5":
        return Terminate()
    if code == b"7":
        return SetWeight(argument)
    if code == b"d":
        return SetPttLeadIn(argument)
    if code == b"c":
        return Tune(argument)
    return StopKeying(code)


def clamp(value: int, low: int, high: int) -> int:
    """Limit value to the closed range low..high."""
    return max(low, min(high, value))


def stop(session: Session, port) -> None:
    """Stop keying now: flush the queue and end any tune in progress."""
    state = session.state
    port.write_bytes(keyer.stop_keying())
    session.queue.clear()
    if state.tune_on:
        state.tune_on = False
        state.tune_deadline = None
        port.write_bytes(keyer.tune(False))


def apply_command(session: Session, port, command: Command, now: float) -> None:
    """Apply one parsed operation, writing control commands straight to port."""
    state = session.state
    config = session.config

    if isinstance(command, Text):
        encode_text(session, command.payload)
    elif isinstance(command, SetSpeed):
        state.speed = command.speed
        if state.speed and not config.min_speed <= state.speed <= config.max_speed:
            logger.warning(
                "Speed %d WPM is outside the pot range %d-%d",
                state.speed,
                config.min_speed,
                config.max_speed,
            )
        port.write_bytes(keyer.set_speed(state.speed))
    elif isinstance(command, Terminate):
        logger.info("Terminate requested by client")
        session.running = False
    elif isinstance(command, SetWeight):
        state.weight = clamp(50 + command.argument, MIN_WEIGHT, MAX_WEIGHT)
        port.write_bytes(keyer.set_weight(state.weight))
    elif isinstance(command, SetPttLeadIn):
        state.ptt_lead_in = clamp(command.argument, 0, MAX_PTT_LEAD_IN)
        port.write_bytes(keyer.set_ptt_timing(state.ptt_lead_in, 0))
    elif isinstance(command, Tune):
        if command.seconds > 0:
            seconds = min(command.seconds, MAX_TUNE_SECONDS)
            state.tune_on = True
            state.tune_deadline = now + seconds
            logger.info("Tune on for %d s", seconds)
            port.write_bytes(keyer.tune(True))
    elif isinstance(command, StopKeying):
        stop(session, port)
    else:
        raise TypeError(f"Unknown command {command!r}")
