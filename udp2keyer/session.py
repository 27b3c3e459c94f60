"""State owned by the event loop: configuration, keyer state, queue and peers."""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Optional

# One keyer-bound transmission: a character or an inline command.
OutgoingUnit = bytes

DEFAULT_SPEED = 24
DEFAULT_MIN_SPEED = 10
DEFAULT_MAX_SPEED = 50


@dataclass(frozen=True)
class KeyerConfig:
    """Start-up settings; read once, never changed while running."""

    speed: int = DEFAULT_SPEED
    min_speed: int = DEFAULT_MIN_SPEED
    max_speed: int = DEFAULT_MAX_SPEED
    mute: bool = False
    echo: bool = False
    weight: int = 50
    ptt_lead_in: int = 0


@dataclass
class KeyerState:
    """Runtime keyer state; busy, xoff and tune_on are independent flags."""

    speed: int
    weight: int = 50
    ptt_lead_in: int = 0
    xoff: bool = False
    busy: bool = False
    busy_since: Optional[float] = None
    tune_on: bool = False
    tune_deadline: Optional[float] = None


@dataclass
class Session:
    """Everything the bridge mutates, passed explicitly to each component."""

    config: KeyerConfig
    state: KeyerState
    queue: Deque[OutgoingUnit] = field(default_factory=deque)
    peers: Dict[Any, None] = field(default_factory=dict)
    running: bool = True

    @classmethod
    def from_config(cls, config: KeyerConfig) -> "Session":
        state = KeyerState(
            speed=config.speed,
            weight=config.weight,
            ptt_lead_in=config.ptt_lead_in,
        )
        return cls(config=config, state=state)

    def add_peer(self, addr) -> bool:
        """Remember a client address; return True the first time it is seen.

        Peers are never forgotten; the table grows with every distinct client.
        """
        if addr in self.peers:
            return False
        self.peers[addr] = None
        return True
