"""Serial side of the bridge: keyer command bytes and the port they travel over."""

import logging
from typing import Optional

import serial

logger = logging.getLogger("udp2keyer.keyer")

DEFAULT_BAUD = 1200
HANDSHAKE_TIMEOUT = 1.0

ESC = 0x1B

# Mode register: bit7 paddle watchdog off, bit6 paddle echo, bits5-4 00 = iambic B,
# bit2 serial echo.
MODE_PLAIN = 0x80
MODE_ECHO = 0xC4

# Pin configuration: bit3 key out 1, bit1 sidetone, bit0 PTT.
PINCFG_SIDETONE = 0x0B
PINCFG_MUTED = 0x09


class KeyerError(Exception):
    """The keyer did not respond the way the host protocol requires."""


def _byte(value: int) -> int:
    """Truncate value to the single byte the keyer receives."""
    return value & 0xFF


def host_open() -> bytes:
    """Put the keyer into host mode; it answers with its firmware version."""
    return bytes([0x00, 0x02])


def host_close() -> bytes:
    """Leave host mode."""
    return bytes([0x00, 0x03])


def set_mode(echo: bool) -> bytes:
    """Iambic B with the paddle watchdog off; echo turns on paddle and serial echo."""
    return bytes([0x0E, MODE_ECHO if echo else MODE_PLAIN])


def set_weight(weight: int) -> bytes:
    """Weighting in percent, 50 being neutral."""
    return bytes([0x03, _byte(weight)])


def set_pin_config(mute: bool) -> bytes:
    """Key output 1 and PTT, with the sidetone unless muted."""
    return bytes([0x09, PINCFG_MUTED if mute else PINCFG_SIDETONE])


def set_ptt_timing(lead: int, tail: int = 0) -> bytes:
    """Lead and tail are sent in 10 ms steps."""
    return bytes([0x04, _byte(lead // 10), _byte(tail // 10)])


def set_pot_range(min_speed: int, max_speed: int) -> bytes:
    """Map the speed pot onto min_speed..max_speed WPM."""
    return bytes([0x05, _byte(min_speed), _byte(max_speed - min_speed), 0x00])


def set_speed(speed: int) -> bytes:
    """Set the speed in WPM immediately, overriding the pot."""
    return bytes([0x02, _byte(speed)])


def buffered_speed(speed: int) -> bytes:
    """Speed change that takes effect in-line with buffered text."""
    return bytes([0x1C, _byte(speed)])


def stop_keying() -> bytes:
    """Clear the keyer buffer and stop sending."""
    return bytes([0x0A])


def tune(on: bool) -> bytes:
    """Key down continuously, or release."""
    return bytes([0x0B, 1 if on else 0])


class KeyerPort:
    """Byte-level access to a serial-attached keyer."""

    def __init__(self, ser: serial.Serial):
        self._serial = ser
        self._closed = False

    @property
    def name(self) -> str:
        """Device name, for log messages."""
        return self._serial.port or "?"

    def write_bytes(self, data: bytes) -> int:
        logger.debug("-> %s", data.hex(" "))
        return self._serial.write(data)

    def read_byte(self, timeout: float) -> Optional[int]:
        """Return one status byte, or None if nothing arrived within timeout."""
        if self._serial.timeout != timeout:
            self._serial.timeout = timeout
        data = self._serial.read(1)
        if not data:
            return None
        return data[0]

    def open_host(self) -> int:
        """Enter host mode and return the firmware version the keyer reports."""
        self._serial.reset_input_buffer()
        self.write_bytes(host_open())
        version = self.read_byte(HANDSHAKE_TIMEOUT)
        if version is None:
            raise KeyerError(f"No answer to host open from keyer on {self.name}")
        return version

    def initialize(self, config) -> None:
        """Open the host interface and load the start-up configuration."""
        version = self.open_host()
        logger.info("Keyer on %s answered host open, version %d", self.name, version)
        for command in (
            set_mode(config.echo),
            set_pin_config(config.mute),
            set_weight(config.weight),
            set_ptt_timing(config.ptt_lead_in),
            set_pot_range(config.min_speed, config.max_speed),
            set_speed(config.speed),
        ):
            self.write_bytes(command)

    def close(self) -> None:
        """Leave host mode and release the port; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            self.write_bytes(host_close())
        finally:
            self._serial.close()
            logger.info("Serial closed")


def open_keyer(port: str, baud: int = DEFAULT_BAUD) -> KeyerPort:
    """Open the serial port with the keyer's line settings (8N2)."""
    ser = serial.Serial(
        port=port,
        baudrate=baud,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_TWO,
        timeout=0,
    )
    return KeyerPort(ser)
