"""Byte sources: the ByteSource protocol, serial port settings and opening helpers."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

import serial

from .errors import TeleinfoIOError

logger = logging.getLogger(__name__)

# Historic Teleinfo line: 1200 bauds, 7 data bits, even parity, 1 stop bit
DEFAULT_BAUDRATE = 1200
DEFAULT_TIMEOUT = 5.0


class ByteSource(Protocol):
    """
    Anything the scanner can pull bytes from. serial.Serial, io.BytesIO and files
    opened in binary mode all qualify. An empty result means no byte is available.
    """

    def read(self, size: int = 1) -> bytes: ...


@dataclass(frozen=True)
class SerialSettings:
    """Serial line configuration. port may be a device path or a pyserial URL (socket://, rfc2217://)."""

    port: str
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = serial.SEVENBITS
    parity: str = serial.PARITY_EVEN
    stopbits: float = serial.STOPBITS_ONE
    timeout: float | None = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.port:
            raise ValueError("port cannot be empty")
        if self.baudrate <= 0:
            raise ValueError(f"baudrate must be > 0, got {self.baudrate}")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")


def open_serial(settings: SerialSettings) -> serial.SerialBase:
    """Open the serial port described by settings; raise TeleinfoIOError on failure."""
    logger.info("Opening serial port %s @ %d bps", settings.port, settings.baudrate)
    try:
        return serial.serial_for_url(
            settings.port,
            baudrate=settings.baudrate,
            bytesize=settings.bytesize,
            parity=settings.parity,
            stopbits=settings.stopbits,
            timeout=settings.timeout,
        )
    except (serial.SerialException, ValueError) as e:
        raise TeleinfoIOError(f"Failed to open serial port {settings.port}: {e}", cause=e) from e


def open_capture(path: str | Path) -> BinaryIO:
    """Open a raw capture of a Teleinfo stream for reading."""
    try:
        return open(path, "rb")
    except OSError as e:
        raise TeleinfoIOError(f"Failed to open capture {path}: {e}", cause=e) from e
