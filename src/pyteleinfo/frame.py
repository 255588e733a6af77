"""Frame scanner: sync on STX, decode LF..CR groups with checksum, stop on ETX."""

import logging
from typing import Iterable, Iterator

from .decode import decode_tag
from .errors import (
    ChecksumMismatchError,
    EndOfInputError,
    FrameSyntaxError,
    TeleinfoIOError,
    TransmissionAbortedError,
)
from .source import ByteSource
from .types import Frame

logger = logging.getLogger(__name__)

STX = 0x02  # start of frame
ETX = 0x03  # end of frame
EOT = 0x04  # transmission interrupted by the meter
LF = 0x0A  # opens a group
CR = 0x0D  # closes a group
SP = 0x20  # field separator

SEPARATOR = SP

# Payload text is latin-1: exactly one character per wire byte
_ENCODING = "latin-1"


def _as_bytes(text: str | bytes) -> bytes:
    if isinstance(text, str):
        return text.encode(_ENCODING)
    return bytes(text)


def checksum(label: str | bytes, value: str | bytes) -> int:
    """
    Checksum byte of a group: sum of label bytes, one separator and value bytes,
    low 6 bits, plus 0x20. Only the "label SP value" mode is implemented.
    """
    total = sum(_as_bytes(label)) + SEPARATOR + sum(_as_bytes(value))
    return (total & 0x3F) + 0x20


def _describe(b: int) -> str:
    if 0x21 <= b <= 0x7E:
        return f"{chr(b)!r} (0x{b:02X})"
    return f"0x{b:02X}"


def read_byte(source: ByteSource) -> int:
    """
    Read one byte from source.

    Raises EndOfInputError when nothing is returned, TransmissionAbortedError on EOT
    and TeleinfoIOError when the source itself fails.
    """
    try:
        data = source.read(1)
    except OSError as e:  # includes serial.SerialException
        raise TeleinfoIOError(f"Read failed: {e}", cause=e) from e
    if not data:
        raise EndOfInputError()
    b = data[0]
    if b == EOT:
        raise TransmissionAbortedError()
    return b


def _skip_to(source: ByteSource, stop: int) -> None:
    while read_byte(source) != stop:
        pass


def _read_to_sep(source: ByteSource) -> bytes:
    buf = bytearray()
    while True:
        b = read_byte(source)
        if b == SEPARATOR:
            return bytes(buf)
        buf.append(b)


def _expect(source: ByteSource, expected: int) -> None:
    b = read_byte(source)
    if b != expected:
        raise FrameSyntaxError(f"Expected {_describe(expected)} but found {_describe(b)}")


def _read_frame(source: ByteSource) -> Frame:
    frame = Frame()
    while True:
        b = read_byte(source)
        if b == ETX:
            return frame
        if b != LF:
            raise FrameSyntaxError(f"Expected LF but found {_describe(b)}")

        label = _read_to_sep(source)
        value = _read_to_sep(source)
        received = read_byte(source)

        expected = checksum(label, value)
        if expected != received:
            raise ChecksumMismatchError(label.decode(_ENCODING), expected, received)

        frame.tags.append(decode_tag(label.decode(_ENCODING), value.decode(_ENCODING)))
        _expect(source, CR)


def scan_next_frame(source: ByteSource) -> Frame:
    """
    Skip to the next STX and decode the frame that follows, up to and including ETX.

    Every error leaves the partial frame behind; calling again resynchronizes on the
    next STX. Bytes after ETX are left in the source.
    """
    _skip_to(source, STX)
    frame = _read_frame(source)
    logger.debug("Frame decoded: %d tags", len(frame))
    return frame


def iter_frames(source: ByteSource, *, skip_errors: bool = True) -> Iterator[Frame]:
    """
    Yield frames until the source is exhausted.

    With skip_errors, corrupted or aborted frames are logged and scanning resumes on the
    next STX; otherwise the first error is raised. I/O errors always propagate.
    """
    while True:
        try:
            yield scan_next_frame(source)
        except EndOfInputError:
            return
        except (ChecksumMismatchError, FrameSyntaxError, TransmissionAbortedError) as e:
            if not skip_errors:
                raise
            logger.warning("Frame discarded: %s", e)


def encode_group(label: str | bytes, value: str | bytes) -> bytes:
    """Encode one group as LF label SP value SP checksum CR."""
    lbl = _as_bytes(label)
    val = _as_bytes(value)
    return (
        bytes([LF])
        + lbl
        + bytes([SEPARATOR])
        + val
        + bytes([SEPARATOR, checksum(lbl, val), CR])
    )


def encode_frame(pairs: Iterable[tuple[str | bytes, str | bytes]]) -> bytes:
    """Encode (label, value) pairs as one STX..ETX frame."""
    body = b"".join(encode_group(label, value) for label, value in pairs)
    return bytes([STX]) + body + bytes([ETX])
