"""Exceptions for pyteleinfo: stream conditions, malformed frames and extraction failures."""


class TeleinfoError(Exception):
    """Base exception for pyteleinfo."""

    pass


class EndOfInputError(TeleinfoError):
    """Raised when the byte source has no more bytes to give."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "End of input")


class TransmissionAbortedError(TeleinfoError):
    """Raised when the meter sends EOT, e.g. while a manual reading is in progress."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Transmission aborted by meter (EOT)")


class TeleinfoIOError(TeleinfoError):
    """Raised when reading from the byte source fails (wraps OSError / pyserial errors)."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class FrameSyntaxError(TeleinfoError):
    """Raised when a frame does not follow the LF label SP value SP checksum CR layout."""

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)


class ChecksumMismatchError(TeleinfoError):
    """Raised when a group's checksum byte does not match its label and value."""

    def __init__(self, label: str, expected: int, received: int) -> None:
        self.label = label
        self.expected = expected
        self.received = received
        super().__init__(
            f"Checksum mismatch on {label!r}: expected 0x{expected:02X}, received 0x{received:02X}"
        )


class MissingFieldError(TeleinfoError):
    """Raised when a frame lacks a field required by the extracted record."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self._msg = message or f"Missing {field}"
        super().__init__(self._msg)


class UnsupportedPeriodError(TeleinfoError):
    """Raised when PTEC holds a period that does not belong to the Heures Creuses option."""

    def __init__(self, period: object) -> None:
        self.period = period
        super().__init__(f"Tariff period {period!r} does not match Heures Creuses")
