"""pyteleinfo: decode the historic Teleinfo stream of French electricity meters."""

__version__ = "0.1.0"

from .decode import decode_tag, parse_i32
from .errors import (
    ChecksumMismatchError,
    EndOfInputError,
    FrameSyntaxError,
    MissingFieldError,
    TeleinfoError,
    TeleinfoIOError,
    TransmissionAbortedError,
    UnsupportedPeriodError,
)
from .frame import checksum, encode_frame, encode_group, iter_frames, read_byte, scan_next_frame
from .hc import HcInfoBuilder, extract, read_hc_info
from .source import ByteSource, SerialSettings, open_capture, open_serial
from .types import Frame, HcInfo, Tag, TagKind, TariffOption, TariffPeriod, UnknownLiteral

__all__ = [
    "__version__",
    "decode_tag",
    "parse_i32",
    "ChecksumMismatchError",
    "EndOfInputError",
    "FrameSyntaxError",
    "MissingFieldError",
    "TeleinfoError",
    "TeleinfoIOError",
    "TransmissionAbortedError",
    "UnsupportedPeriodError",
    "checksum",
    "encode_frame",
    "encode_group",
    "iter_frames",
    "read_byte",
    "scan_next_frame",
    "HcInfoBuilder",
    "extract",
    "read_hc_info",
    "ByteSource",
    "SerialSettings",
    "open_capture",
    "open_serial",
    "Frame",
    "HcInfo",
    "Tag",
    "TagKind",
    "TariffOption",
    "TariffPeriod",
    "UnknownLiteral",
]
