#!/usr/bin/env python3
"""Example: open the Teleinfo serial port and print the groups of one frame."""

import sys

from pyteleinfo import SerialSettings, TagKind, open_serial, scan_next_frame
from pyteleinfo.errors import ChecksumMismatchError, FrameSyntaxError, TeleinfoError, TeleinfoIOError


def main() -> None:
    port = "/dev/ttyUSB0"  # change to your Teleinfo adapter

    try:
        with open_serial(SerialSettings(port=port)) as source:
            frame = scan_next_frame(source)
            for tag in frame:
                print(f"{tag.label:<10} {tag.kind.value:<10} {tag.value!r}")

            # Last PAPP of the frame, if any
            papp = frame.find(TagKind.PAPP)
            if papp is not None:
                print(f"Apparent power: {papp.value} VA")
    except (ChecksumMismatchError, FrameSyntaxError) as e:
        print(f"Corrupted frame: {e}", file=sys.stderr)
        sys.exit(1)
    except TeleinfoIOError as e:
        print(f"Serial error: {e}", file=sys.stderr)
        sys.exit(1)
    except TeleinfoError as e:
        print(f"No frame: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
