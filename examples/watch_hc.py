#!/usr/bin/env python3
"""Example: print Heures Creuses snapshots as frames arrive; graceful shutdown on Ctrl+C."""

import sys

from pyteleinfo import SerialSettings, extract, iter_frames, open_serial
from pyteleinfo.errors import MissingFieldError, TeleinfoIOError, UnsupportedPeriodError


def main() -> None:
    port = "/dev/ttyUSB0"  # change to your Teleinfo adapter

    try:
        with open_serial(SerialSettings(port=port, timeout=None)) as source:
            print(f"Reading {port} (Ctrl+C to stop)...")
            for frame in iter_frames(source):
                try:
                    info = extract(frame)
                except (MissingFieldError, UnsupportedPeriodError) as e:
                    print(f"Skipped: {e}", file=sys.stderr)
                    continue
                print(info.as_dict())
    except KeyboardInterrupt:
        print("\nStopped.")
    except TeleinfoIOError as e:
        print(f"Serial error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
