#!/usr/bin/env python3
"""Command-line tool for pyteleinfo using Typer."""

import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .decode import KNOWN_LABELS
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
from .frame import checksum, scan_next_frame
from .hc import read_hc_info
from .source import DEFAULT_BAUDRATE, DEFAULT_TIMEOUT, SerialSettings, open_capture, open_serial
from .types import HcInfo, Tag, TariffOption, TariffPeriod, UnknownLiteral

app = typer.Typer(
    name="teleinfo",
    help="Read Teleinfo frames and Heures Creuses snapshots from a meter or a capture file.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# Frame-level errors: the current frame is lost, the next one may be fine
_FRAME_ERRORS = (
    ChecksumMismatchError,
    FrameSyntaxError,
    TransmissionAbortedError,
    MissingFieldError,
    UnsupportedPeriodError,
)

HC_FIELDS = ("date", "period", "hc", "hp", "iinst", "papp", "alert")

# ============================================================================
# Shared options and helpers
# ============================================================================

PortOption = Annotated[
    Optional[str],
    typer.Option("--port", "-p", help="Serial device or pyserial URL", envvar="TELEINFO_PORT"),
]
FileOption = Annotated[
    Optional[Path],
    typer.Option("--file", help="Raw capture file to decode instead of a serial port"),
]
BaudrateOption = Annotated[
    int,
    typer.Option("--baudrate", "-b", help="Serial baud rate", envvar="TELEINFO_BAUDRATE"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Serial read timeout in seconds", envvar="TELEINFO_TIMEOUT"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def open_source(port: Optional[str], file: Optional[Path], baudrate: int, timeout: float) -> BinaryIO:
    """Open the serial port or the capture file; exactly one must be given."""
    if port and file:
        typer.echo("Error: --port and --file are mutually exclusive", err=True)
        raise typer.Exit(2)
    if file is not None:
        return open_capture(file)
    if not port:
        typer.echo("Error: --port or --file is required for this command", err=True)
        raise typer.Exit(2)
    try:
        settings = SerialSettings(port=port, baudrate=baudrate, timeout=timeout)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    return open_serial(settings)


def format_tag_value(value: Any) -> str:
    """Format a tag payload for display; enums show their wire literal."""
    if isinstance(value, (TariffOption, TariffPeriod)):
        return value.value
    if isinstance(value, UnknownLiteral):
        return value.raw
    return str(value)


def tag_to_dict(tag: Tag) -> dict[str, Any]:
    value = tag.value if isinstance(tag.value, int) else format_tag_value(tag.value)
    return {"label": tag.label, "kind": tag.kind.value, "value": value}


def format_hc_text(info: HcInfo) -> str:
    alert = " ALERT" if info.alert else ""
    return (
        f"{info.date.isoformat()} {info.period} hc={info.hc} hp={info.hp} "
        f"iinst={info.iinst} papp={info.papp}{alert}"
    )


def format_hc_csv(info: HcInfo) -> str:
    row = info.as_dict()
    return ",".join(str(row[name]).lower() if name == "alert" else str(row[name]) for name in HC_FIELDS)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def info(json_output: JsonOption = False) -> None:
    """
    Show package version, default line settings and known labels.

    Does not open any port.
    """
    info_data = {
        "version": __version__,
        "baudrate": DEFAULT_BAUDRATE,
        "framing": "7E1",
        "timeout": DEFAULT_TIMEOUT,
        "labels": sorted(KNOWN_LABELS),
    }
    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"pyteleinfo version: {info_data['version']}")
        typer.echo(f"Line settings: {info_data['baudrate']} bps {info_data['framing']}")
        typer.echo(f"Labels: {' '.join(info_data['labels'])}")


@app.command(name="checksum")
def checksum_command(
    label: Annotated[str, typer.Argument(help="Group label (e.g. PAPP)")],
    value: Annotated[str, typer.Argument(help="Group value (e.g. 00380)")],
    json_output: JsonOption = False,
) -> None:
    """Compute the checksum character of a group. Useful to build or check captures by hand."""
    try:
        cs = checksum(label, value)
    except UnicodeEncodeError as e:
        typer.echo(f"Error: Invalid characters: {e}", err=True)
        raise typer.Exit(2)
    if json_output:
        typer.echo(json.dumps({"label": label, "value": value, "checksum": chr(cs), "hex": f"0x{cs:02X}"}))
    else:
        typer.echo(f"{chr(cs)} (0x{cs:02X})")


@app.command()
def frame(
    port: PortOption = None,
    file: FileOption = None,
    baudrate: BaudrateOption = DEFAULT_BAUDRATE,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Decode the next frame and print its groups.

    One line per group as LABEL VALUE, or a JSON list with --json.
    """
    setup_logging(verbose)

    try:
        with open_source(port, file, baudrate, timeout) as source:
            decoded = scan_next_frame(source)

        if json_output:
            typer.echo(json.dumps([tag_to_dict(t) for t in decoded], indent=2))
        else:
            for tag in decoded:
                typer.echo(f"{tag.label} {format_tag_value(tag.value)}")
    except EndOfInputError:
        typer.echo("Error: End of input before a complete frame", err=True)
        raise typer.Exit(1)
    except (ChecksumMismatchError, FrameSyntaxError, TransmissionAbortedError) as e:
        typer.echo(f"Error: Frame discarded: {e}", err=True)
        raise typer.Exit(1)
    except TeleinfoIOError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(3)
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def hc(
    port: PortOption = None,
    file: FileOption = None,
    baudrate: BaudrateOption = DEFAULT_BAUDRATE,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    verbose: VerboseOption = False,
    once: Annotated[bool, typer.Option("--once", help="Print one snapshot and exit")] = False,
    format: Annotated[str, typer.Option("--format", help="Output format: text, json, csv")] = "text",
) -> None:
    """
    Print Heures Creuses snapshots as frames arrive.

    Outputs format:
    - text: timestamp, period and counters (default)
    - json: NDJSON, one object per frame
    - csv: header line, then one row per frame

    Corrupted frames are logged and skipped. Reading a capture file stops at its end;
    on a serial port, read timeouts are ignored. Press Ctrl+C to stop.
    """
    setup_logging(verbose)

    if format not in ("text", "json", "csv"):
        typer.echo(f"Error: Invalid format '{format}'. Must be text, json, or csv.", err=True)
        raise typer.Exit(2)

    count = 0
    try:
        with open_source(port, file, baudrate, timeout) as source:
            if format == "csv":
                typer.echo(",".join(HC_FIELDS))

            while True:
                try:
                    snapshot = read_hc_info(source)
                except EndOfInputError:
                    if file is not None:
                        break
                    logger.debug("Read timed out, waiting for next frame")
                    continue
                except _FRAME_ERRORS as e:
                    logger.warning("Frame skipped: %s", e)
                    continue

                count += 1
                if format == "text":
                    typer.echo(format_hc_text(snapshot))
                elif format == "json":
                    typer.echo(json.dumps(snapshot.as_dict()))
                elif format == "csv":
                    typer.echo(format_hc_csv(snapshot))

                if once:
                    break

        if count == 0:
            typer.echo("Error: No valid Heures Creuses frame found", err=True)
            raise typer.Exit(1)
    except TeleinfoIOError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(3)
    except KeyboardInterrupt:
        typer.echo("\nStopped by user", err=True)
        raise typer.Exit(0)
    except typer.Exit:
        raise
    except TeleinfoError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pyteleinfo {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """teleinfo - decode the Teleinfo output of French electricity meters."""
    pass


if __name__ == "__main__":
    app()
