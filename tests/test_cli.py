"""Tests for CLI module - formatting helpers and commands against capture files."""

import io
import json
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from pyteleinfo import HcInfo, Tag, TagKind, TariffOption, TeleinfoIOError, UnknownLiteral, encode_frame
from pyteleinfo.cli import app, format_hc_csv, format_hc_text, format_tag_value, tag_to_dict

runner = CliRunner()

BAD_FRAME = b"\x02\nPAPP 00380 -\r\x03"


@pytest.fixture
def capture(tmp_path: Path, hc_pairs: list[tuple[str, str]]) -> Path:
    """Capture file holding two good frames around a corrupted one."""
    second = [(lbl, "00900" if lbl == "PAPP" else v) for lbl, v in hc_pairs]
    path = tmp_path / "teleinfo.bin"
    path.write_bytes(encode_frame(hc_pairs) + BAD_FRAME + encode_frame(second))
    return path


# ============================================================================
# Formatting Tests
# ============================================================================


class TestFormatting:
    """Test display helpers."""

    def test_format_tag_value(self) -> None:
        """Enums and unknown literals show the wire text."""
        assert format_tag_value(TariffOption.HEURES_CREUSES) == "HC.."
        assert format_tag_value(UnknownLiteral("BBR(")) == "BBR("
        assert format_tag_value(42) == "42"
        assert format_tag_value("E") == "E"

    def test_tag_to_dict(self) -> None:
        """Integers stay integers in JSON output."""
        assert tag_to_dict(Tag(TagKind.PAPP, "PAPP", 470)) == {"label": "PAPP", "kind": "PAPP", "value": 470}
        assert tag_to_dict(Tag.unknown("XYZ", "1")) == {"label": "XYZ", "kind": "UNKNOWN", "value": "1"}

    def test_format_hc(self) -> None:
        """Text and CSV renderings of a snapshot."""
        info = HcInfo(
            date=datetime(2024, 1, 15, 22, 30, tzinfo=timezone.utc),
            period="HC",
            hc=10,
            hp=20,
            iinst=3,
            papp=690,
            alert=True,
        )
        assert format_hc_text(info) == "2024-01-15T22:30:00+00:00 HC hc=10 hp=20 iinst=3 papp=690 ALERT"
        assert format_hc_csv(info) == "2024-01-15T22:30:00+00:00,HC,10,20,3,690,true"


# ============================================================================
# Command Tests
# ============================================================================


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "pyteleinfo" in result.stdout


def test_info_command() -> None:
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "version:" in result.stdout.lower()
    assert "1200 bps 7E1" in result.stdout


def test_info_command_json() -> None:
    result = runner.invoke(app, ["info", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["baudrate"] == 1200
    assert "PAPP" in data["labels"]


def test_checksum_command() -> None:
    result = runner.invoke(app, ["checksum", "PAPP", "00380"])
    assert result.exit_code == 0
    assert result.stdout.strip() == ", (0x2C)"


def test_checksum_command_json() -> None:
    result = runner.invoke(app, ["checksum", "PAPP", "00380", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["checksum"] == ","


def test_frame_command(capture: Path) -> None:
    result = runner.invoke(app, ["frame", "--file", str(capture)])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "ADCO 030122369245"
    assert "PTEC HP.." in lines
    assert "PAPP 470" in lines


def test_frame_command_json(capture: Path) -> None:
    result = runner.invoke(app, ["frame", "--file", str(capture), "--json"])
    assert result.exit_code == 0
    tags = json.loads(result.stdout)
    assert len(tags) == 11
    assert tags[1] == {"label": "OPTARIF", "kind": "OPTARIF", "value": "HC.."}


def test_frame_command_checksum_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.bin"
    path.write_bytes(BAD_FRAME)
    result = runner.invoke(app, ["frame", "--file", str(path)])
    assert result.exit_code == 1
    assert "Checksum mismatch" in result.output


def test_frame_command_empty_capture(tmp_path: Path) -> None:
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    result = runner.invoke(app, ["frame", "--file", str(path)])
    assert result.exit_code == 1
    assert "End of input" in result.output


def test_frame_command_requires_source() -> None:
    result = runner.invoke(app, ["frame"], env={"TELEINFO_PORT": ""})
    assert result.exit_code == 2


def test_frame_command_port_and_file_conflict(capture: Path) -> None:
    result = runner.invoke(app, ["frame", "--port", "/dev/ttyUSB0", "--file", str(capture)])
    assert result.exit_code == 2
    assert "mutually exclusive" in result.output


def test_frame_command_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["frame", "--file", str(tmp_path / "missing.bin")])
    assert result.exit_code == 3


def test_hc_command_text(capture: Path) -> None:
    result = runner.invoke(app, ["hc", "--file", str(capture)])
    assert result.exit_code == 0
    assert result.stdout.count("papp=") == 2
    assert "HP hc=101235969 hp=135646371 iinst=2 papp=470" in result.stdout
    assert "papp=900" in result.stdout


def test_hc_command_json(capture: Path) -> None:
    result = runner.invoke(app, ["hc", "--file", str(capture), "--format", "json"])
    assert result.exit_code == 0
    rows = [json.loads(line) for line in result.stdout.splitlines() if line.startswith("{")]
    assert [r["papp"] for r in rows] == [470, 900]
    assert rows[0]["alert"] is False


def test_hc_command_csv(capture: Path) -> None:
    result = runner.invoke(app, ["hc", "--file", str(capture), "--format", "csv"])
    assert result.exit_code == 0
    lines = [line for line in result.stdout.splitlines() if "," in line and not line.startswith("WARNING")]
    assert lines[0] == "date,period,hc,hp,iinst,papp,alert"
    assert lines[1].endswith(",HP,101235969,135646371,2,470,false")


def test_hc_command_once(capture: Path) -> None:
    result = runner.invoke(app, ["hc", "--file", str(capture), "--once"])
    assert result.exit_code == 0
    assert result.stdout.count("papp=") == 1


def test_hc_command_invalid_format(capture: Path) -> None:
    result = runner.invoke(app, ["hc", "--file", str(capture), "--format", "xml"])
    assert result.exit_code == 2


def test_hc_command_no_valid_frame(tmp_path: Path) -> None:
    path = tmp_path / "bad.bin"
    path.write_bytes(BAD_FRAME + encode_frame([("PTEC", "TH.."), ("PAPP", "00100")]))
    result = runner.invoke(app, ["hc", "--file", str(path)])
    assert result.exit_code == 1
    assert "No valid Heures Creuses frame" in result.output


@patch("pyteleinfo.cli.open_serial")
def test_hc_command_serial(mock_open_serial: MagicMock, hc_pairs: list[tuple[str, str]]) -> None:
    mock_open_serial.return_value = io.BytesIO(encode_frame(hc_pairs))

    result = runner.invoke(app, ["hc", "--port", "/dev/ttyUSB0", "--baudrate", "9600", "--once"])

    assert result.exit_code == 0
    assert "papp=470" in result.stdout
    settings = mock_open_serial.call_args[0][0]
    assert settings.port == "/dev/ttyUSB0"
    assert settings.baudrate == 9600


@patch("pyteleinfo.cli.open_serial")
def test_hc_command_serial_from_env(mock_open_serial: MagicMock, hc_pairs: list[tuple[str, str]]) -> None:
    mock_open_serial.return_value = io.BytesIO(encode_frame(hc_pairs))

    result = runner.invoke(app, ["hc", "--once"], env={"TELEINFO_PORT": "/dev/ttyAMA0"})

    assert result.exit_code == 0
    assert mock_open_serial.call_args[0][0].port == "/dev/ttyAMA0"


@patch("pyteleinfo.cli.open_serial")
def test_hc_command_serial_open_failure(mock_open_serial: MagicMock) -> None:
    mock_open_serial.side_effect = TeleinfoIOError("Failed to open serial port /dev/ttyUSB9")

    result = runner.invoke(app, ["hc", "--port", "/dev/ttyUSB9"])

    assert result.exit_code == 3
    assert "I/O error" in result.output
