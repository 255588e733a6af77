"""Shared fixtures: a frame as sent by a meter on the Heures Creuses option."""

import pytest

HC_PAIRS = [
    ("ADCO", "030122369245"),
    ("OPTARIF", "HC.."),
    ("ISOUSC", "45"),
    ("HCHC", "101235969"),
    ("HCHP", "135646371"),
    ("PTEC", "HP.."),
    ("IINST", "002"),
    ("IMAX", "048"),
    ("PAPP", "00470"),
    ("HHPHC", "E"),
    ("MOTDETAT", "000000"),
]


@pytest.fixture
def hc_pairs() -> list[tuple[str, str]]:
    return list(HC_PAIRS)
