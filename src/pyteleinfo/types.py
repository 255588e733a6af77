"""Core data model: tag kinds, tariff enums, Tag, Frame and the HcInfo snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator


class TagKind(str, Enum):
    """Labels of the historic Teleinfo groups understood by the decoder."""

    ADCO = "ADCO"
    OPTARIF = "OPTARIF"
    ISOUSC = "ISOUSC"
    BASE = "BASE"
    HCHC = "HCHC"
    HCHP = "HCHP"
    PTEC = "PTEC"
    IINST = "IINST"
    ADPS = "ADPS"
    IMAX = "IMAX"
    PAPP = "PAPP"
    HHPHC = "HHPHC"
    MOTDETAT = "MOTDETAT"
    UNKNOWN = "UNKNOWN"


class TariffOption(str, Enum):
    """Subscribed tariff option (OPTARIF); values are the wire literals."""

    BASE = "Base"
    HEURES_CREUSES = "HC.."
    EJP = "EJP."


class TariffPeriod(str, Enum):
    """Current tariff period (PTEC); values are the wire literals."""

    TOUTES_HEURES = "TH.."
    HEURES_CREUSES = "HC.."
    HEURES_PLEINES = "HP.."


@dataclass(frozen=True)
class UnknownLiteral:
    """OPTARIF/PTEC literal not known to the decoder; keeps the raw text."""

    raw: str

    def __str__(self) -> str:
        return self.raw


TagValue = str | int | TariffOption | TariffPeriod | UnknownLiteral


@dataclass(frozen=True)
class Tag:
    """
    One decoded group. kind selects the payload type (see decode.py); label is the
    raw label as received, which is the only way to tell UNKNOWN tags apart.
    """

    kind: TagKind
    label: str
    value: TagValue

    @classmethod
    def unknown(cls, label: str, value: str) -> "Tag":
        return cls(TagKind.UNKNOWN, label, value)


@dataclass
class Frame:
    """Tags of one STX..ETX transmission, in reception order. Duplicates are kept."""

    tags: list[Tag] = field(default_factory=list)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)

    def find(self, kind: TagKind) -> Tag | None:
        """Return the last tag of the given kind, or None."""
        for tag in reversed(self.tags):
            if tag.kind == kind:
                return tag
        return None


@dataclass(frozen=True)
class HcInfo:
    """Snapshot of a meter on the Heures Creuses option, built from one frame."""

    date: datetime
    period: str
    hc: int
    hp: int
    iinst: int
    papp: int
    alert: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "period": self.period,
            "hc": self.hc,
            "hp": self.hp,
            "iinst": self.iinst,
            "papp": self.papp,
            "alert": self.alert,
        }
