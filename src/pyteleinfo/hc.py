"""Extract an HcInfo snapshot from a frame of a meter on the Heures Creuses option."""

import logging
from datetime import datetime
from typing import TypeVar

from .errors import MissingFieldError, UnsupportedPeriodError
from .frame import scan_next_frame
from .source import ByteSource
from .types import Frame, HcInfo, TagKind, TariffPeriod

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PERIOD_LABELS: dict[TariffPeriod, str] = {
    TariffPeriod.HEURES_CREUSES: "HC",
    TariffPeriod.HEURES_PLEINES: "HP",
}


def _require(value: T | None, field: str) -> T:
    if value is None:
        raise MissingFieldError(field)
    return value


class HcInfoBuilder:
    """Accumulates the HcInfo fields found in a frame; build() checks they are all there."""

    def __init__(self) -> None:
        self.date: datetime | None = None
        self.period: str | None = None
        self.hc: int | None = None
        self.hp: int | None = None
        self.iinst: int | None = None
        self.papp: int | None = None
        self.alert = False

    def build(self) -> HcInfo:
        return HcInfo(
            date=_require(self.date, "date"),
            period=_require(self.period, "period"),
            hc=_require(self.hc, "hc"),
            hp=_require(self.hp, "hp"),
            iinst=_require(self.iinst, "iinst"),
            papp=_require(self.papp, "papp"),
            alert=self.alert,
        )


def extract(frame: Frame, date: datetime | None = None) -> HcInfo:
    """
    Fold one frame into an HcInfo.

    PTEC must be HC.. or HP.., otherwise UnsupportedPeriodError is raised. A tag seen
    twice keeps its last value; ADPS sets alert whatever its value. Raises
    MissingFieldError for the first of period, hc, hp, iinst, papp absent from the frame.
    date defaults to the current local time.
    """
    builder = HcInfoBuilder()
    builder.date = date if date is not None else datetime.now().astimezone()

    for tag in frame:
        if tag.kind == TagKind.PTEC:
            label = _PERIOD_LABELS.get(tag.value) if isinstance(tag.value, TariffPeriod) else None
            if label is None:
                raise UnsupportedPeriodError(tag.value)
            builder.period = label
        elif tag.kind == TagKind.HCHC:
            builder.hc = tag.value
        elif tag.kind == TagKind.HCHP:
            builder.hp = tag.value
        elif tag.kind == TagKind.IINST:
            builder.iinst = tag.value
        elif tag.kind == TagKind.PAPP:
            builder.papp = tag.value
        elif tag.kind == TagKind.ADPS:
            builder.alert = True

    info = builder.build()
    if info.alert:
        logger.info("Subscribed intensity exceeded (ADPS) at %s", info.date.isoformat())
    return info


def read_hc_info(source: ByteSource, date: datetime | None = None) -> HcInfo:
    """Read the next frame from source and extract it. Scanner errors are raised as is."""
    return extract(scan_next_frame(source), date)
