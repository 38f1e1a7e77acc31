"""Pure transformations over point-record collections.

Nothing here performs I/O or mutates its input; every call builds new
lists/dicts so snapshots held by the live state stay untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_hhmm
from ..core.constants import AI_CONTEXT_LIMIT, DEFAULT_SCHEDULE
from ..core.enums import PunchType
from .model import PointRecord

DAY_LABEL_FORMAT = "%d/%m/%Y"

# Slots are filled by ordinal position, not by the record's type field.
TIMELINE_SLOTS = (
    ("entrada", "Entrada"),
    ("intervalo", "Intervalo"),
    ("retorno", "Retorno"),
    ("saida", "Saída"),
)

PUNCH_SEQUENCE = (
    PunchType.ENTRADA,
    PunchType.INICIO_INTERVALO,
    PunchType.FIM_INTERVALO,
    PunchType.SAIDA,
)


@dataclass(frozen=True)
class TimelineSlot:
    key: str
    label: str
    time: str
    done: bool
    record_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"key": self.key, "label": self.label, "time": self.time, "done": self.done, "recordId": self.record_id}


def filter_for_user(records: Iterable[PointRecord], matricula: Optional[str]) -> list[PointRecord]:
    if not matricula:
        return []
    return [r for r in records if r.matricula == matricula]


def sort_by_timestamp_desc(records: Iterable[PointRecord]) -> list[PointRecord]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def sort_by_timestamp_asc(records: Iterable[PointRecord]) -> list[PointRecord]:
    return sorted(records, key=lambda r: r.timestamp)


def day_label(ts: datetime | date) -> str:
    return ts.strftime(DAY_LABEL_FORMAT)


def parse_day_label(label: str) -> date:
    return datetime.strptime(label, DAY_LABEL_FORMAT).date()


def group_by_day(records: Iterable[PointRecord]) -> dict[str, list[PointRecord]]:
    """Group by calendar day label; each group keeps the input order."""

    groups: dict[str, list[PointRecord]] = {}
    for r in records:
        groups.setdefault(day_label(r.timestamp), []).append(r)
    return groups


def ordered_day_labels(groups: dict[str, list[PointRecord]], *, newest_first: bool = True) -> list[str]:
    return sorted(groups, key=parse_day_label, reverse=newest_first)


def records_for_day(records: Iterable[PointRecord], day: date) -> list[PointRecord]:
    return sort_by_timestamp_asc(r for r in records if r.timestamp.date() == day)


def build_daily_timeline(
    records: Iterable[PointRecord],
    today: date,
    *,
    schedule: Sequence[str] = DEFAULT_SCHEDULE,
) -> list[TimelineSlot]:
    """Map today's punches onto the four fixed slots by arrival order.

    The Nth punch of the day fills the Nth slot whatever its type; slots
    without a punch show the scheduled time and are not done.
    """

    todays = records_for_day(records, today)
    slots: list[TimelineSlot] = []
    for idx, (key, label) in enumerate(TIMELINE_SLOTS):
        if idx < len(todays):
            rec = todays[idx]
            slots.append(TimelineSlot(key=key, label=label, time=format_hhmm(rec.timestamp), done=True, record_id=rec.id))
        else:
            slots.append(TimelineSlot(key=key, label=label, time=schedule[idx], done=False))
    return slots


def next_punch_type(records: Iterable[PointRecord], today: date) -> PunchType:
    count = len(records_for_day(records, today))
    return PUNCH_SEQUENCE[count % len(PUNCH_SEQUENCE)]


def latest(records: Iterable[PointRecord]) -> Optional[PointRecord]:
    return max(records, key=lambda r: r.timestamp, default=None)


def summarize_for_assistant(records: Iterable[PointRecord], *, limit: int = AI_CONTEXT_LIMIT) -> list[str]:
    recent = sort_by_timestamp_desc(records)[:limit]
    return [
        f"{r.timestamp.strftime('%d/%m/%Y %H:%M')} - {r.user_name} ({r.matricula or '-'}) - {r.type.value} - {r.address}"
        for r in recent
    ]
