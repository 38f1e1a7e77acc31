from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import format_hhmm, format_minutes
from ..companies.model import CompanyConfig
from ..core.constants import WORKING_DAYS_PER_WEEK
from .derivation import group_by_day, parse_day_label, sort_by_timestamp_asc
from .model import PointRecord


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, day_records: Sequence[PointRecord]) -> int:
        raise NotImplementedError


class PairedPunchCalculator(HoursCalculator):
    """Standard rule: sum of (out - in) over consecutive pairs; an unpaired last punch counts 0."""

    def worked_minutes(self, day_records: Sequence[PointRecord]) -> int:
        ordered = sort_by_timestamp_asc(day_records)
        total = 0
        for start, end in zip(ordered[0::2], ordered[1::2]):
            total += int((end.timestamp - start.timestamp).total_seconds() // 60)
        return max(total, 0)


@dataclass(frozen=True)
class CardDay:
    label: str
    punches: list[str]
    worked_minutes: int
    balance_minutes: int

    def to_dict(self) -> dict:
        return {
            "date": self.label,
            "punches": self.punches,
            "worked": format_minutes(self.worked_minutes),
            "balance": format_minutes(self.balance_minutes),
        }


@dataclass(frozen=True)
class MonthlyCard:
    year: int
    month: int
    days: list[CardDay]
    total_worked_minutes: int
    total_balance_minutes: int
    overtime_minutes: int
    overtime_weighted_minutes: int

    def to_dict(self) -> dict:
        return {
            "reference": f"{self.month:02d}/{self.year}",
            "days": [d.to_dict() for d in self.days],
            "totalWorked": format_minutes(self.total_worked_minutes),
            "balance": format_minutes(self.total_balance_minutes),
            "overtime": format_minutes(self.overtime_minutes),
            "overtimeWeighted": format_minutes(self.overtime_weighted_minutes),
        }


def expected_daily_minutes(config: CompanyConfig, weekly_hours: Optional[int] = None) -> int:
    hours = weekly_hours if weekly_hours else config.weekly_hours
    return int(hours * 60 // WORKING_DAYS_PER_WEEK)


def daily_balance(worked: int, expected: int, tolerance: int) -> int:
    """Difference against the expected journey; within tolerance it counts as zero."""

    diff = worked - expected
    if abs(diff) <= tolerance:
        return 0
    return diff


def build_monthly_card(
    records: Iterable[PointRecord],
    year: int,
    month: int,
    config: CompanyConfig,
    *,
    weekly_hours: Optional[int] = None,
    calculator: Optional[HoursCalculator] = None,
) -> MonthlyCard:
    calculator = calculator or PairedPunchCalculator()
    expected = expected_daily_minutes(config, weekly_hours)

    in_month = [r for r in records if r.timestamp.year == year and r.timestamp.month == month]
    groups = group_by_day(in_month)

    days: list[CardDay] = []
    for label in sorted(groups, key=parse_day_label):
        day_records = sort_by_timestamp_asc(groups[label])
        worked = calculator.worked_minutes(day_records)
        days.append(
            CardDay(
                label=label,
                punches=[format_hhmm(r.timestamp) for r in day_records],
                worked_minutes=worked,
                balance_minutes=daily_balance(worked, expected, config.tolerance_minutes),
            )
        )

    overtime = sum(d.balance_minutes for d in days if d.balance_minutes > 0)
    return MonthlyCard(
        year=year,
        month=month,
        days=days,
        total_worked_minutes=sum(d.worked_minutes for d in days),
        total_balance_minutes=sum(d.balance_minutes for d in days),
        overtime_minutes=overtime,
        overtime_weighted_minutes=int(overtime * (100 + config.overtime_percentage) // 100),
    )
