import re
from dataclasses import dataclass, field
from typing import List

from specialist_scheduler.models.timetable_slot import TimetableSlot

SHORTFALL_REASON = "{count}시수 미배정 (충돌 또는 빈 슬롯 부족)"
_SHORTFALL_PATTERN = re.compile(r"(\d+)시수")


@dataclass()
class UnassignedLesson:
    """
    Lessons of one request that could not be placed for one class.

    The reason text starts with the number of missing lessons so callers can
    read the shortfall back out of it.
    """
    teacher_id: str
    subject: str
    grade: int
    class_number: int
    reason: str

    @property
    def shortfall(self) -> int:
        match = _SHORTFALL_PATTERN.search(self.reason)
        return int(match.group(1)) if match else 0


@dataclass()
class AutoScheduleResult:
    """
    Outcome of an auto-scheduling run.

    Attributes:
        success: True when every requested lesson was placed
        slots: Newly placed slots only; existing slots are not repeated
        unassigned: One entry per (request, class) with a shortfall
        message: Human readable summary
    """
    success: bool
    slots: List[TimetableSlot] = field(default_factory=list)
    unassigned: List[UnassignedLesson] = field(default_factory=list)
    message: str = ""

    @property
    def unassigned_hours(self) -> int:
        return sum(u.shortfall for u in self.unassigned)
