from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

DEFAULT_MAX_CONSECUTIVE = 4
DEFAULT_MAX_PER_DAY = 6
DEFAULT_PERIODS_PER_DAY = 6


@dataclass()
class Unavailability:
    """
    A day on which a teacher cannot be scheduled.

    The period is kept for the record but the whole day is blocked.
    """
    teacher_id: str
    day: str
    period: Optional[int] = None


@dataclass()
class RoomRequirement:
    """Declares that a subject must use a room. Not consulted by the scheduler."""
    subject: str
    room: str


@dataclass()
class ScheduleConstraints:
    """
    Limits applied to one auto-scheduling run.

    Attributes:
        max_consecutive: Longest run of back-to-back periods for one teacher on one day
        max_per_day: Most lessons one teacher may have on one day
        teacher_unavailable: Teacher/day blackout list
        subject_room_requirements: Subject room requirements (accepted, not enforced)
        periods_per_day: Periods tried on each day, starting at 1
    """
    max_consecutive: int = DEFAULT_MAX_CONSECUTIVE
    max_per_day: int = DEFAULT_MAX_PER_DAY
    teacher_unavailable: List[Unavailability] = field(default_factory=list)
    subject_room_requirements: List[RoomRequirement] = field(default_factory=list)
    periods_per_day: int = DEFAULT_PERIODS_PER_DAY

    def merged(self, overrides: Optional[Dict[str, Any]]) -> "ScheduleConstraints":
        """Returns a copy with the non-None values of overrides applied"""
        if not overrides:
            return replace(self)
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if k in known and v is not None}
        return replace(self, **changes)

    def is_unavailable(self, teacher_id: str, day: str) -> bool:
        return any(
            u.teacher_id == teacher_id and u.day == day
            for u in self.teacher_unavailable
        )
