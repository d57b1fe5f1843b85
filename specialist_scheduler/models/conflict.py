from dataclasses import dataclass, field
from typing import List

from specialist_scheduler.models.timetable_slot import TimetableSlot

CLASS_CONFLICT = "class"
TEACHER_CONFLICT = "teacher"
ROOM_CONFLICT = "room"


@dataclass()
class Conflict:
    """
    One collision between a candidate lesson and stored slots.

    Attributes:
        type: "class", "teacher" or "room"
        message: Human readable description
        slots: The stored slots the candidate collides with
    """
    type: str
    message: str
    slots: List[TimetableSlot] = field(default_factory=list)


@dataclass()
class ConflictCheckResult:
    has_conflict: bool
    conflicts: List[Conflict] = field(default_factory=list)

    def types(self) -> List[str]:
        return [c.type for c in self.conflicts]
