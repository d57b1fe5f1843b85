import random
import string
import time
from dataclasses import dataclass, field
from typing import Optional

DAYS = ["mon", "tue", "wed", "thu", "fri"]

DAY_LABELS = {
    "mon": "월",
    "tue": "화",
    "wed": "수",
    "thu": "목",
    "fri": "금",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_slot_id() -> str:
    """Returns a new slot id such as "slot-1735000000000-k3j9x0a1b" """
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"slot-{int(time.time() * 1000)}-{suffix}"


@dataclass()
class SlotDraft:
    """
    A lesson that has not been stored yet (no id).

    Used as the candidate for conflict checks before a manual edit is committed.

    Attributes:
        day: Weekday code ("mon" .. "fri")
        period: Period number (1-6)
        grade: Grade (1-6)
        class_number: Class number within the grade
        teacher_id: Teacher id
        teacher_name: Teacher name copied for display; not updated on rename
        subject: Subject name
        room: Room name, if any
        note: Free-text memo
    """
    day: str
    period: int
    grade: int
    class_number: int
    teacher_id: str
    teacher_name: str
    subject: str
    room: Optional[str] = None
    note: Optional[str] = None

    @property
    def class_key(self) -> str:
        return f"{self.day}-{self.period}-{self.grade}-{self.class_number}"

    @property
    def time_key(self) -> str:
        return f"{self.day}-{self.period}"


@dataclass()
class TimetableSlot(SlotDraft):
    """
    One scheduled lesson in the weekly timetable.

    The id is the slot's identity and stays stable across edits. It is left
    out of equality so two slots holding the same lesson compare equal.
    """
    id: str = field(default_factory=generate_slot_id, compare=False)
