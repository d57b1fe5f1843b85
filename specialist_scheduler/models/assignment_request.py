from dataclasses import dataclass
from typing import Optional


@dataclass()
class AssignmentRequest:
    """
    Lessons one specialist must teach to every class of one grade each week.

    Built fresh for every scheduling run and never persisted.

    Attributes:
        teacher_id: Teacher id
        teacher_name: Teacher name, copied onto every placed slot
        subject: Subject name
        grade: Grade (1-6)
        hours_needed: Weekly lessons per class
        default_room: Room placed slots are given, if the subject has one
    """
    teacher_id: str
    teacher_name: str
    subject: str
    grade: int
    hours_needed: int
    default_room: Optional[str] = None
