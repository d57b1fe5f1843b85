from dataclasses import dataclass, field
from typing import Dict


@dataclass()
class TeacherHoursSummary:
    """
    Weekly lesson totals for one specialist teacher.

    Attributes:
        teacher_id: Teacher id
        teacher_name: Teacher name from the roster
        total_hours: Number of slots the teacher holds
        by_day: Lessons per weekday, all five days present
        by_grade: Lessons per grade, only grades the teacher teaches
    """
    teacher_id: str
    teacher_name: str
    total_hours: int = 0
    by_day: Dict[str, int] = field(default_factory=dict)
    by_grade: Dict[int, int] = field(default_factory=dict)


@dataclass()
class TimetableStats:
    """Lesson counts of a slot set by day, period and grade"""
    total_slots: int = 0
    by_day: Dict[str, int] = field(default_factory=dict)
    by_period: Dict[int, int] = field(default_factory=dict)
    by_grade: Dict[int, int] = field(default_factory=dict)
