from dataclasses import dataclass, field
from typing import List, Optional

HOMEROOM = "homeroom"
SPECIALIST = "specialist"


@dataclass()
class Teacher:
    """
    Represents a teacher on the school roster.

    Homeroom teachers own a single class (grade + class number). Specialist
    teachers teach one or more subjects across one or more grades and are the
    only teachers the auto-scheduler places.

    Attributes:
        id: Opaque unique identifier
        name: Display name (e.g., "김민수")
        role: "homeroom" or "specialist"
        grades: Grades (1-6) a specialist is assigned to
        subjects: Subject names a specialist teaches (e.g., ["음악", "체육"])
        other_subject: Free-text subject not present in the subject table
        grade: Homeroom grade, or the single grade of a legacy specialist record
        class_number: Homeroom class number
    """
    id: str
    name: str
    role: str = SPECIALIST
    grades: List[int] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    other_subject: Optional[str] = None
    grade: Optional[int] = None
    class_number: Optional[int] = None

    @property
    def is_specialist(self) -> bool:
        return self.role == SPECIALIST

    @property
    def assigned_grades(self) -> List[int]:
        """Grades used for scheduling; falls back to the single grade field"""
        if self.grades:
            return list(self.grades)
        if self.grade:
            return [self.grade]
        return []

    @property
    def role_label(self) -> str:
        if self.role == HOMEROOM:
            if self.grade and self.class_number:
                return f"담임 {self.grade}-{self.class_number}"
            return "담임"
        if self.subjects:
            return f"전담 {', '.join(self.subjects)}"
        return "전담"

    @property
    def full_label(self) -> str:
        return f"{self.name} - {self.role_label}"
