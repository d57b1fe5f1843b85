from dataclasses import dataclass, field
from typing import Dict


@dataclass()
class SchoolShape:
    """
    Represents the shape of the school for one school year.

    Attributes:
        school_name: School name
        year: School year (e.g., 2025)
        classes_by_grade: Map of grade (1-6) to number of classes
    """
    school_name: str = ""
    year: int = 0
    classes_by_grade: Dict[int, int] = field(default_factory=dict)

    def class_count(self, grade: int) -> int:
        return self.classes_by_grade.get(grade, 0) or 0
