from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass()
class SubjectDemand:
    """
    Represents a subject and the weekly lesson count each grade needs.

    Attributes:
        name: Subject name (e.g., "음악", "영어")
        hours_by_grade: Map of grade (1-6) to required weekly hours
        default_room: Room lessons of this subject default to (e.g., "음악실")
        id: Identifier from the subject table (e.g., "SUB001")
        note: Free-text remark
    """
    name: str
    hours_by_grade: Dict[int, int] = field(default_factory=dict)
    default_room: Optional[str] = None
    id: Optional[str] = None
    note: Optional[str] = None
