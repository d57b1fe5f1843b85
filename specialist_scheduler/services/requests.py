import logging
from typing import Dict, Iterable, List, Optional

from specialist_scheduler.models.assignment_request import AssignmentRequest
from specialist_scheduler.models.school_shape import SchoolShape
from specialist_scheduler.models.subject_demand import SubjectDemand
from specialist_scheduler.models.teacher import Teacher

logger = logging.getLogger(__name__)

# Hours assumed when a teacher's subject has no configured count for a grade
FALLBACK_HOURS = 1


def build_assignment_requests(specialists: Iterable[Teacher],
                              subjects: Iterable[SubjectDemand],
                              school_shape: Optional[SchoolShape] = None) -> List[AssignmentRequest]:
    """
    Derives the lessons every specialist has to teach from the roster and
    the subject hours table.

    For every (teacher, grade, subject) combination the weekly hours are read
    from the subject table. A subject missing from the table, or without an
    entry for the grade, counts as 1 hour. An explicit 0 produces no request.

    Args:
        specialists: Specialist teachers
        subjects: Subject hours table
        school_shape: Class counts per grade (not used to build requests)

    Returns:
        List of AssignmentRequest in roster order
    """
    subjects_by_name: Dict[str, SubjectDemand] = {}
    for subject in subjects:
        subjects_by_name.setdefault(subject.name, subject)

    requests = []
    for teacher in specialists:
        for grade in teacher.assigned_grades:
            for subject_name in teacher.subjects or []:
                subject = subjects_by_name.get(subject_name)

                hours_needed = FALLBACK_HOURS
                if subject is not None and subject.hours_by_grade.get(grade) is not None:
                    hours_needed = subject.hours_by_grade[grade]

                if hours_needed > 0:
                    requests.append(AssignmentRequest(
                        teacher_id=teacher.id,
                        teacher_name=teacher.name,
                        subject=subject_name,
                        grade=grade,
                        hours_needed=hours_needed,
                        default_room=subject.default_room if subject else None,
                    ))

    logger.debug(f"Built {len(requests)} assignment requests")
    return requests
