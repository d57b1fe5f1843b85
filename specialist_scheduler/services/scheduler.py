import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from specialist_scheduler.models.assignment_request import AssignmentRequest
from specialist_scheduler.models.schedule_constraints import ScheduleConstraints
from specialist_scheduler.models.schedule_result import (
    SHORTFALL_REASON,
    AutoScheduleResult,
    UnassignedLesson,
)
from specialist_scheduler.models.school_shape import SchoolShape
from specialist_scheduler.models.subject_demand import SubjectDemand
from specialist_scheduler.models.teacher import Teacher
from specialist_scheduler.models.timetable_slot import DAYS, TimetableSlot, generate_slot_id
from specialist_scheduler.services.requests import build_assignment_requests

logger = logging.getLogger(__name__)

NO_SPECIALISTS_MESSAGE = "등록된 전담교사가 없습니다."
NO_REQUESTS_MESSAGE = "배정할 수업이 없습니다."


def longest_consecutive_run(periods: Iterable[int]) -> int:
    """
    Returns the length of the longest run of consecutive periods.

    >>> longest_consecutive_run([1, 2, 4, 5, 6])
    3
    """
    ordered = sorted(periods)
    if not ordered:
        return 0

    longest = 1
    current = 1
    for i in range(1, len(ordered)):
        if ordered[i] == ordered[i - 1] + 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


class SchedulingSession:
    """
    Occupancy state for one auto-scheduling run.

    Holds the two occupancy indexes (class slots taken, teacher time slots
    taken) and every teacher's periods per day. Seeded from the existing slots
    and updated on each placement, so later searches see earlier placements.
    A session lives for exactly one call to run_auto_schedule.
    """

    def __init__(self, existing_slots: Iterable[TimetableSlot], constraints: ScheduleConstraints,
                 id_factory: Callable[[], str] = generate_slot_id):
        self.constraints = constraints
        self.id_factory = id_factory
        self.occupied_slots: Set[str] = set()  # "day-period-grade-class"
        self.teacher_schedule: Dict[str, Set[str]] = {}  # teacher_id -> {"day-period"}
        self.teacher_periods: Dict[str, Dict[str, List[int]]] = {}  # teacher_id -> day -> [periods]
        self.placed: List[TimetableSlot] = []

        for slot in existing_slots:
            self._register(slot)

    def _register(self, slot: TimetableSlot):
        self.occupied_slots.add(slot.class_key)
        self.teacher_schedule.setdefault(slot.teacher_id, set()).add(slot.time_key)
        self.teacher_periods.setdefault(slot.teacher_id, {}).setdefault(slot.day, []).append(slot.period)

    def place(self, slot: TimetableSlot):
        """Records a new slot in both indexes"""
        self._register(slot)
        self.placed.append(slot)

    def is_class_occupied(self, day: str, period: int, grade: int, class_number: int) -> bool:
        return f"{day}-{period}-{grade}-{class_number}" in self.occupied_slots

    def is_teacher_busy(self, teacher_id: str, day: str, period: int) -> bool:
        return f"{day}-{period}" in self.teacher_schedule.get(teacher_id, ())

    def day_counts(self, teacher_id: str) -> Dict[str, int]:
        periods_by_day = self.teacher_periods.get(teacher_id, {})
        return {day: len(periods_by_day.get(day, [])) for day in DAYS}

    def consecutive_ok(self, teacher_id: str, day: str, period: int) -> bool:
        """True if teaching at period keeps the teacher within max_consecutive on that day"""
        periods = list(self.teacher_periods.get(teacher_id, {}).get(day, []))
        periods.append(period)
        return longest_consecutive_run(periods) <= self.constraints.max_consecutive

    def find_slot(self, request: AssignmentRequest, class_number: int) -> Optional[TimetableSlot]:
        """
        Finds the first free day/period for one lesson of request in one class.

        Days are tried from the teacher's least loaded to most loaded (ties in
        weekday order), periods from first to last.

        Returns:
            A new TimetableSlot (not yet placed), or None if no slot is valid
        """
        constraints = self.constraints
        day_counts = self.day_counts(request.teacher_id)
        sorted_days = sorted(DAYS, key=lambda d: day_counts[d])

        for day in sorted_days:
            if day_counts[day] >= constraints.max_per_day:
                continue
            if constraints.is_unavailable(request.teacher_id, day):
                continue

            for period in range(1, constraints.periods_per_day + 1):
                if self.is_class_occupied(day, period, request.grade, class_number):
                    continue
                if self.is_teacher_busy(request.teacher_id, day, period):
                    continue
                if not self.consecutive_ok(request.teacher_id, day, period):
                    continue

                return TimetableSlot(
                    id=self.id_factory(),
                    day=day,
                    period=period,
                    grade=request.grade,
                    class_number=class_number,
                    teacher_id=request.teacher_id,
                    teacher_name=request.teacher_name,
                    subject=request.subject,
                    room=request.default_room or "",
                )

        return None


def _resolve_constraints(constraints: Union[ScheduleConstraints, Dict[str, Any], None]) -> ScheduleConstraints:
    if isinstance(constraints, ScheduleConstraints):
        return constraints
    return ScheduleConstraints().merged(constraints)


def run_auto_schedule(teachers: Iterable[Teacher],
                      existing_slots: Iterable[TimetableSlot],
                      subjects: Iterable[SubjectDemand],
                      school_shape: SchoolShape,
                      settings: Optional[Dict[str, Any]] = None,
                      constraints: Union[ScheduleConstraints, Dict[str, Any], None] = None,
                      id_factory: Callable[[], str] = generate_slot_id) -> AutoScheduleResult:
    """
    Places the weekly lessons of every specialist teacher without collisions.

    Greedy heuristic: requests are handled largest weekly hours first (stable
    for ties), and every lesson goes to the teacher's least loaded day. Lessons
    that cannot be placed are reported in `unassigned`, never raised.

    Rooms are copied from the subject's default room. Room collisions and
    subject_room_requirements are not checked here; use check_conflicts for
    room conflicts.

    Args:
        teachers: Teacher roster; only specialists are scheduled
        existing_slots: Slots already in the timetable (not modified)
        subjects: Subject hours table
        school_shape: Class counts per grade
        settings: School settings record (currently unused)
        constraints: ScheduleConstraints or a partial mapping of its fields

    Returns:
        AutoScheduleResult with the new slots only
    """
    specialists = [t for t in teachers if t.is_specialist]
    if not specialists:
        logger.info("Auto schedule skipped: no specialist teachers")
        return AutoScheduleResult(success=False, message=NO_SPECIALISTS_MESSAGE)

    constraints = _resolve_constraints(constraints)

    requests = build_assignment_requests(specialists, subjects, school_shape)
    if not requests:
        logger.info("Auto schedule skipped: no lessons to assign")
        return AutoScheduleResult(success=True, message=NO_REQUESTS_MESSAGE)

    session = SchedulingSession(existing_slots, constraints, id_factory)
    unassigned = []

    # Largest demands first so they are not starved by small ones
    sorted_requests = sorted(requests, key=lambda r: r.hours_needed, reverse=True)

    for request in sorted_requests:
        class_count = school_shape.class_count(request.grade)
        if class_count == 0:
            continue

        for class_number in range(1, class_count + 1):
            hours_assigned = 0
            for _ in range(request.hours_needed):
                slot = session.find_slot(request, class_number)
                if slot is None:
                    break
                session.place(slot)
                hours_assigned += 1

            if hours_assigned < request.hours_needed:
                missing = request.hours_needed - hours_assigned
                logger.debug(f"{request.teacher_name} {request.subject} "
                             f"{request.grade}-{class_number}: {missing} lessons not placed")
                unassigned.append(UnassignedLesson(
                    teacher_id=request.teacher_id,
                    subject=request.subject,
                    grade=request.grade,
                    class_number=class_number,
                    reason=SHORTFALL_REASON.format(count=missing),
                ))

    result = AutoScheduleResult(
        success=len(unassigned) == 0,
        slots=session.placed,
        unassigned=unassigned,
    )

    total_assigned = len(result.slots)
    total_unassigned = result.unassigned_hours
    result.message = f"{total_assigned}시수 배정 완료"
    if total_unassigned > 0:
        result.message += f", {total_unassigned}시수 미배정"

    logger.info(f"Auto schedule finished: {len(requests)} requests, "
                f"{total_assigned} placed, {total_unassigned} unassigned")
    return result
