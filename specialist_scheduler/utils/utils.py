from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from specialist_scheduler.models.schedule_constraints import DEFAULT_PERIODS_PER_DAY
from specialist_scheduler.models.timetable_slot import DAY_LABELS, DAYS, TimetableSlot


@dataclass()
class ClassTimetable:
    grade: int
    class_number: int
    slots: List[TimetableSlot] = field(default_factory=list)


@dataclass()
class TeacherTimetable:
    teacher_id: str
    teacher_name: str
    slots: List[TimetableSlot] = field(default_factory=list)


def filter_slots(slots: Iterable[TimetableSlot], teacher_id: Optional[str] = None,
                 grade: Optional[int] = None, class_number: Optional[int] = None,
                 day: Optional[str] = None, subject: Optional[str] = None) -> List[TimetableSlot]:
    """
    Returns the slots matching every given filter.

    Filters left empty (None, 0 or "") are not applied.
    """
    result = []
    for slot in slots:
        if teacher_id and slot.teacher_id != teacher_id:
            continue
        if grade and slot.grade != grade:
            continue
        if class_number and slot.class_number != class_number:
            continue
        if day and slot.day != day:
            continue
        if subject and slot.subject != subject:
            continue
        result.append(slot)
    return result


def class_timetable(slots: Iterable[TimetableSlot], grade: int, class_number: int) -> ClassTimetable:
    return ClassTimetable(
        grade=grade,
        class_number=class_number,
        slots=[s for s in slots if s.grade == grade and s.class_number == class_number],
    )


def teacher_timetable(slots: Iterable[TimetableSlot], teacher_id: str) -> Optional[TeacherTimetable]:
    """Returns the teacher's lessons, or None when the teacher has none"""
    teacher_slots = [s for s in slots if s.teacher_id == teacher_id]
    if not teacher_slots:
        return None
    return TeacherTimetable(
        teacher_id=teacher_id,
        teacher_name=teacher_slots[0].teacher_name or "",
        slots=teacher_slots,
    )


def slot_at(slots: Iterable[TimetableSlot], day: str, period: int,
            grade: int, class_number: int) -> Optional[TimetableSlot]:
    for slot in slots:
        if (slot.day == day and slot.period == period
                and slot.grade == grade and slot.class_number == class_number):
            return slot
    return None


def teacher_slot_at(slots: Iterable[TimetableSlot], teacher_id: str,
                    day: str, period: int) -> Optional[TimetableSlot]:
    for slot in slots:
        if slot.teacher_id == teacher_id and slot.day == day and slot.period == period:
            return slot
    return None


def set_up(slots: Iterable[TimetableSlot],
           periods_per_day: int = DEFAULT_PERIODS_PER_DAY) -> Dict[Tuple[int, str], List[TimetableSlot]]:
    """
    Sets up the timetable grid.

    Returns:
        grid: {(period, day): [slots]} with an empty list for every cell
    """
    grid = {(period, day): [] for period in range(1, periods_per_day + 1) for day in DAYS}
    for slot in slots:
        grid.setdefault((slot.period, slot.day), []).append(slot)
    return grid


def format_timetable(slots: Iterable[TimetableSlot],
                     periods_per_day: int = DEFAULT_PERIODS_PER_DAY) -> str:
    """
    Renders slots as a text grid, one row per period and one column per day.

    Cells holding more than one lesson are joined with "/" so double bookings
    stay visible.
    """
    grid = set_up(slots, periods_per_day)
    width = 12

    lines = ["{:6s}".format("") + "".join("{:{w}s}".format(DAY_LABELS[d], w=width) for d in DAYS)]
    for period in range(1, periods_per_day + 1):
        row = "{:>4d}교시".format(period)
        for day in DAYS:
            cell = "/".join(
                f"{s.subject}({s.grade}-{s.class_number})" for s in grid[(period, day)]
            ) or "-"
            row += "{:{w}s}".format(cell, w=width)
        lines.append(row)
    return "\n".join(lines)
