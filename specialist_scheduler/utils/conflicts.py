from typing import Iterable, List, Optional

from specialist_scheduler.models.conflict import (
    CLASS_CONFLICT,
    ROOM_CONFLICT,
    TEACHER_CONFLICT,
    Conflict,
    ConflictCheckResult,
)
from specialist_scheduler.models.timetable_slot import SlotDraft, TimetableSlot


def _find(slots: List[TimetableSlot], exclude_id: Optional[str], predicate) -> Optional[TimetableSlot]:
    for slot in slots:
        if slot.id != exclude_id and predicate(slot):
            return slot
    return None


def check_conflicts(slots: Iterable[TimetableSlot], candidate: SlotDraft,
                    exclude_id: Optional[str] = None) -> ConflictCheckResult:
    """
    Checks a candidate lesson against the stored slots.

    Three independent checks are made, so one candidate can report several
    conflicts:
    - class: the class already has a lesson at that day/period
    - teacher: the teacher already teaches at that day/period
    - room: the room is already used at that day/period (only when the
      candidate has a room)

    Args:
        slots: Stored slots
        candidate: Lesson about to be saved
        exclude_id: Id of the slot being edited, ignored during the checks

    Returns:
        ConflictCheckResult listing every conflict found
    """
    slots = list(slots)
    conflicts = []

    class_conflict = _find(slots, exclude_id, lambda s: (
        s.day == candidate.day
        and s.period == candidate.period
        and s.grade == candidate.grade
        and s.class_number == candidate.class_number
    ))
    if class_conflict:
        conflicts.append(Conflict(
            type=CLASS_CONFLICT,
            message=(f"{candidate.grade}학년 {candidate.class_number}반은 이미 "
                     f"{class_conflict.subject} 수업이 배정되어 있습니다."),
            slots=[class_conflict],
        ))

    teacher_conflict = _find(slots, exclude_id, lambda s: (
        s.teacher_id == candidate.teacher_id
        and s.day == candidate.day
        and s.period == candidate.period
    ))
    if teacher_conflict:
        conflicts.append(Conflict(
            type=TEACHER_CONFLICT,
            message=(f"{candidate.teacher_name} 선생님은 이미 {teacher_conflict.grade}학년 "
                     f"{teacher_conflict.class_number}반 수업이 있습니다."),
            slots=[teacher_conflict],
        ))

    if candidate.room:
        room_conflict = _find(slots, exclude_id, lambda s: (
            s.room == candidate.room
            and s.day == candidate.day
            and s.period == candidate.period
        ))
        if room_conflict:
            conflicts.append(Conflict(
                type=ROOM_CONFLICT,
                message=(f"{candidate.room}은 이미 {room_conflict.grade}학년 "
                         f"{room_conflict.class_number}반이 사용 중입니다."),
                slots=[room_conflict],
            ))

    return ConflictCheckResult(has_conflict=len(conflicts) > 0, conflicts=conflicts)
