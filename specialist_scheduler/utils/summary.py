from typing import Iterable, List

from specialist_scheduler.models.hours_summary import TeacherHoursSummary, TimetableStats
from specialist_scheduler.models.teacher import Teacher
from specialist_scheduler.models.timetable_slot import DAYS, TimetableSlot


def get_teacher_hours_summary(slots: Iterable[TimetableSlot],
                              teachers: Iterable[Teacher]) -> List[TeacherHoursSummary]:
    """
    Aggregates lessons per specialist teacher.

    :param slots: any slot set (stored, newly placed or both)
    :param teachers: roster; homeroom teachers are skipped
    :return: one summary per specialist, in roster order
    """
    slots = list(slots)
    summaries = []

    for teacher in teachers:
        if not teacher.is_specialist:
            continue

        by_day = {day: 0 for day in DAYS}
        by_grade = {}
        total = 0
        for slot in slots:
            if slot.teacher_id != teacher.id:
                continue
            total += 1
            by_day[slot.day] = by_day.get(slot.day, 0) + 1
            by_grade[slot.grade] = by_grade.get(slot.grade, 0) + 1

        summaries.append(TeacherHoursSummary(
            teacher_id=teacher.id,
            teacher_name=teacher.name,
            total_hours=total,
            by_day=by_day,
            by_grade=by_grade,
        ))

    return summaries


def get_timetable_stats(slots: Iterable[TimetableSlot]) -> TimetableStats:
    stats = TimetableStats(by_day={day: 0 for day in DAYS})
    for slot in slots:
        stats.total_slots += 1
        stats.by_day[slot.day] = stats.by_day.get(slot.day, 0) + 1
        stats.by_period[slot.period] = stats.by_period.get(slot.period, 0) + 1
        stats.by_grade[slot.grade] = stats.by_grade.get(slot.grade, 0) + 1
    return stats
