import re

from specialist_scheduler.models.schedule_constraints import ScheduleConstraints, Unavailability
from specialist_scheduler.models.schedule_result import AutoScheduleResult, UnassignedLesson
from specialist_scheduler.models.school_shape import SchoolShape
from specialist_scheduler.models.teacher import HOMEROOM, Teacher
from specialist_scheduler.models.timetable_slot import TimetableSlot, generate_slot_id


def test_role_labels():
    homeroom = Teacher(id="1", name="이영희", role=HOMEROOM, grade=1, class_number=2)
    bare_homeroom = Teacher(id="2", name="박지성", role=HOMEROOM)
    specialist = Teacher(id="3", name="김민수", subjects=["음악", "체육"])
    bare_specialist = Teacher(id="4", name="최유리")

    assert homeroom.role_label == "담임 1-2"
    assert bare_homeroom.role_label == "담임"
    assert specialist.role_label == "전담 음악, 체육"
    assert bare_specialist.role_label == "전담"
    assert specialist.full_label == "김민수 - 전담 음악, 체육"


def test_assigned_grades_fallback():
    assert Teacher(id="1", name="Kim", grades=[2, 5], grade=1).assigned_grades == [2, 5]
    assert Teacher(id="1", name="Kim", grade=4).assigned_grades == [4]
    assert Teacher(id="1", name="Kim").assigned_grades == []


def test_constraint_defaults_and_merge():
    defaults = ScheduleConstraints()
    assert (defaults.max_consecutive, defaults.max_per_day, defaults.periods_per_day) == (4, 6, 6)
    assert defaults.teacher_unavailable == []
    assert defaults.subject_room_requirements == []

    merged = defaults.merged({"max_per_day": 3, "max_consecutive": None, "unknown": 1})
    assert merged.max_per_day == 3
    assert merged.max_consecutive == 4
    assert defaults.max_per_day == 6


def test_unavailability_matches_teacher_and_day():
    constraints = ScheduleConstraints(teacher_unavailable=[Unavailability("kim", "tue", period=2)])

    assert constraints.is_unavailable("kim", "tue")
    assert not constraints.is_unavailable("kim", "wed")
    assert not constraints.is_unavailable("park", "tue")


def test_class_count_for_missing_grade():
    shape = SchoolShape(classes_by_grade={1: 3})

    assert shape.class_count(1) == 3
    assert shape.class_count(2) == 0


def test_slot_equality_ignores_id():
    a = TimetableSlot(id="a", day="mon", period=1, grade=3, class_number=1,
                      teacher_id="kim", teacher_name="Kim", subject="Music")
    b = TimetableSlot(id="b", day="mon", period=1, grade=3, class_number=1,
                      teacher_id="kim", teacher_name="Kim", subject="Music")

    assert a == b
    assert a.class_key == "mon-1-3-1"
    assert a.time_key == "mon-1"


def test_generated_slot_ids():
    ids = {generate_slot_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(re.fullmatch(r"slot-\d+-[a-z0-9]{9}", i) for i in ids)


def test_shortfall_is_read_from_reason():
    lessons = [
        UnassignedLesson("kim", "Music", 3, 1, "2시수 미배정 (충돌 또는 빈 슬롯 부족)"),
        UnassignedLesson("kim", "Music", 3, 2, "1시수 미배정 (충돌 또는 빈 슬롯 부족)"),
        UnassignedLesson("kim", "Music", 3, 3, "unknown"),
    ]
    result = AutoScheduleResult(success=False, unassigned=lessons)

    assert [u.shortfall for u in lessons] == [2, 1, 0]
    assert result.unassigned_hours == 3
