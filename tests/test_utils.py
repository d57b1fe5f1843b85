from specialist_scheduler.utils.utils import (
    class_timetable,
    filter_slots,
    format_timetable,
    set_up,
    slot_at,
    teacher_slot_at,
    teacher_timetable,
)


def sample_slots(slot):
    return [
        slot("mon", 1, 3, 1, "kim", subject="음악", teacher_name="김민수"),
        slot("mon", 2, 3, 2, "kim", subject="음악", teacher_name="김민수"),
        slot("tue", 1, 3, 1, "park", subject="체육"),
        slot("wed", 3, 4, 1, "park", subject="체육"),
    ]


def test_filter_slots(slot):
    slots = sample_slots(slot)

    assert len(filter_slots(slots)) == 4
    assert [s.subject for s in filter_slots(slots, teacher_id="park")] == ["체육", "체육"]
    assert len(filter_slots(slots, grade=3, class_number=1)) == 2
    assert len(filter_slots(slots, day="mon", subject="음악")) == 2
    assert filter_slots(slots, grade=3, day="wed") == []


def test_empty_filters_are_ignored(slot):
    slots = sample_slots(slot)

    assert filter_slots(slots, teacher_id="", grade=0, day=None) == slots


def test_class_timetable(slot):
    slots = sample_slots(slot)

    timetable = class_timetable(slots, 3, 1)

    assert (timetable.grade, timetable.class_number) == (3, 1)
    assert [(s.day, s.period) for s in timetable.slots] == [("mon", 1), ("tue", 1)]


def test_teacher_timetable(slot):
    slots = sample_slots(slot)

    timetable = teacher_timetable(slots, "kim")

    assert timetable.teacher_name == "김민수"
    assert len(timetable.slots) == 2
    assert teacher_timetable(slots, "nobody") is None


def test_slot_lookups(slot):
    slots = sample_slots(slot)

    assert slot_at(slots, "tue", 1, 3, 1).teacher_id == "park"
    assert slot_at(slots, "tue", 2, 3, 1) is None
    assert teacher_slot_at(slots, "park", "wed", 3).grade == 4
    assert teacher_slot_at(slots, "kim", "wed", 3) is None


def test_set_up_has_cell_for_every_period_and_day(slot):
    grid = set_up(sample_slots(slot))

    assert len(grid) == 30
    assert len(grid[(1, "mon")]) == 1
    assert grid[(6, "fri")] == []


def test_format_timetable(slot):
    text = format_timetable(sample_slots(slot))
    lines = text.splitlines()

    assert len(lines) == 7
    assert "월" in lines[0] and "금" in lines[0]
    assert "음악(3-1)" in lines[1]
    assert "체육(4-1)" in lines[3]


def test_format_timetable_shows_double_bookings(slot):
    slots = [slot("mon", 1, 3, 1, "kim", subject="A"), slot("mon", 1, 3, 2, "park", subject="B")]

    assert "A(3-1)/B(3-2)" in format_timetable(slots)
