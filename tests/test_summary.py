from specialist_scheduler.utils.summary import get_teacher_hours_summary, get_timetable_stats


def test_hours_summary_per_specialist(kim, park, homeroom_lee, slot):
    slots = [
        slot("mon", 1, 3, 1, "kim"),
        slot("mon", 2, 4, 1, "kim"),
        slot("wed", 1, 3, 2, "kim"),
        slot("tue", 5, 3, 1, "park"),
        slot("thu", 1, 3, 1, "lee"),
    ]

    summaries = get_teacher_hours_summary(slots, [kim, homeroom_lee, park])

    assert [s.teacher_id for s in summaries] == ["kim", "park"]

    kim_summary = summaries[0]
    assert kim_summary.teacher_name == "Kim"
    assert kim_summary.total_hours == 3
    assert kim_summary.by_day == {"mon": 2, "tue": 0, "wed": 1, "thu": 0, "fri": 0}
    assert kim_summary.by_grade == {3: 2, 4: 1}

    assert summaries[1].total_hours == 1
    assert summaries[1].by_grade == {3: 1}


def test_specialist_without_lessons_has_zero_totals(kim):
    summaries = get_teacher_hours_summary([], [kim])

    assert summaries[0].total_hours == 0
    assert summaries[0].by_day == {"mon": 0, "tue": 0, "wed": 0, "thu": 0, "fri": 0}
    assert summaries[0].by_grade == {}


def test_summary_uses_roster_name_not_slot_name(kim, slot):
    slots = [slot("mon", 1, 3, 1, "kim", teacher_name="Old Name")]

    summaries = get_teacher_hours_summary(slots, [kim])

    assert summaries[0].teacher_name == "Kim"


def test_timetable_stats(slot):
    slots = [
        slot("mon", 1, 3, 1, "kim"),
        slot("mon", 1, 3, 2, "park"),
        slot("fri", 6, 5, 1, "kim"),
    ]

    stats = get_timetable_stats(slots)

    assert stats.total_slots == 3
    assert stats.by_day == {"mon": 2, "tue": 0, "wed": 0, "thu": 0, "fri": 1}
    assert stats.by_period == {1: 2, 6: 1}
    assert stats.by_grade == {3: 2, 5: 1}
