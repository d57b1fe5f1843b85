import itertools

import pytest

from specialist_scheduler.models.school_shape import SchoolShape
from specialist_scheduler.models.subject_demand import SubjectDemand
from specialist_scheduler.models.teacher import HOMEROOM, Teacher
from specialist_scheduler.models.timetable_slot import TimetableSlot


def make_slot(day, period, grade, class_number, teacher_id, subject="음악",
              teacher_name=None, room=None, slot_id=None):
    return TimetableSlot(
        id=slot_id or f"s-{day}-{period}-{grade}-{class_number}-{teacher_id}",
        day=day,
        period=period,
        grade=grade,
        class_number=class_number,
        teacher_id=teacher_id,
        teacher_name=teacher_name or teacher_id,
        subject=subject,
        room=room,
    )


@pytest.fixture
def counter_ids():
    counter = itertools.count(1)
    return lambda: f"slot-{next(counter)}"


@pytest.fixture
def kim():
    return Teacher(id="kim", name="Kim", grades=[3, 4], subjects=["Music"])


@pytest.fixture
def park():
    return Teacher(id="park", name="Park", grades=[3], subjects=["PE"])


@pytest.fixture
def homeroom_lee():
    return Teacher(id="lee", name="Lee", role=HOMEROOM, grade=3, class_number=1)


@pytest.fixture
def music_demand():
    return [SubjectDemand(name="Music", hours_by_grade={3: 2, 4: 2}, default_room="Music Room")]


@pytest.fixture
def school_shape():
    return SchoolShape(school_name="Test Elementary", year=2025, classes_by_grade={3: 2, 4: 1})


@pytest.fixture
def slot():
    return make_slot
