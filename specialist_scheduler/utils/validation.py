import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from specialist_scheduler.models.schedule_constraints import DEFAULT_PERIODS_PER_DAY
from specialist_scheduler.models.timetable_slot import DAYS, TimetableSlot

MAX_HOURS_VALUE = 40
MAX_CLASS_NUMBER = 20
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 20


@dataclass()
class TimetableValidation:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass()
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


def validate_timetable(slots: Iterable[TimetableSlot]) -> TimetableValidation:
    """
    Checks a slot set for double bookings.

    Two independent scans are made, one per class and one per teacher. The
    first slot seen for a key is kept and every later slot on the same key
    produces one error naming both lessons. The input is not modified.

    Args:
        slots: Slots to check (e.g. existing slots plus newly placed ones)

    Returns:
        TimetableValidation with valid=False when any error was found
    """
    slots = list(slots)
    errors = []

    # Same class, same time
    class_slot_map: Dict[str, TimetableSlot] = {}
    for slot in slots:
        key = f"{slot.day}-{slot.period}-{slot.grade}-{slot.class_number}"
        if key in class_slot_map:
            existing = class_slot_map[key]
            errors.append(
                f"{slot.grade}학년 {slot.class_number}반 {slot.day} {slot.period}교시: "
                f"{existing.subject}와 {slot.subject} 중복"
            )
        else:
            class_slot_map[key] = slot

    # Same teacher, same time
    teacher_slot_map: Dict[str, TimetableSlot] = {}
    for slot in slots:
        key = f"{slot.teacher_id}-{slot.day}-{slot.period}"
        if key in teacher_slot_map:
            existing = teacher_slot_map[key]
            errors.append(
                f"{slot.teacher_name} 선생님 {slot.day} {slot.period}교시: "
                f"{existing.grade}-{existing.class_number}과 {slot.grade}-{slot.class_number} 중복"
            )
        else:
            teacher_slot_map[key] = slot

    return TimetableValidation(valid=len(errors) == 0, errors=errors)


def _is_integer(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_teacher_name(name: str) -> ValidationResult:
    if not isinstance(name, str):
        return ValidationResult(False, "이름을 입력해주세요")
    trimmed = name.strip()

    if not trimmed:
        return ValidationResult(False, "이름을 입력해주세요")
    if len(trimmed) < MIN_NAME_LENGTH:
        return ValidationResult(False, f"이름은 {MIN_NAME_LENGTH}자 이상이어야 합니다")
    if len(trimmed) > MAX_NAME_LENGTH:
        return ValidationResult(False, f"이름은 {MAX_NAME_LENGTH}자 이내여야 합니다")
    return ValidationResult(True)


def validate_hours_value(value) -> ValidationResult:
    """Weekly hours must be an integer between 0 and 40"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return ValidationResult(False, "유효한 숫자를 입력해주세요")
    if not _is_integer(value):
        return ValidationResult(False, "정수만 입력 가능합니다")
    if value < 0:
        return ValidationResult(False, "0 이상의 값을 입력해주세요")
    if value > MAX_HOURS_VALUE:
        return ValidationResult(False, f"{MAX_HOURS_VALUE} 이하의 값을 입력해주세요")
    return ValidationResult(True)


def validate_grade(grade) -> ValidationResult:
    if grade is None:
        return ValidationResult(True)
    if not _is_integer(grade) or grade < 1 or grade > 6:
        return ValidationResult(False, "학년은 1~6 사이여야 합니다")
    return ValidationResult(True)


def validate_class_number(class_number,
                          max_class_number: Optional[int] = MAX_CLASS_NUMBER) -> ValidationResult:
    """Pass max_class_number=None to only require a positive integer"""
    if class_number is None:
        return ValidationResult(True)
    if not _is_integer(class_number) or class_number < 1:
        if max_class_number is None:
            return ValidationResult(False, "반 번호는 1 이상이어야 합니다")
        return ValidationResult(False, f"반 번호는 1~{max_class_number} 사이여야 합니다")
    if max_class_number is not None and class_number > max_class_number:
        return ValidationResult(False, f"반 번호는 1~{max_class_number} 사이여야 합니다")
    return ValidationResult(True)


def validate_day(day) -> ValidationResult:
    if day not in DAYS:
        return ValidationResult(False, f"요일은 {', '.join(DAYS)} 중 하나여야 합니다")
    return ValidationResult(True)


def validate_period(period, periods_per_day: int = DEFAULT_PERIODS_PER_DAY) -> ValidationResult:
    if not _is_integer(period) or period < 1 or period > periods_per_day:
        return ValidationResult(False, f"교시는 1~{periods_per_day} 사이여야 합니다")
    return ValidationResult(True)
