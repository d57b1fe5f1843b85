import json
import logging
import pika
import time
from dataclasses import asdict
from typing import Dict, Any, List, Optional

from config.settings import get_rabbitmq_config, get_scheduler_config
from specialist_scheduler.errors import ErrorKind, PayloadValidationError, SchedulerError
from specialist_scheduler.models.conflict import ConflictCheckResult
from specialist_scheduler.models.hours_summary import TeacherHoursSummary, TimetableStats
from specialist_scheduler.models.schedule_constraints import (
    RoomRequirement,
    ScheduleConstraints,
    Unavailability,
)
from specialist_scheduler.models.schedule_result import AutoScheduleResult
from specialist_scheduler.models.school_shape import SchoolShape
from specialist_scheduler.models.subject_demand import SubjectDemand
from specialist_scheduler.models.teacher import HOMEROOM, SPECIALIST, Teacher
from specialist_scheduler.models.timetable_slot import SlotDraft, TimetableSlot
from specialist_scheduler.services.scheduler import run_auto_schedule
from specialist_scheduler.utils.conflicts import check_conflicts
from specialist_scheduler.utils.summary import get_teacher_hours_summary, get_timetable_stats
from specialist_scheduler.utils.utils import (
    class_timetable,
    filter_slots,
    format_timetable,
    slot_at,
    teacher_slot_at,
    teacher_timetable,
)
from specialist_scheduler.utils.validation import (
    validate_class_number,
    validate_day,
    validate_grade,
    validate_hours_value,
    validate_period,
    validate_teacher_name,
    validate_timetable,
)

logger = logging.getLogger(__name__)


def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if not isinstance(data, dict) or data.get(key) is None:
        raise PayloadValidationError(f"{context}: missing field '{key}'", details={"field": key})
    return data[key]


def _check(result, context: str, value: Any):
    if not result.is_valid:
        raise PayloadValidationError(f"{context}: {result.error}", details={"value": value})


def _grade_map(raw: Dict[str, Any], context: str) -> Dict[int, int]:
    """Converts {"1": 2, "3": 1} (JSON object keys are strings) to {1: 2, 3: 1}"""
    mapping = {}
    for key, value in (raw or {}).items():
        try:
            grade = int(key)
        except (TypeError, ValueError):
            raise PayloadValidationError(f"{context}: invalid grade key '{key}'")
        _check(validate_grade(grade), context, key)
        _check(validate_hours_value(value), context, value)
        mapping[grade] = int(value)
    return mapping


def parse_teacher(data: Dict[str, Any]) -> Teacher:
    """
    Converts a roster entry into a Teacher.

    Expected format:
    {"id": "t1", "name": "김민수", "type": "specialist", "grades": [3, 4],
     "subjects": ["음악"], "otherSubject": null, "grade": null, "classNumber": null}
    """
    teacher_id = str(_require(data, "id", "teacher"))
    context = f"teacher {teacher_id}"
    name = _require(data, "name", context)
    if not isinstance(name, str) or not name.strip():
        raise PayloadValidationError(f"{context}: 'name' must be a non-empty string",
                                     details={"value": name})
    if not isinstance(data.get("subjects") or [], list):
        raise PayloadValidationError(f"{context}: 'subjects' must be a list")

    role = data.get("type", SPECIALIST)
    if role not in (HOMEROOM, SPECIALIST):
        raise PayloadValidationError(f"{context}: unknown teacher type '{role}'")

    grades = list(data.get("grades") or [])
    grade = data.get("grade")
    class_number = data.get("classNumber")
    for value in grades + [grade]:
        _check(validate_grade(value), context, value)
    _check(validate_class_number(class_number, max_class_number=None), context, class_number)

    return Teacher(
        id=teacher_id,
        name=name.strip(),
        role=role,
        grades=[int(g) for g in grades],
        subjects=list(data.get("subjects") or []),
        other_subject=data.get("otherSubject"),
        grade=int(grade) if grade is not None else None,
        class_number=int(class_number) if class_number is not None else None,
    )


def parse_subject(data: Dict[str, Any]) -> SubjectDemand:
    name = _require(data, "name", "subject")
    return SubjectDemand(
        name=name,
        hours_by_grade=_grade_map(data.get("hoursByGrade"), f"subject {name}"),
        default_room=data.get("defaultRoom") or None,
        id=data.get("id"),
        note=data.get("note"),
    )


def parse_school_shape(data: Dict[str, Any]) -> SchoolShape:
    data = data or {}
    classes_by_grade = {}
    for key, value in (data.get("classesByGrade") or {}).items():
        try:
            grade, count = int(key), int(value)
        except (TypeError, ValueError):
            raise PayloadValidationError(f"school info: invalid class count {key}={value}")
        _check(validate_grade(grade), "school info", key)
        if count < 0:
            raise PayloadValidationError(f"school info: negative class count for grade {grade}")
        classes_by_grade[grade] = count

    return SchoolShape(
        school_name=data.get("schoolName", ""),
        year=int(data.get("year") or 0),
        classes_by_grade=classes_by_grade,
    )


def _parse_slot_fields(data: Dict[str, Any], context: str,
                       periods_per_day: Optional[int]) -> Dict[str, Any]:
    if periods_per_day is None:
        periods_per_day = get_scheduler_config()["periods_per_day"]
    day = _require(data, "day", context)
    period = _require(data, "period", context)
    grade = _require(data, "grade", context)
    class_number = _require(data, "classNumber", context)

    _check(validate_day(day), context, day)
    _check(validate_period(period, periods_per_day), context, period)
    _check(validate_grade(grade), context, grade)
    # No upper bound: school shapes may hold any number of classes per grade
    _check(validate_class_number(class_number, max_class_number=None), context, class_number)

    return {
        "day": day,
        "period": int(period),
        "grade": int(grade),
        "class_number": int(class_number),
        "teacher_id": str(_require(data, "teacherId", context)),
        "teacher_name": data.get("teacherName", ""),
        "subject": _require(data, "subject", context),
        "room": data.get("room") or None,
        "note": data.get("note") or None,
    }


def parse_slot(data: Dict[str, Any], periods_per_day: Optional[int] = None) -> TimetableSlot:
    slot_id = str(_require(data, "id", "slot"))
    return TimetableSlot(id=slot_id, **_parse_slot_fields(data, f"slot {slot_id}", periods_per_day))


def parse_slot_draft(data: Dict[str, Any], periods_per_day: Optional[int] = None) -> SlotDraft:
    return SlotDraft(**_parse_slot_fields(data, "candidate", periods_per_day))


def parse_slots(items: Optional[List[Dict[str, Any]]], periods_per_day: Optional[int] = None) -> List[TimetableSlot]:
    return [parse_slot(item, periods_per_day) for item in items or []]


def parse_constraints(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Returns the constraint overrides present in the message (snake_case keys)"""
    data = data or {}
    overrides = {}

    for key, field_name in (("maxConsecutive", "max_consecutive"),
                            ("maxPerDay", "max_per_day"),
                            ("periodsPerDay", "periods_per_day")):
        if data.get(key) is not None:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise PayloadValidationError(f"constraints: '{key}' must be a positive integer")
            overrides[field_name] = value

    if data.get("teacherUnavailable") is not None:
        unavailable = []
        for entry in data["teacherUnavailable"]:
            day = _require(entry, "day", "teacherUnavailable")
            _check(validate_day(day), "teacherUnavailable", day)
            unavailable.append(Unavailability(
                teacher_id=str(_require(entry, "teacherId", "teacherUnavailable")),
                day=day,
                period=entry.get("period"),
            ))
        overrides["teacher_unavailable"] = unavailable

    if data.get("subjectRoomRequirements") is not None:
        overrides["subject_room_requirements"] = [
            RoomRequirement(
                subject=_require(entry, "subject", "subjectRoomRequirements"),
                room=_require(entry, "room", "subjectRoomRequirements"),
            )
            for entry in data["subjectRoomRequirements"]
        ]

    return overrides


def slot_to_dict(slot: SlotDraft) -> Dict[str, Any]:
    result = {
        "day": slot.day,
        "period": slot.period,
        "grade": slot.grade,
        "classNumber": slot.class_number,
        "teacherId": slot.teacher_id,
        "teacherName": slot.teacher_name,
        "subject": slot.subject,
        "room": slot.room or "",
        "note": slot.note or "",
    }
    if isinstance(slot, TimetableSlot):
        result = {"id": slot.id, **result}
    return result


def schedule_result_to_dict(result: AutoScheduleResult) -> Dict[str, Any]:
    return {
        "success": result.success,
        "slots": [slot_to_dict(s) for s in result.slots],
        "unassigned": [
            {
                "teacherId": u.teacher_id,
                "subject": u.subject,
                "grade": u.grade,
                "classNumber": u.class_number,
                "reason": u.reason,
            }
            for u in result.unassigned
        ],
        "message": result.message,
    }


def conflict_result_to_dict(result: ConflictCheckResult) -> Dict[str, Any]:
    return {
        "hasConflict": result.has_conflict,
        "conflicts": [
            {"type": c.type, "message": c.message, "slots": [slot_to_dict(s) for s in c.slots]}
            for c in result.conflicts
        ],
    }


def hours_summary_to_dict(summary: TeacherHoursSummary) -> Dict[str, Any]:
    return {
        "teacherId": summary.teacher_id,
        "teacherName": summary.teacher_name,
        "totalHours": summary.total_hours,
        "byDay": dict(summary.by_day),
        "byGrade": {str(g): n for g, n in summary.by_grade.items()},
    }


def stats_to_dict(stats: TimetableStats) -> Dict[str, Any]:
    data = asdict(stats)
    return {
        "totalSlots": data["total_slots"],
        "byDay": data["by_day"],
        "byPeriod": {str(p): n for p, n in data["by_period"].items()},
        "byGrade": {str(g): n for g, n in data["by_grade"].items()},
    }


def process_auto_schedule(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Processes an auto scheduling request.

    Expected format:
    {
        "teachers": [{"id": "t1", "name": "김민수", "type": "specialist",
                      "grades": [3, 4], "subjects": ["음악"]}, ...],
        "existingSlots": [{"id": "slot-1", "day": "mon", "period": 1, "grade": 3,
                           "classNumber": 1, "teacherId": "t1", "teacherName": "김민수",
                           "subject": "음악", "room": "음악실"}, ...],
        "subjects": [{"name": "음악", "hoursByGrade": {"3": 2, "4": 2},
                      "defaultRoom": "음악실"}, ...],
        "schoolInfo": {"schoolName": "...", "year": 2025, "classesByGrade": {"3": 2, "4": 1}},
        "settings": {...},
        "constraints": {"maxConsecutive": 4, "maxPerDay": 6,
                        "teacherUnavailable": [{"teacherId": "t1", "day": "fri"}]}
    }

    Returns:
        Response dictionary with the new slots and unassigned lessons
    """
    constraints = ScheduleConstraints(**get_scheduler_config()).merged(
        parse_constraints(data.get("constraints"))
    )
    teachers = [parse_teacher(t) for t in data.get("teachers", [])]
    existing_slots = parse_slots(data.get("existingSlots"), constraints.periods_per_day)
    subjects = [parse_subject(s) for s in data.get("subjects", [])]
    school_shape = parse_school_shape(data.get("schoolInfo"))

    logger.info(f"Data parsed: {len(teachers)} teachers, {len(existing_slots)} existing slots, "
                f"{len(subjects)} subjects")

    result = run_auto_schedule(
        teachers,
        existing_slots,
        subjects,
        school_shape,
        settings=data.get("settings"),
        constraints=constraints,
    )

    if logger.isEnabledFor(logging.DEBUG) and result.slots:
        logger.debug("New slots:\n" + format_timetable(result.slots, constraints.periods_per_day))

    return {
        "status": "success",
        "message": result.message,
        "data": schedule_result_to_dict(result),
    }


def process_validate_timetable(data: Dict[str, Any]) -> Dict[str, Any]:
    validation = validate_timetable(parse_slots(data.get("slots")))
    return {
        "status": "success",
        "message": "Timetable is valid" if validation.valid else "Timetable has double bookings",
        "data": {"valid": validation.valid, "errors": validation.errors},
    }


def process_check_conflicts(data: Dict[str, Any]) -> Dict[str, Any]:
    slots = parse_slots(data.get("slots"))
    candidate = parse_slot_draft(_require(data, "candidate", "check_conflicts"))
    result = check_conflicts(slots, candidate, data.get("excludeId"))
    if result.has_conflict:
        message = f"Conflicts found: {', '.join(result.types())}"
    else:
        message = "No conflicts"
    return {
        "status": "success",
        "message": message,
        "data": conflict_result_to_dict(result),
    }


def process_teacher_hours_summary(data: Dict[str, Any]) -> Dict[str, Any]:
    slots = parse_slots(data.get("slots"))
    teachers = [parse_teacher(t) for t in data.get("teachers", [])]
    summaries = get_teacher_hours_summary(slots, teachers)
    return {
        "status": "success",
        "message": f"{len(summaries)} specialist summaries",
        "data": [hours_summary_to_dict(s) for s in summaries],
    }


def process_filter_slots(data: Dict[str, Any]) -> Dict[str, Any]:
    criteria = data.get("filter") or {}
    slots = filter_slots(
        parse_slots(data.get("slots")),
        teacher_id=criteria.get("teacherId"),
        grade=criteria.get("grade"),
        class_number=criteria.get("classNumber"),
        day=criteria.get("day"),
        subject=criteria.get("subject"),
    )
    return {
        "status": "success",
        "message": f"{len(slots)} slots matched",
        "data": [slot_to_dict(s) for s in slots],
    }


def process_timetable_stats(data: Dict[str, Any]) -> Dict[str, Any]:
    stats = get_timetable_stats(parse_slots(data.get("slots")))
    return {
        "status": "success",
        "message": f"{stats.total_slots} slots",
        "data": stats_to_dict(stats),
    }


def process_class_timetable(data: Dict[str, Any]) -> Dict[str, Any]:
    grade = _require(data, "grade", "class_timetable")
    class_number = _require(data, "classNumber", "class_timetable")
    _check(validate_grade(grade), "class_timetable", grade)
    _check(validate_class_number(class_number, max_class_number=None), "class_timetable", class_number)

    timetable = class_timetable(parse_slots(data.get("slots")), int(grade), int(class_number))
    return {
        "status": "success",
        "message": f"{len(timetable.slots)} slots for {timetable.grade}-{timetable.class_number}",
        "data": {
            "grade": timetable.grade,
            "classNumber": timetable.class_number,
            "slots": [slot_to_dict(s) for s in timetable.slots],
        },
    }


def process_teacher_timetable(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Returns one teacher's lessons. When the message carries the roster
    ("teachers"), the reply also holds the teacher's label, e.g.
    "김민수 - 전담 음악, 체육".
    """
    teacher_id = str(_require(data, "teacherId", "teacher_timetable"))
    timetable = teacher_timetable(parse_slots(data.get("slots")), teacher_id)
    if timetable is None:
        return {"status": "success", "message": f"No slots for teacher {teacher_id}", "data": None}

    result = {
        "teacherId": timetable.teacher_id,
        "teacherName": timetable.teacher_name,
        "slots": [slot_to_dict(s) for s in timetable.slots],
    }
    roster = {t.id: t for t in (parse_teacher(t) for t in data.get("teachers") or [])}
    if teacher_id in roster:
        result["label"] = roster[teacher_id].full_label

    return {
        "status": "success",
        "message": f"{len(timetable.slots)} slots for teacher {teacher_id}",
        "data": result,
    }


def process_slot_at(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Looks up the lesson in one cell, either of a class
    ({"day", "period", "grade", "classNumber"}) or of a teacher
    ({"day", "period", "teacherId"}).
    """
    slots = parse_slots(data.get("slots"))
    day = _require(data, "day", "slot_at")
    period = _require(data, "period", "slot_at")
    _check(validate_day(day), "slot_at", day)
    _check(validate_period(period, get_scheduler_config()["periods_per_day"]), "slot_at", period)

    if data.get("teacherId") is not None:
        slot = teacher_slot_at(slots, str(data["teacherId"]), day, int(period))
    else:
        grade = _require(data, "grade", "slot_at")
        class_number = _require(data, "classNumber", "slot_at")
        _check(validate_grade(grade), "slot_at", grade)
        _check(validate_class_number(class_number, max_class_number=None), "slot_at", class_number)
        slot = slot_at(slots, day, int(period), int(grade), int(class_number))

    return {
        "status": "success",
        "message": "Slot found" if slot else "Empty slot",
        "data": slot_to_dict(slot) if slot else None,
    }


FIELD_VALIDATORS = {
    "name": validate_teacher_name,
    "hours": validate_hours_value,
    "grade": validate_grade,
    "classNumber": validate_class_number,
}


def process_validate_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Runs the teacher form checks on every field present in the message"""
    fields = {
        key: validator(data[key])
        for key, validator in FIELD_VALIDATORS.items()
        if key in data
    }
    valid = all(result.is_valid for result in fields.values())
    return {
        "status": "success",
        "message": "Fields are valid" if valid else "Some fields are invalid",
        "data": {
            "valid": valid,
            "fields": {key: {"valid": r.is_valid, "error": r.error} for key, r in fields.items()},
        },
    }


COMMAND_HANDLERS = {
    "auto_schedule": process_auto_schedule,
    "validate_timetable": process_validate_timetable,
    "check_conflicts": process_check_conflicts,
    "teacher_hours_summary": process_teacher_hours_summary,
    "filter_slots": process_filter_slots,
    "timetable_stats": process_timetable_stats,
    "class_timetable": process_class_timetable,
    "teacher_timetable": process_teacher_timetable,
    "slot_at": process_slot_at,
    "validate_fields": process_validate_fields,
}


def handle_command(command: Optional[str], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Runs one command and converts every failure into an error response.

    Args:
        command: Message pattern (e.g. "auto_schedule")
        data: Message payload

    Returns:
        Response dictionary ({"status": "success" | "error", ...})
    """
    if command == "test_connection":
        return {"status": "success", "message": "Connection established"}

    handler = COMMAND_HANDLERS.get(command)
    if handler is None:
        return SchedulerError(f"Unknown command: {command}", ErrorKind.VALIDATION).to_response()

    try:
        logger.info(f"Processing {command} request")
        return handler(data or {})

    except SchedulerError as e:
        logger.warning(f"Rejected {command} request ({e.kind.value}): {e.message}")
        return e.to_response()

    except Exception as e:
        logger.error(f"Error processing {command}: {e}", exc_info=True)
        return SchedulerError(kind=ErrorKind.UNKNOWN).to_response()


def _reply(ch, properties, result: Dict[str, Any]):
    if properties.reply_to:
        ch.basic_publish(
            exchange="",
            routing_key=properties.reply_to,
            properties=pika.BasicProperties(correlation_id=properties.correlation_id),
            body=json.dumps(result, ensure_ascii=False),
        )
        logger.info(f"Response sent for correlation_id: {properties.correlation_id}")


def callback(ch, method, properties, body):
    """Message callback - processes one command and replies to reply_to"""
    correlation_id = properties.correlation_id

    try:
        logger.info(f"Received message: {correlation_id}")
        message = json.loads(body)
        result = handle_command(message.get("pattern"), message.get("data", {}))
        _reply(ch, properties, result)

    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in message: {e}")
        _reply(ch, properties, PayloadValidationError(f"Invalid JSON: {e}").to_response())

    except Exception as e:
        logger.error(f"Unexpected error in callback: {e}", exc_info=True)

    finally:
        try:
            ch.basic_ack(delivery_tag=method.delivery_tag)
        except Exception as e:
            logger.warning(f"Error acknowledging message: {e}")


def create_connection_and_channel(rabbitmq_config):
    """Create RabbitMQ connection and channel with proper configuration"""
    connection_params = pika.ConnectionParameters(
        host=rabbitmq_config["host"],
        port=rabbitmq_config["port"],
        virtual_host=rabbitmq_config["vhost"],
        credentials=pika.PlainCredentials(
            username=rabbitmq_config["username"], password=rabbitmq_config["password"]
        ),
        heartbeat=rabbitmq_config["heartbeat"],
        blocked_connection_timeout=300,
        socket_timeout=10,
        connection_attempts=rabbitmq_config["connection_attempts"],
        retry_delay=rabbitmq_config["retry_delay"],
    )

    connection = pika.BlockingConnection(connection_params)
    channel = connection.channel()

    queue_name = rabbitmq_config["queue_name"]
    channel.queue_declare(queue=queue_name, durable=True)
    channel.basic_qos(prefetch_count=1)

    return connection, channel, queue_name


def start_consumer():
    """Start the RabbitMQ consumer with reconnection logic"""
    rabbitmq_config = get_rabbitmq_config()
    max_reconnect_attempts = 10
    reconnect_delay = 5
    current_attempt = 0

    while current_attempt < max_reconnect_attempts:
        connection = None
        channel = None

        try:
            logger.info(
                f"Starting consumer (attempt {current_attempt + 1}/{max_reconnect_attempts})"
            )

            connection, channel, queue_name = create_connection_and_channel(
                rabbitmq_config
            )

            # Reset attempt counter on successful connection
            current_attempt = 0

            channel.basic_consume(queue=queue_name, on_message_callback=callback)

            logger.info(f"Consumer started, listening on queue: {queue_name}")
            channel.start_consuming()

        except pika.exceptions.StreamLostError as e:
            logger.error(
                f"[{ErrorKind.NETWORK.value}] Connection lost: {e}. "
                f"Attempt {current_attempt + 1}/{max_reconnect_attempts}"
            )
            current_attempt += 1

        except pika.exceptions.AMQPConnectionError as e:
            logger.error(
                f"[{ErrorKind.NETWORK.value}] AMQP Connection error: {e}. "
                f"Attempt {current_attempt + 1}/{max_reconnect_attempts}"
            )
            current_attempt += 1

        except KeyboardInterrupt:
            logger.info("Shutdown signal received, stopping consumer...")
            break

        except Exception as e:
            logger.error(
                f"[{ErrorKind.UNKNOWN.value}] Unexpected error: {e}. "
                f"Attempt {current_attempt + 1}/{max_reconnect_attempts}",
                exc_info=True,
            )
            current_attempt += 1

        finally:
            try:
                if channel and not channel.is_closed:
                    channel.stop_consuming()
                    channel.close()
            except Exception as e:
                logger.warning(f"Error closing channel: {e}")

            try:
                if connection and not connection.is_closed:
                    connection.close()
            except Exception as e:
                logger.warning(f"Error closing connection: {e}")

        if current_attempt < max_reconnect_attempts:
            logger.info(f"Reconnecting in {reconnect_delay} seconds...")
            time.sleep(reconnect_delay)
            # Exponential backoff with max delay of 60 seconds
            reconnect_delay = min(reconnect_delay * 1.5, 60)

    logger.error(
        f"Max reconnection attempts ({max_reconnect_attempts}) reached. Exiting."
    )


if __name__ == "__main__":
    start_consumer()
