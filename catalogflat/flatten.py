"""
Record flattening (record -> positional row).

COLUMNS is the only place that knows the column order of each sink table.
storage.py builds its INSERT statements from it, so a schema change only
has to be made here (and in the CREATE TABLE statements).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from catalogflat.model import (
    CourseRecord,
    DepartmentRecord,
    InstructorRecord,
    MeetingRecord,
    SectionRecord,
    SubjectRecord,
    TermRecord,
)


COLUMNS: Dict[str, Tuple[str, ...]] = {
    "terms": (
        "term_id",
        "term_name",
        "term_detail_url",
        "calendar_year",
        "public_indicator",
        "archive_indicator",
        "attending_term",
        "default_term",
        "enrolling_term",
    ),
    "subjects": ("subject_id", "subject_name", "department_code", "term_id"),
    "departments": (
        "term_id",
        "subject_id",
        "department_name",
        "college_code",
        "department_code",
        "contact_name",
        "contact_title",
        "address_line1",
        "address_line2",
        "phone_number",
        "url",
        "description",
    ),
    "courses": (
        "subject_id",
        "term_id",
        "course_id",
        "course_name",
        "credit_hours",
        "description",
        "section_info",
        "degree_attributes",
        "registration_notes",
        "schedule_info",
        "gen_ed_codes",
    ),
    "sections": (
        "crn",
        "term_id",
        "course_id",
        "subject_id",
        "section_number",
        "credits",
        "status_code",
        "part_of_term",
        "enrollment_status",
        "section_text",
        "section_notes",
        "capp_area",
        "start_date",
        "end_date",
    ),
    "meetings": (
        "crn",
        "term_id",
        "meeting_id",
        "type_code",
        "type_name",
        "start_time",
        "end_time",
        "days_of_week",
        "building_name",
        "room_number",
    ),
    "instructors": ("crn", "term_id", "meeting_id", "full_name", "last_name", "first_name"),
}

# Parents first: this is also the insert order of one batch.
ENTITIES: Tuple[str, ...] = ("subjects", "departments", "courses", "sections", "meetings", "instructors")

_ENTITY_BY_TYPE: Dict[type, str] = {
    TermRecord: "terms",
    SubjectRecord: "subjects",
    DepartmentRecord: "departments",
    CourseRecord: "courses",
    SectionRecord: "sections",
    MeetingRecord: "meetings",
    InstructorRecord: "instructors",
}


def entity_of(record: Any) -> str:
    """
    Return the entity (table) name of a record.
    """
    try:
        return _ENTITY_BY_TYPE[type(record)]
    except KeyError:
        raise TypeError(f"not a catalog record: {type(record).__name__}") from None


def to_row(record: Any) -> Tuple[Any, ...]:
    """
    Convert one record into a tuple in its table's column order.
    """
    return tuple(getattr(record, column) for column in COLUMNS[entity_of(record)])


def to_rows(records: Iterable[Any]) -> List[Tuple[Any, ...]]:
    return [to_row(record) for record in records]
