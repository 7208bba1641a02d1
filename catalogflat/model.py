"""
Central record definitions used across the project.

Each dataclass is one flat row of one entity level. Parent-key fields are
always filled from the traversal lineage (see keys.py), never from the
document node the record is built from.

Batch groups the records of one traversal so that they can be written
to the sink as a single unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class TermRecord:
    term_id: int
    term_name: Optional[str]
    term_detail_url: Optional[str]
    calendar_year: Optional[int]
    public_indicator: Optional[bool]
    archive_indicator: Optional[bool]
    attending_term: Optional[bool]
    default_term: Optional[bool]
    enrolling_term: Optional[bool]


@dataclass
class SubjectRecord:
    subject_id: str
    subject_name: Optional[str]
    department_code: Optional[int]
    term_id: int


@dataclass
class DepartmentRecord:
    term_id: int
    subject_id: str
    department_name: Optional[str]
    college_code: Optional[str]
    department_code: Optional[int]
    contact_name: Optional[str]
    contact_title: Optional[str]
    address_line1: Optional[str]
    address_line2: Optional[str]
    phone_number: Optional[str]
    url: Optional[str]
    description: Optional[str]


@dataclass
class CourseRecord:
    subject_id: str
    term_id: int
    course_id: int
    course_name: Optional[str]
    credit_hours: Optional[str]
    description: Optional[str]
    section_info: Optional[str]
    degree_attributes: Optional[str]
    registration_notes: Optional[str]
    schedule_info: Optional[str]
    gen_ed_codes: Optional[str]


@dataclass
class SectionRecord:
    """
    One section (CRN) of a course.

    credits is the first digit of the free-text credit hours, or None.
    """

    crn: int
    term_id: int
    course_id: int
    subject_id: str
    section_number: Optional[str]
    credits: Optional[int]
    status_code: Optional[str]
    part_of_term: Optional[str]
    enrollment_status: Optional[str]
    section_text: Optional[str]
    section_notes: Optional[str]
    capp_area: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]


@dataclass
class MeetingRecord:
    """
    One meeting slot of a section. Times are 24-hour "HH:MM" strings.
    """

    crn: int
    term_id: int
    meeting_id: int
    type_code: Optional[str]
    type_name: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    days_of_week: Optional[str]
    building_name: Optional[str]
    room_number: Optional[str]


@dataclass
class InstructorRecord:
    crn: int
    term_id: int
    meeting_id: int
    full_name: Optional[str]
    last_name: Optional[str]
    first_name: Optional[str]


@dataclass
class Batch:
    """
    All records produced by one traversal, grouped per entity level.
    """

    subjects: List[SubjectRecord] = field(default_factory=list)
    departments: List[DepartmentRecord] = field(default_factory=list)
    courses: List[CourseRecord] = field(default_factory=list)
    sections: List[SectionRecord] = field(default_factory=list)
    meetings: List[MeetingRecord] = field(default_factory=list)
    instructors: List[InstructorRecord] = field(default_factory=list)

    def extend(self, other: "Batch") -> None:
        self.subjects.extend(other.subjects)
        self.departments.extend(other.departments)
        self.courses.extend(other.courses)
        self.sections.extend(other.sections)
        self.meetings.extend(other.meetings)
        self.instructors.extend(other.instructors)

    def counts(self) -> dict[str, int]:
        return {
            "subjects": len(self.subjects),
            "departments": len(self.departments),
            "courses": len(self.courses),
            "sections": len(self.sections),
            "meetings": len(self.meetings),
            "instructors": len(self.instructors),
        }
