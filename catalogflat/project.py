"""
Level projectors (decoded tree -> flat records).

Every projector follows the same steps:
1. resolve this level's children with as_list (via children())
2. add the child's local key to the lineage
3. compute derived columns
4. emit one record per child

Parent-key columns are read from the lineage only. walk_subject() runs
all levels below a term for one subject and returns a Batch.

Document layout (after decoding, see fetch.py):

    term root:     {"term": {"id", "label", "subjects": {"subject": ...}}}
    subject doc:   {"subject": {"label", "departmentCode", ...,
                    "cascadingCourses": {"cascadingCourse": ...}}}
    course:        {"id": "CS 411", ..., "detailedSections": {"detailedSection": ...}}
    section:       {"id": <CRN>, ..., "meetings": {"meeting": ...}}
    meeting:       {"id", "type": {"code", "text"}, ..., "instructors": {"instructor": ...}}
"""

from __future__ import annotations

from typing import Any, Iterator, List, Mapping, Optional, Tuple

from catalogflat.cardinality import child, children
from catalogflat.derive import (
    as_text,
    course_number,
    gen_ed_codes,
    indicator,
    parse_credits,
    parse_date,
    to_24h,
)
from catalogflat.errors import ShapeError
from catalogflat.keys import Lineage
from catalogflat.model import (
    Batch,
    CourseRecord,
    DepartmentRecord,
    InstructorRecord,
    MeetingRecord,
    SectionRecord,
    SubjectRecord,
    TermRecord,
)


# ---------------------------------------------------------------------------
# Terms (schedule summary document)
# ---------------------------------------------------------------------------


def project_terms(schedule_root: Any) -> List[TermRecord]:
    """
    Turn the calendar-year summary document into one record per term.

    The calendar year of each term is the id of the <calendarYearSummary>
    it was found under.
    """
    records: List[TermRecord] = []
    years = children(schedule_root, "schedule", "calendarYears", "calendarYearSummary")
    for year in years:
        year_lineage = Lineage().descend(calendar_year=child(year, "id"))
        for term in children(year, "terms", "termDetail"):
            lineage = year_lineage.descend(term_id=child(term, "id"))
            records.append(
                TermRecord(
                    term_id=lineage.term_id,
                    term_name=as_text(child(term, "label")),
                    term_detail_url=child(term, "href"),
                    calendar_year=lineage.calendar_year,
                    public_indicator=indicator(child(term, "publicIndicator")),
                    archive_indicator=indicator(child(term, "archiveIndicator")),
                    attending_term=indicator(child(term, "attendingTerm")),
                    default_term=indicator(child(term, "defaultTerm")),
                    enrolling_term=indicator(child(term, "enrollingTerm")),
                )
            )
    return records


def subject_refs(term_root: Any) -> List[Any]:
    """
    Return the <subject> references listed in a term root document.
    """
    return children(term_root, "term", "subjects", "subject")


# ---------------------------------------------------------------------------
# Subject & department (one subject document each)
# ---------------------------------------------------------------------------


def project_subject(subject_ref: Any, subject_doc: Any, lineage: Lineage) -> SubjectRecord:
    lineage.require("term_id", "subject_id")
    return SubjectRecord(
        subject_id=lineage.subject_id,
        subject_name=as_text(child(subject_ref, "text")),
        department_code=child(subject_doc, "subject", "departmentCode"),
        term_id=lineage.term_id,
    )


def project_department(subject_doc: Any, lineage: Lineage) -> Optional[DepartmentRecord]:
    """
    Department details live in the subject document itself (1:1 per term).

    Returns None when the subject document is absent.
    """
    lineage.require("term_id", "subject_id")
    info = child(subject_doc, "subject")
    if info is None:
        return None
    return DepartmentRecord(
        term_id=lineage.term_id,
        subject_id=lineage.subject_id,
        department_name=as_text(child(info, "label")),
        college_code=as_text(child(info, "collegeCode")),
        department_code=child(info, "departmentCode"),
        contact_name=as_text(child(info, "contactName")),
        contact_title=as_text(child(info, "contactTitle")),
        address_line1=as_text(child(info, "addressLine1")),
        address_line2=as_text(child(info, "addressLine2")),
        phone_number=as_text(child(info, "phoneNumber")),
        url=as_text(child(info, "webSiteURL")),
        description=as_text(child(info, "collegeDepartmentDescription")),
    )


# ---------------------------------------------------------------------------
# Courses -> sections -> meetings -> instructors
# ---------------------------------------------------------------------------


def _courses(subject_doc: Any, lineage: Lineage) -> Iterator[Tuple[Any, Lineage]]:
    lineage.require("term_id", "subject_id")
    for course in children(subject_doc, "subject", "cascadingCourses", "cascadingCourse"):
        yield course, lineage.descend(course_id=course_number(child(course, "id")))


def _sections(course: Any, lineage: Lineage) -> Iterator[Tuple[Any, Lineage]]:
    lineage.require("term_id", "subject_id", "course_id")
    for section in children(course, "detailedSections", "detailedSection"):
        yield section, lineage.descend(crn=child(section, "id"))


def _meetings(section: Any, lineage: Lineage) -> Iterator[Tuple[Any, Lineage]]:
    lineage.require("term_id", "crn")
    for meeting in children(section, "meetings", "meeting"):
        yield meeting, lineage.descend(meeting_id=child(meeting, "id"))


def _course_record(course: Any, lineage: Lineage) -> CourseRecord:
    return CourseRecord(
        subject_id=lineage.subject_id,
        term_id=lineage.term_id,
        course_id=lineage.course_id,
        course_name=as_text(child(course, "label")),
        credit_hours=as_text(child(course, "creditHours")),
        description=as_text(child(course, "description")),
        section_info=as_text(child(course, "courseSectionInformation")),
        degree_attributes=as_text(child(course, "sectionDegreeAttributes")),
        registration_notes=as_text(child(course, "sectionRegistrationNotes")),
        schedule_info=as_text(child(course, "classScheduleInformation")),
        gen_ed_codes=gen_ed_codes(child(course, "genEdCategories", "category")),
    )


def _section_record(section: Any, lineage: Lineage) -> SectionRecord:
    # term/subject/course come from the lineage, not from section/parents
    return SectionRecord(
        crn=lineage.crn,
        term_id=lineage.term_id,
        course_id=lineage.course_id,
        subject_id=lineage.subject_id,
        section_number=as_text(child(section, "sectionNumber")),
        credits=parse_credits(child(section, "creditHours")),
        status_code=as_text(child(section, "statusCode")),
        part_of_term=as_text(child(section, "partOfTerm")),
        enrollment_status=as_text(child(section, "enrollmentStatus")),
        section_text=as_text(child(section, "sectionText")),
        section_notes=as_text(child(section, "sectionNotes")),
        capp_area=as_text(child(section, "sectionCappArea")),
        start_date=parse_date(child(section, "startDate")),
        end_date=parse_date(child(section, "endDate")),
    )


def _meeting_record(meeting: Any, lineage: Lineage) -> MeetingRecord:
    return MeetingRecord(
        crn=lineage.crn,
        term_id=lineage.term_id,
        meeting_id=lineage.meeting_id,
        type_code=as_text(child(meeting, "type", "code")),
        type_name=as_text(child(meeting, "type", "text")),
        start_time=to_24h(child(meeting, "start")),
        end_time=to_24h(child(meeting, "end")),
        days_of_week=as_text(child(meeting, "daysOfTheWeek")),
        building_name=as_text(child(meeting, "buildingName")),
        room_number=as_text(child(meeting, "roomNumber")),
    )


def _instructor_record(instructor: Any, lineage: Lineage) -> InstructorRecord:
    # <instructor> without name attributes decodes to its bare text
    if isinstance(instructor, str):
        full_name, last_name, first_name = instructor, None, None
    elif isinstance(instructor, Mapping):
        full_name = as_text(instructor.get("text"))
        last_name = as_text(instructor.get("lastName"))
        first_name = as_text(instructor.get("firstName"))
    else:
        raise ShapeError(f"instructor is not a tree: {instructor!r}")
    return InstructorRecord(
        crn=lineage.crn,
        term_id=lineage.term_id,
        meeting_id=lineage.meeting_id,
        full_name=full_name,
        last_name=last_name,
        first_name=first_name,
    )


def project_courses(subject_doc: Any, lineage: Lineage) -> List[CourseRecord]:
    """
    Courses of one subject document. `lineage` must carry term_id and subject_id.
    """
    return [_course_record(course, course_lineage) for course, course_lineage in _courses(subject_doc, lineage)]


def project_sections(course: Any, lineage: Lineage) -> List[SectionRecord]:
    """
    Sections of one course node. `lineage` must carry the course_id.
    """
    return [_section_record(section, section_lineage) for section, section_lineage in _sections(course, lineage)]


def project_meetings(section: Any, lineage: Lineage) -> List[MeetingRecord]:
    return [_meeting_record(meeting, meeting_lineage) for meeting, meeting_lineage in _meetings(section, lineage)]


def project_instructors(meeting: Any, lineage: Lineage) -> List[InstructorRecord]:
    lineage.require("term_id", "crn", "meeting_id")
    return [_instructor_record(instructor, lineage) for instructor in children(meeting, "instructors", "instructor")]


def walk_subject(subject_ref: Any, subject_doc: Any, lineage: Lineage) -> Batch:
    """
    Project every level below the term for one subject.

    `lineage` is the term lineage; the subject id is taken from the
    <subject> reference of the term document. A document without a
    <subject> root (an error page, say) raises ShapeError.
    """
    lineage = lineage.descend(subject_id=child(subject_ref, "id"))
    if child(subject_doc, "subject") is None:
        raise ShapeError(f"subject {lineage.subject_id}: document has no <subject> root")

    batch = Batch()
    batch.subjects.append(project_subject(subject_ref, subject_doc, lineage))
    department = project_department(subject_doc, lineage)
    if department is not None:
        batch.departments.append(department)

    for course, course_lineage in _courses(subject_doc, lineage):
        batch.courses.append(_course_record(course, course_lineage))
        for section, section_lineage in _sections(course, course_lineage):
            batch.sections.append(_section_record(section, section_lineage))
            for meeting, meeting_lineage in _meetings(section, section_lineage):
                batch.meetings.append(_meeting_record(meeting, meeting_lineage))
                batch.instructors.extend(project_instructors(meeting, meeting_lineage))

    return batch
