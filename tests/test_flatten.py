import unittest
from dataclasses import fields
from datetime import date

from catalogflat.flatten import COLUMNS, ENTITIES, entity_of, to_row, to_rows
from catalogflat.model import (
    CourseRecord,
    DepartmentRecord,
    InstructorRecord,
    MeetingRecord,
    SectionRecord,
    SubjectRecord,
    TermRecord,
)


class TestColumns(unittest.TestCase):
    def test_every_record_field_has_a_column(self) -> None:
        record_types = {
            "terms": TermRecord,
            "subjects": SubjectRecord,
            "departments": DepartmentRecord,
            "courses": CourseRecord,
            "sections": SectionRecord,
            "meetings": MeetingRecord,
            "instructors": InstructorRecord,
        }
        self.assertEqual(set(record_types), set(COLUMNS))
        for entity, cls in record_types.items():
            with self.subTest(entity=entity):
                self.assertEqual(set(COLUMNS[entity]), {f.name for f in fields(cls)})
                self.assertEqual(len(COLUMNS[entity]), len(set(COLUMNS[entity])))

    def test_column_orders(self) -> None:
        self.assertEqual(
            COLUMNS["departments"],
            (
                "term_id", "subject_id", "department_name", "college_code", "department_code",
                "contact_name", "contact_title", "address_line1", "address_line2",
                "phone_number", "url", "description",
            ),
        )
        self.assertEqual(
            COLUMNS["courses"],
            (
                "subject_id", "term_id", "course_id", "course_name", "credit_hours", "description",
                "section_info", "degree_attributes", "registration_notes", "schedule_info", "gen_ed_codes",
            ),
        )
        self.assertEqual(
            COLUMNS["meetings"],
            (
                "crn", "term_id", "meeting_id", "type_code", "type_name", "start_time",
                "end_time", "days_of_week", "building_name", "room_number",
            ),
        )

    def test_insert_order_is_parents_first(self) -> None:
        self.assertEqual(ENTITIES[0], "subjects")
        self.assertLess(ENTITIES.index("courses"), ENTITIES.index("sections"))
        self.assertLess(ENTITIES.index("sections"), ENTITIES.index("meetings"))
        self.assertEqual(ENTITIES[-1], "instructors")


class TestToRow(unittest.TestCase):
    def test_subject_row_order(self) -> None:
        rec = SubjectRecord(subject_id="CS", subject_name="Computer Science", department_code=1434, term_id=120201)
        self.assertEqual(to_row(rec), ("CS", "Computer Science", 1434, 120201))

    def test_section_row_order(self) -> None:
        rec = SectionRecord(
            crn=41758, term_id=120201, course_id=411, subject_id="CS", section_number="Q3",
            credits=3, status_code="A", part_of_term="1", enrollment_status="Open",
            section_text=None, section_notes=None, capp_area=None,
            start_date=date(2020, 1, 21), end_date=None,
        )
        row = to_row(rec)
        self.assertEqual(row[:6], (41758, 120201, 411, "CS", "Q3", 3))
        self.assertEqual(row[-2:], (date(2020, 1, 21), None))

    def test_instructor_rows(self) -> None:
        recs = [
            InstructorRecord(crn=1, term_id=2, meeting_id=0, full_name="Doe, J", last_name="Doe", first_name="J"),
            InstructorRecord(crn=1, term_id=2, meeting_id=0, full_name=None, last_name=None, first_name=None),
        ]
        self.assertEqual(to_rows(recs), [(1, 2, 0, "Doe, J", "Doe", "J"), (1, 2, 0, None, None, None)])

    def test_unknown_record_type(self) -> None:
        with self.assertRaises(TypeError):
            entity_of({"crn": 1})


if __name__ == "__main__":
    unittest.main()
