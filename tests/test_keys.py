import unittest

from catalogflat.errors import ShapeError
from catalogflat.keys import Lineage, term_lineage


class TestLineage(unittest.TestCase):
    def test_descend_adds_keys(self) -> None:
        root = Lineage(term_id=120201)
        below = root.descend(subject_id="CS").descend(course_id=411)
        self.assertEqual((below.term_id, below.subject_id, below.course_id), (120201, "CS", 411))
        # the parent lineage is untouched
        self.assertIsNone(root.subject_id)

    def test_cannot_overwrite_ancestor_key(self) -> None:
        lineage = Lineage(term_id=120201, subject_id="CS")
        with self.assertRaises(ShapeError):
            lineage.descend(subject_id="MATH")

    def test_missing_key_value(self) -> None:
        with self.assertRaises(ShapeError):
            Lineage(term_id=1).descend(crn=None)

    def test_zero_is_a_valid_key(self) -> None:
        lineage = Lineage(term_id=1, crn=5).descend(meeting_id=0)
        self.assertEqual(lineage.meeting_id, 0)

    def test_unknown_key(self) -> None:
        with self.assertRaises(TypeError):
            Lineage().descend(room=1)

    def test_require(self) -> None:
        with self.assertRaises(ShapeError):
            Lineage(term_id=1).require("term_id", "subject_id")


class TestTermLineage(unittest.TestCase):
    def test_term_root(self) -> None:
        root = {"term": {"id": 120201, "parents": {"calendarYear": {"id": 2020, "text": 2020}}}}
        lineage = term_lineage(root)
        self.assertEqual(lineage.term_id, 120201)
        self.assertEqual(lineage.calendar_year, 2020)

    def test_without_parents(self) -> None:
        lineage = term_lineage({"term": {"id": 120201}})
        self.assertIsNone(lineage.calendar_year)

    def test_not_a_term_document(self) -> None:
        with self.assertRaises(ShapeError):
            term_lineage({"subject": {"id": "CS"}})
        with self.assertRaises(ShapeError):
            term_lineage({"term": {"label": "Spring 2020"}})


if __name__ == "__main__":
    unittest.main()
