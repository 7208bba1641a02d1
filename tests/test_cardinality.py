"""
Unit tests for cardinality resolution.

Contract:
- absent -> [], single object -> [object], sequence -> same elements, same order
- child() returns None for missing steps and rejects non-tree steps
"""

import unittest

from catalogflat.cardinality import as_list, child, children
from catalogflat.errors import ShapeError


class TestAsList(unittest.TestCase):
    def test_absent_is_empty(self) -> None:
        self.assertEqual(as_list(None), [])

    def test_single_object_is_wrapped(self) -> None:
        node = {"id": 1}
        self.assertEqual(as_list(node), [node])

    def test_collection_keeps_order(self) -> None:
        nodes = [{"id": 3}, {"id": 1}, {"id": 2}]
        out = as_list(nodes)
        self.assertEqual(out, nodes)
        self.assertEqual([n["id"] for n in out], [3, 1, 2])

    def test_collection_is_copied(self) -> None:
        nodes = [{"id": 1}]
        out = as_list(nodes)
        out.append({"id": 2})
        self.assertEqual(len(nodes), 1)

    def test_scalar_is_wrapped(self) -> None:
        self.assertEqual(as_list("Doe, J"), ["Doe, J"])


class TestChild(unittest.TestCase):
    def test_nested_lookup(self) -> None:
        tree = {"a": {"b": {"c": 5}}}
        self.assertEqual(child(tree, "a", "b", "c"), 5)

    def test_missing_step_is_none(self) -> None:
        self.assertIsNone(child({"a": None}, "a", "b", "c"))
        self.assertIsNone(child({}, "a"))
        self.assertIsNone(child(None, "a"))

    def test_list_step_is_shape_error(self) -> None:
        tree = {"a": [{"b": 1}, {"b": 2}]}
        with self.assertRaises(ShapeError):
            child(tree, "a", "b")

    def test_scalar_step_is_shape_error(self) -> None:
        with self.assertRaises(ShapeError):
            child({"a": "text"}, "a", "b")

    def test_children_resolves_single_and_many(self) -> None:
        single = {"sections": {"section": {"id": 1}}}
        many = {"sections": {"section": [{"id": 1}, {"id": 2}]}}
        empty = {"sections": None}
        self.assertEqual(len(children(single, "sections", "section")), 1)
        self.assertEqual(len(children(many, "sections", "section")), 2)
        self.assertEqual(children(empty, "sections", "section"), [])


if __name__ == "__main__":
    unittest.main()
