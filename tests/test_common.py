import random
from typing import Iterable
from unittest import TestCase
from polyrtree import RTree, RTreeNode, Rect, ConfigurationError, DEFAULT_MAX_ENTRIES
from tests.util import rect_polygon, unit_square, assert_tree_invariants


# noinspection PyPep8Naming
class TestCommon(TestCase):
    """
    Common tests for basic R-Tree operations: construction, insertion, and traversal of the resulting tree.
    """

    def test_default_configuration(self):
        t = RTree()
        self.assertEqual(DEFAULT_MAX_ENTRIES, t.max_entries)
        self.assertEqual(DEFAULT_MAX_ENTRIES // 2, t.min_entries)
        self.assertIsNone(t.root)
        self.assertEqual(0, t.count)
        self.assertEqual(0, len(t))
        self.assertEqual(0, t.height)

    def test_min_entries_is_half_of_max(self):
        self.assertEqual(1, RTree(max_entries=3).min_entries)
        self.assertEqual(3, RTree(max_entries=7).min_entries)

    def test_max_entries_too_small(self):
        """A tree needs room for at least 3 entries per node"""
        with self.assertRaises(ConfigurationError):
            RTree(max_entries=2)
        with self.assertRaises(ValueError):
            RTree(max_entries=0)

    def test_insert_into_empty_tree(self):
        """The first insert creates a root holding a single leaf entry for the polygon"""
        # Arrange
        t = RTree()
        polygon = rect_polygon(1, 2, 4, 6)

        # Act
        entry = t.insert(polygon)

        # Assert
        self.assertEqual(1, t.count)
        self.assertEqual(1, t.root.key_count)
        self.assertIs(entry, t.root.children[0])
        self.assertIs(polygon, entry.polygon)
        self.assertTrue(entry.is_leaf_entry)
        self.assertEqual(polygon.get_containing_rect(), entry.mbr)
        self.assertEqual(Rect(1, 2, 4, 6), t.root.mbr)
        self.assertTrue(t.root.is_leaf)
        self.assertEqual(1, t.height)
        assert_tree_invariants(self, t)

    def test_multiple_inserts_without_split(self):
        """
        Ensure multiple inserts work (all original polygons are reachable) without a split (fewer entries than
        max_entries)
        """
        # Arrange
        t = RTree(max_entries=5)
        polygons = [rect_polygon(0, 0, 5, 5), rect_polygon(1, 1, 3, 3), rect_polygon(4, 4, 6, 6)]

        # Act
        for polygon in polygons:
            t.insert(polygon)

        # Assert
        self.assertEqual(polygons, list(t.get_polygons()))
        self.assertEqual(Rect(0, 0, 6, 6), t.root.mbr)
        self.assertEqual(1, t.height)
        assert_tree_invariants(self, t)

    def test_root_split(self):
        """Exceeding the capacity of the root splits it and grows the tree by one level"""
        # Arrange
        t = RTree(max_entries=3)
        squares = [unit_square(0, 0), unit_square(10, 10), unit_square(20, 0)]
        for square in squares:
            t.insert(square)
        old_root = t.root

        # Act
        last = t.insert(unit_square(30, 10))

        # Assert
        self.assertEqual(4, t.count)
        self.assertEqual(2, t.height)
        self.assertIsNot(old_root, t.root)
        self.assertEqual(2, t.root.key_count)
        self.assertFalse(t.root.is_leaf)
        self.assertEqual(Rect(0, 0, 31, 11), t.root.mbr)
        group1, group2 = t.root.entries
        self.assertEqual(Rect(10, 10, 31, 11), group1.mbr)
        self.assertEqual(Rect(0, 0, 21, 1), group2.mbr)
        self.assertIs(group1, last.parent)
        assert_tree_invariants(self, t)

    def test_duplicates(self):
        """Polygons with identical bounding rectangles are kept as distinct leaf entries"""
        # Arrange
        t = RTree(max_entries=3)
        p1 = rect_polygon(0, 0, 2, 2)
        p2 = rect_polygon(0, 0, 2, 2)

        # Act
        e1 = t.insert(p1)
        e2 = t.insert(p2)

        # Assert
        self.assertEqual(2, t.count)
        self.assertIsNot(e1, e2)
        self.assertEqual([e1, e2], list(t.get_leaf_entries()))
        self.assertEqual([p1, p2], list(t.get_polygons()))
        assert_tree_invariants(self, t)

    def test_many_duplicates(self):
        """Splitting nodes made entirely of identical rectangles keeps every entry"""
        # Arrange
        t = RTree(max_entries=4)

        # Act
        for _ in range(30):
            t.insert(rect_polygon(5, 5, 6, 6))

        # Assert
        self.assertEqual(30, t.count)
        self.assertEqual(30, len(list(t.get_leaf_entries())))
        assert_tree_invariants(self, t)

    def test_invariants_random_inserts(self):
        """The tree stays balanced and consistent after many inserts, for various node capacities"""
        for max_entries in (3, 4, 5, 8):
            with self.subTest(max_entries=max_entries):
                # Arrange
                rnd = random.Random(max_entries)
                t = RTree(max_entries=max_entries)

                # Act
                for i in range(200):
                    x, y = rnd.uniform(-100, 100), rnd.uniform(-100, 100)
                    t.insert(rect_polygon(x, y, x + rnd.uniform(0.5, 10), y + rnd.uniform(0.5, 10)))
                    if i % 25 == 0:
                        assert_tree_invariants(self, t)

                # Assert
                self.assertEqual(200, t.count)
                self.assertGreater(t.height, 1)
                assert_tree_invariants(self, t)

    def test_traverse(self):
        """Tests that a given function is called on every container node of the tree when calling traverse"""
        # Arrange
        t = _create_two_level_tree()
        R = t.root
        N1, N2 = R.entries

        # Act
        result = t.traverse(_yield_node)

        # Assert
        self.assertEqual([R, N1, N2], list(result))

    def test_traverse_empty(self):
        """Traversing an empty R-tree visits nothing"""
        t = RTree()
        self.assertEqual([], list(t.traverse(_yield_node)))
        self.assertEqual([], t.get_levels())
        self.assertEqual([], list(t.get_leaf_entries()))

    def test_traverse_with_condition(self):
        """
        Only nodes that pass the condition are traversed. If the condition returns False at the parent level, the
        child nodes are not traversed either.
        """
        # Arrange
        t = _create_two_level_tree()
        R = t.root
        N1, N2 = R.entries

        # Act
        result = list(t.traverse(_yield_node, lambda node: node is not N2))

        # Assert
        self.assertEqual([R, N1], result)

    def test_traverse_level_order(self):
        # Arrange
        t = _create_two_level_tree()
        R = t.root
        N1, N2 = R.entries

        # Act
        result = list(t.traverse_level_order(_yield_node_and_level))

        # Assert
        self.assertEqual([(R, 0), (N1, 1), (N2, 1)], result)

    def test_get_levels(self):
        # Arrange
        t = _create_two_level_tree()
        R = t.root
        N1, N2 = R.entries

        # Act
        levels = t.get_levels()

        # Assert
        self.assertEqual([[R], [N1, N2]], levels)

    def test_get_leaves(self):
        t = _create_two_level_tree()
        self.assertEqual(t.root.entries, list(t.get_leaves()))
        self.assertEqual(list(t.root.entries), [n for n in t.get_nodes() if n.is_leaf])

    def test_get_leaf_entries(self):
        """Leaf entries are reported leaf by leaf, in slot order"""
        t = _create_two_level_tree()
        N1, N2 = t.root.entries
        self.assertEqual(N1.entries + N2.entries, list(t.get_leaf_entries()))
        self.assertEqual(4, len(list(t.get_polygons())))


def _create_two_level_tree() -> RTree:
    t = RTree(max_entries=3)
    for x, y in ((0, 0), (10, 10), (20, 0), (30, 10)):
        t.insert(unit_square(x, y))
    return t


def _yield_node(node: RTreeNode) -> Iterable[RTreeNode]:
    yield node


def _yield_node_and_level(node: RTreeNode, level: int):
    yield node, level
