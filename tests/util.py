"""
Utility functions for building polygons and R-trees shared across multiple tests, plus a checker for the structural
invariants every tree must satisfy after any sequence of inserts.
"""

from typing import List
from unittest import TestCase
from polyrtree import Point, Polygon, MBRect, RTreeBase, RTreeNode


def rect_polygon(min_x: float, min_y: float, max_x: float, max_y: float) -> Polygon:
    """Creates a rectangular polygon with the given extent."""
    return Polygon.from_points([
        Point(min_x, min_y),
        Point(max_x, min_y),
        Point(max_x, max_y),
        Point(min_x, max_y)
    ])


def unit_square(x: float, y: float) -> Polygon:
    return rect_polygon(x, y, x + 1, y + 1)


def make_entry(max_entries: int, min_x: float, min_y: float, max_x: float, max_y: float) -> RTreeNode:
    """Creates a detached leaf entry wrapping a rectangular polygon."""
    return RTreeNode(max_entries, mbr=MBRect.from_polygon(rect_polygon(min_x, min_y, max_x, max_y)))


def make_node(max_entries: int, entries: List[RTreeNode]) -> RTreeNode:
    node = RTreeNode(max_entries)
    for entry in entries:
        node.add_child(entry)
    return node


def assert_tree_invariants(test: TestCase, tree: RTreeBase) -> None:
    """
    Walks the whole tree and asserts that:
    * every node holds between min_entries (except the root) and max_entries children;
    * unused child slots are empty;
    * every node's bounding rectangle is exactly the union of its children's bounding rectangles;
    * every child points back to its parent and to the slot it occupies;
    * all leaf entries are at the same depth;
    * every ancestor of a leaf entry covers the entry's bounding rectangle;
    * the number of reachable leaf entries equals the count of inserted polygons.
    """
    if tree.root is None:
        test.assertEqual(0, tree.count)
        return
    test.assertIsNone(tree.root.parent)
    depths = []
    _check_node(test, tree, tree.root, 0, depths)
    test.assertEqual(tree.count, len(depths))
    test.assertEqual(1, len(set(depths)), f"Leaf entries found at different depths: {sorted(set(depths))}")
    test.assertEqual(tree.height, depths[0])


def _check_node(test: TestCase, tree: RTreeBase, node: RTreeNode, depth: int, depths: List[int]) -> None:
    test.assertFalse(node.is_leaf_entry)
    test.assertLessEqual(node.key_count, tree.max_entries)
    test.assertGreaterEqual(node.key_count, 1)
    if not node.is_root:
        test.assertGreaterEqual(node.key_count, tree.min_entries)
    test.assertTrue(all(slot is None for slot in node.children[node.key_count:]))
    test.assertEqual(node.get_bounding_rect(), node.mbr)
    for i, child in enumerate(node.entries):
        test.assertIs(node, child.parent)
        test.assertEqual(i, child.index)
        test.assertIs(child, child.parent.children[child.index])
        if child.is_leaf_entry:
            depths.append(depth + 1)
            ancestor = node
            while ancestor is not None:
                test.assertTrue(ancestor.mbr.contains(child.mbr))
                ancestor = ancestor.parent
        else:
            _check_node(test, tree, child, depth + 1, depths)
