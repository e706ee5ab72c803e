"""
This module defines strategies and helper functions that are shared by more than one R-tree variant.
"""

from ..rtree import RTreeBase, RTreeNode
from polyrtree.models import MBRect, Polygon, Rect


def insert(tree: RTreeBase, polygon: Polygon) -> RTreeNode:
    """
    Strategy for inserting a new polygon into the tree. The polygon is wrapped in a leaf entry carrying its bounding
    rectangle. An empty tree gets a fresh root holding the entry; otherwise the choose_leaf strategy finds the leaf node
    where the entry belongs, and overflow_strategy attaches it there (splitting and propagating as needed).
    :param tree: R-tree instance
    :param polygon: Polygon to insert
    :return: Leaf entry node for the newly-inserted polygon.
    """
    entry = RTreeNode(tree.max_entries, mbr=MBRect.from_polygon(polygon))
    if tree.root is None:
        tree.root = tree.create_node()
        tree.root.add_child(entry)
        return entry
    node = tree.choose_leaf(tree, entry)
    tree.overflow_strategy(tree, node, entry)
    return entry


def least_area_enlargement(node: RTreeNode, rect: Rect) -> RTreeNode:
    """
    Selects the child of a node that requires least area enlargement for covering the given bounding box, using the
    smaller area as a tie-breaker.
    """
    return node.get_minimum_enlargement_child(rect)


def choose_leaf(tree: RTreeBase, entry: RTreeNode) -> RTreeNode:
    """
    Select a leaf node in which to place a new leaf entry. Starting from the root, this strategy always descends into
    the subtree that requires least enlargement of its bounding box.
    """
    node = tree.root
    while not node.is_leaf:
        node = least_area_enlargement(node, entry.mbr)
    return node


def adjust_tree_strategy(tree: RTreeBase, node: RTreeNode) -> None:
    """
    Ascend from a node that has just gained a child to the root, enlarging the covering rectangle of every ancestor so
    that it still covers the node.
    """
    while not node.is_root:
        node.parent.mbr.merge(node.mbr)
        node = node.parent
