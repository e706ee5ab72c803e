"""
Implementation of the Guttman R-Tree strategies described in this paper:
http://www-db.deis.unibo.it/courses/SI-LS/papers/Gut84.pdf

Overflowing nodes are resolved with the quadratic split. This implementation is used as the default for this library.
"""

import logging
import itertools
from typing import List, Tuple
from ..rtree import RTreeBase, RTreeNode, DEFAULT_MAX_ENTRIES
from .base import insert, choose_leaf, adjust_tree_strategy

logger = logging.getLogger(__name__)


def insert_and_split(tree: RTreeBase, node: RTreeNode, entry: RTreeNode) -> None:
    """
    Attaches an entry to a node. If the node is already full, it is split in two with quadratic_split: the first group
    takes over the node's slot in its parent and the second group is attached to the parent in turn, which may split
    the parent as well. When the root itself is split, a new root is created above the two groups.
    :param tree: R-tree instance
    :param node: Node receiving the entry
    :param entry: Leaf entry, or a node produced by a split one level below
    """
    if not node.is_full:
        node.add_child(entry)
        tree.adjust_tree(tree, node)
        return
    group1, group2 = quadratic_split(tree, node, entry)
    parent = node.parent
    if parent is not None:
        parent.set_child(node.index, group1)
        tree.overflow_strategy(tree, parent, group2)
    else:
        tree.grow_tree([group1, group2])


def quadratic_split(tree: RTreeBase, node: RTreeNode, entry: RTreeNode) -> Tuple[RTreeNode, RTreeNode]:
    """
    Distributes the children of a full node, plus one extra entry, across two new nodes.

    The two entries that are farthest apart become the seeds of each group. The remaining entries are then taken
    from the back of the list one at a time and added to the group whose bounding rectangle needs the least
    enlargement to cover them. Ties go to the group with the smaller area, then to the group with fewer entries.
    Whenever a group has so few entries that it needs all the unassigned ones to reach min_entries, they are all
    assigned to it at once.

    :param tree: R-tree instance
    :param node: Full node being split. Its own slots are not modified; the caller replaces it in its parent.
    :param entry: Entry that did not fit into the node
    :return: The two new nodes
    """
    entries = [entry] + node.entries
    seed1, seed2 = _pick_seeds(entries)
    group1, group2 = tree.create_node(), tree.create_node()
    group1.add_child(seed1)
    group2.add_child(seed2)
    entries = [e for e in entries if e is not seed1 and e is not seed2]
    while entries:
        current = entries.pop()
        _choose_group(group1, group2, current).add_child(current)
        remaining = len(entries)
        if group1.key_count == tree.min_entries - remaining:
            _assign_all(group1, entries)
        elif group2.key_count == tree.min_entries - remaining:
            _assign_all(group2, entries)
    logger.debug("Split %s into %s and %s", node, group1, group2)
    return group1, group2


def _pick_seeds(entries: List[RTreeNode]) -> Tuple[RTreeNode, RTreeNode]:
    # Enlargement of the first rectangle by the second stands in for the distance between the two.
    seeds = None
    max_area = float('-inf')
    for e1, e2 in itertools.combinations(entries, 2):
        area = e1.mbr.get_enlargement_area(e2.mbr)
        if area > max_area:
            max_area = area
            seeds = (e1, e2)
    return seeds


def _choose_group(group1: RTreeNode, group2: RTreeNode, entry: RTreeNode) -> RTreeNode:
    enlargement1 = group1.mbr.get_enlargement_area(entry.mbr)
    enlargement2 = group2.mbr.get_enlargement_area(entry.mbr)
    if enlargement1 != enlargement2:
        return group1 if enlargement1 < enlargement2 else group2
    area1, area2 = group1.mbr.area(), group2.mbr.area()
    if area1 != area2:
        return group1 if area1 < area2 else group2
    return group1 if group1.key_count < group2.key_count else group2


def _assign_all(group: RTreeNode, entries: List[RTreeNode]) -> None:
    for e in entries:
        group.add_child(e)
    entries.clear()


class RTreeGuttman(RTreeBase):
    """R-Tree implementation that uses Guttman's least-enlargement leaf selection and quadratic split."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        """
        Initializes the R-Tree using Guttman's strategies for insertion and splitting.
        :param max_entries: Maximum number of entries per node (at least 3). The minimum is max_entries // 2.
        """
        super().__init__(
            max_entries=max_entries,
            insert=insert,
            choose_leaf=choose_leaf,
            adjust_tree=adjust_tree_strategy,
            overflow_strategy=insert_and_split
        )
