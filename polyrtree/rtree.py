import logging
from collections import deque
from functools import partial
from typing import List, Iterable, Callable, Optional, TypeVar
from polyrtree.models import Rect, MBRect, Polygon, union_all
from .exceptions import ConfigurationError, NodeCapacityError, EmptyNodeError

DEFAULT_MAX_ENTRIES = 8
MIN_MAX_ENTRIES = 3
TResult = TypeVar('TResult')

logger = logging.getLogger(__name__)


class RTreeNode:
    """
    An R-Tree node. A node either wraps a single inserted polygon (a leaf entry, whose bounding rectangle carries the
    polygon), or is a container holding up to max_entries children in a fixed number of slots. A container whose
    children are leaf entries is a leaf node; otherwise its children are further container nodes.
    """

    def __init__(self, max_entries: int, parent: 'RTreeNode' = None, mbr: MBRect = None):
        self.parent = parent
        # Slot of this node within parent.children
        self.index = 0
        self.mbr = mbr
        self.children: List[Optional['RTreeNode']] = [None] * max_entries
        self.key_count = 0

    def __repr__(self):
        if self.is_leaf_entry:
            return f'RTreeNode({hex(id(self))}, polygon={self.polygon})'
        suffix = 'child' if self.key_count == 1 else 'children'
        return f'RTreeNode({hex(id(self))}, {self.key_count} {suffix})'

    @property
    def is_leaf(self) -> bool:
        first = self.children[0]
        return first is None or first.is_leaf_entry

    @property
    def is_leaf_entry(self) -> bool:
        return self.mbr is not None and self.mbr.polygon is not None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_full(self) -> bool:
        return self.key_count == len(self.children)

    @property
    def polygon(self) -> Optional[Polygon]:
        return self.mbr.polygon if self.mbr is not None else None

    @property
    def entries(self) -> List['RTreeNode']:
        return self.children[:self.key_count]

    def add_child(self, child: 'RTreeNode') -> None:
        """
        Attaches a child at the next free slot, enlarging this node's bounding rectangle to cover it.
        :param child: Node to attach
        :raises NodeCapacityError: If every slot is already taken.
        """
        if self.is_full:
            raise NodeCapacityError(f"No space to add child to {self}: all {len(self.children)} slots are in use.")
        self.set_child(self.key_count, child)
        self.key_count += 1

    def set_child(self, index: int, child: 'RTreeNode') -> None:
        """
        Places a child at the given slot, replacing whatever was there, and fixes up the child's parent and index. The
        bounding rectangle of this node is initialized from the first child and merged with every subsequent one.
        """
        self.children[index] = child
        child.parent = self
        child.index = index
        if self.mbr is None:
            self.mbr = MBRect.from_rect(child.mbr)
        else:
            self.mbr.merge(child.mbr)

    def get_minimum_enlargement_child(self, rect: Rect) -> 'RTreeNode':
        """
        Selects the child whose bounding rectangle needs the least area enlargement to cover the given rectangle.
        Ties are broken by the smaller area, then by the lower slot.
        :raises EmptyNodeError: If the node has no children.
        """
        if self.key_count == 0:
            raise EmptyNodeError(f"Cannot choose a child of {self}: the node is empty.")
        entries = self.entries
        best = min(range(len(entries)),
                   key=lambda i: (entries[i].mbr.get_enlargement_area(rect), entries[i].mbr.area()))
        return entries[best]

    def get_bounding_rect(self) -> Optional[Rect]:
        """Recomputes the bounding rectangle from the children, ignoring the incrementally maintained mbr."""
        if self.is_leaf_entry:
            return Rect(self.mbr.min_x, self.mbr.min_y, self.mbr.max_x, self.mbr.max_y)
        return union_all([child.mbr for child in self.entries])


class RTreeBase:
    """
    Base R-Tree class. The base class requires choosing a strategy for insertion, leaf selection, tree adjustment and
    overflow handling. For the default implementation that uses Guttman's quadratic split, use the RTree class (alias
    for RTreeGuttman).
    """

    def __init__(
            self,
            insert: Callable[['RTreeBase', Polygon], RTreeNode],
            choose_leaf: Callable[['RTreeBase', RTreeNode], RTreeNode],
            adjust_tree: Callable[['RTreeBase', RTreeNode], None],
            overflow_strategy: Callable[['RTreeBase', RTreeNode, RTreeNode], None],
            max_entries: int = DEFAULT_MAX_ENTRIES
    ):
        """
        Initializes the R-Tree
        :param insert: Strategy used for inserting a new polygon.
        :param choose_leaf: Strategy used for choosing a leaf node when inserting a new leaf entry.
        :param adjust_tree: Strategy used for enlarging ancestor bounding rectangles after a node gained a child.
        :param overflow_strategy: Strategy used for attaching an entry to a node, splitting the node and propagating
            the split upward when it is already full.
        :param max_entries: Maximum number of entries per node. Must be at least 3. The minimum number of entries per
            node is derived as max_entries // 2.
        :raises ConfigurationError: If max_entries is below 3.
        """
        if max_entries < MIN_MAX_ENTRIES:
            raise ConfigurationError(
                f"max_entries must be at least {MIN_MAX_ENTRIES}, got {max_entries}.")
        self.max_entries = max_entries
        self.min_entries = max_entries // 2
        self.insert_strategy = insert
        self.choose_leaf = choose_leaf
        self.adjust_tree = adjust_tree
        self.overflow_strategy = overflow_strategy
        self.root: Optional[RTreeNode] = None
        self._count = 0
        logger.debug("Created %s with max_entries=%d, min_entries=%d",
                     type(self).__name__, self.max_entries, self.min_entries)

    def __len__(self):
        return self._count

    @property
    def count(self) -> int:
        """Number of polygons inserted into the tree."""
        return self._count

    @property
    def height(self) -> int:
        """Number of node levels above the leaf entries (0 for an empty tree, 1 when the root holds leaf entries)."""
        height = 0
        node = self.root
        while node is not None and not node.is_leaf_entry:
            height += 1
            node = node.children[0]
        return height

    def insert(self, polygon: Polygon) -> RTreeNode:
        """
        Inserts a new polygon into the tree
        :param polygon: Polygon to insert
        :return: Leaf entry node wrapping the newly-inserted polygon.
        """
        entry = self.insert_strategy(self, polygon)
        self._count += 1
        return entry

    def create_node(self) -> RTreeNode:
        return RTreeNode(self.max_entries)

    def grow_tree(self, nodes: List[RTreeNode]) -> RTreeNode:
        """
        Grows the R-Tree by creating a new root node, with the given nodes as children.
        :param nodes: Nodes that will become children of the new root node.
        :return: New root node
        """
        root = self.create_node()
        for node in nodes:
            root.add_child(node)
        self.root = root
        logger.debug("Grew tree to height %d", self.height)
        return root

    def traverse(self, fn: Callable[[RTreeNode], Iterable[TResult]],
                 condition: Optional[Callable[[RTreeNode], bool]] = None) -> Iterable[TResult]:
        """
        Traverses the nodes of the R-Tree in depth-first order, calling the given function on each node. Leaf entries
        are not visited; they are reachable through the entries of leaf nodes. A condition function may optionally be
        passed to filter which nodes get traversed. If condition returns False, then neither the node nor any of its
        descendants will be traversed.
        :param fn: Function to execute on each node. The function should accept the node as its only parameter and
            should yield its result.
        :param condition: Optional condition function to evaluate on each node.
        """
        if self.root is not None:
            yield from self.traverse_node(self.root, fn, condition)

    def traverse_node(self, node: RTreeNode, fn: Callable[[RTreeNode], Iterable[TResult]],
                      condition: Optional[Callable[[RTreeNode], bool]]) -> Iterable[TResult]:
        if condition is not None and not condition(node):
            return
        yield from fn(node)
        if not node.is_leaf:
            for child in node.entries:
                yield from self.traverse_node(child, fn, condition)

    def traverse_level_order(self, fn: Callable[[RTreeNode, int], Iterable[TResult]],
                             condition: Optional[Callable[[RTreeNode, int], bool]] = None) -> Iterable[TResult]:
        """
        Traverses the nodes of the R-Tree in level-order (breadth first), calling the given function on each node
        together with its level (0 being the root level). If condition returns False for a node, then neither the node
        nor any of its descendants will be traversed.
        """
        if self.root is None:
            return
        queue = deque([(self.root, 0)])
        while queue:
            node, level = queue.popleft()
            if condition is None or condition(node, level):
                yield from fn(node, level)
                if not node.is_leaf:
                    queue.extend((child, level + 1) for child in node.entries)

    def get_levels(self) -> List[List[RTreeNode]]:
        """
        Returns a list containing a list of nodes at each level of the R-Tree (i.e., the i-th element in the return list
        contains a list of nodes at level i of the tree, with level 0 corresponding to the root).
        """
        levels: List[List[RTreeNode]] = []
        fn = partial(_add_node_to_level, levels)
        # noinspection PyTypeChecker
        list(self.traverse_level_order(fn))
        return levels

    def get_nodes(self) -> Iterable[RTreeNode]:
        """Returns an iterable of all container nodes in the R-Tree (root, intermediate and leaf nodes)"""
        return self.traverse(_yield_node)

    def get_leaves(self) -> Iterable[RTreeNode]:
        """Iterates leaf nodes, i.e. the nodes whose children are leaf entries."""
        return self.traverse(_yield_if_leaf)

    def get_leaf_entries(self) -> Iterable[RTreeNode]:
        """Iterates leaf entries (nodes wrapping the inserted polygons)."""
        for leaf in self.get_leaves():
            yield from leaf.entries

    def get_polygons(self) -> Iterable[Polygon]:
        for entry in self.get_leaf_entries():
            yield entry.polygon


def _add_node_to_level(levels: List[List[RTreeNode]], node: RTreeNode, level: int) -> Iterable[None]:
    if level >= len(levels):
        levels.append([])
    levels[level].append(node)
    yield


def _yield_node(node: RTreeNode) -> Iterable[RTreeNode]:
    yield node


def _yield_if_leaf(node: RTreeNode) -> Iterable[RTreeNode]:
    if node.is_leaf:
        yield node
