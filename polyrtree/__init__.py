from polyrtree.models import Point, Line, Rect, Polygon, MBRect
from .exceptions import RTreeError, ConfigurationError, NodeCapacityError, EmptyNodeError
from .rtree import RTreeBase, RTreeNode, DEFAULT_MAX_ENTRIES, MIN_MAX_ENTRIES
from .strategies import (
    RTreeGuttman, RTreeGuttman as RTree, insert, choose_leaf, least_area_enlargement, adjust_tree_strategy,
    insert_and_split, quadratic_split)
