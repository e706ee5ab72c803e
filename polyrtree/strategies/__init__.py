from .base import insert, choose_leaf, least_area_enlargement, adjust_tree_strategy
from .guttman import RTreeGuttman, insert_and_split, quadratic_split
