from .point import Point
from .line import Line
from .rect import Rect, union, union_all
from .polygon import Polygon
from .mbr import MBRect
