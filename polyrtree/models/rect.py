from typing import List, Optional
from .point import Point


class Rect:
    """
    Axis-aligned rectangle. The y-axis points up, so the left-top corner is (min_x, max_y) and the right-bottom corner
    is (max_x, min_y).
    """

    def __init__(self, min_x: float, min_y: float, max_x: float, max_y: float):
        self.min_x = min_x
        self.min_y = min_y
        self.max_x = max_x
        self.max_y = max_y

    @classmethod
    def from_corners(cls, left_top: Point, right_bottom: Point) -> 'Rect':
        return cls(left_top.x, right_bottom.y, right_bottom.x, left_top.y)

    def __eq__(self, other):
        if isinstance(other, Rect):
            return self.min_x == other.min_x\
                   and self.min_y == other.min_y\
                   and self.max_x == other.max_x\
                   and self.max_y == other.max_y
        return False

    def __repr__(self):
        return f'Rect({self.min_x}, {self.min_y}, {self.max_x}, {self.max_y})'

    @property
    def left_top(self) -> Point:
        return Point(self.min_x, self.max_y)

    @property
    def right_bottom(self) -> Point:
        return Point(self.max_x, self.min_y)

    def union(self, rect: 'Rect') -> 'Rect':
        return Rect(
            min_x=min(self.min_x, rect.min_x),
            min_y=min(self.min_y, rect.min_y),
            max_x=max(self.max_x, rect.max_x),
            max_y=max(self.max_y, rect.max_y)
        )

    def contains(self, rect: 'Rect') -> bool:
        return self.min_x <= rect.min_x and self.min_y <= rect.min_y\
            and rect.max_x <= self.max_x and rect.max_y <= self.max_y

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y

    def area(self) -> float:
        return self.width * self.height


def union(rect1: Optional[Rect], rect2: Optional[Rect]) -> Optional[Rect]:
    if rect1 is None:
        return rect2
    if rect2 is None:
        return rect1
    return rect1.union(rect2)


def union_all(rects: List[Rect]) -> Optional[Rect]:
    result = None
    for rect in rects:
        result = union(result, rect)
    return result
