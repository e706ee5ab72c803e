from typing import Optional
from .rect import Rect
from .polygon import Polygon


class MBRect(Rect):
    """
    Minimum bounding rectangle of an R-tree node. When the rectangle bounds a single inserted polygon, the polygon is
    kept alongside it, which is what marks the owning node as a leaf entry.
    """

    def __init__(self, min_x: float, min_y: float, max_x: float, max_y: float, polygon: Optional[Polygon] = None):
        super().__init__(min_x, min_y, max_x, max_y)
        self.polygon = polygon

    @classmethod
    def from_rect(cls, rect: Rect, polygon: Optional[Polygon] = None) -> 'MBRect':
        return cls(rect.min_x, rect.min_y, rect.max_x, rect.max_y, polygon=polygon)

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> 'MBRect':
        return cls.from_rect(polygon.get_containing_rect(), polygon=polygon)

    def __repr__(self):
        suffix = f', polygon={self.polygon}' if self.polygon is not None else ''
        return f'MBRect({self.min_x}, {self.min_y}, {self.max_x}, {self.max_y}{suffix})'

    def get_enlargement_area(self, rect: Rect) -> float:
        """Returns how much the area of this rectangle would grow if it were extended to cover the given rectangle."""
        return abs(self.union(rect).area() - self.area())

    def merge(self, rect: Rect) -> None:
        """Extends this rectangle in place so that it also covers the given rectangle."""
        self.min_x = min(self.min_x, rect.min_x)
        self.min_y = min(self.min_y, rect.min_y)
        self.max_x = max(self.max_x, rect.max_x)
        self.max_y = max(self.max_y, rect.max_y)
