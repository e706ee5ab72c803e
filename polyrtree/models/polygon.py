from typing import List, Sequence
from .point import Point
from .line import Line
from .rect import Rect


class Polygon:
    """
    A polygon described by an ordered sequence of edges. The R-tree never looks at the shape itself; it only needs the
    containing rectangle, which is derived from the edge endpoints.
    """

    def __init__(self, edges: Sequence[Line]):
        if not edges:
            raise ValueError("A polygon requires at least one edge.")
        self.edges: List[Line] = list(edges)

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> 'Polygon':
        """
        Builds a closed polygon from its vertices. Consecutive vertices are joined by an edge, and the last vertex is
        joined back to the first.
        :param points: Polygon vertices, in order. At least two are required.
        """
        if len(points) < 2:
            raise ValueError(f"A polygon requires at least 2 points, got {len(points)}.")
        edges = [Line(points[i], points[(i + 1) % len(points)]) for i in range(len(points))]
        return cls(edges)

    def __repr__(self):
        num_edges = len(self.edges)
        suffix = 'edge' if num_edges == 1 else 'edges'
        return f'Polygon({hex(id(self))}, {num_edges} {suffix})'

    @property
    def points(self) -> List[Point]:
        return [edge.start for edge in self.edges]

    def get_containing_rect(self) -> Rect:
        """Returns the smallest axis-aligned rectangle containing every edge endpoint."""
        xs = [c for edge in self.edges for c in (edge.start.x, edge.end.x)]
        ys = [c for edge in self.edges for c in (edge.start.y, edge.end.y)]
        return Rect(min(xs), min(ys), max(xs), max(ys))
