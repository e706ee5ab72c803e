from .point import Point


class Line:
    """A polygon edge running from start to end."""

    def __init__(self, start: Point, end: Point):
        self.start = start
        self.end = end

    def __eq__(self, other):
        if isinstance(other, Line):
            return self.start == other.start and self.end == other.end
        return False

    def __repr__(self):
        return f'Line({self.start}, {self.end})'
