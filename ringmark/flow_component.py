"""Snapshots of a flow component: outer points, field lines and inner arc."""

from __future__ import annotations

from typing import Iterable, Sequence

from .edgepoint import EdgePoint, EdgePointCollection
from .ellipse_growing import Ellipse


def trace_field_line(
    collection: EdgePointCollection, start: EdgePoint, n_circles: int
) -> list[EdgePoint]:
    """Return copies of the ``n_circles`` points met along the field line from ``start``.

    The walk goes to the point linked before, then after, alternating,
    beginning with "before". Raises ValueError when the line ends too early.
    """
    if n_circles < 1:
        raise ValueError("n_circles must be at least 1")
    if start is None:
        raise ValueError("a field line needs a start point")
    line = [start.copy()]
    point = start
    direction = -1
    for _ in range(1, n_circles):
        point = collection.before(point) if direction == -1 else collection.after(point)
        if point is None:
            raise ValueError("field line ends before reaching every circle")
        line.append(point.copy())
        direction = -direction
    return line


class FlowComponent:
    """Copies of the edge points that make up one flow component."""

    def __init__(
        self,
        collection: EdgePointCollection,
        outer_ellipse_points: Sequence[EdgePoint],
        children: Iterable[EdgePoint],
        filtered_children: Iterable[EdgePoint],
        outer_ellipse: Ellipse,
        convex_edge_segment: Iterable[EdgePoint],
        seed: EdgePoint,
        n_circles: int,
    ):
        self.n_circles = int(n_circles)
        self.outer_ellipse = outer_ellipse
        self.seed = seed.copy()
        self.outer_ellipse_points = [e.copy() for e in outer_ellipse_points]
        self.convex_edge_segment = [e.copy() for e in convex_edge_segment]
        self.field_lines = [
            trace_field_line(collection, p, self.n_circles) for p in children
        ]
        self.filtered_field_lines = [
            trace_field_line(collection, p, self.n_circles) for p in filtered_children
        ]

    def __repr__(self) -> str:
        return (
            f"FlowComponent(seed=({self.seed.x}, {self.seed.y}), "
            f"outer_points={len(self.outer_ellipse_points)}, "
            f"field_lines={len(self.field_lines)}, "
            f"filtered_field_lines={len(self.filtered_field_lines)})"
        )