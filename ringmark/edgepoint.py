"""Edge points with their image gradient, and a grid that indexes them by pixel."""

from __future__ import annotations

import math
from typing import Iterator

import numpy as np


class EdgePoint:
    """An edge pixel at integer coordinates together with its image gradient."""

    __slots__ = (
        "x",
        "y",
        "dx",
        "dy",
        "_norm_grad",
        "flow_length",
        "processed",
        "is_max",
        "n_segment_out",
    )

    def __init__(self, x, y, dx, dy):
        self.x = int(x)
        self.y = int(y)
        self.dx = float(dx)
        self.dy = float(dy)
        self._norm_grad = math.sqrt(self.dx * self.dx + self.dy * self.dy)
        self.flow_length = 0.0
        self.processed = 0  # bitfield, one bit per run
        self.is_max = -1
        self.n_segment_out = -1

    def gradient(self) -> np.ndarray:
        """Return the gradient as a two-element array ``(dx, dy)``."""
        return np.array([self.dx, self.dy], dtype=float)

    def norm_gradient(self) -> float:
        """Return the Euclidean norm of the gradient."""
        return self._norm_grad

    def copy(self) -> "EdgePoint":
        """Return a copy holding position and gradient; per-run state starts afresh."""
        return EdgePoint(self.x, self.y, self.dx, self.dy)

    def homogeneous(self) -> np.ndarray:
        """Return the point as the homogeneous vector ``(x, y, 1)``."""
        return np.array([self.x, self.y, 1.0], dtype=float)

    def __str__(self) -> str:
        return f"quiver( {self.x} , {self.y},{self.dx:g},{self.dy:g} ); "

    def __repr__(self) -> str:
        return f"EdgePoint(x={self.x}, y={self.y}, dx={self.dx:g}, dy={self.dy:g})"


def received_more_vote_than(p1: EdgePoint, p2: EdgePoint) -> bool:
    """Return True when ``p1`` received more votes than ``p2``."""
    return p1.is_max > p2.is_max


class EdgePointCollection:
    """Edge points of one image, addressable by pixel and linked along edges."""

    def __init__(self, width, height):
        if width < 0 or height < 0:
            raise ValueError("width and height must not be negative")
        self.width = int(width)
        self.height = int(height)
        self._grid: dict[tuple[int, int], EdgePoint] = {}
        self._before: dict[EdgePoint, EdgePoint] = {}
        self._after: dict[EdgePoint, EdgePoint] = {}
        self._processed_aux: set[EdgePoint] = set()

    @property
    def shape(self) -> tuple[int, int]:
        """The grid size as ``(width, height)``."""
        return self.width, self.height

    def __len__(self) -> int:
        return len(self._grid)

    def __iter__(self) -> Iterator[EdgePoint]:
        return iter(self._grid.values())

    def contains(self, x, y) -> bool:
        """Return True when ``(x, y)`` lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def add_point(self, x, y, dx, dy) -> EdgePoint:
        """Create an edge point at ``(x, y)`` and return it."""
        if not self.contains(x, y):
            raise ValueError(f"point ({x}, {y}) lies outside a {self.width}x{self.height} grid")
        key = (int(x), int(y))
        if key in self._grid:
            raise ValueError(f"pixel ({x}, {y}) already holds an edge point")
        point = EdgePoint(x, y, dx, dy)
        self._grid[key] = point
        return point

    def get(self, x, y) -> EdgePoint | None:
        """Return the edge point at ``(x, y)``, or None if there is none."""
        return self._grid.get((int(x), int(y)))

    def link(self, point, before, after) -> None:
        """Record the neighbours of ``point`` along the gradient field line."""
        if before is None:
            self._before.pop(point, None)
        else:
            self._before[point] = before
        if after is None:
            self._after.pop(point, None)
        else:
            self._after[point] = after

    def before(self, point) -> EdgePoint | None:
        """Return the point linked before ``point``, or None."""
        return self._before.get(point)

    def after(self, point) -> EdgePoint | None:
        """Return the point linked after ``point``, or None."""
        return self._after.get(point)

    def test_processed_aux(self, point) -> bool:
        """Return the auxiliary processed flag of ``point``."""
        return point in self._processed_aux

    def set_processed_aux(self, point, value) -> None:
        """Set or clear the auxiliary processed flag of ``point``."""
        if value:
            self._processed_aux.add(point)
        else:
            self._processed_aux.discard(point)


def edge_points_from_canny(collection, edges, dx, dy) -> list[EdgePoint]:
    """Add every pixel marked 255 in ``edges`` to ``collection``, in row-major order.

    ``edges``, ``dx`` and ``dy`` are arrays indexed ``[y, x]``. Returns the
    points that were added.
    """
    edges = np.asarray(edges)
    dx = np.asarray(dx)
    dy = np.asarray(dy)
    if edges.ndim != 2:
        raise ValueError("edges must be a two-dimensional array")
    if dx.shape != edges.shape or dy.shape != edges.shape:
        raise ValueError("edges, dx and dy must have the same shape")
    rows, cols = np.nonzero(edges == 255)
    return [
        collection.add_point(int(x), int(y), int(dx[y, x]), int(dy[y, x]))
        for y, x in zip(rows, cols)
    ]