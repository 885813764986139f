"""Ellipse geometry and growing of edge-point sets along elliptic hulls."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .edgepoint import EdgePoint, EdgePointCollection

_XOFF = (1, 1, 0, -1, -1, -1, 0, 1)
_YOFF = (0, -1, -1, -1, 0, 1, 1, 1)
_MIN_HULL_AXIS = 0.001


@dataclass(frozen=True)
class Ellipse:
    """An ellipse given by its center, semi-axes ``a`` and ``b`` and rotation angle."""

    center: tuple
    a: float
    b: float
    angle: float = 0.0
    _matrix: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        cx, cy = (float(v) for v in self.center)
        object.__setattr__(self, "center", (cx, cy))
        object.__setattr__(self, "a", float(self.a))
        object.__setattr__(self, "b", float(self.b))
        object.__setattr__(self, "angle", float(self.angle))
        if not (self.a > 0 and self.b > 0):
            raise ValueError("semi-axes must be positive")
        c, s = math.cos(self.angle), math.sin(self.angle)
        to_world = np.array([[c, -s, cx], [s, c, cy], [0.0, 0.0, 1.0]])
        to_local = np.linalg.inv(to_world)
        d = np.diag([1.0 / self.a**2, 1.0 / self.b**2, -1.0])
        q = to_local.T @ d @ to_local
        object.__setattr__(self, "_matrix", (q + q.T) / 2.0)

    def matrix(self) -> np.ndarray:
        """Return the 3x3 conic matrix; points inside give a negative form."""
        return self._matrix.copy()

    def center_h(self) -> np.ndarray:
        """Return the center as a homogeneous vector."""
        return np.array([self.center[0], self.center[1], 1.0])

    @classmethod
    def from_matrix(cls, q) -> "Ellipse":
        """Build an ellipse from a symmetric 3x3 conic matrix (any scale)."""
        q = np.asarray(q, dtype=float)
        if q.shape != (3, 3):
            raise ValueError("a conic matrix must be 3x3")
        q = (q + q.T) / 2.0
        a_mat = q[:2, :2]
        b_vec = q[:2, 2]
        try:
            center = -np.linalg.solve(a_mat, b_vec)
        except np.linalg.LinAlgError as exc:
            raise ValueError("the conic has no center") from exc
        f0 = q[2, 2] + b_vec @ center
        eigvals, eigvecs = np.linalg.eigh(a_mat)
        radii_sq = -f0 / eigvals
        if not np.all(np.isfinite(radii_sq)) or np.any(radii_sq <= 0):
            raise ValueError("the conic is not a real ellipse")
        a = math.sqrt(radii_sq[0])
        b = math.sqrt(radii_sq[1])
        direction = eigvecs[:, 0]
        angle = math.atan2(direction[1], direction[0])
        return cls((center[0], center[1]), a, b, angle)

    def transform(self, m) -> "Ellipse":
        """Return the ellipse whose conic matrix is ``m.T @ Q @ m``."""
        m = np.asarray(m, dtype=float)
        return Ellipse.from_matrix(m.T @ self._matrix @ m)

    def scaled(self, factor) -> "Ellipse":
        """Return the ellipse with center and semi-axes multiplied by ``factor``."""
        return Ellipse(
            (self.center[0] * factor, self.center[1] * factor),
            self.a * factor,
            self.b * factor,
            self.angle,
        )


def _homogeneous(point) -> np.ndarray:
    if isinstance(point, EdgePoint):
        return point.homogeneous()
    v = np.asarray(point, dtype=float).ravel()
    if v.size == 2:
        return np.array([v[0], v[1], 1.0])
    if v.size >= 3:
        return v[:3]
    raise ValueError("a point needs at least two coordinates")


def is_in_ellipse(ellipse: Ellipse, point) -> bool:
    """Return True when ``point`` lies strictly inside ``ellipse``."""
    p = _homogeneous(point)
    q = ellipse.matrix()
    c = ellipse.center_h()
    return float(p @ q @ p) * float(c @ q @ c) > 0


def is_overlapping_ellipses(ellipse1: Ellipse, ellipse2: Ellipse) -> bool:
    """Return True when either ellipse contains the center of the other."""
    return is_in_ellipse(ellipse1, ellipse2.center) or is_in_ellipse(ellipse2, ellipse1.center)


def is_in_hull(q_in: Ellipse, q_out: Ellipse, point) -> bool:
    """Return True when ``point`` lies between the inner and outer ellipse."""
    p = _homogeneous(point)
    s1 = float(p @ q_in.matrix() @ p)
    s2 = float(p @ q_out.matrix() @ p)
    return s1 * s2 < 0


def is_on_the_same_side(p1, p2, line) -> bool:
    """Return True when both points lie strictly on the same side of ``line``."""
    line = np.asarray(line, dtype=float)
    return float(_homogeneous(p1) @ line) * float(_homogeneous(p2) @ line) > 0


def compute_hull(ellipse: Ellipse, delta) -> tuple[Ellipse, Ellipse]:
    """Return the inner and outer ellipses at distance ``delta`` from ``ellipse``."""
    q_in = Ellipse(
        ellipse.center,
        max(ellipse.a - delta, _MIN_HULL_AXIS),
        max(ellipse.b - delta, _MIN_HULL_AXIS),
        ellipse.angle,
    )
    q_out = Ellipse(ellipse.center, ellipse.a + delta, ellipse.b + delta, ellipse.angle)
    return q_in, q_out


def connected_points(
    pts: list,
    run_id: int,
    collection: EdgePointCollection,
    q_in: Ellipse,
    q_out: Ellipse,
    x: int,
    y: int,
) -> list:
    """Append to ``pts`` the edge points 8-connected to ``(x, y)`` inside the hull.

    Only points whose gradient points away from the hull center and that are
    not yet marked for ``run_id`` are taken; each one taken is marked. The
    order is a depth-first walk over the eight neighbours. Returns ``pts``.
    """
    start = collection.get(x, y)
    if start is None:
        raise ValueError(f"no edge point at ({x}, {y})")
    mask = 1 << run_id
    start.processed |= mask
    cx, cy = q_in.center

    stack = [(int(x), int(y), 0)]
    while stack:
        px, py, i = stack.pop()
        if i >= len(_XOFF):
            continue
        stack.append((px, py, i + 1))
        sx, sy = px + _XOFF[i], py + _YOFF[i]
        if not collection.contains(sx, sy):
            continue
        e = collection.get(sx, sy)
        if e is None or not is_in_hull(q_in, q_out, e) or e.processed & mask:
            continue
        if e.dx * (cx - e.x) + e.dy * (cy - e.y) < 0:
            pts.append(e)
            e.processed |= mask
            stack.append((sx, sy, 0))
    return pts


def ellipse_hull(
    collection: EdgePointCollection,
    pts: list,
    ellipse: Ellipse,
    delta,
    run_id: int,
) -> list:
    """Grow ``pts`` with the points connected to its initial members in the hull."""
    q_in, q_out = compute_hull(ellipse, delta)
    for e in pts[: len(pts)]:
        connected_points(pts, run_id, collection, q_in, q_out, e.x, e.y)
    return pts


def _unit(vx: float, vy: float) -> tuple[float, float]:
    norm = math.hypot(vx, vy)
    if norm == 0:
        return math.nan, math.nan
    return vx / norm, vy / norm


def add_candidate_flow_to_cctag(
    collection: EdgePointCollection,
    filtered_children: Sequence[EdgePoint],
    outer_ellipse_points: Sequence[EdgePoint],
    outer_ellipse: Ellipse,
    num_circles: int,
):
    """Collect the points of each circle by walking the field lines inward.

    Returns ``num_circles`` lists of ``(x, y, dx, dy)`` tuples, innermost
    circle first and the outer ellipse points last, or None when a point falls
    outside the outer ellipse or on the wrong side of the center, or when too
    many inner points have their gradient turned the wrong way.
    """
    if num_circles < 1:
        raise ValueError("num_circles must be at least 1")
    cctag_points: list[list[tuple]] = [[] for _ in range(num_circles)]
    cctag_points[-1] = [(float(e.x), float(e.y), e.dx, e.dy) for e in outer_ellipse_points]

    processed: list[EdgePoint] = []
    cx, cy = outer_ellipse.center
    n_gradient_out = 0
    n_added = 0

    def release():
        for point in processed:
            collection.set_processed_aux(point, False)

    for child in filtered_children:
        direction = -1
        p = child
        outer_point = (float(child.x), float(child.y))
        la = outer_point[0] - cx
        lb = outer_point[1] - cy
        line = (la, lb, -la * cx - lb * cy)

        for j in range(1, num_circles):
            p = collection.before(p) if direction == -1 else collection.after(p)
            if p is None:
                release()
                raise ValueError("field line ends before reaching every circle")
            if not collection.test_processed_aux(p):
                collection.set_processed_aux(p, True)
                processed.append(p)

                gx, gy = _unit(p.dx, p.dy)
                tx, ty = _unit(cx - p.x, cy - p.y)
                point = (float(p.x), float(p.y), p.dx, p.dy)

                if is_in_ellipse(outer_ellipse, point[:2]) and is_on_the_same_side(
                    outer_point, point[:2], line
                ):
                    if -direction * (gx * tx + gy * ty) < -0.5 and j >= num_circles - 2:
                        n_gradient_out += 1
                    cctag_points[num_circles - j - 1].append(point)
                    if j >= num_circles - 2:
                        n_added += 1
                else:
                    release()
                    return None
            direction = -direction

    release()
    if n_added and n_gradient_out / n_added > 0.5:
        return None
    return cctag_points