"""Walking from an edge point along its gradient to the next edge point."""

from __future__ import annotations

import math

from .edgepoint import EdgePoint, EdgePointCollection


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def _update(d_major, d_minor, major, minor, e):
    """One Bresenham step along the major axis; returns the new state and steps."""
    if d_major == 0:
        a = math.nan if d_minor == 0 else math.inf
    else:
        a = abs(d_minor / d_major)
    stp_major = _sign(d_major)
    stp_minor = _sign(d_minor)
    e += a
    major += stp_major
    if e >= 0.5:
        minor += stp_minor
        e -= 1
    return major, minor, e, stp_major, stp_minor


def gradient_direction_descent(
    collection: EdgePointCollection,
    point: EdgePoint,
    direction: int,
    nmax: int,
    img_dx,
    img_dy,
    thr_gradient,
) -> EdgePoint | None:
    """Follow the gradient of ``point`` (scaled by ``direction``) to another edge point.

    ``img_dx`` and ``img_dy`` are indexed ``[y, x]``. Returns the first edge
    point met within ``nmax`` steps, or None when none is met or the walk
    leaves the image.
    """
    gx = float(img_dx[point.y, point.x])
    gy = float(img_dy[point.y, point.x])
    dx = direction * gx
    dy = direction * gy
    dx_ref, dy_ref = dx, dy
    y_major = abs(dy) > abs(dx)

    x, y = point.x, point.y
    e = 0.0
    stp_x = stp_y = 0
    n = 0

    def step():
        nonlocal x, y, e, stp_x, stp_y, n
        if y_major:
            y, x, e, stp_y, stp_x = _update(dy, dx, y, x, e)
        else:
            x, y, e, stp_x, stp_y = _update(dx, dy, x, y, e)
        n += 1

    step()
    if dx * dx + dy * dy > thr_gradient:
        new_dir = _sign(gx * dx_ref + gy * dy_ref)
        dx = new_dir * gx
        dy = new_dir * gy
    step()

    if not collection.contains(x, y):
        return None
    found = collection.get(x, y)
    if found is not None:
        return found

    while n <= nmax:
        step()
        if not collection.contains(x, y):
            return None
        found = collection.get(x, y)
        if found is not None:
            return found
        nx, ny = (x, y - stp_y) if y_major else (x - stp_x, y)
        if not collection.contains(nx, ny):
            return None
        found = collection.get(nx, ny)
        if found is not None:
            return found
    return None