import math

import numpy as np
import pytest

from ringmark.edgepoint import EdgePointCollection
from ringmark.ellipse_growing import (
    Ellipse,
    add_candidate_flow_to_cctag,
    compute_hull,
    connected_points,
    ellipse_hull,
    is_in_ellipse,
    is_in_hull,
    is_on_the_same_side,
    is_overlapping_ellipses,
)


def _ring_collection(cx=20, cy=20, radius=10, size=41):
    collection = EdgePointCollection(size, size)
    seen = set()
    for k in range(720):
        t = 2 * math.pi * k / 720
        x = int(round(cx + radius * math.cos(t)))
        y = int(round(cy + radius * math.sin(t)))
        if (x, y) not in seen:
            seen.add((x, y))
            collection.add_point(x, y, x - cx, y - cy)
    return collection, seen


def test_matrix_sign_inside_and_on_boundary():
    e = Ellipse((4.0, -2.0), 5.0, 2.0, 0.4)
    q = e.matrix()
    c = e.center_h()
    assert c @ q @ c < 0
    bx = 4.0 + 5.0 * math.cos(0.4)
    by = -2.0 + 5.0 * math.sin(0.4)
    p = np.array([bx, by, 1.0])
    assert abs(p @ q @ p) < 1e-9


def test_invalid_axes_raise():
    with pytest.raises(ValueError):
        Ellipse((0, 0), 0.0, 1.0, 0.0)


def test_from_matrix_round_trip():
    e = Ellipse((3.0, 7.0), 6.0, 3.0, 0.3)
    back = Ellipse.from_matrix(e.matrix() * 2.5)
    assert back.center == pytest.approx(e.center)
    assert back.a == pytest.approx(6.0)
    assert back.b == pytest.approx(3.0)
    assert np.allclose(back.matrix(), e.matrix())


def test_from_matrix_rejects_hyperbola():
    with pytest.raises(ValueError):
        Ellipse.from_matrix(np.diag([1.0, -1.0, -1.0]))


def test_transform_identity_and_translation():
    e = Ellipse((3.0, 7.0), 6.0, 3.0, 0.3)
    same = e.transform(np.eye(3))
    assert np.allclose(same.matrix(), e.matrix())
    t = np.array([[1.0, 0.0, 5.0], [0.0, 1.0, -3.0], [0.0, 0.0, 1.0]])
    moved = e.transform(np.linalg.inv(t))
    expected = Ellipse((8.0, 4.0), 6.0, 3.0, 0.3)
    assert moved.center == pytest.approx(expected.center)
    assert np.allclose(moved.matrix(), expected.matrix())


def test_scaled():
    e = Ellipse((1.0, 2.0), 3.0, 1.5, 0.2).scaled(2.0)
    assert e.center == pytest.approx((2.0, 4.0))
    assert (e.a, e.b, e.angle) == pytest.approx((6.0, 3.0, 0.2))


def test_is_in_ellipse_and_overlap():
    e = Ellipse((0.0, 0.0), 4.0, 2.0, 0.0)
    assert is_in_ellipse(e, (3.0, 0.0))
    assert not is_in_ellipse(e, (0.0, 3.0))
    far = Ellipse((20.0, 0.0), 4.0, 2.0, 0.0)
    near = Ellipse((3.0, 0.0), 1.0, 1.0, 0.0)
    assert not is_overlapping_ellipses(e, far)
    assert is_overlapping_ellipses(e, near)
    assert is_overlapping_ellipses(near, e)


def test_compute_hull_and_is_in_hull():
    e = Ellipse((0.0, 0.0), 10.0, 5.0, 0.0)
    q_in, q_out = compute_hull(e, 2.0)
    assert (q_in.a, q_in.b) == pytest.approx((8.0, 3.0))
    assert (q_out.a, q_out.b) == pytest.approx((12.0, 7.0))
    assert is_in_hull(q_in, q_out, (10.0, 0.0))
    assert not is_in_hull(q_in, q_out, (0.0, 0.0))
    assert not is_in_hull(q_in, q_out, (20.0, 0.0))


def test_compute_hull_keeps_inner_axes_positive():
    q_in, _ = compute_hull(Ellipse((0.0, 0.0), 1.0, 1.0, 0.0), 5.0)
    assert q_in.a == pytest.approx(0.001)
    assert q_in.b == pytest.approx(0.001)


def test_is_on_the_same_side():
    line = (1.0, 0.0, -5.0)  # x = 5
    assert is_on_the_same_side((6.0, 0.0), (9.0, 3.0), line)
    assert not is_on_the_same_side((6.0, 0.0), (1.0, 3.0), line)


def test_connected_points_collects_whole_ring():
    collection, seen = _ring_collection()
    stray = collection.add_point(2, 2, -1, -1)
    q_in, q_out = compute_hull(Ellipse((20, 20), 10, 10, 0), 3.0)
    pts = connected_points([], 0, collection, q_in, q_out, 30, 20)
    found = {(p.x, p.y) for p in pts}
    assert len(found) == len(pts)
    assert found | {(30, 20)} == seen
    assert stray.processed == 0
    assert all(collection.get(x, y).processed & 1 for x, y in seen)


def test_connected_points_uses_run_bit():
    collection, seen = _ring_collection()
    q_in, q_out = compute_hull(Ellipse((20, 20), 10, 10, 0), 3.0)
    connected_points([], 3, collection, q_in, q_out, 30, 20)
    assert all(collection.get(x, y).processed == 1 << 3 for x, y in seen)


def test_connected_points_requires_edge_point():
    collection, _ = _ring_collection()
    q_in, q_out = compute_hull(Ellipse((20, 20), 10, 10, 0), 3.0)
    with pytest.raises(ValueError):
        connected_points([], 0, collection, q_in, q_out, 20, 20)


def test_connected_points_skips_inward_gradient():
    collection = EdgePointCollection(41, 41)
    collection.add_point(30, 20, 1, 0)
    collection.add_point(30, 21, -1, 0)
    q_in, q_out = compute_hull(Ellipse((20, 20), 10, 10, 0), 3.0)
    assert connected_points([], 0, collection, q_in, q_out, 30, 20) == []


def test_ellipse_hull_grows_from_seed():
    collection, seen = _ring_collection()
    start = collection.get(30, 20)
    start.processed |= 1
    pts = ellipse_hull(collection, [start], Ellipse((20, 20), 10, 10, 0), 3.0, 0)
    assert pts[0] is start
    assert {(p.x, p.y) for p in pts} == seen
    assert len(pts) == len(seen)


def _flow_collection(inner_xy, inner_grad):
    collection = EdgePointCollection(50, 50)
    child = collection.add_point(30, 20, 1, 0)
    inner = collection.add_point(inner_xy[0], inner_xy[1], *inner_grad)
    collection.link(child, inner, None)
    return collection, child, inner


def test_add_candidate_flow_success():
    collection, child, inner = _flow_collection((25, 20), (-1, 0))
    outer = collection.add_point(20, 30, 0, 1)
    result = add_candidate_flow_to_cctag(
        collection, [child], [outer], Ellipse((20, 20), 10.5, 10.5, 0), 2
    )
    assert result == [[(25.0, 20.0, -1.0, 0.0)], [(20.0, 30.0, 0.0, 1.0)]]
    assert not collection.test_processed_aux(inner)


def test_add_candidate_flow_point_outside_ellipse():
    collection, child, inner = _flow_collection((35, 20), (-1, 0))
    result = add_candidate_flow_to_cctag(
        collection, [child], [child], Ellipse((20, 20), 10.5, 10.5, 0), 2
    )
    assert result is None
    assert not collection.test_processed_aux(inner)


def test_add_candidate_flow_bad_gradient():
    collection, child, _ = _flow_collection((25, 20), (1, 0))
    result = add_candidate_flow_to_cctag(
        collection, [child], [child], Ellipse((20, 20), 10.5, 10.5, 0), 2
    )
    assert result is None


def test_add_candidate_flow_broken_field_line():
    collection = EdgePointCollection(50, 50)
    child = collection.add_point(30, 20, 1, 0)
    with pytest.raises(ValueError):
        add_candidate_flow_to_cctag(
            collection, [child], [child], Ellipse((20, 20), 10.5, 10.5, 0), 2
        )