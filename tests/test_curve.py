"""
Tests for the 2D curve pipeline: ControlPoints, solve_curve and SplineCurve.
"""
import logging

import numpy as np
import pytest
import torch

from uni_spline import (
    SAMPLES_PER_SEGMENT,
    ControlPoints,
    Segment,
    SplineCurve,
    solve,
    solve_curve,
)

RTOL = 1e-9
ATOL = 1e-9

POINTS = [(10.0, 20.0), (40.0, 80.0), (90.0, 30.0)]


class TestControlPoints:
    def test_append_and_iterate(self):
        pts = ControlPoints()
        pts.append(1, 2)
        pts.append(3.5, -4)
        assert len(pts) == 2
        assert list(pts) == [(1.0, 2.0), (3.5, -4.0)]
        assert pts[1] == (3.5, -4.0)
        assert pts.xs() == [1.0, 3.5]
        assert pts.ys() == [2.0, -4.0]

    def test_extend_preserves_order(self):
        pts = ControlPoints(POINTS)
        pts.extend([(0.0, 0.0)])
        assert list(pts) == POINTS + [(0.0, 0.0)]

    def test_as_array(self):
        arr = ControlPoints(POINTS).as_array()
        assert arr.shape == (3, 2)
        np.testing.assert_array_equal(arr, np.array(POINTS))

    def test_as_array_empty(self):
        assert ControlPoints().as_array().shape == (0, 2)

    def test_as_array_torch(self):
        arr = ControlPoints(POINTS).as_array(backend="torch")
        assert isinstance(arr, torch.Tensor)
        assert arr.dtype == torch.float64

    def test_append_only(self):
        pts = ControlPoints(POINTS)
        for name in ("remove", "pop", "insert", "clear", "sort", "__setitem__", "__delitem__"):
            assert not hasattr(pts, name)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_rejects_non_finite(self, bad):
        with pytest.raises(ValueError):
            ControlPoints().append(bad, 0.0)

    def test_logs_added_point(self, caplog):
        caplog.set_level(logging.INFO, logger="uni_spline")
        ControlPoints().append(1.0, 2.0)
        assert "Adding point at 1.0, 2.0" in caplog.text


class TestSolveCurve:
    @pytest.mark.parametrize("points", [[], [(5.0, 5.0)]])
    def test_degenerate(self, points):
        assert solve_curve(points) == []

    def test_pairs_axes(self):
        segments = solve_curve(POINTS)
        xs = solve([p[0] for p in POINTS])
        ys = solve([p[1] for p in POINTS])
        assert segments == [Segment(x, y) for x, y in zip(xs, ys)]

    def test_input_kinds_agree(self):
        expected = solve_curve(POINTS)
        assert solve_curve(np.array(POINTS)) == expected
        assert solve_curve(ControlPoints(POINTS)) == expected
        assert solve_curve(iter(POINTS)) == expected

    def test_torch_input(self):
        expected = solve_curve(POINTS)
        segments = solve_curve(torch.tensor(POINTS, dtype=torch.float64))
        for got, want in zip(segments, expected):
            np.testing.assert_allclose(got.x.coefficients(), want.x.coefficients(), rtol=RTOL, atol=ATOL)
            np.testing.assert_allclose(got.y.coefficients(), want.y.coefficients(), rtol=RTOL, atol=ATOL)

    def test_segment_endpoints(self):
        segments = solve_curve(POINTS)
        for k, seg in enumerate(segments):
            np.testing.assert_allclose(seg.point(0.0), POINTS[k], rtol=RTOL, atol=ATOL)
            np.testing.assert_allclose(seg.point(1.0), POINTS[k + 1], rtol=RTOL, atol=ATOL)

    def test_flat_ends(self):
        segments = solve_curve(POINTS)
        np.testing.assert_allclose(segments[0].tangent(0.0), (0.0, 0.0), atol=ATOL)
        np.testing.assert_allclose(segments[-1].tangent(1.0), (0.0, 0.0), atol=ATOL)

    def test_custom_tangents(self):
        segments = solve_curve(POINTS, start_tangent=(1.0, 2.0), end_tangent=(-3.0, 0.5))
        np.testing.assert_allclose(segments[0].tangent(0.0), (1.0, 2.0), rtol=RTOL, atol=ATOL)
        np.testing.assert_allclose(segments[-1].tangent(1.0), (-3.0, 0.5), rtol=RTOL, atol=ATOL)

    @pytest.mark.parametrize("tangents", [
        {"start_tangent": (1.0, 0.0)},
        {"end_tangent": (0.0, -1.0)},
    ])
    def test_natural_rejects_tangents(self, tangents):
        with pytest.raises(ValueError):
            solve_curve(POINTS, boundary="natural", **tangents)

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            solve_curve(np.zeros((4, 3)))


class TestSplineCurve:
    def test_growing_curve(self):
        curve = SplineCurve()
        assert curve.update().shape == (0, 2)
        for k, (x, y) in enumerate(POINTS):
            curve.add_point(x, y)
            assert curve.update().shape == (SAMPLES_PER_SEGMENT * k, 2)
            assert len(curve.segments) == k

    def test_samples_hit_control_points(self):
        curve = SplineCurve(POINTS)
        out = curve.update()
        np.testing.assert_allclose(out[0], POINTS[0], rtol=RTOL, atol=ATOL)
        np.testing.assert_allclose(out[SAMPLES_PER_SEGMENT], POINTS[1], rtol=RTOL, atol=ATOL)
        np.testing.assert_allclose(out[-1], POINTS[-1], rtol=RTOL, atol=ATOL)

    def test_markers(self):
        curve = SplineCurve(POINTS)
        np.testing.assert_array_equal(curve.markers(), np.array(POINTS))

    def test_natural_boundary(self):
        curve = SplineCurve(POINTS, boundary="natural", samples_per_segment=10)
        assert curve.update().shape == (20, 2)
        np.testing.assert_allclose(curve.segments[0].x.second_derivative(0.0), 0.0, atol=ATOL)

    def test_update_is_repeatable(self):
        curve = SplineCurve(POINTS)
        first = curve.update().copy()
        np.testing.assert_array_equal(curve.update(), first)
