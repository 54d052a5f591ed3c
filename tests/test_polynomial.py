"""
Tests for the Polynomial and Segment value types.
"""
import dataclasses

import numpy as np
import pytest
import torch

from uni_spline import ParameterDomainError, Polynomial, Segment

RTOL = 1e-12
ATOL = 1e-12


@pytest.fixture
def poly():
    # 1 + 2t + 3t² + 4t³
    return Polynomial(1.0, 2.0, 3.0, 4.0)


class TestEvaluate:
    def test_endpoints(self, poly):
        assert poly.evaluate(0.0) == 1.0
        assert poly.evaluate(1.0) == 10.0

    def test_interior(self, poly):
        assert poly.evaluate(0.5) == pytest.approx(1 + 1 + 0.75 + 0.5)

    def test_numpy_vectorized(self, poly):
        t = np.array([0.0, 0.5, 1.0])
        np.testing.assert_allclose(poly.evaluate(t), [1.0, 3.25, 10.0], rtol=RTOL, atol=ATOL)

    def test_torch_vectorized(self, poly):
        t = torch.tensor([0.0, 0.5, 1.0], dtype=torch.float64)
        out = poly.evaluate(t)
        assert isinstance(out, torch.Tensor)
        np.testing.assert_allclose(out.numpy(), [1.0, 3.25, 10.0], rtol=RTOL, atol=ATOL)


class TestDerivatives:
    def test_first(self, poly):
        assert poly.derivative(0.0) == 2.0
        assert poly.derivative(0.5) == pytest.approx(2 + 3 + 3)
        assert poly.derivative(1.0) == 20.0

    def test_second(self, poly):
        assert poly.second_derivative(0.0) == 6.0
        assert poly.second_derivative(1.0) == 30.0

    def test_third_is_constant(self, poly):
        assert poly.third_derivative() == 24.0

    def test_smoothstep_derivative_array(self):
        # 3t² - 2t³
        p = Polynomial(0.0, 0.0, 3.0, -2.0)
        assert p.evaluate(1.0) == 1.0
        np.testing.assert_allclose(
            p.derivative(np.linspace(0, 1, 5)), [0.0, 1.125, 1.5, 1.125, 0.0], rtol=RTOL, atol=ATOL
        )

    def test_matches_finite_difference(self, poly):
        h = 1e-6
        t = 0.3
        numeric = (poly.evaluate(t + h) - poly.evaluate(t - h)) / (2 * h)
        assert poly.derivative(t) == pytest.approx(numeric, rel=1e-8)


class TestDomain:
    @pytest.mark.parametrize("t", [-1e-9, 1.0 + 1e-9, -5.0, 2.0, float("nan")])
    def test_rejects_out_of_range(self, poly, t):
        with pytest.raises(ParameterDomainError):
            poly.evaluate(t)
        with pytest.raises(ParameterDomainError):
            poly.derivative(t)
        with pytest.raises(ParameterDomainError):
            poly.second_derivative(t)

    def test_rejects_array_with_one_bad_value(self, poly):
        with pytest.raises(ParameterDomainError):
            poly.evaluate(np.array([0.0, 0.5, 1.5]))

    def test_rejects_bad_tensor(self, poly):
        with pytest.raises(ParameterDomainError):
            poly.evaluate(torch.tensor([-0.5, 0.5]))

    def test_is_value_error(self):
        assert issubclass(ParameterDomainError, ValueError)


class TestValueSemantics:
    def test_frozen(self, poly):
        with pytest.raises(dataclasses.FrozenInstanceError):
            poly.a = 5.0

    def test_equality(self):
        assert Polynomial(1.0, 2.0, 3.0, 4.0) == Polynomial(1.0, 2.0, 3.0, 4.0)

    def test_from_coefficients(self):
        p = Polynomial.from_coefficients(np.array([1, 2, 3, 4]))
        assert p.coefficients() == (1.0, 2.0, 3.0, 4.0)
        assert all(isinstance(c, float) for c in p.coefficients())

    def test_from_coefficients_wrong_length(self):
        with pytest.raises(ValueError):
            Polynomial.from_coefficients([1.0, 2.0, 3.0])


class TestSegment:
    def test_unpacks_as_pair(self):
        px = Polynomial(0.0, 0.0, 3.0, -2.0)
        py = Polynomial(5.0, 0.0, 0.0, 0.0)
        x, y = Segment(px, py)
        assert x is px and y is py

    def test_point_and_tangent(self):
        seg = Segment(Polynomial(0.0, 0.0, 3.0, -2.0), Polynomial(5.0, 1.0, 0.0, 0.0))
        assert seg.point(1.0) == (1.0, 6.0)
        assert seg.tangent(0.0) == (0.0, 1.0)
