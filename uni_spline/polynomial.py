"""
Cubic polynomial value types.

A Polynomial holds the four coefficients of ``a + b*t + c*t² + d*t³`` over the
normalized segment parameter ``t`` in [0, 1]. A Segment pairs the X and Y
polynomials of one interval between consecutive control points.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple, Union

import numpy as np
import torch

from ._core import ArrayLike, ParameterDomainError

Param = Union[float, ArrayLike]


def _check_domain(t: Param) -> None:
    """Reject any parameter outside [0, 1] (NaN included)."""
    if isinstance(t, torch.Tensor):
        inside = bool(((t >= 0.0) & (t <= 1.0)).all())
    else:
        arr = np.asarray(t)
        inside = bool(np.all((arr >= 0.0) & (arr <= 1.0)))
    if not inside:
        raise ParameterDomainError(f"Polynomial parameter must lie in [0, 1], got {t}")


@dataclass(frozen=True, slots=True)
class Polynomial:
    """Cubic ``a + b*t + c*t² + d*t³`` defined for t in [0, 1].

    ``t`` may be a float, a NumPy array or a torch tensor; the result has the
    same kind.

    Example:
        >>> p = Polynomial(0.0, 0.0, 3.0, -2.0)
        >>> p.evaluate(1.0)
        1.0
        >>> p.derivative(np.linspace(0, 1, 5))
        array([0.   , 1.125, 1.5  , 1.125, 0.   ])
    """

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_coefficients(cls, coeffs: Sequence[float]) -> "Polynomial":
        """Build from an ``(a, b, c, d)`` sequence."""
        if len(coeffs) != 4:
            raise ValueError(f"Expected 4 coefficients, got {len(coeffs)}")
        a, b, c, d = (float(v) for v in coeffs)
        return cls(a, b, c, d)

    def coefficients(self) -> Tuple[float, float, float, float]:
        return (self.a, self.b, self.c, self.d)

    def evaluate(self, t: Param) -> Param:
        """Value at t (Horner's method)."""
        _check_domain(t)
        return self.a + t * (self.b + t * (self.c + t * self.d))

    def derivative(self, t: Param) -> Param:
        """First derivative ``b + 2c*t + 3d*t²``."""
        _check_domain(t)
        return self.b + t * (2.0 * self.c + 3.0 * self.d * t)

    def second_derivative(self, t: Param) -> Param:
        """Second derivative ``2c + 6d*t``."""
        _check_domain(t)
        return 2.0 * self.c + 6.0 * self.d * t

    def third_derivative(self) -> float:
        return 6.0 * self.d


class Segment(NamedTuple):
    """X and Y polynomials of one curve segment.

    Unpacks as ``(x, y)``, so a list of segments is a valid input to
    :func:`uni_spline.sampler.sample`.
    """

    x: Polynomial
    y: Polynomial

    def point(self, t: Param) -> Tuple[Param, Param]:
        return self.x.evaluate(t), self.y.evaluate(t)

    def tangent(self, t: Param) -> Tuple[Param, Param]:
        return self.x.derivative(t), self.y.derivative(t)
