"""
Piecewise-cubic interpolating splines supporting both NumPy and PyTorch backends.

API Styles
----------
This library provides three API styles:

1. Polynomial API (recommended for drawing and inspection):
   - One immutable Polynomial per segment, scalar or vectorized evaluation
   - Examples: solve(), sample(), solve_curve()

2. Coefficient API (recommended for batch work and autograd):
   - Raw (segments, 4) arrays that stay on the input backend
   - Examples: solve_coefficients(), sample_coefficients()

3. Class-based API (recommended for interactive editing):
   - ControlPoints: append-only input sequence
   - CurveSampler: reusable sample buffer, overwritten each cycle
   - SplineCurve: both of the above plus the solve-and-sample cycle

Usage Examples
--------------
One axis:
    polys = solve([0.0, 1.0, 0.0])
    polys[0].evaluate(1.0)       # 1.0
    polys[0].derivative(0.0)     # 0.0 (clamped end)

Curve through 2D points:
    segments = solve_curve([(0, 0), (1, 2), (3, 1)])
    polyline = sample(segments)  # (200, 2)

Interactive editing:
    curve = SplineCurve()
    curve.add_point(x, y)
    polyline = curve.update()

Conventions
-----------
- Segment parameter t is normalized to [0, 1]
- Coefficients are ordered [a, b, c, d] for a + b*t + c*t² + d*t³
- Default end condition: zero first derivative at both ends ("clamped")
- Sampling: 100 points per segment at t = i / 99
"""

# Types, constants and errors
from ._core import (
    ArrayLike,
    Backend,
    BoundaryCondition,
    COEFFS_PER_SEGMENT,
    CoefficientSlot,
    MalformedSystemError,
    ParameterDomainError,
    PIVOT_TOLERANCE,
    Point,
    SAMPLES_PER_SEGMENT,
    SingularSystemError,
)

# Value types
from .polynomial import Polynomial, Segment

# Solver
from .solver import (
    Constraint,
    LinearSystem,
    Term,
    assemble_system,
    build_constraints,
    solve,
    solve_coefficients,
    solve_system,
)

# Sampler
from .sampler import CurveSampler, sample, sample_coefficients

# Curve pipeline
from .curve import ControlPoints, SplineCurve, solve_curve

__all__ = [
    # Types
    "ArrayLike",
    "Backend",
    "Point",
    "BoundaryCondition",
    "CoefficientSlot",
    # Constants
    "COEFFS_PER_SEGMENT",
    "SAMPLES_PER_SEGMENT",
    "PIVOT_TOLERANCE",
    # Errors
    "MalformedSystemError",
    "SingularSystemError",
    "ParameterDomainError",
    # Value types
    "Polynomial",
    "Segment",
    # Solver
    "solve",
    "solve_coefficients",
    "build_constraints",
    "assemble_system",
    "solve_system",
    "Term",
    "Constraint",
    "LinearSystem",
    # Sampler
    "sample",
    "sample_coefficients",
    "CurveSampler",
    # Curve pipeline
    "ControlPoints",
    "SplineCurve",
    "solve_curve",
]

__version__ = "0.1.0"
