"""
Cubic spline solver.

Builds the dense linear system for a piecewise-cubic interpolating spline over
one coordinate axis and solves it with an LU factorization.

Unified API:
    solve(values)                 # -> List[Polynomial], one per segment
    solve_coefficients(values)    # -> (segments, 4) array on the input backend

Every segment i contributes four unknowns ``[a_i, b_i, c_i, d_i]`` stored at
columns ``4*i .. 4*i + 3``. The equations are emitted in a fixed order:

    1. S_i(0)   = values[i]                    (each segment)
    2. S_i(1)   = values[i + 1]                (each segment)
    3. S_i'(1)  = S_{i+1}'(0)                  (each interior joint)
    4. S_i''(1) = S_{i+1}''(0)                 (each interior joint)
    5. start condition on the first segment
    6. end condition on the last segment

Supported boundary conditions:
    - "clamped": S_0'(0) = start_derivative, S_last'(1) = end_derivative (default 0)
    - "natural": S_0''(0) = 0, S_last''(1) = 0
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import List, Sequence, Union

import numpy as np
import torch
from scipy.linalg import LinAlgError, LinAlgWarning, lu_factor, lu_solve

from ._core import (
    ArrayLike,
    Backend,
    BoundaryCondition,
    COEFFS_PER_SEGMENT,
    CoefficientSlot,
    MalformedSystemError,
    PIVOT_TOLERANCE,
    SingularSystemError,
    all_finite,
    get_backend,
    to_backend,
    zeros,
)
from .logger import get_logger
from .polynomial import Polynomial

logger = get_logger(__name__)

A, B, C, D = CoefficientSlot.A, CoefficientSlot.B, CoefficientSlot.C, CoefficientSlot.D


# =============================================================================
# Constraint Model
# =============================================================================


@dataclass(frozen=True, slots=True)
class Term:
    """One ``weight * unknown`` summand, the unknown addressed by segment and slot."""

    weight: float
    segment: int
    slot: CoefficientSlot

    @property
    def column(self) -> int:
        return self.segment * COEFFS_PER_SEGMENT + int(self.slot)


@dataclass(slots=True)
class Constraint:
    """Linear equation ``sum(terms) = rhs``."""

    terms: List[Term]
    rhs: Union[float, ArrayLike]


@dataclass(slots=True, eq=False)
class LinearSystem:
    """Dense square system ``matrix @ x = rhs``, built fresh for each solve."""

    matrix: ArrayLike  # (4*S, 4*S)
    rhs: ArrayLike  # (4*S,)
    n_segments: int

    @property
    def backend(self) -> Backend:
        return get_backend(self.matrix)

    @property
    def n_unknowns(self) -> int:
        return self.n_segments * COEFFS_PER_SEGMENT


# =============================================================================
# System Construction
# =============================================================================


def _check_boundary(boundary, start_derivative, end_derivative) -> BoundaryCondition:
    """Validate the boundary option; end slopes only apply to "clamped"."""
    boundary = BoundaryCondition(boundary)
    if boundary == BoundaryCondition.NATURAL and (
        bool(start_derivative != 0) or bool(end_derivative != 0)
    ):
        raise ValueError(
            f"start_derivative/end_derivative only apply to the clamped boundary, "
            f"got {start_derivative}, {end_derivative} with {boundary.value!r}"
        )
    return boundary


def build_constraints(
    values: Union[Sequence[float], ArrayLike],
    boundary: Union[BoundaryCondition, str] = BoundaryCondition.CLAMPED,
    start_derivative: Union[float, ArrayLike] = 0.0,
    end_derivative: Union[float, ArrayLike] = 0.0,
) -> List[Constraint]:
    """
    Emit the spline equations for ``values`` in their fixed order.

    Args:
        values: Ordered coordinates, at least 2 of them
        boundary: "clamped" or "natural"
        start_derivative, end_derivative: Slopes for "clamped"

    Returns:
        ``4 * (len(values) - 1)`` constraints
    """
    boundary = _check_boundary(boundary, start_derivative, end_derivative)
    n_segments = len(values) - 1
    if n_segments < 1:
        raise ValueError("Need at least 2 values to build a spline system")
    last = n_segments - 1
    constraints: List[Constraint] = []

    # Interpolation
    for i in range(n_segments):
        constraints.append(Constraint([Term(1.0, i, A)], values[i]))
    for i in range(n_segments):
        constraints.append(
            Constraint([Term(1.0, i, A), Term(1.0, i, B), Term(1.0, i, C), Term(1.0, i, D)], values[i + 1])
        )

    # Continuity at interior joints
    for i in range(n_segments - 1):
        constraints.append(
            Constraint([Term(1.0, i, B), Term(2.0, i, C), Term(3.0, i, D), Term(-1.0, i + 1, B)], 0.0)
        )
    for i in range(n_segments - 1):
        constraints.append(Constraint([Term(2.0, i, C), Term(6.0, i, D), Term(-2.0, i + 1, C)], 0.0))

    # End conditions
    if boundary == BoundaryCondition.CLAMPED:
        constraints.append(Constraint([Term(1.0, 0, B)], start_derivative))
        constraints.append(
            Constraint([Term(1.0, last, B), Term(2.0, last, C), Term(3.0, last, D)], end_derivative)
        )
    else:
        constraints.append(Constraint([Term(2.0, 0, C)], 0.0))
        constraints.append(Constraint([Term(2.0, last, C), Term(6.0, last, D)], 0.0))

    return constraints


def assemble_system(
    constraints: Sequence[Constraint],
    n_segments: int,
    backend: Backend = "numpy",
    dtype=None,
    device=None,
) -> LinearSystem:
    """
    Scatter constraint terms into a dense matrix and right-hand side.

    Raises:
        MalformedSystemError: If the number of constraints differs from the
            number of unknowns.
    """
    n_unknowns = n_segments * COEFFS_PER_SEGMENT
    if len(constraints) != n_unknowns:
        raise MalformedSystemError(
            f"Spline system is not square: {len(constraints)} constraints for {n_unknowns} unknowns"
        )

    matrix = zeros((n_unknowns, n_unknowns), backend, dtype=dtype, device=device)
    for row, constraint in enumerate(constraints):
        for term in constraint.terms:
            matrix[row, term.column] += term.weight

    if backend == "torch":
        # Stacking keeps the autograd graph of tensor-valued right-hand sides.
        rhs = torch.stack([
            torch.as_tensor(c.rhs, dtype=matrix.dtype, device=matrix.device).reshape(())
            for c in constraints
        ])
    else:
        rhs = np.array([float(c.rhs) for c in constraints], dtype=matrix.dtype)

    return LinearSystem(matrix=matrix, rhs=rhs, n_segments=n_segments)


# =============================================================================
# Solving
# =============================================================================


def _check_pivots(pivots: np.ndarray, scale: float) -> None:
    smallest = float(np.min(np.abs(pivots)))
    if smallest <= PIVOT_TOLERANCE * max(scale, 1.0):
        raise SingularSystemError(f"Spline system is singular (smallest LU pivot {smallest:.3e})")


def solve_system(system: LinearSystem) -> ArrayLike:
    """
    Solve ``system`` with a dense LU factorization.

    Returns:
        Solution vector (4*S,) on the system's backend

    Raises:
        SingularSystemError: If the matrix is singular or the result is not finite.
    """
    if system.backend == "numpy":
        with warnings.catch_warnings():
            warnings.simplefilter("error", LinAlgWarning)
            try:
                lu, piv = lu_factor(system.matrix)
            except (LinAlgError, LinAlgWarning) as exc:
                raise SingularSystemError(f"LU factorization failed: {exc}") from exc
        _check_pivots(np.diag(lu), float(np.abs(system.matrix).max()))
        x = lu_solve((lu, piv), system.rhs)
    else:
        lu, piv, info = torch.linalg.lu_factor_ex(system.matrix)
        if int(info) != 0:
            raise SingularSystemError(f"LU factorization failed (info={int(info)})")
        _check_pivots(
            torch.diagonal(lu).detach().cpu().numpy(),
            float(system.matrix.abs().max()),
        )
        x = torch.linalg.lu_solve(lu, piv, system.rhs.unsqueeze(-1)).squeeze(-1)

    if not all_finite(x):
        raise SingularSystemError("Spline system produced non-finite coefficients")
    return x


def solve_coefficients(
    values: Union[Sequence[float], ArrayLike],
    boundary: Union[BoundaryCondition, str] = BoundaryCondition.CLAMPED,
    start_derivative: Union[float, ArrayLike] = 0.0,
    end_derivative: Union[float, ArrayLike] = 0.0,
) -> ArrayLike:
    """
    Compute raw spline coefficients for one axis.

    Args:
        values: Ordered coordinates (N,). Lists and NumPy arrays solve on NumPy,
            torch tensors on torch (gradients flow to ``values``).
        boundary: "clamped" (default) or "natural"
        start_derivative, end_derivative: Slopes for "clamped"

    Returns:
        Coefficients (N-1, 4) ordered [a, b, c, d]; (0, 4) when N < 2

    Example:
        >>> coeffs = solve_coefficients([0.0, 1.0, 0.0])
        >>> coeffs.shape
        (2, 4)
    """
    backend = get_backend(values)
    values = to_backend(values, backend)
    if backend == "torch" and not values.is_floating_point():
        values = values.to(torch.float64)
    dtype = values.dtype
    device = values.device if backend == "torch" else None

    if values.ndim != 1:
        raise ValueError(f"values must be 1-D, got shape {tuple(values.shape)}")
    if not all_finite(values):
        raise ValueError("values must be finite")

    _check_boundary(boundary, start_derivative, end_derivative)
    n = values.shape[0]
    if n < 2:
        return zeros((0, COEFFS_PER_SEGMENT), backend, dtype=dtype, device=device)

    n_segments = n - 1
    constraints = build_constraints(values, boundary, start_derivative, end_derivative)
    system = assemble_system(constraints, n_segments, backend, dtype=dtype, device=device)
    logger.debug(
        "Solving %s spline system: %d segments, %d unknowns (%s)",
        BoundaryCondition(boundary).value, n_segments, system.n_unknowns, backend,
    )
    x = solve_system(system)
    return x.reshape(n_segments, COEFFS_PER_SEGMENT)


def solve(
    values: Union[Sequence[float], ArrayLike],
    boundary: Union[BoundaryCondition, str] = BoundaryCondition.CLAMPED,
    start_derivative: float = 0.0,
    end_derivative: float = 0.0,
) -> List[Polynomial]:
    """
    Solve the spline for one axis.

    Returns:
        One Polynomial per segment (``len(values) - 1`` of them), or an empty
        list when fewer than 2 values are given.
    """
    coeffs = solve_coefficients(values, boundary, start_derivative, end_derivative)
    if isinstance(coeffs, torch.Tensor):
        rows = coeffs.detach().cpu().tolist()
    else:
        rows = coeffs.tolist()
    return [Polynomial.from_coefficients(row) for row in rows]
