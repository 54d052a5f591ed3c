"""
Core utilities: types, constants, errors, and backend-agnostic operations.

This module provides the foundational building blocks used throughout uni_spline.
All internal modules depend on this module.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import List, Literal, Tuple, Union

import numpy as np
import torch


# =============================================================================
# Type Definitions
# =============================================================================

ArrayLike = Union[np.ndarray, torch.Tensor]
Backend = Literal["numpy", "torch"]
Point = Tuple[float, float]


# =============================================================================
# Numerical Constants
# =============================================================================

COEFFS_PER_SEGMENT = 4  # a, b, c, d
SAMPLES_PER_SEGMENT = 100  # Points emitted per segment by the sampler
PIVOT_TOLERANCE = 1e-12  # Relative LU pivot magnitude treated as singular


# =============================================================================
# Enums
# =============================================================================


class BoundaryCondition(str, Enum):
    """End conditions applied at the first and last control point."""

    CLAMPED = "clamped"
    NATURAL = "natural"


class CoefficientSlot(IntEnum):
    """Position of each coefficient inside a segment's block of unknowns."""

    A = 0
    B = 1
    C = 2
    D = 3


# =============================================================================
# Errors
# =============================================================================


class MalformedSystemError(AssertionError):
    """Raised when the constraint count does not match the unknown count."""

    pass


class SingularSystemError(ArithmeticError):
    """Raised when the spline system cannot be solved reliably."""

    pass


class ParameterDomainError(ValueError):
    """Raised when a polynomial is evaluated outside t in [0, 1]."""

    pass


# =============================================================================
# Backend Detection
# =============================================================================


def get_backend(x) -> Backend:
    """Determine backend from input type."""
    return "torch" if isinstance(x, torch.Tensor) else "numpy"


def to_backend(
    x,
    backend: Backend,
    dtype=None,
    device=None,
) -> ArrayLike:
    """Convert array to specified backend."""
    if backend == "torch":
        if isinstance(x, torch.Tensor):
            return x.to(dtype=dtype, device=device) if dtype is not None or device is not None else x
        return torch.as_tensor(x, dtype=torch.float64 if dtype is None else dtype, device=device)
    if isinstance(x, torch.Tensor):
        x = x.detach().cpu().numpy()
    return np.asarray(x, dtype=np.float64 if dtype is None else dtype)


# =============================================================================
# Backend-Agnostic Operations
# =============================================================================


def stack(arrays: List[ArrayLike], dim: int = -1) -> ArrayLike:
    """Stack arrays along new dimension."""
    if isinstance(arrays[0], torch.Tensor):
        return torch.stack(arrays, dim=dim)
    return np.stack(arrays, axis=dim)


def zeros(shape: Tuple[int, ...], backend: Backend, dtype=None, device=None) -> ArrayLike:
    """Zero tensor/array."""
    if backend == "torch":
        return torch.zeros(shape, dtype=torch.float64 if dtype is None else dtype, device=device)
    return np.zeros(shape, dtype=np.float64 if dtype is None else dtype)


def unit_grid(n: int, backend: Backend, dtype=None, device=None) -> ArrayLike:
    """Parameter values t = i / (n - 1) for i in 0..n-1."""
    if backend == "torch":
        return torch.arange(n, dtype=torch.float64 if dtype is None else dtype, device=device) / (n - 1)
    return np.arange(n, dtype=np.float64 if dtype is None else dtype) / (n - 1)


def all_finite(x: ArrayLike) -> bool:
    """True when every element is finite."""
    if isinstance(x, torch.Tensor):
        return bool(torch.isfinite(x).all())
    return bool(np.isfinite(x).all())
