"""
Curve sampling: turn per-segment polynomial pairs into a dense 2D polyline.

Each segment is evaluated at ``t = i / (N - 1)`` for ``i = 0 .. N-1``, so every
segment contributes exactly N points and consecutive segments both emit their
shared joint.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from ._core import ArrayLike, SAMPLES_PER_SEGMENT, get_backend, stack, unit_grid
from .polynomial import Polynomial


def _check_samples(samples_per_segment: int) -> int:
    if samples_per_segment < 2:
        raise ValueError(f"samples_per_segment must be >= 2, got {samples_per_segment}")
    return int(samples_per_segment)


def _fill(buffer: np.ndarray, segment_pairs: Sequence[Tuple[Polynomial, Polynomial]], t: np.ndarray) -> None:
    n = t.shape[0]
    for k, (px, py) in enumerate(segment_pairs):
        block = buffer[k * n:(k + 1) * n]
        block[:, 0] = px.evaluate(t)
        block[:, 1] = py.evaluate(t)


def sample(
    segment_pairs: Sequence[Tuple[Polynomial, Polynomial]],
    out: Optional[np.ndarray] = None,
    samples_per_segment: int = SAMPLES_PER_SEGMENT,
) -> np.ndarray:
    """
    Sample ``(x, y)`` polynomial pairs into a dense point sequence.

    Args:
        segment_pairs: One ``(x_poly, y_poly)`` pair (or Segment) per segment
        out: Destination reused across calls, shape (M, 2) with
            M >= len(segment_pairs) * samples_per_segment. Its leading rows are
            overwritten; nothing is appended.
        samples_per_segment: Points per segment, at least 2

    Returns:
        Points (len(segment_pairs) * samples_per_segment, 2); (0, 2) if empty.
        When ``out`` is given this is a view of its leading rows.
    """
    n = _check_samples(samples_per_segment)
    needed = len(segment_pairs) * n
    if out is None:
        out = np.empty((needed, 2), dtype=np.float64)
    elif out.ndim != 2 or out.shape[1] != 2 or out.shape[0] < needed:
        raise ValueError(f"out must have shape (>= {needed}, 2), got {out.shape}")
    _fill(out, segment_pairs, unit_grid(n, "numpy"))
    return out[:needed]


def sample_coefficients(
    coeffs_x: ArrayLike,
    coeffs_y: ArrayLike,
    samples_per_segment: int = SAMPLES_PER_SEGMENT,
) -> ArrayLike:
    """
    Vectorized sampling of raw coefficient arrays.

    Args:
        coeffs_x, coeffs_y: Coefficients (S, 4) from ``solve_coefficients``
        samples_per_segment: Points per segment, at least 2

    Returns:
        Points (S * samples_per_segment, 2) on the input backend
    """
    n = _check_samples(samples_per_segment)
    if coeffs_x.shape != coeffs_y.shape:
        raise ValueError(f"Coefficient shape mismatch: {tuple(coeffs_x.shape)} vs {tuple(coeffs_y.shape)}")

    backend = get_backend(coeffs_x)
    device = coeffs_x.device if backend == "torch" else None
    t = unit_grid(n, backend, dtype=coeffs_x.dtype, device=device)
    basis = stack([t**0, t, t**2, t**3], dim=-1)  # (N, 4)

    xs = (coeffs_x @ basis.T).reshape(-1)
    ys = (coeffs_y @ basis.T).reshape(-1)
    return stack([xs, ys], dim=-1)


class CurveSampler:
    """
    Owns the sampled-point buffer shared between redraw cycles.

    Each :meth:`sample` call replaces the previous contents; the returned array
    is a view into the buffer and is overwritten by the next call.

    Example:
        >>> sampler = CurveSampler()
        >>> pts = sampler.sample(segments)   # (100 * len(segments), 2)
    """

    def __init__(self, samples_per_segment: int = SAMPLES_PER_SEGMENT) -> None:
        self.samples_per_segment = _check_samples(samples_per_segment)
        self._t = unit_grid(self.samples_per_segment, "numpy")
        self._buffer = np.empty((0, 2), dtype=np.float64)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def points(self) -> np.ndarray:
        """Points written by the last call."""
        return self._buffer[:self._count]

    def clear(self) -> None:
        self._count = 0

    def sample(self, segment_pairs: Sequence[Tuple[Polynomial, Polynomial]]) -> np.ndarray:
        """Overwrite the buffer with samples of ``segment_pairs``."""
        needed = len(segment_pairs) * self.samples_per_segment
        if self._buffer.shape[0] < needed:
            self._buffer = np.empty((max(needed, 2 * self._buffer.shape[0]), 2), dtype=np.float64)
        self._count = 0
        _fill(self._buffer, segment_pairs, self._t)
        self._count = needed
        return self.points
