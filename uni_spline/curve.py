"""
2D curve pipeline: control points -> per-axis solves -> segments -> samples.

The X and Y coordinates are solved independently and paired segment by
segment. :class:`SplineCurve` bundles the append-only control points with a
reusable :class:`~uni_spline.sampler.CurveSampler` so that an external redraw
loop can call :meth:`SplineCurve.update` once per frame.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Optional, Union, overload

import numpy as np
import torch

from ._core import (
    ArrayLike,
    Backend,
    BoundaryCondition,
    Point,
    SAMPLES_PER_SEGMENT,
    get_backend,
    to_backend,
    zeros,
)
from .logger import get_logger
from .polynomial import Segment
from .sampler import CurveSampler
from .solver import solve

logger = get_logger(__name__)


class ControlPoints:
    """
    Ordered, append-only sequence of 2D control points.

    Points can only be added; there is no removal or reordering.

    Example:
        >>> pts = ControlPoints([(0, 0), (10, 5)])
        >>> pts.append(20, 0)
        >>> pts.as_array().shape
        (3, 2)
    """

    __slots__ = ("_points",)

    def __init__(self, points: Optional[Iterable[Point]] = None) -> None:
        self._points: List[Point] = []
        if points is not None:
            self.extend(points)

    def append(self, x: float, y: float) -> None:
        x, y = float(x), float(y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Control point must be finite, got ({x}, {y})")
        logger.info("Adding point at %s, %s", x, y)
        self._points.append((x, y))

    def extend(self, points: Iterable[Point]) -> None:
        for x, y in points:
            self.append(x, y)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    @overload
    def __getitem__(self, index: int) -> Point: ...
    @overload
    def __getitem__(self, index: slice) -> List[Point]: ...

    def __getitem__(self, index):
        return self._points[index]

    def __repr__(self) -> str:
        return f"ControlPoints({self._points!r})"

    def xs(self) -> List[float]:
        return [p[0] for p in self._points]

    def ys(self) -> List[float]:
        return [p[1] for p in self._points]

    def as_array(self, backend: Backend = "numpy", dtype=None, device=None) -> ArrayLike:
        """Points as an (N, 2) array; (0, 2) when empty."""
        if not self._points:
            return zeros((0, 2), backend, dtype=dtype, device=device)
        return to_backend(np.asarray(self._points, dtype=np.float64), backend, dtype=dtype, device=device)


def solve_curve(
    points: Union[ControlPoints, Iterable[Point], ArrayLike],
    boundary: Union[BoundaryCondition, str] = BoundaryCondition.CLAMPED,
    start_tangent: Point = (0.0, 0.0),
    end_tangent: Point = (0.0, 0.0),
) -> List[Segment]:
    """
    Solve X and Y independently and pair the results per segment.

    Args:
        points: ControlPoints, (N, 2) array/tensor, or list of (x, y)
        boundary: "clamped" (default) or "natural"
        start_tangent, end_tangent: (dx, dy) slopes for "clamped"

    Returns:
        ``len(points) - 1`` segments; empty for fewer than 2 points
    """
    if isinstance(points, ControlPoints):
        xs, ys = points.xs(), points.ys()
    else:
        if not isinstance(points, (np.ndarray, torch.Tensor)):
            points = list(points)
        arr = to_backend(points, get_backend(points))
        if arr.ndim == 1 and arr.shape[0] == 0:
            return []
        if arr.ndim != 2 or arr.shape[-1] != 2:
            raise ValueError(f"points must have shape (N, 2), got {tuple(arr.shape)}")
        xs, ys = arr[:, 0], arr[:, 1]

    px = solve(xs, boundary, start_tangent[0], end_tangent[0])
    py = solve(ys, boundary, start_tangent[1], end_tangent[1])
    return [Segment(x, y) for x, y in zip(px, py)]


class SplineCurve:
    """
    Control points plus the sample buffer for one interactively edited curve.

    Example:
        >>> curve = SplineCurve()
        >>> curve.add_point(100, 200)
        >>> curve.add_point(300, 250)
        >>> polyline = curve.update()   # (100, 2)
        >>> markers = curve.markers()   # (2, 2)
    """

    def __init__(
        self,
        points: Optional[Iterable[Point]] = None,
        boundary: Union[BoundaryCondition, str] = BoundaryCondition.CLAMPED,
        samples_per_segment: int = SAMPLES_PER_SEGMENT,
    ) -> None:
        self.points = ControlPoints(points)
        self.boundary = BoundaryCondition(boundary)
        self.sampler = CurveSampler(samples_per_segment)
        self.segments: List[Segment] = []

    def add_point(self, x: float, y: float) -> None:
        self.points.append(x, y)

    def update(self) -> np.ndarray:
        """Run one solve-and-sample cycle and return the sampled polyline."""
        self.segments = solve_curve(self.points, self.boundary)
        samples = self.sampler.sample(self.segments)
        logger.debug(
            "Curve updated: %d points, %d segments, %d samples",
            len(self.points), len(self.segments), len(samples),
        )
        return samples

    def markers(self) -> np.ndarray:
        """Control points (N, 2) for drawing markers."""
        return self.points.as_array()
