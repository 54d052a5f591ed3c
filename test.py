from uni_spline import (
    SplineCurve,
    solve, solve_coefficients,
    solve_curve, sample, sample_coefficients,
)
from uni_spline.logger import setup
import numpy as np
import torch

if __name__ == "__main__":
    setup("INFO")

    # =========================================================================
    # 1. Single axis: two points, one segment
    # =========================================================================
    (poly,) = solve([0.0, 1.0])
    print(f"Coefficients: {poly.coefficients()}")
    for t in (0.0, 0.25, 0.5, 0.75, 1.0):
        print(f"  t={t:.2f}: value={poly.evaluate(t):.4f} slope={poly.derivative(t):.4f}")

    # =========================================================================
    # 2. Single axis: joint continuity
    # =========================================================================
    print("\nJoint continuity:")

    left, right = solve([0.0, 1.0, 0.0])
    print(f"  value:  {left.evaluate(1.0):.6f} | {right.evaluate(0.0):.6f}")
    print(f"  slope:  {left.derivative(1.0):.6f} | {right.derivative(0.0):.6f}")
    print(f"  curve:  {left.second_derivative(1.0):.6f} | {right.second_derivative(0.0):.6f}")

    # natural ends (zero curvature) instead of flat ends
    left, right = solve([0.0, 1.0, 0.0], boundary="natural")
    print(f"  natural end curvature: {left.second_derivative(0.0):.6f}")

    # =========================================================================
    # 3. 2D curve and sampling
    # =========================================================================
    print("\n2D curve:")

    waypoints = [(100.0, 100.0), (200.0, 300.0), (400.0, 250.0), (500.0, 400.0)]
    segments = solve_curve(waypoints)
    polyline = sample(segments)
    print(f"{len(segments)} segments -> {polyline.shape[0]} samples")
    print(f"First/last sample: {polyline[0]} {polyline[-1]}")

    # =========================================================================
    # 4. Interactive cycle (what a redraw loop calls each frame)
    # =========================================================================
    print("\nInteractive cycle:")

    curve = SplineCurve()
    for x, y in waypoints:
        curve.add_point(x, y)
        pts = curve.update()
        print(f"  {len(curve.points)} points -> {pts.shape[0]} samples")
    print(f"Markers: {curve.markers().tolist()}")

    # =========================================================================
    # 5. Torch backend (gradients flow back to the control values)
    # =========================================================================
    print("\nTorch backend:")

    xs = torch.tensor([p[0] for p in waypoints], dtype=torch.float64, requires_grad=True)
    ys = torch.tensor([p[1] for p in waypoints], dtype=torch.float64)
    pts = sample_coefficients(solve_coefficients(xs), solve_coefficients(ys))
    pts[:, 0].sum().backward()
    print(f"d(sum x)/d(control x): {xs.grad}")
    print(f"Matches NumPy: {np.allclose(pts.detach().numpy(), polyline)}")

    print("\n✅ Done!")
