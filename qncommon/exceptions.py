"""Failures raised by the quasi-Newton routines."""

from __future__ import annotations

__all__ = ["NonPositiveCurvature", "OptimizationError", "StepSizeUnderflow"]


class OptimizationError(RuntimeError):
    """Base class for fatal optimisation failures."""


class StepSizeUnderflow(OptimizationError):
    """The line search shrank the step below the underflow threshold.

    This usually points at an incorrect gradient or a direction that is not a
    descent direction.
    """

    def __init__(self, step: float, directional_derivative: float) -> None:
        super().__init__(
            f"Line search: step size underflow at {step:.3e} "
            f"(directional derivative {directional_derivative:.6g}); "
            "probably a gradient computation error"
        )
        self.step = step
        self.directional_derivative = directional_derivative


class NonPositiveCurvature(OptimizationError):
    """A stored history pair violates ``dot(s, y) > 0``."""

    def __init__(self, index: int, curvature: float) -> None:
        super().__init__(f"Non-positive curvature {curvature:.6g} for history pair {index}")
        self.index = index
        self.curvature = curvature
