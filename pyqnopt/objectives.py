"""Benchmark objectives returning ``(value, gradient)`` pairs."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

import numpy as np

from qncommon import Objective, as_vector

__all__ = ["OBJECTIVES", "get_objective", "rosenbrock", "shifted_quadratic", "sphere"]


def sphere(x: np.ndarray) -> Tuple[float, np.ndarray]:
    """``f(x) = sum(x**2) - 1`` with its minimum ``-1`` at the origin."""

    x = np.asarray(x, dtype=float)
    return float(np.dot(x, x) - 1.0), 2.0 * x


def shifted_quadratic(center: Sequence[float], scale: Sequence[float] | float = 1.0) -> Objective:
    """Return the separable quadratic ``sum(scale * (x - center)**2)``.

    *scale* holds the (positive) curvature along each axis.
    """

    center_arr = as_vector(center)
    scale_arr = np.broadcast_to(np.asarray(scale, dtype=float), center_arr.shape).copy()
    if np.any(scale_arr <= 0.0):
        raise ValueError("Quadratic scales must be positive")

    def quadratic(x: np.ndarray) -> Tuple[float, np.ndarray]:
        diff = np.asarray(x, dtype=float) - center_arr
        return float(np.sum(scale_arr * diff**2)), 2.0 * scale_arr * diff

    return quadratic


def rosenbrock(x: np.ndarray) -> Tuple[float, np.ndarray]:
    """Generalised Rosenbrock function; minimum ``0`` at ``(1, ..., 1)``."""

    x = np.asarray(x, dtype=float)
    if x.size < 2:
        raise ValueError("The Rosenbrock function needs at least two variables")

    head, tail = x[:-1], x[1:]
    residual = tail - head**2
    value = np.sum(100.0 * residual**2 + (1.0 - head) ** 2)

    grad = np.zeros_like(x)
    grad[:-1] = -400.0 * head * residual - 2.0 * (1.0 - head)
    grad[1:] += 200.0 * residual
    return float(value), grad


OBJECTIVES: Dict[str, Objective] = {
    "sphere": sphere,
    "rosenbrock": rosenbrock,
}


def get_objective(name: str) -> Objective:
    """Look up a registered objective by *name*."""

    try:
        return OBJECTIVES[name]
    except KeyError:
        raise KeyError(f"Unknown objective {name!r}; choose from {sorted(OBJECTIVES)}") from None
