"""Vector utilities shared by the line search and the quasi-Newton drivers."""

from __future__ import annotations

from typing import Callable, Sequence, Tuple

import numpy as np

__all__ = ["Objective", "as_vector", "dot", "evaluate", "ray", "within"]

Objective = Callable[[np.ndarray], Tuple[float, np.ndarray]]


def as_vector(values: Sequence[float]) -> np.ndarray:
    """Return *values* as a one dimensional floating point array."""

    data = np.asarray(values, dtype=float)
    if data.ndim != 1:
        raise ValueError("Expected a one dimensional array of values")
    if data.size == 0:
        raise ValueError("Input array must not be empty")
    return data


def dot(a: np.ndarray, b: np.ndarray) -> float:
    """Inner product of two vectors of equal length."""

    if a.shape != b.shape:
        raise ValueError(f"Vector shapes differ: {a.shape} and {b.shape}")
    return float(np.dot(a, b))


def ray(origin: np.ndarray, direction: np.ndarray) -> Callable[[float], np.ndarray]:
    """Return the affine map ``step -> origin + step * direction``.

    The returned function is used both to evaluate trial points during the
    line search and to produce the next iterate.
    """

    origin = as_vector(origin)
    direction = as_vector(direction)
    if origin.shape != direction.shape:
        raise ValueError("Origin and direction must have the same shape")

    def point(step: float) -> np.ndarray:
        return origin + float(step) * direction

    return point


def within(epsilon: float, a: float, b: float) -> bool:
    """Absolute closeness test ``|a - b| <= epsilon``."""

    return abs(float(a) - float(b)) <= epsilon


def evaluate(objective: Objective, x: np.ndarray) -> tuple[float, np.ndarray]:
    """Call *objective* at *x* and normalise its ``(value, gradient)`` pair."""

    value, gradient = objective(x)
    gradient = np.asarray(gradient, dtype=float)
    if gradient.shape != x.shape:
        raise ValueError(f"Gradient shape {gradient.shape} does not match the point shape {x.shape}")
    return float(value), gradient
