"""Limited-memory BFGS approximation of the inverse Hessian.

The approximation keeps the most recent position and gradient differences
and applies the implicit inverse Hessian through the two-pass recursion, see
Nocedal & Wright, *Numerical Optimization*, algorithm 7.4.  The initial
approximation is the identity, so an empty history yields steepest descent.
"""

from __future__ import annotations

import numbers
from collections import deque
from typing import Iterable, Sequence

import numpy as np

from .common_vec import as_vector, dot
from .exceptions import NonPositiveCurvature

__all__ = ["LBFGSApproximation", "new_lbfgs_approximation"]


def _frozen(values: Sequence[float]) -> np.ndarray:
    arr = as_vector(values).copy()
    arr.setflags(write=False)
    return arr


class LBFGSApproximation:
    """Bounded history of ``(s, y)`` pairs, most recent first.

    Instances are never modified after construction; :meth:`update` returns a
    new approximation.
    """

    __slots__ = ("_capacity", "_position_deltas", "_gradient_deltas")

    def __init__(
        self,
        capacity: int,
        position_deltas: Iterable[Sequence[float]] = (),
        gradient_deltas: Iterable[Sequence[float]] = (),
    ) -> None:
        if not isinstance(capacity, numbers.Integral) or capacity < 1:
            raise ValueError("The history capacity must be a positive integer")
        capacity = int(capacity)

        s_list = [_frozen(s) for s in position_deltas]
        y_list = [_frozen(y) for y in gradient_deltas]
        if len(s_list) != len(y_list):
            raise ValueError("Position and gradient histories must have the same length")
        if len(s_list) > capacity:
            raise ValueError(f"History of length {len(s_list)} exceeds the capacity {capacity}")
        for s, y in zip(s_list, y_list):
            if s.shape != y.shape:
                raise ValueError("Position and gradient differences must have the same shape")

        self._capacity = capacity
        self._position_deltas: deque[np.ndarray] = deque(s_list, maxlen=capacity)
        self._gradient_deltas: deque[np.ndarray] = deque(y_list, maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def position_deltas(self) -> tuple[np.ndarray, ...]:
        """Stored ``s = x_new - x_old`` vectors, most recent first."""
        return tuple(self._position_deltas)

    @property
    def gradient_deltas(self) -> tuple[np.ndarray, ...]:
        """Stored ``y = grad_new - grad_old`` vectors, most recent first."""
        return tuple(self._gradient_deltas)

    def __len__(self) -> int:
        return len(self._position_deltas)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, history={len(self)})"

    def apply_inverse_hessian(self, z: np.ndarray) -> np.ndarray:
        """Return the implicit ``H^-1 z``.

        Raises
        ------
        NonPositiveCurvature
            If a stored pair has ``dot(s, y) <= 0``.
        """

        z = as_vector(z)
        pairs = list(zip(self._position_deltas, self._gradient_deltas))

        curvatures = []
        alphas = []
        for index, (s, y) in enumerate(pairs):
            curvature = dot(s, y)
            if curvature <= 0.0:
                raise NonPositiveCurvature(index, curvature)
            curvatures.append(curvature)
            alphas.append(dot(s, z) / curvature)

        q = z.copy()
        for alpha, (_, y) in zip(alphas, pairs):
            q -= alpha * y

        r = q
        for alpha, curvature, (s, y) in zip(reversed(alphas), reversed(curvatures), reversed(pairs)):
            beta = dot(y, r) / curvature
            r += (alpha - beta) * s
        return r

    def update(
        self,
        x_new: np.ndarray,
        x_old: np.ndarray,
        grad_new: np.ndarray,
        grad_old: np.ndarray,
    ) -> LBFGSApproximation:
        """Return a new approximation with the latest ``(s, y)`` pair prepended.

        The oldest pair is dropped once the history exceeds the capacity.
        """

        s = as_vector(x_new) - as_vector(x_old)
        y = as_vector(grad_new) - as_vector(grad_old)
        if s.shape != y.shape:
            raise ValueError("Point and gradient dimensions differ")

        updated = LBFGSApproximation(self._capacity)
        updated._position_deltas.extend(self._position_deltas)
        updated._gradient_deltas.extend(self._gradient_deltas)
        updated._position_deltas.appendleft(_frozen(s))
        updated._gradient_deltas.appendleft(_frozen(y))
        return updated


def new_lbfgs_approximation(capacity: int = 9) -> LBFGSApproximation:
    """Return an approximation with an empty history."""

    return LBFGSApproximation(capacity)
