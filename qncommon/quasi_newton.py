"""Interface of inverse-Hessian approximations used by the quasi-Newton driver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

__all__ = ["QuasiNewtonApproximation"]


@runtime_checkable
class QuasiNewtonApproximation(Protocol):
    """Implicit inverse-Hessian estimate.

    Implementations are immutable: :meth:`update` returns a new approximation
    and leaves the receiver usable.
    """

    def apply_inverse_hessian(self, z: np.ndarray) -> np.ndarray:
        """Return ``H^-1 z`` without forming ``H``."""
        ...

    def update(
        self,
        x_new: np.ndarray,
        x_old: np.ndarray,
        grad_new: np.ndarray,
        grad_old: np.ndarray,
    ) -> "QuasiNewtonApproximation":
        """Incorporate one new ``(point, gradient)`` observation."""
        ...
