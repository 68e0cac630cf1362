"""Quasi-Newton outer loop driving an inverse-Hessian approximation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import numpy as np

from .common_vec import Objective, as_vector, evaluate, ray, within
from .config import OptimizerConfig
from .lbfgs import new_lbfgs_approximation
from .linesearch import backtracking_line_search
from .quasi_newton import QuasiNewtonApproximation

__all__ = ["IterationRecord", "lbfgs_optimize", "quasi_newton_iterate", "quasi_newton_optimize"]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IterationRecord:
    """Snapshot of one outer iteration handed to the driver callback."""

    iteration: int
    x: np.ndarray
    value: float
    gradient: np.ndarray
    new_x: np.ndarray
    new_value: float
    converged: bool


IterationCallback = Callable[[IterationRecord], None]


def quasi_newton_iterate(
    objective: Objective,
    x: np.ndarray,
    approximation: QuasiNewtonApproximation,
    config: OptimizerConfig,
) -> np.ndarray:
    """Take one quasi-Newton step from *x* and return the new point."""

    _, grad = evaluate(objective, x)
    direction = -approximation.apply_inverse_hessian(grad)
    step = backtracking_line_search(objective, x, direction, config)
    return ray(x, direction)(step)


def quasi_newton_optimize(
    objective: Objective,
    x0: Sequence[float],
    approximation: QuasiNewtonApproximation,
    config: Optional[OptimizerConfig] = None,
    *,
    callback: Optional[IterationCallback] = None,
    **options: Any,
) -> np.ndarray:
    """Minimise *objective* starting from *x0*.

    Each iteration evaluates a candidate point and stops when the objective
    value changed by at most ``epsilon`` or when the iteration counter reaches
    ``max_iters``.  On termination the point held *before* the last candidate
    is returned; the candidate itself is discarded.

    Parameters
    ----------
    objective:
        Callable returning ``(value, gradient)``.
    x0:
        Initial point.
    approximation:
        Any :class:`QuasiNewtonApproximation`, typically an empty
        :class:`~qncommon.lbfgs.LBFGSApproximation`.
    config:
        Optional :class:`OptimizerConfig`; keyword *options* override its
        fields.
    callback:
        Called with an :class:`IterationRecord` after each candidate point has
        been evaluated.

    Raises
    ------
    StepSizeUnderflow, NonPositiveCurvature
        Propagated unchanged from the line search and the approximation.
    """

    cfg = OptimizerConfig.merged(config, **options)
    first_cfg = cfg.for_first_iteration()
    x = as_vector(x0)

    iteration = 0
    while True:
        value, grad = evaluate(objective, x)
        new_x = quasi_newton_iterate(
            objective, x, approximation, first_cfg if iteration == 0 else cfg
        )
        new_value, new_grad = evaluate(objective, new_x)
        converged = within(cfg.epsilon, value, new_value)

        LOGGER.debug(
            "Iteration %d: f(x)=%.10g f(x_new)=%.10g |grad|=%.3e",
            iteration,
            value,
            new_value,
            float(np.linalg.norm(grad)),
        )
        if callback is not None:
            callback(IterationRecord(iteration, x, value, grad, new_x, new_value, converged))

        if converged:
            LOGGER.info("Converged after %d iterations (f=%.10g)", iteration, value)
            return x
        if iteration == cfg.max_iters:
            LOGGER.info("Iteration budget of %d exhausted (f=%.10g)", cfg.max_iters, value)
            return x

        approximation = approximation.update(new_x, x, new_grad, grad)
        x = new_x
        iteration += 1


def lbfgs_optimize(
    objective: Objective,
    x0: Sequence[float],
    config: Optional[OptimizerConfig] = None,
    *,
    callback: Optional[IterationCallback] = None,
    **options: Any,
) -> np.ndarray:
    """Run :func:`quasi_newton_optimize` with a fresh L-BFGS approximation.

    ``history_size`` (alias ``capacity``) selects the number of stored pairs.
    """

    cfg = OptimizerConfig.merged(config, **options)
    approximation = new_lbfgs_approximation(cfg.history_size)
    return quasi_newton_optimize(objective, x0, approximation, cfg, callback=callback)
