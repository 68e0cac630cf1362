"""Backtracking line search enforcing the sufficient-decrease condition."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .common_vec import Objective, as_vector, dot, evaluate, ray
from .config import OptimizerConfig
from .exceptions import StepSizeUnderflow

__all__ = ["backtracking_line_search"]

LOGGER = logging.getLogger(__name__)


def backtracking_line_search(
    objective: Objective,
    x0: np.ndarray,
    direction: np.ndarray,
    config: OptimizerConfig | None = None,
    **options: Any,
) -> float:
    """Return a step size along *direction* satisfying the Armijo condition.

    Starting from a unit step, the step is multiplied by ``shrink_factor``
    until::

        f(x0 + step * direction) <= f(x0) + sufficient_decrease * step * dot(direction, grad f(x0))

    Only sufficient decrease is enforced; the returned step is not guaranteed
    to satisfy the curvature condition.

    Parameters
    ----------
    objective:
        Callable returning ``(value, gradient)`` at a point.
    x0:
        Starting point of the search.
    direction:
        Search direction, same shape as *x0*.
    config:
        Optional :class:`OptimizerConfig`; keyword *options* override its
        fields (``sufficient_decrease``, ``shrink_factor``,
        ``underflow_threshold``).

    Raises
    ------
    StepSizeUnderflow
        When the trial step drops below ``underflow_threshold``.
    """

    cfg = OptimizerConfig.merged(config, **options)
    x0 = as_vector(x0)
    direction = as_vector(direction)

    value, grad = evaluate(objective, x0)
    point = ray(x0, direction)
    directional_derivative = dot(direction, grad)

    step = 1.0
    while True:
        if step < cfg.underflow_threshold:
            LOGGER.debug(
                "Step size %.3e below threshold %.3e (directional derivative %.6g)",
                step,
                cfg.underflow_threshold,
                directional_derivative,
            )
            raise StepSizeUnderflow(step, directional_derivative)
        trial_value, _ = evaluate(objective, point(step))
        if trial_value <= value + cfg.sufficient_decrease * step * directional_derivative:
            return step
        step *= cfg.shrink_factor
