"""Quasi-Newton minimisation routines.

The submodules provide a backtracking line search, the inverse-Hessian
approximation interface with its limited-memory BFGS implementation, and the
outer loop that ties them together.  Objectives are callables returning a
``(value, gradient)`` pair for a one dimensional :class:`numpy.ndarray`.
"""

from .common_vec import Objective, as_vector, dot, ray, within
from .config import OptimizerConfig
from .exceptions import NonPositiveCurvature, OptimizationError, StepSizeUnderflow
from .lbfgs import LBFGSApproximation, new_lbfgs_approximation
from .linesearch import backtracking_line_search
from .minimizelib import IterationRecord, lbfgs_optimize, quasi_newton_iterate, quasi_newton_optimize
from .quasi_newton import QuasiNewtonApproximation

__all__ = [
    "IterationRecord",
    "LBFGSApproximation",
    "NonPositiveCurvature",
    "Objective",
    "OptimizationError",
    "OptimizerConfig",
    "QuasiNewtonApproximation",
    "StepSizeUnderflow",
    "as_vector",
    "backtracking_line_search",
    "dot",
    "lbfgs_optimize",
    "new_lbfgs_approximation",
    "quasi_newton_iterate",
    "quasi_newton_optimize",
    "ray",
    "within",
]
