"""Utilities to run quasi-Newton minimisations using the ``qncommon`` routines."""

from .io import load_initial_point, save_result
from .minimization import MinimizationResult, run_minimization
from .objectives import OBJECTIVES, get_objective, rosenbrock, shifted_quadratic, sphere

__all__ = [
    "OBJECTIVES",
    "MinimizationResult",
    "get_objective",
    "load_initial_point",
    "rosenbrock",
    "run_minimization",
    "save_result",
    "shifted_quadratic",
    "sphere",
]
