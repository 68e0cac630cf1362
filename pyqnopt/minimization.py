"""Minimisation driver recording an :mod:`xarray` iteration trace."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import xarray as xr

from qncommon import (
    IterationRecord,
    Objective,
    OptimizerConfig,
    QuasiNewtonApproximation,
    as_vector,
    new_lbfgs_approximation,
    quasi_newton_optimize,
)

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MinimizationResult:
    """Outcome of :func:`run_minimization`."""

    x: np.ndarray
    value: float
    gradient: np.ndarray
    iterations: int
    converged: bool
    evaluations: int
    trace: xr.Dataset


class _CountingObjective:
    """Wrap an objective and count its evaluations."""

    def __init__(self, objective: Objective) -> None:
        self.objective = objective
        self.count = 0

    def __call__(self, x: np.ndarray):
        self.count += 1
        return self.objective(x)


def _build_trace(records: Sequence[IterationRecord], ndim: int) -> xr.Dataset:
    """Stack per-iteration records into a dataset indexed by ``iteration``."""

    iterations = np.array([record.iteration for record in records], dtype=int)
    if records:
        x = np.vstack([record.x for record in records])
    else:
        x = np.zeros((0, ndim), dtype=float)

    return xr.Dataset(
        data_vars={
            "x": (("iteration", "dim"), x),
            "value": ("iteration", np.array([record.value for record in records], dtype=float)),
            "new_value": ("iteration", np.array([record.new_value for record in records], dtype=float)),
            "gradient_norm": (
                "iteration",
                np.array([np.linalg.norm(record.gradient) for record in records], dtype=float),
            ),
            "converged": ("iteration", np.array([record.converged for record in records], dtype=bool)),
        },
        coords={"iteration": iterations, "dim": np.arange(ndim)},
    )


def run_minimization(
    objective: Objective,
    x0: Sequence[float],
    *,
    config: OptimizerConfig | None = None,
    approximation: QuasiNewtonApproximation | None = None,
    **options: Any,
) -> MinimizationResult:
    """Minimise *objective* from *x0* and collect diagnostics.

    The run uses a fresh L-BFGS approximation with ``history_size`` pairs
    unless *approximation* is given.  Keyword *options* override fields of
    *config*.  The returned trace holds one entry per outer iteration with
    the point, its objective value, the value at the candidate point, the
    gradient norm and the outcome of the convergence test.
    """

    cfg = OptimizerConfig.merged(config, **options)
    x0 = as_vector(x0)
    if approximation is None:
        approximation = new_lbfgs_approximation(cfg.history_size)

    counted = _CountingObjective(objective)
    records: list[IterationRecord] = []

    LOGGER.info(
        "Minimising a %d dimensional objective (max_iters=%d, history_size=%d)",
        x0.size,
        cfg.max_iters,
        cfg.history_size,
    )
    x = quasi_newton_optimize(counted, x0, approximation, cfg, callback=records.append)

    value, gradient = counted(x)
    converged = bool(records and records[-1].converged)
    trace = _build_trace(records, x0.size)
    trace.attrs.update(
        {
            "converged": int(converged),
            "evaluations": counted.count,
            "epsilon": cfg.epsilon,
            "max_iters": cfg.max_iters,
        }
    )

    if not converged:
        LOGGER.warning("Stopped without meeting the tolerance %.3g", cfg.epsilon)

    return MinimizationResult(
        x=x,
        value=float(value),
        gradient=np.asarray(gradient, dtype=float),
        iterations=len(records),
        converged=converged,
        evaluations=counted.count,
        trace=trace,
    )
