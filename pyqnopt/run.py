"""Command line interface to minimise a benchmark objective with L-BFGS."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import numpy as np

from qncommon import OptimizationError, OptimizerConfig, as_vector

from .io import load_initial_point, save_result
from .minimization import run_minimization
from .objectives import OBJECTIVES, get_objective

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _initial_point(args: argparse.Namespace) -> np.ndarray:
    if args.x0 is not None:
        return as_vector([float(token) for token in args.x0.split(",") if token.strip()])
    if args.x0_file is not None:
        return load_initial_point(args.x0_file)
    if args.dim is None:
        raise ValueError("One of --x0, --x0-file or --dim must be given")
    if args.dim < 1:
        raise ValueError("--dim must be positive")
    rng = np.random.default_rng(args.seed)
    return rng.uniform(-args.spread, args.spread, size=args.dim)


def _config_from_args(args: argparse.Namespace) -> OptimizerConfig:
    defaults = OptimizerConfig()
    options = {
        name: getattr(args, name)
        for name in (
            "sufficient_decrease",
            "shrink_factor",
            "initial_shrink_factor",
            "underflow_threshold",
            "max_iters",
            "history_size",
            "epsilon",
        )
        if getattr(args, name) is not None
    }
    return OptimizerConfig.merged(defaults, **options)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Minimise a benchmark objective with L-BFGS")
    parser.add_argument("--objective", choices=sorted(OBJECTIVES), default="sphere", help="Objective to minimise")
    start = parser.add_mutually_exclusive_group()
    start.add_argument("--x0", default=None, help="Comma separated initial point, e.g. 1.5,-2")
    start.add_argument("--x0-file", default=None, help="JSON or text file holding the initial point")
    start.add_argument("--dim", type=int, default=None, help="Draw a random initial point of this dimension")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random initial point")
    parser.add_argument(
        "--spread",
        type=float,
        default=2.0,
        help="Random initial coordinates are drawn uniformly from [-spread, spread]",
    )
    parser.add_argument("--sufficient-decrease", type=float, default=None, help="Armijo constant of the line search")
    parser.add_argument("--shrink-factor", type=float, default=None, help="Line search step reduction factor")
    parser.add_argument(
        "--initial-shrink-factor",
        type=float,
        default=None,
        help="Step reduction factor of the first line search",
    )
    parser.add_argument("--underflow-threshold", type=float, default=None, help="Smallest admissible trial step")
    parser.add_argument("--max-iters", type=int, default=None, help="Iteration budget")
    parser.add_argument("--history-size", type=int, default=None, help="Number of stored L-BFGS pairs")
    parser.add_argument("--epsilon", type=float, default=None, help="Absolute tolerance on the objective change")
    parser.add_argument("--output-dir", default=None, help="Directory where result.json and trace.csv are written")
    parser.add_argument(
        "--metadata",
        default=None,
        help="Optional JSON file storing run metadata to be embedded in result.json",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    objective = get_objective(args.objective)
    x0 = _initial_point(args)
    config = _config_from_args(args)

    try:
        result = run_minimization(objective, x0, config=config)
    except OptimizationError as exc:
        LOGGER.error("Minimisation of %s failed: %s", args.objective, exc)
        return 1

    LOGGER.info(
        "%s: f=%.10g after %d iterations and %d evaluations (converged=%s)",
        args.objective,
        result.value,
        result.iterations,
        result.evaluations,
        result.converged,
    )
    print(json.dumps({"x": result.x.tolist(), "value": result.value}))

    if args.output_dir:
        metadata: dict[str, Any] | None = None
        if args.metadata:
            metadata_path = Path(args.metadata)
            with metadata_path.open("r", encoding="utf-8") as handle:
                metadata = json.load(handle)
        save_result(result, args.output_dir, metadata)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
