"""Input/output helpers for the command line minimiser."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from qncommon import as_vector

from .minimization import MinimizationResult

LOGGER = logging.getLogger(__name__)

RESULT_FILE = "result.json"
TRACE_FILE = "trace.csv"


def load_initial_point(path: str | Path) -> np.ndarray:
    """Read an initial point from *path*.

    ``.json`` files must hold a flat list of numbers; any other file is read
    as whitespace or comma separated text.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Initial point file {path!s} not found")

    LOGGER.info("Loading initial point from %s", path)
    if path.suffix == ".json":
        with path.open("r", encoding="utf-8") as handle:
            values = json.load(handle)
        if not isinstance(values, list):
            raise ValueError(f"Expected a JSON list of numbers in {path!s}")
    else:
        text = path.read_text(encoding="utf-8").replace(",", " ")
        values = [float(token) for token in text.split()]
    return as_vector(values)


def save_result(
    result: MinimizationResult,
    output_dir: str | Path,
    metadata: Mapping[str, Any] | None = None,
) -> dict[str, Path]:
    """Write the minimiser and its trace to *output_dir*.

    The summary goes to ``result.json``; the per-iteration scalars of the
    trace go to ``trace.csv``.  Returns the written paths keyed by kind.
    """

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    summary: dict[str, Any] = {
        "x": result.x.tolist(),
        "value": result.value,
        "gradient": result.gradient.tolist(),
        "iterations": result.iterations,
        "converged": result.converged,
        "evaluations": result.evaluations,
    }
    if metadata:
        summary["metadata"] = dict(metadata)

    result_path = output_dir / RESULT_FILE
    LOGGER.info("Writing %s", result_path)
    with result_path.open("w", encoding="utf-8") as handle:
        json.dump(summary, handle, indent=2)

    trace_path = output_dir / TRACE_FILE
    scalars = result.trace.drop_dims("dim")
    LOGGER.info("Writing %s", trace_path)
    scalars.to_dataframe().to_csv(trace_path)

    return {"result": result_path, "trace": trace_path}
