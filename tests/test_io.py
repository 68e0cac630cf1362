import json

import numpy as np
import pandas as pd
import pytest

from pyqnopt import load_initial_point, run_minimization, save_result, sphere


def test_load_initial_point_from_json(tmp_path):
    path = tmp_path / "x0.json"
    path.write_text(json.dumps([1.0, -2.5, 3]), encoding="utf-8")
    np.testing.assert_array_equal(load_initial_point(path), [1.0, -2.5, 3.0])


def test_load_initial_point_from_text(tmp_path):
    path = tmp_path / "x0.txt"
    path.write_text("1.0, 2.0\n-3.0\n", encoding="utf-8")
    np.testing.assert_array_equal(load_initial_point(path), [1.0, 2.0, -3.0])


def test_load_initial_point_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_initial_point(tmp_path / "missing.json")
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"x": [1.0]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_initial_point(path)


def test_save_result_writes_summary_and_trace(tmp_path):
    result = run_minimization(sphere, [2.0, -1.0])

    paths = save_result(result, tmp_path / "out", metadata={"run": "unit"})

    with paths["result"].open("r", encoding="utf-8") as handle:
        summary = json.load(handle)
    assert summary["converged"] is True
    assert summary["iterations"] == result.iterations
    assert summary["metadata"] == {"run": "unit"}
    np.testing.assert_allclose(summary["x"], result.x)

    trace = pd.read_csv(paths["trace"])
    assert list(trace["iteration"]) == list(range(result.iterations))
    assert {"value", "new_value", "gradient_norm", "converged"} <= set(trace.columns)
