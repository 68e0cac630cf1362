import numpy as np
import pytest

from qncommon import (
    IterationRecord,
    LBFGSApproximation,
    NonPositiveCurvature,
    OptimizerConfig,
    StepSizeUnderflow,
    lbfgs_optimize,
    new_lbfgs_approximation,
    quasi_newton_iterate,
    quasi_newton_optimize,
)


def parabola(x):
    x = np.asarray(x, dtype=float)
    return float(np.dot(x, x) - 1.0), 2.0 * x


def elongated(x):
    x = np.asarray(x, dtype=float)
    center = np.array([1.0, 2.0])
    scale = np.array([1.0, 3.0])
    diff = x - center
    return float(np.sum(scale * diff**2)), 2.0 * scale * diff


def test_lbfgs_converges_on_parabola():
    x = lbfgs_optimize(parabola, [10.0])

    np.testing.assert_allclose(x, [0.0], atol=1.0e-4)
    value, _ = parabola(x)
    assert value == pytest.approx(-1.0, abs=OptimizerConfig().epsilon)


def test_lbfgs_converges_in_several_dimensions():
    x = lbfgs_optimize(parabola, [3.0, -4.0, 12.0])
    np.testing.assert_allclose(x, np.zeros(3), atol=1.0e-4)


def test_lbfgs_on_elongated_quadratic():
    records: list[IterationRecord] = []
    x = lbfgs_optimize(elongated, [0.0, 0.0], history_size=1, callback=records.append)

    value, _ = elongated(x)
    assert value < 1.0e-2
    np.testing.assert_allclose(x, [1.0, 2.0], atol=0.1)
    values = [record.value for record in records]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))


def test_zero_iteration_budget_returns_start():
    x0 = np.array([10.0])
    records: list[IterationRecord] = []

    x = lbfgs_optimize(parabola, x0, max_iters=0, callback=records.append)

    np.testing.assert_array_equal(x, x0)
    assert len(records) == 1
    # The candidate was computed but discarded.
    np.testing.assert_array_equal(records[0].new_x, [0.0])


def test_converged_run_returns_point_before_candidate():
    records: list[IterationRecord] = []

    x = lbfgs_optimize(parabola, [10.0], epsilon=1.0e3, callback=records.append)

    np.testing.assert_array_equal(x, [10.0])
    assert len(records) == 1
    assert records[0].converged
    assert records[0].new_value == pytest.approx(-1.0)


def test_budget_exhausted_returns_point_before_candidate():
    records: list[IterationRecord] = []

    x = lbfgs_optimize(elongated, [0.0, 0.0], history_size=1, max_iters=1, epsilon=0.0, callback=records.append)

    assert [record.iteration for record in records] == [0, 1]
    np.testing.assert_array_equal(x, records[-1].x)
    np.testing.assert_array_equal(records[1].x, records[0].new_x)
    assert not np.array_equal(x, records[-1].new_x)


def test_first_iteration_uses_initial_shrink_factor():
    records: list[IterationRecord] = []
    lbfgs_optimize(parabola, [10.0], max_iters=0, callback=records.append)
    np.testing.assert_allclose(records[0].new_x, [0.0])

    records.clear()
    lbfgs_optimize(parabola, [10.0], max_iters=0, initial_shrink_factor=0.1, callback=records.append)
    np.testing.assert_allclose(records[0].new_x, [8.0])


class ScaledIdentity:
    """Inverse Hessian estimate ``10 * I`` so that unit steps overshoot."""

    def apply_inverse_hessian(self, z):
        return 10.0 * np.asarray(z, dtype=float)

    def update(self, x_new, x_old, grad_new, grad_old):
        return self


@pytest.mark.parametrize("shrink_factor, expected", [(0.1, -2.0), (0.5, 0.625)])
def test_later_iterations_use_shrink_factor(shrink_factor, expected):
    records: list[IterationRecord] = []

    quasi_newton_optimize(
        parabola,
        [10.0],
        ScaledIdentity(),
        max_iters=1,
        epsilon=0.0,
        initial_shrink_factor=0.5,
        shrink_factor=shrink_factor,
        callback=records.append,
    )

    # First search: direction -200, accepted step 0.5**4.
    np.testing.assert_allclose(records[0].new_x, [-2.5])
    # Second search from -2.5 along +50 backtracks with shrink_factor.
    np.testing.assert_allclose(records[1].new_x, [expected])


def test_iterate_with_empty_history_is_steepest_descent():
    config = OptimizerConfig(shrink_factor=0.5)
    new_x = quasi_newton_iterate(parabola, np.array([10.0]), new_lbfgs_approximation(), config)
    np.testing.assert_allclose(new_x, [0.0])


def test_driver_does_not_modify_given_approximation():
    approx = new_lbfgs_approximation(4)
    quasi_newton_optimize(parabola, [10.0], approx)
    assert len(approx) == 0


def test_capacity_alias():
    x = lbfgs_optimize(parabola, [2.0], capacity=2)
    np.testing.assert_allclose(x, [0.0], atol=1.0e-4)


def test_curvature_failure_propagates():
    approx = LBFGSApproximation(3, [[1.0]], [[-2.0]])
    with pytest.raises(NonPositiveCurvature):
        quasi_newton_optimize(parabola, [10.0], approx)


def test_underflow_propagates():
    def wrong_gradient(x):
        x = np.asarray(x, dtype=float)
        return float(np.dot(x, x)), -2.0 * x

    with pytest.raises(StepSizeUnderflow):
        lbfgs_optimize(wrong_gradient, [1.0], underflow_threshold=1.0e-12)
