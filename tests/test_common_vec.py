import numpy as np
import pytest

from qncommon import as_vector, dot, ray, within


def test_ray_is_affine_in_step():
    point = ray([1.0, 2.0], [0.5, -1.0])
    np.testing.assert_allclose(point(0.0), [1.0, 2.0])
    np.testing.assert_allclose(point(2.0), [2.0, 0.0])
    np.testing.assert_allclose(point(-1.0), [0.5, 3.0])


def test_ray_rejects_mismatched_shapes():
    with pytest.raises(ValueError):
        ray([1.0, 2.0], [1.0])


def test_within_is_absolute_and_inclusive():
    assert within(1.0e-4, 5.0, 5.0 + 5.0e-5)
    assert within(0.5, 1.0, 1.5)
    assert not within(1.0e-4, 1.0e6, 1.0e6 * (1.0 + 1.0e-9) + 1.0)
    assert not within(1.0e-4, -1.0, 99.0)


def test_dot_and_as_vector():
    assert dot(np.array([1.0, 2.0]), np.array([3.0, -1.0])) == 1.0
    with pytest.raises(ValueError):
        dot(np.array([1.0]), np.array([1.0, 2.0]))
    assert as_vector((1, 2)).dtype == float
    with pytest.raises(ValueError):
        as_vector([])
    with pytest.raises(ValueError):
        as_vector([[1.0, 2.0]])
