# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import numpy as np
import pytest
from numpy.testing import assert_allclose
from pydantic import ValidationError

from trendsurface.errors import InvalidInputError
from trendsurface.models.basis import (
    Linear,
    PolynomialWithInteraction,
    model_spec,
)

u = np.array([-1.0, -0.5, 0.0, 0.5, 1.0])
v = np.array([0.2, -0.4, 1.0, 0.0, -1.0])


def test_degree_one_is_linear():
    spec = model_spec(1)
    assert isinstance(spec, Linear)
    assert spec.degree == 1


@pytest.mark.parametrize("degree", [2, 3, 5])
def test_higher_degrees_have_interaction(degree):
    spec = model_spec(degree)
    assert isinstance(spec, PolynomialWithInteraction)
    assert spec.degree == degree


@pytest.mark.parametrize("degree", [0, -1, 2.5])
def test_invalid_degree(degree):
    with pytest.raises(InvalidInputError):
        model_spec(degree)


def test_polynomial_needs_degree_two():
    with pytest.raises(ValidationError):
        PolynomialWithInteraction(degree=1)


def test_linear_design_matrix():
    expected = np.column_stack([np.ones(5), u, v])
    assert_allclose(Linear().design_matrix(u, v), expected)


def test_quadratic_design_matrix():
    p2 = lambda t: (3 * t**2 - 1) / 2  # noqa: E731
    expected = np.column_stack([np.ones(5), u, p2(u), v, p2(v), u * v])
    assert_allclose(model_spec(2).design_matrix(u, v), expected)


@pytest.mark.parametrize("degree, n_params", [(1, 3), (2, 6), (3, 11), (4, 18), (5, 27)])
def test_number_of_parameters(degree, n_params):
    spec = model_spec(degree)
    assert spec.n_params == n_params
    assert spec.design_matrix(u, v).shape == (5, n_params)
