# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""
Regression bases for polynomial trend surfaces.

A trend surface of degree 1 is a plane. Higher degrees add Legendre
polynomials of each coordinate up to the degree, plus the interaction of the
one-lower-degree polynomials of both coordinates:

    degree 1:  1 + x + y
    degree d:  1 + P1(x)..Pd(x) + P1(y)..Pd(y) + Pi(x) * Pj(y)  (i, j < d)

Coordinates are expected to be rescaled to [-1, 1] before the basis is built,
which is where Legendre polynomials are orthogonal.

Example:

    ```pycon
    from trendsurface.models.basis import model_spec

    spec = model_spec(3)
    spec.n_params  # 11
    A = spec.design_matrix(u, v)
    ```
"""

from abc import ABC, abstractmethod
from typing import Literal

import numpy as np
from numpy.polynomial import legendre
from numpy.typing import ArrayLike
from pydantic import BaseModel, Field

from trendsurface.errors import InvalidInputError


class ModelSpec(BaseModel, ABC, frozen=True):
    """Base class for trend surface bases."""

    kind: str
    degree: int
    """Highest exponent of either coordinate."""

    @property
    @abstractmethod
    def n_params(self) -> int:
        """Number of columns of the design matrix."""

    @abstractmethod
    def design_matrix(self, x: ArrayLike, y: ArrayLike) -> np.ndarray:
        """Basis functions evaluated at (x, y), shape (n, n_params)."""


class Linear(ModelSpec, frozen=True):
    """Plane through the data: intercept plus both coordinates."""

    kind: Literal["linear"] = "linear"
    degree: Literal[1] = 1

    @property
    def n_params(self) -> int:
        return 3

    def design_matrix(self, x, y):
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        return np.column_stack([np.ones_like(x), x, y])


class PolynomialWithInteraction(ModelSpec, frozen=True):
    """Polynomials in x and y plus a lower degree interaction term."""

    kind: Literal["polynomial"] = "polynomial"
    degree: int = Field(ge=2)

    @property
    def n_params(self) -> int:
        # intercept, d terms per axis, (d-1)**2 interaction terms
        return self.degree**2 + 2

    def design_matrix(self, x, y):
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()
        d = self.degree
        # legvander columns are P0..Pd; P0 is the constant
        px = legendre.legvander(x, d)
        py = legendre.legvander(y, d)
        interaction = (px[:, 1:d, None] * py[:, None, 1:d]).reshape(len(x), -1)
        return np.column_stack([px[:, :1], px[:, 1:], py[:, 1:], interaction])


def model_spec(degree: int) -> Linear | PolynomialWithInteraction:
    """Return the basis for a polynomial degree."""
    if isinstance(degree, bool) or int(degree) != degree:
        raise InvalidInputError(f"Degree must be an integer, got {degree!r}")
    degree = int(degree)
    if degree < 1:
        raise InvalidInputError(f"Degree must be at least 1, got {degree}")
    if degree == 1:
        return Linear()
    return PolynomialWithInteraction(degree=degree)
