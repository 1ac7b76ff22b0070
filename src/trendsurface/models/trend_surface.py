# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import logging

import numpy as np
from numpy.typing import ArrayLike
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.utils.validation import check_is_fitted

from trendsurface.errors import FitError, InvalidInputError
from trendsurface.models.basis import model_spec

logger = logging.getLogger(__name__)


def _as_coordinates(X: ArrayLike) -> np.ndarray:
    X = np.asarray(X, dtype=float)
    if X.ndim != 2 or X.shape[1] != 2:
        raise InvalidInputError(
            f"Expected coordinates of shape (n_samples, 2), got {X.shape}"
        )
    return X


def _scale(values, center, halfwidth):
    return (values - center) / halfwidth


class TrendSurface(RegressorMixin, BaseEstimator):
    """Least-squares polynomial trend surface of a given degree.

    Coordinates are rescaled to [-1, 1] over the extent of the training data
    before the basis of :func:`trendsurface.models.basis.model_spec` is built.
    Predictions outside that extent are plain polynomial extrapolations.
    """

    def __init__(self, degree=1):
        self.degree = degree

    def fit(self, X: ArrayLike, y: ArrayLike):
        """Fit the surface to the available observations.

        Parameters:
            X: 2D Array of shape (n_samples, 2) with projected x and y
                coordinates.
            y: 1D Array of length n_samples with the observed response.

        Raises:
            InvalidInputError: for empty, mismatched or non-finite input.
            FitError: when there are fewer observations than parameters or
                the design matrix is rank deficient.

        Returns:
            Fitted model
        """
        X = _as_coordinates(X)
        y = np.asarray(y, dtype=float).ravel()
        if len(X) == 0:
            raise InvalidInputError("Cannot fit a trend surface to zero observations")
        if len(X) != len(y):
            raise InvalidInputError(
                f"Got {len(X)} coordinates but {len(y)} values"
            )
        if not (np.isfinite(X).all() and np.isfinite(y).all()):
            raise InvalidInputError("Training data contains missing values")

        spec = model_spec(self.degree)
        n_obs = len(y)
        if n_obs < spec.n_params:
            raise FitError(
                degree=spec.degree,
                reason="insufficient data",
                n_observations=n_obs,
                n_params=spec.n_params,
            )

        lower = X.min(axis=0)
        upper = X.max(axis=0)
        center = (upper + lower) / 2
        halfwidth = (upper - lower) / 2
        # Constant coordinates give a constant column; the rank check reports it
        halfwidth[halfwidth == 0] = 1.0

        U = _scale(X, center, halfwidth)
        design = spec.design_matrix(U[:, 0], U[:, 1])
        coef, _, rank, _ = np.linalg.lstsq(design, y, rcond=None)
        if rank < spec.n_params:
            raise FitError(
                degree=spec.degree,
                reason="rank deficient",
                n_observations=n_obs,
                n_params=spec.n_params,
            )

        self.spec_ = spec
        self.center_ = center
        self.halfwidth_ = halfwidth
        self.coef_ = coef
        self.n_features_in_ = 2
        logger.debug(f"Fitted degree {spec.degree} surface on {n_obs} observations")
        return self

    def predict(self, X: ArrayLike):
        """Predict the response at new coordinates.

        Parameters:
            X: array-like, shape (n_samples, 2) with projected coordinates.

        Returns:
            y: array-like, shape (n_samples,). Rows with missing coordinates
               give NaN.
        """
        check_is_fitted(self, "coef_")
        X = _as_coordinates(X)
        U = _scale(X, self.center_, self.halfwidth_)
        return self.spec_.design_matrix(U[:, 0], U[:, 1]) @ self.coef_
