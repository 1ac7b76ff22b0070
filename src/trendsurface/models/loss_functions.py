# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import numpy as np
from numpy.typing import ArrayLike

from trendsurface.errors import InvalidInputError


def _paired(observed: ArrayLike, predicted: ArrayLike):
    observed = np.asarray(observed, dtype=float).ravel()
    predicted = np.asarray(predicted, dtype=float).ravel()
    if len(observed) != len(predicted):
        raise InvalidInputError(
            f"observed and predicted differ in length "
            f"({len(observed)} != {len(predicted)})"
        )
    valid = np.isfinite(observed) & np.isfinite(predicted)
    return observed, predicted, valid


def rmse(observed: ArrayLike, predicted: ArrayLike) -> float:
    """Root-mean-square error between observations and predictions.

    Pairs where either value is missing (NaN or infinite) are left out of both
    the sum and the count. Returns NaN when no valid pair remains.
    """
    observed, predicted, valid = _paired(observed, predicted)
    if valid.sum() == 0:
        return float("nan")
    return float(np.sqrt(np.mean((predicted[valid] - observed[valid]) ** 2)))


def count_missing_pairs(observed: ArrayLike, predicted: ArrayLike) -> int:
    """Number of pairs :func:`rmse` ignores."""
    _, _, valid = _paired(observed, predicted)
    return int((~valid).sum())


def null_rmse(values: ArrayLike) -> float:
    """RMSE of the null model, which predicts the mean everywhere."""
    values = np.asarray(values, dtype=float).ravel()
    finite = values[np.isfinite(values)]
    if len(finite) == 0:
        raise InvalidInputError("Null model needs at least one observation")
    return rmse(values, np.full_like(values, finite.mean()))
