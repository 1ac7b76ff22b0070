# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
from typing import Literal

FitErrorReason = Literal["insufficient data", "rank deficient"]


class InvalidInputError(ValueError):
    """Input that cannot be used for fitting or scoring.

    Raised for mismatched sequence lengths, empty observation sets and
    impossible fold or grid requests.
    """


class FitError(Exception):
    """Least-squares fit of a trend surface failed.

    Attributes:
        degree: Polynomial degree that was being fitted.
        reason: Either "insufficient data" (fewer observations than free
            parameters) or "rank deficient" (collinear design matrix).
        n_observations: Number of training observations.
        n_params: Number of free parameters of the model.
        fold: Label of the cross-validation fold, None for a fit on all data.
    """

    def __init__(
        self,
        degree: int,
        reason: FitErrorReason,
        n_observations: int,
        n_params: int,
        fold: int | None = None,
    ):
        self.degree = degree
        self.reason = reason
        self.n_observations = n_observations
        self.n_params = n_params
        self.fold = fold
        super().__init__(self._message())

    def _message(self):
        where = f"degree {self.degree}"
        if self.fold is not None:
            where += f", fold {self.fold}"
        return (
            f"Could not fit {where}: {self.reason} "
            f"({self.n_observations} observations, {self.n_params} parameters)"
        )

    def in_fold(self, fold: int) -> "FitError":
        """Return a copy of this error annotated with a fold label."""
        return FitError(
            degree=self.degree,
            reason=self.reason,
            n_observations=self.n_observations,
            n_params=self.n_params,
            fold=fold,
        )

    def __reduce__(self):
        # Keeps the error picklable for joblib workers.
        return (
            FitError,
            (self.degree, self.reason, self.n_observations, self.n_params, self.fold),
        )
