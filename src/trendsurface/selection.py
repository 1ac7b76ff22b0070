# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""
Cross-validated selection of the trend surface degree.

All candidate degrees are scored on one fold assignment, so their errors can
be compared directly. The result is the full error curve; picking a degree
from it is up to the caller.

Example:

    ```pycon
    from trendsurface.selection import Observations, select_degree

    obs = Observations.from_xyz(x, y, precipitation)
    cv = select_degree(obs, degrees=range(1, 6), k=5, seed=5132015)
    cv.to_frame()
    cv.best_degree()
    ```
"""

import logging
from typing import Iterable, Literal, NamedTuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from pydantic import BaseModel

from trendsurface.errors import FitError, InvalidInputError
from trendsurface.models.basis import model_spec
from trendsurface.models.loss_functions import count_missing_pairs, null_rmse, rmse
from trendsurface.models.trend_surface import TrendSurface
from trendsurface.utils import Observations

logger = logging.getLogger(__name__)

__all__ = [
    "CVResult",
    "FoldScores",
    "Observations",
    "assign_folds",
    "count_missing_pairs",
    "cross_validate",
    "cross_validate_folds",
    "fit_model",
    "null_rmse",
    "rmse",
    "select_degree",
]

FoldAssignment = np.ndarray
"""Integer fold label in 1..k for each observation."""

OnError = Literal["raise", "skip"]


def assign_folds(n: int, k: int, seed: int) -> FoldAssignment:
    """Randomly partition n observations into k folds of (nearly) equal size.

    Labels 1..k are repeated over the indices and then shuffled, so fold sizes
    differ by at most one. The same seed always gives the same assignment.
    """
    if k < 2:
        raise InvalidInputError(f"Need at least 2 folds, got {k}")
    if n < k:
        raise InvalidInputError(f"Cannot split {n} observations into {k} folds")
    labels = np.arange(n) % k + 1
    rng = np.random.default_rng(seed)
    return rng.permutation(labels)


def fit_model(degree: int, observations: Observations) -> TrendSurface:
    """Least-squares trend surface of the given degree."""
    if len(observations) == 0:
        raise InvalidInputError("Cannot fit a trend surface to zero observations")
    return TrendSurface(degree=degree).fit(observations.coords, observations.values)


class FoldScores(NamedTuple):
    """Held-out RMSE per fold label and the number of ignored pairs."""

    errors: dict[int, float]
    n_missing: int

    @property
    def mean(self) -> float:
        return float(np.mean(list(self.errors.values())))


def _check_folds(observations: Observations, folds: FoldAssignment):
    if len(observations) == 0:
        raise InvalidInputError("Cannot cross-validate zero observations")
    folds = np.asarray(folds)
    if len(folds) != len(observations):
        raise InvalidInputError(
            f"Fold assignment has {len(folds)} labels "
            f"for {len(observations)} observations"
        )
    return folds


def cross_validate_folds(
    observations: Observations, degree: int, folds: FoldAssignment
) -> FoldScores:
    """Fit on all but one fold and score on the held out fold, for every fold.

    Raises:
        FitError: annotated with the fold label when a fold cannot be fitted.
    """
    folds = _check_folds(observations, folds)
    errors = {}
    n_missing = 0
    for fold in np.unique(folds):
        fold = int(fold)
        test = folds == fold
        try:
            model = fit_model(degree, observations.subset(~test))
        except FitError as e:
            raise e.in_fold(fold) from e
        held_out = observations.subset(test)
        predicted = model.predict(held_out.coords)
        n_missing += count_missing_pairs(held_out.values, predicted)
        errors[fold] = rmse(held_out.values, predicted)
    return FoldScores(errors=errors, n_missing=n_missing)


def cross_validate(
    observations: Observations, degree: int, folds: FoldAssignment
) -> float:
    """Mean held-out RMSE over all folds."""
    scores = cross_validate_folds(observations, degree, folds)
    if scores.n_missing:
        logger.warning(
            f"Degree {degree}: ignored {scores.n_missing} observation/prediction "
            "pairs with missing values"
        )
    return scores.mean


class CVResult(BaseModel):
    """Cross-validated error curve of the candidate degrees.

    Attributes:
        errors: Mean RMSE over the folds for each degree. NaN when the degree
            failed and failures were skipped.
        fold_errors: RMSE of each fold for each degree.
        missing: Number of ignored observation/prediction pairs per degree.
        failures: Reason per degree that could not be evaluated.
        null_rmse: RMSE of predicting the mean everywhere.
        k: Number of folds.
        seed: Seed of the fold assignment.
    """

    errors: dict[int, float]
    fold_errors: dict[int, dict[int, float]] = {}
    missing: dict[int, int] = {}
    failures: dict[int, str] = {}
    null_rmse: float | None = None
    k: int
    seed: int

    @property
    def degrees(self) -> list[int]:
        return list(self.errors)

    def best_degree(self) -> int:
        """Degree with the lowest error, ignoring failed degrees."""
        scored = {d: e for d, e in self.errors.items() if not np.isnan(e)}
        if not scored:
            raise InvalidInputError("No degree could be evaluated")
        return min(scored, key=scored.get)

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            {
                "degree": self.degrees,
                "rmse": [self.errors[d] for d in self.degrees],
                "n_missing": [self.missing.get(d, 0) for d in self.degrees],
                "failure": [self.failures.get(d, "") for d in self.degrees],
            }
        )
        if self.null_rmse:
            df["relative_improvement"] = 1 - df["rmse"] / self.null_rmse
        else:
            df["relative_improvement"] = np.nan
        return df.set_index("degree")


def _evaluate_degree(observations, degree, folds, on_error):
    try:
        return cross_validate_folds(observations, degree, folds), None
    except FitError as e:
        if on_error == "raise":
            raise
        return None, e


def select_degree(
    observations: Observations,
    degrees: Iterable[int],
    k: int,
    seed: int,
    on_error: OnError = "raise",
    n_jobs: int | None = None,
) -> CVResult:
    """Cross-validate every candidate degree on one shared fold assignment.

    Args:
        observations: Observations in a projected coordinate system.
        degrees: Candidate polynomial degrees.
        k: Number of folds.
        seed: Seed for the fold assignment.
        on_error: "raise" propagates the first FitError. "skip" records NaN
            for a degree that fails in any fold and logs the reason.
        n_jobs: Evaluate degrees in parallel with joblib. None runs
            sequentially. Results do not depend on this setting.

    Returns:
        Error curve over the candidate degrees.
    """
    degrees = list(degrees)
    if not degrees:
        raise InvalidInputError("No candidate degrees given")
    if len(set(degrees)) != len(degrees):
        raise InvalidInputError(f"Duplicate candidate degrees in {degrees}")
    if on_error not in ("raise", "skip"):
        raise InvalidInputError(f"on_error must be 'raise' or 'skip', not {on_error!r}")
    for degree in degrees:
        model_spec(degree)
    if len(observations) == 0:
        raise InvalidInputError("Cannot cross-validate zero observations")

    folds = assign_folds(len(observations), k, seed)
    logger.info(
        f"Cross-validating degrees {degrees} on {len(observations)} observations "
        f"in {k} folds"
    )
    outcomes = Parallel(n_jobs=n_jobs)(
        delayed(_evaluate_degree)(observations, degree, folds, on_error)
        for degree in degrees
    )

    errors, fold_errors, missing, failures = {}, {}, {}, {}
    for degree, (scores, failure) in zip(degrees, outcomes):
        if failure is not None:
            logger.warning(f"Skipping degree {degree}: {failure}")
            errors[degree] = float("nan")
            failures[degree] = str(failure)
            continue
        errors[degree] = scores.mean
        fold_errors[degree] = scores.errors
        missing[degree] = scores.n_missing
        if scores.n_missing:
            logger.warning(
                f"Degree {degree}: ignored {scores.n_missing} "
                "observation/prediction pairs with missing values"
            )
        logger.info(f"Degree {degree}: cross-validated RMSE {scores.mean:.4g}")

    return CVResult(
        errors=errors,
        fold_errors=fold_errors,
        missing=missing,
        failures=failures,
        null_rmse=null_rmse(observations.values),
        k=k,
        seed=seed,
    )
