# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""Polynomial trend surfaces with cross-validated degree selection."""

from trendsurface.errors import FitError, InvalidInputError
from trendsurface.interpolation import (
    build_grid,
    fit_final,
    mask_grid,
    predict_over_grid,
)
from trendsurface.selection import (
    CVResult,
    Observations,
    assign_folds,
    cross_validate,
    fit_model,
    null_rmse,
    rmse,
    select_degree,
)

__all__ = [
    "CVResult",
    "FitError",
    "InvalidInputError",
    "Observations",
    "assign_folds",
    "build_grid",
    "cross_validate",
    "fit_final",
    "fit_model",
    "mask_grid",
    "null_rmse",
    "predict_over_grid",
    "rmse",
    "select_degree",
]
