# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""Figures of the error curve and the interpolated surface."""

import logging

import matplotlib.pyplot as plt
import xarray as xr

from trendsurface.selection import CVResult

logger = logging.getLogger(__name__)


def plot_cv_result(cv: CVResult, ax=None):
    """Cross-validated RMSE by degree, with the null model for reference."""
    if ax is None:
        _, ax = plt.subplots()
    df = cv.to_frame()
    ax.plot(df.index, df["rmse"], marker="o", label="trend surface")
    if cv.null_rmse is not None:
        ax.axhline(cv.null_rmse, color="grey", linestyle="--", label="null model")
    ax.set_xticks(list(df.index))
    ax.set_xlabel("Polynomial degree")
    ax.set_ylabel("RMSE")
    ax.set_title(f"{cv.k}-fold cross-validation")
    ax.legend()
    return ax


def plot_surface(grid: xr.DataArray, boundary=None, observations=None, ax=None):
    """Raster of the (masked) surface with optional outline and stations."""
    if ax is None:
        _, ax = plt.subplots()
    grid.plot.imshow(ax=ax, cmap="viridis_r", cbar_kwargs={"label": grid.name or ""})
    if boundary is not None:
        boundary.boundary.plot(ax=ax, color="black", linewidth=0.5)
    if observations is not None:
        ax.scatter(observations.x, observations.y, s=4, color="red")
    ax.set_aspect("equal")
    return ax


def save_figure(ax, path):
    ax.figure.savefig(path, bbox_inches="tight")
    plt.close(ax.figure)
    logger.info(f"Saved figure to {path}")
