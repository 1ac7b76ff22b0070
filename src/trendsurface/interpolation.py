# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""Predict a fitted trend surface over a regular grid."""

import logging
import math

import numpy as np
import shapely
import xarray as xr

from trendsurface.errors import InvalidInputError
from trendsurface.models.trend_surface import TrendSurface
from trendsurface.selection import fit_model
from trendsurface.utils import BoundingBox, Observations

logger = logging.getLogger(__name__)


def fit_final(observations: Observations, degree: int) -> TrendSurface:
    """Fit the chosen degree on all observations."""
    model = fit_model(degree, observations)
    logger.info(f"Fitted degree {degree} trend surface on {len(observations)} observations")
    return model


def build_grid(domain, target_cell_count: int, crs: str | None = None) -> xr.DataArray:
    """Regular lattice of cell centres covering the bounding box of domain.

    Cells are close to square. The number of columns and rows is chosen so that
    their product is near ``target_cell_count``; all cell centres lie inside
    the bounding box.

    Args:
        domain: BoundingBox, shapely geometry or GeoDataFrame/GeoSeries.
        target_cell_count: Requested number of cells.
        crs: Coordinate reference system stored in the grid attributes.

    Returns:
        DataArray with dims ("y", "x") filled with NaN.
    """
    if target_cell_count < 1:
        raise InvalidInputError(f"Need at least one cell, got {target_cell_count}")
    bbox = BoundingBox.from_domain(domain)
    if not (bbox.width > 0 and bbox.height > 0):
        raise InvalidInputError(f"Domain {bbox} has no area")

    # Count the short side first; the long side absorbs the rounding
    aspect = bbox.width / bbox.height
    if aspect >= 1:
        ny = max(1, round(math.sqrt(target_cell_count / aspect)))
        nx = max(1, round(target_cell_count / ny))
    else:
        nx = max(1, round(math.sqrt(target_cell_count * aspect)))
        ny = max(1, round(target_cell_count / nx))
    dx = bbox.width / nx
    dy = bbox.height / ny
    x = bbox.xmin + (np.arange(nx) + 0.5) * dx
    # North up, like rasters
    y = bbox.ymax - (np.arange(ny) + 0.5) * dy

    attrs = {"resolution": (dx, dy)}
    if crs is not None:
        attrs["crs"] = str(crs)
    logger.debug(f"Built {ny} x {nx} grid over {bbox}")
    return xr.DataArray(
        np.full((ny, nx), np.nan),
        dims=("y", "x"),
        coords={"x": x, "y": y},
        attrs=attrs,
    )


def _cell_centres(grid: xr.DataArray):
    return np.meshgrid(grid["x"].values, grid["y"].values)


def predict_over_grid(model: TrendSurface, grid: xr.DataArray) -> xr.DataArray:
    """Evaluate the model at every cell centre.

    Extrapolated values are returned as they are; clipping the surface to a
    meaningful area is left to :func:`mask_grid`.
    """
    xx, yy = _cell_centres(grid)
    predicted = model.predict(np.column_stack([xx.ravel(), yy.ravel()]))
    return grid.copy(data=predicted.reshape(xx.shape)).rename("prediction")


def mask_grid(grid: xr.DataArray, boundary) -> xr.DataArray:
    """Set cells with their centre outside boundary to NaN.

    Args:
        grid: Grid from :func:`build_grid` or :func:`predict_over_grid`.
        boundary: Shapely (multi)polygon or GeoDataFrame/GeoSeries in the
            coordinate system of the grid.
    """
    if hasattr(boundary, "union_all"):
        boundary = boundary.union_all()
    xx, yy = _cell_centres(grid)
    inside = shapely.contains_xy(boundary, xx, yy)
    logger.debug(f"{int(inside.sum())} of {inside.size} cells inside boundary")
    return grid.where(xr.DataArray(inside, dims=grid.dims, coords=grid.coords))
