# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import geopandas as gpd
import numpy as np
import pytest
from numpy.testing import assert_allclose
from shapely.geometry import box

from trendsurface.errors import FitError, InvalidInputError
from trendsurface.interpolation import build_grid, fit_final, mask_grid, predict_over_grid
from trendsurface.utils import BoundingBox


@pytest.mark.parametrize(
    "domain, target",
    [
        (BoundingBox(0, 0, 1000, 500), 5000),
        (BoundingBox(-200_000, 300_000, 400_000, 900_000), 10000),
        (BoundingBox(0, 0, 300, 200), 1000),
        (box(-350_000, -600_000, 550_000, 500_000), 10000),
        (BoundingBox(0, 0, 1000, 1), 10),
        (BoundingBox(0, 0, 1, 1000), 10),
        (BoundingBox(0, 0, 10, 10), 2),
        (BoundingBox(0, 0, 50_000, 100), 300),
        (BoundingBox(0, 0, 10, 10), 1),
    ],
)
def test_grid_covers_domain(domain, target):
    grid = build_grid(domain, target)
    bbox = BoundingBox.from_domain(domain)
    x = grid["x"].values
    y = grid["y"].values
    assert grid.dims == ("y", "x")
    assert bbox.xmin <= x.min() and x.max() <= bbox.xmax
    assert bbox.ymin <= y.min() and y.max() <= bbox.ymax
    assert abs(grid.size - target) <= 0.05 * target
    dx, dy = grid.attrs["resolution"]
    assert_allclose(np.diff(x), dx)
    assert_allclose(np.diff(y), -dy)
    assert np.isnan(grid.values).all()


def test_grid_from_geodataframe():
    gdf = gpd.GeoDataFrame(geometry=[box(0, 0, 10, 10), box(10, 0, 20, 10)])
    grid = build_grid(gdf, 200)
    assert grid.sizes == {"y": 10, "x": 20}


def test_grid_keeps_crs():
    grid = build_grid(BoundingBox(0, 0, 10, 10), 4, crs="EPSG:3310")
    assert grid.attrs["crs"] == "EPSG:3310"
    assert grid.attrs["resolution"] == (5.0, 5.0)


@pytest.mark.parametrize(
    "domain, target",
    [(BoundingBox(0, 0, 10, 10), 0), (BoundingBox(0, 0, 0, 10), 100)],
)
def test_invalid_grid(domain, target):
    with pytest.raises(InvalidInputError):
        build_grid(domain, target)


def test_predict_plane_over_grid(plane20):
    model = fit_final(plane20, 1)
    grid = predict_over_grid(model, build_grid(plane20.bounds, 100))
    xx, yy = np.meshgrid(grid["x"], grid["y"])
    assert grid.name == "prediction"
    assert_allclose(grid.values, 2 * xx + 3 * yy, atol=1e-8)


def test_extrapolation_is_returned(plane60):
    model = fit_final(plane60, 3)
    far = build_grid(BoundingBox(-1000, -1000, 1000, 1000), 400)
    grid = predict_over_grid(model, far)
    assert np.isfinite(grid.values).all()


def test_fit_final_degenerate(plane20):
    with pytest.raises(FitError):
        fit_final(plane20.subset(np.arange(5)), 2)


def test_mask_grid():
    grid = build_grid(BoundingBox(0, 0, 10, 10), 100)
    grid = grid.fillna(1.0)
    masked = mask_grid(grid, box(0, 0, 5, 10))
    left = masked.sel(x=slice(0, 5)).values
    right = masked.sel(x=slice(5, 10)).values
    assert (left == 1.0).all()
    assert np.isnan(right).all()


def test_mask_grid_with_geodataframe():
    grid = build_grid(BoundingBox(0, 0, 10, 10), 100).fillna(1.0)
    boundary = gpd.GeoDataFrame(geometry=[box(0, 0, 5, 5), box(5, 5, 10, 10)])
    masked = mask_grid(grid, boundary)
    assert int(masked.notnull().sum()) == 50
