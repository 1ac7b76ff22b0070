# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
from textwrap import dedent

import geopandas as gpd
import matplotlib
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box

from trendsurface.config import CONFIG
from trendsurface.datasets.precipitation import MONTHS
from trendsurface.utils import Observations

matplotlib.use("Agg")


def plane_observations(n, seed=0, scale=100.0):
    """Observations on the exact plane z = 2x + 3y."""
    rng = np.random.default_rng(seed)
    x = rng.uniform(0, scale, n)
    y = rng.uniform(0, scale, n)
    return Observations.from_xyz(x, y, 2 * x + 3 * y)


@pytest.fixture
def make_plane():
    return plane_observations


@pytest.fixture
def plane20():
    return plane_observations(20)


@pytest.fixture
def plane60():
    return plane_observations(60, seed=1)


@pytest.fixture
def constant20():
    rng = np.random.default_rng(2)
    return Observations.from_xyz(
        rng.uniform(0, 100, 20), rng.uniform(0, 100, 20), np.full(20, 100.0)
    )


@pytest.fixture
def stations_csv(tmp_path):
    """Station table in lon/lat with monthly totals, like the California data."""
    rng = np.random.default_rng(42)
    n = 30
    df = pd.DataFrame(
        {
            "NAME": [f"station {i}" for i in range(n)],
            "LONG": rng.uniform(-123, -117, n),
            "LAT": rng.uniform(34, 40, n),
        }
    )
    for month in MONTHS:
        df[month] = rng.uniform(0, 100, n).round(1)
    path = tmp_path / "precipitation.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def boundary_file(tmp_path):
    """Two touching squares covering the stations."""
    gdf = gpd.GeoDataFrame(
        {"name": ["north", "south"]},
        geometry=[box(-124, 37, -116, 41), box(-124, 33, -116, 37)],
        crs="EPSG:4326",
    )
    path = tmp_path / "boundary.geojson"
    gdf.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def recipe_file(tmp_path, stations_csv, boundary_file):
    path = tmp_path / "recipe.yaml"
    path.write_text(
        dedent(
            """\
            stations:
              dataset: precipitation_stations
              path: precipitation.csv
            boundary:
              dataset: boundary
              path: boundary.geojson
            crs: EPSG:3310
            selection:
              degrees: [1, 2]
              folds: 5
              seed: 5132015
            interpolation:
              cells: 400
            plots: true
            """
        )
    )
    return path


@pytest.fixture(autouse=True)
def restore_config():
    """The CLI writes its options to the global config."""
    old = CONFIG.model_copy()
    yield
    CONFIG.output_root_dir = old.output_root_dir
    CONFIG.force_override = old.force_override
