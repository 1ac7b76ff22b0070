# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""
Weather station precipitation totals from a CSV file.

The file holds one row per station with its longitude and latitude and
either an annual total or one column per month. Monthly columns are summed
to an annual total.

Example: Example: Load California station data

    ```pycon
    from trendsurface.datasets import PrecipitationStations

    source = PrecipitationStations(path="precipitation.csv")
    df = source.load()
    ```

Example: Example: Use an existing total column

    ```pycon
    from trendsurface.datasets import PrecipitationStations

    source = PrecipitationStations(path="stations.csv", value_column="ANNUAL")
    df = source.load()
    ```

"""

import logging
from typing import Literal, Sequence

import geopandas as gpd
import pandas as pd

from trendsurface.datasets.abstract import Dataset

logger = logging.getLogger(__name__)

MONTHS = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)


class PrecipitationStations(Dataset):
    """Station precipitation table.

    Attributes:
        path: CSV file with one row per station.
        x_column: Column with the longitude (or other x coordinate).
        y_column: Column with the latitude (or other y coordinate).
        value_column: Column with the total. If None, `months` are summed.
        months: Monthly columns to sum when `value_column` is None.
        crs: Coordinate reference system of the x and y columns.
        name: Name of the output value column.
    """

    dataset: Literal["precipitation_stations"] = "precipitation_stations"
    x_column: str = "LONG"
    y_column: str = "LAT"
    value_column: str | None = None
    months: Sequence[str] = MONTHS
    crs: str = "EPSG:4326"
    name: str = "prec"

    def raw_load(self) -> pd.DataFrame:
        return pd.read_csv(self.path)

    def load(self) -> gpd.GeoDataFrame:
        df = self.raw_load()
        wanted = [self.x_column, self.y_column]
        wanted += [self.value_column] if self.value_column else list(self.months)
        missing = [c for c in wanted if c not in df.columns]
        if missing:
            raise ValueError(f"Missing columns in {self.path}: {missing}")

        if self.value_column:
            values = df[self.value_column].astype(float)
        else:
            # A station missing any month has no total
            values = df[list(self.months)].astype(float).sum(
                axis=1, min_count=len(self.months)
            )

        gdf = gpd.GeoDataFrame(
            {self.name: values},
            geometry=gpd.points_from_xy(df[self.x_column], df[self.y_column]),
            crs=self.crs,
        )
        n_missing = int(gdf[self.name].isna().sum())
        if n_missing:
            logger.warning(f"Dropping {n_missing} stations without a complete total")
            gdf = gdf.dropna(subset=[self.name]).reset_index(drop=True)
        logger.info(f"Loaded {len(gdf)} stations from {self.path}")
        return gdf
