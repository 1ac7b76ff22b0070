# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""
Boundary polygon(s) of the study area, from any vector file geopandas reads.

Example: Example: Counties dissolved to one state outline

    ```pycon
    from trendsurface.datasets import Boundary

    boundary = Boundary(path="counties.gpkg", dissolve=True).load()
    ```
"""

import logging
from typing import Literal

import geopandas as gpd

from trendsurface.datasets.abstract import Dataset

logger = logging.getLogger(__name__)


class Boundary(Dataset):
    """Polygons delimiting the area to interpolate.

    Attributes:
        path: Shapefile, GeoPackage, GeoJSON or other vector file.
        layer: Layer to read from multi-layer files.
        dissolve: Merge all features into one polygon.
    """

    dataset: Literal["boundary"] = "boundary"
    layer: str | None = None
    dissolve: bool = True

    def raw_load(self) -> gpd.GeoDataFrame:
        kwargs = {"layer": self.layer} if self.layer else {}
        return gpd.read_file(self.path, **kwargs)

    def load(self) -> gpd.GeoDataFrame:
        gdf = self.raw_load()
        if self.dissolve:
            gdf = gpd.GeoDataFrame(geometry=[gdf.union_all()], crs=gdf.crs)
        logger.info(f"Loaded boundary with {len(gdf)} feature(s) from {self.path}")
        return gdf
