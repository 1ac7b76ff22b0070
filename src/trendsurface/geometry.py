# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import logging

import geopandas as gpd
import numpy as np

from trendsurface.errors import InvalidInputError
from trendsurface.utils import Observations

logger = logging.getLogger(__name__)

CALIFORNIA_ALBERS = "EPSG:3310"
"""NAD83 / California Albers (Teale Albers), metres."""


def reproject(frame: gpd.GeoDataFrame, crs: str = CALIFORNIA_ALBERS) -> gpd.GeoDataFrame:
    """Transform a GeoDataFrame or GeoSeries to a projected CRS.

    Apply the same call to observations and boundary so they share one
    coordinate system before fitting, gridding and masking.
    """
    if frame.crs is None:
        raise InvalidInputError("Cannot reproject data without a coordinate reference system")
    logger.debug(f"Reprojecting {len(frame)} features from {frame.crs} to {crs}")
    return frame.to_crs(crs)


def observations_from_frame(frame: gpd.GeoDataFrame, column: str = "prec") -> Observations:
    """Observations from the point geometries and one value column."""
    if column not in frame.columns:
        raise InvalidInputError(f"Column {column!r} not found in {list(frame.columns)}")
    geom = frame.geometry
    if len(frame) and not (geom.geom_type == "Point").all():
        raise InvalidInputError("Observations must be point geometries")
    return Observations(
        x=np.asarray(geom.x, dtype=float),
        y=np.asarray(geom.y, dtype=float),
        values=frame[column].to_numpy(dtype=float),
        crs=frame.crs.to_string() if frame.crs is not None else None,
    )
