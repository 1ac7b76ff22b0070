# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike

from trendsurface.errors import InvalidInputError


class BoundingBox(NamedTuple):
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @classmethod
    def from_domain(cls, domain) -> "BoundingBox":
        """Bounding box of a box, geometry or (Geo)DataFrame.

        Accepts anything with ``total_bounds`` (GeoSeries, GeoDataFrame),
        ``bounds`` as a 4-tuple (shapely geometries) or a plain
        ``(xmin, ymin, xmax, ymax)`` sequence.
        """
        if isinstance(domain, cls):
            return domain
        if hasattr(domain, "total_bounds"):
            return cls(*map(float, domain.total_bounds))
        bounds = getattr(domain, "bounds", domain)
        return cls(*map(float, bounds))

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin


@dataclass(frozen=True, eq=False)
class Observations:
    """Point observations in a projected coordinate system.

    Attributes:
        x: Easting of each observation.
        y: Northing of each observation.
        values: Observed response, e.g. annual precipitation in mm.
    """

    x: np.ndarray
    y: np.ndarray
    values: np.ndarray
    crs: str | None = None

    def __post_init__(self):
        for name in ("x", "y", "values"):
            arr = np.array(getattr(self, name), dtype=float).ravel()
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
        if not (len(self.x) == len(self.y) == len(self.values)):
            raise InvalidInputError(
                f"x, y and values must have the same length, got "
                f"{len(self.x)}, {len(self.y)} and {len(self.values)}"
            )

    @classmethod
    def from_xyz(cls, x: ArrayLike, y: ArrayLike, values: ArrayLike, crs=None):
        return cls(x=x, y=y, values=values, crs=crs)

    def __len__(self):
        return len(self.values)

    @property
    def coords(self) -> np.ndarray:
        """Coordinates as an array of shape (n, 2)."""
        return np.column_stack([self.x, self.y])

    @property
    def bounds(self) -> BoundingBox:
        if len(self) == 0:
            raise InvalidInputError("Empty observations have no bounds")
        return BoundingBox(
            float(self.x.min()),
            float(self.y.min()),
            float(self.x.max()),
            float(self.y.max()),
        )

    def subset(self, mask: ArrayLike) -> "Observations":
        """Select observations by boolean mask or index array."""
        mask = np.asarray(mask)
        return Observations(
            x=self.x[mask], y=self.y[mask], values=self.values[mask], crs=self.crs
        )
