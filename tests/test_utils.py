# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import numpy as np
import pytest
from shapely.geometry import box

from trendsurface.errors import InvalidInputError
from trendsurface.utils import BoundingBox, Observations


def test_bounding_box_size():
    bbox = BoundingBox(-2, 0, 4, 5)
    assert bbox.width == 6
    assert bbox.height == 5


def test_bounding_box_from_geometry():
    assert BoundingBox.from_domain(box(0, 1, 2, 3)) == BoundingBox(0, 1, 2, 3)
    assert BoundingBox.from_domain([0, 1, 2, 3]) == BoundingBox(0, 1, 2, 3)

def test_observations_are_read_only():
    x = np.array([1.0, 2.0])
    obs = Observations.from_xyz(x, [3, 4], [5, 6])
    with pytest.raises(ValueError):
        obs.x[0] = 10
    # the caller's array is left alone
    x[0] = 10
    assert obs.x[0] == 1.0


def test_observations_length_mismatch():
    with pytest.raises(InvalidInputError):
        Observations.from_xyz([1, 2], [3], [4, 5])


def test_observations_subset_and_bounds():
    obs = Observations.from_xyz([0, 1, 2], [5, 6, 7], [1, 2, 3], crs="EPSG:3310")
    sub = obs.subset(np.array([True, False, True]))
    assert len(sub) == 2
    assert sub.crs == "EPSG:3310"
    assert sub.bounds == BoundingBox(0, 5, 2, 7)
    assert sub.x.tolist() == [0.0, 2.0]


def test_empty_observations_have_no_bounds():
    with pytest.raises(InvalidInputError):
        Observations.from_xyz([], [], []).bounds
