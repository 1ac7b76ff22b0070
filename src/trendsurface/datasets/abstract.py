# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
"""
Standard interface for trendsurface datasets.

All trendsurface datasets should inherit from the abstract Dataset class and
implement the basic functionality described here.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import geopandas as gpd
import yaml
from pydantic import BaseModel, field_validator


class Dataset(BaseModel, ABC, validate_default=True, validate_assignment=True):
    """Base class for trendsurface datasets.

    Attributes:
        dataset: The name of the dataset.
        path: Location of the file on disk.
    """

    dataset: str
    path: Path

    @field_validator("path")
    def _must_exist(cls, path):
        assert path.exists(), f"{path} does not exist"
        return path

    def raw_load(self):
        """Loads from disk with minimal modification.

        Mostly intended to provide insight into the modifications made in the
        load method.
        """
        raise NotImplementedError("raw_load not implemented for this dataset.")

    @abstractmethod
    def load(self) -> gpd.GeoDataFrame:
        """Load and harmonize the data.

        Output is a GeoDataFrame in the coordinate system of the source file.
        """

    def to_recipe(self):
        """Print out a recipe to reproduce this dataset."""
        recipe = self.model_dump(mode="json", exclude_none=True)
        return yaml.dump(recipe, sort_keys=False)
