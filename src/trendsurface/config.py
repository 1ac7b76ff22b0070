# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
from pathlib import Path

from pydantic import BaseModel


class Config(BaseModel, validate_assignment=True, validate_default=True):
    output_root_dir: Path = Path(".")
    """Parent of the per-run output directories."""
    force_override: bool = False
    """Overwrite results already present in an output directory."""


CONFIG = Config()
