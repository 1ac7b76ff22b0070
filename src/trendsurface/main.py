# SPDX-FileCopyrightText: 2024 trendsurface authors
#
# SPDX-License-Identifier: Apache-2.0
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import click
import yaml
from pydantic import BaseModel, Field, PositiveInt, field_validator

from trendsurface.config import CONFIG
from trendsurface.config import Config as TrendsurfaceConfig
from trendsurface.datasets import Boundary, PrecipitationStations
from trendsurface.geometry import CALIFORNIA_ALBERS, observations_from_frame, reproject
from trendsurface.interpolation import build_grid, fit_final, mask_grid, predict_over_grid
from trendsurface.plots import plot_cv_result, plot_surface, save_figure
from trendsurface.selection import OnError, select_degree

logger = logging.getLogger(__name__)

RESULT_FILES = ("recipe.yaml", "cv.csv", "surface.csv", "cv.png", "surface.png")


class Session(BaseModel):
    """Session for executing a workflow."""

    output_dir: Path
    force_override: bool = False

    @field_validator("output_dir")
    def _make_dir(cls, path):
        """Create dirs if they don't exist yet."""
        if not path.exists():
            logger.info(f"Creating folder {path}")
            path.mkdir(parents=True)
        return path

    @classmethod
    def for_recipe(
        cls,
        recipe: Path,
        output_dir: Path | None = None,
        config: TrendsurfaceConfig = CONFIG,
    ) -> "Session":
        if output_dir is None:
            now = datetime.now().strftime("%Y%m%d-%H%M%S")
            output_dir = config.output_root_dir / f"trendsurface-{recipe.stem}-{now}"
        return cls(output_dir=output_dir, force_override=config.force_override)

    def check_writable(self):
        """Refuse to overwrite earlier results unless forced."""
        existing = [f for f in RESULT_FILES if (self.output_dir / f).exists()]
        if existing and not self.force_override:
            raise FileExistsError(
                f"{self.output_dir} already contains {existing}; "
                "use --force-override to overwrite"
            )


class SelectionOptions(BaseModel):
    """Cross-validation settings.

    Attributes:
        degrees: Candidate polynomial degrees.
        folds: Number of folds.
        seed: Seed of the random fold assignment.
        on_error: "raise" to stop at a degenerate fit, "skip" to leave the
            degree out.
        n_jobs: Number of parallel workers, None for sequential.
    """

    degrees: Sequence[PositiveInt] = (1, 2, 3, 4, 5)
    folds: int = Field(default=5, ge=2)
    seed: int = 5132015
    on_error: OnError = "raise"
    n_jobs: int | None = None


class InterpolationOptions(BaseModel):
    """Final fit settings.

    Attributes:
        degree: Degree of the final surface. None takes the degree with the
            lowest cross-validated RMSE.
        cells: Approximate number of grid cells.
    """

    degree: PositiveInt | None = None
    cells: PositiveInt = 10000


class Workflow(BaseModel):
    stations: PrecipitationStations
    boundary: Boundary | None = None
    crs: str = CALIFORNIA_ALBERS
    selection: SelectionOptions = SelectionOptions()
    interpolation: InterpolationOptions = InterpolationOptions()
    plots: bool = False

    @classmethod
    def from_recipe(cls, recipe: Path):
        with open(recipe, "r") as raw_recipe:
            options = yaml.safe_load(raw_recipe)

        # Data paths are relative to the recipe
        for key in ("stations", "boundary"):
            dataset = options.get(key)
            if dataset and "path" in dataset and not Path(dataset["path"]).is_absolute():
                dataset["path"] = str(Path(recipe).parent / dataset["path"])

        return cls(**options)

    def to_recipe(self):
        """Return the workflow as a recipe string."""
        return yaml.dump(self.model_dump(mode="json"), sort_keys=False)

    def save_recipe(self, path: Path):
        """Save the workflow as a recipe file."""

        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, sort_keys=False)

    def execute(self, session: Session):
        """Load data, cross-validate, interpolate and save the results."""
        session.check_writable()
        self.save_recipe(session.output_dir / "recipe.yaml")

        stations = reproject(self.stations.load(), self.crs)
        observations = observations_from_frame(stations, self.stations.name)
        boundary = None
        if self.boundary is not None:
            boundary = reproject(self.boundary.load(), self.crs)

        opts = self.selection
        cv = select_degree(
            observations,
            degrees=opts.degrees,
            k=opts.folds,
            seed=opts.seed,
            on_error=opts.on_error,
            n_jobs=opts.n_jobs,
        )
        cv_fn = session.output_dir / "cv.csv"
        cv.to_frame().to_csv(cv_fn)
        logger.info(f"Cross-validation results saved to: {cv_fn}")

        degree = self.interpolation.degree or cv.best_degree()
        logger.info(f"Interpolating with degree {degree}")
        model = fit_final(observations, degree)
        domain = boundary if boundary is not None else observations.bounds
        grid = build_grid(domain, self.interpolation.cells, crs=self.crs)
        surface = predict_over_grid(model, grid)
        if boundary is not None:
            surface = mask_grid(surface, boundary)

        surface_fn = session.output_dir / "surface.csv"
        surface.to_dataframe().dropna().to_csv(surface_fn)
        logger.info(f"Surface saved to: {surface_fn}")

        if self.plots:
            save_figure(plot_cv_result(cv), session.output_dir / "cv.png")
            save_figure(
                plot_surface(surface, boundary, observations),
                session.output_dir / "surface.png",
            )
        return cv, surface


def main(recipe, output_dir: Optional[Path]):
    session = Session.for_recipe(recipe, output_dir)

    Workflow.from_recipe(recipe).execute(session)


@click.command
@click.argument("recipe", type=click.Path(exists=True, path_type=Path))
@click.option("--output-dir", default=None, type=click.Path(path_type=Path))
@click.option(
    "--output-root-dir", default=CONFIG.output_root_dir, type=click.Path(path_type=Path)
)
@click.option(
    "--force-override",
    is_flag=True,
    default=CONFIG.force_override,
    help="Overwrite results in an existing output directory.",
)
def cli(
    recipe: Path,
    output_dir: Optional[Path],
    output_root_dir: Path,
    force_override: bool,
):
    """Cross-validate and interpolate a trend surface described by RECIPE."""
    logging.basicConfig(level=logging.INFO)
    CONFIG.output_root_dir = output_root_dir
    CONFIG.force_override = force_override
    main(recipe, output_dir)


if __name__ == "__main__":
    cli()
