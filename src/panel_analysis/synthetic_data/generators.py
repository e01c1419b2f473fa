"""
Orchestration layer for synthetic panel data generation.

This module ties together item covariates, subject and item random
intercepts, and trial noise to generate a fully crossed panel.
"""

import itertools
import logging
from pathlib import Path

import pandas as pd
from numpy.random import Generator

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    ITEM_PREFIX,
    PANEL_COLUMNS,
    PREDICTOR_COLUMN,
    RESPONSE_COLUMN,
    SUBJECT_COLUMN,
    SUBJECT_PREFIX,
)
from panel_analysis.core.data import save_panel_csv
from panel_analysis.core.data_models import format_identifiers
from panel_analysis.core.utils import get_rng
from panel_analysis.synthetic_data.config import (
    DEFAULT_FIXED_SLOPE,
    DEFAULT_ITEM_PREDICTOR_SCALE,
    DEFAULT_ITEM_SD,
    DEFAULT_MEAN_LEVEL,
    DEFAULT_RESIDUAL_SD,
    DEFAULT_SUBJECT_SD,
    PanelGenerationConfig,
)
from panel_analysis.synthetic_data.data_models import (
    FIXED_EFFECT_COLUMN,
    ITEM_OFFSET_COLUMN,
    MEAN_COLUMN,
    RESIDUAL_COLUMN,
    SUBJECT_OFFSET_COLUMN,
    GeneratedPanel,
    GeneratingParameters,
)
from panel_analysis.synthetic_data.sampling import (
    draw_group_offsets,
    draw_item_predictors,
    draw_residuals,
)

logger = logging.getLogger(__name__)


def generate_panel(
    config: PanelGenerationConfig,
    rng: Generator | None = None,
) -> GeneratedPanel:
    """
    Generate a synthetic panel dataset.

    This is the main entry point for the synthetic data generation pipeline.
    Draws happen in a fixed order so that a seed fully determines the output:
        1. Item predictors (one Exp(1) draw per item, scaled and rounded)
        2. Crossed subject x item grid (subject-major)
        3. Subject random intercepts
        4. Item random intercepts
        5. Trial-level residuals
        6. Fixed effect contribution and response

    Offsets and predictors are joined to records by identifier.

    Args:
        config: Complete generation configuration.
        rng: Random source. Defaults to a generator seeded with
            ``config.random_seed``.

    Returns:
        GeneratedPanel containing the observable table and all latent
        components.
    """
    if rng is None:
        rng = get_rng(config.random_seed)

    subject_ids = format_identifiers(SUBJECT_PREFIX, config.n_subjects)
    item_ids = format_identifiers(ITEM_PREFIX, config.n_items)

    # Step 1: Item-level covariate
    predictors = draw_item_predictors(
        item_ids, config.item_predictor_scale, rng
    )

    # Step 2: Fully crossed grid
    grid = pd.DataFrame(
        list(itertools.product(subject_ids, item_ids)),
        columns=[SUBJECT_COLUMN, ITEM_COLUMN],
    )

    # Steps 3-5: Random intercepts and trial noise
    subject_offsets = draw_group_offsets(subject_ids, config.subject_sd, rng)
    item_offsets = draw_group_offsets(item_ids, config.item_sd, rng)
    residuals = draw_residuals(len(grid), config.residual_sd, rng)

    components = grid.assign(
        **{
            PREDICTOR_COLUMN: grid[ITEM_COLUMN].map(predictors),
            MEAN_COLUMN: config.mean_level,
            SUBJECT_OFFSET_COLUMN: grid[SUBJECT_COLUMN].map(subject_offsets),
            ITEM_OFFSET_COLUMN: grid[ITEM_COLUMN].map(item_offsets),
            RESIDUAL_COLUMN: residuals,
        }
    )

    # Step 6: Fixed effect and additive response
    components[FIXED_EFFECT_COLUMN] = (
        config.fixed_slope * components[PREDICTOR_COLUMN]
    )
    components[RESPONSE_COLUMN] = (
        components[MEAN_COLUMN]
        + components[SUBJECT_OFFSET_COLUMN]
        + components[ITEM_OFFSET_COLUMN]
        + components[RESIDUAL_COLUMN]
        + components[FIXED_EFFECT_COLUMN]
    )

    data = components[list(PANEL_COLUMNS)].copy()

    logger.debug(
        "Generated %d records (%d subjects x %d items)",
        len(data),
        config.n_subjects,
        config.n_items,
    )

    return GeneratedPanel(
        data=data,
        components=components,
        parameters=GeneratingParameters.from_config(config),
        config=config,
    )


def generate(
    n_subjects: int,
    n_items: int,
    fixed_slope: float = DEFAULT_FIXED_SLOPE,
    subject_sd: float = DEFAULT_SUBJECT_SD,
    item_sd: float = DEFAULT_ITEM_SD,
    residual_sd: float = DEFAULT_RESIDUAL_SD,
    item_predictor_scale: float = DEFAULT_ITEM_PREDICTOR_SCALE,
    mean_level: float = DEFAULT_MEAN_LEVEL,
    seed: int | None = None,
    rng: Generator | None = None,
    return_truth: bool = False,
) -> pd.DataFrame | tuple[pd.DataFrame, GeneratedPanel]:
    """
    Generate a fully crossed panel from explicit parameters.

    Parameters are validated before any random draw.

    Args:
        n_subjects: Number of subjects.
        n_items: Number of items.
        fixed_slope: Fixed effect of the item predictor.
        subject_sd: Subject random-intercept SD.
        item_sd: Item random-intercept SD.
        residual_sd: Trial error SD.
        item_predictor_scale: Scale of the Exp(1) item covariate.
        mean_level: Global mean.
        seed: Seed used when ``rng`` is not given.
        rng: Explicit random source; takes precedence over ``seed``.
        return_truth: Also return the GeneratedPanel with latent
            components and true parameters.

    Returns:
        The observable DataFrame, or ``(data, truth)`` when
        ``return_truth`` is set.

    Raises:
        InvalidParameter: If counts are < 1 or an SD is negative.
    """
    config = PanelGenerationConfig(
        n_subjects=n_subjects,
        n_items=n_items,
        fixed_slope=fixed_slope,
        subject_sd=subject_sd,
        item_sd=item_sd,
        residual_sd=residual_sd,
        item_predictor_scale=item_predictor_scale,
        mean_level=mean_level,
        random_seed=seed,
    )
    panel = generate_panel(config, rng=rng)
    if return_truth:
        return panel.data, panel
    return panel.data


def to_dataframe(panel: GeneratedPanel) -> pd.DataFrame:
    """
    Convert GeneratedPanel to the observable pandas DataFrame.

    Args:
        panel: Generated panel.

    Returns:
        DataFrame with columns: subject_id, item_id, predictor, response.
    """
    return panel.data[list(PANEL_COLUMNS)].copy()


def to_csv(panel: GeneratedPanel, path: str) -> None:
    """
    Write the observable part of a GeneratedPanel to a CSV file.

    Parent directories are created as needed.

    Args:
        panel: Generated panel.
        path: Output file path.
    """
    save_panel_csv(panel.to_panel_dataset(), Path(path))
