"""
Parameter recovery: fit generated panels and compare with the truth.
"""

import dataclasses
import logging
from collections.abc import Iterable, Iterator

import pandas as pd

from panel_analysis.core.constants import (
    ITEM_COLUMN,
    PREDICTOR_COLUMN,
    SUBJECT_COLUMN,
)
from panel_analysis.core.utils import spawn_seeds
from panel_analysis.evaluation.data_models import (
    ParameterRecovery,
    RecoveryReport,
)
from panel_analysis.modeling.config import FitConfig
from panel_analysis.modeling.data_models import MixedModelFit
from panel_analysis.modeling.linear import fit_mixed_linear
from panel_analysis.modeling.specs import ModelSpec
from panel_analysis.synthetic_data.config import PanelGenerationConfig
from panel_analysis.synthetic_data.data_models import GeneratingParameters
from panel_analysis.synthetic_data.generators import generate_panel

logger = logging.getLogger(__name__)

INTERCEPT_TERM = "Intercept"


def compare_to_truth(
    fit: MixedModelFit,
    truth: GeneratingParameters,
    subject_component: str = SUBJECT_COLUMN,
    item_component: str = ITEM_COLUMN,
    predictor: str = PREDICTOR_COLUMN,
    replicate: int = 0,
    seed: int | None = None,
) -> RecoveryReport:
    """
    Pair each generating parameter with its estimate.

    Standard deviations are compared on the SD scale.

    Args:
        fit: Fit with an intercept, a slope for ``predictor`` and
            random intercepts for subjects and items.
        truth: Parameters the data was generated from.
        subject_component: Variance component holding subject intercepts.
        item_component: Variance component holding item intercepts.
        predictor: Fixed-effect term of the item covariate.
        replicate: Replicate index recorded in the report.
        seed: Generation seed recorded in the report.

    Returns:
        RecoveryReport.
    """
    parameters = (
        ParameterRecovery(
            name="fixed_slope",
            true_value=truth.fixed_slope,
            estimate=fit.fixed_effect(predictor),
        ),
        ParameterRecovery(
            name="mean_level",
            true_value=truth.mean_level,
            estimate=fit.fixed_effect(INTERCEPT_TERM),
        ),
        ParameterRecovery(
            name="subject_sd",
            true_value=truth.subject_sd,
            estimate=fit.component_sd(subject_component),
        ),
        ParameterRecovery(
            name="item_sd",
            true_value=truth.item_sd,
            estimate=fit.component_sd(item_component),
        ),
        ParameterRecovery(
            name="residual_sd",
            true_value=truth.residual_sd,
            estimate=fit.residual_sd,
        ),
    )
    return RecoveryReport(
        replicate=replicate,
        seed=seed,
        converged=fit.converged,
        parameters=parameters,
    )


def run_recovery_study(
    config: PanelGenerationConfig,
    spec: ModelSpec,
    n_replicates: int,
    base_seed: int,
    fit_config: FitConfig | None = None,
) -> Iterator[RecoveryReport]:
    """
    Generate and fit independent replicates of a panel design.

    Each replicate uses its own seed spawned from ``base_seed`` with
    SeedSequence, so replicates are independent and reproducible.

    Args:
        config: Generation configuration; its seed is replaced per replicate.
        spec: Model fitted to every replicate.
        n_replicates: Number of replicates.
        base_seed: Root seed.
        fit_config: Estimation settings.

    Yields:
        RecoveryReport for each replicate.
    """
    if n_replicates < 1:
        raise ValueError(f"n_replicates must be >= 1, got {n_replicates}")

    fit_config = fit_config or FitConfig()

    for i, seed in enumerate(spawn_seeds(base_seed, n_replicates)):
        replicate_config = dataclasses.replace(config, random_seed=seed)
        panel = generate_panel(replicate_config)
        fit = fit_mixed_linear(panel.data, spec, fit_config)

        logger.debug("Replicate %d/%d fitted", i + 1, n_replicates)

        yield compare_to_truth(
            fit,
            panel.parameters,
            replicate=i,
            seed=seed,
        )


def summarize_recovery(reports: Iterable[RecoveryReport]) -> pd.DataFrame:
    """
    Summarize estimates across replicates.

    Args:
        reports: Recovery reports, typically from run_recovery_study.

    Returns:
        DataFrame indexed by parameter with columns true_value,
        mean_estimate, sd_estimate, bias, mean_relative_error,
        n_replicates.
    """
    rows = [
        {
            "parameter": p.name,
            "true_value": p.true_value,
            "estimate": p.estimate,
            "error": p.error,
            "relative_error": p.relative_error,
        }
        for report in reports
        for p in report.parameters
    ]
    if not rows:
        raise ValueError("No recovery reports to summarize")

    long = pd.DataFrame(rows)
    summary = long.groupby("parameter", sort=False).agg(
        true_value=("true_value", "first"),
        mean_estimate=("estimate", "mean"),
        sd_estimate=("estimate", "std"),
        bias=("error", "mean"),
        mean_relative_error=("relative_error", "mean"),
        n_replicates=("estimate", "size"),
    )
    return summary
