"""
Likelihood-ratio comparison of nested mixed models.
"""

import logging

from scipy import stats

from panel_analysis.modeling.data_models import (
    LikelihoodRatioResult,
    MixedModelFit,
)
from panel_analysis.modeling.enums import EstimationMethod

logger = logging.getLogger(__name__)


def likelihood_ratio_test(
    restricted: MixedModelFit,
    full: MixedModelFit,
    boundary_correction: bool = False,
) -> LikelihoodRatioResult:
    """
    Test whether the full model fits significantly better.

    REML log-likelihoods are only comparable between models with the same
    fixed effects; refit with ML to compare fixed effects.

    Args:
        restricted: Fit of the nested (smaller) model.
        full: Fit of the larger model.
        boundary_correction: Also report the 50:50 chi-square mixture
            p-value appropriate when the extra parameters are variances
            tested at zero.

    Returns:
        LikelihoodRatioResult.

    Raises:
        ValueError: If the fits are not comparable.
    """
    if restricted.method != full.method:
        raise ValueError(
            "Cannot compare fits with different estimation methods: "
            f"{restricted.method.value} vs {full.method.value}"
        )
    if restricted.n_observations != full.n_observations:
        raise ValueError(
            "Cannot compare fits on different data: "
            f"{restricted.n_observations} vs {full.n_observations} "
            "observations"
        )
    if full.method == EstimationMethod.REML and set(
        restricted.fixed_effects
    ) != set(full.fixed_effects):
        raise ValueError(
            "REML fits with different fixed effects are not comparable; "
            "refit with ML"
        )

    df = full.n_parameters - restricted.n_parameters
    if df <= 0:
        raise ValueError(
            f"Full model must have more parameters than the restricted "
            f"model, got df={df}"
        )

    statistic = max(
        0.0, 2.0 * (full.log_likelihood - restricted.log_likelihood)
    )
    p_value = float(stats.chi2.sf(statistic, df))

    p_value_boundary = None
    if boundary_correction:
        lower = float(stats.chi2.sf(statistic, df - 1)) if df > 1 else 0.0
        p_value_boundary = 0.5 * lower + 0.5 * p_value

    logger.info(
        "LRT %s vs %s: chi2(%d)=%.3f, p=%.4g",
        restricted.description,
        full.description,
        df,
        statistic,
        p_value,
    )

    return LikelihoodRatioResult(
        statistic=statistic,
        df=df,
        p_value=p_value,
        p_value_boundary=p_value_boundary,
    )
