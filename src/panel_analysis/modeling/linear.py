"""
Linear mixed model fitting with crossed random effects.

Wraps statsmodels MixedLM. Crossed grouping factors are not nested in a
single grouping variable, so every observation is placed in one group and
each random term becomes a variance component of that group.
"""

import logging
import warnings

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from statsmodels.regression.mixed_linear_model import MixedLMResults

from panel_analysis.modeling.config import FitConfig
from panel_analysis.modeling.data_models import MixedModelFit
from panel_analysis.modeling.enums import ConvergenceStatus
from panel_analysis.modeling.exceptions import ModelFitError
from panel_analysis.modeling.specs import (
    ModelSpec,
    split_random_effect_label,
)

logger = logging.getLogger(__name__)

SINGLE_GROUP_COLUMN = "_single_group"


def _prepare_frame(data: pd.DataFrame, spec: ModelSpec) -> pd.DataFrame:
    spec.check_complete(data)
    frame = data[list(spec.required_columns)].copy()
    for group in spec.grouping_columns:
        frame[group] = frame[group].astype(str)
    frame[SINGLE_GROUP_COLUMN] = 1
    return frame


def _extract_random_effects(
    result: MixedLMResults,
) -> dict[str, dict[str, float]]:
    """Group predicted random effects by component and group level."""
    random_effects: dict[str, dict[str, float]] = {}
    try:
        per_group = result.random_effects
    except np.linalg.LinAlgError:
        logger.warning("Random effects could not be predicted")
        return random_effects

    # Single all-observation group
    for series in per_group.values():
        for label, value in series.items():
            component, level = split_random_effect_label(str(label))
            random_effects.setdefault(component, {})[level] = float(value)
    return random_effects


def _to_fit(
    result: MixedLMResults,
    spec: ModelSpec,
    config: FitConfig,
) -> MixedModelFit:
    vc_names = list(result.model.exog_vc.names)
    variance_components = {
        str(name): float(value)
        for name, value in zip(vc_names, result.vcomp, strict=True)
    }
    fixed_effects = {
        str(name): float(value) for name, value in result.fe_params.items()
    }
    fixed_effect_se = {
        str(name): float(value) for name, value in result.bse_fe.items()
    }

    n_parameters = len(fixed_effects) + len(variance_components) + 1

    return MixedModelFit(
        formula=spec.formula,
        description=spec.describe(),
        fixed_effects=fixed_effects,
        fixed_effect_se=fixed_effect_se,
        random_effects=_extract_random_effects(result),
        variance_components=variance_components,
        residual_variance=float(result.scale),
        log_likelihood=float(result.llf),
        n_observations=int(result.nobs),
        n_parameters=n_parameters,
        method=config.method,
        convergence_status=(
            ConvergenceStatus.CONVERGED
            if result.converged
            else ConvergenceStatus.NOT_CONVERGED
        ),
        model_version=config.model_version,
    )


def fit_mixed_linear(
    data: pd.DataFrame,
    spec: ModelSpec,
    config: FitConfig | None = None,
) -> MixedModelFit:
    """
    Fit a linear mixed model.

    Args:
        data: One row per observation.
        spec: Response, fixed effects and random terms.
        config: Estimation settings. Defaults to REML with L-BFGS.

    Returns:
        MixedModelFit with fixed effects, variance components, predicted
        random effects and the residual variance.

    Raises:
        InvalidModelSpec: If the data lacks a required column or has
            missing values in one.
        ModelFitError: If the optimizer fails numerically.
    """
    config = config or FitConfig()
    frame = _prepare_frame(data, spec)

    logger.info(
        "Fitting %s by %s on %d observations",
        spec.describe(),
        config.method.value.upper(),
        len(frame),
    )

    model = smf.mixedlm(
        spec.formula,
        data=frame,
        groups=SINGLE_GROUP_COLUMN,
        re_formula="0",
        vc_formula=spec.variance_components,
    )

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            result = model.fit(
                reml=config.reml,
                method=config.optimizer,
                maxiter=config.max_iterations,
            )
        except (np.linalg.LinAlgError, ValueError) as e:
            raise ModelFitError(
                f"Fitting {spec.describe()} failed: {e}"
            ) from e

    for warning in caught:
        logger.warning("%s: %s", spec.describe(), warning.message)

    fit = _to_fit(result, spec, config)

    if not fit.converged:
        logger.warning("%s did not converge", spec.describe())
    logger.debug(
        "LL=%.2f, residual SD=%.3f, components=%s",
        fit.log_likelihood,
        fit.residual_sd,
        fit.variance_components,
    )
    return fit
