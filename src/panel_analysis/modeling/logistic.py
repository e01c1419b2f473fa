"""
Mixed logistic regression with crossed random intercepts.

Wraps statsmodels BinomialBayesMixedGLM, fitted by variational Bayes or
at the posterior mode. Variance-component parameters are on the log-SD
scale in statsmodels; results report them as SDs.
"""

import logging

import numpy as np
import pandas as pd
from statsmodels.genmod.bayes_mixed_glm import BinomialBayesMixedGLM

from panel_analysis.modeling.config import LogisticFitConfig
from panel_analysis.modeling.data_models import MixedLogitFit
from panel_analysis.modeling.enums import BayesFitMethod
from panel_analysis.modeling.exceptions import (
    InvalidModelSpec,
    ModelFitError,
)
from panel_analysis.modeling.specs import ModelSpec, group_level

logger = logging.getLogger(__name__)


def _check_binary(data: pd.DataFrame, column: str) -> None:
    values = set(pd.unique(data[column].dropna()))
    if not values <= {0, 1}:
        raise InvalidModelSpec(
            f"Response '{column}' must be coded 0/1, got {sorted(values)}"
        )
    if data[column].isna().any():
        raise InvalidModelSpec(f"Response '{column}' has missing values")


def fit_mixed_logistic(
    data: pd.DataFrame,
    spec: ModelSpec,
    config: LogisticFitConfig | None = None,
) -> MixedLogitFit:
    """
    Fit a mixed logistic regression.

    Args:
        data: One row per observation, binary response.
        spec: Response, fixed effects and random terms.
        config: Fit method and prior scales.

    Returns:
        MixedLogitFit with posterior summaries.

    Raises:
        InvalidModelSpec: If columns are missing, have missing values, or
            the response is not 0/1.
        ModelFitError: If the optimizer fails numerically.
    """
    config = config or LogisticFitConfig()
    spec.check_complete(data)
    _check_binary(data, spec.response)

    frame = data[list(spec.required_columns)].copy()
    for group in spec.grouping_columns:
        frame[group] = frame[group].astype(str)
    frame[spec.response] = frame[spec.response].astype(np.float64)

    logger.info(
        "Fitting logistic %s (%s) on %d observations",
        spec.describe(),
        config.method.value,
        len(frame),
    )

    model = BinomialBayesMixedGLM.from_formula(
        spec.formula,
        spec.variance_components,
        frame,
        vcp_p=config.vcp_prior_sd,
        fe_p=config.fe_prior_sd,
    )

    try:
        if config.method == BayesFitMethod.VARIATIONAL:
            result = model.fit_vb()
        else:
            result = model.fit_map()
    except (np.linalg.LinAlgError, ValueError) as e:
        raise ModelFitError(f"Fitting {spec.describe()} failed: {e}") from e

    fixed_effects = {
        str(name): float(value)
        for name, value in zip(model.fep_names, result.fe_mean, strict=True)
    }
    fixed_effect_sd = {
        str(name): float(value)
        for name, value in zip(model.fep_names, result.fe_sd, strict=True)
    }
    # vcp_mean holds log standard deviations
    variance_component_sds = {
        str(name): float(np.exp(value))
        for name, value in zip(model.vcp_names, result.vcp_mean, strict=True)
    }

    random_effects: dict[str, dict[str, float]] = {}
    for column_name, component_ix, value in zip(
        model.vc_names, model.ident, result.vc_mean, strict=True
    ):
        component = str(model.vcp_names[component_ix])
        level = group_level(str(column_name))
        random_effects.setdefault(component, {})[level] = float(value)

    return MixedLogitFit(
        formula=spec.formula,
        description=spec.describe(),
        fixed_effects=fixed_effects,
        fixed_effect_sd=fixed_effect_sd,
        variance_component_sds=variance_component_sds,
        random_effects=random_effects,
        n_observations=len(frame),
        method=config.method,
        model_version=config.model_version,
    )
