"""
Mixed model fitting module.

This module wraps statsmodels mixed models behind structured results.

Key components:
- ModelSpec: response, fixed effects and random terms
- FitConfig / LogisticFitConfig: estimation settings
- fit_mixed_linear: crossed random-effects linear mixed model (MixedLM)
- fit_mixed_logistic: mixed logistic model (BinomialBayesMixedGLM)
- likelihood_ratio_test: nested model comparison
"""

from panel_analysis.modeling.comparison import likelihood_ratio_test
from panel_analysis.modeling.config import FitConfig, LogisticFitConfig
from panel_analysis.modeling.data_models import (
    LikelihoodRatioResult,
    MixedLogitFit,
    MixedModelFit,
)
from panel_analysis.modeling.enums import (
    BayesFitMethod,
    ConvergenceStatus,
    EstimationMethod,
)
from panel_analysis.modeling.exceptions import InvalidModelSpec, ModelFitError
from panel_analysis.modeling.linear import fit_mixed_linear
from panel_analysis.modeling.logistic import fit_mixed_logistic
from panel_analysis.modeling.specs import ModelSpec, crossed_intercepts_spec

__all__ = [
    "BayesFitMethod",
    "ConvergenceStatus",
    "EstimationMethod",
    "FitConfig",
    "InvalidModelSpec",
    "LikelihoodRatioResult",
    "LogisticFitConfig",
    "MixedLogitFit",
    "MixedModelFit",
    "ModelFitError",
    "ModelSpec",
    "crossed_intercepts_spec",
    "fit_mixed_linear",
    "fit_mixed_logistic",
    "likelihood_ratio_test",
]
