"""
Structured results of mixed model fitting.

Fitted statsmodels objects are converted into these frozen models so that
callers read estimates through named accessors rather than by indexing
library result objects with formula-derived strings.
"""

import math

from pydantic import BaseModel, ConfigDict

from panel_analysis.modeling.enums import (
    BayesFitMethod,
    ConvergenceStatus,
    EstimationMethod,
)


def _lookup(mapping: dict[str, float], key: str, kind: str) -> float:
    try:
        return mapping[key]
    except KeyError:
        raise KeyError(
            f"No {kind} named '{key}'. Available: {sorted(mapping)}"
        ) from None


class MixedModelFit(BaseModel):
    """
    Result of a linear mixed model fit.

    Attributes:
        formula: Fixed-effects formula.
        description: lme4-style description of the full model.
        fixed_effects: Estimated fixed-effect coefficients by term name.
        fixed_effect_se: Standard errors of the fixed effects.
        random_effects: Predicted random effects, component -> group id -> value.
        variance_components: Estimated variances by component name.
        residual_variance: Estimated residual (trial-level) variance.
        log_likelihood: Log-likelihood (REML criterion for REML fits).
        n_observations: Number of observations used.
        n_parameters: Fixed effects + variance components + residual variance.
        method: REML or ML.
        convergence_status: Whether the optimizer reported convergence.
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True)

    formula: str
    description: str
    fixed_effects: dict[str, float]
    fixed_effect_se: dict[str, float]
    random_effects: dict[str, dict[str, float]]
    variance_components: dict[str, float]
    residual_variance: float
    log_likelihood: float
    n_observations: int
    n_parameters: int
    method: EstimationMethod
    convergence_status: ConvergenceStatus
    model_version: str

    @property
    def converged(self) -> bool:
        """Whether estimation converged successfully."""
        return self.convergence_status == ConvergenceStatus.CONVERGED

    @property
    def residual_sd(self) -> float:
        return math.sqrt(self.residual_variance)

    @property
    def aic(self) -> float:
        """AIC; comparable across ML fits, or REML fits sharing fixed effects."""
        return -2.0 * self.log_likelihood + 2.0 * self.n_parameters

    @property
    def bic(self) -> float:
        return -2.0 * self.log_likelihood + self.n_parameters * math.log(
            self.n_observations
        )

    def fixed_effect(self, name: str) -> float:
        return _lookup(self.fixed_effects, name, "fixed effect")

    def variance_component(self, name: str) -> float:
        return _lookup(self.variance_components, name, "variance component")

    def component_sd(self, name: str) -> float:
        """Standard deviation of a variance component."""
        return math.sqrt(max(self.variance_component(name), 0.0))

    def random_effect(self, component: str, group_id: str) -> float:
        if component not in self.random_effects:
            raise KeyError(
                f"No random effects for '{component}'. "
                f"Available: {sorted(self.random_effects)}"
            )
        return _lookup(self.random_effects[component], group_id, "group")


class MixedLogitFit(BaseModel):
    """
    Result of a Bayesian mixed logistic model fit.

    Attributes:
        formula: Fixed-effects formula.
        description: lme4-style description of the full model.
        fixed_effects: Posterior means of the fixed effects (log-odds).
        fixed_effect_sd: Posterior SDs of the fixed effects.
        variance_component_sds: Estimated SD of each random term.
        random_effects: Posterior means, component -> group id -> value.
        n_observations: Number of observations used.
        method: Variational Bayes or posterior mode.
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True)

    formula: str
    description: str
    fixed_effects: dict[str, float]
    fixed_effect_sd: dict[str, float]
    variance_component_sds: dict[str, float]
    random_effects: dict[str, dict[str, float]]
    n_observations: int
    method: BayesFitMethod
    model_version: str

    def fixed_effect(self, name: str) -> float:
        return _lookup(self.fixed_effects, name, "fixed effect")

    def odds_ratio(self, name: str) -> float:
        return math.exp(self.fixed_effect(name))

    def component_sd(self, name: str) -> float:
        return _lookup(
            self.variance_component_sds, name, "variance component"
        )

    def random_effect(self, component: str, group_id: str) -> float:
        if component not in self.random_effects:
            raise KeyError(
                f"No random effects for '{component}'. "
                f"Available: {sorted(self.random_effects)}"
            )
        return _lookup(self.random_effects[component], group_id, "group")


class LikelihoodRatioResult(BaseModel):
    """
    Likelihood-ratio comparison of two nested models.

    Attributes:
        statistic: 2 * (llf_full - llf_restricted), floored at 0.
        df: Difference in number of parameters.
        p_value: Upper tail of chi-square(df).
        p_value_boundary: 50:50 mixture of chi-square(df - 1) and
            chi-square(df), for variance components tested on the boundary.
            None unless requested.
    """

    model_config = ConfigDict(frozen=True)

    statistic: float
    df: int
    p_value: float
    p_value_boundary: float | None = None

    def significant(self, alpha: float = 0.05) -> bool:
        if self.p_value_boundary is not None:
            return self.p_value_boundary < alpha
        return self.p_value < alpha
