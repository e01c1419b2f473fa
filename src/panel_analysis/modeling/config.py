"""
Configuration dataclasses for mixed model fitting.

This module defines the configuration parameters for:
- Linear mixed models (REML/ML, optimizer, iteration cap)
- Bayesian mixed logistic models (fit method, prior scales)
"""

from dataclasses import dataclass, field
from importlib import metadata

import toml

from panel_analysis.core.paths import get_project_root_dir
from panel_analysis.modeling.enums import BayesFitMethod, EstimationMethod

# Default optimizer settings
DEFAULT_OPTIMIZER = "lbfgs"
DEFAULT_MAX_ITERATIONS = 200

# Default prior scales for the Bayesian mixed GLM
DEFAULT_VCP_PRIOR_SD = 1.0
DEFAULT_FE_PRIOR_SD = 2.0

PACKAGE_NAME = "panel-analysis"


def _get_package_version() -> str:
    """Installed distribution version, else the source tree pyproject.toml."""
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        root_dir = get_project_root_dir()

    with open(root_dir / "pyproject.toml") as f:
        data = toml.load(f)

    version = data.get("project", {}).get("version")

    if not version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(version, str)
    return version


@dataclass(frozen=True)
class FitConfig:
    """
    Configuration for linear mixed model fitting.

    Attributes:
        method: REML (default) or ML. Likelihood-ratio tests between
            models with different fixed effects need ML fits.
        optimizer: scipy optimizer name passed to statsmodels.
        max_iterations: Iteration cap for the optimizer.
        model_version: Version string for reproducibility tracking.
    """

    method: EstimationMethod = EstimationMethod.REML
    optimizer: str = DEFAULT_OPTIMIZER
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    model_version: str = field(default_factory=_get_package_version)

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )

    @property
    def reml(self) -> bool:
        return self.method == EstimationMethod.REML


@dataclass(frozen=True)
class LogisticFitConfig:
    """
    Configuration for Bayesian mixed logistic model fitting.

    Attributes:
        method: Variational Bayes (default) or posterior mode.
        vcp_prior_sd: Prior SD of the log variance-component SDs.
        fe_prior_sd: Prior SD of the fixed effects.
        model_version: Version string for reproducibility tracking.
    """

    method: BayesFitMethod = BayesFitMethod.VARIATIONAL
    vcp_prior_sd: float = DEFAULT_VCP_PRIOR_SD
    fe_prior_sd: float = DEFAULT_FE_PRIOR_SD
    model_version: str = field(default_factory=_get_package_version)

    def __post_init__(self) -> None:
        if self.vcp_prior_sd <= 0 or self.fe_prior_sd <= 0:
            raise ValueError("Prior standard deviations must be positive")
