from importlib import metadata

import pytest

from panel_analysis.modeling import config as fit_config
from panel_analysis.modeling.config import FitConfig, LogisticFitConfig
from panel_analysis.modeling.enums import EstimationMethod


def test_version_from_installed_distribution(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(fit_config.metadata, "version", lambda name: "9.9.9")
    assert FitConfig().model_version == "9.9.9"


def test_version_falls_back_to_pyproject(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def not_installed(name: str) -> str:
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(fit_config.metadata, "version", not_installed)
    assert LogisticFitConfig().model_version == "0.1.0"


def test_reml_flag() -> None:
    assert FitConfig().reml
    assert not FitConfig(method=EstimationMethod.ML).reml


def test_invalid_settings() -> None:
    with pytest.raises(ValueError, match="max_iterations"):
        FitConfig(max_iterations=0)
    with pytest.raises(ValueError, match="positive"):
        LogisticFitConfig(fe_prior_sd=0.0)
