import math

import pytest
from pydantic import ValidationError

from panel_analysis.modeling.data_models import (
    LikelihoodRatioResult,
    MixedLogitFit,
    MixedModelFit,
)
from panel_analysis.modeling.enums import BayesFitMethod, ConvergenceStatus


class TestMixedModelFit:
    def test_accessors(self, make_fit) -> None:
        fit = make_fit()

        assert fit.converged
        assert fit.fixed_effect("predictor") == -5.0
        assert fit.variance_component("item_id") == 400.0
        assert fit.component_sd("subject_id") == pytest.approx(40.0)
        assert fit.residual_sd == pytest.approx(20.0)
        assert fit.random_effect("subject_id", "S02") == -12.5

    def test_information_criteria(self, make_fit) -> None:
        fit = make_fit()

        assert fit.aic == pytest.approx(1010.0)
        assert fit.bic == pytest.approx(1000.0 + 5 * math.log(120))

    def test_negative_component_sd_floored(self, make_fit) -> None:
        fit = make_fit(variance_components={"subject_id": -1e-9})
        assert fit.component_sd("subject_id") == 0.0

    def test_unknown_names(self, make_fit) -> None:
        fit = make_fit()

        with pytest.raises(KeyError, match="No fixed effect named 'x'"):
            fit.fixed_effect("x")
        with pytest.raises(KeyError, match="No random effects"):
            fit.random_effect("subject_id:predictor", "S01")
        with pytest.raises(KeyError, match="No group named 'S99'"):
            fit.random_effect("subject_id", "S99")

    def test_not_converged(self, make_fit) -> None:
        fit = make_fit(convergence_status=ConvergenceStatus.NOT_CONVERGED)
        assert not fit.converged

    def test_frozen(self, make_fit) -> None:
        fit = make_fit()
        with pytest.raises(ValidationError):
            fit.residual_variance = 1.0  # type: ignore[misc]

    def test_json_round_trip(self, make_fit) -> None:
        fit = make_fit()
        assert MixedModelFit.model_validate_json(fit.model_dump_json()) == fit


def test_mixed_logit_fit_accessors() -> None:
    fit = MixedLogitFit(
        formula="high_rating ~ condition",
        description="high_rating ~ condition + (1 | participant)",
        fixed_effects={"Intercept": -0.5, "condition": math.log(2.0)},
        fixed_effect_sd={"Intercept": 0.2, "condition": 0.1},
        variance_component_sds={"participant": 0.8},
        random_effects={"participant": {"P1": 0.3}},
        n_observations=200,
        method=BayesFitMethod.VARIATIONAL,
        model_version="0.1.0",
    )

    assert fit.odds_ratio("condition") == pytest.approx(2.0)
    assert fit.component_sd("participant") == 0.8
    assert fit.random_effect("participant", "P1") == 0.3
    with pytest.raises(KeyError):
        fit.component_sd("selfie")


class TestLikelihoodRatioResult:
    def test_significant_uses_plain_p_value(self) -> None:
        result = LikelihoodRatioResult(statistic=5.0, df=1, p_value=0.03)
        assert result.significant()
        assert not result.significant(alpha=0.01)

    def test_significant_prefers_boundary(self) -> None:
        result = LikelihoodRatioResult(
            statistic=3.0, df=1, p_value=0.08, p_value_boundary=0.04
        )
        assert result.significant()
