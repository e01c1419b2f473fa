import math

import pytest

from panel_analysis.evaluation.data_models import (
    ParameterRecovery,
    RecoveryReport,
)


class TestParameterRecovery:
    def test_errors(self) -> None:
        p = ParameterRecovery(name="subject_sd", true_value=40.0, estimate=30.0)

        assert p.error == -10.0
        assert p.relative_error == pytest.approx(0.25)
        assert p.within(0.5)
        assert not p.within(0.2)

    def test_negative_truth(self) -> None:
        p = ParameterRecovery(name="fixed_slope", true_value=-5.0, estimate=-6.0)
        assert p.relative_error == pytest.approx(0.2)

    def test_zero_truth(self) -> None:
        exact = ParameterRecovery(name="item_sd", true_value=0.0, estimate=0.0)
        off = ParameterRecovery(name="item_sd", true_value=0.0, estimate=0.1)

        assert exact.relative_error == 0.0
        assert math.isinf(off.relative_error)


class TestRecoveryReport:
    @pytest.fixture
    def report(self) -> RecoveryReport:
        return RecoveryReport(
            converged=True,
            parameters=(
                ParameterRecovery(name="a", true_value=1.0, estimate=1.1),
                ParameterRecovery(name="b", true_value=2.0, estimate=3.0),
            ),
        )

    def test_get(self, report: RecoveryReport) -> None:
        assert report.get("b").estimate == 3.0

    def test_get_unknown(self, report: RecoveryReport) -> None:
        with pytest.raises(KeyError, match="No parameter named 'c'"):
            report.get("c")

    def test_all_within(self, report: RecoveryReport) -> None:
        assert report.all_within(0.5)
        assert not report.all_within(0.2)
