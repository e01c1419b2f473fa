from panel_analysis.evaluation.data_models import (
    ParameterRecovery,
    RecoveryReport,
)
from panel_analysis.evaluation.recovery import (
    compare_to_truth,
    run_recovery_study,
    summarize_recovery,
)

__all__ = [
    "ParameterRecovery",
    "RecoveryReport",
    "compare_to_truth",
    "run_recovery_study",
    "summarize_recovery",
]
