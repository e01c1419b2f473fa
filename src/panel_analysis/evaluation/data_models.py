"""
Data models for parameter-recovery evaluation.
"""

import math

from pydantic import BaseModel, ConfigDict


class ParameterRecovery(BaseModel):
    """A single generating parameter and its estimate."""

    name: str
    true_value: float
    estimate: float
    model_config = ConfigDict(frozen=True)

    @property
    def error(self) -> float:
        return self.estimate - self.true_value

    @property
    def relative_error(self) -> float:
        """|estimate - truth| / |truth|; inf when the truth is 0."""
        if self.true_value == 0:
            return 0.0 if self.estimate == 0 else math.inf
        return abs(self.error) / abs(self.true_value)

    def within(self, tolerance: float) -> bool:
        """Whether the relative error is at most ``tolerance``."""
        return self.relative_error <= tolerance


class RecoveryReport(BaseModel):
    """Comparison of one fitted model against its generating parameters.

    Attributes:
        replicate: Index of the replicate within a study.
        seed: Seed used to generate the data, if known.
        converged: Whether the fit converged.
        parameters: One entry per generating parameter.
    """

    replicate: int = 0
    seed: int | None = None
    converged: bool
    parameters: tuple[ParameterRecovery, ...]
    model_config = ConfigDict(frozen=True)

    def get(self, name: str) -> ParameterRecovery:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        raise KeyError(
            f"No parameter named '{name}'. "
            f"Available: {[p.name for p in self.parameters]}"
        )

    def all_within(self, tolerance: float) -> bool:
        return all(p.within(tolerance) for p in self.parameters)
