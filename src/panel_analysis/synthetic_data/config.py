import math
import numbers
from dataclasses import asdict, dataclass

from panel_analysis.synthetic_data.exceptions import InvalidParameter

# Defaults reproduce the frequency-effect teaching example:
# 6 subjects x 20 items, slope -5, SDs 40/20/20.
DEFAULT_N_SUBJECTS = 6
DEFAULT_N_ITEMS = 20
DEFAULT_FIXED_SLOPE = -5.0
DEFAULT_SUBJECT_SD = 40.0
DEFAULT_ITEM_SD = 20.0
DEFAULT_RESIDUAL_SD = 20.0
DEFAULT_ITEM_PREDICTOR_SCALE = 5.0
DEFAULT_MEAN_LEVEL = 400.0


@dataclass
class PanelGenerationConfig:
    """Complete configuration for generating a synthetic panel dataset.

    The response for subject s and item i is

        response = mean_level + u_s + w_i + e_si + fixed_slope * x_i

    with u_s ~ N(0, subject_sd), w_i ~ N(0, item_sd), e_si ~ N(0, residual_sd)
    and x_i = round(item_predictor_scale * Exp(1), 2).

    Attributes:
        n_subjects: Number of subjects (>= 1).
        n_items: Number of items (>= 1). Every subject sees every item once.
        fixed_slope: Fixed effect of the item predictor on the response.
        subject_sd: Standard deviation of subject random intercepts.
        item_sd: Standard deviation of item random intercepts.
        residual_sd: Standard deviation of trial-level error.
        item_predictor_scale: Scale applied to the Exp(1) item covariate.
        mean_level: Global mean of the response.
        random_seed: Seed for the random source. None uses entropy.
    """

    n_subjects: int = DEFAULT_N_SUBJECTS
    n_items: int = DEFAULT_N_ITEMS
    fixed_slope: float = DEFAULT_FIXED_SLOPE
    subject_sd: float = DEFAULT_SUBJECT_SD
    item_sd: float = DEFAULT_ITEM_SD
    residual_sd: float = DEFAULT_RESIDUAL_SD
    item_predictor_scale: float = DEFAULT_ITEM_PREDICTOR_SCALE
    mean_level: float = DEFAULT_MEAN_LEVEL

    # Reproducibility
    random_seed: int | None = None

    def __post_init__(self) -> None:
        for name in ("n_subjects", "n_items"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(
                value, numbers.Integral
            ):
                raise InvalidParameter(
                    f"{name} must be an integer, got {value!r}"
                )
        if self.n_subjects < 1:
            raise InvalidParameter(
                f"Must have at least 1 subject, got {self.n_subjects}"
            )
        if self.n_items < 1:
            raise InvalidParameter(
                f"Must have at least 1 item, got {self.n_items}"
            )

        real_params = {
            "fixed_slope": self.fixed_slope,
            "subject_sd": self.subject_sd,
            "item_sd": self.item_sd,
            "residual_sd": self.residual_sd,
            "item_predictor_scale": self.item_predictor_scale,
            "mean_level": self.mean_level,
        }
        for name, value in real_params.items():
            if not math.isfinite(value):
                raise InvalidParameter(f"{name} must be finite, got {value}")

        for name in ("subject_sd", "item_sd", "residual_sd"):
            if real_params[name] < 0:
                raise InvalidParameter(
                    f"{name} must be >= 0, got {real_params[name]}"
                )
        if self.item_predictor_scale <= 0:
            raise InvalidParameter(
                "item_predictor_scale must be > 0, "
                f"got {self.item_predictor_scale}"
            )
        if self.random_seed is not None and self.random_seed < 0:
            raise InvalidParameter(
                f"random_seed must be >= 0, got {self.random_seed}"
            )

    @property
    def n_observations(self) -> int:
        return self.n_subjects * self.n_items

    def to_dict(self) -> dict[str, float | int | None]:
        return asdict(self)
