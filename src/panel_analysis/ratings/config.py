"""
Configuration for the ratings (selfie) analysis.

Column names and the dichotomization threshold are configurable so the
same pipeline applies to any long-format rating table with one row per
rater x rated item.
"""

from dataclasses import dataclass, field
from pathlib import Path

from omegaconf import OmegaConf


def _default_predictors() -> list[str]:
    return ["condition"]


@dataclass
class RatingsConfig:
    """Configuration of a ratings analysis.

    Attributes:
        subject_column: Rater identifier.
        item_column: Rated item (photo) identifier.
        rating_column: Numeric rating.
        predictors: Fixed-effect predictor columns.
        threshold: Ratings strictly above this value are coded 1.
        outcome_column: Name of the dichotomized column.
        filter_column: Optional column used to select rows.
        keep_values: Values of ``filter_column`` to keep.
    """

    subject_column: str = "participant"
    item_column: str = "selfie"
    rating_column: str = "rating"
    predictors: list[str] = field(default_factory=_default_predictors)
    threshold: float = 4.0
    outcome_column: str = "high_rating"
    filter_column: str | None = None
    keep_values: list[str] | None = None

    def __post_init__(self) -> None:
        if (self.filter_column is None) != (self.keep_values is None):
            raise ValueError(
                "filter_column and keep_values must be given together"
            )
        if self.keep_values is not None and len(self.keep_values) == 0:
            raise ValueError("keep_values must not be empty")
        if self.outcome_column in (
            self.subject_column,
            self.item_column,
            self.rating_column,
        ):
            raise ValueError(
                f"outcome_column '{self.outcome_column}' clashes with an "
                "input column"
            )

    @property
    def required_columns(self) -> list[str]:
        columns = [
            self.subject_column,
            self.item_column,
            self.rating_column,
            *self.predictors,
        ]
        if self.filter_column is not None:
            columns.append(self.filter_column)
        return list(dict.fromkeys(columns))


def load_ratings_config(yaml_path: Path | None) -> RatingsConfig:
    """Load and validate a ratings configuration from YAML.

    Raises:
        FileNotFoundError: If yaml_path doesn't exist
    """
    schema = OmegaConf.structured(RatingsConfig)

    if yaml_path is not None:
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")
        config = OmegaConf.merge(schema, OmegaConf.load(yaml_path))
    else:
        config = schema

    result = OmegaConf.to_object(config)
    assert isinstance(result, RatingsConfig)
    return result
