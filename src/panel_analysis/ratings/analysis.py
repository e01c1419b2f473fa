"""
Ratings analysis: load, filter, dichotomize, tabulate and fit a mixed
logistic regression with crossed random intercepts for raters and items.
"""

import logging
from pathlib import Path

import pandas as pd
from pydantic import BaseModel, ConfigDict

from panel_analysis.modeling.config import LogisticFitConfig
from panel_analysis.modeling.data_models import MixedLogitFit
from panel_analysis.modeling.logistic import fit_mixed_logistic
from panel_analysis.modeling.specs import ModelSpec
from panel_analysis.ratings.config import RatingsConfig

logger = logging.getLogger(__name__)


class RatingsSummary(BaseModel):
    """
    Exploratory tabulation of a dichotomized ratings table.

    Attributes:
        n_observations: Number of rows.
        n_subjects: Number of distinct raters.
        n_items: Number of distinct rated items.
        outcome_rate: Overall proportion of 1s.
        ratings_per_subject: Row count per rater.
        ratings_per_item: Row count per item.
        outcome_by_predictor: Per predictor, the proportion of 1s and the
            count per level.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    n_observations: int
    n_subjects: int
    n_items: int
    outcome_rate: float
    ratings_per_subject: pd.Series
    ratings_per_item: pd.Series
    outcome_by_predictor: dict[str, pd.DataFrame]


def load_ratings(path: Path, config: RatingsConfig) -> pd.DataFrame:
    """Load a ratings CSV.

    Rows with a missing value in any required column (rating, rater,
    item, predictors, filter column) are dropped. When the config names a
    filter column, only rows whose value is in ``keep_values`` are kept.

    Raises:
        ValueError: If a required column is missing or no rows remain.
    """
    df = pd.read_csv(
        path,
        dtype={config.subject_column: str, config.item_column: str},
    )

    missing = [c for c in config.required_columns if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {missing}")

    n_read = len(df)
    df = df.dropna(subset=config.required_columns)
    if len(df) < n_read:
        logger.info(
            "Dropped %d rows with missing values in %s",
            n_read - len(df),
            config.required_columns,
        )

    if config.filter_column is not None and config.keep_values is not None:
        keep = df[config.filter_column].astype(str).isin(config.keep_values)
        df = df[keep]
        logger.info(
            "Kept %d rows with %s in %s",
            len(df),
            config.filter_column,
            config.keep_values,
        )

    if df.empty:
        raise ValueError("No ratings left after filtering")

    return df.reset_index(drop=True)


def dichotomize(data: pd.DataFrame, config: RatingsConfig) -> pd.DataFrame:
    """Add the 0/1 outcome column: 1 where rating > threshold."""
    ratings = pd.to_numeric(data[config.rating_column], errors="raise")
    return data.assign(
        **{config.outcome_column: (ratings > config.threshold).astype(int)}
    )


def summarize_ratings(
    data: pd.DataFrame, config: RatingsConfig
) -> RatingsSummary:
    """
    Tabulate a dichotomized ratings table.

    Args:
        data: Output of ``dichotomize``.
        config: Ratings configuration.

    Returns:
        RatingsSummary.
    """
    outcome = data[config.outcome_column]

    outcome_by_predictor: dict[str, pd.DataFrame] = {}
    for predictor in config.predictors:
        grouped = data.groupby(predictor)[config.outcome_column]
        outcome_by_predictor[predictor] = pd.DataFrame(
            {"proportion": grouped.mean(), "count": grouped.size()}
        )

    return RatingsSummary(
        n_observations=len(data),
        n_subjects=int(data[config.subject_column].nunique()),
        n_items=int(data[config.item_column].nunique()),
        outcome_rate=float(outcome.mean()),
        ratings_per_subject=data.groupby(config.subject_column).size(),
        ratings_per_item=data.groupby(config.item_column).size(),
        outcome_by_predictor=outcome_by_predictor,
    )


def ratings_model_spec(config: RatingsConfig) -> ModelSpec:
    return ModelSpec(
        response=config.outcome_column,
        fixed_effects=tuple(config.predictors),
        random_intercepts=(config.subject_column, config.item_column),
    )


def fit_ratings_model(
    data: pd.DataFrame,
    config: RatingsConfig,
    fit_config: LogisticFitConfig | None = None,
) -> MixedLogitFit:
    """
    Fit the dichotomized rating with crossed rater and item intercepts.

    Args:
        data: Output of ``dichotomize``.
        config: Ratings configuration.
        fit_config: Bayesian fit settings.

    Returns:
        MixedLogitFit.
    """
    spec = ratings_model_spec(config)
    return fit_mixed_logistic(data, spec, fit_config)
