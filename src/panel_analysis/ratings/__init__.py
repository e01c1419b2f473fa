"""
Analysis of experimental rating data with a mixed logistic regression.

The rating is dichotomized at a threshold and modelled with random
intercepts for raters and rated items.
"""

from panel_analysis.ratings.analysis import (
    RatingsSummary,
    dichotomize,
    fit_ratings_model,
    load_ratings,
    ratings_model_spec,
    summarize_ratings,
)
from panel_analysis.ratings.config import RatingsConfig, load_ratings_config

__all__ = [
    "RatingsConfig",
    "RatingsSummary",
    "dichotomize",
    "fit_ratings_model",
    "load_ratings",
    "load_ratings_config",
    "ratings_model_spec",
    "summarize_ratings",
]
