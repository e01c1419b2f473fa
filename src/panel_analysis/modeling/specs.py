"""
Mixed model specifications.

A ModelSpec names the response, the fixed-effect predictors and the
random terms. Random terms are expressed as statsmodels variance
components over a single all-observation group, which is how crossed
(non-nested) grouping factors are fitted with MixedLM.
"""

import re
from dataclasses import dataclass, replace

import pandas as pd

from panel_analysis.modeling.exceptions import InvalidModelSpec


def slope_component_name(group: str, predictor: str) -> str:
    return f"{group}:{predictor}"


@dataclass(frozen=True)
class ModelSpec:
    """
    Specification of a mixed model.

    Attributes:
        response: Response column.
        fixed_effects: Predictor columns with fixed slopes. Empty means
            intercept only.
        random_intercepts: Grouping columns with a random intercept.
        random_slopes: (group, predictor) pairs with a random slope,
            uncorrelated with the intercepts.
    """

    response: str
    fixed_effects: tuple[str, ...] = ()
    random_intercepts: tuple[str, ...] = ()
    random_slopes: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if not self.random_intercepts and not self.random_slopes:
            raise InvalidModelSpec(
                "A mixed model needs at least one random term"
            )
        if len(set(self.random_intercepts)) != len(self.random_intercepts):
            raise InvalidModelSpec("Duplicate random intercepts")
        if len(set(self.random_slopes)) != len(self.random_slopes):
            raise InvalidModelSpec("Duplicate random slopes")

    @property
    def formula(self) -> str:
        """Fixed-effects formula, e.g. ``response ~ predictor``."""
        rhs = " + ".join(self.fixed_effects) if self.fixed_effects else "1"
        return f"{self.response} ~ {rhs}"

    @property
    def variance_components(self) -> dict[str, str]:
        """Variance-component formulas keyed by component name."""
        components = {
            group: f"0 + C({group})" for group in self.random_intercepts
        }
        for group, predictor in self.random_slopes:
            name = slope_component_name(group, predictor)
            components[name] = f"0 + C({group}):{predictor}"
        return components

    @property
    def grouping_columns(self) -> tuple[str, ...]:
        groups = list(self.random_intercepts)
        for group, _ in self.random_slopes:
            if group not in groups:
                groups.append(group)
        return tuple(groups)

    @property
    def required_columns(self) -> tuple[str, ...]:
        columns = [self.response, *self.fixed_effects, *self.grouping_columns]
        columns.extend(predictor for _, predictor in self.random_slopes)
        return tuple(dict.fromkeys(columns))

    def describe(self) -> str:
        """lme4-style description, e.g. ``y ~ x + (1 | subject)``."""
        terms = [f"(1 | {group})" for group in self.random_intercepts]
        terms.extend(
            f"(0 + {predictor} | {group})"
            for group, predictor in self.random_slopes
        )
        return " + ".join([self.formula, *terms])

    def check_columns(self, data: pd.DataFrame) -> None:
        """
        Raises:
            InvalidModelSpec: If any required column is absent.
        """
        missing = [c for c in self.required_columns if c not in data.columns]
        if missing:
            raise InvalidModelSpec(f"Data is missing columns: {missing}")

    def check_complete(self, data: pd.DataFrame) -> None:
        """
        Raises:
            InvalidModelSpec: If a required column is absent or has
                missing values.
        """
        self.check_columns(data)
        n_missing = data[list(self.required_columns)].isna().sum()
        incomplete = n_missing[n_missing > 0].to_dict()
        if incomplete:
            raise InvalidModelSpec(
                f"Missing values in model columns: {incomplete}"
            )

    def without(self, component: str) -> "ModelSpec":
        """
        Return a copy with one random term removed.

        Args:
            component: A grouping column (random intercept) or a
                ``group:predictor`` slope component name.
        """
        if component in self.random_intercepts:
            intercepts = tuple(
                g for g in self.random_intercepts if g != component
            )
            return replace(self, random_intercepts=intercepts)

        slopes = tuple(
            (g, p)
            for g, p in self.random_slopes
            if slope_component_name(g, p) != component
        )
        if len(slopes) == len(self.random_slopes):
            raise InvalidModelSpec(f"No random term named '{component}'")
        return replace(self, random_slopes=slopes)

    def with_random_slope(self, group: str, predictor: str) -> "ModelSpec":
        """Return a copy with an added random slope."""
        return replace(
            self, random_slopes=(*self.random_slopes, (group, predictor))
        )


def crossed_intercepts_spec(
    response: str,
    fixed_effects: tuple[str, ...],
    subject_column: str,
    item_column: str,
) -> ModelSpec:
    """Random intercepts for subjects and items, crossed."""
    return ModelSpec(
        response=response,
        fixed_effects=fixed_effects,
        random_intercepts=(subject_column, item_column),
    )


# Design-matrix columns look like "C(subject_id)[S01]" or
# "C(subject_id)[S01]:predictor".
_LEVEL_PATTERN = re.compile(r"C\([^)]*\)\[(?:T\.)?(?P<level>[^\[\]]+)\]")

# statsmodels MixedLM labels random effects "<component>[<column>]".
_RANDOM_EFFECT_PATTERN = re.compile(
    r"^(?P<component>[^\[]+)\[(?P<column>.+)\]$"
)


def group_level(column_name: str) -> str:
    """
    Extract the grouping level from a variance-component column name.

    Raises:
        ValueError: If the name does not contain a ``C(...)[level]`` term.
    """
    match = _LEVEL_PATTERN.search(column_name)
    if match is None:
        raise ValueError(f"Cannot parse group level from '{column_name}'")
    return match.group("level")


def split_random_effect_label(label: str) -> tuple[str, str]:
    """
    Split a MixedLM random-effect label into (component, group level).

    Raises:
        ValueError: If the label is not of the form ``component[column]``.
    """
    match = _RANDOM_EFFECT_PATTERN.match(label)
    if match is None:
        raise ValueError(f"Cannot parse random effect label '{label}'")
    return match.group("component"), group_level(match.group("column"))
