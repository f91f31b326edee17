"""
Container -> toolkit conversion.

Extracts one assay and one sample annotation column from an
ExperimentContainer and returns the flat (X, Y) pair expected by
mixOmics-style multivariate methods (PLS-DA, sPLS-DA, PCA with a grouping).

Biological Context:
    Containers store assays feature-major (genes × samples) because that is
    how measurements are produced and annotated. Multivariate toolkits expect
    the opposite orientation: one row per observation, one column per
    variable, plus a categorical response naming each observation's group.

    Discriminant methods are fragile on small or degenerate designs, so the
    conversion is also the last point where data problems can be caught with
    a clear message rather than a numerical failure deep inside a fit:
    - Infinite values (log of zero, division by zero upstream)
    - Heavy missingness (failed runs, unimputed proteomics)
    - Single-level or tiny groups
    - Many more features than observations (overfitting risk)
    - Mixed-sign data fed to methods that assume counts

Engineering Design:
    Checks run in a fixed order and fail fast with a specific error type from
    mixomicsio.core.errors. Data-quality concerns that do not make the output
    wrong are emitted as DataQualityWarning and also recorded on the returned
    FlatPair. The input container is never modified.

Warning convention:
    warnings.warn() -- user-facing (missing data, imbalance, dimensionality)
    logger.info() -- operator-facing (design variable coercion)

Examples:
    >>> from mixomicsio import to_mixomics
    >>> pair = to_mixomics(experiment, assay_name="counts", design_variable="condition")
    >>> X, Y = pair
    >>> X.shape
    (10, 20)
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

import numpy as np
import pandas as pd

from mixomicsio.config import DEFAULT_THRESHOLDS, ConversionThresholds
from mixomicsio.core.errors import (
    DataQualityWarning,
    DegenerateGroupingError,
    ExcessiveMissingDataError,
    InsufficientSizeError,
    InvalidContainerShapeError,
    NonFiniteDataError,
    SelectorNotFoundError,
    TypeMismatchError,
)
from mixomicsio.core.records import FlatPair
from mixomicsio.core.validation import check_container, check_selector

logger = logging.getLogger(__name__)

__all__ = ['to_mixomics']


def _warn(messages: list[str], message: str) -> None:
    messages.append(message)
    warnings.warn(message, DataQualityWarning, stacklevel=3)


def to_mixomics(
    container: Any,
    assay_name: str = "counts",
    design_variable: Optional[str] = None,
    *,
    thresholds: Optional[ConversionThresholds] = None,
) -> FlatPair:
    """
    Convert an ExperimentContainer to the toolkit's (X, Y) input.

    Args:
        container: Source ExperimentContainer (not modified)
        assay_name: Assay to extract (default: "counts")
        design_variable: sample_table column to use as the response
        thresholds: Data-quality thresholds (default: DEFAULT_THRESHOLDS)

    Returns:
        FlatPair with X (samples × features, float64) and Y (Categorical)

    Raises:
        InvalidContainerShapeError: Not a container, no assays, empty dimension,
            or sample count disagrees with the response length
        TypeMismatchError: Selector not a string, or assay not numeric
        SelectorNotFoundError: Unknown assay or design variable
        NonFiniteDataError: Assay contains +/-inf
        ExcessiveMissingDataError: Too many NaN cells, or any missing label
        DegenerateGroupingError: Fewer than two response levels
        InsufficientSizeError: Too few observations or features

    Examples:
        >>> pair = to_mixomics(experiment, "counts", "condition")
        >>> pair.levels
        ['control', 'treatment']
    """
    thresholds = thresholds if thresholds is not None else DEFAULT_THRESHOLDS
    issues: list[str] = []

    # 1. Container and selector types
    container = check_container(container)
    check_selector(assay_name, "assay_name")
    check_selector(design_variable, "design_variable")

    # 2. Assay exists
    if assay_name not in container.assays:
        raise SelectorNotFoundError("assay", assay_name, container.assay_names)

    # 3. Design variable exists
    sample_table = container.sample_table
    if design_variable not in sample_table.columns:
        raise SelectorNotFoundError(
            "design variable", design_variable,
            [str(col) for col in sample_table.columns],
            where="sample_table",
        )

    # 4. Assay is numeric
    matrix = container.assay(assay_name)
    if not (np.issubdtype(matrix.dtype, np.integer) or np.issubdtype(matrix.dtype, np.floating)):
        raise TypeMismatchError(
            f"Assay '{assay_name}' must be numeric for mixOmics compatibility, "
            f"got dtype {matrix.dtype}"
        )
    values = matrix.astype(np.float64)

    # 5. Non-finite and missing values
    n_inf = int(np.isinf(values).sum())
    if n_inf > 0:
        raise NonFiniteDataError(
            f"Assay '{assay_name}' contains {n_inf} infinite value(s); "
            "remove or replace them before analysis"
        )

    missing = np.isnan(values)
    missing_fraction = float(missing.mean())
    if missing_fraction > thresholds.max_missing_fraction:
        raise ExcessiveMissingDataError(
            f"Assay '{assay_name}' has {100 * missing_fraction:.1f}% missing values "
            f"(limit {100 * thresholds.max_missing_fraction:.0f}%). "
            "Impute or filter features before analysis."
        )
    if missing_fraction > 0:
        _warn(
            issues,
            f"Assay '{assay_name}' contains {int(missing.sum())} missing value(s) "
            f"({100 * missing_fraction:.1f}%). mixOmics methods may not handle these correctly.",
        )

    # 6. Response has no missing labels
    labels = sample_table[design_variable]
    missing_labels = labels.isna()
    if missing_labels.all():
        raise ExcessiveMissingDataError(
            f"Design variable '{design_variable}' is entirely missing"
        )
    if missing_labels.any():
        offenders = [str(sid) for sid in labels.index[missing_labels][:5]]
        raise ExcessiveMissingDataError(
            f"Design variable '{design_variable}' contains {int(missing_labels.sum())} "
            f"missing value(s) (e.g. samples {', '.join(offenders)})"
        )

    # 7. Coerce to categorical
    if isinstance(labels.dtype, pd.CategoricalDtype):
        Y = pd.Categorical(labels.values).remove_unused_categories()
    else:
        Y = pd.Categorical(labels.to_numpy())
        logger.info("Converting design variable '%s' to categorical", design_variable)

    # 8. Level count
    level_counts = pd.Series(Y).value_counts(sort=False)
    n_levels = len(Y.categories)
    if n_levels < 2:
        raise DegenerateGroupingError(
            f"Design variable '{design_variable}' has {n_levels} level(s) "
            f"({', '.join(str(c) for c in Y.categories)}); at least 2 are required"
        )
    if n_levels > thresholds.max_levels:
        _warn(
            issues,
            f"Design variable '{design_variable}' has {n_levels} levels "
            f"(more than {thresholds.max_levels}); is it really categorical?",
        )

    # 9. Group balance
    small = level_counts[level_counts < thresholds.min_group_size]
    if len(small) > 0:
        listing = ", ".join(f"{level}={count}" for level, count in small.items())
        _warn(
            issues,
            f"Design variable '{design_variable}' has level(s) with fewer than "
            f"{thresholds.min_group_size} observations: {listing}",
        )
    if n_levels > 2:
        ratio = level_counts.max() / level_counts.min()
        if ratio > thresholds.max_imbalance_ratio:
            _warn(
                issues,
                f"Design variable '{design_variable}' is imbalanced: largest/smallest "
                f"level ratio is {ratio:.1f} (above {thresholds.max_imbalance_ratio:g})",
            )

    # 10. Transpose and check parity
    X = np.ascontiguousarray(values.T)
    if X.shape[0] != len(Y):
        raise InvalidContainerShapeError(
            f"Number of samples in assay ({X.shape[0]}) and design variable "
            f"({len(Y)}) do not match"
        )

    # 11. Minimum size
    n_obs, n_features = X.shape
    if n_obs < thresholds.min_observations:
        raise InsufficientSizeError(
            f"{n_obs} observation(s) is too few for analysis "
            f"(minimum {thresholds.min_observations})"
        )
    if n_features < thresholds.min_features:
        raise InsufficientSizeError(
            f"{n_features} feature(s) is too few for analysis "
            f"(minimum {thresholds.min_features})"
        )

    # 12. Dimensionality
    if n_features > thresholds.high_dimension_features and \
            n_obs / n_features < thresholds.min_obs_feature_ratio:
        _warn(
            issues,
            f"{n_obs} observations for {n_features} features "
            f"(ratio {n_obs / n_features:.3f}); risk of overfitting. "
            "Consider sparse methods or feature filtering.",
        )

    # 13. Sign heuristic
    observed = values[~missing]
    if observed.size and (observed < 0).any() and (observed >= 0).any():
        _warn(
            issues,
            f"Assay '{assay_name}' mixes negative and non-negative values; "
            "check that the data type suits the intended analysis",
        )

    logger.debug(
        "Converted assay '%s' to X %s with %d-level response '%s'",
        assay_name, X.shape, n_levels, design_variable,
    )

    return FlatPair(
        X=X,
        Y=Y,
        sample_ids=container.sample_ids.copy(),
        feature_ids=container.feature_ids.copy(),
        warnings=tuple(issues),
    )
