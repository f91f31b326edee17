"""
Toolkit result -> container integration.

Takes the result of a mixOmics-style fit and returns a new ExperimentContainer
holding the original content plus the analysis results:

    feature_table  + one column per loadings component
                   + a boolean column marking selected features
    metadata       + the full result record, the analysis timestamp, the
                     result type tag and (if present) the explained variance

Engineering Design:
    Structural problems with the inputs are fatal and raised before anything
    is built. Each result field is then merged independently: a malformed
    loadings matrix or an out-of-range selection is skipped with a
    DataQualityWarning and never aborts the rest of the merge.

    Existing feature-table columns are never overwritten. An incoming column
    whose name is taken gets a timestamp suffix instead, so repeated merges
    into the same container accumulate rather than replace results.

Warning convention:
    warnings.warn() -- user-facing (partial records, skipped fields, renames)
    logger.info() -- operator-facing (merge summary, replaced metadata)

Examples:
    >>> from mixomicsio import to_mixomics, from_mixomics
    >>> X, Y = to_mixomics(experiment, "counts", "condition")
    >>> result = fit_plsda(X, Y)              # external toolkit
    >>> annotated = from_mixomics(result, experiment)
    >>> annotated.feature_table.filter(like="mixomics_").columns
"""

from __future__ import annotations

import copy
import logging
import warnings
from datetime import datetime
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from mixomicsio import keys
from mixomicsio.core.errors import (
    DataQualityWarning,
    DimensionMismatchError,
    TypeMismatchError,
    UnrecognizedResultError,
)
from mixomicsio.core.experiment import ExperimentContainer
from mixomicsio.core.records import (
    DESIGN_FIELDS,
    FEATURE_RESULT_FIELDS,
    ResultRecord,
)
from mixomicsio.core.validation import check_container

logger = logging.getLogger(__name__)

__all__ = ['from_mixomics']


def _warn(message: str, depth: int = 1) -> None:
    """Warn at the caller of from_mixomics; ``depth`` is the number of frames
    between the function calling _warn and from_mixomics inclusive."""
    warnings.warn(message, DataQualityWarning, stacklevel=depth + 2)


def _copy_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-copy each metadata entry, sharing only values that cannot be copied."""
    copied: dict[str, Any] = {}
    for key, value in metadata.items():
        try:
            copied[key] = copy.deepcopy(value)
        except (TypeError, copy.Error) as e:
            logger.debug("Metadata entry '%s' shared with the input container: %s", key, e)
            copied[key] = value
    return copied


def _as_record(result: Any) -> ResultRecord:
    if result is None:
        raise TypeMismatchError("mixomics result cannot be None")
    if isinstance(result, ResultRecord):
        return result
    if isinstance(result, Mapping):
        return ResultRecord.from_mapping(result)
    raise TypeMismatchError(
        "mixomics result must be a mapping or ResultRecord "
        f"(typical mixOmics result structure), got {type(result).__name__}"
    )


def _result_type(result: Any, record: ResultRecord) -> str:
    if record.result_type:
        return record.result_type
    return type(result).__name__


def _check_design_shape(record: ResultRecord, container: ExperimentContainer) -> None:
    """Fail if the record's own design matrix was not fitted on this container's data."""
    if record.X is None:
        return
    shape = getattr(record.X, 'shape', None)
    if shape is None:
        try:
            shape = np.shape(record.X)
        except ValueError:
            shape = ()
    if len(shape) != 2:
        _warn(
            f"Result design matrix X has shape {tuple(shape)}, not 2D; shape check skipped",
            depth=2,
        )
        return

    n_obs, n_features = shape
    if n_features != container.n_features or n_obs != container.n_samples:
        raise DimensionMismatchError(
            f"Result was fitted on {n_obs} observations × {n_features} features, "
            f"but the container has {container.n_samples} samples × "
            f"{container.n_features} features"
        )


class _ColumnAllocator:
    """Hands out feature-table column names that never collide with existing ones."""

    def __init__(self, existing: pd.Index, stamp: datetime):
        self._taken = set(existing)
        self._suffix = stamp.strftime(keys.COLLISION_SUFFIX_FORMAT)

    def claim(self, name: str, depth: int = 1) -> str:
        if name not in self._taken:
            self._taken.add(name)
            return name

        candidate = f"{name}_{self._suffix}"
        counter = 2
        while candidate in self._taken:
            candidate = f"{name}_{self._suffix}_{counter}"
            counter += 1
        _warn(
            f"Column '{name}' already exists in feature_table; writing '{candidate}' instead",
            depth=depth + 1,
        )
        self._taken.add(candidate)
        return candidate


def _loading_matrix(value: Any, name: str, container: ExperimentContainer) -> Optional[np.ndarray]:
    """Coerce one loadings structure to a float (features × components) matrix, or None."""
    n_features = container.n_features

    if isinstance(value, pd.DataFrame):
        if (
            len(value) == n_features
            and value.index.is_unique
            and not value.index.equals(container.feature_ids)
            and set(value.index) == set(container.feature_ids)
        ):
            value = value.reindex(container.feature_ids)
        value = value.to_numpy()

    try:
        matrix = np.asarray(value)
    except (ValueError, TypeError):
        _warn(f"Loadings '{name}' could not be read as a matrix; skipped", depth=3)
        return None

    if not (np.issubdtype(matrix.dtype, np.integer) or np.issubdtype(matrix.dtype, np.floating)):
        _warn(f"Loadings '{name}' are not numeric (dtype {matrix.dtype}); skipped", depth=3)
        return None
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.ndim != 2:
        _warn(f"Loadings '{name}' must be 2D, got shape {matrix.shape}; skipped", depth=3)
        return None
    if matrix.shape[0] != n_features:
        _warn(
            f"Loading matrix '{name}' has {matrix.shape[0]} rows but the container has "
            f"{n_features} features; skipped",
            depth=3,
        )
        return None
    return matrix.astype(np.float64)


def _merge_loadings(
    loadings: Any,
    container: ExperimentContainer,
    allocator: _ColumnAllocator,
) -> dict[str, np.ndarray]:
    if isinstance(loadings, Mapping):
        structures = [(str(name), value) for name, value in loadings.items()]
    else:
        structures = [(keys.SINGLE_LOADING_NAME, loadings)]

    columns: dict[str, np.ndarray] = {}
    for name, value in structures:
        matrix = _loading_matrix(value, name, container)
        if matrix is None:
            continue
        for col_idx in range(matrix.shape[1]):
            column = allocator.claim(keys.loading_column(name, col_idx + 1), depth=2)
            columns[column] = matrix[:, col_idx]
    return columns


def _mark_selection(part: Any, mask: np.ndarray, container: ExperimentContainer) -> None:
    """Set mask entries for one selection structure (indices, ids, or boolean mask)."""
    n_features = container.n_features

    if isinstance(part, pd.DataFrame):
        # selectVar()-style table: selected feature ids on the index
        part = part.index
    elif isinstance(part, pd.Series) and part.dtype != bool:
        part = part.to_numpy()

    values = np.asarray(part)
    if values.ndim == 0:
        values = values.reshape(1)
    if values.size == 0:
        return

    if values.dtype == bool:
        if values.shape != (n_features,):
            _warn(
                f"Boolean selection of length {values.size} does not match "
                f"{n_features} features; skipped",
                depth=3,
            )
            return
        mask |= values
        return

    if values.dtype == object and pd.api.types.infer_dtype(values.ravel(), skipna=True) in (
        'integer', 'floating', 'mixed-integer-float',
    ):
        # boxed indices (object Series, lists with None); missing entries become NaN
        values = pd.to_numeric(pd.Series(values.ravel()), errors='coerce').to_numpy(dtype=np.float64)

    if np.issubdtype(values.dtype, np.integer) or np.issubdtype(values.dtype, np.floating):
        values = values.ravel().astype(np.float64)
        valid = np.isfinite(values) & (values == np.round(values))
        valid &= (values >= 1) & (values <= n_features)
        n_dropped = int((~valid).sum())
        if n_dropped:
            _warn(
                f"Dropped {n_dropped} selected-feature index(es) outside 1..{n_features}",
                depth=3,
            )
        mask[values[valid].astype(np.int64) - 1] = True
        return

    if values.dtype.kind in ('U', 'S', 'O'):
        identifiers = pd.Index(values.ravel())
        matched = identifiers.isin(container.feature_ids)
        n_unmatched = int((~matched).sum())
        if n_unmatched:
            examples = ", ".join(str(v) for v in identifiers[~matched][:5])
            _warn(
                f"Dropped {n_unmatched} selected feature id(s) not found in "
                f"feature_table (e.g. {examples})",
                depth=3,
            )
        mask |= container.feature_ids.isin(identifiers[matched])
        return

    _warn(f"Selected features of dtype {values.dtype} are not understood; skipped", depth=3)


def _merge_selection(selected: Any, container: ExperimentContainer) -> np.ndarray:
    mask = np.zeros(container.n_features, dtype=bool)
    parts = list(selected.values()) if isinstance(selected, Mapping) else [selected]
    for part in parts:
        try:
            _mark_selection(part, mask, container)
        except (ValueError, TypeError) as e:
            _warn(f"Selected features could not be read ({e}); skipped", depth=2)
    return mask


def from_mixomics(result: Any, container: Any) -> ExperimentContainer:
    """
    Integrate a mixOmics-style result into a copy of the original container.

    Args:
        result: ResultRecord or mapping with any of the fields X, Y, ncomp,
            mode, call, loadings, selected.var / selected_var,
            explained_variance, prop_expl_var, class
        container: The ExperimentContainer the analysis was run on (not modified)

    Returns:
        New ExperimentContainer with:
            - feature_table: original columns plus mixomics_* result columns
            - metadata: original entries plus mixomics_result,
              mixomics_analysis_date, mixomics_analysis_method and, if
              available, mixomics_explained_variance. Original entries are
              deep-copied; an entry that cannot be copied is shared.

    Raises:
        InvalidContainerShapeError: container is not a non-empty ExperimentContainer
        TypeMismatchError: result is None or not record-shaped
        UnrecognizedResultError: result is empty or has no toolkit fields
        DimensionMismatchError: result's design matrix disagrees with the container

    Examples:
        >>> annotated = from_mixomics(pls_result, experiment)
        >>> annotated.metadata['mixomics_analysis_method']
        'mixo_pls'
    """
    container = check_container(container, "original container")
    record = _as_record(result)

    if record.is_empty:
        raise UnrecognizedResultError("mixomics result is empty")
    if not record.is_recognized:
        raise UnrecognizedResultError(
            "Not a recognized mixOmics result: none of "
            f"{', '.join(DESIGN_FIELDS + FEATURE_RESULT_FIELDS)} present "
            f"(got {', '.join(str(k) for k in record.extra) or 'no fields'})"
        )

    present = record.design_fields
    if 2 * len(present) < len(DESIGN_FIELDS):
        _warn(
            f"Result exposes only {len(present)} of {len(DESIGN_FIELDS)} expected fields "
            f"({', '.join(present) or 'none'}); merging what is available"
        )

    _check_design_shape(record, container)

    stamp = datetime.now()
    original_table = container.feature_table
    allocator = _ColumnAllocator(original_table.columns, stamp)
    new_columns: dict[str, np.ndarray] = {}

    if record.has_loadings:
        new_columns.update(_merge_loadings(record.loadings, container, allocator))

    if record.has_selection:
        column = allocator.claim(keys.COLUMN_SELECTED)
        new_columns[column] = _merge_selection(record.selected_var, container)

    feature_table = original_table.copy()
    if new_columns:
        additions = pd.DataFrame(new_columns, index=original_table.index)
        if len(original_table.columns) == 0:
            feature_table = additions
        else:
            feature_table = pd.concat([feature_table, additions], axis=1)

    metadata = _copy_metadata(container.metadata)
    replaced = [
        key for key in (keys.META_RESULT, keys.META_EXPLAINED_VARIANCE) if key in metadata
    ]
    if replaced:
        logger.info("Replacing previous analysis metadata: %s", ", ".join(replaced))
        metadata.pop(keys.META_EXPLAINED_VARIANCE, None)

    metadata[keys.META_RESULT] = result
    if record.explained is not None:
        metadata[keys.META_EXPLAINED_VARIANCE] = record.explained
    metadata[keys.META_ANALYSIS_DATE] = stamp
    metadata[keys.META_ANALYSIS_METHOD] = _result_type(result, record)

    logger.info(
        "Merged %s result: %d feature column(s) added (%s)",
        metadata[keys.META_ANALYSIS_METHOD], len(new_columns),
        ", ".join(new_columns) or "none",
    )

    copied = container.copy(deep=True)
    return ExperimentContainer(
        assays=copied.assays,
        sample_table=copied.sample_table,
        feature_table=feature_table,
        metadata=metadata,
    )
