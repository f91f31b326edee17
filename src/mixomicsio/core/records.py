"""
Record types exchanged with the multivariate analysis toolkit.

FlatPair is what the converter hands to the toolkit: an observation-major
numeric matrix and a categorical response. ResultRecord is what the merger
accepts back: a record of optional, loosely-typed fields mirroring the result
objects of mixOmics-style fitting functions (pls, plsda, spls, splsda).

ResultRecord replaces dynamic field probing with explicit optional fields.
Whether a record is usable is decided by capability tests (has_loadings,
has_selection, design_fields) rather than by its type tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional

import numpy as np
import pandas as pd

__all__ = ['FlatPair', 'ResultRecord', 'DESIGN_FIELDS', 'FEATURE_RESULT_FIELDS']

# Fields every fitted model exposes; used to judge how complete a record is
DESIGN_FIELDS = ('X', 'Y', 'ncomp', 'mode', 'call')

# Fields the merger can write back into the container
FEATURE_RESULT_FIELDS = ('loadings', 'selected_var', 'explained_variance', 'prop_expl_var')

# Toolkit spellings -> attribute names
_KEY_ALIASES = {
    'selected.var': 'selected_var',
    'prop.expl.var': 'prop_expl_var',
    'explained.variance': 'explained_variance',
    'class': 'result_type',
}

_RECORD_FIELDS = DESIGN_FIELDS + FEATURE_RESULT_FIELDS + ('variates', 'names')


@dataclass(frozen=True, eq=False)
class FlatPair:
    """
    Observation-major design matrix and response vector.

    Attributes:
        X: float64 matrix (observations × features), transpose of the assay
        Y: Categorical response, one label per row of X
        sample_ids: Row labels of X
        feature_ids: Column labels of X
        warnings: Data-quality messages emitted while building the pair

    Examples:
        >>> pair = to_mixomics(experiment, "counts", "condition")
        >>> X, Y = pair
        >>> X.shape == (experiment.n_samples, experiment.n_features)
        True
    """

    X: np.ndarray
    Y: pd.Categorical
    sample_ids: pd.Index
    feature_ids: pd.Index
    warnings: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[Any]:
        yield self.X
        yield self.Y

    @property
    def n_observations(self) -> int:
        return self.X.shape[0]

    @property
    def n_features(self) -> int:
        return self.X.shape[1]

    @property
    def levels(self) -> list[Any]:
        """Response levels in category order."""
        return list(self.Y.categories)

    def to_dict(self) -> dict[str, Any]:
        """Return the toolkit's ``{"X": ..., "Y": ...}`` input shape."""
        return {'X': self.X, 'Y': self.Y}

    def to_frame(self) -> pd.DataFrame:
        """Return X as a DataFrame labelled by sample and feature ids."""
        return pd.DataFrame(self.X, index=self.sample_ids, columns=self.feature_ids)


@dataclass(frozen=True, eq=False)
class ResultRecord:
    """
    Result of fitting a multivariate model, every field optional.

    Attributes:
        X: Design matrix the model was fitted on (observations × features)
        Y: Response used for fitting
        ncomp: Number of components
        mode: Fitting mode (e.g. "regression", "canonical")
        call: The fitting call, kept for provenance
        loadings: Matrix (features × components) or mapping of named matrices
        selected_var: Selected features as 1-based indices, feature ids,
            a boolean mask, or a mapping of these per component
        explained_variance: Explained variance per component
        prop_expl_var: Proportion of explained variance (fallback field)
        variates: Per-observation component scores (carried, not merged)
        names: Feature/sample names of the fit (carried, not merged)
        result_type: Discriminating type tag (e.g. "mixo_pls")
        extra: Any further fields of the source mapping
    """

    X: Any = None
    Y: Any = None
    ncomp: Optional[int] = None
    mode: Optional[str] = None
    call: Any = None
    loadings: Any = None
    selected_var: Any = None
    explained_variance: Any = None
    prop_expl_var: Any = None
    variates: Any = None
    names: Any = None
    result_type: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ResultRecord:
        """
        Build a record from a toolkit-style mapping.

        Accepts both the toolkit's dotted keys ("selected.var") and Python
        attribute names ("selected_var"). Unknown keys land in ``extra``.

        Examples:
            >>> record = ResultRecord.from_mapping({
            ...     'loadings': {'X': np.zeros((20, 2))},
            ...     'selected.var': {'X': [1, 4, 7]},
            ...     'class': 'mixo_pls',
            ... })
            >>> record.result_type
            'mixo_pls'
        """
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _KEY_ALIASES.get(key, key)
            if name in _RECORD_FIELDS or name == 'result_type':
                known[name] = value
            else:
                extra[key] = value
        if known.get('result_type') is not None:
            known['result_type'] = str(known['result_type'])
        return cls(extra=extra, **known)

    @property
    def design_fields(self) -> tuple[str, ...]:
        """Which of X, Y, ncomp, mode, call are present."""
        return tuple(name for name in DESIGN_FIELDS if getattr(self, name) is not None)

    @property
    def has_loadings(self) -> bool:
        return self.loadings is not None

    @property
    def has_selection(self) -> bool:
        return self.selected_var is not None

    @property
    def explained(self) -> Any:
        """explained_variance, falling back to prop_expl_var."""
        if self.explained_variance is not None:
            return self.explained_variance
        return self.prop_expl_var

    @property
    def is_empty(self) -> bool:
        return (
            all(getattr(self, name) is None for name in _RECORD_FIELDS)
            and not self.extra
        )

    @property
    def is_recognized(self) -> bool:
        """True if the record exposes any design or per-feature result field."""
        return bool(self.design_fields) or any(
            getattr(self, name) is not None for name in FEATURE_RESULT_FIELDS
        )
