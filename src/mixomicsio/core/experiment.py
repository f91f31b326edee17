"""
Core data structure for annotated multi-assay matrices.

ExperimentContainer bundles one or more measurement matrices (assays) with the
sample-level and feature-level annotation tables that describe them and a
free-form metadata mapping for provenance and analysis results.

Biological Context:
    An experiment is usually measured once and transformed many times:
    - Rows = features (genes, proteins, taxa)
    - Columns = observations (patients, cell lines, time points)
    - Assays = parallel views of the same measurements (raw counts,
      normalized counts, log2 counts, CLR)

    The annotation tables must stay aligned with every assay: one sample
    table row per assay column, one feature table row per assay row.

Engineering Design:
    - Immutable: methods return new instances, inputs are never modified
    - Type-safe: NumPy arrays for assays, Pandas for annotations
    - Validated: constructor checks shape consistency across all assays
    - Copy-on-write: with_feature_table()/with_metadata() build new containers,
      so one source container can be shared across threads

Examples:
    >>> import numpy as np
    >>> import pandas as pd
    >>> from mixomicsio.core.experiment import ExperimentContainer
    >>>
    >>> counts = np.array([[10, 20, 5], [30, 40, 2]])
    >>> sample_table = pd.DataFrame(
    ...     {'condition': ['control', 'treatment', 'control']},
    ...     index=pd.Index(['S1', 'S2', 'S3']),
    ... )
    >>> feature_table = pd.DataFrame(index=pd.Index(['ENSG001', 'ENSG002']))
    >>> experiment = ExperimentContainer(
    ...     assays={'counts': counts},
    ...     sample_table=sample_table,
    ...     feature_table=feature_table,
    ... )
    >>> experiment.shape
    (2, 3)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
import numpy as np
import pandas as pd

__all__ = ['ExperimentContainer']


class ExperimentContainer:
    """
    Immutable container for assays + sample annotations + feature annotations.

    Attributes:
        assays: Ordered mapping of assay name to matrix (features × samples)
        sample_table: Per-observation annotations, indexed by sample id
        feature_table: Per-feature annotations, indexed by feature id
        metadata: Free-form provenance and analysis results

    Shape Invariants:
        - every assay has shape (len(feature_table), len(sample_table))
        - sample_table row order is assay column order
        - feature_table row order is assay row order
    """

    def __init__(
        self,
        assays: Mapping[str, np.ndarray],
        sample_table: Optional[pd.DataFrame] = None,
        feature_table: Optional[pd.DataFrame] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize ExperimentContainer with validation.

        Args:
            assays: Mapping of assay name to 2D array (features × samples)
            sample_table: DataFrame with one row per assay column.
                Defaults to an empty table indexed 0..n_samples-1
            feature_table: DataFrame with one row per assay row.
                Defaults to an empty table indexed 0..n_features-1
            metadata: Free-form mapping, copied into a new dict

        Raises:
            TypeError: If assays or tables have the wrong type
            ValueError: If assay shapes disagree with each other or the tables
        """
        if not isinstance(assays, Mapping):
            raise TypeError(f"assays must be a mapping of name -> np.ndarray, got {type(assays)}")
        if sample_table is not None and not isinstance(sample_table, pd.DataFrame):
            raise TypeError(f"sample_table must be pd.DataFrame, got {type(sample_table)}")
        if feature_table is not None and not isinstance(feature_table, pd.DataFrame):
            raise TypeError(f"feature_table must be pd.DataFrame, got {type(feature_table)}")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise TypeError(f"metadata must be a mapping, got {type(metadata)}")

        shape: Optional[tuple[int, int]] = None
        for name, matrix in assays.items():
            if not isinstance(name, str):
                raise TypeError(f"assay names must be strings, got {name!r}")
            if not isinstance(matrix, np.ndarray):
                raise TypeError(f"assay '{name}' must be np.ndarray, got {type(matrix)}")
            if matrix.ndim != 2:
                raise ValueError(f"assay '{name}' must be 2D, got shape {matrix.shape}")
            if shape is None:
                shape = matrix.shape
            elif matrix.shape != shape:
                raise ValueError(
                    f"assay '{name}' has shape {matrix.shape}, "
                    f"expected {shape} like the other assays"
                )

        if shape is None:
            if sample_table is None or feature_table is None:
                raise ValueError(
                    "A container without assays needs explicit sample_table and feature_table"
                )
            shape = (len(feature_table), len(sample_table))

        n_features, n_samples = shape

        if sample_table is None:
            sample_table = pd.DataFrame(index=pd.RangeIndex(n_samples))
        if feature_table is None:
            feature_table = pd.DataFrame(index=pd.RangeIndex(n_features))

        if len(sample_table) != n_samples:
            raise ValueError(
                f"sample_table rows ({len(sample_table)}) must match assay columns ({n_samples})"
            )
        if len(feature_table) != n_features:
            raise ValueError(
                f"feature_table rows ({len(feature_table)}) must match assay rows ({n_features})"
            )

        # Store as private attributes (immutability by convention)
        self._assays = dict(assays)
        self._sample_table = sample_table
        self._feature_table = feature_table
        self._metadata = dict(metadata) if metadata is not None else {}
        self._shape = (n_features, n_samples)

    @property
    def assays(self) -> dict[str, np.ndarray]:
        """Assay matrices by name (features × samples)."""
        return self._assays

    @property
    def assay_names(self) -> list[str]:
        """Assay names in insertion order."""
        return list(self._assays)

    def assay(self, name: str) -> np.ndarray:
        """Return one assay matrix; KeyError if absent."""
        return self._assays[name]

    @property
    def sample_table(self) -> pd.DataFrame:
        """Per-observation annotations."""
        return self._sample_table

    @property
    def feature_table(self) -> pd.DataFrame:
        """Per-feature annotations."""
        return self._feature_table

    @property
    def metadata(self) -> dict[str, Any]:
        """Free-form provenance and analysis results."""
        return self._metadata

    @property
    def sample_ids(self) -> pd.Index:
        """Observation identifiers (sample_table index)."""
        return self._sample_table.index

    @property
    def feature_ids(self) -> pd.Index:
        """Feature identifiers (feature_table index)."""
        return self._feature_table.index

    @property
    def shape(self) -> tuple[int, int]:
        """Container dimensions (n_features, n_samples)."""
        return self._shape

    @property
    def n_features(self) -> int:
        """Number of features (genes, proteins, taxa)."""
        return self._shape[0]

    @property
    def n_samples(self) -> int:
        """Number of observations."""
        return self._shape[1]

    def select_samples(self, mask: np.ndarray | pd.Series) -> ExperimentContainer:
        """
        Subset every assay and the sample table by observations (columns).

        Args:
            mask: Boolean array/Series indicating which samples to keep.
                If Series, uses values and ignores index

        Returns:
            New ExperimentContainer with selected samples

        Raises:
            ValueError: If mask length doesn't match n_samples

        Examples:
            >>> treated = experiment.select_samples(
            ...     experiment.sample_table['condition'] == 'treatment'
            ... )
        """
        if isinstance(mask, pd.Series):
            mask = mask.values
        mask = np.asarray(mask, dtype=bool)

        if len(mask) != self.n_samples:
            raise ValueError(
                f"mask length ({len(mask)}) must match n_samples ({self.n_samples})"
            )

        return ExperimentContainer(
            assays={name: matrix[:, mask] for name, matrix in self._assays.items()},
            sample_table=self._sample_table.iloc[mask],
            feature_table=self._feature_table,
            metadata=self._metadata,
        )

    def select_features(self, mask: np.ndarray | pd.Series) -> ExperimentContainer:
        """
        Subset every assay and the feature table by features (rows).

        Args:
            mask: Boolean array/Series indicating which features to keep.
                If Series, uses values and ignores index

        Returns:
            New ExperimentContainer with selected features

        Raises:
            ValueError: If mask length doesn't match n_features

        Examples:
            >>> # Keep features selected by a previous merge
            >>> selected = experiment.select_features(
            ...     experiment.feature_table['mixomics_selected']
            ... )
        """
        if isinstance(mask, pd.Series):
            mask = mask.values
        mask = np.asarray(mask, dtype=bool)

        if len(mask) != self.n_features:
            raise ValueError(
                f"mask length ({len(mask)}) must match n_features ({self.n_features})"
            )

        return ExperimentContainer(
            assays={name: matrix[mask, :] for name, matrix in self._assays.items()},
            sample_table=self._sample_table,
            feature_table=self._feature_table.iloc[mask],
            metadata=self._metadata,
        )

    def with_feature_table(self, feature_table: pd.DataFrame) -> ExperimentContainer:
        """Return a new container sharing everything except the feature table."""
        return ExperimentContainer(
            assays=self._assays,
            sample_table=self._sample_table,
            feature_table=feature_table,
            metadata=self._metadata,
        )

    def with_metadata(self, metadata: Mapping[str, Any]) -> ExperimentContainer:
        """Return a new container sharing everything except the metadata mapping."""
        return ExperimentContainer(
            assays=self._assays,
            sample_table=self._sample_table,
            feature_table=self._feature_table,
            metadata=metadata,
        )

    def copy(self, deep: bool = True) -> ExperimentContainer:
        """
        Create a copy of this container.

        Args:
            deep: If True, copy every assay and table. Metadata values are
                never deep-copied (they may hold arbitrary objects); only the
                mapping itself is new. If False, share arrays and tables.

        Returns:
            New ExperimentContainer instance
        """
        if deep:
            return ExperimentContainer(
                assays={name: matrix.copy() for name, matrix in self._assays.items()},
                sample_table=self._sample_table.copy(),
                feature_table=self._feature_table.copy(),
                metadata=dict(self._metadata),
            )
        else:
            return ExperimentContainer(
                assays=self._assays,
                sample_table=self._sample_table,
                feature_table=self._feature_table,
                metadata=self._metadata,
            )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"ExperimentContainer({self.n_features} features × {self.n_samples} samples)\n"
            f"  Assays: {self.assay_names}\n"
            f"  Sample columns: {list(self._sample_table.columns)}\n"
            f"  Feature columns: {list(self._feature_table.columns)}\n"
            f"  Metadata keys: {list(self._metadata)}"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.__repr__()
