"""
Core data structures shared by the converter and the merger.

1. ExperimentContainer: Assays with sample/feature annotations and metadata
2. FlatPair / ResultRecord: The toolkit-side input and output records
3. Errors: One exception type per failure kind, plus DataQualityWarning

Design Philosophy:
    - Immutability: All operations return new instances (functional style)
    - Fail fast: Structural problems raise immediately with the valid choices
    - Tolerance: Data-quality concerns warn instead of failing

Examples:
    >>> from mixomicsio.core import ExperimentContainer, ResultRecord
    >>> record = ResultRecord.from_mapping({'loadings': {'X': loadings}, 'ncomp': 2})
    >>> record.has_loadings
    True
"""

from mixomicsio.core.experiment import ExperimentContainer
from mixomicsio.core.records import FlatPair, ResultRecord
from mixomicsio.core.errors import (
    MixOmicsIOError,
    InvalidContainerShapeError,
    SelectorNotFoundError,
    TypeMismatchError,
    NonFiniteDataError,
    ExcessiveMissingDataError,
    DegenerateGroupingError,
    InsufficientSizeError,
    DimensionMismatchError,
    UnrecognizedResultError,
    DataQualityWarning,
)

__all__ = [
    'ExperimentContainer',
    'FlatPair',
    'ResultRecord',
    'MixOmicsIOError',
    'InvalidContainerShapeError',
    'SelectorNotFoundError',
    'TypeMismatchError',
    'NonFiniteDataError',
    'ExcessiveMissingDataError',
    'DegenerateGroupingError',
    'InsufficientSizeError',
    'DimensionMismatchError',
    'UnrecognizedResultError',
    'DataQualityWarning',
]
