"""
Exception and warning types for container <-> toolkit conversion.

Every fatal condition raised by the converter and the merger is a subclass of
MixOmicsIOError, and also of the builtin exception a caller would naturally
catch (ValueError, TypeError, LookupError). Errors carry the offending selector
or value and, where helpful, the valid alternatives, so the caller can correct
the call without re-inspecting the container.

Warning convention:
    warnings.warn(DataQualityWarning) -- user-facing (imbalance, missing data,
        partial result records, dropped selections)
    logger.info()/logger.debug() -- operator-facing (type coercion, merge summary)
"""

from __future__ import annotations

from typing import Sequence

__all__ = [
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


class MixOmicsIOError(Exception):
    """Base class for all conversion and merge failures."""
    pass


class InvalidContainerShapeError(MixOmicsIOError, ValueError):
    """Raised when a container is missing assays, tables, or has an empty dimension."""
    pass


class SelectorNotFoundError(MixOmicsIOError, LookupError):
    """
    Raised when a requested assay name or annotation column does not exist.

    Attributes:
        kind: What was being selected ("assay" or "design variable")
        selector: The name that was requested
        available: Names that do exist, in container order
    """

    def __init__(self, kind: str, selector: str, available: Sequence[str], where: str = ""):
        self.kind = kind
        self.selector = selector
        self.available = list(available)
        location = f" in {where}" if where else ""
        listing = ", ".join(str(name) for name in self.available) or "<none>"
        super().__init__(
            f"{kind.capitalize()} '{selector}' not found{location}. Available: {listing}"
        )


class TypeMismatchError(MixOmicsIOError, TypeError):
    """Raised when an assay is not numeric or a result record is not record-shaped."""
    pass


class NonFiniteDataError(MixOmicsIOError, ValueError):
    """Raised when the selected assay contains +/-inf."""
    pass


class ExcessiveMissingDataError(MixOmicsIOError, ValueError):
    """Raised when the assay is too sparse or the design variable has any missing label."""
    pass


class DegenerateGroupingError(MixOmicsIOError, ValueError):
    """Raised when the design variable has fewer than two distinct levels."""
    pass


class InsufficientSizeError(MixOmicsIOError, ValueError):
    """Raised when there are too few observations or features to fit a model."""
    pass


class DimensionMismatchError(MixOmicsIOError, ValueError):
    """Raised when a result record was fitted on data shaped unlike the container."""
    pass


class UnrecognizedResultError(MixOmicsIOError, ValueError):
    """Raised when a result record is empty or exposes none of the toolkit's fields."""
    pass


class DataQualityWarning(UserWarning):
    """Non-fatal data-quality finding; the returned value is still valid."""
    pass
