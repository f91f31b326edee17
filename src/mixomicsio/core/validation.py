"""
Structural checks shared by the converter and the merger.
"""

from __future__ import annotations

from typing import Any

from mixomicsio.core.errors import InvalidContainerShapeError, TypeMismatchError
from mixomicsio.core.experiment import ExperimentContainer

__all__ = ['check_container', 'check_selector']


def check_container(container: Any, argument: str = "container") -> ExperimentContainer:
    """
    Ensure ``container`` is a non-empty ExperimentContainer.

    Raises:
        InvalidContainerShapeError: If it is not an ExperimentContainer, holds
            no assays, or has zero features or samples
    """
    if not isinstance(container, ExperimentContainer):
        raise InvalidContainerShapeError(
            f"{argument} must be an ExperimentContainer, got {type(container).__name__}"
        )
    if not container.assays:
        raise InvalidContainerShapeError(f"{argument} contains no assays")
    if container.n_features == 0 or container.n_samples == 0:
        raise InvalidContainerShapeError(
            f"{argument} is empty: {container.n_features} features × "
            f"{container.n_samples} samples"
        )
    return container


def check_selector(value: Any, argument: str) -> str:
    """Ensure a selector argument is a single string."""
    if not isinstance(value, str):
        raise TypeMismatchError(
            f"{argument} must be a single string, got {type(value).__name__}"
        )
    return value
