"""
mixomicsio - Bridge annotated experiment containers and multivariate toolkits

Converts an ExperimentContainer (assays + sample/feature annotations) into the
observation-major (X, Y) input of mixOmics-style methods, and merges fitted
results (loadings, selected features, explained variance) back into a copy of
the container.
"""

__version__ = "0.1.0"

from mixomicsio.core.experiment import ExperimentContainer
from mixomicsio.core.records import FlatPair, ResultRecord
from mixomicsio.config import ConversionThresholds
from mixomicsio.convert import to_mixomics
from mixomicsio.merge import from_mixomics

__all__ = [
    "ExperimentContainer",
    "FlatPair",
    "ResultRecord",
    "ConversionThresholds",
    "to_mixomics",
    "from_mixomics",
]
