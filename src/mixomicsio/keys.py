"""
Key schema for analysis results written into an ExperimentContainer.

Declarative on purpose: the metadata keys and feature-table column names
produced by from_mixomics(), in one place.
"""

# -----------------------
# metadata (analysis provenance)
# -----------------------
META_RESULT = "mixomics_result"
META_ANALYSIS_DATE = "mixomics_analysis_date"
META_ANALYSIS_METHOD = "mixomics_analysis_method"
META_EXPLAINED_VARIANCE = "mixomics_explained_variance"

# -----------------------
# feature_table (per-feature results)
# -----------------------
COLUMN_PREFIX = "mixomics"
COLUMN_SELECTED = f"{COLUMN_PREFIX}_selected"

# Name used for an unnamed (single-matrix) loadings structure
SINGLE_LOADING_NAME = "loading"

# strftime format of the suffix appended to colliding column names
COLLISION_SUFFIX_FORMAT = "%Y%m%d%H%M%S"


def loading_column(structure: str, component: int) -> str:
    """Feature-table column for one loadings component (1-based)."""
    return f"{COLUMN_PREFIX}_{structure}_comp{component}"
