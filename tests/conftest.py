"""
Pytest configuration and shared fixtures.

This module provides synthetic ExperimentContainers and mixOmics-style result
records shared by all test suites.
"""

import numpy as np
import pandas as pd
import pytest

from mixomicsio.core.experiment import ExperimentContainer


def generate_synthetic_experiment(
    n_features: int = 20,
    n_samples: int = 10,
    assay_name: str = "counts",
    seed: int = 42,
) -> ExperimentContainer:
    """
    Generate a synthetic count experiment with realistic annotations.

    Args:
        n_features: Number of features (genes)
        n_samples: Number of samples (must be even)
        assay_name: Name of the Poisson count assay
        seed: Random seed for reproducibility

    Returns:
        ExperimentContainer with one non-negative integer assay, a sample table
        (condition: first half control / second half treatment, batch,
        continuous_var) and a feature table (gene_type, chromosome)
    """
    rng = np.random.RandomState(seed)

    counts = rng.poisson(lam=10, size=(n_features, n_samples))

    feature_ids = pd.Index([f"feature_{i + 1}" for i in range(n_features)])
    sample_ids = pd.Index([f"sample_{i + 1}" for i in range(n_samples)])

    half = n_samples // 2
    sample_table = pd.DataFrame({
        'condition': pd.Categorical(["control"] * half + ["treatment"] * (n_samples - half)),
        'batch': pd.Categorical(["batch1", "batch2"] * half + ["batch1"] * (n_samples % 2)),
        'continuous_var': rng.normal(size=n_samples),
    }, index=sample_ids)

    feature_table = pd.DataFrame({
        'gene_type': pd.Categorical(
            ["protein_coding", "lncRNA"] * (n_features // 2)
            + ["protein_coding"] * (n_features % 2)
        ),
        'chromosome': rng.randint(1, 23, size=n_features),
    }, index=feature_ids)

    return ExperimentContainer(
        assays={assay_name: counts},
        sample_table=sample_table,
        feature_table=feature_table,
        metadata={'experiment_name': "Synthetic study", 'platform': "RNA-seq"},
    )


def generate_mock_result(
    n_features: int = 20,
    n_samples: int = 10,
    n_components: int = 2,
    seed: int = 0,
) -> dict:
    """
    Generate a mixOmics pls-style result mapping.

    Carries every design field (X, Y, ncomp, mode, call) so merging it emits
    no partial-record warning.
    """
    rng = np.random.RandomState(seed)
    feature_ids = [f"feature_{i + 1}" for i in range(n_features)]
    return {
        'X': rng.normal(size=(n_samples, n_features)),
        'Y': pd.Categorical(["control", "treatment"] * (n_samples // 2)),
        'ncomp': n_components,
        'mode': "regression",
        'call': "pls(X = X, Y = Y, ncomp = 2)",
        'loadings': {
            'X': rng.normal(size=(n_features, n_components)),
        },
        'selected.var': {
            'X': [1, 3, 5, 7, 9],
        },
        'explained_variance': [0.3, 0.2][:n_components],
        'variates': {'X': rng.normal(size=(n_samples, n_components))},
        'names': {'X': feature_ids},
        'class': "mixo_pls",
    }


@pytest.fixture
def experiment():
    """20 features × 10 samples, balanced two-level condition."""
    return generate_synthetic_experiment()


@pytest.fixture
def mock_result():
    """Complete pls-style result matching the `experiment` fixture."""
    return generate_mock_result()


@pytest.fixture
def realistic_experiment():
    """500 features × 40 samples with multiple assays and richer annotations."""
    rng = np.random.RandomState(123)
    n_features, n_samples = 500, 40
    base = rng.poisson(lam=100, size=n_features)
    counts = rng.poisson(lam=base[:, None], size=(n_features, n_samples))

    feature_ids = pd.Index([f"ENSG{i + 1:08d}" for i in range(n_features)])
    sample_ids = pd.Index([f"Sample_{i + 1:03d}" for i in range(n_samples)])

    sample_table = pd.DataFrame({
        'condition': ["Control"] * 20 + ["Treatment"] * 20,
        'batch': ["Batch_A", "Batch_B", "Batch_C", "Batch_D"] * 10,
        'sex': rng.choice(["M", "F"], size=n_samples),
        'age': rng.randint(25, 76, size=n_samples),
    }, index=sample_ids)

    feature_table = pd.DataFrame({
        'gene_symbol': [f"Gene_{i + 1}" for i in range(n_features)],
        'gc_content': rng.uniform(0.2, 0.8, size=n_features),
    }, index=feature_ids)

    lib_sizes = counts.sum(axis=0)
    normalized = counts / (lib_sizes / lib_sizes.mean())

    return ExperimentContainer(
        assays={
            'counts': counts,
            'normalized': normalized,
            'log2_counts': np.log2(counts + 1),
        },
        sample_table=sample_table,
        feature_table=feature_table,
        metadata={'organism': "Homo sapiens", 'genome_build': "GRCh38"},
    )
