"""Tests for the ExperimentContainer data structure."""

import numpy as np
import pandas as pd
import pytest

from mixomicsio.core.experiment import ExperimentContainer


class TestConstruction:
    """Constructor validation and defaults."""

    def test_basic_properties(self, experiment):
        assert experiment.shape == (20, 10)
        assert experiment.n_features == 20
        assert experiment.n_samples == 10
        assert experiment.assay_names == ["counts"]
        assert experiment.feature_ids[0] == "feature_1"
        assert experiment.sample_ids[-1] == "sample_10"

    def test_default_tables(self):
        container = ExperimentContainer(assays={'counts': np.ones((3, 4))})

        assert len(container.sample_table) == 4
        assert len(container.feature_table) == 3
        assert container.sample_table.columns.empty
        assert container.metadata == {}

    def test_assays_must_share_shape(self):
        with pytest.raises(ValueError, match="expected \\(3, 4\\)"):
            ExperimentContainer(assays={'a': np.ones((3, 4)), 'b': np.ones((4, 3))})

    def test_assay_must_be_2d(self):
        with pytest.raises(ValueError, match="must be 2D"):
            ExperimentContainer(assays={'a': np.ones(5)})

    def test_assay_must_be_ndarray(self):
        with pytest.raises(TypeError, match="np.ndarray"):
            ExperimentContainer(assays={'a': [[1, 2], [3, 4]]})

    def test_sample_table_rows_must_match(self):
        with pytest.raises(ValueError, match="sample_table rows"):
            ExperimentContainer(
                assays={'a': np.ones((3, 4))},
                sample_table=pd.DataFrame(index=range(5)),
            )

    def test_feature_table_rows_must_match(self):
        with pytest.raises(ValueError, match="feature_table rows"):
            ExperimentContainer(
                assays={'a': np.ones((3, 4))},
                feature_table=pd.DataFrame(index=range(2)),
            )

    def test_empty_assays_need_tables(self):
        with pytest.raises(ValueError, match="explicit sample_table"):
            ExperimentContainer(assays={})

    def test_empty_assays_with_tables(self):
        container = ExperimentContainer(
            assays={},
            sample_table=pd.DataFrame(index=range(4)),
            feature_table=pd.DataFrame(index=range(3)),
        )
        assert container.shape == (3, 4)
        assert container.assay_names == []


class TestImmutability:
    """Every operation returns a new container."""

    def test_select_samples(self, experiment):
        mask = experiment.sample_table['condition'] == "treatment"
        treated = experiment.select_samples(mask)

        assert treated.shape == (20, 5)
        assert set(treated.sample_table['condition']) == {"treatment"}
        np.testing.assert_array_equal(treated.assay("counts"), experiment.assay("counts")[:, 5:])
        assert experiment.shape == (20, 10)

    def test_select_samples_length_checked(self, experiment):
        with pytest.raises(ValueError, match="must match n_samples"):
            experiment.select_samples(np.ones(3, dtype=bool))

    def test_select_features(self, experiment):
        mask = experiment.feature_table['gene_type'] == "lncRNA"
        subset = experiment.select_features(mask)

        assert subset.shape == (10, 10)
        assert list(subset.feature_ids[:2]) == ["feature_2", "feature_4"]

    def test_with_feature_table(self, experiment):
        table = experiment.feature_table.assign(score=1.0)
        updated = experiment.with_feature_table(table)

        assert "score" in updated.feature_table.columns
        assert "score" not in experiment.feature_table.columns

    def test_with_metadata(self, experiment):
        updated = experiment.with_metadata({'note': "x"})

        assert updated.metadata == {'note': "x"}
        assert "note" not in experiment.metadata

    def test_deep_copy(self, experiment):
        copied = experiment.copy()
        copied.assay("counts")[0, 0] = -99
        copied.metadata['added'] = True

        assert experiment.assay("counts")[0, 0] != -99
        assert 'added' not in experiment.metadata

    def test_shallow_copy_shares_arrays(self, experiment):
        view = experiment.copy(deep=False)
        assert view.assay("counts") is experiment.assay("counts")

    def test_repr(self, experiment):
        text = repr(experiment)
        assert "20 features × 10 samples" in text
        assert "counts" in text
