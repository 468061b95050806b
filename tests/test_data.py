"""Tests for dataset loading and partitioning."""

import numpy as np
import pandas as pd
import pytest

from tumor_ablation import config
from tumor_ablation.data import DatasetLoader, make_partition
from tumor_ablation.data.loader import wdbc_column_name
from tumor_ablation.errors import DatasetValidationError

from conftest import make_wdbc_frame


class TestColumnNames:

    @pytest.mark.parametrize("sklearn_name, expected", [
        ("mean radius", "radius_mean"),
        ("radius error", "radius_se"),
        ("worst radius", "radius_worst"),
        ("mean concave points", "concave points_mean"),
        ("fractal dimension error", "fractal_dimension_se"),
        ("worst fractal dimension", "fractal_dimension_worst"),
    ])
    def test_translation(self, sklearn_name, expected):
        assert wdbc_column_name(sklearn_name) == expected

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            wdbc_column_name("radius")


class TestBundledDataset:

    @pytest.fixture(scope="class")
    def dataset(self):
        return DatasetLoader().load("breast_cancer")

    def test_layout(self, dataset):
        df = dataset["df"]
        assert list(df.columns[:2]) == [config.ID_COLUMN, config.TARGET_COLUMN]
        assert len(dataset["feature_names"]) == 30
        assert df.shape == (569, 32)

    def test_every_family_has_three_variants(self, dataset):
        for family in config.FEATURE_FAMILIES:
            members = [c for c in dataset["feature_names"] if c.startswith(family)]
            assert sorted(members) == sorted(
                f"{family}_{v}" for v in config.FEATURE_VARIANTS
            )

    def test_labels(self, dataset):
        counts = dataset["df"][config.TARGET_COLUMN].value_counts()
        assert counts[config.MALIGNANT] == 212
        assert counts[config.BENIGN] == 357

    def test_unknown_dataset(self):
        with pytest.raises(ValueError, match="Unknown dataset"):
            DatasetLoader().load("lung_cancer")


class TestCsvLoading:

    def test_drops_empty_unnamed_column(self, tmp_path):
        df = make_wdbc_frame(n_per_class=5)
        df["Unnamed: 32"] = np.nan
        path = tmp_path / "data.csv"
        df.to_csv(path, index=False)

        dataset = DatasetLoader().load_csv(str(path))

        assert "Unnamed: 32" not in dataset["df"].columns
        assert len(dataset["feature_names"]) == 30
        assert dataset["metadata"]["n_samples"] == 10

    def test_rejects_unknown_label(self):
        df = make_wdbc_frame(n_per_class=5)
        df.loc[0, config.TARGET_COLUMN] = "X"
        with pytest.raises(DatasetValidationError, match="Unexpected labels"):
            DatasetLoader().load_frame(df)

    def test_rejects_missing_label(self):
        df = make_wdbc_frame(n_per_class=5)
        df.loc[0, config.TARGET_COLUMN] = None
        with pytest.raises(DatasetValidationError, match="no label"):
            DatasetLoader().load_frame(df)

    def test_rejects_missing_measurement(self):
        df = make_wdbc_frame(n_per_class=5)
        df.loc[3, "area_se"] = np.nan
        with pytest.raises(DatasetValidationError, match="area_se"):
            DatasetLoader().load_frame(df)

    def test_rejects_non_numeric_measurement(self):
        df = make_wdbc_frame(n_per_class=5)
        df["texture_mean"] = "rough"
        with pytest.raises(DatasetValidationError, match="Non-numeric"):
            DatasetLoader().load_frame(df)

    def test_requires_label_column(self):
        df = make_wdbc_frame(n_per_class=5).drop(columns=[config.TARGET_COLUMN])
        with pytest.raises(DatasetValidationError, match="diagnosis"):
            DatasetLoader().load_frame(df)


class TestPartition:

    def test_disjoint_cover(self, wdbc_dataset):
        partition = make_partition(wdbc_dataset, test_size=0.2)
        df = wdbc_dataset["df"]

        assert partition.train.index.intersection(partition.test.index).empty
        assert sorted(partition.train.index.append(partition.test.index)) == sorted(df.index)
        assert len(partition.test) == 16

    def test_stratified(self, wdbc_dataset):
        partition = make_partition(wdbc_dataset, test_size=0.25)
        counts = partition.labels("test").value_counts()
        assert counts[config.MALIGNANT] == counts[config.BENIGN]

    def test_same_seed_same_split(self, wdbc_dataset):
        a = make_partition(wdbc_dataset, random_state=7)
        b = make_partition(wdbc_dataset, random_state=7)
        pd.testing.assert_index_equal(a.train.index, b.train.index)

    def test_features_exclude_id_and_label(self, wdbc_partition):
        features = wdbc_partition.features("test")
        assert config.ID_COLUMN not in features.columns
        assert config.TARGET_COLUMN not in features.columns
        assert features.shape[1] == 30

    def test_unknown_split(self, wdbc_partition):
        with pytest.raises(ValueError, match="Unknown split"):
            wdbc_partition.features("validation")

    def test_invalid_test_size(self, wdbc_dataset):
        with pytest.raises(ValueError, match="test_size"):
            make_partition(wdbc_dataset, test_size=1.5)

    def test_duplicate_index_labels_split_cleanly(self):
        # two frames stacked without ignore_index share labels 0..79
        stacked = pd.concat([make_wdbc_frame(seed=0), make_wdbc_frame(seed=1)])
        assert stacked.index.has_duplicates

        dataset = DatasetLoader().load_frame(stacked)
        partition = make_partition(dataset, test_size=0.2)

        assert dataset["df"].index.is_unique
        assert len(partition.train) + len(partition.test) == 160
        assert partition.train.index.intersection(partition.test.index).empty
