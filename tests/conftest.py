"""Shared synthetic datasets for the test suite."""

import numpy as np
import pandas as pd
import pytest

from tumor_ablation import config
from tumor_ablation.data import DatasetLoader, Partition, make_partition


def make_wdbc_frame(n_per_class: int = 40, seed: int = 0,
                    strong_family: str = "radius") -> pd.DataFrame:
    """WDBC-shaped frame: 10 families x 3 variants, one strongly informative family."""
    rng = np.random.default_rng(seed)
    n = 2 * n_per_class
    is_malignant = np.array([1] * n_per_class + [0] * n_per_class)

    data = {
        config.ID_COLUMN: np.arange(1, n + 1),
        config.TARGET_COLUMN: np.where(is_malignant == 1, config.MALIGNANT, config.BENIGN),
    }
    for family in config.FEATURE_FAMILIES:
        shift = 4.0 if family == strong_family else 0.1
        for variant in config.FEATURE_VARIANTS:
            data[f"{family}_{variant}"] = rng.normal(size=n) + shift * is_malignant
    return pd.DataFrame(data)


def make_two_family_partition() -> Partition:
    """
    20 training rows (10 M / 10 B): ``radius_mean`` separates the labels,
    ``texture_mean`` is constant and carries no information.
    """
    labels = [config.MALIGNANT] * 10 + [config.BENIGN] * 10
    radius = [20.0 + 0.4 * i for i in range(10)] + [10.0 + 0.4 * i for i in range(10)]
    train = pd.DataFrame({
        config.ID_COLUMN: range(1, 21),
        config.TARGET_COLUMN: labels,
        "radius_mean": radius,
        "texture_mean": [1.0] * 20,
    })
    test = pd.DataFrame({
        config.ID_COLUMN: range(21, 25),
        config.TARGET_COLUMN: [config.MALIGNANT, config.MALIGNANT, config.BENIGN, config.BENIGN],
        "radius_mean": [21.0, 23.0, 11.0, 13.0],
        "texture_mean": [1.0] * 4,
    })
    return Partition(
        train=train,
        test=test,
        target_name=config.TARGET_COLUMN,
        id_column=config.ID_COLUMN,
        test_size=4 / 24,
        random_state=config.RANDOM_STATE,
    )


def make_overlapping_partition(n_per_class: int = 50) -> Partition:
    """
    ``radius_mean`` separates the labels; ``texture_mean`` separates them
    only partly (M spans 0..10, B spans 3..13, so about a third overlap).
    """
    n = 2 * n_per_class
    labels = [config.MALIGNANT] * n_per_class + [config.BENIGN] * n_per_class
    radius = np.concatenate([
        np.linspace(20.0, 25.0, n_per_class), np.linspace(10.0, 15.0, n_per_class),
    ])
    texture = np.concatenate([
        np.linspace(0.0, 10.0, n_per_class), np.linspace(3.0, 13.0, n_per_class),
    ])
    frame = pd.DataFrame({
        config.ID_COLUMN: np.arange(1, n + 1),
        config.TARGET_COLUMN: labels,
        "radius_mean": radius,
        "texture_mean": texture,
    })
    return Partition(
        train=frame,
        test=frame.iloc[:0],
        target_name=config.TARGET_COLUMN,
        id_column=config.ID_COLUMN,
        test_size=0.0,
        random_state=config.RANDOM_STATE,
    )


@pytest.fixture
def wdbc_frame():
    return make_wdbc_frame()


@pytest.fixture
def wdbc_dataset(wdbc_frame):
    return DatasetLoader().load_frame(wdbc_frame, source="synthetic")


@pytest.fixture
def wdbc_partition(wdbc_dataset):
    return make_partition(wdbc_dataset, test_size=0.2, random_state=config.RANDOM_STATE)


@pytest.fixture
def two_family_partition():
    return make_two_family_partition()
