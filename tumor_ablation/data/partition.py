"""Fixed train/evaluation partition of a dataset."""

from dataclasses import dataclass

import pandas as pd
from sklearn.model_selection import train_test_split

from tumor_ablation import config
from tumor_ablation.utils import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Partition:
    """
    A stratified split of one dataset into training and evaluation rows.

    Built once and only read afterwards: views derived from it
    (``features``, the ablation's reduced views) are new frames.
    """

    train: pd.DataFrame
    test: pd.DataFrame
    target_name: str
    id_column: str
    test_size: float
    random_state: int

    def _split(self, split: str) -> pd.DataFrame:
        if split == "train":
            return self.train
        if split == "test":
            return self.test
        raise ValueError(f"Unknown split '{split}', expected 'train' or 'test'")

    def features(self, split: str = "train") -> pd.DataFrame:
        """Predictor columns of a split (no identifier, no label)."""
        return self._split(split).drop(columns=[self.id_column, self.target_name])

    def labels(self, split: str = "train") -> pd.Series:
        return self._split(split)[self.target_name]

    @property
    def feature_names(self) -> list[str]:
        return list(self.features("train").columns)


def make_partition(dataset: dict, test_size: float = config.DEFAULT_TEST_SIZE,
                   random_state: int = config.RANDOM_STATE) -> Partition:
    """Split a loaded dataset, stratified by label."""
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")

    df = dataset["df"]
    target_name = dataset["target_name"]

    train, test = train_test_split(
        df,
        test_size=test_size,
        random_state=random_state,
        stratify=df[target_name],
    )

    overlap = train.index.intersection(test.index)
    if len(overlap) or len(train) + len(test) != len(df):
        raise RuntimeError("Partition is not a disjoint cover of the dataset")

    log.info(
        "Split: %d train / %d test (%.0f%% test)",
        len(train), len(test), test_size * 100,
    )

    return Partition(
        train=train,
        test=test,
        target_name=target_name,
        id_column=dataset.get("id_column", config.ID_COLUMN),
        test_size=test_size,
        random_state=random_state,
    )
