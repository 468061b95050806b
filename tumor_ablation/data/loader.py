"""Dataset loading module for breast-tumor measurement data."""

import pandas as pd
from sklearn.datasets import load_breast_cancer

from tumor_ablation import config
from tumor_ablation.errors import DatasetValidationError
from tumor_ablation.utils import get_logger

log = get_logger(__name__)

# Registry of bundled datasets
DATASET_REGISTRY = {
    "breast_cancer": {
        "loader": load_breast_cancer,
        "description": "Wisconsin Diagnostic Breast Cancer (569 samples, 30 features)",
        # sklearn encodes malignant as 0 and benign as 1
        "label_map": {0: config.MALIGNANT, 1: config.BENIGN},
    },
}


def wdbc_column_name(sklearn_name: str) -> str:
    """
    Translate a scikit-learn WDBC feature name to the CSV layout.

    ``"mean radius"`` -> ``"radius_mean"``, ``"radius error"`` ->
    ``"radius_se"``, ``"worst concave points"`` -> ``"concave points_worst"``.
    """
    if sklearn_name.startswith("mean "):
        family, variant = sklearn_name[len("mean "):], "mean"
    elif sklearn_name.startswith("worst "):
        family, variant = sklearn_name[len("worst "):], "worst"
    elif sklearn_name.endswith(" error"):
        family, variant = sklearn_name[:-len(" error")], "se"
    else:
        raise ValueError(f"Unrecognised WDBC feature name: {sklearn_name!r}")

    if family == "fractal dimension":
        family = "fractal_dimension"
    return f"{family}_{variant}"


class DatasetLoader:
    """Loads WDBC-shaped datasets and checks their invariants."""

    def __init__(self, id_column: str = config.ID_COLUMN,
                 target_column: str = config.TARGET_COLUMN,
                 labels: tuple = config.LABELS):
        self.id_column = id_column
        self.target_column = target_column
        self.labels = tuple(labels)

    @staticmethod
    def list_available() -> list[str]:
        """Return names of all bundled datasets."""
        return list(DATASET_REGISTRY.keys())

    def load(self, name: str = "breast_cancer") -> dict:
        """Load a bundled dataset by name, in the CSV column layout."""
        if name not in DATASET_REGISTRY:
            raise ValueError(
                f"Unknown dataset '{name}'. "
                f"Available: {self.list_available()}"
            )

        entry = DATASET_REGISTRY[name]
        log.info("Loading dataset: %s", name)
        log.info("Description: %s", entry["description"])

        raw = entry["loader"]()
        columns = [wdbc_column_name(n) for n in raw.feature_names]

        df = pd.DataFrame(raw.data, columns=columns)
        df.insert(0, self.target_column, pd.Series(raw.target).map(entry["label_map"]))
        df.insert(0, self.id_column, range(1, len(df) + 1))

        return self._build(df, source=name)

    def load_csv(self, path: str) -> dict:
        """
        Load a WDBC CSV file.

        The public copy of this file ends with an empty ``Unnamed: 32``
        column; fully empty unnamed columns are dropped.
        """
        log.info("Loading CSV from: %s", path)
        df = pd.read_csv(path)

        empty = [
            c for c in df.columns
            if str(c).startswith("Unnamed:") and df[c].isnull().all()
        ]
        if empty:
            log.info("Dropping empty columns: %s", empty)
            df = df.drop(columns=empty)

        return self._build(df, source=str(path))

    def load_frame(self, df: pd.DataFrame, source: str = "dataframe") -> dict:
        """Wrap an in-memory frame as a dataset."""
        return self._build(df.copy(), source=source)

    def _build(self, df: pd.DataFrame, source: str) -> dict:
        # Row position is the identity used by the partition
        df = df.reset_index(drop=True)
        self._validate(df)
        feature_names = [
            c for c in df.columns if c not in (self.id_column, self.target_column)
        ]

        metadata = {
            "name": source,
            "n_samples": len(df),
            "n_features": len(feature_names),
            "labels": list(self.labels),
            "class_distribution": df[self.target_column].value_counts().to_dict(),
        }

        log.info(
            "Loaded %d samples with %d features",
            metadata["n_samples"],
            metadata["n_features"],
        )

        return {
            "df": df,
            "feature_names": feature_names,
            "target_name": self.target_column,
            "id_column": self.id_column,
            "metadata": metadata,
        }

    def _validate(self, df: pd.DataFrame):
        for col in (self.id_column, self.target_column):
            if col not in df.columns:
                raise DatasetValidationError(f"Missing required column '{col}'")

        target = df[self.target_column]
        if target.isnull().any():
            raise DatasetValidationError(
                f"{int(target.isnull().sum())} observations have no label"
            )
        unexpected = set(target.unique()) - set(self.labels)
        if unexpected:
            raise DatasetValidationError(
                f"Unexpected labels {sorted(map(str, unexpected))}; "
                f"expected {list(self.labels)}"
            )

        features = df.drop(columns=[self.id_column, self.target_column])
        if features.shape[1] == 0:
            raise DatasetValidationError("Dataset has no measurement columns")
        non_numeric = [
            c for c in features.columns
            if not pd.api.types.is_numeric_dtype(features[c])
        ]
        if non_numeric:
            raise DatasetValidationError(f"Non-numeric measurement columns: {non_numeric}")
        missing = features.isnull().sum()
        missing = missing[missing > 0]
        if len(missing):
            raise DatasetValidationError(
                f"Missing measurement values: {missing.to_dict()}"
            )
