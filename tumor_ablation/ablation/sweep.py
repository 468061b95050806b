"""
Feature-family importance by ablation.

For each family prefix the sweep drops every measurement column of that
family, refits a fixed linear SVM on what is left with stratified k-fold
cross-validation, and records the best fold accuracy. A lower accuracy
without a family is read as that family mattering more.

Scores come from cross-validation on the training split only. The
evaluation split is reduced alongside it but never scored.
"""

from dataclasses import dataclass

import pandas as pd

from tumor_ablation import config
from tumor_ablation.errors import DegeneratePartitionError, NoMatchingColumnsError
from tumor_ablation.models.trainer import build_model, cross_val_accuracy
from tumor_ablation.utils import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FeatureGroupResult:
    family: str
    accuracy: float
    fold_scores: tuple = ()
    n_removed: int = 0
    n_remaining: int = 0


@dataclass(frozen=True)
class AblationResult:
    """Per-family results, in the order the families were given."""

    results: tuple

    def __iter__(self):
        return iter(self.results)

    def __len__(self):
        return len(self.results)

    @property
    def families(self) -> list[str]:
        return [r.family for r in self.results]

    def as_dict(self) -> dict[str, float]:
        return {r.family: r.accuracy for r in self.results}

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "family": r.family,
                    "accuracy": r.accuracy,
                    "n_removed": r.n_removed,
                    "n_remaining": r.n_remaining,
                }
                for r in self.results
            ],
            columns=["family", "accuracy", "n_removed", "n_remaining"],
        )


def matching_columns(frame: pd.DataFrame, prefix: str,
                     protected: tuple = ()) -> list[str]:
    """Columns whose name starts with ``prefix``, ignoring ``protected``."""
    return [
        c for c in frame.columns
        if c not in protected and str(c).startswith(prefix)
    ]


def reduce_view(frame: pd.DataFrame, prefix: str,
                id_column: str = config.ID_COLUMN,
                target_name: str = config.TARGET_COLUMN) -> pd.DataFrame:
    """
    Predictor columns of ``frame`` without the ``prefix`` family.

    The identifier and label columns are never predictors and are dropped
    as well when present. Returns a new frame.
    """
    protected = (id_column, target_name)
    matched = matching_columns(frame, prefix, protected)
    if not matched:
        raise NoMatchingColumnsError(prefix)

    drop = matched + [c for c in protected if c in frame.columns]
    return frame.drop(columns=drop)


def check_fittable(X: pd.DataFrame, y: pd.Series, family: str):
    """Raise DegeneratePartitionError if no classifier can be fit on (X, y)."""
    if X.shape[1] == 0:
        raise DegeneratePartitionError(
            f"removing family {family!r} leaves no predictor columns"
        )
    n_labels = pd.Series(y).nunique()
    if n_labels < 2:
        raise DegeneratePartitionError(
            f"training view without family {family!r} has {n_labels} "
            f"distinct label(s); at least 2 are required"
        )


class AblationSweep:
    """Leave-one-family-out accuracy sweep with a fixed linear classifier."""

    def __init__(self, families: list[str] | None = None,
                 cost: float = config.DEFAULT_ABLATION_COST,
                 cv_folds: int = config.DEFAULT_CV_FOLDS,
                 random_state: int = config.RANDOM_STATE):
        if families is None:
            families = list(config.FEATURE_FAMILIES)
        families = list(families)
        if not families:
            raise ValueError("At least one feature family is required")

        duplicates = sorted({f for f in families if families.count(f) > 1})
        if duplicates:
            raise ValueError(f"Duplicate feature families: {duplicates}")
        if cost <= 0:
            raise ValueError(f"cost must be positive, got {cost}")

        self.families = families
        self.cost = cost
        self.cv_folds = cv_folds
        self.random_state = random_state

    def _model(self):
        return build_model("svm_linear", C=self.cost)

    def run_family(self, partition, family: str) -> FeatureGroupResult:
        train = partition.train
        X_full = partition.features("train")
        y = partition.labels("train")

        X = reduce_view(train, family, partition.id_column, partition.target_name)
        X_eval = reduce_view(
            partition.test, family, partition.id_column, partition.target_name
        )
        if list(X_eval.columns) != list(X.columns):
            raise DegeneratePartitionError(
                f"evaluation view without family {family!r} does not match "
                f"the training view"
            )
        check_fittable(X, y, family)

        fold_scores = cross_val_accuracy(self._model(), X, y, self.cv_folds, self.random_state)

        return FeatureGroupResult(
            family=family,
            accuracy=float(fold_scores.max()),
            fold_scores=tuple(float(s) for s in fold_scores),
            n_removed=X_full.shape[1] - X.shape[1],
            n_remaining=X.shape[1],
        )

    def run(self, partition) -> AblationResult:
        """Ablate every family in order; the first failure aborts the sweep."""
        log.info(
            "Ablation sweep: %d families, linear SVM C=%g, %d-fold CV",
            len(self.families), self.cost, self.cv_folds,
        )

        results = []
        for family in self.families:
            result = self.run_family(partition, family)
            log.info(
                "  without %-18s acc=%.4f (%d removed, %d left)",
                family, result.accuracy, result.n_removed, result.n_remaining,
            )
            results.append(result)

        return AblationResult(results=tuple(results))
