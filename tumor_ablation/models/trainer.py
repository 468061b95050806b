"""Model training module: classifier registry and cross-validated fits."""

import time
from dataclasses import dataclass

import numpy as np
from sklearn.base import clone
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import StratifiedKFold, cross_val_predict, cross_validate
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from tumor_ablation import config
from tumor_ablation.utils import get_logger

log = get_logger(__name__)

# Model configurations: name -> (class, kwargs)
MODEL_CONFIGS = {
    "random_forest": (
        RandomForestClassifier,
        {"n_estimators": 100, "random_state": config.RANDOM_STATE},
    ),
    "svm_linear": (
        SVC,
        {"kernel": "linear", "C": config.DEFAULT_ABLATION_COST},
    ),
    "svm_polynomial": (
        SVC,
        {"kernel": "poly", "degree": 3, "C": 1.0},
    ),
    "svm_rbf": (
        SVC,
        {"kernel": "rbf", "C": 1.0, "gamma": "scale"},
    ),
    "svm_sigmoid": (
        SVC,
        {"kernel": "sigmoid", "C": 1.0, "gamma": "scale"},
    ),
}


@dataclass(frozen=True, eq=False)
class CVFit:
    """Outcome of one fit-with-cross-validation call."""

    model: Pipeline
    fold_scores: np.ndarray
    oof_predictions: np.ndarray

    @property
    def mean_accuracy(self) -> float:
        return float(np.mean(self.fold_scores))

    @property
    def max_accuracy(self) -> float:
        return float(np.max(self.fold_scores))


def build_model(name: str, **overrides) -> Pipeline:
    """
    Instantiate a registered classifier behind a standard scaler.

    ``overrides`` replace entries of the registered kwargs.
    """
    if name not in MODEL_CONFIGS:
        raise ValueError(
            f"Unknown model '{name}'. Available: {list(MODEL_CONFIGS.keys())}"
        )
    cls, kwargs = MODEL_CONFIGS[name]
    return Pipeline([
        ("scaler", StandardScaler()),
        ("clf", cls(**{**kwargs, **overrides})),
    ])


def make_folds(cv_folds: int = config.DEFAULT_CV_FOLDS,
               random_state: int = config.RANDOM_STATE) -> StratifiedKFold:
    """Stratified k-fold splitter with a fixed shuffle seed."""
    if cv_folds < 2:
        raise ValueError(f"cv_folds must be at least 2, got {cv_folds}")
    return StratifiedKFold(n_splits=cv_folds, shuffle=True, random_state=random_state)


def cross_val_accuracy(model, X, y, cv_folds: int = config.DEFAULT_CV_FOLDS,
                       random_state: int = config.RANDOM_STATE) -> np.ndarray:
    """
    Per-fold accuracy of ``model`` under stratified k-fold CV.

    A fit that fails on any fold raises instead of scoring NaN.
    """
    folds = make_folds(cv_folds, random_state)
    cv = cross_validate(
        clone(model), X, y, cv=folds, scoring="accuracy", error_score="raise",
    )
    return np.asarray(cv["test_score"])


def fit_with_cv(model, X, y, cv_folds: int = config.DEFAULT_CV_FOLDS,
                random_state: int = config.RANDOM_STATE) -> CVFit:
    """
    Cross-validate ``model`` on (X, y) and refit it on all rows.

    ``model`` is a registry name or an unfitted estimator. Out-of-fold
    predictions come back as a new array; X and y are not modified.
    """
    if isinstance(model, str):
        model = build_model(model)

    fold_scores = cross_val_accuracy(model, X, y, cv_folds, random_state)
    oof = cross_val_predict(clone(model), X, y, cv=make_folds(cv_folds, random_state))

    fitted = clone(model).fit(X, y)
    return CVFit(
        model=fitted,
        fold_scores=fold_scores,
        oof_predictions=np.asarray(oof),
    )


class ModelTrainer:
    """Trains and compares the registered classifiers on a partition."""

    def __init__(self, models: list[str] | None = None,
                 cv_folds: int = config.DEFAULT_CV_FOLDS,
                 random_state: int = config.RANDOM_STATE,
                 params: dict[str, dict] | None = None):
        """
        Args:
            models: list of model names to train, or None for all.
            cv_folds: number of cross-validation folds.
            random_state: seed for fold assignment.
            params: optional per-model kwargs overrides (e.g. tuned values).
        """
        if models is None:
            models = list(MODEL_CONFIGS.keys())

        unknown = set(models) - set(MODEL_CONFIGS.keys())
        if unknown:
            raise ValueError(f"Unknown models: {unknown}")

        self.model_names = models
        self.cv_folds = cv_folds
        self.random_state = random_state
        self.params = params or {}

    @staticmethod
    def list_available_models() -> list[str]:
        """Return all available model names."""
        return list(MODEL_CONFIGS.keys())

    def run(self, partition) -> dict:
        """
        Cross-validate and fit every selected model on the training split.

        Returns a dict with a ranked result list and the fitted models.
        """
        X_train = partition.features("train")
        y_train = partition.labels("train")

        log.info(
            "Training %d models with %d-fold CV on %d samples",
            len(self.model_names), self.cv_folds, len(X_train),
        )

        results = []
        trained_models = {}

        for name in self.model_names:
            log.info("Training: %s", name)
            model = build_model(name, **self.params.get(name, {}))

            t0 = time.time()
            fit = fit_with_cv(model, X_train, y_train, self.cv_folds, self.random_state)
            elapsed = time.time() - t0

            trained_models[name] = fit.model
            entry = {
                "name": name,
                "cv_accuracy_mean": round(fit.mean_accuracy, 4),
                "cv_accuracy_std": round(float(np.std(fit.fold_scores)), 4),
                "cv_accuracy_max": round(fit.max_accuracy, 4),
                "cv_scores": fit.fold_scores.tolist(),
                "oof_accuracy": round(float(np.mean(fit.oof_predictions == np.asarray(y_train))), 4),
                "train_accuracy": round(float(fit.model.score(X_train, y_train)), 4),
                "fit_time_seconds": round(elapsed, 3),
            }
            results.append(entry)

            log.info(
                "  %s: CV=%.4f (+/- %.4f), train=%.4f",
                name, entry["cv_accuracy_mean"],
                entry["cv_accuracy_std"], entry["train_accuracy"],
            )

        # Stable sort: ties keep registry order
        results.sort(key=lambda x: x["cv_accuracy_mean"], reverse=True)

        best = results[0]
        log.info(
            "Best model: %s (CV accuracy=%.4f)",
            best["name"], best["cv_accuracy_mean"],
        )

        return {
            "results": results,
            "best_model_name": best["name"],
            "trained_models": trained_models,
        }
