"""Held-out evaluation of the compared classifiers."""

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    matthews_corrcoef,
    precision_score,
    recall_score,
    roc_auc_score,
)

from tumor_ablation import config
from tumor_ablation.utils import get_logger

log = get_logger(__name__)


class ModelEvaluator:
    """Scores fitted models on the evaluation split of a partition."""

    def __init__(self, positive_label: str = config.MALIGNANT,
                 labels: tuple = config.LABELS):
        self.positive_label = positive_label
        self.labels = list(labels)

    def run(self, training_results: dict, partition) -> dict:
        """
        Evaluate all trained models on the held-out split.

        Returns per-model metrics and the best model by F1.
        """
        X_test = partition.features("test")
        y_test = partition.labels("test")
        trained_models = training_results["trained_models"]

        log.info("Evaluating %d models on %d test samples", len(trained_models), len(X_test))

        evaluations = {}
        for name, model in trained_models.items():
            y_pred = model.predict(X_test)
            pos = self.positive_label

            metrics = {
                "accuracy": round(accuracy_score(y_test, y_pred), 4),
                "precision": round(precision_score(y_test, y_pred, pos_label=pos, zero_division=0), 4),
                "recall": round(recall_score(y_test, y_pred, pos_label=pos, zero_division=0), 4),
                "f1": round(f1_score(y_test, y_pred, pos_label=pos, zero_division=0), 4),
                "mcc": round(matthews_corrcoef(y_test, y_pred), 4),
                "confusion_matrix": confusion_matrix(y_test, y_pred, labels=self.labels).tolist(),
            }

            scores = self._positive_scores(model, X_test)
            if scores is not None and y_test.nunique() == 2:
                metrics["roc_auc"] = round(roc_auc_score(y_test == pos, scores), 4)

            importance = self._get_feature_importance(model, list(X_test.columns))
            if importance:
                metrics["top_features"] = importance[:10]

            evaluations[name] = metrics

            log.info(
                "  %s: acc=%.4f, f1=%.4f, auc=%s, mcc=%.4f",
                name,
                metrics["accuracy"],
                metrics["f1"],
                metrics.get("roc_auc", "N/A"),
                metrics["mcc"],
            )

        best_name = max(evaluations, key=lambda n: evaluations[n]["f1"])
        log.info(
            "Best model on test set: %s (F1=%.4f)",
            best_name, evaluations[best_name]["f1"],
        )

        return {
            "evaluations": evaluations,
            "best_model_name": best_name,
            "best_metrics": evaluations[best_name],
        }

    def _positive_scores(self, model, X):
        """Continuous score that increases with the positive class, if any."""
        classes = list(model.classes_)
        if self.positive_label not in classes:
            return None
        if hasattr(model, "predict_proba"):
            return model.predict_proba(X)[:, classes.index(self.positive_label)]
        if hasattr(model, "decision_function"):
            scores = model.decision_function(X)
            # decision_function is oriented towards classes_[1]
            return scores if classes[1] == self.positive_label else -scores
        return None

    def _get_feature_importance(self, model, feature_names: list[str]) -> list[dict]:
        """Feature importances of the final estimator, when it exposes any."""
        estimator = model.steps[-1][1] if hasattr(model, "steps") else model
        importances = None

        if hasattr(estimator, "feature_importances_"):
            importances = estimator.feature_importances_
        elif hasattr(estimator, "coef_"):
            importances = np.abs(estimator.coef_).flatten()

        if importances is None:
            return []

        paired = list(zip(feature_names, importances))
        paired.sort(key=lambda x: x[1], reverse=True)

        return [
            {"feature": name, "importance": round(float(imp), 6)}
            for name, imp in paired
        ]
