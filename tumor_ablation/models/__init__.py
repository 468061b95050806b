from tumor_ablation.models.trainer import (
    MODEL_CONFIGS,
    CVFit,
    cross_val_accuracy,
    ModelTrainer,
    build_model,
    fit_with_cv,
    make_folds,
)
from tumor_ablation.models.search import GridSearch, SearchResult

__all__ = [
    "MODEL_CONFIGS",
    "CVFit",
    "cross_val_accuracy",
    "ModelTrainer",
    "build_model",
    "fit_with_cv",
    "make_folds",
    "GridSearch",
    "SearchResult",
]
