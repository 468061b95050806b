"""Exhaustive hyperparameter search over an enumerated grid."""

from dataclasses import dataclass, field

import numpy as np
from sklearn.base import clone
from sklearn.model_selection import ParameterGrid

from tumor_ablation import config
from tumor_ablation.models.trainer import build_model, cross_val_accuracy
from tumor_ablation.utils import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Candidate:
    params: dict
    fold_scores: tuple
    mean_accuracy: float


@dataclass(frozen=True)
class SearchResult:
    best_params: dict
    best_score: float
    candidates: list = field(default_factory=list)


class GridSearch:
    """
    Evaluate every configuration of a grid by stratified cross-validation.

    Candidates are enumerated in ``ParameterGrid`` order. The winner has
    the highest mean fold accuracy; on a tie the first enumerated wins.
    """

    def __init__(self, model, param_grid: dict,
                 cv_folds: int = config.DEFAULT_CV_FOLDS,
                 random_state: int = config.RANDOM_STATE):
        if not param_grid:
            raise ValueError("param_grid must name at least one parameter")
        self.model = build_model(model) if isinstance(model, str) else model
        self.param_grid = param_grid
        self.cv_folds = cv_folds
        self.random_state = random_state

    def candidates(self) -> list[dict]:
        return list(ParameterGrid(self.param_grid))

    def run(self, X, y) -> SearchResult:
        grid = self.candidates()
        log.info("Grid search over %d candidates", len(grid))

        evaluated = []
        best = None
        for params in grid:
            model = clone(self.model).set_params(**params)
            scores = cross_val_accuracy(model, X, y, self.cv_folds, self.random_state)
            candidate = Candidate(
                params=params,
                fold_scores=tuple(float(s) for s in scores),
                mean_accuracy=float(np.mean(scores)),
            )
            evaluated.append(candidate)
            log.debug("  %s -> %.4f", params, candidate.mean_accuracy)
            # strict '>' keeps the earliest candidate on ties
            if best is None or candidate.mean_accuracy > best.mean_accuracy:
                best = candidate

        log.info(
            "Best parameters: %s (CV accuracy=%.4f)",
            best.params, best.mean_accuracy,
        )
        return SearchResult(
            best_params=best.params,
            best_score=best.mean_accuracy,
            candidates=evaluated,
        )
