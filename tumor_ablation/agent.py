"""
Tumor feature-family ablation pipeline.

Orchestrates the full analysis: data loading -> exploration -> partition ->
classifier comparison -> cost tuning -> ablation sweep -> held-out
evaluation. Everything stays in memory; ``run`` returns the report dict.
"""

import traceback

from tumor_ablation import __version__, config
from tumor_ablation.ablation import AblationSweep
from tumor_ablation.analysis import DataExplorer
from tumor_ablation.data import DatasetLoader, make_partition
from tumor_ablation.evaluation import ModelEvaluator
from tumor_ablation.models import GridSearch, ModelTrainer
from tumor_ablation.utils import get_logger, make_serializable

log = get_logger("tumor_ablation")

DISCLAIMER = (
    "DISCLAIMER: This is a machine learning research tool for a public "
    "tumor measurement dataset. It does NOT provide medical diagnoses, and "
    "ablation accuracies are a rough proxy for feature importance only."
)

STAGES = [
    "Data Loading",
    "Exploratory Analysis",
    "Partition",
    "Model Comparison",
    "Cost Tuning",
    "Ablation Sweep",
    "Evaluation",
]


class AblationAgent:
    """
    Runs the complete ablation analysis on one dataset.

    Stages:
        1. Data Loading          - bundled dataset or a WDBC CSV
        2. Exploratory Analysis  - class balance, correlations, t-tests
        3. Partition             - stratified train/evaluation split
        4. Model Comparison      - random forest and four SVM kernels
        5. Cost Tuning           - grid search for the linear SVM cost
        6. Ablation Sweep        - leave-one-family-out accuracies
        7. Evaluation            - held-out metrics for compared models
    """

    def __init__(
        self,
        dataset: str = "breast_cancer",
        csv_path: str | None = None,
        families: list[str] | None = None,
        models: list[str] | None = None,
        cost: float | None = None,
        test_size: float = config.DEFAULT_TEST_SIZE,
        cv_folds: int = config.DEFAULT_CV_FOLDS,
        random_state: int = config.RANDOM_STATE,
        on_progress=None,
    ):
        """
        Args:
            cost: linear SVM cost for the sweep. None means tune it with
                GridSearch over ``config.PARAM_GRIDS["svm_linear"]``.
            on_progress: optional callable(stage_index, total, stage_name).
        """
        self.dataset_name = dataset
        self.csv_path = csv_path
        self.families = list(families) if families is not None else list(config.FEATURE_FAMILIES)
        self.model_names = models
        self.cost = cost
        self.test_size = test_size
        self.cv_folds = cv_folds
        self.random_state = random_state
        self.on_progress = on_progress

        # Pipeline state
        self._dataset = None
        self._eda_report = None
        self._partition = None
        self._training_results = None
        self._search_result = None
        self._ablation = None
        self._evaluation_results = None

    @property
    def ablation(self):
        return self._ablation

    def run(self) -> dict:
        """Execute every stage in order and return the report dict."""
        log.info("=" * 60)
        log.info("TUMOR FEATURE-FAMILY ABLATION v%s", __version__)
        log.info("=" * 60)
        log.info(DISCLAIMER)

        stage_fns = [
            self._stage_load,
            self._stage_explore,
            self._stage_partition,
            self._stage_train,
            self._stage_tune,
            self._stage_ablate,
            self._stage_evaluate,
        ]
        total = len(STAGES)

        for index, (stage_name, stage_fn) in enumerate(zip(STAGES, stage_fns), start=1):
            log.info("-" * 60)
            log.info("STAGE: %d/%d %s", index, total, stage_name)
            log.info("-" * 60)
            if self.on_progress is not None:
                self.on_progress(index, total, stage_name)
            try:
                stage_fn()
            except Exception:
                log.error("Stage '%s' failed:\n%s", stage_name, traceback.format_exc())
                raise

        return self.report()

    def _stage_load(self):
        loader = DatasetLoader()
        if self.csv_path:
            self._dataset = loader.load_csv(self.csv_path)
        else:
            self._dataset = loader.load(self.dataset_name)

    def _stage_explore(self):
        explorer = DataExplorer(families=self.families)
        self._eda_report = explorer.run(self._dataset)

    def _stage_partition(self):
        self._partition = make_partition(
            self._dataset,
            test_size=self.test_size,
            random_state=self.random_state,
        )

    def _stage_train(self):
        trainer = ModelTrainer(
            models=self.model_names,
            cv_folds=self.cv_folds,
            random_state=self.random_state,
        )
        self._training_results = trainer.run(self._partition)

    def _stage_tune(self):
        if self.cost is not None:
            log.info("Using fixed ablation cost C=%g, skipping grid search", self.cost)
            return
        search = GridSearch(
            config.ABLATION_MODEL,
            config.PARAM_GRIDS[config.ABLATION_MODEL],
            cv_folds=self.cv_folds,
            random_state=self.random_state,
        )
        self._search_result = search.run(
            self._partition.features("train"), self._partition.labels("train")
        )
        self.cost = self._search_result.best_params["clf__C"]

    def _stage_ablate(self):
        sweep = AblationSweep(
            families=self.families,
            cost=self.cost,
            cv_folds=self.cv_folds,
            random_state=self.random_state,
        )
        self._ablation = sweep.run(self._partition)

    def _stage_evaluate(self):
        evaluator = ModelEvaluator()
        self._evaluation_results = evaluator.run(self._training_results, self._partition)

    def report(self) -> dict:
        """JSON-ready summary of whatever stages have completed."""
        report = {"disclaimer": DISCLAIMER, "version": __version__}
        if self._dataset is not None:
            report["dataset"] = self._dataset["metadata"]
        if self._eda_report is not None:
            report["exploration"] = self._eda_report
        if self._partition is not None:
            report["partition"] = {
                "train_samples": len(self._partition.train),
                "test_samples": len(self._partition.test),
                "test_size": self._partition.test_size,
                "random_state": self._partition.random_state,
            }
        if self._training_results is not None:
            report["model_comparison"] = self._training_results["results"]
        if self._search_result is not None:
            report["cost_search"] = {
                "best_params": self._search_result.best_params,
                "best_score": self._search_result.best_score,
                "candidates": self._search_result.candidates,
            }
        if self._ablation is not None:
            report["ablation"] = {
                "cost": self.cost,
                "cv_folds": self.cv_folds,
                "results": list(self._ablation),
            }
        if self._evaluation_results is not None:
            report["evaluation"] = self._evaluation_results
        return make_serializable(report)
