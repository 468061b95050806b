from tumor_ablation.evaluation.evaluator import ModelEvaluator

__all__ = ["ModelEvaluator"]
