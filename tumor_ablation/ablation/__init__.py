from tumor_ablation.ablation.sweep import (
    AblationResult,
    AblationSweep,
    FeatureGroupResult,
    reduce_view,
)

__all__ = ["AblationResult", "AblationSweep", "FeatureGroupResult", "reduce_view"]
