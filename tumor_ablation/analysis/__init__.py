from tumor_ablation.analysis.explorer import DataExplorer

__all__ = ["DataExplorer"]
