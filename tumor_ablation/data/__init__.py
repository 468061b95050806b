from tumor_ablation.data.loader import DatasetLoader, DATASET_REGISTRY
from tumor_ablation.data.partition import Partition, make_partition

__all__ = ["DatasetLoader", "DATASET_REGISTRY", "Partition", "make_partition"]
