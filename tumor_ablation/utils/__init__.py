from tumor_ablation.utils.logger import get_logger
from tumor_ablation.utils.serialization import make_serializable

__all__ = ["get_logger", "make_serializable"]
