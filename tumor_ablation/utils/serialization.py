"""Conversion of numpy/pandas values into JSON-native Python types."""

import dataclasses
import math

import numpy as np
import pandas as pd


def make_serializable(obj):
    """Recursively convert ``obj`` so ``json.dumps`` accepts it."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return make_serializable(dataclasses.asdict(obj))
    if isinstance(obj, dict):
        return {str(k): make_serializable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [make_serializable(v) for v in obj]
    if isinstance(obj, pd.DataFrame):
        return make_serializable(obj.to_dict(orient="records"))
    if isinstance(obj, pd.Series):
        return make_serializable(obj.to_dict())
    if isinstance(obj, np.ndarray):
        return make_serializable(obj.tolist())
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        value = float(obj)
        # NaN/inf are not valid JSON
        return value if math.isfinite(value) else None
    if obj is None or isinstance(obj, (str, int, bool)):
        return obj
    return str(obj)
