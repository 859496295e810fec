"""
Ratio and payload helpers shared by the scene, KPI and report builders.
"""
from __future__ import annotations

import datetime as dt
import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default when there is nothing to divide by."""
    if not denominator or pd.isna(denominator):
        return default
    return numerator / denominator


def share_pct(part: float, total: float) -> float:
    """part as a percentage of total, one decimal place. 0 for an empty scene."""
    return round(safe_divide(part, total) * 100, 1)


def sanitize_for_json(obj):
    """Turn a payload assembled from pandas results into plain Python.

    numpy scalars become int/float/bool, dates become YYYY-MM-DD strings and
    non-finite floats become 0.0. Entries keyed by None are dropped.
    """
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple, np.ndarray)):
        return [sanitize_for_json(v) for v in obj]
    if obj is None or obj is pd.NaT:
        return None
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return float(obj) if math.isfinite(obj) else 0.0
    if isinstance(obj, (pd.Timestamp, dt.date)):
        return obj.strftime("%Y-%m-%d")
    return obj
