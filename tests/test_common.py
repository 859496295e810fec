import datetime as dt

import numpy as np
import pandas as pd

from sales_drilldown.analytics.common import safe_divide, sanitize_for_json, share_pct


def test_safe_divide_by_zero():
    assert safe_divide(10, 0) == 0.0
    assert safe_divide(10, float("nan"), default=-1) == -1
    assert safe_divide(10, 4) == 2.5


def test_share_pct():
    assert share_pct(1, 3) == 33.3
    assert share_pct(5, 0) == 0.0


def test_sanitize_for_json():
    payload = {
        "count": np.int64(3),
        "total": np.float64("nan"),
        "flag": np.bool_(True),
        "when": pd.Timestamp("2022-11-07 13:00"),
        "day": dt.date(2023, 1, 2),
        "missing": pd.NaT,
        None: "dropped",
        "rows": (np.float64(1.5),),
    }
    assert sanitize_for_json(payload) == {
        "count": 3,
        "total": 0.0,
        "flag": True,
        "when": "2022-11-07",
        "day": "2023-01-02",
        "missing": None,
        "rows": [1.5],
    }
