"""
Directory snapshot for debugging and reporting.

Turns the run's users (ordered by id) into a DataFrame:

    user_id | friend_count | network_size | purchase_count | window_mean

window_mean is in pennies (NaN for users without purchases).
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from anomaly_engine.core.context import RunContext
from anomaly_engine.core.network import NetworkAggregator

SNAPSHOT_COLUMNS = ["user_id", "friend_count", "network_size", "purchase_count", "window_mean"]


def directory_frame(context: RunContext, aggregator: Optional[NetworkAggregator] = None) -> pd.DataFrame:
    aggregator = aggregator or NetworkAggregator(context)

    rows = []
    for user in context.directory.all_users():
        values = user.window.values()
        rows.append({
            "user_id": user.id,
            "friend_count": len(user.friends),
            "network_size": len(aggregator.network(user)),
            "purchase_count": len(values),
            "window_mean": float(np.mean(values)) if values else np.nan,
        })

    return pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)


def summarize_directory(frame: pd.DataFrame) -> Dict[str, float]:
    if frame.empty:
        return {
            "users": 0,
            "users_with_purchases": 0,
            "isolated_users": 0,
            "avg_friends": 0.0,
            "avg_network_size": 0.0,
            "total_retained_purchases": 0,
        }

    return {
        "users": int(len(frame)),
        "users_with_purchases": int((frame["purchase_count"] > 0).sum()),
        "isolated_users": int((frame["friend_count"] == 0).sum()),
        "avg_friends": float(frame["friend_count"].mean()),
        "avg_network_size": float(frame["network_size"].mean()),
        "total_retained_purchases": int(frame["purchase_count"].sum()),
    }
