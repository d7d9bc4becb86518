"""
Tabular view of a loaded dataset for inspection and export.
"""
from __future__ import annotations

import polars as pl

from feature_scale.data.schemas import Dataset


def dataset_to_dataframe(dataset: Dataset) -> pl.DataFrame:
    """Flatten features and target into columns: bias, x1..xk, target."""
    data: dict = {"bias": dataset.features[:, 0]}
    for j in range(1, dataset.features.shape[1]):
        data[f"x{j}"] = dataset.features[:, j]
    data["target"] = dataset.target
    return pl.DataFrame(data)
