"""
Dataset and column definitions shared by the loader and the normalizer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np

ColumnRole = Literal["BIAS", "FEATURE"]
BIAS: ColumnRole = "BIAS"
FEATURE: ColumnRole = "FEATURE"

BIAS_VALUE = 1.0


@dataclass(frozen=True)
class Column:
    values: np.ndarray
    role: ColumnRole = FEATURE

    @property
    def is_bias(self) -> bool:
        return self.role == BIAS


@dataclass(frozen=True)
class Dataset:
    features: np.ndarray  # (num_rows, num_features + 1), bias in column 0
    target: np.ndarray    # (num_rows,)

    @property
    def num_rows(self) -> int:
        return int(self.features.shape[0])

    @property
    def num_features(self) -> int:
        """Feature columns, excluding the bias and the target."""
        return int(self.features.shape[1]) - 1

    @property
    def roles(self) -> tuple[ColumnRole, ...]:
        return default_roles(self.features.shape[1])

    def columns(self) -> list[Column]:
        return [Column(values=self.features[:, j], role=role) for j, role in enumerate(self.roles)]


def default_roles(num_cols: int, bias_index: int = 0) -> tuple[ColumnRole, ...]:
    """One bias column at `bias_index`, features everywhere else."""
    if num_cols < 1:
        raise ValueError(f"num_cols must be >= 1, got {num_cols}")
    if not 0 <= bias_index < num_cols:
        raise ValueError(f"bias_index {bias_index} out of range for {num_cols} columns")
    return tuple(BIAS if j == bias_index else FEATURE for j in range(num_cols))


def validate_roles(roles: Sequence[str], num_cols: int) -> tuple[ColumnRole, ...]:
    if len(roles) != num_cols:
        raise ValueError(f"expected {num_cols} column roles, got {len(roles)}")
    unknown = [(j, r) for j, r in enumerate(roles) if r not in (BIAS, FEATURE)]
    if unknown:
        raise ValueError(f"unknown column roles: {unknown}")
    return tuple(roles)  # type: ignore[return-value]


def validate_dataset(dataset: Dataset) -> None:
    features, target = dataset.features, dataset.target
    if features.ndim != 2:
        raise ValueError(f"features must be 2-D, got shape {features.shape}")
    if target.ndim != 1:
        raise ValueError(f"target must be 1-D, got shape {target.shape}")
    if target.shape[0] != features.shape[0]:
        raise ValueError(
            f"target length {target.shape[0]} != feature rows {features.shape[0]}"
        )
    if features.shape[1] < 1 or not np.all(features[:, 0] == BIAS_VALUE):
        raise ValueError("column 0 must be the bias column (all 1.0)")
