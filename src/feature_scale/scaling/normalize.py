"""
Mean (z-score) normalization for target vectors and feature matrices.

Design:
  - Population statistics: std_dev divides by n, not n - 1
  - Bias columns are skipped and hold the sentinel 1.0 for mean and std_dev
  - Constant inputs raise DegenerateVarianceError instead of producing NaN/Inf
  - Results keep mean/std_dev so the transform can be reapplied or inverted
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from feature_scale.data.schemas import (
    BIAS,
    BIAS_VALUE,
    Column,
    ColumnRole,
    default_roles,
    validate_roles,
)
from feature_scale.errors import DegenerateVarianceError, EmptyDatasetError


@dataclass(frozen=True)
class VectorNormalization:
    values: Optional[np.ndarray]
    mean: float
    std_dev: float

    def apply(self, values) -> np.ndarray:
        return (_as_vector(values) - self.mean) / self.std_dev

    def invert(self, normalized) -> np.ndarray:
        return _as_vector(normalized) * self.std_dev + self.mean


@dataclass(frozen=True)
class MatrixNormalization:
    values: Optional[np.ndarray]
    mean: np.ndarray
    std_dev: np.ndarray
    roles: tuple[ColumnRole, ...]

    @property
    def bias_mask(self) -> np.ndarray:
        return np.array([role == BIAS for role in self.roles], dtype=bool)

    def _check_width(self, matrix: np.ndarray) -> None:
        if matrix.shape[1] != len(self.roles):
            raise ValueError(
                f"expected {len(self.roles)} columns, got {matrix.shape[1]}"
            )

    def apply(self, matrix) -> np.ndarray:
        """Normalize new rows with the stored statistics."""
        matrix = _as_matrix(matrix)
        self._check_width(matrix)
        out = (matrix - self.mean) / self.std_dev
        out[:, self.bias_mask] = BIAS_VALUE
        return out

    def invert(self, normalized) -> np.ndarray:
        """Map normalized rows back to the original feature scale."""
        normalized = _as_matrix(normalized)
        self._check_width(normalized)
        out = normalized * self.std_dev + self.mean
        out[:, self.bias_mask] = BIAS_VALUE
        return out


def _as_vector(values) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D vector, got shape {arr.shape}")
    return arr


def _as_matrix(values) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {arr.shape}")
    return arr


def _plain_stats(values: np.ndarray) -> tuple[float, float]:
    n = values.shape[0]
    with np.errstate(over="ignore", invalid="ignore"):
        mean = float(values.sum() / n)
        std_dev = math.sqrt(float(((values - mean) ** 2).sum() / n))
    return mean, std_dev


def population_stats(values: np.ndarray) -> tuple[float, float]:
    """Return (mean, std_dev) with divisor n.

    Sums that overflow float64 are recomputed on values scaled by their
    largest magnitude, so finite input always gives finite statistics.
    """
    n = values.shape[0]
    if n == 0:
        raise EmptyDatasetError("cannot compute statistics of an empty sequence")
    mean, std_dev = _plain_stats(values)
    if math.isfinite(mean) and math.isfinite(std_dev):
        return mean, std_dev

    scale = float(np.max(np.abs(values)))
    mean, std_dev = _plain_stats(values / scale)
    return mean * scale, std_dev * scale


def _standardize(values: np.ndarray, mean: float, std_dev: float) -> np.ndarray:
    with np.errstate(over="ignore", invalid="ignore"):
        out = (values - mean) / std_dev
    if np.all(np.isfinite(out)):
        return out
    # values - mean overflowed; subtract in the scaled domain instead
    scale = float(np.max(np.abs(values)))
    with np.errstate(over="ignore", invalid="ignore"):
        return (values / scale - mean / scale) / (std_dev / scale)


def _is_degenerate(values: np.ndarray, std_dev: float) -> bool:
    # Rounding in the mean can leave a tiny non-zero std_dev for constant input.
    return std_dev == 0.0 or bool(np.all(values == values[0]))


def normalize_vector(values) -> VectorNormalization:
    """
    Args:
        values: 1-D numeric sequence, typically the target y.

    Returns:
        VectorNormalization with a fresh normalized array, mean and std_dev.
    """
    v = _as_vector(values)
    mean, std_dev = population_stats(v)
    if _is_degenerate(v, std_dev):
        raise DegenerateVarianceError(
            f"vector of {v.shape[0]} values has zero variance (all equal to {v[0]!r})"
        )
    normalized = _standardize(v, mean, std_dev)
    if not np.all(np.isfinite(normalized)):
        raise DegenerateVarianceError("normalization overflowed float64")
    return VectorNormalization(values=normalized, mean=mean, std_dev=std_dev)


def normalize_matrix(matrix, roles: Optional[Sequence[str]] = None) -> MatrixNormalization:
    """
    Args:
        matrix: (m, n) numeric matrix.
        roles: per-column "BIAS" / "FEATURE" tags. Defaults to a bias
            column at index 0 and features everywhere else.

    Returns:
        MatrixNormalization with the normalized copy and per-column stats.
        Every constant feature column is reported in one DegenerateVarianceError.
    """
    X = np.asarray(matrix, dtype=np.float64)
    if X.ndim in (1, 2) and X.shape[0] == 0:
        raise EmptyDatasetError("cannot normalize a matrix with zero rows")
    X = _as_matrix(X)

    n = X.shape[1]
    roles = default_roles(n) if roles is None else validate_roles(roles, n)

    mean = np.ones(n, dtype=np.float64)
    std_dev = np.ones(n, dtype=np.float64)
    degenerate: list[int] = []

    for j, role in enumerate(roles):
        if role == BIAS:
            continue
        col = X[:, j]
        mean[j], std_dev[j] = population_stats(col)
        if _is_degenerate(col, std_dev[j]):
            degenerate.append(j)

    if degenerate:
        raise DegenerateVarianceError(
            f"zero variance in feature columns {degenerate}", columns=tuple(degenerate)
        )

    values = np.empty_like(X)
    overflowed: list[int] = []
    for j, role in enumerate(roles):
        if role == BIAS:
            values[:, j] = BIAS_VALUE
            continue
        values[:, j] = _standardize(X[:, j], mean[j], std_dev[j])
        if not np.all(np.isfinite(values[:, j])):
            overflowed.append(j)

    if overflowed:
        raise DegenerateVarianceError(
            f"normalization overflowed float64 in feature columns {overflowed}",
            columns=tuple(overflowed),
        )

    return MatrixNormalization(values=values, mean=mean, std_dev=std_dev, roles=roles)


def normalize_columns(columns: Sequence[Column]) -> MatrixNormalization:
    """Normalize role-tagged columns of equal length."""
    if not columns:
        raise ValueError("no columns to normalize")
    arrays = [_as_vector(c.values) for c in columns]
    lengths = {a.shape[0] for a in arrays}
    if len(lengths) != 1:
        raise ValueError(f"columns have differing lengths: {sorted(lengths)}")
    X = np.column_stack(arrays)
    return normalize_matrix(X, roles=[c.role for c in columns])
