"""
Parquet persistence for normalization statistics, one row per column.
"""
from __future__ import annotations

from pathlib import Path

import numpy as np
import polars as pl

from feature_scale.data.schemas import FEATURE, validate_roles
from feature_scale.scaling.normalize import MatrixNormalization, VectorNormalization

STATS_SCHEMA: dict[str, pl.DataType] = {
    "column": pl.Utf8(),
    "role": pl.Utf8(),
    "mean": pl.Float64(),
    "std_dev": pl.Float64(),
}


def feature_stats_path(stats_dir: Path) -> Path:
    return stats_dir / "feature_stats.parquet"


def target_stats_path(stats_dir: Path) -> Path:
    return stats_dir / "target_stats.parquet"


def stats_to_dataframe(result: MatrixNormalization | VectorNormalization) -> pl.DataFrame:
    if isinstance(result, VectorNormalization):
        rows = [{"column": "target", "role": FEATURE, "mean": result.mean, "std_dev": result.std_dev}]
    else:
        rows = [
            {"column": f"x{j}", "role": role, "mean": float(m), "std_dev": float(s)}
            for j, (role, m, s) in enumerate(zip(result.roles, result.mean, result.std_dev))
        ]
    return pl.DataFrame(rows, schema=STATS_SCHEMA)


def write_stats(result: MatrixNormalization | VectorNormalization, path: Path) -> None:
    df = stats_to_dataframe(result)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(path)
    print(f"Saved stats for {df.height} column(s) to {path}")


def read_stats(path: Path) -> MatrixNormalization:
    """Load stats written by write_stats; the result carries no values."""
    df = pl.read_parquet(path)
    missing = [c for c in STATS_SCHEMA if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing required columns: {missing}")
    roles = validate_roles(df["role"].to_list(), df.height)
    return MatrixNormalization(
        values=None,
        mean=df["mean"].to_numpy().astype(np.float64),
        std_dev=df["std_dev"].to_numpy().astype(np.float64),
        roles=roles,
    )


def read_target_stats(path: Path) -> VectorNormalization:
    stats = read_stats(path)
    if len(stats.roles) != 1:
        raise ValueError(f"{path}: expected a single target row, got {len(stats.roles)}")
    return VectorNormalization(values=None, mean=float(stats.mean[0]), std_dev=float(stats.std_dev[0]))
