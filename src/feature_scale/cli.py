"""Load a training file and z-score normalize its features and target."""
from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from feature_scale.config.settings import load_settings
from feature_scale.data.loader import load_dataset
from feature_scale.errors import (
    DegenerateVarianceError,
    EmptyDatasetError,
    MalformedRowError,
)
from feature_scale.scaling.normalize import normalize_columns, normalize_vector
from feature_scale.scaling.store import feature_stats_path, target_stats_path, write_stats


def run(path: Path) -> int:
    settings = load_settings()
    t0 = time.time()

    print(f"\n{'='*60}")
    print(f"Loading {path}")
    print(f"{'='*60}")
    dataset = load_dataset(path, delimiter=settings.delimiter)

    try:
        features = normalize_columns(dataset.columns())
    except DegenerateVarianceError as e:
        raise DegenerateVarianceError(f"features: {e}", columns=e.columns) from None
    try:
        target = normalize_vector(dataset.target)
    except DegenerateVarianceError as e:
        raise DegenerateVarianceError(f"target: {e}", columns=e.columns) from None

    print(f"\n{'='*60}")
    print("Feature statistics:")
    for j, (role, mean, std_dev) in enumerate(zip(features.roles, features.mean, features.std_dev)):
        print(f"  x{j:<3} {role:8} mean={mean:.6f} std_dev={std_dev:.6f}")
    print("\nTarget statistics:")
    print(f"  mean={target.mean:.6f} std_dev={target.std_dev:.6f}")

    if settings.stats_dir is not None:
        print()
        write_stats(features, feature_stats_path(settings.stats_dir))
        write_stats(target, target_stats_path(settings.stats_dir))

    print(f"\n{'='*60}")
    print(f"Normalized {dataset.num_rows} rows x {dataset.num_features} features")
    print(f"Completed in {time.time() - t0:.3f}s")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="feature-scale",
        description="Z-score normalize a comma-separated training file (last column is the target)",
    )
    parser.add_argument("path", type=Path, help="Path to the training data file")
    args = parser.parse_args(argv)

    try:
        return run(args.path)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
    except DegenerateVarianceError as e:
        print(f"ERROR: {args.path}: {e}", file=sys.stderr)
    except (EmptyDatasetError, MalformedRowError, RuntimeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
