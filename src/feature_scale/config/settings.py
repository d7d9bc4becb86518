from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class ScaleSettings:
    delimiter: str
    stats_dir: Optional[Path]


def load_settings() -> ScaleSettings:
    """
    Loads settings from environment variables.
    """
    # Picks up a local .env without clobbering variables already exported.
    load_dotenv(override=False)

    delimiter = os.getenv("FEATURE_SCALE_DELIMITER", ",")
    stats_dir = os.getenv("FEATURE_SCALE_STATS_DIR")

    invalid = []
    if len(delimiter) != 1 or delimiter.isalnum() or delimiter in ".-+":
        invalid.append(f"FEATURE_SCALE_DELIMITER={delimiter!r}")

    if invalid:
        raise RuntimeError(
            "Invalid environment variables: "
            + ", ".join(invalid)
            + ". The delimiter must be a single character that cannot appear inside a number."
        )

    return ScaleSettings(
        delimiter=delimiter,
        stats_dir=Path(stats_dir) if stats_dir else None,
    )
