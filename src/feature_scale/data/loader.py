from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np

from feature_scale.data.schemas import BIAS_VALUE, Dataset, validate_dataset
from feature_scale.errors import EmptyDatasetError, MalformedRowError


@dataclass(frozen=True)
class ParsedRow:
    line_no: int
    features: list[float]
    target: float


def _parse_token(token: str, *, path: Path, line_no: int, column: int) -> float:
    try:
        value = float(token.strip())
    except ValueError:
        raise MalformedRowError(
            f"not a number: {token.strip()!r}", path=path, line_no=line_no, column=column
        ) from None
    if not math.isfinite(value):
        raise MalformedRowError(
            f"non-finite value: {token.strip()!r}", path=path, line_no=line_no, column=column
        )
    return value


def iter_rows(path: Path | str, delimiter: str = ",") -> Iterator[ParsedRow]:
    """
    Lazily parse a delimited file, one row per non-blank line.

    The first row fixes the token count: every token but the last is a
    feature, the last is the target. Any later row with a different count
    raises MalformedRowError.
    """
    path = Path(path)
    expected: int | None = None

    with path.open("rb") as fh:
        for line_no, raw in enumerate(fh, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedRowError(
                    f"invalid UTF-8 byte {raw[e.start:e.start + 1]!r} at offset {e.start}",
                    path=path,
                    line_no=line_no,
                ) from None
            if not line.strip():
                continue
            tokens = line.rstrip("\r\n").split(delimiter)

            if expected is None:
                if len(tokens) < 2:
                    raise MalformedRowError(
                        f"need at least one feature and a target, got {len(tokens)} token(s)",
                        path=path,
                        line_no=line_no,
                    )
                expected = len(tokens)
            elif len(tokens) != expected:
                raise MalformedRowError(
                    f"expected {expected} tokens, got {len(tokens)}",
                    path=path,
                    line_no=line_no,
                )

            values = [
                _parse_token(tok, path=path, line_no=line_no, column=j + 1)
                for j, tok in enumerate(tokens)
            ]
            yield ParsedRow(line_no=line_no, features=values[:-1], target=values[-1])


def load_dataset(path: Path | str, delimiter: str = ",") -> Dataset:
    """
    Args:
        path: comma-separated file, no header, last field is the target.
        delimiter: single-character field separator.

    Returns:
        Dataset with a bias column of 1.0 prepended to the features.
    """
    path = Path(path)
    rows: list[list[float]] = []
    target: list[float] = []

    for row in iter_rows(path, delimiter):
        rows.append([BIAS_VALUE, *row.features])
        target.append(row.target)

    if not rows:
        raise EmptyDatasetError(f"{path}: no data rows")

    dataset = Dataset(
        features=np.array(rows, dtype=np.float64),
        target=np.array(target, dtype=np.float64),
    )
    validate_dataset(dataset)

    print(f"Number of training sets: {dataset.num_rows}")
    print(f"Number of features: {dataset.num_features}")
    return dataset
