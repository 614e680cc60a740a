import logging
from pathlib import Path
from typing import List, Sequence, Tuple

import pandas as pd

from ..errors import MalformedInputError
from .loader import ID_COLUMNS, feature_code

logger = logging.getLogger(__name__)


DEFAULT_PATTERNS = ("mean()", "std()")


def read_dictionary(path: Path, key: str, name: str) -> pd.DataFrame:
    """Read a ``<int> <name>`` dictionary file into a two-column frame."""
    if not path.is_file():
        raise MalformedInputError("required dataset file is missing", path)

    records: List[Tuple[int, str]] = []
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            parts = line.split(maxsplit=1)
            if len(parts) != 2:
                raise MalformedInputError(f"line {line_no}: expected '<{key}> <{name}>'", path)
            try:
                records.append((int(parts[0]), parts[1].strip()))
            except ValueError as exc:
                raise MalformedInputError(f"line {line_no}: non-integer {key} {parts[0]!r}", path) from exc
    if not records:
        raise MalformedInputError("dictionary file is empty", path)

    df = pd.DataFrame.from_records(records, columns=[key, name])
    df[key] = df[key].astype("int64")
    duplicated = df[key].duplicated()
    if duplicated.any():
        raise MalformedInputError(f"duplicate {key} {int(df.loc[duplicated, key].iloc[0])}", path)
    return df


def load_feature_dictionary(dataset_dir: Path) -> pd.DataFrame:
    path = Path(dataset_dir) / "features.txt"
    logger.info("Reading feature dictionary %s", path)
    features = read_dictionary(path, "feature_num", "feature_name")
    expected = list(range(1, len(features) + 1))
    if sorted(features["feature_num"].tolist()) != expected:
        raise MalformedInputError(f"feature indices must cover 1..{len(features)}", path)
    return features


def select_features(features: pd.DataFrame, patterns: Sequence[str] = DEFAULT_PATTERNS) -> pd.DataFrame:
    """Keep features whose name contains any of ``patterns`` as a literal substring.

    Dictionary order is preserved. Adds ``feature_code`` (``V<feature_num>``),
    the column key of the feature in the merged observations.
    """
    mask = pd.Series(False, index=features.index)
    for pattern in patterns:
        mask |= features["feature_name"].str.contains(pattern, regex=False)
    selected = features.loc[mask, ["feature_num", "feature_name"]].reset_index(drop=True)
    selected["feature_code"] = selected["feature_num"].map(feature_code)
    logger.info("Selected %d of %d features matching %s", len(selected), len(features), list(patterns))
    return selected


def project_observations(observations: pd.DataFrame, selected: pd.DataFrame) -> pd.DataFrame:
    codes = selected["feature_code"].tolist()
    missing = [c for c in codes if c not in observations.columns]
    if missing:
        raise MalformedInputError(f"observations lack selected feature columns {missing[:5]}")
    logger.info("Projecting observations onto %d selected features", len(codes))
    return observations[ID_COLUMNS + codes].copy()
