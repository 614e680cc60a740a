import logging
from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd

from ..errors import MalformedInputError

logger = logging.getLogger(__name__)


FEATURE_COUNT = 561

ID_COLUMNS = ["subject", "activity_code"]

SOURCE_INDEX = ["source", "line"]


def feature_code(feature_num: int) -> str:
    """Column key of the feature at 1-based position ``feature_num`` in X files."""
    return f"V{int(feature_num)}"


def _partition_file(dataset_dir: Path, partition: str, prefix: str) -> Path:
    path = dataset_dir / partition / f"{prefix}_{partition}.txt"
    if path.is_file():
        return path
    # Some mirrors ship y_train.txt instead of Y_train.txt
    for alt in (prefix.lower(), prefix.upper()):
        candidate = dataset_dir / partition / f"{alt}_{partition}.txt"
        if candidate.is_file():
            return candidate
    raise MalformedInputError("required dataset file is missing", path)


def read_whitespace_table(path: Path, expected_columns: int, dtype=np.float64) -> pd.DataFrame:
    """Read a whitespace-delimited numeric table, checking every row has ``expected_columns`` fields.

    An empty file yields an empty frame with the expected columns.
    """
    if not path.is_file():
        raise MalformedInputError("required dataset file is missing", path)
    try:
        df = pd.read_csv(path, sep=r"\s+", header=None, dtype=dtype, engine="c")
    except pd.errors.EmptyDataError:
        return pd.DataFrame(np.empty((0, expected_columns), dtype=dtype))
    except pd.errors.ParserError as exc:
        raise MalformedInputError(f"rows have inconsistent column counts ({exc})", path) from exc
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"non-numeric value ({exc})", path) from exc

    if df.shape[1] != expected_columns:
        raise MalformedInputError(f"expected {expected_columns} columns, found {df.shape[1]}", path)
    missing = df.isna().any(axis=1)
    if missing.any():
        line = int(np.flatnonzero(missing.to_numpy())[0]) + 1
        raise MalformedInputError(
            f"line {line} has a missing or non-numeric value (expected {expected_columns} numeric columns)", path
        )
    return df


def load_partition(dataset_dir: Path, partition: str, expected_columns: int = FEATURE_COUNT) -> pd.DataFrame:
    dataset_dir = Path(dataset_dir)
    subject_path = _partition_file(dataset_dir, partition, "subject")
    activity_path = _partition_file(dataset_dir, partition, "Y")
    data_path = _partition_file(dataset_dir, partition, "X")

    logger.info("Reading subject file %s", subject_path)
    subjects = read_whitespace_table(subject_path, 1, dtype=np.int64)
    logger.info("Reading activity file %s", activity_path)
    activities = read_whitespace_table(activity_path, 1, dtype=np.int64)
    logger.info("Reading data file %s", data_path)
    data = read_whitespace_table(data_path, expected_columns)

    counts = {subject_path: len(subjects), activity_path: len(activities), data_path: len(data)}
    if len(set(counts.values())) != 1:
        detail = ", ".join(f"{p.name}={n}" for p, n in counts.items())
        raise MalformedInputError(f"line counts differ across partition '{partition}' files ({detail})", data_path)

    data.columns = [feature_code(i) for i in range(1, expected_columns + 1)]
    data.insert(0, "subject", subjects.iloc[:, 0].to_numpy())
    data.insert(1, "activity_code", activities.iloc[:, 0].to_numpy())
    # Rows stay addressable by the label file and line they came from
    data.index = pd.MultiIndex.from_arrays(
        [[f"{partition}/{activity_path.name}"] * len(data), list(range(1, len(data) + 1))],
        names=SOURCE_INDEX,
    )
    logger.info("Loaded partition %s (%d rows)", partition, len(data))
    return data


def load_observations(
    dataset_dir: Path,
    partitions: Sequence[str] = ("train", "test"),
    expected_columns: int = FEATURE_COUNT,
) -> pd.DataFrame:
    """Merge the partitions into one frame: subject, activity_code, V1..VN.

    Partitions are stacked in the given order; rows keep file line order and
    are indexed by (activity label file, 1-based line).
    """
    frames: List[pd.DataFrame] = [load_partition(dataset_dir, p, expected_columns) for p in partitions]
    logger.info("Merging %s partitions", "/".join(partitions))
    merged = pd.concat(frames)
    merged["subject"] = merged["subject"].astype("int64")
    merged["activity_code"] = merged["activity_code"].astype("int64")
    logger.info("Merged observations: %d rows x %d features", len(merged), expected_columns)
    return merged
