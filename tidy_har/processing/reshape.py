import logging
from pathlib import Path

import pandas as pd

from ..errors import MalformedInputError, UnknownActivityError
from .features import read_dictionary
from .loader import SOURCE_INDEX

logger = logging.getLogger(__name__)


LONG_COLUMNS = ["subject", "activity", "feature_name", "value"]


def load_activity_labels(dataset_dir: Path) -> pd.DataFrame:
    path = Path(dataset_dir) / "activity_labels.txt"
    logger.info("Reading activity labels %s", path)
    return read_dictionary(path, "activity_code", "activity")


def _describe_row(observations: pd.DataFrame, mask: pd.Series) -> str:
    position = int(mask.to_numpy().nonzero()[0][0])
    if list(observations.index.names) == SOURCE_INDEX:
        source, line = observations.index[position]
        return f"{source} line {line}"
    return f"merged row {position + 1}"


def label_activities(observations: pd.DataFrame, activities: pd.DataFrame) -> pd.DataFrame:
    """Swap ``activity_code`` for the descriptive ``activity`` name.

    Every code must resolve; rows are never dropped.
    """
    lookup = dict(zip(activities["activity_code"], activities["activity"]))
    names = observations["activity_code"].map(lookup)
    unknown = names.isna()
    if unknown.any():
        codes = observations.loc[unknown, "activity_code"].unique().tolist()
        raise UnknownActivityError(codes, location=_describe_row(observations, unknown))

    labeled = observations.drop(columns=["activity_code"])
    labeled.insert(1, "activity", names.astype(str).to_numpy())
    logger.info("Labelled %d observations with %d activity names", len(labeled), labeled["activity"].nunique())
    return labeled


def melt_features(labeled: pd.DataFrame, selected: pd.DataFrame) -> pd.DataFrame:
    """Reshape one-column-per-feature rows into (subject, activity, feature_name, value) rows."""
    codes = selected["feature_code"].tolist()
    long = labeled.melt(
        id_vars=["subject", "activity"],
        value_vars=codes,
        var_name="feature_code",
        value_name="value",
    )
    names = dict(zip(selected["feature_code"], selected["feature_name"]))
    long["feature_name"] = long["feature_code"].map(names)

    expected = len(labeled) * len(codes)
    if len(long) != expected or long["feature_name"].isna().any():
        raise MalformedInputError(f"reshape produced {len(long)} rows, expected {expected}")
    logger.info("Melted %d observations x %d features into %d rows", len(labeled), len(codes), len(long))
    return long[LONG_COLUMNS].reset_index(drop=True)
