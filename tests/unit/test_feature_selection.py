import pandas as pd
import pytest

from tidy_har.errors import MalformedInputError
from tidy_har.processing.features import (
    load_feature_dictionary,
    project_observations,
    select_features,
)

NAMES = [
    "tBodyAcc-mean()-X",
    "tBodyAcc-std()-Y",
    "tBodyAcc-mad()-X",
    "fBodyAcc-meanFreq()-X",
    "angle(tBodyAccMean,gravity)",
    "fBodyGyro-std()-Z",
    "tGravityAccMag-mean()",
]


def _dictionary(names=NAMES) -> pd.DataFrame:
    return pd.DataFrame({"feature_num": range(1, len(names) + 1), "feature_name": names})


def test_selects_literal_mean_and_std_only() -> None:
    selected = select_features(_dictionary())

    assert selected["feature_name"].tolist() == [
        "tBodyAcc-mean()-X",
        "tBodyAcc-std()-Y",
        "fBodyGyro-std()-Z",
        "tGravityAccMag-mean()",
    ]
    assert selected["feature_num"].tolist() == [1, 2, 6, 7]
    assert selected["feature_code"].tolist() == ["V1", "V2", "V6", "V7"]


def test_selection_matches_substring_rule_for_every_feature() -> None:
    features = _dictionary()
    selected = set(select_features(features)["feature_name"])
    for name in features["feature_name"]:
        assert (name in selected) == ("mean()" in name or "std()" in name)


def test_custom_patterns() -> None:
    selected = select_features(_dictionary(), patterns=("meanFreq()",))
    assert selected["feature_name"].tolist() == ["fBodyAcc-meanFreq()-X"]


def test_project_keeps_identifiers_and_selected_columns() -> None:
    features = _dictionary()
    observations = pd.DataFrame(
        [[3, 1] + [float(i) for i in range(1, len(NAMES) + 1)]],
        columns=["subject", "activity_code"] + [f"V{i}" for i in range(1, len(NAMES) + 1)],
    )
    projected = project_observations(observations, select_features(features))

    assert list(projected.columns) == ["subject", "activity_code", "V1", "V2", "V6", "V7"]
    assert projected.iloc[0].tolist() == [3, 1, 1.0, 2.0, 6.0, 7.0]


def test_load_feature_dictionary(tmp_path) -> None:
    (tmp_path / "features.txt").write_text("1 tBodyAcc-mean()-X\n2 tBodyAcc-std()-X\n", encoding="utf-8")
    features = load_feature_dictionary(tmp_path)
    assert features["feature_num"].tolist() == [1, 2]
    assert features["feature_name"].tolist() == ["tBodyAcc-mean()-X", "tBodyAcc-std()-X"]


def test_load_feature_dictionary_rejects_gaps(tmp_path) -> None:
    (tmp_path / "features.txt").write_text("1 tBodyAcc-mean()-X\n3 tBodyAcc-std()-X\n", encoding="utf-8")
    with pytest.raises(MalformedInputError, match="1..2"):
        load_feature_dictionary(tmp_path)


def test_load_feature_dictionary_rejects_duplicates(tmp_path) -> None:
    (tmp_path / "features.txt").write_text("1 a\n1 b\n", encoding="utf-8")
    with pytest.raises(MalformedInputError, match="duplicate"):
        load_feature_dictionary(tmp_path)


def test_load_feature_dictionary_missing(tmp_path) -> None:
    with pytest.raises(MalformedInputError, match="features.txt"):
        load_feature_dictionary(tmp_path)
