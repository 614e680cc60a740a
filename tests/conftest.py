from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

ACTIVITIES = {1: "WALKING", 2: "WALKING_UPSTAIRS", 3: "WALKING_DOWNSTAIRS", 4: "SITTING", 5: "STANDING", 6: "LAYING"}


def write_lines(path: Path, lines: Sequence[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def write_dataset(
    root: Path,
    feature_names: Sequence[str],
    partitions: Dict[str, List[tuple]],
    activities: Optional[Dict[int, str]] = None,
) -> Path:
    """Write a UCI HAR style directory.

    ``partitions`` maps partition name to rows of (subject, activity_code, [values...]).
    """
    write_lines(root / "features.txt", [f"{i} {name}" for i, name in enumerate(feature_names, start=1)])
    write_lines(root / "activity_labels.txt", [f"{code} {name}" for code, name in (activities or ACTIVITIES).items()])
    for partition, rows in partitions.items():
        write_lines(root / partition / f"subject_{partition}.txt", [str(r[0]) for r in rows])
        write_lines(root / partition / f"Y_{partition}.txt", [str(r[1]) for r in rows])
        write_lines(
            root / partition / f"X_{partition}.txt",
            [" " + " ".join(f"{v:.7e}" for v in r[2]) for r in rows],
        )
    return root


@pytest.fixture
def dataset_factory(tmp_path):
    def _factory(feature_names, partitions, activities=None, name="UCI HAR Dataset"):
        return write_dataset(tmp_path / name, feature_names, partitions, activities)

    return _factory
