from pathlib import Path

import pytest
from pydantic import ValidationError

from tidy_har.config import Settings


def test_settings_read_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("LOG_FORMAT", "json")

    s = Settings(_env_file=None)

    assert s.data_root == tmp_path
    assert s.dataset_dir == tmp_path / "UCI HAR Dataset"
    assert s.log_format == "json"


def test_settings_reject_unknown_log_format() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")


def test_settings_reject_non_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, download_timeout_sec=0)
