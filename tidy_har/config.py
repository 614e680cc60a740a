from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    app_name: str = "Tidy HAR"
    version: str = "1.0.0"

    # Acquisition; the archive and the extracted dataset both live under data_root
    data_root: Path = Path("./data")
    dataset_url: str = (
        "https://d396qusza40orc.cloudfront.net/"
        "getdata%2Fprojectfiles%2FUCI%20HAR%20Dataset.zip"
    )
    archive_name: str = "Dataset.zip"
    dataset_dir_name: str = "UCI HAR Dataset"
    download_timeout_sec: int = 120

    output_path: Path = Path("./HARUsingSmartphones.txt")

    log_level: str = "INFO"
    log_format: str = "text"
    log_path: Path = Path("./logs")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ["json", "text"]:
            raise ValueError(f"Invalid log format: {v}")
        return v

    @field_validator("download_timeout_sec")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Download timeout must be positive")
        return v

    @property
    def dataset_dir(self) -> Path:
        return self.data_root / self.dataset_dir_name


settings = Settings()
