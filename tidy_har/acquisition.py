"""
Download and unpack the UCI HAR archive.

Both steps are skipped when their result is already on disk, so re-running
against an extracted dataset never touches the network.
"""

import logging
import zipfile
from pathlib import Path

import requests

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_archive(url: str, target: Path, timeout: int = 120) -> Path:
    if target.exists():
        logger.info("Archive %s already present, skipping download", target)
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")
    logger.info("Downloading %s", url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with partial.open("wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        partial.replace(target)
    finally:
        if partial.exists():
            partial.unlink()
    logger.info("Downloaded %s (%.2f MB)", target, target.stat().st_size / 1e6)
    return target


def extract_archive(archive: Path, destination: Path, dataset_dir_name: str) -> Path:
    dataset_dir = destination / dataset_dir_name
    if dataset_dir.exists():
        logger.info("Dataset %s already extracted, skipping unzip", dataset_dir)
        return dataset_dir

    logger.info("Unzip started: %s", archive)
    with zipfile.ZipFile(archive, "r") as zf:
        zf.extractall(destination)
    if not dataset_dir.is_dir():
        raise FileNotFoundError(f"Archive {archive} did not contain '{dataset_dir_name}'")
    logger.info("Extracted dataset to %s", dataset_dir)
    return dataset_dir


def ensure_dataset(
    data_root: Path,
    url: str,
    archive_name: str = "Dataset.zip",
    dataset_dir_name: str = "UCI HAR Dataset",
    timeout: int = 120,
) -> Path:
    data_root = Path(data_root)
    dataset_dir = data_root / dataset_dir_name
    if dataset_dir.is_dir():
        logger.info("Using existing dataset at %s", dataset_dir)
        return dataset_dir
    archive = download_archive(url, data_root / archive_name, timeout=timeout)
    return extract_archive(archive, data_root, dataset_dir_name)
