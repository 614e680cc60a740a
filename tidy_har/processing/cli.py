import argparse
import logging
import sys
from pathlib import Path

from ..acquisition import ensure_dataset
from ..config import settings
from ..errors import TidyHarError
from ..utils.logging_config import setup_logging
from .pipeline import build_config, ensure_output_absent, run_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the tidy UCI HAR aggregate table")
    parser.add_argument(
        "--dataset-dir",
        type=Path,
        default=None,
        help="Extracted 'UCI HAR Dataset' directory. Defaults to DATA_ROOT/DATASET_DIR_NAME.",
    )
    parser.add_argument("--output", type=Path, default=None, help="Tab-separated output file. Must not exist yet.")
    parser.add_argument("--config", type=Path, default=None, help="Pipeline TOML config. Defaults to tidy_har.toml.")
    parser.add_argument("--no-download", dest="download", action="store_false", help="Never fetch or unzip the dataset.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    parser.set_defaults(download=True)
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(
        log_level=args.log_level or settings.log_level,
        log_path=settings.log_path,
        log_format=settings.log_format,
    )
    cfg = build_config(dataset_dir=args.dataset_dir, output_path=args.output, config_path=args.config)
    try:
        # Checked before acquisition so a rerun never downloads anything.
        ensure_output_absent(cfg.output_path)
        if args.download and args.dataset_dir is None:
            ensure_dataset(
                settings.data_root,
                settings.dataset_url,
                archive_name=settings.archive_name,
                dataset_dir_name=settings.dataset_dir_name,
                timeout=settings.download_timeout_sec,
            )
        run_pipeline(cfg)
    except TidyHarError as exc:
        logger.error("Pipeline aborted: %s", exc)
        sys.exit(1)
    logger.info("Tidy data set created at %s", cfg.output_path)


if __name__ == "__main__":
    main()
