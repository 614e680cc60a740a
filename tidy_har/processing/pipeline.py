import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from ..config import settings
from ..errors import MalformedInputError, OutputAlreadyExistsError
from ..pipeline_config import get_pipeline_config, load_pipeline_config
from .aggregate import aggregate_tidy
from .facets import categorize_features
from .features import load_feature_dictionary, project_observations, select_features
from .loader import load_observations
from .reshape import label_activities, load_activity_labels, melt_features

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    dataset_dir: Path
    output_path: Path
    partitions: Sequence[str] = ("train", "test")
    patterns: Sequence[str] = ("mean()", "std()")
    # When None the data files are checked against the features.txt entry count.
    expected_feature_count: Optional[int] = None
    separator: str = "\t"
    na_rep: str = "NA"
    float_format: Optional[str] = "%.15g"


def build_config(
    dataset_dir: Optional[Path] = None,
    output_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> PipelineConfig:
    pipe_cfg = load_pipeline_config(config_path) if config_path is not None else get_pipeline_config()
    return PipelineConfig(
        dataset_dir=Path(dataset_dir) if dataset_dir is not None else settings.dataset_dir,
        output_path=Path(output_path) if output_path is not None else Path(settings.output_path),
        partitions=tuple(pipe_cfg.loader.partitions),
        patterns=tuple(pipe_cfg.selection.patterns),
        expected_feature_count=int(pipe_cfg.loader.expected_feature_count),
        separator=pipe_cfg.output.separator,
        na_rep=pipe_cfg.output.na_rep,
        float_format=pipe_cfg.output.float_format,
    )


def ensure_output_absent(output_path: Path) -> None:
    if Path(output_path).exists():
        raise OutputAlreadyExistsError(output_path)


def build_tidy(cfg: PipelineConfig) -> pd.DataFrame:
    """Run the four stages in memory and return the tidy aggregate table."""
    features = load_feature_dictionary(cfg.dataset_dir)
    if cfg.expected_feature_count is not None and cfg.expected_feature_count != len(features):
        raise MalformedInputError(
            f"features.txt lists {len(features)} features, expected {cfg.expected_feature_count}",
            Path(cfg.dataset_dir) / "features.txt",
        )
    activities = load_activity_labels(cfg.dataset_dir)

    observations = load_observations(cfg.dataset_dir, cfg.partitions, expected_columns=len(features))

    selected = select_features(features, cfg.patterns)
    if selected.empty:
        raise MalformedInputError(
            f"no feature names contain any of {list(cfg.patterns)}",
            Path(cfg.dataset_dir) / "features.txt",
        )
    projected = project_observations(observations, selected)

    labeled = label_activities(projected, activities)
    long = melt_features(labeled, selected)

    categorized = categorize_features(long)
    return aggregate_tidy(categorized)


def write_tidy(tidy: pd.DataFrame, cfg: PipelineConfig) -> Path:
    output_path = Path(cfg.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        # Exclusive create: never clobber a file that appeared during the run.
        with output_path.open("x", encoding="utf-8", newline="") as f:
            tidy.to_csv(
                f,
                sep=cfg.separator,
                index=False,
                quoting=csv.QUOTE_NONE,
                na_rep=cfg.na_rep,
                float_format=cfg.float_format,
                lineterminator="\n",
            )
    except FileExistsError as exc:
        raise OutputAlreadyExistsError(output_path) from exc
    logger.info("Wrote tidy data set %s (%d rows)", output_path, len(tidy))
    return output_path


def run_pipeline(cfg: PipelineConfig) -> pd.DataFrame:
    ensure_output_absent(cfg.output_path)
    logger.info("Building tidy data set from %s", cfg.dataset_dir)
    tidy = build_tidy(cfg)
    write_tidy(tidy, cfg)
    return tidy
