from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib


@dataclass(frozen=True)
class LoaderConfig:
    partitions: Tuple[str, ...] = ("train", "test")
    # Column count of every X_<partition>.txt row. When features.txt is read
    # first, the pipeline checks against its entry count instead.
    expected_feature_count: int = 561


@dataclass(frozen=True)
class SelectionConfig:
    # Literal substrings, not regular expressions: `meanFreq()` must not match.
    patterns: Tuple[str, ...] = ("mean()", "std()")


@dataclass(frozen=True)
class OutputConfig:
    separator: str = "\t"
    na_rep: str = "NA"
    float_format: str = "%.15g"


@dataclass(frozen=True)
class PipelineSettings:
    loader: LoaderConfig = LoaderConfig()
    selection: SelectionConfig = SelectionConfig()
    output: OutputConfig = OutputConfig()


def _default_config_path() -> Path:
    # tidy_har/pipeline_config.py -> tidy_har.toml
    return Path(__file__).resolve().parents[1] / "tidy_har.toml"


def load_pipeline_config(path: Optional[Path] = None) -> PipelineSettings:
    path = Path(path) if path is not None else _default_config_path()
    if not path.exists():
        return PipelineSettings()

    raw = tomllib.loads(path.read_text(encoding="utf-8"))

    loader_raw = raw.get("loader", {}) or {}
    selection_raw = raw.get("selection", {}) or {}
    output_raw = raw.get("output", {}) or {}

    partitions = loader_raw.get("partitions", None)
    if partitions is not None:
        partitions = tuple(str(p) for p in partitions)
        if not partitions:
            raise ValueError(f"[loader].partitions must not be empty in {path}")
    loader = LoaderConfig(
        partitions=partitions or LoaderConfig.partitions,
        expected_feature_count=int(loader_raw.get("expected_feature_count", LoaderConfig.expected_feature_count)),
    )
    if loader.expected_feature_count <= 0:
        raise ValueError(f"expected_feature_count must be > 0, got {loader.expected_feature_count}")

    patterns = selection_raw.get("patterns", None)
    if patterns is not None:
        patterns = tuple(str(p) for p in patterns)
        if not patterns:
            raise ValueError(f"[selection].patterns must not be empty in {path}")
    selection = SelectionConfig(patterns=patterns or SelectionConfig.patterns)

    output = OutputConfig(
        separator=str(output_raw.get("separator", OutputConfig.separator)),
        na_rep=str(output_raw.get("na_rep", OutputConfig.na_rep)),
        float_format=str(output_raw.get("float_format", OutputConfig.float_format)),
    )

    return PipelineSettings(loader=loader, selection=selection, output=output)


_CACHED: Optional[PipelineSettings] = None


def get_pipeline_config(path: Optional[Path] = None) -> PipelineSettings:
    global _CACHED
    if _CACHED is None:
        _CACHED = load_pipeline_config(path)
    return _CACHED
