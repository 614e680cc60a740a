"""
Decompose feature names into categorical facets.

A UCI HAR feature name such as ``fBodyAccJerk-std()-Z`` encodes the signal
domain, the instrument, the acceleration component, whether it is a jerk or
magnitude signal, the summary statistic and the axis. Each facet is parsed
independently from the name; absent optional facets are ``None``.
"""

import enum
import logging
from collections import defaultdict
from dataclasses import astuple, dataclass, fields
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..errors import CategorizationCollisionError

logger = logging.getLogger(__name__)


class Domain(str, enum.Enum):
    TIME = "Time"
    FREQ = "Freq"


class Instrument(str, enum.Enum):
    ACCELEROMETER = "Accelerometer"
    GYROSCOPE = "Gyroscope"


class AccelerationSource(str, enum.Enum):
    BODY = "Body"
    GRAVITY = "Gravity"


class Jerk(str, enum.Enum):
    JERK = "Jerk"


class Magnitude(str, enum.Enum):
    MAGNITUDE = "Magnitude"


class Statistic(str, enum.Enum):
    MEAN = "Mean"
    SD = "SD"


class Axis(str, enum.Enum):
    X = "X"
    Y = "Y"
    Z = "Z"


@dataclass(frozen=True)
class FeatureFacets:
    domain: Domain
    acceleration_source: Optional[AccelerationSource]
    instrument: Instrument
    jerk: Optional[Jerk]
    magnitude: Optional[Magnitude]
    statistic: Statistic
    axis: Optional[Axis]

    def labels(self) -> Tuple[Optional[str], ...]:
        return tuple(v.value if v is not None else None for v in astuple(self))


FACET_COLUMNS: List[str] = [f.name for f in fields(FeatureFacets)]

FACET_TYPES: Dict[str, type] = {
    "domain": Domain,
    "acceleration_source": AccelerationSource,
    "instrument": Instrument,
    "jerk": Jerk,
    "magnitude": Magnitude,
    "statistic": Statistic,
    "axis": Axis,
}


# Substring rules per facet, in enum order. Prefix rules (domain) are separate.
_CONTAINS_RULES: Dict[str, Sequence[Tuple[str, enum.Enum]]] = {
    "instrument": (("Acc", Instrument.ACCELEROMETER), ("Gyro", Instrument.GYROSCOPE)),
    "acceleration_source": (("BodyAcc", AccelerationSource.BODY), ("GravityAcc", AccelerationSource.GRAVITY)),
    "jerk": (("Jerk", Jerk.JERK),),
    "magnitude": (("Mag", Magnitude.MAGNITUDE),),
    "statistic": (("mean()", Statistic.MEAN), ("std()", Statistic.SD)),
    "axis": (("-X", Axis.X), ("-Y", Axis.Y), ("-Z", Axis.Z)),
}

_REQUIRED = {"domain", "instrument", "statistic"}


def _match_one(feature_name: str, facet: str, matches: List[enum.Enum]) -> Optional[enum.Enum]:
    if len(matches) > 1:
        raise CategorizationCollisionError(
            f"Feature '{feature_name}' matches several {facet} values: {[m.value for m in matches]}",
            [feature_name],
        )
    if not matches:
        if facet in _REQUIRED:
            raise CategorizationCollisionError(f"Feature '{feature_name}' has no {facet}", [feature_name])
        return None
    return matches[0]


@lru_cache(maxsize=None)
def derive_facets(feature_name: str) -> FeatureFacets:
    domains = []
    if feature_name.startswith("t"):
        domains.append(Domain.TIME)
    if feature_name.startswith("f"):
        domains.append(Domain.FREQ)

    values = {"domain": _match_one(feature_name, "domain", domains)}
    for facet, rules in _CONTAINS_RULES.items():
        matches = [value for needle, value in rules if needle in feature_name]
        values[facet] = _match_one(feature_name, facet, matches)
    return FeatureFacets(**values)


def check_injective(feature_names: Iterable[str]) -> Dict[str, FeatureFacets]:
    """Derive facets for each distinct name and fail if two names share a facet tuple."""
    distinct = list(dict.fromkeys(feature_names))
    facets = {name: derive_facets(name) for name in distinct}

    by_tuple: Dict[FeatureFacets, List[str]] = defaultdict(list)
    for name, value in facets.items():
        by_tuple[value].append(name)

    r1, r2 = len(distinct), len(by_tuple)
    logger.info("Confirm features: %d distinct names, %d distinct facet tuples", r1, r2)
    if r1 != r2:
        collisions = [names for names in by_tuple.values() if len(names) > 1]
        colliding = [name for names in collisions for name in names]
        raise CategorizationCollisionError(
            f"{r1} feature names map to only {r2} facet tuples; colliding groups: {collisions}",
            colliding,
        )
    return facets


def categorize_features(long: pd.DataFrame) -> pd.DataFrame:
    """Attach the seven facet columns to each long row, keyed by feature name."""
    facets = check_injective(long["feature_name"].unique())
    # object dtype keeps absent facets as None through the merge
    table = pd.DataFrame(
        [(name,) + value.labels() for name, value in facets.items()],
        columns=["feature_name"] + FACET_COLUMNS,
        dtype=object,
    )
    categorized = long.merge(table, on="feature_name", how="left", validate="many_to_one")
    logger.info("Categorized %d rows over %d features", len(categorized), len(facets))
    return categorized
