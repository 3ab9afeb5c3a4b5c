"""
Outlier-robust reduction of a region's samples to one value.

Non-finite and missing samples are discarded first. With five or more valid
samples an IQR filter (1.5 x IQR around Q1/Q3) drops outliers, but only when at
least 70% of the valid samples survive; otherwise the unfiltered set is used.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from models import TimeWindow


MIN_SAMPLES_FOR_IQR = 5
IQR_FACTOR = 1.5
MIN_RETAINED_FRACTION = 0.7
RANGE_LABEL_MIN_SPREAD = 1.0


class AggregationMode(str, Enum):
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"
    MEDIAN = "median"
    # Same as AVERAGE: no distance or confidence weights are available yet
    WEIGHTED_AVERAGE = "weighted_average"


@dataclass
class AggregateStats:
    value: float
    min_value: float
    max_value: float
    sample_count: int
    total_requested: int
    outliers_removed: int = 0

    @property
    def quality_percent(self) -> float:
        if self.total_requested <= 0:
            return 0.0
        return self.sample_count / self.total_requested * 100


def valid_values(scalars: Iterable) -> List[float]:
    out = []
    for v in scalars:
        if v is None or isinstance(v, bool) or not isinstance(v, (int, float)):
            continue
        if not math.isfinite(v):
            continue
        out.append(float(v))
    return out


def filter_outliers(values: List[float]) -> List[float]:
    if len(values) < MIN_SAMPLES_FOR_IQR:
        return values
    ordered = sorted(values)
    n = len(ordered)
    q1 = ordered[math.floor(n * 0.25)]
    q3 = ordered[math.floor(n * 0.75)]
    iqr = q3 - q1
    lower = q1 - IQR_FACTOR * iqr
    upper = q3 + IQR_FACTOR * iqr
    filtered = [v for v in values if lower <= v <= upper]
    if len(filtered) >= math.ceil(n * MIN_RETAINED_FRACTION):
        return filtered
    return values


def _median(values: List[float]) -> float:
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def reduce_values(values: List[float], mode: AggregationMode) -> float:
    mode = AggregationMode(mode)
    if mode is AggregationMode.MIN:
        return min(values)
    if mode is AggregationMode.MAX:
        return max(values)
    if mode is AggregationMode.MEDIAN:
        return _median(values)
    # AVERAGE and WEIGHTED_AVERAGE; fsum is exact so input order does not matter
    return math.fsum(values) / len(values)


def aggregate(scalars, mode=AggregationMode.AVERAGE, total_requested: Optional[int] = None) -> Optional[AggregateStats]:
    """Reduce raw samples to an ``AggregateStats``; None when no valid data."""
    scalars = list(scalars)
    valid = valid_values(scalars)
    if not valid:
        return None
    kept = filter_outliers(valid)
    return AggregateStats(
        value=reduce_values(kept, mode),
        min_value=min(valid),
        max_value=max(valid),
        sample_count=len(valid),
        total_requested=total_requested if total_requested is not None else len(scalars),
        outliers_removed=len(valid) - len(kept),
    )


def build_label(data_source: Optional[str], value: Optional[float], sample_count: int,
                min_value: float, max_value: float, window: Optional[TimeWindow],
                area_km2: float) -> Optional[str]:
    """Short summary shown on the map, e.g. ``temperature 2m: 12.3° (10.1-14.0) [9 pts]``.

    Returns None when the data source or the value is missing.
    """
    if not data_source or value is None:
        return None
    hours = window.duration_hours if window is not None else 0
    time_info = f" ({hours:.1f}h avg)" if hours > 1 else ""
    source_label = data_source.replace('_', ' ')
    area_info = f" [~{area_km2:.1f} km²]" if area_km2 > 1 else ""
    show_range = sample_count > 1 and abs(max_value - min_value) > RANGE_LABEL_MIN_SPREAD
    range_info = f" ({min_value:.1f}-{max_value:.1f})" if show_range else ""
    sample_info = f" [{sample_count} pts]" if sample_count > 1 else ""
    return f"{source_label}: {value:.1f}°{range_info}{sample_info}{area_info}{time_info}"
