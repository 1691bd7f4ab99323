"""
Prometheus exposition text parser.

Best-effort: lines that do not look like ``name{labels} value`` or
``name value`` are skipped without error. Only what the stats backends
need is supported; this is not a general scraper.
"""

import math
import re
from typing import Dict, Optional, Tuple

from domain.value_objects.units import clamp_percent

MetricTable = Dict[str, float]

_SAMPLE_RE = re.compile(
    r"^(?P<key>[a-zA-Z_:][a-zA-Z0-9_:]*(?:\{[^}]*\})?)\s+(?P<value>\S+)(?:\s+-?\d+)?\s*$"
)
_LABEL_RE = re.compile(r'([a-zA-Z_][a-zA-Z0-9_]*)="((?:[^"\\]|\\.)*)"')


def parse_metric_table(text: str) -> MetricTable:
    """
    Build a series-key -> value table from exposition text.

    Keys are kept verbatim (``foo{a="1",b="2"}``), so series that differ
    only by labels stay distinct.
    """
    table: MetricTable = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _SAMPLE_RE.match(line)
        if not match:
            continue
        try:
            table[match.group("key")] = float(match.group("value"))
        except ValueError:
            continue
    return table


def split_series_key(key: str) -> Tuple[str, Dict[str, str]]:
    """Split ``name{a="1"}`` into ``("name", {"a": "1"})``."""
    name, _, rest = key.partition("{")
    return name, dict(_LABEL_RE.findall(rest))


def find_series(table: MetricTable, name: str, **labels: str) -> Optional[float]:
    """Value of the first series named ``name`` whose labels include ``labels``."""
    for key, value in table.items():
        series_name, series_labels = split_series_key(key)
        if series_name != name:
            continue
        if all(series_labels.get(k) == v for k, v in labels.items()):
            return value
    return None


def cpu_usage_from_counters(table: MetricTable) -> float:
    """
    CPU usage from cumulative ``*_cpu_seconds_total`` counters.

    Ratio of idle seconds to all seconds since boot, without a second
    sample to diff against: a lifetime average, not current load.
    """
    total_all = 0.0
    total_idle = 0.0
    for key, value in table.items():
        name, _ = split_series_key(key)
        if not name.endswith("_cpu_seconds_total") or not math.isfinite(value):
            continue
        total_all += value
        if 'mode="idle"' in key:
            total_idle += value

    if total_all == 0:
        return 0.0
    return clamp_percent(100 - (total_idle / total_all) * 100)
