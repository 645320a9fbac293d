import logging
import os
import yaml
from typing import Any, Dict, Mapping, Optional

from services.scoring.types import BenchmarkLevel, Unit
from services.scoring.catalog import UNITS

logger = logging.getLogger(__name__)

DEFAULT_BENCHMARKS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'benchmarks.yml')

class BenchmarkTable:
    """Poor/elite benchmark pairs keyed by event value, then cohort key.

    Entries may be absent for any (event, cohort) pair; lookup() returns None
    for those and callers decide how to treat the gap.
    """

    def __init__(self, levels: Optional[Mapping[str, Mapping[str, BenchmarkLevel]]] = None):
        self._levels: Dict[str, Dict[str, BenchmarkLevel]] = {
            event: dict(cohorts) for event, cohorts in (levels or {}).items()
        }

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_BENCHMARKS_PATH) -> 'BenchmarkTable':
        """Load a benchmark table from YAML, falling back to an empty table"""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load benchmarks from {path}: {str(e)}")
            return cls()

        table = cls.from_dict(data)
        logger.info(f"Loaded {table.entry_count()} benchmark entries for {len(table.events())} events from {path}")
        return table

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BenchmarkTable':
        units = {u.value: u for u in UNITS}
        levels: Dict[str, Dict[str, BenchmarkLevel]] = {}

        if not isinstance(data, dict):
            logger.error(f"Benchmark data must be a mapping, got {type(data).__name__}")
            return cls()

        events = data.get('events') or {}
        if not isinstance(events, dict):
            logger.error(f"Benchmark 'events' must be a mapping, got {type(events).__name__}")
            return cls()

        for event_value, entry in events.items():
            entry = entry or {}
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed benchmark event {event_value}: {entry!r}")
                continue

            unit_value = entry.get('unit')
            if unit_value is not None and not isinstance(unit_value, str):
                logger.warning(f"Ignoring non-string unit for {event_value}: {unit_value!r}")
                unit_value = None
            unit = units.get(unit_value) if unit_value else None
            if unit_value and unit is None:
                unit = Unit(value=unit_value, label=unit_value.title())

            entry_cohorts = entry.get('cohorts') or {}
            if not isinstance(entry_cohorts, dict):
                logger.warning(f"Skipping malformed cohorts for {event_value}: {entry_cohorts!r}")
                continue

            cohorts = {}
            for cohort_key, pair in entry_cohorts.items():
                try:
                    cohorts[cohort_key] = BenchmarkLevel(
                        poor=float(pair['poor']),
                        elite=float(pair['elite']),
                        unit=unit,
                    )
                except (KeyError, TypeError, ValueError):
                    logger.warning(f"Skipping malformed benchmark {event_value}/{cohort_key}: {pair!r}")
            levels[event_value] = cohorts

        return cls(levels)

    def lookup(self, event_value: str, cohort_key: str) -> Optional[BenchmarkLevel]:
        return self._levels.get(event_value, {}).get(cohort_key)

    def events(self):
        return list(self._levels.keys())

    def entry_count(self) -> int:
        return sum(len(cohorts) for cohorts in self._levels.values())

    def missing_entries(self, event_values, cohort_keys) -> Dict[str, list]:
        """Cohort keys without a benchmark, per event (events with full coverage omitted)"""
        missing = {}
        for event_value in event_values:
            gaps = [key for key in cohort_keys if self.lookup(event_value, key) is None]
            if gaps:
                missing[event_value] = gaps
        return missing

_default_tables: Dict[str, BenchmarkTable] = {}

def get_benchmark_table(path: Optional[str] = None) -> BenchmarkTable:
    """Benchmark table for a path, loaded once and reused (the data is read-only)"""
    path = path or DEFAULT_BENCHMARKS_PATH
    if path not in _default_tables:
        _default_tables[path] = BenchmarkTable.from_yaml(path)
    return _default_tables[path]
