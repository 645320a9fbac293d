"""
Entities consumed by the scoring engine.

All of them are frozen dataclasses: the engine only ever reads fully hydrated
values, never ORM rows or raw foreign keys (see services.scoring.hydration).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

@dataclass(frozen=True)
class Gender:
    value: str
    label: str
    id: Optional[int] = None

@dataclass(frozen=True)
class AgeGroup:
    lower_bound: int
    upper_bound: int
    id: Optional[int] = None

    def contains(self, age: int) -> bool:
        return self.lower_bound <= age <= self.upper_bound

    @property
    def key(self) -> str:
        return f"{self.lower_bound}_{self.upper_bound}"

@dataclass(frozen=True)
class Cohort:
    key: str
    gender: Gender
    age: AgeGroup

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'gender': {'value': self.gender.value, 'label': self.gender.label},
            'age': {'lower_bound': self.age.lower_bound, 'upper_bound': self.age.upper_bound},
            'label': f"{self.gender.label}, {self.age.lower_bound}-{self.age.upper_bound}",
        }

@dataclass(frozen=True)
class Domain:
    value: str
    label: str
    logo: str
    mobile_label: Optional[str] = None
    id: Optional[int] = None

@dataclass(frozen=True)
class Unit:
    value: str
    label: str
    id: Optional[int] = None

@dataclass(frozen=True)
class UnitType:
    value: str
    label: str
    units: Tuple[Unit, ...] = ()
    id: Optional[int] = None

@dataclass(frozen=True)
class Event:
    value: str
    label: str
    unit_type: UnitType
    domain: Domain
    description: Optional[str] = None
    id: Optional[int] = None

@dataclass(frozen=True)
class User:
    id: Optional[int] = None
    email: Optional[str] = None
    birthday: Optional[str] = None  # YYYY[-MM[-DD]]
    gender: Optional[Gender] = None

@dataclass(frozen=True)
class Submission:
    user: User
    event: Event
    raw_value: str
    value: float
    unit: Optional[Unit] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None

@dataclass(frozen=True)
class BenchmarkLevel:
    poor: float
    elite: float
    unit: Optional[Unit] = None

@dataclass(frozen=True)
class EventScore:
    """Normalized score of the best submission for one event."""
    event: str
    best_value: float
    poor: float
    elite: float
    higher_is_better: bool
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event': self.event,
            'best_value': self.best_value,
            'poor': self.poor,
            'elite': self.elite,
            'higher_is_better': self.higher_is_better,
            'score': round(self.score, 2),
        }

SCORED = 'scored'
UNSCOREABLE = 'unscoreable'

# Reasons a domain could not be scored
NO_SUBMISSIONS = 'no_submissions'
NO_COHORT = 'no_cohort'
NO_BENCHMARKS = 'no_benchmarks'
FETCH_FAILED = 'fetch_failed'

@dataclass(frozen=True)
class DomainScore:
    """Tagged domain result: either a scored value or the reason there is none.

    UI call sites that only want a number use as_int(), which maps every
    unscoreable result to 0.
    """
    domain: str
    status: str
    value: Optional[int] = None
    reason: Optional[str] = None
    events: List[EventScore] = field(default_factory=list)

    @classmethod
    def scored(cls, domain: str, value: int, events: List[EventScore]) -> 'DomainScore':
        return cls(domain=domain, status=SCORED, value=value, events=list(events))

    @classmethod
    def unscoreable(cls, domain: str, reason: str) -> 'DomainScore':
        return cls(domain=domain, status=UNSCOREABLE, reason=reason)

    @property
    def is_scored(self) -> bool:
        return self.status == SCORED

    def as_int(self) -> int:
        return self.value if self.is_scored else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'domain': self.domain,
            'status': self.status,
            'value': self.value,
            'reason': self.reason,
            'events': [e.to_dict() for e in self.events],
        }
