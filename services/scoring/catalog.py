"""
Static fitness catalog and the cohort directory.

Events reference their domain and unit type objects directly. The cohort
directory is the Gender x AgeGroup cross-product, built once and validated
at process start.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from services.scoring.types import AgeGroup, Cohort, Domain, Event, Gender, Unit, UnitType

logger = logging.getLogger(__name__)

GENDERS: Tuple[Gender, ...] = (
    Gender(value='female', label='Female'),
    Gender(value='male', label='Male'),
)

AGE_GROUPS: Tuple[AgeGroup, ...] = (
    AgeGroup(18, 29),
    AgeGroup(30, 39),
    AgeGroup(40, 49),
    AgeGroup(50, 59),
    AgeGroup(60, 69),
    AgeGroup(70, 79),
    AgeGroup(80, 89),
    AgeGroup(90, 99),
)

DOMAINS: Tuple[Domain, ...] = (
    Domain(value='agility-coordination', label='Agility & Coordination', mobile_label='Agility', logo='GiBodyBalance'),
    Domain(value='anaerobic-power-speed', label='Anaerobic Power/Speed', mobile_label='Power', logo='GiSpeedometer'),
    Domain(value='muscular-endurance', label='Muscular Endurance', mobile_label='Endurance', logo='GiStairsGoal'),
    Domain(value='muscular-strength', label='Muscular Strength', mobile_label='Strength', logo='GiBiceps'),
    Domain(value='olympic-lifting', label='Olympic Lifting', mobile_label='Olympic', logo='GiWeightLiftingUp'),
    Domain(value='steady-state-endurance', label='Steady State Endurance', mobile_label='Cardio', logo='GiPathDistance'),
)

UNITS: Tuple[Unit, ...] = (
    Unit(value='calories', label='Calories'),
    Unit(value='feet', label='Feet'),
    Unit(value='inches', label='Inches'),
    Unit(value='minutes', label='Minutes'),
    Unit(value='pounds', label='Pounds'),
    Unit(value='repetitions', label='Repetitions'),
    Unit(value='seconds', label='Seconds'),
)

def _unit(value: str) -> Unit:
    return next(u for u in UNITS if u.value == value)

UNIT_TYPES: Tuple[UnitType, ...] = (
    UnitType(value='calories', label='Calories', units=(_unit('calories'),)),
    UnitType(value='repetitions', label='Repetitions', units=(_unit('repetitions'),)),
    UnitType(value='time', label='Time', units=(_unit('minutes'), _unit('seconds'))),
    UnitType(value='weight', label='Weight', units=(_unit('pounds'),)),
)

def _domain(value: str) -> Domain:
    return next(d for d in DOMAINS if d.value == value)

def _unit_type(value: str) -> UnitType:
    return next(u for u in UNIT_TYPES if u.value == value)

EVENTS: Tuple[Event, ...] = (
    Event(value='400m-sprint', label='400m Sprint',
          unit_type=_unit_type('time'), domain=_domain('anaerobic-power-speed')),
    Event(value='assault-bike', label='60-Second Assault Bike for Max Calories',
          unit_type=_unit_type('calories'), domain=_domain('anaerobic-power-speed')),
    Event(value='air-squats', label='Max Air Squats in 2 Minutes',
          unit_type=_unit_type('repetitions'), domain=_domain('muscular-endurance')),
    Event(value='knee-raises', label='Max Hanging Knee Raises in 2 Minutes',
          unit_type=_unit_type('repetitions'), domain=_domain('muscular-endurance')),
    Event(value='push-ups', label='Max Push-Ups in 2 Minutes',
          unit_type=_unit_type('repetitions'), domain=_domain('muscular-endurance')),
    Event(value='pull-ups', label='Max Strict Pull-Ups',
          unit_type=_unit_type('repetitions'), domain=_domain('muscular-endurance')),
    Event(value='back-squat', label='Back Squat',
          unit_type=_unit_type('weight'), domain=_domain('muscular-strength')),
    Event(value='deadlift', label='Deadlift',
          unit_type=_unit_type('weight'), domain=_domain('muscular-strength')),
    Event(value='military-press', label='Military Press',
          unit_type=_unit_type('weight'), domain=_domain('muscular-strength')),
    Event(value='clean-and-jerk', label='Clean & Jerk',
          unit_type=_unit_type('weight'), domain=_domain('olympic-lifting')),
    Event(value='snatch', label='Snatch',
          unit_type=_unit_type('weight'), domain=_domain('olympic-lifting')),
    Event(value='10k-row', label='10K Row Time',
          unit_type=_unit_type('time'), domain=_domain('steady-state-endurance')),
    Event(value='5k-run', label='5k Run',
          unit_type=_unit_type('time'), domain=_domain('steady-state-endurance')),
)

def cohort_key(gender: Gender, age_group: AgeGroup) -> str:
    return f"{gender.value}_{age_group.lower_bound}_{age_group.upper_bound}"

def validate_age_groups(age_groups: Sequence[AgeGroup]) -> List[str]:
    """Return integrity problems in an age-group table (empty list when sound).

    Groups must have lower <= upper and, sorted by lower bound, be contiguous
    and non-overlapping. Ages below the first or above the last group are
    allowed and simply resolve to no cohort.
    """
    problems = []
    ordered = sorted(age_groups, key=lambda g: g.lower_bound)

    for group in ordered:
        if group.lower_bound > group.upper_bound:
            problems.append(f"Inverted bounds in age group {group.lower_bound}-{group.upper_bound}")

    for previous, current in zip(ordered, ordered[1:]):
        if current.lower_bound <= previous.upper_bound:
            problems.append(
                f"Age groups {previous.lower_bound}-{previous.upper_bound} and "
                f"{current.lower_bound}-{current.upper_bound} overlap"
            )
        elif current.lower_bound != previous.upper_bound + 1:
            problems.append(
                f"Gap between age groups {previous.lower_bound}-{previous.upper_bound} and "
                f"{current.lower_bound}-{current.upper_bound}"
            )

    return problems

def build_cohorts(genders: Sequence[Gender] = GENDERS,
                  age_groups: Sequence[AgeGroup] = AGE_GROUPS) -> Tuple[Cohort, ...]:
    """Build the Gender x AgeGroup cross-product, rejecting broken tables."""
    problems = validate_age_groups(age_groups)

    gender_values = [g.value for g in genders]
    duplicates = sorted({v for v in gender_values if gender_values.count(v) > 1})
    if duplicates:
        problems.append(f"Duplicate gender values: {', '.join(duplicates)}")

    if problems:
        for problem in problems:
            logger.error(f"Catalog integrity error: {problem}")
        raise ValueError(f"Invalid cohort catalog: {'; '.join(problems)}")

    ordered_groups = sorted(age_groups, key=lambda g: g.lower_bound)
    return tuple(
        Cohort(key=cohort_key(gender, group), gender=gender, age=group)
        for gender in genders
        for group in ordered_groups
    )

@lru_cache(maxsize=1)
def get_cohorts() -> Tuple[Cohort, ...]:
    """Cohort directory for the static catalog, computed once per process."""
    return build_cohorts(GENDERS, AGE_GROUPS)

def get_event(value: str) -> Optional[Event]:
    return next((e for e in EVENTS if e.value == value), None)

def domain_values() -> List[str]:
    return [d.value for d in DOMAINS]

