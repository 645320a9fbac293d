import logging
import re
from datetime import date
from typing import Optional, Sequence, Tuple

from services.scoring.types import Cohort, User
from services.scoring.catalog import AGE_GROUPS, get_cohorts

logger = logging.getLogger(__name__)

BIRTHDAY_PATTERN = re.compile(r'^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2})(?:T[\d:.]*(?:Z|[+-]\d{2}:?\d{2})?)?)?)?$')

def parse_birthday(birthday: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Parse YYYY[-MM[-DD]] into (year, month, day); missing parts default to 1.

    An ISO time suffix on a full date is tolerated and ignored. Anything else
    (compact or slash-separated dates, impossible calendar days) is rejected.
    """
    if not birthday:
        return None

    match = BIRTHDAY_PATTERN.match(birthday.strip())
    if not match:
        return None

    year = int(match.group(1))
    month = int(match.group(2) or 1)
    day = int(match.group(3) or 1)
    try:
        date(year, month, day)
    except ValueError:
        return None
    return year, month, day

def age_on(today: date, year: int, month: int, day: int) -> int:
    """Whole years elapsed, less one if this year's birthday hasn't happened yet"""
    age = today.year - year
    if (today.month, today.day) < (month, day):
        age -= 1
    return age

class CohortResolver:
    """Maps a user's birthday and gender onto a cohort of the directory.

    Resolution is recomputed on every call; nothing is stored on the user.
    """

    def __init__(self, cohorts: Optional[Sequence[Cohort]] = None, age_groups=None):
        self.cohorts = tuple(cohorts) if cohorts is not None else get_cohorts()
        if age_groups is None:
            age_groups = {c.age for c in self.cohorts} if cohorts is not None else AGE_GROUPS
        self.age_groups = sorted(age_groups, key=lambda g: g.lower_bound)

    def resolve(self, user: Optional[User], today: Optional[date] = None) -> Optional[Cohort]:
        if user is None or not user.birthday or user.gender is None or not user.gender.value:
            logger.debug("Cohort not resolved: missing birthday or gender")
            return None

        parsed = parse_birthday(user.birthday)
        if parsed is None:
            logger.info(f"Cohort not resolved: unparseable birthday {user.birthday!r} for user {user.id}")
            return None

        age = age_on(today or date.today(), *parsed)

        age_group = next((g for g in self.age_groups if g.contains(age)), None)
        if age_group is None:
            logger.debug(f"Cohort not resolved: age {age} outside all age groups")
            return None

        cohort = next(
            (c for c in self.cohorts
             if c.gender.value == user.gender.value
             and c.age.lower_bound == age_group.lower_bound
             and c.age.upper_bound == age_group.upper_bound),
            None,
        )
        if cohort is None:
            logger.warning(f"No cohort for gender {user.gender.value!r} and ages {age_group.key}")
        return cohort

def resolve_cohort(user: Optional[User], today: Optional[date] = None) -> Optional[Cohort]:
    """Resolve a user against the static cohort directory"""
    return CohortResolver().resolve(user, today=today)
