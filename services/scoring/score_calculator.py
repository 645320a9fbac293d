import math
from typing import Iterable, Optional

from config import Config
from services.scoring.types import Submission

HIGHER = 'higher'
LOWER = 'lower'

def is_higher_better(unit_type_value: str) -> bool:
    """Direction of improvement, decided by unit type alone (time: lower is better)"""
    return unit_type_value not in Config.LOWER_IS_BETTER_UNIT_TYPES

def direction_for(unit_type_value: str) -> str:
    return HIGHER if is_higher_better(unit_type_value) else LOWER

def normalize(value: float, poor: float, elite: float, direction: str) -> float:
    """Map a performance onto [SCORE_MIN, SCORE_MAX] between the poor and elite anchors.

    Poor maps to the bottom of the scale and elite to the top in both
    directions; for lower-is-better events poor is numerically larger than
    elite (e.g. poor=1800s, elite=900s). A degenerate benchmark (poor == elite)
    saturates at the top of the scale.
    """
    if elite == poor:
        return float(Config.SCORE_MAX)

    if direction == HIGHER:
        score = (value - poor) / (elite - poor) * 100
    elif direction == LOWER:
        score = (poor - value) / (poor - elite) * 100
    else:
        raise ValueError(f"Unknown direction: {direction}")

    return min(float(Config.SCORE_MAX), max(float(Config.SCORE_MIN), score))

def select_best(submissions: Iterable[Submission], higher_is_better: bool) -> Optional[Submission]:
    """Best submission by value; ties keep the first one encountered"""
    best = None
    for submission in submissions:
        if best is None:
            best = submission
        elif higher_is_better and submission.value > best.value:
            best = submission
        elif not higher_is_better and submission.value < best.value:
            best = submission
    return best

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
