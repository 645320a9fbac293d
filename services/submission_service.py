import logging
import math
import re
from typing import List, Optional

from app import db
from config import Config
from models import Event, Submission, Unit, User

logger = logging.getLogger(__name__)

CLOCK_PATTERN = re.compile(r'^(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)$')

def parse_time_to_seconds(raw_value: str, unit_value: Optional[str] = None) -> float:
    """Parse SS, MM:SS or HH:MM:SS (fractional seconds allowed) into seconds.

    A bare number is read in the given unit (seconds by default).
    """
    text = (raw_value or '').strip()
    if not text:
        raise ValueError("Time value is required")

    match = CLOCK_PATTERN.match(text)
    if match:
        hours = int(match.group(1) or 0)
        minutes = int(match.group(2))
        seconds = float(match.group(3))
        if seconds >= 60 or (match.group(1) is not None and minutes >= 60):
            raise ValueError(f"Invalid time: {raw_value}")
        return hours * 3600 + minutes * 60 + seconds

    factor = Config.TIME_UNIT_SECONDS.get(unit_value or 'seconds')
    if factor is None:
        raise ValueError(f"Invalid time unit: {unit_value}")
    return parse_number(text) * factor

def parse_number(raw_value: str) -> float:
    try:
        value = float((raw_value or '').strip())
    except ValueError:
        raise ValueError(f"Invalid numeric value: {raw_value}")

    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Value must be a non-negative number: {raw_value}")
    return value

class SubmissionService:
    @staticmethod
    def create_submission(user_id: int, event_value: str, raw_value: str,
                          unit_value: Optional[str] = None) -> Submission:
        """Record a performance; value is resolved from the literal input"""
        user = db.session.get(User, user_id)
        if not user:
            raise ValueError(f"Unknown user: {user_id}")

        event = Event.query.filter_by(value=event_value).first()
        if not event:
            raise ValueError(f"Unknown event: {event_value}")

        raw_value = (raw_value or '').strip()
        allowed_units = [u.value for u in event.unit_type.units]
        if unit_value and unit_value not in allowed_units:
            raise ValueError(
                f"Unit '{unit_value}' is not valid for {event.label}; expected one of {allowed_units}"
            )

        unit = None
        if event.unit_type.value == 'time':
            value = parse_time_to_seconds(raw_value, unit_value)
        else:
            value = parse_number(raw_value)
            unit_value = unit_value or (allowed_units[0] if allowed_units else None)
            unit = Unit.query.filter_by(value=unit_value).first() if unit_value else None

        submission = Submission(
            user_id=user.id,
            event_id=event.id,
            raw_value=raw_value,
            value=value,
            unit_id=unit.id if unit else None,
        )
        try:
            db.session.add(submission)
            db.session.commit()
        except Exception as e:
            logger.error(f"Failed to save submission for user {user_id}: {str(e)}")
            db.session.rollback()
            raise

        logger.info(f"Recorded submission {submission.id}: user={user_id} event={event_value} value={value}")
        return submission

    @staticmethod
    def list_submissions(user_id: int) -> List[Submission]:
        return (
            Submission.query
            .filter_by(user_id=user_id)
            .order_by(Submission.created_at.desc(), Submission.id.desc())
            .all()
        )
