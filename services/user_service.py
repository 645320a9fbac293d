import logging
from typing import Any, Dict, Optional

from app import db
from models import Gender, User
from services.scoring.cohort_resolver import parse_birthday

logger = logging.getLogger(__name__)

def normalize_birthday(birthday: Optional[str]) -> Optional[str]:
    """Validate a birthday and return its stored form (date part only)"""
    if birthday is None:
        return None

    text = birthday.strip()
    if not text:
        return None
    if parse_birthday(text) is None:
        raise ValueError(f"Invalid birthday: {birthday!r} (expected YYYY, YYYY-MM or YYYY-MM-DD)")
    return text.split('T', 1)[0]

def _gender_row(gender_value: Optional[str]) -> Optional[Gender]:
    if gender_value is None:
        return None

    gender = Gender.query.filter_by(value=gender_value).first()
    if not gender:
        raise ValueError(f"Unknown gender: {gender_value}")
    return gender

class UserService:
    """Profile management; birthday and gender drive cohort resolution"""

    @staticmethod
    def get_user_by_email(email: str) -> Optional[User]:
        return User.query.filter_by(email=(email or '').strip().lower()).first()

    @staticmethod
    def create_user(email: str, first_name: Optional[str] = None, last_name: Optional[str] = None,
                    birthday: Optional[str] = None, gender: Optional[str] = None) -> User:
        email = (email or '').strip().lower()
        if not email:
            raise ValueError("Email is required")
        if UserService.get_user_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            birthday=normalize_birthday(birthday),
            gender=_gender_row(gender),
        )
        try:
            db.session.add(user)
            db.session.commit()
        except Exception as e:
            logger.error(f"Failed to create user {email}: {str(e)}")
            db.session.rollback()
            raise

        logger.info(f"Created user {user.id}: {email}")
        return user

    @staticmethod
    def update_user(user_id: int, changes: Dict[str, Any]) -> User:
        """Apply a partial profile update; keys absent from changes are left alone"""
        user = db.session.get(User, user_id)
        if not user:
            raise LookupError(f"User {user_id} not found")

        if 'email' in changes:
            email = (changes['email'] or '').strip().lower()
            if not email:
                raise ValueError("Email is required")
            existing = UserService.get_user_by_email(email)
            if existing and existing.id != user.id:
                raise ValueError(f"User with email {email} already exists")
            user.email = email
        if 'first_name' in changes:
            user.first_name = changes['first_name']
        if 'last_name' in changes:
            user.last_name = changes['last_name']
        if 'birthday' in changes:
            user.birthday = normalize_birthday(changes['birthday'])
        if 'gender' in changes:
            user.gender = _gender_row(changes['gender'])

        try:
            db.session.commit()
        except Exception as e:
            logger.error(f"Failed to update user {user_id}: {str(e)}")
            db.session.rollback()
            raise

        logger.info(f"Updated user {user_id}: {sorted(changes.keys())}")
        return user
