import logging
from typing import List, Optional

from sqlalchemy.orm import joinedload

from services.scoring.hydration import submission_from_row, user_from_row
from services.scoring.types import Submission, User

logger = logging.getLogger(__name__)

class SqlSubmissionStore:
    """Submission store backed by the application database"""

    def get_submissions_by_user_id(self, user_id) -> List[Submission]:
        from models import Event, Submission as SubmissionRow, User as UserRow

        rows = (
            SubmissionRow.query
            .options(
                joinedload(SubmissionRow.event).joinedload(Event.domain),
                joinedload(SubmissionRow.event).joinedload(Event.unit_type),
                joinedload(SubmissionRow.user).joinedload(UserRow.gender),
                joinedload(SubmissionRow.unit),
            )
            .filter(SubmissionRow.user_id == user_id)
            .order_by(SubmissionRow.created_at.asc(), SubmissionRow.id.asc())
            .all()
        )
        logger.debug(f"Fetched {len(rows)} submissions for user {user_id}")
        return [submission_from_row(row) for row in rows]

    def get_user(self, user_id) -> Optional[User]:
        from app import db
        from models import User as UserRow

        row = db.session.get(UserRow, user_id)
        return user_from_row(row) if row else None
