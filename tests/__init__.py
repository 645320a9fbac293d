"""
Test package for the fitness scoring application.
"""

import os
import sys
import logging
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set up test logging
logging.basicConfig(
    level=logging.WARNING,  # Reduce noise in tests
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

def setup_test_environment():
    """Set up test environment variables"""
    os.environ.update({
        'DATABASE_URL': TEST_DATABASE_URL,
        'SECRET_KEY': 'test-secret-key',
        'SESSION_SECRET': 'test-session-secret'
    })
    os.environ.pop('ADMIN_API_TOKEN', None)
    os.environ.pop('REDIS_URL', None)
    os.environ.pop('BENCHMARKS_PATH', None)

def make_submission(event_value, value, birthday='1999-03-10', gender='male', user_id=1, raw_value=None):
    """Build a hydrated submission for a catalog event"""
    from services.scoring import catalog
    from services.scoring.types import Gender, Submission, User

    event = catalog.get_event(event_value)
    user = User(
        id=user_id,
        email=f'user{user_id}@example.com',
        birthday=birthday,
        gender=Gender(value=gender, label=gender.title()) if gender else None,
    )
    return Submission(
        user=user,
        event=event,
        raw_value=raw_value if raw_value is not None else str(value),
        value=float(value),
    )
