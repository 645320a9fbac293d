"""
Tests for submission capture and raw value parsing.
"""

import pytest
from app import create_app, db
from models import Gender, User
from services.catalog_service import CatalogService
from services.submission_service import SubmissionService, parse_number, parse_time_to_seconds
from tests import setup_test_environment


@pytest.fixture
def app():
    """Create test Flask application"""
    setup_test_environment()
    app = create_app(testing=True)

    with app.app_context():
        db.create_all()
        CatalogService.seed_catalog()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def user_id(app):
    female = Gender.query.filter_by(value='female').first()
    user = User(email='runner@example.com', birthday='1988-11-02', gender=female)
    db.session.add(user)
    db.session.commit()
    return user.id


class TestParsing:

    @pytest.mark.parametrize('raw,expected', [
        ('95', 95.0),
        ('1:35', 95.0),
        ('25:00', 1500.0),
        ('1:02:03', 3723.0),
        ('0:58.4', 58.4),
    ])
    def test_clock_formats(self, raw, expected):
        assert parse_time_to_seconds(raw) == pytest.approx(expected)

    def test_bare_minutes(self):
        assert parse_time_to_seconds('25', 'minutes') == 1500.0

    @pytest.mark.parametrize('raw', ['', 'fast', '1:75', '1:60:00', '-5'])
    def test_invalid_times(self, raw):
        with pytest.raises(ValueError):
            parse_time_to_seconds(raw)

    def test_invalid_time_unit(self):
        with pytest.raises(ValueError):
            parse_time_to_seconds('10', 'pounds')

    @pytest.mark.parametrize('raw', ['abc', '-1', 'nan', 'inf'])
    def test_invalid_numbers(self, raw):
        with pytest.raises(ValueError):
            parse_number(raw)


class TestSubmissionService:
    """Test cases for SubmissionService"""

    def test_weight_submission_defaults_unit(self, user_id):
        submission = SubmissionService.create_submission(user_id, 'deadlift', ' 225 ')

        assert submission.id is not None
        assert submission.raw_value == '225'
        assert submission.value == 225.0
        assert submission.unit.value == 'pounds'

    def test_time_submission_stored_in_seconds(self, user_id):
        submission = SubmissionService.create_submission(user_id, '5k-run', '24:30')

        assert submission.value == 1470.0
        assert submission.raw_value == '24:30'
        assert submission.unit is None

    def test_time_submission_in_minutes(self, user_id):
        submission = SubmissionService.create_submission(user_id, '10k-row', '42', unit_value='minutes')

        assert submission.value == 2520.0

    def test_unit_must_match_unit_type(self, user_id):
        with pytest.raises(ValueError, match='not valid'):
            SubmissionService.create_submission(user_id, 'deadlift', '225', unit_value='seconds')

    def test_unknown_event(self, user_id):
        with pytest.raises(ValueError, match='Unknown event'):
            SubmissionService.create_submission(user_id, 'bench-press', '225')

    def test_unknown_user(self, app):
        with pytest.raises(ValueError, match='Unknown user'):
            SubmissionService.create_submission(9999, 'deadlift', '225')

    def test_list_submissions_newest_first(self, user_id):
        first = SubmissionService.create_submission(user_id, 'push-ups', '40')
        second = SubmissionService.create_submission(user_id, 'push-ups', '45')

        listed = SubmissionService.list_submissions(user_id)

        assert [s.id for s in listed] == [second.id, first.id]
