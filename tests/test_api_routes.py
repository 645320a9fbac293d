"""
Tests for API routes functionality.
"""

import pytest
import json
from datetime import date
from unittest.mock import patch
from app import create_app, db
from models import Event, Gender, Submission, User
from services.catalog_service import CatalogService
from tests import setup_test_environment
from utils import auth


@pytest.fixture
def app():
    """Create test Flask application"""
    setup_test_environment()
    auth.rate_limit_storage.clear()
    app = create_app(testing=True)

    with app.app_context():
        db.create_all()
        CatalogService.seed_catalog()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


def _birthday_for_age(age):
    today = date.today()
    return f"{today.year - age}-01-01"


@pytest.fixture
def athlete(app):
    """Male athlete, aged 25, with strength and endurance submissions"""
    male = Gender.query.filter_by(value='male').first()
    user = User(email='lifter@example.com', birthday=_birthday_for_age(25), gender=male)
    db.session.add(user)
    db.session.flush()

    events = {e.value: e for e in Event.query.all()}
    db.session.add_all([
        Submission(user_id=user.id, event_id=events['deadlift'].id, raw_value='300', value=300.0),
        Submission(user_id=user.id, event_id=events['deadlift'].id, raw_value='400', value=400.0),
        Submission(user_id=user.id, event_id=events['5k-run'].id, raw_value='22:30', value=1350.0),
    ])
    db.session.commit()
    return user.id


@pytest.fixture
def incomplete_profile(app):
    user = User(email='nobirthday@example.com')
    db.session.add(user)
    db.session.flush()
    deadlift = Event.query.filter_by(value='deadlift').first()
    db.session.add(Submission(user_id=user.id, event_id=deadlift.id, raw_value='400', value=400.0))
    db.session.commit()
    return user.id


class TestAPIHealthCheck:
    """Test API health check endpoint"""

    def test_health_check(self, client):
        response = client.get('/api/healthz')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['ok'] is True
        assert data['cache'] == 'SimpleCache'


class TestCatalogAPI:

    def test_get_catalog(self, client):
        response = client.get('/api/catalog')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['success'] is True
        assert len(data['domains']) == 6
        assert {e['value'] for e in data['events']} >= {'deadlift', '5k-run'}


class TestCohortAPI:

    def test_resolved_cohort(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/cohort')

        data = json.loads(response.data)
        assert response.status_code == 200
        assert data['cohort']['key'] == 'male_18_29'

    def test_unresolved_cohort_is_null(self, client, incomplete_profile):
        response = client.get(f'/api/users/{incomplete_profile}/cohort')

        data = json.loads(response.data)
        assert response.status_code == 200
        assert data['cohort'] is None

    def test_unknown_user(self, client):
        response = client.get('/api/users/9999/cohort')

        assert response.status_code == 404


class TestUsersAPI:
    """Test user profile endpoints"""

    def test_create_user(self, client):
        response = client.post('/api/users', json={
            'email': 'new@example.com', 'birthday': '1995-04-01', 'gender': 'female'
        })

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['user']['birthday'] == '1995-04-01'
        assert data['user']['gender']['value'] == 'female'

    @pytest.mark.parametrize('payload', [
        {'birthday': '1995-04-01'},
        {'email': 'not-an-email'},
        {'email': 'a@example.com', 'gender': 'robot'},
        {'email': 'a@example.com', 'birthday': '19950401'},
    ])
    def test_create_user_invalid(self, client, payload):
        response = client.post('/api/users', json=payload)

        assert response.status_code == 400
        assert json.loads(response.data)['success'] is False

    def test_duplicate_email(self, client, athlete):
        response = client.post('/api/users', json={'email': 'lifter@example.com'})

        assert response.status_code == 400

    def test_get_user(self, client, athlete):
        response = client.get(f'/api/users/{athlete}')

        assert response.status_code == 200
        assert json.loads(response.data)['user']['email'] == 'lifter@example.com'

    def test_profile_update_moves_cohort(self, client, incomplete_profile):
        response = client.patch(f'/api/users/{incomplete_profile}', json={
            'birthday': _birthday_for_age(45), 'gender': 'male'
        })
        assert response.status_code == 200

        cohort = json.loads(client.get(f'/api/users/{incomplete_profile}/cohort').data)['cohort']
        assert cohort['key'] == 'male_40_49'

    def test_update_invalid_birthday(self, client, athlete):
        response = client.patch(f'/api/users/{athlete}', json={'birthday': '1996/12/31'})

        assert response.status_code == 400

    def test_empty_update(self, client, athlete):
        assert client.patch(f'/api/users/{athlete}', json={}).status_code == 400

    def test_update_unknown_user(self, client):
        response = client.patch('/api/users/9999', json={'first_name': 'Sam'})

        assert response.status_code == 404


class TestScoresAPI:
    """Test domain score endpoints"""

    def test_all_domains(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/scores')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['scores'] == {
            'agility-coordination': 0,
            'anaerobic-power-speed': 0,
            'muscular-endurance': 0,
            'muscular-strength': 60,
            'olympic-lifting': 0,
            'steady-state-endurance': 50,
        }
        assert data['details']['muscular-strength']['status'] == 'scored'
        assert data['details']['olympic-lifting']['reason'] == 'no_submissions'

    def test_selected_domains(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/scores?domain=muscular-strength&domain=olympic-lifting')

        data = json.loads(response.data)
        assert data['scores'] == {'muscular-strength': 60, 'olympic-lifting': 0}

    def test_invalid_domain(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/scores?domain=yoga')

        assert response.status_code == 400
        assert json.loads(response.data)['success'] is False

    def test_single_domain(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/scores/muscular-strength')

        data = json.loads(response.data)
        assert data['score'] == 60
        assert data['result']['events'][0]['best_value'] == 400.0

    def test_missing_birthday_scores_zero(self, client, incomplete_profile):
        response = client.get(f'/api/users/{incomplete_profile}/scores/muscular-strength')

        data = json.loads(response.data)
        assert response.status_code == 200
        assert data['score'] == 0
        assert data['result']['reason'] == 'no_cohort'

    def test_store_failure_scores_zero(self, client, athlete):
        with patch('services.scoring.submission_store.SqlSubmissionStore.get_submissions_by_user_id',
                   side_effect=RuntimeError('db down')):
            response = client.get(f'/api/users/{athlete}/scores/muscular-strength')

        data = json.loads(response.data)
        assert response.status_code == 200
        assert data['score'] == 0
        assert data['result']['reason'] == 'fetch_failed'

    def test_core_score(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/core-score')

        data = json.loads(response.data)
        assert data['core_score'] == 55


class TestSubmissionsAPI:
    """Test submission endpoints"""

    def test_create_submission(self, client, athlete):
        response = client.post('/api/submissions', json={
            'user_id': athlete, 'event': 'back-squat', 'raw_value': '315'
        })

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['submission']['value'] == 315.0
        assert data['submission']['unit'] == 'pounds'

    def test_new_submission_changes_score(self, client, athlete):
        client.post('/api/submissions', json={'user_id': athlete, 'event': 'deadlift', 'raw_value': '552'})

        response = client.get(f'/api/users/{athlete}/scores/muscular-strength')

        assert json.loads(response.data)['score'] == 100

    def test_faster_run_raises_endurance_score(self, client, athlete):
        client.post('/api/submissions', json={'user_id': athlete, 'event': '5k-run', 'raw_value': '15:00'})

        response = client.get(f'/api/users/{athlete}/scores/steady-state-endurance')

        assert json.loads(response.data)['score'] == 100

    def test_missing_fields(self, client):
        response = client.post('/api/submissions', json={'event': 'deadlift'})

        assert response.status_code == 400

    def test_invalid_value(self, client, athlete):
        response = client.post('/api/submissions', json={
            'user_id': athlete, 'event': 'deadlift', 'raw_value': 'heavy'
        })

        assert response.status_code == 400
        assert 'Invalid numeric value' in json.loads(response.data)['error']

    def test_list_submissions(self, client, athlete):
        response = client.get(f'/api/users/{athlete}/submissions')

        data = json.loads(response.data)
        assert data['count'] == 3


class TestAdminAPI:

    def test_seed_without_token_configured(self, client):
        response = client.post('/api/admin/catalog/seed')

        assert response.status_code == 200
        assert sum(json.loads(response.data)['created'].values()) == 0

    def test_seed_requires_token(self, app, client):
        app.config['ADMIN_API_TOKEN'] = 'secret-token'

        assert client.post('/api/admin/catalog/seed').status_code == 401
        response = client.post('/api/admin/catalog/seed', headers={'Authorization': 'Bearer secret-token'})
        assert response.status_code == 200

    def test_seed_rate_limited(self, client):
        client.post('/api/admin/catalog/seed')
        client.post('/api/admin/catalog/seed')

        assert client.post('/api/admin/catalog/seed').status_code == 429


class TestRateLimitStorage:
    """Stale rate limit keys are dropped"""

    def test_prune_drops_expired_and_empty_keys(self):
        now = 10000.0
        auth.rate_limit_storage.clear()
        auth.rate_limit_storage.update({
            '10.0.0.1:api.create_submission': [now - 7200],
            '10.0.0.2:api.create_submission': [],
            '10.0.0.3:api.create_submission': [now - 30],
        })

        assert auth.prune_rate_limit_storage(now) == 2
        assert list(auth.rate_limit_storage) == ['10.0.0.3:api.create_submission']
        auth.rate_limit_storage.clear()

    def test_request_prunes_other_clients(self, client):
        auth.rate_limit_storage['10.9.9.9:api.create_submission'] = [1.0]

        client.post('/api/submissions', json={'event': 'deadlift'})

        assert '10.9.9.9:api.create_submission' not in auth.rate_limit_storage
        assert len(auth.rate_limit_storage) == 1
