"""
Tests for the scoring service facade.
"""

import pytest
from datetime import date
from unittest.mock import Mock
from services.scoring.benchmarks import BenchmarkTable
from services.scoring.cohort_resolver import CohortResolver
from services.scoring.scoring_service import ScoringService
from services.scoring.types import FETCH_FAILED, NO_COHORT, NO_SUBMISSIONS, BenchmarkLevel, Gender, User
from tests import make_submission

TODAY = date(2026, 6, 15)


@pytest.fixture
def benchmarks():
    return BenchmarkTable({
        'deadlift': {'male_18_29': BenchmarkLevel(poor=173, elite=552)},
        'push-ups': {'male_18_29': BenchmarkLevel(poor=0, elite=100)},
        'air-squats': {'male_18_29': BenchmarkLevel(poor=0, elite=100)},
        '5k-run': {'male_18_29': BenchmarkLevel(poor=1800, elite=900)},
    })


@pytest.fixture
def store():
    store = Mock()
    store.get_submissions_by_user_id.return_value = [
        make_submission('deadlift', 300),
        make_submission('deadlift', 400),
        make_submission('push-ups', 60),
        make_submission('air-squats', 80),
        make_submission('5k-run', 1350),
    ]
    return store


@pytest.fixture
def scoring_service(store, benchmarks):
    return ScoringService(submission_store=store, benchmarks=benchmarks)


class TestScoringService:
    """Test cases for ScoringService"""

    def test_domain_score(self, scoring_service, store):
        score = scoring_service.get_user_domain_score(1, 'muscular-strength', today=TODAY)

        assert score == 60
        store.get_submissions_by_user_id.assert_called_once_with(1)

    def test_domain_scores_fetch_once(self, scoring_service, store):
        scores = scoring_service.get_user_domain_scores(
            1, ['muscular-strength', 'muscular-endurance', 'steady-state-endurance', 'olympic-lifting'],
            today=TODAY,
        )

        assert scores == {
            'muscular-strength': 60,
            'muscular-endurance': 70,
            'steady-state-endurance': 50,
            'olympic-lifting': 0,
        }
        assert store.get_submissions_by_user_id.call_count == 1

    def test_domain_results_are_tagged(self, scoring_service):
        results = scoring_service.get_user_domain_results(1, ['muscular-strength', 'olympic-lifting'], today=TODAY)

        assert results['muscular-strength'].is_scored
        assert results['olympic-lifting'].reason == NO_SUBMISSIONS

    def test_empty_domain_skips_cohort_resolution(self, store, benchmarks):
        resolver = Mock(spec=CohortResolver)
        service = ScoringService(submission_store=store, benchmarks=benchmarks, cohort_resolver=resolver)

        assert service.get_user_domain_score(1, 'agility-coordination', today=TODAY) == 0
        resolver.resolve.assert_not_called()

    def test_cohort_resolved_once_per_call(self, store, benchmarks):
        resolver = CohortResolver()
        resolver.resolve = Mock(wraps=resolver.resolve)
        service = ScoringService(submission_store=store, benchmarks=benchmarks, cohort_resolver=resolver)

        service.get_user_domain_scores(1, ['muscular-strength', 'muscular-endurance'], today=TODAY)

        assert resolver.resolve.call_count == 1

    def test_missing_birthday_returns_zero(self, benchmarks):
        store = Mock()
        store.get_submissions_by_user_id.return_value = [make_submission('deadlift', 400, birthday=None)]
        service = ScoringService(submission_store=store, benchmarks=benchmarks)

        assert service.get_user_domain_score(1, 'muscular-strength', today=TODAY) == 0
        assert service.get_user_domain_result(1, 'muscular-strength', today=TODAY).reason == NO_COHORT

    def test_missing_gender_returns_zero(self, benchmarks):
        store = Mock()
        store.get_submissions_by_user_id.return_value = [make_submission('deadlift', 400, gender=None)]
        service = ScoringService(submission_store=store, benchmarks=benchmarks)

        assert service.get_user_domain_score(1, 'muscular-strength', today=TODAY) == 0

    def test_cohort_without_benchmarks_returns_zero(self, benchmarks):
        store = Mock()
        store.get_submissions_by_user_id.return_value = [
            make_submission('deadlift', 400, birthday='1950-01-01')
        ]
        service = ScoringService(submission_store=store, benchmarks=benchmarks)

        assert service.get_user_domain_score(1, 'muscular-strength', today=TODAY) == 0

    def test_store_failure_returns_zero(self, benchmarks):
        store = Mock()
        store.get_submissions_by_user_id.side_effect = RuntimeError("database unavailable")
        service = ScoringService(submission_store=store, benchmarks=benchmarks)

        assert service.get_user_domain_score(1, 'muscular-strength') == 0
        results = service.get_user_domain_results(1, ['muscular-strength', 'olympic-lifting'])
        assert {r.reason for r in results.values()} == {FETCH_FAILED}

    def test_core_score_averages_scored_domains(self, scoring_service):
        core = scoring_service.get_user_core_score(
            1, ['muscular-strength', 'muscular-endurance', 'steady-state-endurance', 'olympic-lifting'],
            today=TODAY,
        )

        # (60 + 70 + 50) / 3, olympic-lifting has no submissions
        assert core == 60

    def test_core_score_zero_when_nothing_scored(self, benchmarks):
        store = Mock()
        store.get_submissions_by_user_id.return_value = []
        service = ScoringService(submission_store=store, benchmarks=benchmarks)

        assert service.get_user_core_score(1, ['muscular-strength']) == 0

    def test_get_user_cohort(self, scoring_service):
        user = User(id=1, birthday='2000-01-01', gender=Gender(value='female', label='Female'))

        assert scoring_service.get_user_cohort(user, today=TODAY).key == 'female_18_29'
        assert scoring_service.get_user_cohort(User(id=2), today=TODAY) is None

    def test_default_benchmarks(self, store):
        service = ScoringService(submission_store=store)

        assert service.get_user_domain_score(1, 'muscular-strength', today=TODAY) == 60
