import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from services.scoring.benchmarks import BenchmarkTable, get_benchmark_table
from services.scoring.cohort_resolver import CohortResolver
from services.scoring.domain_aggregator import DomainAggregator
from services.scoring.score_calculator import round_half_up
from services.scoring.types import (
    FETCH_FAILED,
    NO_COHORT,
    NO_SUBMISSIONS,
    Cohort,
    DomainScore,
    Submission,
    User,
)

logger = logging.getLogger(__name__)

class ScoringService:
    """Main scoring service - coordinates cohort resolution and domain aggregation

    Collaborators are injected:
    - submission_store: anything with get_submissions_by_user_id(user_id)
    - benchmarks: BenchmarkTable with the poor/elite pairs
    - cohort_resolver: CohortResolver over the cohort directory

    Missing data never raises: every failure degrades to an unscoreable
    DomainScore, and the integer accessors coerce those to 0.
    """

    def __init__(self, submission_store, benchmarks: Optional[BenchmarkTable] = None,
                 cohort_resolver: Optional[CohortResolver] = None):
        self.submission_store = submission_store
        self.benchmarks = benchmarks if benchmarks is not None else get_benchmark_table()
        self.cohort_resolver = cohort_resolver or CohortResolver()
        self.aggregator = DomainAggregator(self.benchmarks)

    def get_user_cohort(self, user: Optional[User], today: Optional[date] = None) -> Optional[Cohort]:
        """Cohort for display purposes; None when it cannot be resolved"""
        return self.cohort_resolver.resolve(user, today=today)

    def get_user_domain_score(self, user_id, domain_value: str, today: Optional[date] = None) -> int:
        return self.get_user_domain_result(user_id, domain_value, today=today).as_int()

    def get_user_domain_scores(self, user_id, domain_values: Sequence[str],
                               today: Optional[date] = None) -> Dict[str, int]:
        results = self.get_user_domain_results(user_id, domain_values, today=today)
        return {domain: result.as_int() for domain, result in results.items()}

    def get_user_domain_result(self, user_id, domain_value: str, today: Optional[date] = None) -> DomainScore:
        return self.get_user_domain_results(user_id, [domain_value], today=today)[domain_value]

    def get_user_domain_results(self, user_id, domain_values: Sequence[str],
                                today: Optional[date] = None) -> Dict[str, DomainScore]:
        """Tagged results for each requested domain, fetching submissions once"""
        submissions = self._fetch_submissions(user_id)
        if submissions is None:
            return {domain: DomainScore.unscoreable(domain, FETCH_FAILED) for domain in domain_values}

        results = {}
        cohort_cache: Dict[str, Optional[Cohort]] = {}

        for domain_value in domain_values:
            in_domain = [s for s in submissions if s.event.domain.value == domain_value]
            if not in_domain:
                results[domain_value] = DomainScore.unscoreable(domain_value, NO_SUBMISSIONS)
                continue

            # Submissions carry a snapshot of the user; resolve once per call
            if 'cohort' not in cohort_cache:
                cohort_cache['cohort'] = self.get_user_cohort(in_domain[0].user, today=today)
            cohort = cohort_cache['cohort']

            if cohort is None:
                logger.info(f"Cannot resolve cohort for user {user_id}; domain '{domain_value}' unscored")
                results[domain_value] = DomainScore.unscoreable(domain_value, NO_COHORT)
                continue

            results[domain_value] = self.aggregator.score_domain(in_domain, cohort, domain_value)

        scored = {d: r.value for d, r in results.items() if r.is_scored}
        logger.info(f"Domain scores for user {user_id}: {scored}")
        return results

    def get_user_core_score(self, user_id, domain_values: Sequence[str], today: Optional[date] = None) -> int:
        """Rounded mean over the domains that could be scored (0 when none)"""
        results = self.get_user_domain_results(user_id, domain_values, today=today)
        values = [r.value for r in results.values() if r.is_scored]
        if not values:
            return 0
        return round_half_up(sum(values) / len(values))

    def _fetch_submissions(self, user_id) -> Optional[List[Submission]]:
        try:
            return list(self.submission_store.get_submissions_by_user_id(user_id))
        except Exception as e:
            logger.error(f"Failed to fetch submissions for user {user_id}: {str(e)}")
            return None
