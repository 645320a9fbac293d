import logging
from typing import Dict, List, Sequence

from services.scoring.benchmarks import BenchmarkTable
from services.scoring.score_calculator import direction_for, is_higher_better, normalize, round_half_up, select_best
from services.scoring.types import (
    NO_BENCHMARKS,
    NO_SUBMISSIONS,
    Cohort,
    DomainScore,
    EventScore,
    Submission,
)

logger = logging.getLogger(__name__)

class DomainAggregator:
    """Scores one domain as the rounded mean of its per-event normalized scores"""

    def __init__(self, benchmarks: BenchmarkTable):
        self.benchmarks = benchmarks

    def score_domain(self, submissions: Sequence[Submission], cohort: Cohort, domain_value: str) -> DomainScore:
        # Callers pass submissions already filtered to the domain; re-filtering is cheap
        in_domain = [s for s in submissions if s.event.domain.value == domain_value]
        if not in_domain:
            return DomainScore.unscoreable(domain_value, NO_SUBMISSIONS)

        event_scores = []
        for event_value, event_submissions in self._group_by_event(in_domain).items():
            event_score = self._score_event(event_value, event_submissions, cohort)
            if event_score is not None:
                event_scores.append(event_score)

        if not event_scores:
            logger.info(f"No benchmarks matched any event in domain '{domain_value}' for cohort {cohort.key}")
            return DomainScore.unscoreable(domain_value, NO_BENCHMARKS)

        mean = sum(e.score for e in event_scores) / len(event_scores)
        return DomainScore.scored(domain_value, round_half_up(mean), event_scores)

    def _group_by_event(self, submissions: Sequence[Submission]) -> Dict[str, List[Submission]]:
        grouped: Dict[str, List[Submission]] = {}
        for submission in submissions:
            grouped.setdefault(submission.event.value, []).append(submission)
        return grouped

    def _score_event(self, event_value: str, submissions: List[Submission], cohort: Cohort):
        unit_type_value = submissions[0].event.unit_type.value
        higher_is_better = is_higher_better(unit_type_value)
        best = select_best(submissions, higher_is_better)

        benchmark = self.benchmarks.lookup(event_value, cohort.key)
        if benchmark is None:
            # A benchmark gap excludes the event rather than counting it as zero
            logger.debug(f"No benchmark for event '{event_value}' in cohort {cohort.key}; skipping")
            return None

        score = normalize(best.value, benchmark.poor, benchmark.elite, direction_for(unit_type_value))
        logger.debug(f"Event '{event_value}': best={best.value} poor={benchmark.poor} "
                     f"elite={benchmark.elite} score={score:.1f}")
        return EventScore(
            event=event_value,
            best_value=best.value,
            poor=benchmark.poor,
            elite=benchmark.elite,
            higher_is_better=higher_is_better,
            score=score,
        )
