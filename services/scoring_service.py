# Default wiring for the modular scoring engine in services/scoring/
# Routes and scripts build the service here; tests construct it with fakes.

from flask import current_app, has_app_context
from services.scoring.scoring_service import ScoringService
from services.scoring.benchmarks import get_benchmark_table
from services.scoring.submission_store import SqlSubmissionStore

def build_scoring_service(submission_store=None, benchmarks_path: str = None) -> ScoringService:
    """
    Build a ScoringService backed by the application database

    The benchmark table comes from BENCHMARKS_PATH in the app config when an
    application context is active, otherwise from the bundled YAML file.
    """
    if benchmarks_path is None and has_app_context():
        benchmarks_path = current_app.config.get('BENCHMARKS_PATH')

    return ScoringService(
        submission_store=submission_store or SqlSubmissionStore(),
        benchmarks=get_benchmark_table(benchmarks_path),
    )

__all__ = ['ScoringService', 'build_scoring_service']
