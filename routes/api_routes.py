import logging
from flask import Blueprint, jsonify, request
from models import User
from app import db
from services.scoring.hydration import user_from_row
from utils.auth import admin_required, rate_limit
from utils.cache import get_cache_stats
from utils.validators import validate_domains, validate_submission, validate_user_create, validate_user_update

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)

def _get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return None, (jsonify({"success": False, "error": f"User {user_id} not found"}), 404)
    return user, None

@api_bp.route('/healthz')
def health_check():
    """API health check"""
    return jsonify({"ok": True, "cache": get_cache_stats()['backend']})

@api_bp.route('/catalog')
def get_catalog():
    """Domains, events, unit types and cohorts"""
    try:
        from services.catalog_service import CatalogService
        return jsonify({"success": True, **CatalogService.get_catalog()})
    except Exception as e:
        logger.error(f"Failed to build catalog: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500

@api_bp.route('/users', methods=['POST'])
@rate_limit(max_requests=10, window_seconds=60)
def create_user():
    """Register a user profile"""
    try:
        data = validate_user_create(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.user_service import UserService

    try:
        user = UserService.create_user(**data)
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        logger.error(f"Failed to create user: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500

    return jsonify({"success": True, "user": user.to_dict()}), 201

@api_bp.route('/users/<int:user_id>')
def get_user(user_id):
    user, error = _get_user_or_404(user_id)
    if error:
        return error
    return jsonify({"success": True, "user": user.to_dict()})

@api_bp.route('/users/<int:user_id>', methods=['PATCH'])
def update_user(user_id):
    """Update profile fields (birthday and gender change the user's cohort)"""
    try:
        changes = validate_user_update(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.user_service import UserService

    try:
        user = UserService.update_user(user_id, changes)
    except LookupError as e:
        return jsonify({"success": False, "error": str(e)}), 404
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500

    return jsonify({"success": True, "user": user.to_dict()})

@api_bp.route('/users/<int:user_id>/cohort')
def get_user_cohort(user_id):
    """Cohort the user currently falls into, or null when unresolvable"""
    user, error = _get_user_or_404(user_id)
    if error:
        return error

    from services.scoring_service import build_scoring_service

    cohort = build_scoring_service().get_user_cohort(user_from_row(user))
    return jsonify({
        "success": True,
        "user_id": user_id,
        "cohort": cohort.to_dict() if cohort else None
    })

@api_bp.route('/users/<int:user_id>/scores')
def get_user_scores(user_id):
    """Scores for the requested domains (all catalog domains by default)"""
    user, error = _get_user_or_404(user_id)
    if error:
        return error

    try:
        domains = validate_domains(request.args.getlist('domain'))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.scoring_service import build_scoring_service

    results = build_scoring_service().get_user_domain_results(user_id, domains)
    return jsonify({
        "success": True,
        "user_id": user_id,
        "scores": {domain: result.as_int() for domain, result in results.items()},
        "details": {domain: result.to_dict() for domain, result in results.items()}
    })

@api_bp.route('/users/<int:user_id>/scores/<domain>')
def get_user_domain_score(user_id, domain):
    """Score for a single domain"""
    user, error = _get_user_or_404(user_id)
    if error:
        return error

    try:
        validate_domains([domain])
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.scoring_service import build_scoring_service

    result = build_scoring_service().get_user_domain_result(user_id, domain)
    return jsonify({
        "success": True,
        "user_id": user_id,
        "domain": domain,
        "score": result.as_int(),
        "result": result.to_dict()
    })

@api_bp.route('/users/<int:user_id>/core-score')
def get_user_core_score(user_id):
    """Mean of the scored domains"""
    user, error = _get_user_or_404(user_id)
    if error:
        return error

    try:
        domains = validate_domains(request.args.getlist('domain'))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.scoring_service import build_scoring_service

    return jsonify({
        "success": True,
        "user_id": user_id,
        "core_score": build_scoring_service().get_user_core_score(user_id, domains)
    })

@api_bp.route('/users/<int:user_id>/submissions')
def list_user_submissions(user_id):
    """Submission history, newest first"""
    user, error = _get_user_or_404(user_id)
    if error:
        return error

    from services.submission_service import SubmissionService

    submissions = SubmissionService.list_submissions(user_id)
    return jsonify({
        "success": True,
        "count": len(submissions),
        "submissions": [s.to_dict() for s in submissions]
    })

@api_bp.route('/submissions', methods=['POST'])
@rate_limit(max_requests=30, window_seconds=60)
def create_submission():
    """Record a new performance submission"""
    try:
        data = validate_submission(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    from services.submission_service import SubmissionService

    try:
        submission = SubmissionService.create_submission(
            user_id=data['user_id'],
            event_value=data['event'],
            raw_value=data['raw_value'],
            unit_value=data.get('unit'),
        )
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except Exception as e:
        logger.error(f"Failed to create submission: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500

    return jsonify({"success": True, "submission": submission.to_dict()}), 201

@api_bp.route('/admin/catalog/seed', methods=['POST'])
@admin_required
@rate_limit(max_requests=2, window_seconds=300)  # 2 requests per 5 minutes
def seed_catalog():
    """Insert any missing catalog rows"""
    try:
        from services.catalog_service import CatalogService

        created = CatalogService.seed_catalog()
        return jsonify({"success": True, "created": created})
    except Exception as e:
        logger.error(f"Catalog seeding failed: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500
