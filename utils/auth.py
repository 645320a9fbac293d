"""Authentication utilities for admin endpoints"""
import hmac
import time
from functools import wraps
from flask import request, jsonify, current_app
import logging

logger = logging.getLogger(__name__)

# Simple in-memory rate limiting
rate_limit_storage = {}

# Longest window any endpoint uses; older timestamps can never count again
RATE_LIMIT_MAX_WINDOW = 3600

def prune_rate_limit_storage(current_time=None, max_age_seconds=RATE_LIMIT_MAX_WINDOW):
    """Drop keys with no timestamps inside max_age_seconds"""
    current_time = current_time if current_time is not None else time.time()
    stale = [
        key for key, timestamps in rate_limit_storage.items()
        if not timestamps or current_time - max(timestamps) >= max_age_seconds
    ]
    for key in stale:
        del rate_limit_storage[key]
    return len(stale)

def check_admin_auth():
    """Check if the request has valid admin authentication"""
    admin_token = current_app.config.get('ADMIN_API_TOKEN')

    # Without a configured token admin endpoints stay open, but say so loudly
    if not admin_token:
        logger.warning("ADMIN_API_TOKEN not configured - admin endpoints are unprotected!")
        return True

    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return False

    # Support both Bearer token and API-Key formats
    if auth_header.startswith('Bearer '):
        provided_token = auth_header[7:]
    elif auth_header.startswith('API-Key '):
        provided_token = auth_header[8:]
    else:
        provided_token = auth_header

    return hmac.compare_digest(provided_token, admin_token)

def admin_required(f):
    """Decorator to require admin authentication for endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not check_admin_auth():
            logger.warning(f"Unauthorized access attempt to {request.endpoint} from {request.remote_addr}")
            return jsonify({
                "success": False,
                "error": "Unauthorized. Admin authentication required."
            }), 401
        return f(*args, **kwargs)
    return decorated_function

def rate_limit(max_requests=10, window_seconds=60):
    """Rate limiting decorator

    Args:
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            key = f"{request.remote_addr}:{request.endpoint}"
            current_time = time.time()
            prune_rate_limit_storage(current_time, max(window_seconds, RATE_LIMIT_MAX_WINDOW))

            timestamps = [
                timestamp for timestamp in rate_limit_storage.get(key, [])
                if current_time - timestamp < window_seconds
            ]

            if len(timestamps) >= max_requests:
                logger.warning(f"Rate limit exceeded for {request.remote_addr} on {request.endpoint}")
                rate_limit_storage[key] = timestamps
                return jsonify({
                    "success": False,
                    "error": f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
                }), 429

            timestamps.append(current_time)
            rate_limit_storage[key] = timestamps

            return f(*args, **kwargs)
        return decorated_function
    return decorator
