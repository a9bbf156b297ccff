"""
Flask Web Application for KTM Transit Advisor

Provides the JSON API consumed by the route dashboard: route lookup,
the currently displayed result, search suggestions and health.
"""

from collections import OrderedDict
from datetime import datetime, timedelta
from threading import Lock
import logging
from logging.handlers import RotatingFileHandler
import time
import os
import sys
from typing import Optional

from flask import Flask, request, jsonify, session
import secrets
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_cors import CORS
from flask_talisman import Talisman
from config import get_config
from dependencies import get_container
from models import RouteLookupError
from route_errors import RouteResolutionError, USER_ERROR_MESSAGE
from route_service import DisplayState, DEFAULT_SUGGESTIONS

# Load configuration
config = get_config()

app = Flask(__name__)
app.secret_key = config.flask_secret_key
app.config['TESTING'] = config.testing

# Initialize limiter - will be enabled/disabled based on runtime configuration
limiter = Limiter(
    app=app,
    key_func=get_remote_address,
    default_limits=[],  # Set per-endpoint limits instead
    storage_uri="memory://",
    strategy="fixed-window"
)

# Configure CORS
if config.cors_enabled:
    CORS(app,
         origins=config.cors_origins,
         methods=['GET', 'POST', 'OPTIONS'],
         allow_headers=['Content-Type', 'Authorization'],
         supports_credentials=True,
         max_age=600)


# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Console handler
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler.setFormatter(console_formatter)
logger.addHandler(console_handler)

# File handler for production (if not in debug mode)
if not app.debug and not config.testing:
    os.makedirs(os.path.dirname(config.log_file), exist_ok=True)
    file_handler = RotatingFileHandler(config.log_file, maxBytes=config.log_max_bytes, backupCount=config.log_backup_count)
    file_handler.setLevel(getattr(logging, config.log_level))
    file_formatter = logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)
    logger.info('KTM Transit Advisor startup')

# Configure HTTPS enforcement with Talisman (disabled in debug/testing mode)
debug_mode = '--debug' in sys.argv or config.flask_debug

if not config.testing and not debug_mode and config.https_enabled:
    Talisman(
        app,
        force_https=True,
        strict_transport_security=True,
        strict_transport_security_max_age=31536000,  # 1 year
        content_security_policy={
            'default-src': ["'self'"],
            'img-src': ["'self'", 'data:', 'https:'],
            'connect-src': ["'self'"],
        }
    )
    logger.info('HTTPS enforcement enabled with Talisman (strict transport security, CSP headers)')
else:
    if config.testing:
        logger.debug('HTTPS enforcement disabled (testing mode)')
    elif debug_mode:
        logger.info('HTTPS enforcement disabled (debug mode)')
    else:
        logger.info('HTTPS enforcement disabled by configuration (HTTPS_ENABLED=false)')


# Display state per session with LRU eviction
display_states = OrderedDict()
session_metadata = {}  # Track last access time
states_lock = Lock()


def validate_query_content(query: str) -> tuple[bool, str]:
    """Validate a route query and return (is_valid, error_message)."""
    if not query or not query.strip():
        return False, "Query cannot be empty"

    if len(query) > config.max_query_length:
        return False, f"Query too long (max {config.max_query_length} characters)"

    if len(query.strip()) < config.min_query_length:
        return False, f"Query too short (min {config.min_query_length} character)"

    # Check for suspicious patterns (basic XSS prevention)
    suspicious_patterns = ['<script', 'javascript:', 'onerror=', 'onclick=', 'onload=']
    query_lower = query.lower()
    for pattern in suspicious_patterns:
        if pattern in query_lower:
            return False, "Query contains invalid content"

    return True, ""


def _cleanup_expired_sessions():
    """Remove sessions older than configured TTL."""
    now = datetime.now()
    expired = [
        sid for sid, last_access in session_metadata.items()
        if now - last_access > timedelta(hours=config.session_ttl_hours)
    ]
    if expired:
        logger.info(f"Cleaning up {len(expired)} expired sessions")
    for sid in expired:
        display_states.pop(sid, None)
        session_metadata.pop(sid, None)


def get_or_create_display_state(session_id) -> DisplayState:
    """Get the display state for a session, creating it with LRU eviction."""
    with states_lock:
        _cleanup_expired_sessions()

        if session_id in display_states:
            display_states.move_to_end(session_id)
            session_metadata[session_id] = datetime.now()
            return display_states[session_id]

        if len(display_states) >= config.max_sessions:
            oldest_id, _ = display_states.popitem(last=False)
            session_metadata.pop(oldest_id, None)
            logger.info(f"LRU eviction: removed session {oldest_id[:8]}... (total sessions: {len(display_states)})")

        display_states[session_id] = DisplayState()
        session_metadata[session_id] = datetime.now()
        logger.info(f"Created display state for session {session_id[:8]}... (total sessions: {len(display_states)})")
        return display_states[session_id]


def get_display_state(session_id) -> Optional[DisplayState]:
    """Get an existing session's display state and mark the session as recently used."""
    with states_lock:
        _cleanup_expired_sessions()
        state = display_states.get(session_id)
        if state is not None:
            display_states.move_to_end(session_id)
            session_metadata[session_id] = datetime.now()
        return state


def _error_response(status: int):
    body = RouteLookupError(
        error=USER_ERROR_MESSAGE,
        message="Verify the bus number or route name and search again."
    ).model_dump()
    body['success'] = False
    return jsonify(body), status


@app.route('/')
def index():
    """Describe the API."""
    logger.debug(f"Index page accessed from {request.remote_addr}")
    return jsonify({
        'name': 'KTM Transit Advisor',
        'endpoints': ['/api/route', '/api/route/current', '/api/suggestions', '/api/health'],
    })


@app.route('/api/suggestions')
def suggestions():
    """Example queries shown before the first search."""
    return jsonify({'suggestions': DEFAULT_SUGGESTIONS})


@app.route('/api/health')
def health():
    """Basic liveness and configuration status."""
    return jsonify({
        'status': 'ok',
        'openai_configured': not config.validate_required_keys(),
        'sessions': len(display_states),
        'timestamp': datetime.now().isoformat(),
    })


@app.route('/api/route', methods=['POST'])
@limiter.limit(config.rate_limit_route, exempt_when=lambda: app.config.get('TESTING', False) or not config.rate_limit_enabled)
def lookup_route():
    """Resolve a bus number or route name into route, crowd series and timeline."""
    start_time = time.time()

    if not request.is_json:
        logger.warning("Invalid content type for route lookup")
        return jsonify({'error': 'Content-Type must be application/json', 'success': False}), 400

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        logger.warning("Invalid JSON format for route lookup")
        return jsonify({'error': 'Invalid JSON format', 'success': False}), 400

    query = data.get('query', '')
    if not isinstance(query, str):
        return jsonify({'error': 'Query must be a string', 'success': False}), 400
    query = query.strip()

    is_valid, error_msg = validate_query_content(query)
    if not is_valid:
        logger.warning(f"Invalid route query: {error_msg}")
        return jsonify({'error': error_msg, 'success': False}), 400

    if 'session_id' not in session:
        session['session_id'] = secrets.token_hex(16)
        logger.info(f"New session created: {session['session_id'][:8]}... from {request.remote_addr}")
    session_id = session['session_id']

    try:
        service = get_container().get_route_service()
    except ValueError as e:
        logger.error(f"Route service initialization failed: {e}")
        return jsonify({'error': str(e), 'success': False}), 500

    state = get_or_create_display_state(session_id)
    token = state.begin_query()
    logger.info(f"Route lookup #{token} for session {session_id[:8]}...: {query[:50]}")

    try:
        result = service.lookup(query)
    except RouteResolutionError as e:
        duration = time.time() - start_time
        logger.warning(f"Route lookup #{token} failed after {duration:.2f}s: {e.kind}: {e.message}")
        if not state.fail(token):
            return jsonify({'error': 'Superseded by a newer search', 'superseded': True, 'success': False}), 409
        return _error_response(502)
    except Exception as e:
        logger.error(f"Route lookup #{token} error: {e}", exc_info=True)
        if not state.fail(token):
            return jsonify({'error': 'Superseded by a newer search', 'superseded': True, 'success': False}), 409
        return _error_response(500)

    if not state.publish(token, result):
        return jsonify({'error': 'Superseded by a newer search', 'superseded': True, 'success': False}), 409

    duration = time.time() - start_time
    logger.info(f"Route lookup #{token} resolved to {result.route.bus_number} in {duration:.2f}s")
    body = result.model_dump(mode='json', by_alias=True)
    body['success'] = True
    return jsonify(body)


@app.route('/api/route/current')
def current_route():
    """The result currently on display for this session."""
    session_id = session.get('session_id')
    state = get_display_state(session_id) if session_id else None
    current = state.current() if state is not None else None
    if current is None:
        return jsonify({'error': 'No route displayed', 'success': False}), 404
    body = current.model_dump(mode='json', by_alias=True)
    body['success'] = True
    return jsonify(body)


if __name__ == '__main__':
    werkzeug_logger = logging.getLogger('werkzeug')

    class TLSErrorFilter(logging.Filter):
        def filter(self, record):
            # "Bad request version" errors are TLS handshakes against the HTTP server
            return 'Bad request version' not in record.getMessage()

    werkzeug_logger.addFilter(TLSErrorFilter())

    logger.info(f'Starting KTM Transit Advisor on http://{config.flask_host}:{config.flask_port}')
    logger.info(f'Debug mode: {debug_mode}')
    logger.info(f'Session limits: MAX_SESSIONS={config.max_sessions}, SESSION_TTL_HOURS={config.session_ttl_hours}')

    if debug_mode:
        logger.warning('Running in DEBUG mode - not suitable for production!')

    missing_keys = config.validate_required_keys()
    if missing_keys:
        logger.warning(f'Missing recommended configuration: {", ".join(missing_keys)}')

    app.run(debug=debug_mode, host=config.flask_host, port=config.flask_port)
