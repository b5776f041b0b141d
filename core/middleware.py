import logging
import os

import requests
from django.conf import settings
from django.http import JsonResponse

from core.api import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    UnauthorizedError,
)
from core.utils import login_redirect

logger = logging.getLogger(__name__)


class ApiSessionMiddleware:
    """
    Log the browser out when the API rejects the stored token.

    ApiClient flags the request (``request.api_session_expired``) when it
    sees a 401, even if the calling view or list controller absorbed the
    error. An UnauthorizedError escaping a view is handled the same way.
    HTMX requests get an ``HX-Redirect`` header instead of a 302.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if getattr(request, 'api_session_expired', False):
            return self._login_redirect(request)
        return response

    def process_exception(self, request, exception):
        if isinstance(exception, UnauthorizedError):
            request.session.pop(API_TOKEN_SESSION_KEY, None)
            request.session.pop(API_USER_SESSION_KEY, None)
            request.session[REDIRECT_AFTER_LOGIN_SESSION_KEY] = request.path
            return self._login_redirect(request)
        return None

    def _login_redirect(self, request):
        logger.info(f"API session expired on {request.path}, redirecting to login")
        return login_redirect(request)


class HealthCheckMiddleware:
    """
    Middleware to answer health check requests before anything else runs.

    Endpoints:
    - /health/ - Basic health check (for load balancers)
    - /health/ready/ - Readiness check (includes DB and the remote API)
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path in ['/health/', '/health', '/health/live/', '/health/live']:
            return JsonResponse({'status': 'healthy'})

        if request.path in ['/health/ready/', '/health/ready']:
            return self._readiness_check()

        return self.get_response(request)

    def _readiness_check(self):
        """Check if the app is ready to serve requests."""
        checks = {
            'database': self._check_database(),
            'api': self._check_api(),
        }

        all_healthy = all(c['status'] == 'healthy' for c in checks.values())
        status_code = 200 if all_healthy else 503

        return JsonResponse({
            'status': 'ready' if all_healthy else 'not_ready',
            'checks': checks,
            'version': os.getenv('APP_VERSION', 'unknown'),
        }, status=status_code)

    def _check_database(self):
        """Check database connectivity (sessions live there)."""
        try:
            from django.db import connection
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
            return {'status': 'healthy'}
        except Exception as e:
            return {'status': 'unhealthy', 'error': str(e)}

    def _check_api(self):
        """Check that the API host answers at all; any HTTP status counts."""
        try:
            requests.head(settings.API_BASE_URL, timeout=5)
            return {'status': 'healthy'}
        except requests.exceptions.RequestException as e:
            return {'status': 'unhealthy', 'error': str(e)}
