"""
HTTP client for the classroom REST API.

Every request carries the bearer token stored in the user's session.
Failures of any kind surface as TransportError; a 401 additionally
triggers the ``on_unauthorized`` hook so the session can be logged out.
"""

import logging
from typing import Callable, Dict, Optional

import requests
from django.conf import settings

from .exceptions import TransportError, UnauthorizedError

logger = logging.getLogger(__name__)

API_TOKEN_SESSION_KEY = 'api_token'
API_USER_SESSION_KEY = 'api_user'
REDIRECT_AFTER_LOGIN_SESSION_KEY = 'redirect_after_login'

# Marks a 2xx response whose body is not JSON.
_UNDECODABLE = object()


class ApiClient:
    """Thin wrapper around a requests.Session bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30,
        on_unauthorized: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict:
        headers = {'Content-Type': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def log_request(self, method: str, endpoint: str, data: Dict = None):
        """Log API request for debugging."""
        logger.info(f"API Request: {method} {endpoint}")
        if data:
            logger.debug(f"Request data: {data}")

    def log_response(self, method: str, endpoint: str, status_code: int, body=None):
        """Log API response for debugging."""
        logger.info(f"API Response: {status_code} from {method} {endpoint}")
        logger.debug(f"Response data: {body}")

    def request(self, method: str, path: str, params: Dict = None, json: Dict = None):
        """
        Send a request and return the decoded JSON body.

        Returns None for empty bodies (e.g. DELETE responses).

        Raises:
            UnauthorizedError: the API answered 401
            TransportError: network failure, non-2xx status or bad JSON
        """
        endpoint = self.build_url(path)
        self.log_request(method, endpoint, json)

        try:
            response = self.session.request(
                method,
                endpoint,
                headers=self._get_headers(),
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"API timeout: {method} {endpoint}")
            raise TransportError("Connection timeout")
        except requests.exceptions.RequestException as e:
            logger.warning(f"API connection error: {method} {endpoint}: {e}")
            raise TransportError(f"Connection error: {str(e)}")

        body = self._decode(response)
        self.log_response(method, endpoint, response.status_code, body)

        if response.status_code == 401:
            if self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError(
                self._error_message(body) or "Your session has expired. Please log in again.",
                status_code=401,
            )

        if not 200 <= response.status_code < 300:
            raise TransportError(
                self._error_message(body) or f"{method} {path} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        if body is _UNDECODABLE:
            raise TransportError(
                f"Invalid response from {method} {path}",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _decode(response):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return _UNDECODABLE

    @staticmethod
    def _error_message(body) -> Optional[str]:
        """Pull the server's ``message`` field out of an error body."""
        if isinstance(body, dict):
            message = body.get('message')
            if message:
                return str(message)
        return None

    def get(self, path: str, params: Dict = None):
        return self.request('GET', path, params=params)

    def post(self, path: str, data: Dict = None):
        return self.request('POST', path, json=data)

    def put(self, path: str, data: Dict = None):
        return self.request('PUT', path, json=data)

    def delete(self, path: str):
        return self.request('DELETE', path)


def client_for_request(request) -> ApiClient:
    """
    Build an ApiClient for the current request.

    The token is read from the session on every call. On a 401 the stored
    credentials are dropped, the current path is remembered for after the
    next login, and the request is flagged so ApiSessionMiddleware can send
    the browser to the login screen.
    """

    def on_unauthorized():
        request.session.pop(API_TOKEN_SESSION_KEY, None)
        request.session.pop(API_USER_SESSION_KEY, None)
        request.session[REDIRECT_AFTER_LOGIN_SESSION_KEY] = request.path
        request.api_session_expired = True

    return ApiClient(
        settings.API_BASE_URL,
        token=request.session.get(API_TOKEN_SESSION_KEY),
        timeout=settings.API_TIMEOUT,
        on_unauthorized=on_unauthorized,
    )
