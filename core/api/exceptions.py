"""
Errors raised by the remote API client.
"""


class TransportError(Exception):
    """
    Any failure talking to the remote API.

    Covers connection problems, non-2xx responses and payloads that
    cannot be decoded. Callers only distinguish success from failure;
    the status code is kept for logging.
    """

    def __init__(self, message=None, status_code=None):
        super().__init__(message or '')
        self.message = message
        self.status_code = status_code

    def __str__(self):
        return self.message or 'Request to the API failed'


class UnauthorizedError(TransportError):
    """The API rejected the stored bearer token (HTTP 401)."""
