"""
HTTP client for the sync service.

Every request asks the token provider for a fresh ID token; nothing is
cached here. Failures (network, non-2xx status, undecodable body, token
provider errors) are logged and reported as None/False, never raised.
"""

import logging
from typing import Any, Callable, Dict, Optional

import requests

from config import API_BASE_URL, HTTP_TIMEOUT

TokenProvider = Callable[[], Optional[str]]


class SyncClient:
    """Wraps POST /user, GET /data and PUT /data."""

    def __init__(self, token_provider: TokenProvider, base_url: str = API_BASE_URL,
                 session=None, timeout: float = HTTP_TIMEOUT):
        """
        Args:
            token_provider: callable returning a bearer token, called per request
            base_url: base URL of the sync service
            session: object with a requests-compatible ``request`` method
            timeout: per-request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout
        self.last_status: Optional[int] = None
        self.last_error: Optional[str] = None

    def _fresh_token(self) -> Optional[str]:
        try:
            token = self.token_provider()
        except Exception as e:
            logging.error(f"Token provider failed: {e}")
            return None
        if not token:
            logging.error("Token provider returned no token")
        return token or None

    def _request(self, method: str, endpoint: str, payload: Any = None) -> Optional[Any]:
        self.last_status = None
        self.last_error = None

        token = self._fresh_token()
        if token is None:
            self.last_error = 'No token available'
            return None

        url = f"{self.base_url}{endpoint}"
        headers = {
            'Authorization': f'Bearer {token}',
            'Accept': 'application/json',
        }
        kwargs: Dict[str, Any] = {'headers': headers, 'timeout': self.timeout}
        if payload is not None:
            kwargs['json'] = payload

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            self.last_error = str(e)
            logging.error(f"{method} {endpoint} failed: {e}")
            return None

        self.last_status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = body.get('error') if isinstance(body, dict) else None
            self.last_error = message or f'HTTP {response.status_code}'
            logging.error(f"{method} {endpoint} returned {response.status_code}: {self.last_error}")
            return None

        if body is None:
            self.last_error = 'Malformed response'
            logging.error(f"{method} {endpoint} returned a body that is not JSON")
        return body

    def ensure_user(self) -> Optional[Dict[str, Any]]:
        body = self._request('POST', '/user')
        if not isinstance(body, dict) or not isinstance(body.get('user'), dict):
            if body is not None:
                self.last_error = 'Malformed response'
                logging.error("POST /user returned an unexpected body")
            return None
        return body['user']

    def fetch_snapshot(self) -> Optional[Dict[str, Any]]:
        body = self._request('GET', '/data')
        if body is None:
            return None
        if not _looks_like_snapshot(body):
            self.last_error = 'Malformed response'
            logging.error("GET /data returned an unexpected body")
            return None
        return body

    def push_snapshot(self, snapshot: Dict[str, Any]) -> bool:
        body = self._request('PUT', '/data', payload=snapshot)
        return isinstance(body, dict) and body.get('success') is True


def _is_list_of_dicts(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def _looks_like_snapshot(body) -> bool:
    if not isinstance(body, dict):
        return False
    if not (_is_list_of_dicts(body.get('folders', [])) and _is_list_of_dicts(body.get('decks', []))):
        return False
    settings = body.get('settings')
    if settings is not None and not isinstance(settings, dict):
        return False
    stats = body.get('stats')
    if stats is None:
        return True
    return isinstance(stats, dict) and isinstance(stats.get('studySessions', []), list)
