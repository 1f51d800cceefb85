"""HTTP client for the rental backend.

Every call returns the decoded JSON body or raises :class:`ApiError`. There
are no retries: the caller shows ``ApiError.message`` and the user decides.
"""

from typing import Any, Dict, List, Optional

import requests

from ..config.rules import ANONYMOUS_USER
from ..config.settings import API_BASE_URL, HTTP_TIMEOUT
from ..processing.clean import clean_record
from ..processing.validate import raise_for_errors, validate_feedback
from ..utils.logging import get_logger

logger = get_logger(__name__)

CONNECTION_ERROR_MESSAGE = "Cannot connect to server. Please make sure the server is running."
GENERIC_ERROR_MESSAGE = "Request failed. Please try again."
TIMEOUT_ERROR_MESSAGE = "The server took too long to respond. Please try again."

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_connection_error(self) -> bool:
        return self.status_code is None


def _body_message(response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get('message') or body.get('error')
    return None


class CatalogClient:
    """Thin wrapper over ``requests.Session`` for the backend's REST endpoints."""

    def __init__(self, base_url: str = API_BASE_URL, session=None, timeout: float = HTTP_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.ConnectionError as exc:
            logger.error("Cannot reach %s %s: %s", method, url, exc)
            raise ApiError(CONNECTION_ERROR_MESSAGE) from exc
        except requests.Timeout as exc:
            logger.error("Timeout on %s %s", method, url)
            raise ApiError(TIMEOUT_ERROR_MESSAGE) from exc
        except requests.RequestException as exc:
            logger.error("Request error on %s %s: %s", method, url, exc)
            raise ApiError(GENERIC_ERROR_MESSAGE) from exc

        if response.status_code >= 400:
            message = _body_message(response) or GENERIC_ERROR_MESSAGE
            logger.warning("HTTP %s for %s %s: %s", response.status_code, method, url, message)
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Non-JSON response from %s %s", method, url)
            raise ApiError(GENERIC_ERROR_MESSAGE, status_code=response.status_code) from exc

    # ── catalog ───────────────────────────────────────────────────────
    def fetch_appliances(self) -> List[dict]:
        """Full catalog with ids normalized; an empty backend is an empty list."""
        try:
            body = self._request('GET', '/getSpecificAppliance')
        except ApiError as exc:
            if exc.status_code == 404:
                return []
            raise
        if body is None:
            return []
        items = body.get('Appliance') if isinstance(body, dict) else None
        if not isinstance(items, list):
            logger.error("Unexpected catalog body: %.200r", body)
            raise ApiError(GENERIC_ERROR_MESSAGE, status_code=200)
        return [clean_record(item) for item in items if isinstance(item, dict)]

    def fetch_suggestions(self, keyword: Any) -> List[str]:
        keyword = str(keyword or '').strip()
        if not keyword:
            return []
        body = self._request('GET', '/api/suggestions', params={'keyword': keyword})
        if body is None:
            return []
        if not isinstance(body, list):
            logger.error("Unexpected suggestions body: %.200r", body)
            raise ApiError(GENERIC_ERROR_MESSAGE, status_code=200)
        return [str(name) for name in body]

    def insert_appliance(self, appliance: Dict[str, Any]) -> dict:
        return self._request('POST', '/inserAppliance', json=appliance)

    def update_appliance(self, appliance_id: str, changes: Dict[str, Any]) -> dict:
        return self._request('PUT', f'/updateAppliance/{appliance_id}', json=changes)

    def delete_appliance(self, appliance_id: str) -> dict:
        return self._request('DELETE', f'/appliances/{appliance_id}')

    # ── users ─────────────────────────────────────────────────────────
    def register(self, user: str, password: str, email: str, gender: str = '',
                 img_url: str = '', is_admin: bool = False) -> dict:
        payload = {
            'user': user,
            'password': password,
            'email': email,
            'gender': gender,
            'imgUrl': img_url,
            'isAdmin': is_admin,
        }
        return self._request('POST', '/addUser', json=payload)

    def login(self, user: str, password: str) -> dict:
        return self._request('POST', '/getUser', json={'user': user, 'password': password})

    def update_user(self, user: str, changes: Dict[str, Any]) -> dict:
        return self._request('PUT', f'/updateUser/{user}', json=changes)

    def get_profile(self, username: str) -> dict:
        return self._request('GET', f'/getUserProfile/{username}')

    def verify_user_update(self, username: str) -> dict:
        return self._request('GET', f'/verifyUserUpdate/{username}')

    def list_users(self) -> List[dict]:
        return self._request('GET', '/getUsers') or []

    def delete_user(self, user_id: str) -> dict:
        return self._request('DELETE', f'/deleteUser/{user_id}')

    # ── password reset ────────────────────────────────────────────────
    def request_otp(self, email: str) -> dict:
        return self._request('POST', '/request-otp', json={'email': email})

    def verify_otp(self, email: str, otp: str) -> dict:
        return self._request('POST', '/verify-otp', json={'email': email, 'otp': otp})

    def reset_password(self, email: str, otp: str, new_password: str) -> dict:
        payload = {'email': email, 'otp': otp, 'newPassword': new_password}
        return self._request('POST', '/reset-password', json=payload)

    # ── feedback ──────────────────────────────────────────────────────
    def submit_feedback(self, message: str, rating: int, user: str = '', email: str = '') -> dict:
        raise_for_errors(validate_feedback(message, rating))
        payload = {
            'user': user or ANONYMOUS_USER,
            'email': email or '',
            'message': message.strip(),
            'rating': int(rating),
        }
        return self._request('POST', '/addFeedback', json=payload)

    def list_feedback(self) -> List[dict]:
        return self._request('GET', '/getFeedback') or []
