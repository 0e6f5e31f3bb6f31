"""
AfiaTrack API Client

Thin wrapper around the REST routes. Every transport failure and every
non-2xx response is raised as ApiError.
"""

import logging
import requests

from config import settings

logger = logging.getLogger(__name__)

# Timeout for API calls in seconds
API_TIMEOUT = 10


class ApiError(Exception):
    """A request failed or the server answered with an error status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiClient:
    """
    Client for the AfiaTrack API.

    Args:
        base_url (str, optional): Server root (default: AFIA_API_URL)
        session (requests.Session, optional): Transport used for every request
        timeout (float, optional): Per-request timeout in seconds
    """

    def __init__(self, base_url=None, session=None, timeout=API_TIMEOUT):
        self.base_url = (base_url or settings.API_URL).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, params=None, json=None, raw=False):
        try:
            resp = self.session.request(
                method, f"{self.base_url}{path}", params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"Could not reach the server: {e}") from e

        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = body.get('error') if isinstance(body, dict) else None
            logger.warning(f"{method} {path} returned {resp.status_code}: {message}")
            raise ApiError(message or f"{method} {path} returned {resp.status_code}", resp.status_code)

        if raw:
            return resp.text
        return resp.json()

    # Auth
    def login(self, identifier, password):
        return self._request('POST', '/api/auth/login', json={'emailOrUsername': identifier, 'password': password})

    def signup(self, username, email, password):
        return self._request('POST', '/api/auth/signup', json={'username': username, 'email': email, 'password': password})

    def forgot_password(self, email=None, phone=None, method=None):
        payload = {'email': email, 'phone': phone, 'method': method}
        return self._request('POST', '/api/auth/forgot-password', json={k: v for k, v in payload.items() if v})

    def reset_password(self, user_id, code, new_password):
        return self._request('POST', '/api/auth/reset-password',
                             json={'userId': user_id, 'code': code, 'newPassword': new_password})

    def change_password(self, user_id, current_password, new_password):
        return self._request('POST', '/api/auth/change-password',
                             json={'userId': user_id, 'currentPassword': current_password, 'newPassword': new_password})

    def verify(self, user_id):
        return self._request('GET', '/api/auth/verify', params={'userId': user_id})['exists']

    # Profile, settings and health data
    def get_profile(self, user_id):
        return self._request('GET', '/api/profile', params={'userId': user_id})

    def update_profile(self, profile):
        return self._request('PUT', '/api/profile', json=profile)

    def get_profile_completion(self, user_id):
        return self._request('GET', '/api/profile/completion', params={'userId': user_id})['completion']

    def get_settings(self, user_id):
        return self._request('GET', '/api/settings', params={'userId': user_id})

    def update_settings(self, user_id, user_settings):
        return self._request('PUT', '/api/settings', params={'userId': user_id}, json=user_settings)

    def get_health_data(self, user_id):
        return self._request('GET', '/api/health-data', params={'userId': user_id})

    def update_health_data(self, user_id, health_data):
        return self._request('PUT', '/api/health-data', params={'userId': user_id}, json=health_data)

    def add_health_reading(self, user_id, metric, reading):
        return self._request('POST', '/api/health-data/readings',
                             json={'userId': user_id, 'metric': metric, 'reading': reading})

    # Appointments, medications and documents
    def list_records(self, collection, user_id):
        return self._request('GET', f'/api/{collection}', params={'userId': user_id})

    def batch_update(self, collection, user_id, items):
        return self._request('POST', f'/api/{collection}/batch', json={'userId': user_id, 'items': items})

    # Misc
    def search_tips(self, query=''):
        return self._request('GET', '/api/health-tips/search', params={'q': query})

    def personalized_tips(self, user_id):
        return self._request('GET', '/api/health-tips/personalized', params={'userId': user_id})

    def export_csv(self, user_id):
        return self._request('GET', '/api/export', params={'userId': user_id}, raw=True)

    def status(self):
        return self._request('GET', '/api/status')
