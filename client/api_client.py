import logging
import requests

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class AdminApiClient:
    """
    Thin HTTP client for the admin dashboard.

    Args:
        base_url: Root of the API, e.g. ``http://localhost:5000/api``.
        session: ``AdminSession`` supplying the bearer token; cleared on a 401.
        timeout: Seconds per request.
        http: Object with a ``request`` method (a ``requests.Session`` by default).
    """

    def __init__(self, base_url, session=None, timeout=10, http=None):
        self.base_url = base_url.rstrip('/')
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    def _request(self, method, path, **kwargs):
        headers = dict(kwargs.pop('headers', {}) or {})
        if self.session is not None:
            headers.update(self.session.auth_header())
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.http.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request {method} {url} failed: {e}")
            raise ApiClientError(0, "Service unavailable")

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get('message') if isinstance(body, dict) else response.reason
            if response.status_code == 401 and self.session is not None and self.session.is_authenticated:
                logger.info("Credential rejected, clearing admin session")
                self.session.logout()
            raise ApiClientError(response.status_code, message or 'Request failed')
        return body

    def login(self, username, password):
        return self._request('POST', '/auth/login', json={'username': username, 'password': password})

    def me(self):
        return self._request('GET', '/auth/me')

    def get(self, path, **params):
        return self._request('GET', path, params=params or None)

    def post(self, path, payload=None):
        return self._request('POST', path, json=payload)

    def put(self, path, payload=None):
        return self._request('PUT', path, json=payload)

    def delete(self, path):
        return self._request('DELETE', path)
