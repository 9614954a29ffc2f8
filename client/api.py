from datetime import date
from decimal import Decimal

import requests
import structlog

from errors import GENERIC_ERROR, NetworkUnreachable, Unauthorized, error_for_status

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = 'http://localhost:3000/api'


def _jsonable(fields):
    out = {}
    for key, value in fields.items():
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, date):
            value = value.isoformat()
        out[key] = value
    return out


def _safe_json(response):
    try:
        return response.json()
    except ValueError:
        return None


class ApiClient:
    """HTTP client for the finance API, authenticated from a ``Session``."""

    def __init__(self, session, base_url=DEFAULT_BASE_URL, http=None, timeout=10):
        self.session = session
        self.base_url = base_url.rstrip('/')
        self.http = http or requests.Session()
        self.timeout = timeout

    def request(self, method, endpoint, json=None, raw=False):
        headers = {'Content-Type': 'application/json'}
        if self.session.token:
            headers['Authorization'] = f"Bearer {self.session.token}"

        try:
            response = self.http.request(
                method, self.base_url + endpoint,
                json=json, headers=headers, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("api_unreachable", method=method, endpoint=endpoint, error=str(exc))
            raise NetworkUnreachable() from exc

        if response.status_code == 401:
            self.session.clear()
            body = _safe_json(response) or {}
            raise Unauthorized(body.get('message'))

        if response.status_code == 204:
            return None

        if not response.ok:
            body = _safe_json(response) or {}
            logger.info("api_error", method=method, endpoint=endpoint, status=response.status_code)
            raise error_for_status(response.status_code, body.get('message') or GENERIC_ERROR)

        return response.text if raw else _safe_json(response)

    def register(self, name, email, password):
        return self.request('POST', '/auth/register', json={'name': name, 'email': email, 'password': password})

    def login(self, email, password):
        return self.request('POST', '/auth/login', json={'email': email, 'password': password})

    def list_transactions(self):
        return self.request('GET', '/transactions')

    def create_transaction(self, fields):
        return self.request('POST', '/transactions', json=_jsonable(fields))

    def update_transaction(self, id, fields):
        return self.request('PUT', f'/transactions/{id}', json=_jsonable(fields))

    def delete_transaction(self, id):
        return self.request('DELETE', f'/transactions/{id}')

    def export_transactions(self):
        return self.request('GET', '/transactions/export', raw=True)

    def list_goals(self):
        return self.request('GET', '/goals')

    def create_goal(self, description, amount):
        return self.request('POST', '/goals', json=_jsonable({'description': description, 'amount': amount}))

    def delete_goal(self, id):
        return self.request('DELETE', f'/goals/{id}')

    def dashboard(self):
        return self.request('GET', '/dashboard')
