import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class Session:
    """
    The signed-in user's credential, persisted across runs.

    Stored as a flat JSON object of string values under the same keys a
    browser front end keeps in local storage: ``authToken`` and ``user``.
    """

    TOKEN_KEY = 'authToken'
    USER_KEY = 'user'

    def __init__(self, path):
        self.path = Path(path)
        self._data = {}

    def load(self):
        if not self.path.exists():
            self._data = {}
            return self
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError):
            data = None
        if not isinstance(data, dict):
            logger.warning("session_unreadable", path=str(self.path))
            self.clear()
            return self
        self._data = data
        return self

    def save(self, auth):
        self._data = {
            self.TOKEN_KEY: auth['token'],
            self.USER_KEY: json.dumps(auth['user']),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding='utf-8')
        self.path.chmod(0o600)

    def clear(self):
        self._data = {}
        self.path.unlink(missing_ok=True)

    @property
    def token(self):
        return self._data.get(self.TOKEN_KEY)

    @property
    def user(self):
        raw = self._data.get(self.USER_KEY)
        return json.loads(raw) if raw else None

    @property
    def is_authenticated(self):
        return bool(self.token)
