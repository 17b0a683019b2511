"""
Admin dashboard session.

The session is an explicit object handed to whatever needs the signed-in user; its
persisted mirror lives behind a ``SessionStorage`` adapter. Lifecycle: ``restore()``
on start-up, ``login()`` to sign in, ``logout()`` to clear both memory and storage.
"""
import json
import logging
import os
from abc import ABC, abstractmethod

from utils.permissions import has_permission

logger = logging.getLogger(__name__)


class SessionStorage(ABC):
    @abstractmethod
    def load(self):
        """Return the stored state dict, or None."""

    @abstractmethod
    def save(self, state):
        pass

    @abstractmethod
    def clear(self):
        pass


class MemorySessionStorage(SessionStorage):
    def __init__(self):
        self._state = None

    def load(self):
        return dict(self._state) if self._state else None

    def save(self, state):
        self._state = dict(state)

    def clear(self):
        self._state = None


class JsonFileSessionStorage(SessionStorage):
    def __init__(self, path):
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        return state if isinstance(state, dict) else None

    def save(self, state):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(state, f)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)


class AdminSession:
    def __init__(self, storage):
        self.storage = storage
        self.token = None
        self.user = None

    @property
    def is_authenticated(self):
        return bool(self.token and self.user)

    @property
    def current_user(self):
        return self.user

    def restore(self):
        state = self.storage.load()
        if state and state.get('token') and isinstance(state.get('user'), dict):
            self.token = state['token']
            self.user = state['user']
        return self.is_authenticated

    def start(self, token, user):
        self.token = token
        self.user = user
        self.storage.save({'token': token, 'user': user})

    def login(self, api, username, password):
        body = api.login(username, password)
        self.start(body['token'], body['user'])
        logger.info(f"Signed in as {self.user.get('username')}")
        return self.user

    def refresh_user(self, user):
        """Replace the cached user (e.g. after the server changed its role)."""
        if self.token:
            self.start(self.token, user)

    def logout(self):
        self.token = None
        self.user = None
        self.storage.clear()

    def has_permission(self, permission):
        if not self.user:
            return False
        return has_permission(self.user.get('permissions') or [], permission)

    def auth_header(self):
        return {'Authorization': f'Bearer {self.token}'} if self.token else {}
