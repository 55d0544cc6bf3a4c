"""
File backed key-value session store.

Keeps the role of the last logged-in user between the login call and a
later role lookup. Failures are logged and never break the request.
"""
import json
import logging
import os
import threading
from typing import Any, Optional

from flask import Flask, current_app

logger = logging.getLogger(__name__)


class SessionStore:
    """JSON file with a flat {key: value} mapping."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as fh:
            return json.load(fh)

    def save(self, key: str, value: Any) -> bool:
        """Store value under key. Returns False when the file cannot be written."""
        with self._lock:
            try:
                data = self._read()
                data[key] = value
                tmp_path = f"{self.path}.tmp"
                with open(tmp_path, 'w', encoding='utf-8') as fh:
                    json.dump(data, fh, indent=2)
                os.replace(tmp_path, self.path)
                logger.debug(f"[SESSION] Saved '{key}'")
                return True
            except (OSError, ValueError) as e:
                logger.error(f"[SESSION] Error saving session data: {e}")
                return False

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""
        with self._lock:
            try:
                return self._read().get(key)
            except (OSError, ValueError) as e:
                logger.error(f"[SESSION] Error retrieving session data: {e}")
                return None


def init_session_store(app: Flask) -> None:
    """Attach a SessionStore for SESSION_FILE to the app."""
    app.extensions['session_store'] = SessionStore(app.config['SESSION_FILE'])


def get_session_store() -> SessionStore:
    return current_app.extensions['session_store']
