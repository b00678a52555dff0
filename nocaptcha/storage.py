"""Session storage for the verification marker"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Dict, Optional, Protocol

from settings import SESSION_FILE, SESSION_KEY


logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Key-value slot holding the verification session identifier"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> bool: ...

    def remove(self, key: str) -> bool: ...


class MemorySessionStore:
    """Session store that lives as long as the host process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> bool:
        self._items[key] = value
        return True

    def remove(self, key: str) -> bool:
        self._items.pop(key, None)
        return True


class FileSessionStore:
    """Session store persisted to a JSON file with restrictive permissions"""

    def __init__(self, session_file: Optional[str] = None):
        """Initialize file storage

        Args:
            session_file: Path to session file (default: SESSION_FILE setting)
        """
        self.session_path = Path(session_file if session_file else SESSION_FILE).expanduser()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.session_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, str]:
        if not self.session_path.exists():
            return {}

        try:
            data = json.loads(self.session_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load session file {self.session_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed session file {self.session_path}")
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> bool:
        try:
            self._ensure_secure_directory()
            self.session_path.write_text(json.dumps(data, indent=2))
            if platform.system() != "Windows":
                os.chmod(self.session_path, 0o600)
        except OSError as e:
            logger.error(f"Failed to save session file {self.session_path}: {e}")
            return False

        logger.debug(f"Saved session to {self.session_path}")
        return True

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> bool:
        data = self._load()
        data[key] = value
        return self._save(data)

    def remove(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return True
        del data[key]
        return self._save(data)

    @property
    def session_file(self) -> Path:
        """Get the session file path"""
        return self.session_path


def get_session_id(store: SessionStore) -> Optional[str]:
    """Read the stored verification session identifier, if any"""
    return store.get(SESSION_KEY) or None


def save_session_id(store: SessionStore, session_id: str) -> bool:
    """Overwrite the stored verification session identifier"""
    saved = store.set(SESSION_KEY, session_id)
    if not saved:
        logger.error("Failed to persist verification session")
    return saved


def clear_session_id(store: SessionStore) -> bool:
    """Forget the stored verification session"""
    return store.remove(SESSION_KEY)
