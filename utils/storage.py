import json
import logging
import os
import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any

from settings import TOKEN_FILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    """Access/refresh token pair

    Attributes:
        access_token: Short-lived bearer credential
        refresh_token: Longer-lived credential used only to obtain a new access token
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


class TokenStore:
    """Durable token storage backed by a JSON file with owner-only permissions

    Every write replaces the whole file in one step, so a reader never sees
    an access token without the refresh token written alongside it.
    """

    def __init__(self, token_file: Optional[str] = None):
        self.token_path = Path(token_file if token_file else TOKEN_FILE)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, Any]:
        if not self.token_path.exists():
            return {}

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load session from {self.token_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> bool:
        """Replace the session file atomically"""
        self._ensure_secure_directory()
        fd, tmp_name = tempfile.mkstemp(dir=self.token_path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            if platform.system() != "Windows":
                os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.token_path)
            return True
        except OSError as e:
            logger.error(f"Failed to save session to {self.token_path}: {e}")
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            return False

    def get(self) -> TokenPair:
        """Return the current token pair; missing values are None"""
        data = self._load()
        return TokenPair(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
        )

    def set(self, pair: TokenPair) -> bool:
        """Overwrite both tokens in a single write, keeping the display fields"""
        data = self._load()
        data["access_token"] = pair.access_token
        data["refresh_token"] = pair.refresh_token
        return self._write(data)

    def clear(self) -> bool:
        """Remove tokens and display fields"""
        try:
            self.token_path.unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.error(f"Failed to clear session at {self.token_path}: {e}")
            return False

    def set_user(self, user_id: Optional[str], user_name: Optional[str]) -> bool:
        """Store display-only user fields next to the tokens"""
        data = self._load()
        data["user_id"] = user_id
        data["user_name"] = user_name
        return self._write(data)

    def get_user(self) -> Dict[str, Optional[str]]:
        data = self._load()
        return {"user_id": data.get("user_id"), "user_name": data.get("user_name")}

    def is_authenticated(self) -> bool:
        """True when either token is present"""
        return not self.get().is_empty

    def get_status(self) -> Dict[str, Any]:
        """Get session status without exposing secrets"""
        pair = self.get()
        user = self.get_user()
        return {
            "has_access_token": bool(pair.access_token),
            "has_refresh_token": bool(pair.refresh_token),
            "user_id": user["user_id"],
            "user_name": user["user_name"],
        }

    @property
    def token_file(self) -> Path:
        """Get the token file path"""
        return self.token_path
