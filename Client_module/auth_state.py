"""
Client-side authentication state.

AuthContext is an explicit object created by the caller: init() reads the
persisted token on launch, login()/logout() are the only mutations.
"""
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore:
    """Persists the admin token in a single file readable only by the user."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def write(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class AuthContext:
    """Whether an admin is logged in, backed by the persisted token."""

    def __init__(self, store: TokenStore):
        self.store = store
        self._token: Optional[str] = None
        self.is_loading = True

    def init(self) -> "AuthContext":
        """Read the persisted token; called once on launch."""
        try:
            self._token = self.store.read()
        except OSError as e:
            logger.error(f"Error checking auth: {e}")
            self._token = None
        finally:
            self.is_loading = False
        return self

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def login(self, token: str) -> None:
        self.store.write(token)
        self._token = token

    def logout(self) -> None:
        self.store.clear()
        self._token = None
