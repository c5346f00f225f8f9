import logging
from typing import List, Optional

from squad.client.api import ApiClient, ApiError
from squad.web import grid

logger = logging.getLogger(__name__)


class AuthStore:
    """Current user and credential, kept in step with the token storage."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.user: Optional[dict] = None
        self.token: Optional[str] = None
        self.is_loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _set_session(self, response: dict) -> None:
        self.api.token_storage.set(response["token"])
        self.user = response["user"]
        self.token = response["token"]

    def login(self, email: str, password: str) -> None:
        self._set_session(self.api.login(email, password))

    def register(self, email: str, password: str, name: str) -> None:
        self._set_session(self.api.register(email, password, name))

    def logout(self) -> None:
        self.api.token_storage.clear()
        self.user = None
        self.token = None

    def load_user(self) -> None:
        """Restores the session from a persisted token, dropping it if the server rejects it."""
        token = self.api.token_storage.get()
        if not token:
            self.is_loading = False
            return
        try:
            response = self.api.get_me()
        except ApiError as exc:
            logger.info("Stored session rejected: %s", exc.message)
            self.api.token_storage.clear()
            self.user = None
            self.token = None
        else:
            self.user = response["user"]
            self.token = token
        finally:
            self.is_loading = False


class AppStore:
    """Events and users, refreshed on demand after each mutation."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.events: List[dict] = []
        self.users: List[dict] = []
        self.is_loading = False

    def fetch_events(self) -> None:
        self.is_loading = True
        try:
            self.events = self.api.get_all_events()["events"]
        finally:
            self.is_loading = False

    def fetch_users(self) -> None:
        self.users = self.api.get_all_users()["users"]

    def active_users(self) -> List[dict]:
        return [user for user in self.users if user.get("is_active", True)]

    def grid(self, viewer_id: Optional[str]) -> List[grid.GridRow]:
        return grid.build_grid(self.events, self.users, viewer_id)
