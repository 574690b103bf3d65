import json

from medibook.domain import Profile
from medibook.logging_config import get_logger
from medibook.models.roles import RoleEnum
from medibook.context.observable import Observable

logger = get_logger(__name__)

AUTH_STORAGE_KEY = "medibook.auth"


class SessionContext(Observable):
    """
    Current identity, persisted JSON-encoded under a fixed key of a
    client-side storage mapping (the Flask session cookie in the web app).
    """

    def __init__(self, storage, key=AUTH_STORAGE_KEY):
        super().__init__()
        self._storage = storage
        self._key = key
        self._profile = None
        self.is_loading = True

    def resolve(self):
        raw = self._storage.get(self._key)
        self._profile = None
        if raw:
            try:
                self._profile = Profile(**json.loads(raw))
            except (TypeError, ValueError) as e:
                logger.warning("session_snapshot_unreadable", error=str(e))
                self._storage.pop(self._key, None)
        self.is_loading = False
        self._notify()
        return self

    def sign_in(self, profile):
        self._profile = profile
        self._storage[self._key] = json.dumps(profile.__dict__)
        self.is_loading = False
        logger.info("signed_in", user_id=profile.id, role=self.role.value)
        self._notify()

    def sign_out(self):
        if self._profile is not None:
            logger.info("signed_out", user_id=self._profile.id)
        self._profile = None
        self._storage.pop(self._key, None)
        self._notify()

    @property
    def profile(self):
        return self._profile

    @property
    def identity(self):
        return self._profile.id if self._profile else None

    @property
    def is_authenticated(self):
        return self._profile is not None

    @property
    def role(self):
        if self._profile is None:
            return RoleEnum.NONE
        return RoleEnum.parse(self._profile.role)

    def is_admin(self):
        return self.role == RoleEnum.ADMIN

    def is_patient(self):
        return self.role == RoleEnum.PATIENT
