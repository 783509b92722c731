"""Identity provider that hands out stable user ids to browsers."""

from __future__ import annotations

from threading import Lock
from uuid import uuid4

from quiz_rooms.core.errors import LoginRequiredError
from quiz_rooms.core.models import Identity


class IdentityProvider:
    """Issues and resolves user identities.

    A uid is opaque and stable for as long as the server runs. Only uids
    handed out by ``sign_in`` resolve; anything else needs a fresh login.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._identities: dict[str, Identity] = {}

    def sign_in(self, display_name: str | None = None) -> Identity:
        cleaned = display_name.strip() if display_name else None
        identity = Identity(uid=uuid4().hex, display_name=cleaned or None)
        with self._lock:
            self._identities[identity.uid] = identity
        return identity

    def require(self, uid: str | None) -> Identity:
        """Return the identity for ``uid`` or raise ``LoginRequiredError``."""
        if not uid or not uid.strip():
            raise LoginRequiredError()
        uid = uid.strip()
        with self._lock:
            identity = self._identities.get(uid)
        if identity is None:
            raise LoginRequiredError()
        return identity

    def sign_out(self, uid: str) -> None:
        with self._lock:
            self._identities.pop(uid, None)
