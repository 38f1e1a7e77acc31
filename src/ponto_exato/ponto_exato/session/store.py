from __future__ import annotations

import logging
from typing import Optional

from flask import session

from ..core.constants import ACTIVE_VIEW_KEY, SESSION_KEY
from .model import SessionUser

logger = logging.getLogger(__name__)


class FlaskSessionStore:
    """Durable client-side session: one signed-cookie key holds the serialized user.

    Absence of the key means logged out. A remembered session lasts
    ``PERMANENT_SESSION_LIFETIME``. Must be used inside a request context.
    """

    def __init__(self, key: str = SESSION_KEY):
        self._key = key

    def load(self) -> Optional[SessionUser]:
        data = session.get(self._key)
        if not data:
            return None
        try:
            return SessionUser.from_dict(data)
        except (KeyError, ValueError, TypeError):
            logger.warning("discarding malformed session payload")
            session.pop(self._key, None)
            return None

    def save(self, user: SessionUser, *, remember: bool = False) -> None:
        session.permanent = bool(remember)
        session[self._key] = user.to_dict()

    def clear(self) -> None:
        session.pop(self._key, None)
        session.pop(ACTIVE_VIEW_KEY, None)

    def load_active_view(self) -> Optional[str]:
        return session.get(ACTIVE_VIEW_KEY)

    def save_active_view(self, view: str) -> None:
        session[ACTIVE_VIEW_KEY] = str(view)
