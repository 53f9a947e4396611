from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from shopgenie.constants import KEY_SESSION
from shopgenie.models import UserIdentity
from shopgenie.state.base import Store

logger = logging.getLogger(__name__)

# локальная "авторизация": настоящего логина нет
DEMO_USER = UserIdentity(
    id="u1",
    name="Alex Johnson",
    email="alex@example.com",
    avatar="https://i.pravatar.cc/150?u=alex",
)


class SessionStore(Store[Optional[UserIdentity]]):
    key = KEY_SESSION

    def default(self) -> Optional[UserIdentity]:
        return None

    def encode(self, snapshot: Optional[UserIdentity]) -> Optional[Dict[str, Any]]:
        # None -> строка удаляется из хранилища
        return snapshot.to_dict() if snapshot is not None else None

    def decode(self, raw: Any) -> Optional[UserIdentity]:
        return UserIdentity.from_dict(raw)

    @property
    def user(self) -> Optional[UserIdentity]:
        return self.snapshot

    @property
    def signed_in(self) -> bool:
        return self.snapshot is not None

    def sign_in(self, identity: Optional[UserIdentity] = None) -> UserIdentity:
        user = identity or DEMO_USER
        self._commit(user)
        logger.info("signed in as %s", user.id)
        return user

    def sign_out(self) -> None:
        if self.snapshot is not None:
            logger.info("signed out %s", self.snapshot.id)
        self._commit(None)

    def update_profile(self, **fields: Any) -> Optional[UserIdentity]:
        if self.snapshot is None:
            logger.warning("profile update ignored: nobody is signed in")
            return None
        return self._commit(self.snapshot.merged(**fields))
