"""Who the statistics belong to.

The aggregators never read identity themselves; callers resolve the user here
and pass the id along explicitly.
"""

import logging
from typing import Callable, List, Optional, Protocol

from models import User

logger = logging.getLogger(__name__)

UserCallback = Callable[[Optional[User]], None]


class IdentityProvider(Protocol):
    """Interface for the authentication service.

    Any class with matching method signatures satisfies this protocol.
    """

    def current_user(self) -> Optional[User]:
        """The signed-in user, or None."""
        ...

    def subscribe(self, callback: UserCallback) -> Callable[[], None]:
        """Call `callback` with the new user (or None) on every login/logout.

        Returns a function that cancels the subscription.
        """
        ...


class SessionIdentityProvider:
    """In-process identity holder for scripts and tests."""

    def __init__(self, user: Optional[User] = None):
        self._user = user
        self._subscribers: List[UserCallback] = []

    def current_user(self) -> Optional[User]:
        return self._user

    def subscribe(self, callback: UserCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def sign_in(self, user: User) -> None:
        self._user = user
        self._notify()

    def sign_out(self) -> None:
        self._user = None
        self._notify()

    def _notify(self) -> None:
        logger.debug("Identity changed: %s", self._user.id if self._user else None)
        for callback in list(self._subscribers):
            callback(self._user)
