"""Statistics view state: recompute whenever the user or the selection changes."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Union

from auth.identity import IdentityProvider
from database.selection import SelectionPolicy
from models import CompositeStatistics, RoundSummary, User

from .aggregate import aggregate

logger = logging.getLogger(__name__)


class RoundStore(Protocol):
    """The slice of the round store the dashboard needs."""

    async def get_rounds_for_user(
        self, user_id: str, selection: Union[SelectionPolicy, str] = SelectionPolicy.ALL
    ) -> List[RoundSummary]:
        ...

    async def delete_round(self, round_id: str, user_id: Optional[str] = None) -> bool:
        ...


class StatsDashboard:
    """Holds the rounds and composite statistics for one (user, selection) pair.

    Every refresh is a full re-query and re-aggregation; nothing is updated
    incrementally. Store errors propagate to the caller untouched.
    """

    def __init__(
        self,
        store: RoundStore,
        identity: IdentityProvider,
        selection: Union[SelectionPolicy, str] = SelectionPolicy.ALL,
    ):
        self._store = store
        self._selection = SelectionPolicy.parse(selection)
        user = identity.current_user()
        self._user_id: Optional[str] = user.id if user else None
        self.rounds: List[RoundSummary] = []
        self.statistics: Optional[CompositeStatistics] = None
        self.pending_refresh: Optional[asyncio.Task] = None
        self.last_error: Optional[Exception] = None
        self._unsubscribe = identity.subscribe(self._on_identity_change)

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def selection(self) -> SelectionPolicy:
        return self._selection

    def close(self) -> None:
        self._unsubscribe()

    def _clear(self) -> None:
        self.rounds = []
        self.statistics = None

    def _on_identity_change(self, user: Optional[User]) -> None:
        new_id = user.id if user else None
        if new_id == self._user_id:
            return
        self._user_id = new_id
        self._clear()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop and new_id is not None:
            task = loop.create_task(self.refresh())
            task.add_done_callback(self._background_refresh_done)
            self.pending_refresh = task

    def _background_refresh_done(self, task: asyncio.Task) -> None:
        """Keep and log the failure of an identity-driven refresh."""
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.last_error = error
            logger.error("Background statistics refresh failed: %s", error, exc_info=error)

    async def refresh(self) -> Optional[CompositeStatistics]:
        """Re-fetch the selected rounds and recompute the composite."""
        if self._user_id is None:
            self._clear()
            return None

        user_id, selection = self._user_id, self._selection
        rounds = await self._store.get_rounds_for_user(user_id, selection)
        if (user_id, selection) != (self._user_id, self._selection):
            # User or selection changed mid-query; the newer refresh owns the result.
            return self.statistics
        self.last_error = None
        self.rounds = rounds
        self.statistics = aggregate(rounds, user_id=user_id)
        logger.debug(
            "Recomputed statistics for %s over %d round(s) (%s)",
            user_id, len(rounds), selection.value,
        )
        return self.statistics

    async def set_selection(
        self, selection: Union[SelectionPolicy, str]
    ) -> Optional[CompositeStatistics]:
        policy = SelectionPolicy.parse(selection)
        if policy is self._selection and self.statistics is not None:
            return self.statistics
        self._selection = policy
        return await self.refresh()

    async def delete_round(self, round_id: str) -> bool:
        """Delete a round, then re-fetch and re-aggregate."""
        if self._user_id is None:
            return False
        deleted = await self._store.delete_round(round_id, user_id=self._user_id)
        await self.refresh()
        return deleted
