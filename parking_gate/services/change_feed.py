# parking_gate/services/change_feed.py
"""
In-process change notification for the shared state store.

Writers publish a DocumentChange after committing. Every subscriber of the
change's collection runs as its own asyncio task with a fresh DB session, so a
slow reaction (the barrier closer sleeps) never holds up the request that
caused it.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from parking_gate.utils.logger import get_logger

logger = get_logger(__name__)

TICKETS = "parking_tickets"
BARRIERS = "barriers"


@dataclass
class DocumentChange:
    collection: str
    document_id: str
    before: Optional[dict]   # None on create
    after: Optional[dict]    # None on delete


Handler = Callable[[DocumentChange, object], Awaitable[None]]


class ChangeFeed:
    def __init__(self, session_factory=None):
        self._session_factory = session_factory
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def bind(self, session_factory):
        """Use a different session factory for reaction sessions."""
        self._session_factory = session_factory

    def subscribe(self, collection: str, handler: Handler):
        if handler not in self._subscribers[collection]:
            self._subscribers[collection].append(handler)

    def clear(self):
        self._subscribers.clear()

    def publish(self, change: DocumentChange) -> list[asyncio.Task]:
        """Schedule every subscriber of change.collection. Must run inside the event loop."""
        tasks = []
        for handler in list(self._subscribers.get(change.collection, ())):
            task = asyncio.create_task(
                self._run(handler, change),
                name=f"{change.collection}:{change.document_id}:{handler.__name__}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)
        return tasks

    async def drain(self):
        """Wait until every scheduled reaction (and any it publishes) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, handler: Handler, change: DocumentChange):
        db = self._new_session()
        try:
            await handler(change, db)
        except Exception as e:
            logger.error(
                f"Reaction {handler.__name__} failed for {change.collection}/{change.document_id}: {e}",
                exc_info=True,
            )
        finally:
            db.close()

    def _new_session(self):
        if self._session_factory is None:
            from parking_gate.database import SessionLocal
            self._session_factory = SessionLocal
        return self._session_factory()


change_feed = ChangeFeed()
