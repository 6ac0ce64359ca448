"""
Message Store - append-only, ordered log of chat messages.

Provides methods for appending, listing, and subscribing to the shared
message log. Records are never modified once appended; subscribers see
the backlog followed by every new record in append order.
"""
import asyncio
import threading
from collections import deque
from datetime import datetime, timezone
from typing import AsyncIterator, Deque, Dict, List, Optional, Tuple
from uuid import uuid4

from app.config import get_settings
from app.core.logging import get_logger
from app.models.message import MessageRecord

logger = get_logger(__name__)


class MessageNotFoundError(LookupError):
    """No record with the requested id is in the log."""

    code = "message_not_found"

    def __init__(self, message_id: str):
        super().__init__(f"Message '{message_id}' not found")
        self.message_id = message_id


class MessageStore:
    """In-memory message log with live subscriptions."""

    def __init__(self, max_messages: Optional[int] = None):
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self.max_messages = max_messages
        self._records: Deque[MessageRecord] = deque()
        self._index: Dict[str, MessageRecord] = {}
        self._subscribers: List[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def append(self, record: MessageRecord) -> MessageRecord:
        """
        Append a record to the log.

        Args:
            record: Record to store; its id and timestamp are assigned here

        Returns:
            The stored record
        """
        closed = []

        # created_at order, list() order and delivery order must agree
        with self._lock:
            stored = record.model_copy(
                update={
                    "id": uuid4().hex,
                    "created_at": datetime.now(timezone.utc),
                }
            )
            self._records.append(stored)
            self._index[stored.id] = stored
            if self.max_messages is not None:
                while len(self._records) > self.max_messages:
                    evicted = self._records.popleft()
                    self._index.pop(evicted.id, None)

            for loop, queue in self._subscribers:
                try:
                    loop.call_soon_threadsafe(queue.put_nowait, stored)
                except RuntimeError:
                    # Subscriber's event loop is gone
                    closed.append((loop, queue))

        for loop, queue in closed:
            self._remove_subscriber(loop, queue)

        return stored

    def get(self, message_id: str) -> MessageRecord:
        """
        Retrieve a record by id.

        Raises:
            MessageNotFoundError: if no such record is held
        """
        with self._lock:
            record = self._index.get(message_id)
        if record is None:
            raise MessageNotFoundError(message_id)
        return record

    def list(self, newest_first: bool = True) -> List[MessageRecord]:
        """Snapshot of the log in timestamp order."""
        with self._lock:
            records = list(self._records)
        if newest_first:
            records.reverse()
        return records

    async def subscribe(self) -> AsyncIterator[MessageRecord]:
        """
        Stream the log: existing records oldest-first, then live appends.

        The iterator never ends on its own; close it to unsubscribe.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()

        with self._lock:
            backlog = list(self._records)
            self._subscribers.append((loop, queue))
        logger.info("Subscriber attached (%d active)", self.subscriber_count)

        try:
            for record in backlog:
                yield record
            while True:
                yield await queue.get()
        finally:
            self._remove_subscriber(loop, queue)
            logger.info("Subscriber detached (%d active)", self.subscriber_count)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _remove_subscriber(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue) -> None:
        with self._lock:
            try:
                self._subscribers.remove((loop, queue))
            except ValueError:
                pass


# Global singleton
message_store = MessageStore(max_messages=get_settings().max_messages)
