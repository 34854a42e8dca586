# events.py

"""Simple in-memory Pub/Sub dispatcher."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Dict, List

ORDER_PLACED = "order.placed"


class EventBus:
    """Dispatch events to subscribers via :class:`asyncio.Queue` instances."""

    def __init__(self) -> None:
        self._subs: Dict[str, List[asyncio.Queue]] = defaultdict(list)

    def subscribe(self, name: str) -> asyncio.Queue:
        """Register interest in ``name`` events and return a queue."""

        queue: asyncio.Queue = asyncio.Queue()
        self._subs[name].append(queue)
        return queue

    def unsubscribe(self, name: str, queue: asyncio.Queue) -> None:
        if queue in self._subs.get(name, []):
            self._subs[name].remove(queue)

    async def publish(self, name: str, payload: Dict[str, Any]) -> None:
        """Broadcast ``payload`` to all subscribers of ``name``."""

        for queue in self._subs.get(name, []):
            await queue.put(payload)


event_bus = EventBus()
