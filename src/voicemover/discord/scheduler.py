"""One-shot deferred execution of scheduled moves."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
import asyncio
import logging


@dataclass(frozen=True)
class ScheduledMove:
    kind: str
    source: Any
    destination: Any
    delay_ms: int
    reply_channel: Any


MoveCallback = Callable[[ScheduledMove], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[None]]


class MoveScheduler:
    """Runs each scheduled move once after its delay.

    Moves are independent: nothing is deduplicated or serialized, and a
    scheduled move cannot be revoked. Pending tasks are only cancelled when
    the runtime shuts down.
    """

    def __init__(
        self,
        *,
        sleep: Optional[SleepFn] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._sleep = sleep or asyncio.sleep
        self._logger = logger or logging.getLogger("voicemover.discord.scheduler")
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def schedule(self, move: ScheduledMove, callback: MoveCallback) -> asyncio.Task:
        task = asyncio.create_task(self._run_later(move, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._logger.info(
            "move_scheduled kind=%s source=%s destination=%s delay_ms=%s",
            move.kind,
            getattr(move.source, "id", None),
            getattr(move.destination, "id", None),
            move.delay_ms,
        )
        return task

    async def start(self) -> None:
        return None

    async def stop(self) -> None:
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            self._logger.info("Cancelled %s pending move(s) on shutdown.", len(pending))

    async def _run_later(self, move: ScheduledMove, callback: MoveCallback) -> None:
        try:
            await self._sleep(move.delay_ms / 1000)
            await callback(move)
        except Exception:
            self._logger.exception("Scheduled %s move failed", move.kind)
