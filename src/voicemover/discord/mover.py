"""Best-effort batch relocation of voice channel members."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence
import asyncio
import logging


DEFAULT_AUDIT_REASON = "Scheduled move command"

SleepFn = Callable[[float], Awaitable[None]]


class MemberLike(Protocol):
    async def move_to(self, channel: Any, *, reason: Optional[str] = None) -> None:
        ...


class VoiceChannelLike(Protocol):
    id: int
    name: str
    members: Sequence[MemberLike]


@dataclass(frozen=True)
class MoveReport:
    attempted: int
    moved: int
    failed: int


class BatchMover:
    """Moves everyone in one voice channel to another, one member at a time."""

    def __init__(
        self,
        *,
        audit_reason: str = DEFAULT_AUDIT_REASON,
        pace_every: int = 5,
        pace_seconds: float = 0.25,
        sleep: Optional[SleepFn] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if pace_every <= 0:
            raise ValueError("pace_every must be a positive integer.")
        if pace_seconds < 0:
            raise ValueError("pace_seconds cannot be negative.")

        self._audit_reason = audit_reason
        self._pace_every = pace_every
        self._pace_seconds = pace_seconds
        self._sleep = sleep or asyncio.sleep
        self._logger = logger or logging.getLogger("voicemover.discord.mover")

    async def move_members(self, source: VoiceChannelLike, destination: VoiceChannelLike) -> MoveReport:
        # Membership is read now, not when the move was scheduled.
        members = list(source.members)
        moved = 0
        failed = 0

        for index, member in enumerate(members):
            try:
                await member.move_to(destination, reason=self._audit_reason)
                moved += 1
            except Exception as exc:
                failed += 1
                self._logger.error("Failed to move %s: %s", member, exc)

            if index % self._pace_every == 0:
                await self._sleep(self._pace_seconds)

        self._logger.info(
            "batch_move_finished source=%s destination=%s attempted=%s moved=%s failed=%s",
            source.id,
            destination.id,
            len(members),
            moved,
            failed,
        )
        return MoveReport(attempted=len(members), moved=moved, failed=failed)
